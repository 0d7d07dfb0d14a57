"""
Tests for the Settings Loader and the default config file
"""

import os
import tempfile

from settings_loader import DEFAULT_SETTINGS, SettingsLoader, find_config_file

HERE = os.path.dirname(os.path.abspath(__file__))


def write_config(folder, body, name="custom_config.py"):
    path = os.path.join(folder, name)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(body)
    return path


def test_defaults():
    loader = SettingsLoader()
    assert loader.get_all() == DEFAULT_SETTINGS
    assert loader.get('missing', 'fallback') == 'fallback'
    assert loader.source is None


def test_shipped_config_matches_defaults():
    """replacer_config.py ships the built-in defaults"""
    config_path = os.path.join(HERE, "replacer_config.py")
    loader = SettingsLoader().load_from_config_file(config_path)
    assert loader.source == config_path
    assert loader.get_all() == DEFAULT_SETTINGS


def test_find_config_file_beside_module():
    found = find_config_file()
    assert found is not None
    assert os.path.basename(found) == "replacer_config.py"
    assert find_config_file("no_such_config_file.py") is None


def test_load_partial_dict():
    loader = SettingsLoader().load_from_dict({'max_restarts': 1, 'extensions': '.DOCX'})
    assert loader.get('max_restarts') == 1
    assert loader.get('extensions') == ['.docx']
    # Untouched keys keep their defaults
    assert loader.get('busy_retry_count') == DEFAULT_SETTINGS['busy_retry_count']


def test_missing_extensions_fall_back_to_defaults():
    loader = SettingsLoader().load_from_dict({'extensions': None})
    assert loader.get('extensions') == [".docx", ".doc", ".docm"]

    with tempfile.TemporaryDirectory() as folder:
        path = write_config(folder, "SETTINGS = {'extensions': None, 'engine': 'docx'}\n", "none_config.py")
        loader = SettingsLoader().load_from_config_file(path)
        assert loader.get('extensions') == [".docx", ".doc", ".docm"]
        assert loader.get('engine') == 'docx'

    try:
        SettingsLoader().load_from_dict({'extensions': 5})
    except ValueError as e:
        assert "'extensions'" in str(e)
    else:
        raise AssertionError("ValueError not raised")


def test_load_config_variants():
    with tempfile.TemporaryDirectory() as folder:
        path = write_config(folder, "def get_settings():\n    return {'engine': 'docx'}\n")
        assert SettingsLoader().load_from_config_file(path).get('engine') == 'docx'

        path = write_config(folder, "settings = {'visible': True}\n", "lower_config.py")
        assert SettingsLoader().load_from_config_file(path).get('visible') is True

        path = write_config(folder, "OTHER = 1\n", "empty_config.py")
        try:
            SettingsLoader().load_from_config_file(path)
        except ValueError as e:
            assert "get_settings()" in str(e)
        else:
            raise AssertionError("ValueError not raised")


def test_load_errors():
    loader = SettingsLoader()
    try:
        loader.load_from_config_file(os.path.join(tempfile.gettempdir(), "missing_replacer_config.py"))
    except FileNotFoundError:
        pass
    else:
        raise AssertionError("FileNotFoundError not raised")

    try:
        loader.load_from_dict(["not", "a", "dict"])
    except ValueError:
        pass
    else:
        raise AssertionError("ValueError not raised")


def test_override_ignores_none():
    loader = SettingsLoader()
    assert loader.override(engine='word', visible=None) is loader
    assert loader.get('engine') == 'word'
    assert loader.get('visible') is False


def test_get_all_is_a_copy():
    loader = SettingsLoader()
    data = loader.get_all()
    data['extensions'].append('.rtf')
    data['engine'] = 'word'
    assert loader.get('extensions') == [".docx", ".doc", ".docm"]
    assert loader.get('engine') == 'auto'


def main():
    """Run all tests"""
    print("\n" + "=" * 80)
    print("SETTINGS LOADER TEST SUITE")
    print("=" * 80)

    tests = [value for name, value in sorted(globals().items()) if name.startswith("test_")]
    for test in tests:
        test()
        print(f"  ok  {test.__name__}")

    print("\n" + "=" * 80)
    print("ALL TESTS COMPLETED")
    print("=" * 80)


if __name__ == "__main__":
    main()
