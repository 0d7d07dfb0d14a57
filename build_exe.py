"""
PyInstaller build for Word Replacer

    python build_exe.py

Produces dist/WordReplacer(.exe), a windowed single-file build of the form.
replacer_config.py is bundled and can also be placed next to the executable
to change the defaults.
"""

import os
import shutil
import sys

import PyInstaller.__main__

APP_NAME = 'WordReplacer'
ENTRY_SCRIPT = 'word_replacer.py'
CONFIG_FILE = 'replacer_config.py'

PROJECT_MODULES = [
    'document_scanner',
    'docx_engine',
    'replacement_runner',
    'replacer_errors',
    'request_validator',
    'run_logging',
    'settings_loader',
    'word_automation',
]

# Imported lazily by win32com, invisible to PyInstaller's analysis
WIN32_MODULES = ['pythoncom', 'pywintypes', 'win32com.client']

# Template documents and JSON metaschemas ship as package data
PACKAGES_WITH_DATA = ['docx', 'jsonschema', 'jsonschema_specifications']

project_dir = os.path.dirname(os.path.abspath(__file__))


def clean_previous_build():
    """Remove build output and the generated .spec so every build starts fresh"""
    leftovers = [os.path.join(project_dir, name) for name in ('build', 'dist', '__pycache__')]
    for path in leftovers:
        if os.path.isdir(path):
            try:
                shutil.rmtree(path)
                print(f"  removed {os.path.relpath(path, project_dir)}/")
            except OSError as e:
                print(f"  could not remove {path}: {e}")

    spec_path = os.path.join(project_dir, f'{APP_NAME}.spec')
    if os.path.exists(spec_path):
        try:
            os.remove(spec_path)
            print(f"  removed {APP_NAME}.spec")
        except OSError as e:
            print(f"  could not remove {spec_path}: {e}")


def pyinstaller_arguments():
    # --add-data uses the platform's path list separator
    config_data = f"{os.path.join(project_dir, CONFIG_FILE)}{os.pathsep}."

    args = [
        os.path.join(project_dir, ENTRY_SCRIPT),
        f'--name={APP_NAME}',
        '--onefile',
        '--windowed',
        '--noconfirm',
        '--clean',
        f'--add-data={config_data}',
        '--hidden-import=tkinter.ttk',
        '--hidden-import=tkinter.scrolledtext',
    ]
    args += [f'--hidden-import={module}' for module in PROJECT_MODULES]
    if sys.platform == 'win32':
        args += [f'--hidden-import={module}' for module in WIN32_MODULES]
    args += [f'--collect-all={package}' for package in PACKAGES_WITH_DATA]
    # Pulled in transitively by some environments, never used here
    args += [f'--exclude-module={module}' for module in ('matplotlib', 'numpy', 'pandas', 'PIL')]
    return args


def main():
    print(f"Building {APP_NAME} from {ENTRY_SCRIPT}")
    if sys.platform != 'win32':
        print("Note: not building on Windows, the result can only use the python-docx engine")

    clean_previous_build()

    try:
        PyInstaller.__main__.run(pyinstaller_arguments())
    except SystemExit as e:
        # PyInstaller exits on fatal errors
        if e.code:
            print(f"PyInstaller stopped with exit code {e.code}")
            return 1

    executable = os.path.join(project_dir, 'dist', APP_NAME + ('.exe' if sys.platform == 'win32' else ''))
    if not os.path.exists(executable):
        print(f"Build finished but {executable} is missing, check the PyInstaller output above")
        return 1

    size_mb = os.path.getsize(executable) / (1024 * 1024)
    print(f"\nBuilt {executable} ({size_mb:.1f} MB)")
    print(f"Put an edited {CONFIG_FILE} next to it to change the defaults.")
    print("The Word engine needs Microsoft Word on the machine that runs it.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
