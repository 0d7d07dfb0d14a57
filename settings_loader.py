"""
Settings Loader Module
Loads tool settings from a Python configuration file or a dictionary
"""

import os
import sys
import importlib.util
from typing import Any, Dict, Optional
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


DEFAULT_SETTINGS: Dict[str, Any] = {
    "extensions": [".docx", ".doc", ".docm"],
    "engine": "auto",
    "backup_dir_name": "_word_replacer_backup",
    "logs_dir": "logs",
    "visible": False,
    "max_restarts": 3,
    "max_attempts_per_document": 2,
    "busy_retry_count": 5,
    "busy_retry_delay": 0.5,
    "match_case": False,
    "whole_word": False,
    "recursive": True,
    "include_headers": True,
    "large_batch_threshold": 100,
}


def find_config_file(config_name: str = "replacer_config.py") -> Optional[str]:
    """
    Locate a config file, works for dev and for PyInstaller

    Search order: bundled temp folder, current directory, then the folder
    of the executable (frozen) or of this script.
    """
    candidates = []
    bundle_dir = getattr(sys, '_MEIPASS', None)
    if bundle_dir:
        candidates.append(os.path.join(bundle_dir, config_name))
    candidates.append(os.path.abspath(config_name))
    if getattr(sys, 'frozen', False):
        exe_dir = os.path.dirname(sys.executable)
    else:
        exe_dir = os.path.dirname(os.path.abspath(__file__))
    candidates.append(os.path.join(exe_dir, config_name))

    for candidate in candidates:
        if os.path.exists(candidate):
            return candidate
    return None


class SettingsLoader:
    """
    Holds the active settings for a run
    """

    def __init__(self):
        self.settings: Dict[str, Any] = dict(DEFAULT_SETTINGS)
        self.source: Optional[str] = None

    def get(self, key: str, default: Any = None) -> Any:
        return self.settings.get(key, default)

    def get_all(self) -> Dict[str, Any]:
        """Get a copy of all settings"""
        data = self.settings.copy()
        data["extensions"] = list(data.get("extensions") or [])
        return data

    def override(self, **values):
        """
        Override settings with explicit values (None means "not given")

        Returns:
            self for method chaining
        """
        for key, value in values.items():
            if value is None:
                continue
            self.settings[key] = value
            logger.info(f"Setting override: {key} = {value!r}")
        return self

    def load_from_dict(self, data: Dict):
        """
        Merge settings from a dictionary over the defaults

        Args:
            data: Dictionary with any subset of the DEFAULT_SETTINGS keys
        """
        if not isinstance(data, dict):
            raise ValueError(f"Settings must be a dictionary, got {type(data).__name__}")

        merged = dict(DEFAULT_SETTINGS)
        for key, value in data.items():
            if key not in DEFAULT_SETTINGS:
                logger.warning(f"Unknown setting '{key}' kept as-is")
            merged[key] = value

        extensions = merged.get("extensions") or DEFAULT_SETTINGS["extensions"]
        if isinstance(extensions, str):
            extensions = [extensions]
        if not isinstance(extensions, (list, tuple)):
            raise ValueError(f"'extensions' must be a list of extensions, got {type(extensions).__name__}")
        merged["extensions"] = [str(ext).lower() for ext in extensions]

        self.settings = merged
        logger.info(f"Loaded {len(data)} settings")
        return self

    def load_from_config_file(self, config_file: str):
        """
        Load from a Python configuration file

        The config file should define a get_settings() function or a
        SETTINGS variable.
        """
        if not os.path.exists(config_file):
            raise FileNotFoundError(f"Config file not found: {config_file}")

        spec = importlib.util.spec_from_file_location("replacer_settings", config_file)
        config_module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(config_module)

        if hasattr(config_module, 'get_settings'):
            data = config_module.get_settings()
        elif hasattr(config_module, 'SETTINGS'):
            data = config_module.SETTINGS
        elif hasattr(config_module, 'settings'):
            data = config_module.settings
        else:
            raise ValueError("Config file must define 'get_settings()' function or 'SETTINGS' variable")

        self.load_from_dict(data)
        self.source = config_file
        logger.info(f"Settings loaded from {config_file}")
        return self
