"""
Application Settings Management.

Handles loading and saving settings from external JSON config files.
Settings are stored in data/config/ and can be updated without rebuilding.
"""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from denial_lens.engine.resolver import MatchConfig

logger = logging.getLogger(__name__)


def _list_setting(settings_dict: Dict[str, Any], defaults: Dict[str, Any], key: str) -> list:
    # null in the JSON file means "use the default"
    value = settings_dict.get(key)
    if value is None:
        return list(defaults[key])
    return list(value)


class Settings:
    """Application settings container."""

    def __init__(self, settings_dict: Optional[Dict[str, Any]] = None):
        """
        Initialize settings from dictionary.

        Args:
            settings_dict: Dictionary of settings, or None to use defaults.
                Missing keys take their default value.
        """
        defaults = get_default_settings()
        if settings_dict is None:
            settings_dict = defaults

        self.default_threshold = settings_dict.get("default_threshold", defaults["default_threshold"])
        self.match_column = settings_dict.get("match_column", defaults["match_column"])
        self.identity_column = settings_dict.get("identity_column", defaults["identity_column"])
        self.numeric_fields = _list_setting(settings_dict, defaults, "numeric_fields")
        self.sentinel_values = _list_setting(settings_dict, defaults, "sentinel_values")
        self.csv_encoding = settings_dict.get("csv_encoding", defaults["csv_encoding"])
        self.dataset_file = settings_dict.get("dataset_file", defaults["dataset_file"])

    def match_config(self, threshold: Optional[float] = None) -> MatchConfig:
        """
        Build the matching configuration.

        Raises:
            ConfigurationError: if the configured columns or threshold are invalid.
        """
        if threshold is None:
            threshold = self.default_threshold
        return MatchConfig(self.identity_column, self.match_column, threshold)

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary for saving."""
        return {
            "default_threshold": self.default_threshold,
            "match_column": self.match_column,
            "identity_column": self.identity_column,
            "numeric_fields": list(self.numeric_fields),
            "sentinel_values": list(self.sentinel_values),
            "csv_encoding": self.csv_encoding,
            "dataset_file": self.dataset_file,
        }


def get_default_settings() -> Dict[str, Any]:
    """Get default settings dictionary."""
    return {
        "default_threshold": 0.7,  # lower = stricter
        "match_column": "Drug_Name",
        "identity_column": "Claim_ID",
        "numeric_fields": ["Risk_Score", "Patient_Age", "Claim_Amount", "Paid_Amount"],
        "sentinel_values": ["Not found in document", "Not found"],
        "csv_encoding": "utf-8",
        "dataset_file": "db/denial_df.csv",
    }


def get_config_path(base_path: Optional[str] = None) -> Path:
    """
    Get the path to the config directory.

    Args:
        base_path: Base application path. If None, uses executable directory
            (PyInstaller bundle) or the project root.

    Returns:
        Path to config directory
    """
    if base_path is None:
        if hasattr(sys, '_MEIPASS'):
            base_path = os.path.dirname(sys.executable)
        else:
            from denial_lens.utils.path_utils import get_base_path
            base_path = str(get_base_path())

    return Path(base_path) / "data" / "config"


def load_settings(config_file: str = "settings.json", base_path: Optional[str] = None) -> Settings:
    """
    Load settings from JSON config file.

    Args:
        config_file: Name of config file (default: settings.json)
        base_path: Base application path for finding data/config folder

    Returns:
        Settings object; defaults when the file is missing or unreadable.
    """
    config_path = get_config_path(base_path) / config_file

    if not config_path.exists():
        return Settings()

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            settings_dict = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Failed to load settings from %s: %s", config_path, e)
        return Settings()

    if not isinstance(settings_dict, dict):
        logger.warning("Settings file %s does not hold a JSON object; using defaults", config_path)
        return Settings()

    return Settings(settings_dict)


def save_settings(settings: Settings, config_file: str = "settings.json", base_path: Optional[str] = None):
    """
    Save settings to JSON config file.

    Args:
        settings: Settings object to save
        config_file: Name of config file (default: settings.json)
        base_path: Base application path for finding data/config folder
    """
    config_path = get_config_path(base_path)
    config_path.mkdir(parents=True, exist_ok=True)
    config_file_path = config_path / config_file

    try:
        with open(config_file_path, 'w', encoding='utf-8') as f:
            json.dump(settings.to_dict(), f, indent=2, ensure_ascii=False)
    except OSError as e:
        logger.warning("Failed to save settings to %s: %s", config_file_path, e)
