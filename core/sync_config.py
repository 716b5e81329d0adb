"""
Sync Configuration Handler
Manages saving and loading synchronization settings for PlayerSync sessions.
"""

import copy
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional

from config.sync_settings import SyncSettings

logger = logging.getLogger(__name__)


class SyncConfigHandler:
    """
    Handles sync configuration persistence in a JSON file.

    Values are addressed with dot notation, e.g. 'sync.check_interval_s'.
    """

    DEFAULT_CONFIG = {
        'version': '1.0',
        'last_modified': None,
        'sync': SyncSettings().to_dict(),
        'logging': {
            'level': 'INFO',
            'log_dir': None,  # No log file unless set
        },
    }

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration handler.

        Args:
            config_path: Path to config file. If None, uses sync_config.json in the project root.
        """
        if config_path is None:
            project_root = Path(__file__).parent.parent
            config_path = project_root / "sync_config.json"

        self.config_path = Path(config_path)
        self.config = self.load()

    def load(self) -> Dict[str, Any]:
        """
        Load configuration from file.
        If file doesn't exist, creates default config.

        Returns:
            Configuration dictionary
        """
        if not self.config_path.exists():
            logger.info(f"Config file not found at {self.config_path}, creating default")
            config = copy.deepcopy(self.DEFAULT_CONFIG)
            self.save(config)
            return config

        try:
            with open(self.config_path, 'r') as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Error parsing config file {self.config_path}: {e}. Using defaults")
            return copy.deepcopy(self.DEFAULT_CONFIG)

        if not isinstance(config, dict):
            logger.warning(
                f"Config file {self.config_path} holds a JSON {type(config).__name__}, "
                f"expected an object. Using defaults"
            )
            return copy.deepcopy(self.DEFAULT_CONFIG)

        return self._merge_with_defaults(config)

    def save(self, config: Optional[Dict[str, Any]] = None):
        """
        Save configuration to file.

        Args:
            config: Configuration to save. If None, saves current config.
        """
        if config is None:
            config = self.config

        config['last_modified'] = datetime.now().isoformat()

        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, 'w') as f:
            json.dump(config, f, indent=4)

        logger.debug(f"Configuration saved to {self.config_path}")

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key_path: Dot-separated path to value (e.g., 'sync.min_offset_ms')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value = self.config

        for key in key_path.split('.'):
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, key_path: str, value: Any, save: bool = True):
        """
        Set configuration value using dot notation.

        Args:
            key_path: Dot-separated path to value
            value: Value to set
            save: Whether to save after setting
        """
        keys = key_path.split('.')
        config = self.config

        for key in keys[:-1]:
            if key not in config:
                config[key] = {}
            config = config[key]

        config[keys[-1]] = value

        if save:
            self.save()

    def update(self, updates: Dict[str, Any], save: bool = True):
        """
        Update multiple configuration values.

        Args:
            updates: Dictionary of key_path: value pairs
            save: Whether to save after updating
        """
        for key_path, value in updates.items():
            self.set(key_path, value, save=False)

        if save:
            self.save()

    def get_settings(self) -> SyncSettings:
        """
        Build SyncSettings from the 'sync' section.

        Raises:
            ValueError: If the stored values are invalid
        """
        return SyncSettings.from_dict(self.get('sync', {}))

    def set_settings(self, settings: SyncSettings, save: bool = True):
        """Replace the 'sync' section with the given settings."""
        self.set('sync', settings.to_dict(), save=save)

    def validate_sync_config(self) -> tuple[bool, str]:
        """
        Validate that the stored sync settings are usable.

        Returns:
            Tuple of (valid: bool, message: str)
        """
        try:
            self.get_settings()
        except (TypeError, ValueError) as e:
            return False, str(e)

        return True, "Sync configuration valid"

    def _merge_with_defaults(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge loaded config with defaults to ensure all keys exist.

        Args:
            config: Loaded configuration

        Returns:
            Merged configuration
        """
        def merge_dict(base: dict, overlay: dict) -> dict:
            """Recursively merge overlay into base"""
            result = base.copy()
            for key, value in overlay.items():
                if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                    result[key] = merge_dict(result[key], value)
                else:
                    result[key] = value
            return result

        return merge_dict(copy.deepcopy(self.DEFAULT_CONFIG), config)
