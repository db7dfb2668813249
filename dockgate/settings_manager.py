"""
Settings Manager for dockgate
Manages gateway settings stored in a JSON file
"""

import copy
import json
import os
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


DEFAULT_SETTINGS: Dict[str, Any] = {
    'host': '127.0.0.1',
    'port': 8030,
    'log_level': 'INFO',
    # static: tenant -> daemon mapping from `daemons`; sqlite: host_docker_info table
    'directory': 'static',
    'daemons': {},
    'default_daemon': '',
    'database_path': '',
    'cache_ttl': 30,
    'connect_timeout': 10,
    # None keeps follow/stream responses open indefinitely
    'read_timeout': None,
    'cors_origins': ['*'],
}


class SettingsManager:
    """Manager for gateway settings"""

    ENV_VAR = 'DOCKGATE_SETTINGS'

    @classmethod
    def get_user_settings_path(cls) -> str:
        """Get path to user settings file"""
        explicit = os.environ.get(cls.ENV_VAR)
        if explicit:
            return explicit

        config_home = os.environ.get('XDG_CONFIG_HOME') or os.path.expanduser('~/.config')
        return os.path.join(config_home, 'dockgate', 'settings.json')

    def __init__(self, settings_file: Optional[str] = None, create: bool = True):
        """
        Initialize settings manager

        Args:
            settings_file: Explicit settings path; defaults to get_user_settings_path()
            create: Write defaults out when the file does not exist
        """
        self.settings_file = settings_file or self.get_user_settings_path()
        self.settings: Dict[str, Any] = {}
        self.load(create=create)

    @staticmethod
    def defaults() -> Dict[str, Any]:
        return copy.deepcopy(DEFAULT_SETTINGS)

    def load(self, create: bool = True):
        """Load settings from user file, merged over the defaults"""
        self.settings = self.defaults()

        if not os.path.exists(self.settings_file):
            logger.info(f"Using default settings, {self.settings_file} not found")
            if create:
                self.save()
            return

        try:
            with open(self.settings_file, 'r', encoding='utf-8') as f:
                loaded_settings = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Error loading settings from {self.settings_file}: {e}")
            return

        if not isinstance(loaded_settings, dict):
            logger.error(f"Ignoring {self.settings_file}: top level is not an object")
            return

        # user settings override defaults
        self.settings.update(loaded_settings)
        logger.info(f"Settings loaded from {self.settings_file}")

    def save(self) -> bool:
        """Save settings to file"""
        try:
            directory = os.path.dirname(self.settings_file)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.settings_file, 'w', encoding='utf-8') as f:
                json.dump(self.settings, f, indent=4, ensure_ascii=False)
        except OSError as e:
            logger.error(f"Error saving settings: {e}")
            return False

        logger.info(f"Settings saved to {self.settings_file}")
        return True

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get setting value

        Args:
            key: Setting key
            default: Default value if key not found

        Returns:
            Setting value
        """
        return self.settings.get(key, default)

    def set(self, key: str, value: Any, save: bool = True):
        """
        Set setting value

        Args:
            key: Setting key
            value: Setting value
            save: Save to file immediately
        """
        self.settings[key] = value

        if save:
            self.save()

    def update(self, settings_dict: Dict[str, Any], save: bool = True):
        """Update multiple settings"""
        self.settings.update(settings_dict)

        if save:
            self.save()

    def get_all(self) -> Dict[str, Any]:
        """Get all settings"""
        return copy.deepcopy(self.settings)
