"""
Configuration management for gtdnota.

This module handles loading and accessing configuration values from config.yaml.
Command-line flags take precedence over the values loaded here.
"""

import logging
from pathlib import Path
from typing import Any, Dict

import yaml


class ConfigManager:
    """
    Manages configuration loading and access for gtdnota.
    """

    def __init__(self, config_path: str = "config.yaml"):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the configuration file
        """
        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            logging.info(f"No configuration file at {self.config_path}; using defaults")
            self._config = self._get_default_config()
            return

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}
            if not isinstance(loaded, dict):
                raise ValueError("top-level value must be a mapping")
            self._config = loaded
            logging.info(f"Configuration loaded from {self.config_path}")

        except (OSError, yaml.YAMLError, ValueError) as e:
            logging.error(f"Failed to load configuration: {e}")
            # Fall back to default configuration
            self._config = self._get_default_config()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration values as fallback."""
        return {
            "storage": {
                "file": "gtd.toml"
            },
            "git": {
                "sync": False,
                "push": True,
                "remote": "origin",
                "author_name": "gtdnota",
                "author_email": "gtdnota@localhost"
            },
            "logging": {
                "level": "WARNING",
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "log_file": "gtdnota.log"
            }
        }

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key_path: Dot-separated path to the configuration value (e.g., "git.remote")
            default: Default value if key is not found

        Returns:
            The configuration value

        Examples:
            config.get("storage.file")  # Returns "gtd.toml"
            config.get("git.sync")  # Returns False
        """
        keys = key_path.split('.')
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get an entire configuration section.

        Args:
            section: Name of the configuration section

        Returns:
            Dictionary containing the section configuration
        """
        return self._config.get(section, {})

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    # Convenience properties for commonly used values

    @property
    def storage_file(self) -> str:
        """Get the document path."""
        return self.get("storage.file", "gtd.toml")

    @property
    def git_sync(self) -> bool:
        return bool(self.get("git.sync", False))

    @property
    def git_push(self) -> bool:
        return bool(self.get("git.push", True))

    @property
    def git_remote(self) -> str:
        return self.get("git.remote", "origin")

    @property
    def git_author_name(self) -> str:
        """Get the commit author used when git has no user.name."""
        return self.get("git.author_name", "gtdnota")

    @property
    def git_author_email(self) -> str:
        """Get the commit author email used when git has no user.email."""
        return self.get("git.author_email", "gtdnota@localhost")

    @property
    def log_level(self) -> str:
        return self.get("logging.level", "WARNING")

    @property
    def log_format(self) -> str:
        return self.get("logging.format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    @property
    def log_filename(self) -> str:
        """Get log file name."""
        return self.get("logging.log_file", "gtdnota.log")


# Global configuration instance
config = ConfigManager()


def get_config() -> ConfigManager:
    """
    Get the global configuration instance.

    Returns:
        The global ConfigManager instance
    """
    return config
