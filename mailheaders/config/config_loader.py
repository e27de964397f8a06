"""Configuration loader for application settings."""

import json
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .parser_config import AppConfig, ParserConfig


class ConfigError(ValueError):
    """Raised when a configuration file cannot be read or is invalid."""

    pass


class ConfigLoader:
    """Load and validate application configuration."""

    DEFAULT_CONFIG_PATHS = [
        Path("~/.mailheaders/config.json"),
        Path("config/mailheaders.json"),
    ]

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration loader.

        Args:
            config_path: Optional custom config file path
        """
        self.config_path = config_path
        self._config: Optional[AppConfig] = None

    def load_app_config(self) -> AppConfig:
        """
        Load application configuration from file.

        Returns:
            AppConfig instance (defaults when no file is found)

        Raises:
            ConfigError: If the file is not valid JSON or fails validation,
                or if an explicitly given path does not exist
        """
        if self._config is not None:
            return self._config

        if self.config_path is not None:
            path = self.config_path.expanduser()
            if not path.exists():
                raise ConfigError(f"Config file not found: {self.config_path}")
            self._config = self._read(path)
            return self._config

        for candidate in self.DEFAULT_CONFIG_PATHS:
            path = candidate.expanduser()
            if path.exists():
                self._config = self._read(path)
                return self._config

        self._config = AppConfig()
        return self._config

    @staticmethod
    def _read(path: Path) -> AppConfig:
        try:
            with open(path, "r", encoding="utf-8") as f:
                document = json.load(f)
            return AppConfig(**document)
        except (json.JSONDecodeError, ValidationError, TypeError) as e:
            raise ConfigError(f"Invalid config in {path}: {e}") from e

    def load_parser_config(self) -> ParserConfig:
        """Parser settings section of the application config."""
        return self.load_app_config().parser

    def reload(self) -> AppConfig:
        """Reload configuration from file."""
        self._config = None
        return self.load_app_config()
