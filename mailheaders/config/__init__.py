"""Configuration management"""

from .config_loader import ConfigError, ConfigLoader
from .parser_config import AppConfig, ParserConfig

__all__ = ["AppConfig", "ConfigError", "ConfigLoader", "ParserConfig"]
