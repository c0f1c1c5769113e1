"""
Configuration management for Gear Forge.

Provides centralized configuration loading from environment variables
with sensible defaults for all settings.
"""

import os
from pathlib import Path
from typing import Optional
import logging

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

_TRUTHY = ('true', '1', 'yes')
_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class Config:
    """
    Centralized configuration management for Gear Forge.

    Loads configuration from environment variables with fallback defaults.
    Supports .env files via python-dotenv.

    Example:
        config = Config()
        print(config.log_level)       # INFO
        print(config.strict_unequip)  # False
    """

    def __init__(self, env_file: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            env_file: Optional path to .env file. If None, auto-discovers .env
                     in project root or skips if not found.
        """
        if env_file:
            load_dotenv(env_file)
            logger.info(f"Loaded configuration from {env_file}")
        else:
            project_root = Path(__file__).parent.parent.parent
            env_path = project_root / '.env'
            if env_path.exists():
                load_dotenv(env_path)
                logger.info(f"Loaded configuration from {env_path}")
            else:
                logger.debug("No .env file found, using environment variables and defaults")

        # === Logging ===
        self.log_level = os.getenv('LOG_LEVEL', 'INFO').upper()
        self.log_file = os.getenv('LOG_FILE', None)
        self.log_colors = os.getenv('LOG_COLORS', 'True').lower() in _TRUTHY

        # === Engine behaviour ===
        # Unequipping an item that is not equipped fails instead of being a no-op
        self.strict_unequip = os.getenv('GEARFORGE_STRICT_UNEQUIP', 'False').lower() in _TRUTHY
        # Prefix for ids minted when a stack is split
        self.id_prefix = os.getenv('GEARFORGE_ID_PREFIX', 'item')

    def validate(self) -> bool:
        """
        Validate configuration and log warnings for bad values.

        Returns:
            True if config is valid, False if a value had to be replaced
        """
        valid = True

        if self.log_level not in _LOG_LEVELS:
            logger.warning(f"Invalid LOG_LEVEL: {self.log_level}. Falling back to INFO")
            self.log_level = 'INFO'
            valid = False

        if not self.id_prefix or not self.id_prefix.replace('_', '').isalnum():
            logger.warning(f"Invalid GEARFORGE_ID_PREFIX: {self.id_prefix!r}. Falling back to 'item'")
            self.id_prefix = 'item'
            valid = False

        return valid

    def __repr__(self) -> str:
        return (
            f"Config("
            f"log_level={self.log_level}, "
            f"log_file={self.log_file}, "
            f"strict_unequip={self.strict_unequip}, "
            f"id_prefix={self.id_prefix})"
        )


# Global config instance (lazy-loaded)
_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global config instance (singleton pattern).

    Returns:
        Global Config instance

    Example:
        from gearforge.core.config import get_config
        config = get_config()
        print(config.strict_unequip)
    """
    global _config
    if _config is None:
        _config = Config()
        _config.validate()
    return _config


def reset_config() -> None:
    """Drop the cached config so the next get_config() re-reads the environment."""
    global _config
    _config = None


__all__ = ['Config', 'get_config', 'reset_config']
