"""
Configuration package - unified access point.

This package provides all configuration classes and the global config instance.
"""

from src.core.config.settings import Config, config
from src.core.config.welcome_config import WelcomeConfig

__all__ = [
    "Config",
    "WelcomeConfig",
    "config",
]
