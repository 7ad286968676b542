"""Configuration package.

This package provides centralized configuration management.
Implementation is in config.py - this __init__.py only handles imports/exports.
"""

from src.core.config.config import DEFAULT_PORT, DEFAULT_SIGNING_SECRET, AppConfig

# Singleton instance - use this throughout the application
config = AppConfig()

__all__ = ["AppConfig", "DEFAULT_PORT", "DEFAULT_SIGNING_SECRET", "config"]
