"""
Core configuration module for mongowrap.

Provides centralized configuration management with support for directory paths,
MongoDB client defaults and environment variable overrides.
"""

from mongowrap.core.config.config import Config, CoreConfig, CoreSettings, SettingsLike

__all__ = ["Config", "CoreConfig", "CoreSettings", "SettingsLike"]
