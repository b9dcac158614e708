"""
Configuration for the gasless relay.

Loads settings from environment variables and an optional .env file and
exposes a single source of truth through get_settings().
"""

from backend_gasless.config.settings import Settings, get_settings, load_settings  # noqa: F401

__all__ = ["Settings", "get_settings", "load_settings"]
