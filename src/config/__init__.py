"""
Configuration module for the suggestion service.

Usage:
    from config import get_settings

    settings = get_settings()
    top_n = settings.default_top_n
    is_dev = settings.is_development
"""

from config.settings import Settings, get_settings, get_settings_for_testing

__all__ = ["Settings", "get_settings", "get_settings_for_testing"]
