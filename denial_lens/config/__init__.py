"""
Configuration Module.

This module handles application settings. All configuration data is external
and loadable from the data/ folder.
"""

from .settings import Settings, load_settings, save_settings, get_default_settings

__all__ = [
    'Settings',
    'load_settings',
    'save_settings',
    'get_default_settings',
]
