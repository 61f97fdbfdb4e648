"""
Configuration module for the save-game exporter.
"""

from .settings import ConfigurationError, Settings

__all__ = [
    'Settings',
    'ConfigurationError',
]
