"""
Configuration management for the news aggregator.

This module handles loading environment settings and the source and
feed configuration.
"""

from .settings import Settings
from .config_manager import ConfigManager, DEFAULT_CONFIG, load_config_from_file, load_config_from_dict

__all__ = ['Settings', 'ConfigManager', 'DEFAULT_CONFIG', 'load_config_from_file', 'load_config_from_dict']
