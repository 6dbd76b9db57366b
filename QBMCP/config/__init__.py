"""Configuration loading for QBMCP."""

from .loader import get_config, load_config, find_config_file

__all__ = ["get_config", "load_config", "find_config_file"]
