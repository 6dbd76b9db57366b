"""Logging utilities for QBMCP."""

from .setup import setup_logging, get_logger, clear_log_file

__all__ = ["setup_logging", "get_logger", "clear_log_file"]
