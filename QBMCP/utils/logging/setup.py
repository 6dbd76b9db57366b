"""Logging setup for the QBMCP library and its front-ends.

Console output goes to stderr: stdout is reserved for the MCP stdio transport.
Arguments left as None fall back to the ``logging`` section of config.yaml.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from QBMCP.config import get_config

DEFAULT_LOG_FILE = "logs/qbmcp.log"

DETAILED_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
SIMPLE_FORMAT = "%(levelname)s | %(name)s | %(message)s"

# Third-party loggers that log every request at INFO
CHATTY_LOGGERS = ("httpx", "httpcore")


def _resolve_log_path(log_file: Optional[str]) -> Path:
    """Resolve a log file path relative to the project root (parent of QBMCP/)."""
    root = Path(__file__).parent.parent.parent
    return root / (log_file or DEFAULT_LOG_FILE)


def clear_log_file(log_file: Optional[str] = None) -> None:
    """
    Truncate the log file if it exists.
    
    Args:
        log_file: Path relative to the project root. If None, uses the default.
    """
    log_path = _resolve_log_path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    
    if log_path.exists():
        try:
            log_path.unlink()
        except PermissionError:
            logging.getLogger(__name__).warning(
                f"Cannot clear log file {log_path} - file is locked. Continuing without clearing."
            )


def setup_logging(
    level: Optional[str] = None,
    format_type: Optional[str] = None,
    log_to_file: Optional[bool] = None,
    log_file: Optional[str] = None,
    clear_existing: bool = False,
) -> None:
    """
    Configure the root logger once per process.
    
    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (QB_LOG_LEVEL in the front-ends)
        format_type: "simple" or "detailed"
        log_to_file: Also write to ``log_file``
        log_file: Path relative to the project root
        clear_existing: Truncate the log file first
    """
    section = get_config("logging")
    level = level or section.get("level", "INFO")
    format_type = format_type or section.get("format", "detailed")
    if log_to_file is None:
        log_to_file = bool(section.get("log_to_file", False))
    log_file = log_file or section.get("log_file")

    if clear_existing and log_to_file:
        clear_log_file(log_file)
    
    log_level = getattr(logging, str(level).upper(), logging.INFO)
    formatter = logging.Formatter(
        fmt=DETAILED_FORMAT if format_type == "detailed" else SIMPLE_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)
    
    if log_to_file:
        log_path = _resolve_log_path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
    
    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """Logger for a module; pass ``__name__``."""
    return logging.getLogger(name)
