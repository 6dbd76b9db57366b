"""Env-backed helpers shared by the server settings and the diagnose script.

Keep this lightweight so it can be imported before logging is configured.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

TRUE_VALUES = {"1", "true", "yes", "y", "on"}
FALSE_VALUES = {"0", "false", "no", "n", "off"}

# Package root: <root>/QBMCP/utils/env_config.py -> <root>
PROJECT_ROOT = Path(__file__).parent.parent.parent


def parse_flag(raw: Any, default: bool = False) -> bool:
    """Interpret a loosely-typed flag value; unknown spellings fall back to default."""
    if raw is None:
        return default
    if isinstance(raw, bool):
        return raw
    normalized = str(raw).strip().lower()
    if not normalized:
        return default
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    return default


def env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean flag from the environment."""
    return parse_flag(os.getenv(name), default)


def get_int(name: str, default: int, *, min_value: int | None = None, max_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None or str(raw).strip() == "":
        value = default
    else:
        try:
            value = int(str(raw).strip())
        except ValueError:
            value = default
    if min_value is not None:
        value = max(min_value, value)
    if max_value is not None:
        value = min(max_value, value)
    return value


def get_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    s = str(raw).strip()
    return s if s else default


def find_dotenv_file(cwd: Optional[Path] = None) -> Optional[Path]:
    """
    Locate the .env file to use.
    
    The working directory wins; otherwise the project root is tried, which covers
    MCP clients that launch the server from an unrelated directory.
    
    Returns:
        Path to an existing .env file, or None
    """
    candidates = [(cwd or Path.cwd()) / ".env", PROJECT_ROOT / ".env"]
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def load_env_file(cwd: Optional[Path] = None) -> Optional[Path]:
    """Load the first .env found by find_dotenv_file without overriding the process env."""
    env_path = find_dotenv_file(cwd)
    if env_path is not None:
        load_dotenv(env_path, override=False)
    return env_path
