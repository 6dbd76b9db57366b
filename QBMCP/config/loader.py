"""Load QBMCP tunables from YAML.

The packaged ``config.yaml`` is used unless ``QBMCP_CONFIG`` points at
another file. Credentials never live here; they come from the environment.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_ENV_VAR = "QBMCP_CONFIG"
DEFAULT_CONFIG_FILE = Path(__file__).parent / "config.yaml"


def find_config_file() -> Path:
    """
    Resolve the tunables file.
    
    Raises:
        FileNotFoundError: If the resolved file does not exist
    """
    override = os.getenv(CONFIG_ENV_VAR, "").strip()
    config_file = Path(override).expanduser() if override else DEFAULT_CONFIG_FILE
    if not config_file.is_file():
        source = f"{CONFIG_ENV_VAR}={override}" if override else "package default"
        raise FileNotFoundError(f"QBMCP config file not found: {config_file} ({source})")
    return config_file


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Parse the tunables file into a dict of sections.
    
    Raises:
        FileNotFoundError: If the file is missing
        ValueError: If the top level is not a mapping
        yaml.YAMLError: If YAML parsing fails
    """
    config_file = path or find_config_file()
    with open(config_file, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f)

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError(f"{config_file} must contain a mapping of sections, got {type(config).__name__}")
    return config


def get_config(section: Optional[str] = None) -> Any:
    """
    Return one section (e.g. "client", "integrity") or, with no name, everything.
    
    Missing sections come back as an empty dict so callers can apply their
    own defaults.
    """
    config = load_config()
    if section is None:
        return config
    return config.get(section) or {}
