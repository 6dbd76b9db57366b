"""Structural limits for user-supplied record payloads.

Payloads are checked before any value reaches the client so an oversized or
deeply nested bundle is rejected without a remote call.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from QBMCP.config import get_config


class PayloadShapeError(ValueError):
    """Raised when a payload exceeds the configured structural limits."""
    
    def __init__(self, issues: List[str]):
        self.issues = issues
        super().__init__("; ".join(issues) if issues else "Invalid payload")


@dataclass(frozen=True)
class PayloadLimits:
    max_depth: int = 4
    max_keys_per_object: int = 250
    max_total_keys: int = 2000
    max_string_length: int = 10000
    max_array_length: int = 1000
    max_key_length: int = 64
    max_bulk_records: int = 250


def get_payload_limits() -> PayloadLimits:
    """Build limits from the payload_limits section of config.yaml."""
    section = get_config("payload_limits") or {}
    known = PayloadLimits.__dataclass_fields__.keys()
    return PayloadLimits(**{k: int(v) for k, v in section.items() if k in known})


def collect_payload_issues(payload: Any, limits: Optional[PayloadLimits] = None) -> List[str]:
    """
    Walk a payload and collect every structural limit it breaks.
    
    Scalars (None, bool, int, float, str) and nested lists/dicts are allowed.
    An oversized container is reported once and not descended into.
    
    Args:
        payload: Arbitrary JSON-like value
        limits: Limits to enforce (defaults to config.yaml)
        
    Returns:
        List of issues (empty if the payload is acceptable)
    """
    limits = limits or get_payload_limits()
    issues: List[str] = []
    total_keys = 0
    
    def visit(value: Any, depth: int) -> bool:
        # Returns False once the walk must stop
        nonlocal total_keys
        
        if depth > limits.max_depth:
            issues.append(f"Payload nesting too deep (max depth {limits.max_depth}).")
            return True
        
        if value is None or isinstance(value, (bool, int, float)):
            return True
        
        if isinstance(value, str):
            if len(value) > limits.max_string_length:
                issues.append(f"String value too long (max {limits.max_string_length} chars).")
            return True
        
        if isinstance(value, (list, tuple)):
            if len(value) > limits.max_array_length:
                issues.append(f"Array too large (max {limits.max_array_length} items).")
                return True
            for item in value:
                if not visit(item, depth + 1):
                    return False
            return True
        
        if isinstance(value, dict):
            if len(value) > limits.max_keys_per_object:
                issues.append(f"Object has too many keys (max {limits.max_keys_per_object}).")
                return True
            
            total_keys += len(value)
            if total_keys > limits.max_total_keys:
                issues.append(f"Payload has too many keys overall (max {limits.max_total_keys}).")
                return False
            
            for key, item in value.items():
                if len(str(key)) > limits.max_key_length:
                    issues.append(f"Object key too long (max {limits.max_key_length} chars).")
                    return True
                if not visit(item, depth + 1):
                    return False
            return True
        
        issues.append(f"Unsupported value type in payload: {type(value).__name__}")
        return True
    
    visit(payload, 0)
    return issues


def validate_field_payload(payload: Any, limits: Optional[PayloadLimits] = None) -> Any:
    """
    Validate a record field payload, returning it unchanged.
    
    Raises:
        PayloadShapeError: If any structural limit is exceeded
    """
    issues = collect_payload_issues(payload, limits)
    if issues:
        raise PayloadShapeError(issues)
    return payload
