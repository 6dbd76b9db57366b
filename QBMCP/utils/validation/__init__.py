"""Validation utilities for QBMCP."""

from .payload_shape import (
    PayloadLimits,
    PayloadShapeError,
    collect_payload_issues,
    get_payload_limits,
    validate_field_payload,
)

__all__ = [
    "PayloadLimits",
    "PayloadShapeError",
    "collect_payload_issues",
    "get_payload_limits",
    "validate_field_payload",
]
