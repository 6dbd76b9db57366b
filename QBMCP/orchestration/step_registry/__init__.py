"""Build-step registry for orchestrated operations."""

from .types import BuildStepDefinition, CallType
from .registry import (
    OPERATION_BUILD_RELATIONSHIP,
    OPERATION_BUILD_LOOKUP_FIELD,
    OPERATION_BUILD_JUNCTION_TABLE,
    STEP_REGISTRY,
    get_steps_for_operation,
    get_step_by_id,
    estimate_remote_calls,
)

__all__ = [
    "BuildStepDefinition",
    "CallType",
    "OPERATION_BUILD_RELATIONSHIP",
    "OPERATION_BUILD_LOOKUP_FIELD",
    "OPERATION_BUILD_JUNCTION_TABLE",
    "STEP_REGISTRY",
    "get_steps_for_operation",
    "get_step_by_id",
    "estimate_remote_calls",
]
