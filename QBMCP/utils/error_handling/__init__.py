"""Standardized error handling utilities.

Provides consistent error handling patterns across the codebase.
"""

from .handlers import (
    handle_step_error,
    StepError,
    BuildStepError,
    ErrorContext,
    log_error_with_context,
    create_error_response,
)

__all__ = [
    "handle_step_error",
    "StepError",
    "BuildStepError",
    "ErrorContext",
    "log_error_with_context",
    "create_error_response",
]
