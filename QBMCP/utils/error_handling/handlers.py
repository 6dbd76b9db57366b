"""Standardized error handling for orchestrated operations.

Provides consistent error handling, logging, and error response creation.
"""

from typing import Dict, Any, Optional
from dataclasses import dataclass, field
from datetime import datetime
import traceback

from QBMCP.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ErrorContext:
    """Context information for error handling."""
    operation: str
    step_id: str
    table_id: Optional[str] = None
    field_id: Optional[int] = None
    # Identifiers already created remotely before the failure
    created: Dict[str, Any] = field(default_factory=dict)
    additional_context: Dict[str, Any] = field(default_factory=dict)


@dataclass
class StepError(Exception):
    """Standardized error for step failures."""
    message: str
    context: ErrorContext
    original_exception: Optional[Exception] = None
    error_type: str = "step_error"
    
    def __str__(self) -> str:
        return f"[{self.context.operation}/{self.context.step_id}] {self.message}"
    
    @property
    def is_partial(self) -> bool:
        """True when remote artifacts were created before the failure."""
        return bool(self.context.created)


@dataclass
class BuildStepError(StepError):
    """A multi-step build failed part-way; nothing already created is rolled back."""
    error_type: str = "build_step_error"


def log_error_with_context(
    error: Exception,
    context: ErrorContext,
    level: str = "error"
) -> None:
    """
    Log error with full context information.
    
    Args:
        error: The exception that occurred
        context: Error context information
        level: Log level ("error", "warning", "critical")
    """
    log_msg_parts = [
        f"Error in {context.operation} (step {context.step_id})"
    ]
    
    if context.table_id:
        log_msg_parts.append(f"Table: {context.table_id}")
    if context.field_id is not None:
        log_msg_parts.append(f"Field: {context.field_id}")
    if context.created:
        log_msg_parts.append(f"Created before failure: {context.created}")
    
    log_msg = " | ".join(log_msg_parts)
    
    if level == "critical":
        logger.critical(f"{log_msg}: {error}", exc_info=True)
    elif level == "warning":
        logger.warning(f"{log_msg}: {error}", exc_info=True)
    else:
        logger.error(f"{log_msg}: {error}", exc_info=True)
    
    if context.additional_context:
        logger.debug(f"Additional context: {context.additional_context}")


def create_error_response(
    error: Exception,
    context: ErrorContext,
) -> Dict[str, Any]:
    """
    Create standardized error response dictionary.
    
    Args:
        error: The exception that occurred
        context: Error context information
        
    Returns:
        Dictionary with error information, including any identifiers created
        before the failure
    """
    error_response = {
        "success": False,
        "error": {
            "type": type(error).__name__,
            "message": str(error),
            "operation": context.operation,
            "step_id": context.step_id,
            "timestamp": datetime.now().isoformat(),
        }
    }
    
    if context.table_id:
        error_response["error"]["table_id"] = context.table_id
    if context.field_id is not None:
        error_response["error"]["field_id"] = context.field_id
    if context.created:
        error_response["created"] = dict(context.created)
    
    if error.__traceback__ is not None:
        tb_str = "".join(traceback.format_tb(error.__traceback__))
        # Last 500 chars only
        error_response["error"]["traceback"] = tb_str[-500:] if len(tb_str) > 500 else tb_str
    
    if context.additional_context:
        error_response["error"]["additional_context"] = context.additional_context
    
    return error_response


def handle_step_error(
    error: Exception,
    context: ErrorContext,
    log_level: str = "error",
    reraise: bool = False,
    error_cls: type = StepError,
) -> Optional[Dict[str, Any]]:
    """
    Handle step error with standardized logging and response creation.
    
    Args:
        error: The exception that occurred
        context: Error context information
        log_level: Log level ("error", "warning", "critical")
        reraise: If True, re-raise the exception after handling
        error_cls: StepError subclass to raise when reraise=True
        
    Returns:
        Error response dictionary when reraise=False
        
    Raises:
        StepError: If reraise=True, wraps original error (chained with ``from``)
    """
    log_error_with_context(error, context, level=log_level)
    
    if reraise:
        step_error = error_cls(
            message=str(error),
            context=context,
            original_exception=error,
        )
        raise step_error from error
    
    return create_error_response(error, context)
