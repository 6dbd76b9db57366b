"""Single build steps shared by the relationship and junction builders.

Each step issues exactly one remote call and returns the identifier the
service assigned. ``run_build_step`` wraps a step so a failure carries the
operation, the step and everything created before it.
"""

from typing import Any, Awaitable, Dict, Optional, TypeVar

from QBMCP.client import (
    FieldDefinition,
    QuickBaseAPIError,
    QuickBaseClient,
    TableDefinition,
)
from QBMCP.orchestration.step_registry import get_step_by_id
from QBMCP.utils.error_handling import BuildStepError, ErrorContext, handle_step_error
from QBMCP.utils.logging import get_logger

from .types import ExtraFieldSpec

logger = get_logger(__name__)

T = TypeVar("T")


def _require_id(value: Optional[T], what: str) -> T:
    if value is None or value == "":
        raise QuickBaseAPIError(f"Service did not return an id for {what}")
    return value


async def create_reference_field(
    client: QuickBaseClient,
    table_id: str,
    parent_table_id: str,
    label: str,
) -> int:
    """Create a reference field on ``table_id`` pointing at ``parent_table_id``."""
    field_id = await client.create_field(
        table_id,
        FieldDefinition(label=label, field_type="reference", parent_table_id=parent_table_id),
    )
    return _require_id(field_id, f"reference field '{label}'")


async def create_lookup_field(
    client: QuickBaseClient,
    child_table_id: str,
    parent_table_id: str,
    reference_field_id: int,
    parent_field_id: int,
    label: str,
) -> int:
    """Create a lookup field mirroring ``parent_field_id`` through ``reference_field_id``."""
    field_id = await client.create_field(
        child_table_id,
        FieldDefinition(
            label=label,
            field_type="lookup",
            lookup_table_id=parent_table_id,
            lookup_field_id=parent_field_id,
            reference_field_id=reference_field_id,
        ),
    )
    return _require_id(field_id, f"lookup field '{label}'")


async def create_table(client: QuickBaseClient, name: str, description: Optional[str] = None) -> str:
    table_id = await client.create_table(TableDefinition(name=name, description=description))
    return _require_id(table_id, f"table '{name}'")


async def create_plain_field(client: QuickBaseClient, table_id: str, spec: ExtraFieldSpec) -> int:
    field_id = await client.create_field(
        table_id, FieldDefinition(label=spec.label, field_type=spec.field_type)
    )
    return _require_id(field_id, f"field '{spec.label}'")


async def run_build_step(
    operation: str,
    step_id: str,
    call: Awaitable[T],
    created: Dict[str, Any],
    table_id: Optional[str] = None,
    **additional_context: Any,
) -> T:
    """
    Await one build step, annotating failures with build progress.
    
    Args:
        operation: Orchestrated operation name
        step_id: Registered step id
        call: The step coroutine
        created: Identifiers created so far (copied into the error context)
        table_id: Table the step acts on
        **additional_context: Extra detail for the error context (e.g. label)
        
    Returns:
        The step's result
        
    Raises:
        BuildStepError: Wrapping the original failure; nothing already created
            is rolled back
    """
    step = get_step_by_id(step_id)
    try:
        return await call
    except Exception as e:
        context = ErrorContext(
            operation=operation,
            step_id=step_id,
            table_id=table_id,
            created={k: list(v) if isinstance(v, list) else v for k, v in created.items()},
            additional_context={
                "step_name": step.name if step else step_id,
                **additional_context,
            },
        )
        handle_step_error(e, context, reraise=True, error_cls=BuildStepError)
        raise  # handle_step_error always raises when reraise=True
