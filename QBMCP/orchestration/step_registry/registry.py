"""Build-step registry.

Every orchestrated operation is an explicit, ordered list of steps. The
builders look their steps up here so error context and the planned call count
share one definition.
"""

from typing import Dict, List, Optional

from .types import BuildStepDefinition, CallType

OPERATION_BUILD_RELATIONSHIP = "build_relationship"
OPERATION_BUILD_LOOKUP_FIELD = "build_lookup_field"
OPERATION_BUILD_JUNCTION_TABLE = "build_junction_table"


# ============================================================================
# Relationship builder
# ============================================================================

BUILD_RELATIONSHIP_STEPS: Dict[str, BuildStepDefinition] = {
    "REL_S1_REFERENCE_FIELD": BuildStepDefinition(
        step_id="REL_S1_REFERENCE_FIELD",
        operation=OPERATION_BUILD_RELATIONSHIP,
        order=1,
        name="Create reference field on child table",
        call_type=CallType.SINGULAR,
        remote_call="create_field",
    ),
    "REL_S2_LOOKUP_FIELDS": BuildStepDefinition(
        step_id="REL_S2_LOOKUP_FIELDS",
        operation=OPERATION_BUILD_RELATIONSHIP,
        order=2,
        name="Create lookup fields through the reference field",
        call_type=CallType.PER_LOOKUP,
        remote_call="create_field",
        dependencies=["REL_S1_REFERENCE_FIELD"],
    ),
}

BUILD_LOOKUP_FIELD_STEPS: Dict[str, BuildStepDefinition] = {
    "LKP_S1_LOOKUP_FIELD": BuildStepDefinition(
        step_id="LKP_S1_LOOKUP_FIELD",
        operation=OPERATION_BUILD_LOOKUP_FIELD,
        order=1,
        name="Create lookup field",
        call_type=CallType.SINGULAR,
        remote_call="create_field",
    ),
}

# ============================================================================
# Junction table builder
# ============================================================================

BUILD_JUNCTION_TABLE_STEPS: Dict[str, BuildStepDefinition] = {
    "JCT_S1_TABLE": BuildStepDefinition(
        step_id="JCT_S1_TABLE",
        operation=OPERATION_BUILD_JUNCTION_TABLE,
        order=1,
        name="Create junction table",
        call_type=CallType.SINGULAR,
        remote_call="create_table",
    ),
    "JCT_S2_TABLE1_REFERENCE": BuildStepDefinition(
        step_id="JCT_S2_TABLE1_REFERENCE",
        operation=OPERATION_BUILD_JUNCTION_TABLE,
        order=2,
        name="Create reference field to first table",
        call_type=CallType.SINGULAR,
        remote_call="create_field",
        dependencies=["JCT_S1_TABLE"],
    ),
    "JCT_S3_TABLE2_REFERENCE": BuildStepDefinition(
        step_id="JCT_S3_TABLE2_REFERENCE",
        operation=OPERATION_BUILD_JUNCTION_TABLE,
        order=3,
        name="Create reference field to second table",
        call_type=CallType.SINGULAR,
        remote_call="create_field",
        dependencies=["JCT_S1_TABLE"],
    ),
    "JCT_S4_EXTRA_FIELDS": BuildStepDefinition(
        step_id="JCT_S4_EXTRA_FIELDS",
        operation=OPERATION_BUILD_JUNCTION_TABLE,
        order=4,
        name="Create extra junction fields",
        call_type=CallType.PER_EXTRA_FIELD,
        remote_call="create_field",
        dependencies=["JCT_S1_TABLE"],
    ),
}


STEP_REGISTRY: Dict[str, BuildStepDefinition] = {
    **BUILD_RELATIONSHIP_STEPS,
    **BUILD_LOOKUP_FIELD_STEPS,
    **BUILD_JUNCTION_TABLE_STEPS,
}


def get_steps_for_operation(operation: str) -> List[BuildStepDefinition]:
    """Get the steps of an operation in execution order."""
    return sorted(
        [s for s in STEP_REGISTRY.values() if s.operation == operation],
        key=lambda s: s.order,
    )


def get_step_by_id(step_id: str) -> Optional[BuildStepDefinition]:
    """Get step definition by ID."""
    return STEP_REGISTRY.get(step_id)


def estimate_remote_calls(operation: str, lookup_count: int = 0, extra_field_count: int = 0) -> int:
    """
    Number of remote calls a build operation issues.
    
    Args:
        operation: Operation name
        lookup_count: Number of lookup specs
        extra_field_count: Number of extra junction fields
        
    Returns:
        Total remote calls
        
    Raises:
        ValueError: For unknown operations
    """
    steps = get_steps_for_operation(operation)
    if not steps:
        raise ValueError(f"Unknown operation: {operation}")
    fanout = {
        CallType.SINGULAR: 1,
        CallType.PER_LOOKUP: lookup_count,
        CallType.PER_EXTRA_FIELD: extra_field_count,
    }
    return sum(fanout[step.call_type] for step in steps)
