"""Relationship builder: one reference field, then its lookup fields."""

from typing import Any, Dict, List, Optional, Sequence, Union

from QBMCP.client import QuickBaseClient
from QBMCP.orchestration.step_registry import (
    OPERATION_BUILD_LOOKUP_FIELD,
    OPERATION_BUILD_RELATIONSHIP,
    estimate_remote_calls,
)
from QBMCP.utils.logging import get_logger

from .steps import create_lookup_field, create_reference_field, run_build_step
from .types import (
    LookupSpec,
    RelationshipBuildResult,
    RelationshipKind,
    normalize_relationship_kind,
)

logger = get_logger(__name__)


def _require_table_id(value: str, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{name} must be a non-empty table id")
    return value


class RelationshipBuilder:
    """Builds parent/child relationships on top of single-field primitives."""

    def __init__(self, client: QuickBaseClient):
        self.client = client

    async def build_relationship(
        self,
        parent_table_id: str,
        child_table_id: str,
        reference_label: str,
        lookup_specs: Optional[Sequence[Union[LookupSpec, Dict[str, Any]]]] = None,
        relationship_kind: Optional[Union[str, RelationshipKind]] = None,
    ) -> RelationshipBuildResult:
        """
        Create a reference field on the child table, then one lookup field per spec.
        
        The relationship kind is recorded on the result only; it never changes
        which calls are made. Lookup fields are created in input order.
        
        Args:
            parent_table_id: Table the reference points at
            child_table_id: Table that receives the reference and lookup fields
            reference_label: Label of the new reference field
            lookup_specs: (parent_field_id, child_field_label) pairs
            relationship_kind: "one-to-many" (default) or "many-to-many"
            
        Returns:
            RelationshipBuildResult with the reference field id and lookup ids
            
        Raises:
            ValueError: On blank table ids or an unknown relationship kind
                (before any remote call)
            BuildStepError: When a remote step fails; ``context.created`` lists
                what already exists
        """
        _require_table_id(parent_table_id, "parent_table_id")
        _require_table_id(child_table_id, "child_table_id")
        kind = normalize_relationship_kind(relationship_kind)
        specs: List[LookupSpec] = [
            s if isinstance(s, LookupSpec) else LookupSpec.model_validate(s)
            for s in (lookup_specs or [])
        ]

        planned = estimate_remote_calls(OPERATION_BUILD_RELATIONSHIP, lookup_count=len(specs))
        logger.info(
            f"Building {kind.value} relationship {parent_table_id} -> {child_table_id} "
            f"with {len(specs)} lookup field(s), {planned} remote call(s) planned"
        )

        created: Dict[str, Any] = {}
        reference_field_id = await run_build_step(
            OPERATION_BUILD_RELATIONSHIP,
            "REL_S1_REFERENCE_FIELD",
            create_reference_field(self.client, child_table_id, parent_table_id, reference_label),
            created,
            table_id=child_table_id,
            label=reference_label,
        )
        created["referenceFieldId"] = reference_field_id
        lookup_field_ids: List[int] = []
        created["lookupFieldIds"] = lookup_field_ids

        for index, spec in enumerate(specs):
            lookup_id = await run_build_step(
                OPERATION_BUILD_RELATIONSHIP,
                "REL_S2_LOOKUP_FIELDS",
                create_lookup_field(
                    self.client,
                    child_table_id,
                    parent_table_id,
                    reference_field_id,
                    spec.parent_field_id,
                    spec.child_field_label,
                ),
                created,
                table_id=child_table_id,
                label=spec.child_field_label,
                lookup_index=index,
            )
            lookup_field_ids.append(lookup_id)

        return RelationshipBuildResult(
            parent_table_id=parent_table_id,
            child_table_id=child_table_id,
            relationship_kind=kind,
            reference_field_id=reference_field_id,
            lookup_field_ids=lookup_field_ids,
        )

    async def build_lookup_field(
        self,
        child_table_id: str,
        parent_table_id: str,
        reference_field_id: int,
        parent_field_id: int,
        label: str,
    ) -> int:
        """Create a single lookup field through an existing reference field."""
        _require_table_id(child_table_id, "child_table_id")
        _require_table_id(parent_table_id, "parent_table_id")
        return await run_build_step(
            OPERATION_BUILD_LOOKUP_FIELD,
            "LKP_S1_LOOKUP_FIELD",
            create_lookup_field(
                self.client,
                child_table_id,
                parent_table_id,
                reference_field_id,
                parent_field_id,
                label,
            ),
            {},
            table_id=child_table_id,
            label=label,
        )
