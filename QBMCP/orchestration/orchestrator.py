"""Facade over the relationship builders, validator and inspector.

All components share one client and hold no state between calls; every
operation re-reads what it needs from the service.
"""

from typing import Any, Dict, Optional, Sequence, Union

from QBMCP.client import QuickBaseClient

from .integrity import IntegrityResult, RelationshipValidator
from .relationships import (
    ExtraFieldSpec,
    JunctionBuildResult,
    JunctionTableBuilder,
    LookupSpec,
    RelationshipBuildResult,
    RelationshipBuilder,
    RelationshipDetails,
    RelationshipInspector,
    RelationshipKind,
)


class RelationshipOrchestrator:
    def __init__(self, client: QuickBaseClient, validator: Optional[RelationshipValidator] = None):
        self.client = client
        self.builder = RelationshipBuilder(client)
        self.junctions = JunctionTableBuilder(client)
        self.validator = validator or RelationshipValidator(client)
        self.inspector = RelationshipInspector(client)

    async def build_relationship(
        self,
        parent_table_id: str,
        child_table_id: str,
        reference_label: str,
        lookup_specs: Optional[Sequence[Union[LookupSpec, Dict[str, Any]]]] = None,
        relationship_kind: Optional[Union[str, RelationshipKind]] = None,
    ) -> RelationshipBuildResult:
        return await self.builder.build_relationship(
            parent_table_id, child_table_id, reference_label, lookup_specs, relationship_kind
        )

    async def build_lookup_field(
        self,
        child_table_id: str,
        parent_table_id: str,
        reference_field_id: int,
        parent_field_id: int,
        label: str,
    ) -> int:
        return await self.builder.build_lookup_field(
            child_table_id, parent_table_id, reference_field_id, parent_field_id, label
        )

    async def build_junction_table(
        self,
        name: str,
        table1_id: str,
        table2_id: str,
        table1_label: str,
        table2_label: str,
        extra_fields: Optional[Sequence[Union[ExtraFieldSpec, Dict[str, Any]]]] = None,
        description: Optional[str] = None,
    ) -> JunctionBuildResult:
        return await self.junctions.build_junction_table(
            name, table1_id, table2_id, table1_label, table2_label, extra_fields, description
        )

    async def validate_relationship(
        self, parent_table_id: str, child_table_id: str, foreign_key_field_id: int
    ) -> IntegrityResult:
        return await self.validator.validate_relationship(
            parent_table_id, child_table_id, foreign_key_field_id
        )

    async def get_relationship_details(
        self, table_id: str, include_field_details: bool = True
    ) -> RelationshipDetails:
        return await self.inspector.get_relationship_details(table_id, include_field_details)
