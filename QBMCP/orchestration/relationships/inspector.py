"""Relationship detail inspector.

Reference fields carry ``properties.parentTableId``; lookup fields carry
``properties.lookupReference.referenceFieldId`` naming the reference field
they go through.
Lookups are attributed to a reference by that back-reference only.
"""

from typing import Any, Dict, List, Optional

from QBMCP.client import QuickBaseClient
from QBMCP.utils.logging import get_logger

from .types import FieldSummary, RelationshipDetail, RelationshipDetails

logger = get_logger(__name__)


def _properties(field: Dict[str, Any]) -> Dict[str, Any]:
    return field.get("properties") or {}


def is_reference_field(field: Dict[str, Any]) -> bool:
    return field.get("fieldType") == "reference"


def lookups_through(fields: List[Dict[str, Any]], reference_field_id: int) -> List[FieldSummary]:
    """Lookup fields in ``fields`` whose configuration names ``reference_field_id``."""
    summaries = []
    for field in fields:
        if field.get("fieldType") != "lookup":
            continue
        lookup_reference = _properties(field).get("lookupReference") or {}
        if lookup_reference.get("referenceFieldId") == reference_field_id:
            summaries.append(FieldSummary(id=field["id"], label=field.get("label", "")))
    return summaries


def relationships_in_fields(
    child_table_id: str,
    fields: List[Dict[str, Any]],
    include_field_details: bool,
    parent_table_id: Optional[str] = None,
) -> List[RelationshipDetail]:
    """
    Describe the reference fields found among one table's fields.
    
    Args:
        child_table_id: Table owning ``fields``
        fields: Field metadata as returned by the service
        include_field_details: Resolve dependent lookup fields
        parent_table_id: Only keep references pointing at this table
        
    Returns:
        One RelationshipDetail per matching reference field, in field order
    """
    details = []
    for field in fields:
        if not is_reference_field(field):
            continue
        target = _properties(field).get("parentTableId")
        if parent_table_id is not None and target != parent_table_id:
            continue
        details.append(
            RelationshipDetail(
                parent_table_id=target,
                child_table_id=child_table_id,
                reference_field_id=field["id"],
                reference_field_label=field.get("label"),
                lookup_fields=lookups_through(fields, field["id"]) if include_field_details else None,
            )
        )
    return details


class RelationshipInspector:
    def __init__(self, client: QuickBaseClient):
        self.client = client

    async def get_relationship_details(
        self, table_id: str, include_field_details: bool = True
    ) -> RelationshipDetails:
        """
        Collect relationships where ``table_id`` is the child (its own
        reference fields) or the parent (reference fields of other app tables
        pointing at it).
        
        Args:
            table_id: Inspected table
            include_field_details: When False, lookup fields are omitted
            
        Returns:
            RelationshipDetails; outgoing references first, then incoming ones
            in app table order
        """
        if not isinstance(table_id, str) or not table_id.strip():
            raise ValueError("table_id must be a non-empty table id")

        own_fields = await self.client.get_table_fields(table_id)
        relationships = relationships_in_fields(table_id, own_fields, include_field_details)

        tables = await self.client.get_app_tables()
        for table in tables:
            other_id = table.get("id")
            if not other_id or other_id == table_id:
                continue
            other_fields = await self.client.get_table_fields(other_id)
            relationships.extend(
                relationships_in_fields(
                    other_id, other_fields, include_field_details, parent_table_id=table_id
                )
            )

        logger.debug(f"Found {len(relationships)} relationship(s) touching {table_id}")
        return RelationshipDetails(table_id=table_id, relationships=relationships)
