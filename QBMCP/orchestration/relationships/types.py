"""Types for relationship and junction builds and relationship inspection.

Results serialize with camelCase keys (``model_dump(by_alias=True)``) since
that is what agents see.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from QBMCP.client.types import FieldType


class RelationshipKind(str, Enum):
    ONE_TO_MANY = "one-to-many"
    MANY_TO_MANY = "many-to-many"


def normalize_relationship_kind(value: Optional[str]) -> RelationshipKind:
    """
    Normalize a relationship kind; blank means one-to-many.

    Raises:
        ValueError: For anything other than one-to-many / many-to-many
    """
    if isinstance(value, RelationshipKind):
        return value
    raw = (value or "").strip().lower().replace("_", "-").replace(" ", "-")
    if not raw:
        return RelationshipKind.ONE_TO_MANY
    if raw in {"1:n", "one-to-many"}:
        return RelationshipKind.ONE_TO_MANY
    if raw in {"n:m", "m:n", "many-to-many"}:
        return RelationshipKind.MANY_TO_MANY
    raise ValueError(f"Unsupported relationship kind: {value!r}")


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_response(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class LookupSpec(_CamelModel):
    """One parent attribute to mirror onto the child table."""
    parent_field_id: int
    child_field_label: str = Field(..., min_length=1, max_length=128)


class ExtraFieldSpec(_CamelModel):
    label: str = Field(..., min_length=1, max_length=128)
    field_type: FieldType = "text"


class RelationshipBuildResult(_CamelModel):
    parent_table_id: str
    child_table_id: str
    relationship_kind: RelationshipKind
    reference_field_id: int
    lookup_field_ids: List[int] = Field(default_factory=list)


class JunctionBuildResult(_CamelModel):
    junction_table_id: str
    table1_id: str
    table2_id: str
    table1_reference_field_id: int
    table2_reference_field_id: int
    extra_field_ids: List[int] = Field(default_factory=list)


class FieldSummary(_CamelModel):
    id: int
    label: str


class RelationshipDetail(_CamelModel):
    parent_table_id: Optional[str] = None
    child_table_id: str
    reference_field_id: int
    reference_field_label: Optional[str] = None
    # None when field details were not requested
    lookup_fields: Optional[List[FieldSummary]] = None


class RelationshipDetails(_CamelModel):
    table_id: str
    relationships: List[RelationshipDetail] = Field(default_factory=list)
