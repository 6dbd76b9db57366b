"""Relationship and junction table builders plus the relationship inspector."""

from .types import (
    RelationshipKind,
    normalize_relationship_kind,
    LookupSpec,
    ExtraFieldSpec,
    RelationshipBuildResult,
    JunctionBuildResult,
    FieldSummary,
    RelationshipDetail,
    RelationshipDetails,
)
from .builder import RelationshipBuilder
from .junction import JunctionTableBuilder
from .inspector import RelationshipInspector

__all__ = [
    "RelationshipKind",
    "normalize_relationship_kind",
    "LookupSpec",
    "ExtraFieldSpec",
    "RelationshipBuildResult",
    "JunctionBuildResult",
    "FieldSummary",
    "RelationshipDetail",
    "RelationshipDetails",
    "RelationshipBuilder",
    "JunctionTableBuilder",
    "RelationshipInspector",
]
