"""Type definitions for relationship integrity checks."""

from typing import Any, List

from pydantic import Field

from QBMCP.orchestration.relationships.types import _CamelModel


class IntegrityResult(_CamelModel):
    """Outcome of validating one reference relationship.

    ``orphaned_records`` holds child record ids (field 3) whose foreign key
    names a parent record that does not exist; ``dangling_parent_ids`` holds
    the distinct missing parent ids themselves.
    """
    parent_table_id: str
    child_table_id: str
    foreign_key_field_id: int
    is_valid: bool
    issues: List[str] = Field(default_factory=list)
    orphaned_records: List[Any] = Field(default_factory=list)
    dangling_parent_ids: List[Any] = Field(default_factory=list)
    scanned_records: int = 0
    truncated: bool = False


class OrphanScan(_CamelModel):
    orphaned_records: List[Any] = Field(default_factory=list)
    dangling_parent_ids: List[Any] = Field(default_factory=list)
    scanned_records: int = 0
    truncated: bool = False
