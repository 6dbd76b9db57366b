"""Relationship integrity validation."""

from .types import IntegrityResult, OrphanScan
from .checks import (
    normalize_key,
    check_foreign_key_field,
    collect_foreign_keys,
    find_orphaned_records,
    orphan_issue,
)
from .validator import RelationshipValidator

__all__ = [
    "IntegrityResult",
    "OrphanScan",
    "normalize_key",
    "check_foreign_key_field",
    "collect_foreign_keys",
    "find_orphaned_records",
    "orphan_issue",
    "RelationshipValidator",
]
