"""Pure checks used by the relationship validator.

Each check returns a list of issues (empty when the check passes) or the
values it derived, so it can be tested without a client.
"""

from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from QBMCP.client import RECORD_ID_FIELD, record_field_value


def normalize_key(value: Any) -> Any:
    """Coerce record-id-like values so 7, 7.0 and "7" compare equal.

    Returns None for empty values (null, blank string, empty list).
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        if stripped.lstrip("-").isdigit():
            return int(stripped)
        return stripped
    if isinstance(value, (list, tuple)) and not value:
        return None
    return value


def check_foreign_key_field(
    fields: List[Dict[str, Any]], foreign_key_field_id: int, child_table_id: str
) -> List[str]:
    """The foreign key field must exist on the child table and be a reference field."""
    for field in fields:
        if field.get("id") == foreign_key_field_id:
            field_type = field.get("fieldType")
            if field_type != "reference":
                label = field.get("label", "")
                return [
                    f"Field {foreign_key_field_id} ('{label}') in child table {child_table_id} "
                    f"is of type '{field_type}', expected 'reference'"
                ]
            return []
    return [f"Foreign key field {foreign_key_field_id} not found in child table {child_table_id}"]


def collect_foreign_keys(
    records: Iterable[Dict[str, Any]], foreign_key_field_id: int
) -> List[Tuple[Any, Any]]:
    """(child record id, normalized foreign key) for every record with a non-empty key."""
    pairs = []
    for record in records:
        key = normalize_key(record_field_value(record, foreign_key_field_id))
        if key is None:
            continue
        pairs.append((record_field_value(record, RECORD_ID_FIELD), key))
    return pairs


def find_orphaned_records(
    foreign_keys: Iterable[Tuple[Any, Any]], parent_ids: Iterable[Any]
) -> Tuple[List[Any], List[Any]]:
    """
    Split out child records whose key has no matching parent id.
    
    Args:
        foreign_keys: (child record id, foreign key) pairs
        parent_ids: Existing parent record ids
        
    Returns:
        (orphaned child record ids in scan order, distinct dangling keys in
        first-seen order)
    """
    existing: Set[Any] = {normalize_key(p) for p in parent_ids}
    orphans: List[Any] = []
    dangling: List[Any] = []
    seen_dangling: Set[Any] = set()
    for record_id, key in foreign_keys:
        if key in existing:
            continue
        orphans.append(record_id)
        if key not in seen_dangling:
            seen_dangling.add(key)
            dangling.append(key)
    return orphans, dangling


def orphan_issue(count: int, child_table_id: str, foreign_key_field_id: int) -> Optional[str]:
    if count == 0:
        return None
    noun = "record" if count == 1 else "records"
    return (
        f"Found {count} orphaned {noun} in child table {child_table_id}: "
        f"field {foreign_key_field_id} references a parent record that does not exist"
    )
