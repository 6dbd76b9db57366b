"""Relationship integrity validator.

Checks run in categories and stop after the first category that reports
issues: (1) both tables exist, (2) the foreign key field is a reference
field, (3) no child record points at a missing parent record. Read-only.
"""

from typing import Any, Dict, List, Optional, Tuple

from QBMCP.client import (
    RECORD_ID_FIELD,
    QueryOptions,
    QuickBaseClient,
    QuickBaseNotFoundError,
    SortSpec,
    record_field_value,
    record_id_where,
)
from QBMCP.config import get_config
from QBMCP.utils.logging import get_logger

from .checks import (
    check_foreign_key_field,
    collect_foreign_keys,
    find_orphaned_records,
    normalize_key,
    orphan_issue,
)
from .types import IntegrityResult, OrphanScan

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 1000
DEFAULT_MAX_SCAN_RECORDS = 50000
DEFAULT_PARENT_BATCH_SIZE = 100


class RelationshipValidator:
    """
    Args:
        client: QuickBase client
        page_size: Child records fetched per query
        max_scan_records: Cap on child records scanned per validation
        parent_batch_size: Parent ids resolved per query
    """

    def __init__(
        self,
        client: QuickBaseClient,
        page_size: Optional[int] = None,
        max_scan_records: Optional[int] = None,
        parent_batch_size: Optional[int] = None,
    ):
        section = get_config("integrity")
        self.client = client
        self.page_size = page_size or int(section.get("page_size", DEFAULT_PAGE_SIZE))
        self.max_scan_records = max_scan_records or int(
            section.get("max_scan_records", DEFAULT_MAX_SCAN_RECORDS)
        )
        self.parent_batch_size = parent_batch_size or int(
            section.get("parent_batch_size", DEFAULT_PARENT_BATCH_SIZE)
        )

    async def _table_exists(self, table_id: str) -> bool:
        try:
            await self.client.get_table_info(table_id)
            return True
        except QuickBaseNotFoundError:
            return False

    async def validate_relationship(
        self, parent_table_id: str, child_table_id: str, foreign_key_field_id: int
    ) -> IntegrityResult:
        """
        Validate a (parent, child, foreign key field) relationship.
        
        Missing tables and fields become issues; any other remote failure
        propagates.
        
        Returns:
            IntegrityResult; ``is_valid`` is True iff ``issues`` is empty
        """
        result = IntegrityResult(
            parent_table_id=parent_table_id,
            child_table_id=child_table_id,
            foreign_key_field_id=foreign_key_field_id,
            is_valid=False,
        )

        # Category 1: tables
        if not await self._table_exists(parent_table_id):
            result.issues.append(f"Parent table {parent_table_id} not found")
        if not await self._table_exists(child_table_id):
            result.issues.append(f"Child table {child_table_id} not found")
        if result.issues:
            return self._finish(result)

        # Category 2: foreign key field
        fields = await self.client.get_table_fields(child_table_id)
        result.issues.extend(check_foreign_key_field(fields, foreign_key_field_id, child_table_id))
        if result.issues:
            return self._finish(result)

        # Category 3: orphans
        scan = await self.scan_orphans(parent_table_id, child_table_id, foreign_key_field_id)
        result.orphaned_records = scan.orphaned_records
        result.dangling_parent_ids = scan.dangling_parent_ids
        result.scanned_records = scan.scanned_records
        result.truncated = scan.truncated
        issue = orphan_issue(len(scan.orphaned_records), child_table_id, foreign_key_field_id)
        if issue:
            result.issues.append(issue)
        if scan.truncated:
            logger.warning(
                f"Orphan scan of {child_table_id} stopped after {scan.scanned_records} records"
            )
        return self._finish(result)

    @staticmethod
    def _finish(result: IntegrityResult) -> IntegrityResult:
        result.is_valid = not result.issues
        if result.issues:
            logger.info(f"Relationship {result.parent_table_id} -> {result.child_table_id} invalid: {result.issues}")
        return result

    async def scan_orphans(
        self, parent_table_id: str, child_table_id: str, foreign_key_field_id: int
    ) -> OrphanScan:
        """Scan child foreign keys page by page and resolve them against the parent table."""
        foreign_keys, scanned, truncated = await self._scan_child_keys(
            child_table_id, foreign_key_field_id
        )
        distinct_keys = list(dict.fromkeys(key for _, key in foreign_keys))
        parent_ids = await self._existing_parent_ids(parent_table_id, distinct_keys)
        orphans, dangling = find_orphaned_records(foreign_keys, parent_ids)
        return OrphanScan(
            orphaned_records=orphans,
            dangling_parent_ids=dangling,
            scanned_records=scanned,
            truncated=truncated,
        )

    async def _scan_child_keys(
        self, child_table_id: str, foreign_key_field_id: int
    ) -> Tuple[List[Tuple[Any, Any]], int, bool]:
        foreign_keys: List[Tuple[Any, Any]] = []
        scanned = 0
        total: Optional[int] = None
        # Stable record id order keeps skip offsets from overlapping between pages
        order = [SortSpec(field_id=RECORD_ID_FIELD, order="ASC")]
        while scanned < self.max_scan_records:
            top = min(self.page_size, self.max_scan_records - scanned)
            body = await self.client.query_records(
                child_table_id,
                QueryOptions(
                    select=[RECORD_ID_FIELD, foreign_key_field_id], sort_by=order, top=top, skip=scanned
                ),
            )
            page = body.get("data") or []
            scanned += len(page)
            foreign_keys.extend(collect_foreign_keys(page, foreign_key_field_id))

            total = (body.get("metadata") or {}).get("totalRecords")
            if not page:
                return foreign_keys, scanned, False
            if total is not None:
                # QuickBase may cap a page below ``top``; only the total ends the scan
                if scanned >= total:
                    return foreign_keys, scanned, False
            elif len(page) < top:
                return foreign_keys, scanned, False

        # Cap reached; truncated only if the table holds more
        if total is not None:
            return foreign_keys, scanned, total > scanned
        next_page = await self.client.query_records(
            child_table_id,
            QueryOptions(select=[RECORD_ID_FIELD], sort_by=order, top=1, skip=scanned),
        )
        return foreign_keys, scanned, bool(next_page.get("data"))

    async def _existing_parent_ids(self, parent_table_id: str, keys: List[Any]) -> List[Any]:
        # Only integer keys can name a parent record id
        candidates = [k for k in keys if isinstance(k, int) and not isinstance(k, bool)]
        found: List[Any] = []
        for start in range(0, len(candidates), self.parent_batch_size):
            batch = candidates[start:start + self.parent_batch_size]
            body = await self.client.query_records(
                parent_table_id,
                QueryOptions(select=[RECORD_ID_FIELD], where=record_id_where(batch)),
            )
            for record in body.get("data") or []:
                found.append(normalize_key(record_field_value(record, RECORD_ID_FIELD)))
        return found
