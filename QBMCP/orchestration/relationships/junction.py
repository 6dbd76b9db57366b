"""Junction table builder for many-to-many relationships."""

from typing import Any, Dict, List, Optional, Sequence, Union

from QBMCP.client import QuickBaseClient
from QBMCP.orchestration.step_registry import OPERATION_BUILD_JUNCTION_TABLE, estimate_remote_calls
from QBMCP.utils.logging import get_logger

from .steps import create_plain_field, create_reference_field, create_table, run_build_step
from .types import ExtraFieldSpec, JunctionBuildResult

logger = get_logger(__name__)


class JunctionTableBuilder:
    def __init__(self, client: QuickBaseClient):
        self.client = client

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
        """
        Create a table carrying a reference to each of two tables.
        
        Steps run strictly in order: table, reference to table1, reference to
        table2, then extra fields in input order. A partially built junction
        table is left in place on failure.
        
        Args:
            name: Junction table name
            table1_id: First connected table
            table2_id: Second connected table
            table1_label: Label of the reference field to table1
            table2_label: Label of the reference field to table2
            extra_fields: Additional (label, field_type) fields
            description: Optional table description
            
        Returns:
            JunctionBuildResult
        """
        for value, arg in ((table1_id, "table1_id"), (table2_id, "table2_id")):
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"{arg} must be a non-empty table id")
        if not name or not name.strip():
            raise ValueError("Junction table name must not be empty")
        extras: List[ExtraFieldSpec] = [
            f if isinstance(f, ExtraFieldSpec) else ExtraFieldSpec.model_validate(f)
            for f in (extra_fields or [])
        ]

        planned = estimate_remote_calls(OPERATION_BUILD_JUNCTION_TABLE, extra_field_count=len(extras))
        logger.info(
            f"Building junction table '{name}' between {table1_id} and {table2_id}, "
            f"{planned} remote call(s) planned"
        )

        op = OPERATION_BUILD_JUNCTION_TABLE
        created: Dict[str, Any] = {}
        junction_id = await run_build_step(
            op, "JCT_S1_TABLE", create_table(self.client, name, description), created, name=name
        )
        created["junctionTableId"] = junction_id

        table1_ref = await run_build_step(
            op,
            "JCT_S2_TABLE1_REFERENCE",
            create_reference_field(self.client, junction_id, table1_id, table1_label),
            created,
            table_id=junction_id,
            label=table1_label,
        )
        created["table1ReferenceFieldId"] = table1_ref

        table2_ref = await run_build_step(
            op,
            "JCT_S3_TABLE2_REFERENCE",
            create_reference_field(self.client, junction_id, table2_id, table2_label),
            created,
            table_id=junction_id,
            label=table2_label,
        )
        created["table2ReferenceFieldId"] = table2_ref

        extra_ids: List[int] = []
        created["extraFieldIds"] = extra_ids
        for spec in extras:
            field_id = await run_build_step(
                op,
                "JCT_S4_EXTRA_FIELDS",
                create_plain_field(self.client, junction_id, spec),
                created,
                table_id=junction_id,
                label=spec.label,
            )
            extra_ids.append(field_id)

        return JunctionBuildResult(
            junction_table_id=junction_id,
            table1_id=table1_id,
            table2_id=table2_id,
            table1_reference_field_id=table1_ref,
            table2_reference_field_id=table2_ref,
            extra_field_ids=extra_ids,
        )
