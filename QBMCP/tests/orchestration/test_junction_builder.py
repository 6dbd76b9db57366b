"""Tests for the junction table builder."""

import pytest

from QBMCP.client import QuickBaseAPIError
from QBMCP.orchestration.relationships import ExtraFieldSpec, JunctionTableBuilder
from QBMCP.orchestration.step_registry import OPERATION_BUILD_JUNCTION_TABLE, estimate_remote_calls
from QBMCP.utils.error_handling import BuildStepError


class TestBuildJunctionTable:
    async def test_orders_products_without_extras(self, qb_client):
        qb_client.create_table.return_value = "bqjunc"
        qb_client.create_field.side_effect = [10, 11]
        builder = JunctionTableBuilder(qb_client)

        result = await builder.build_junction_table("Orders_Products", "tblA", "tblB", "Order", "Product", [])

        assert result.junction_table_id == "bqjunc"
        assert result.junction_table_id not in {"tblA", "tblB"}
        assert result.table1_reference_field_id == 10
        assert result.table2_reference_field_id == 11
        assert result.extra_field_ids == []

        assert qb_client.create_table.await_args.args[0].name == "Orders_Products"
        calls = [c.args for c in qb_client.create_field.await_args_list]
        assert len(calls) == 2
        assert calls[0][0] == "bqjunc" and calls[0][1].parent_table_id == "tblA"
        assert calls[0][1].label == "Order"
        assert calls[1][0] == "bqjunc" and calls[1][1].parent_table_id == "tblB"
        assert calls[1][1].label == "Product"
        assert all(c[1].field_type == "reference" for c in calls)

    @pytest.mark.parametrize("extras", [0, 1, 3])
    async def test_three_plus_m_calls(self, qb_client, extras):
        qb_client.create_table.return_value = "bqjunc"
        qb_client.create_field.side_effect = list(range(10, 12 + extras))
        builder = JunctionTableBuilder(qb_client)
        extra_fields = [{"label": f"Extra {i}", "fieldType": "date"} for i in range(extras)]

        result = await builder.build_junction_table("J", "tblA", "tblB", "A", "B", extra_fields)

        total = qb_client.create_table.await_count + qb_client.create_field.await_count
        assert total == 3 + extras
        assert total == estimate_remote_calls(OPERATION_BUILD_JUNCTION_TABLE, extra_field_count=extras)
        assert result.extra_field_ids == list(range(12, 12 + extras))
        for i, call in enumerate(qb_client.create_field.await_args_list[2:]):
            assert call.args[1].label == f"Extra {i}"
            assert call.args[1].field_type == "date"

    async def test_second_reference_failure_keeps_table(self, qb_client):
        qb_client.create_table.return_value = "bqjunc"
        qb_client.create_field.side_effect = [10, QuickBaseAPIError("Invalid parent table", status_code=400)]
        builder = JunctionTableBuilder(qb_client)

        with pytest.raises(BuildStepError) as exc_info:
            await builder.build_junction_table(
                "J", "tblA", "tblMissing", "A", "B", [ExtraFieldSpec(label="Qty", field_type="numeric")]
            )

        context = exc_info.value.context
        assert context.step_id == "JCT_S3_TABLE2_REFERENCE"
        assert context.table_id == "bqjunc"
        assert context.created == {"junctionTableId": "bqjunc", "table1ReferenceFieldId": 10}
        qb_client.delete_table.assert_not_awaited()
        assert qb_client.create_field.await_count == 2

    async def test_table_failure_stops_before_fields(self, qb_client):
        qb_client.create_table.side_effect = QuickBaseAPIError("Name in use", status_code=400)
        builder = JunctionTableBuilder(qb_client)

        with pytest.raises(BuildStepError) as exc_info:
            await builder.build_junction_table("J", "tblA", "tblB", "A", "B")

        assert exc_info.value.context.step_id == "JCT_S1_TABLE"
        assert exc_info.value.context.created == {}
        qb_client.create_field.assert_not_awaited()

    async def test_result_serializes_camel_case(self, qb_client):
        qb_client.create_table.return_value = "bqjunc"
        qb_client.create_field.side_effect = [10, 11]
        builder = JunctionTableBuilder(qb_client)

        result = await builder.build_junction_table("J", "tblA", "tblB", "A", "B")

        assert result.to_response() == {
            "junctionTableId": "bqjunc",
            "table1Id": "tblA",
            "table2Id": "tblB",
            "table1ReferenceFieldId": 10,
            "table2ReferenceFieldId": 11,
            "extraFieldIds": [],
        }
