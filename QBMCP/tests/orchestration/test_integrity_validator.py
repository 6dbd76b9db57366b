"""Tests for relationship integrity validation."""

import pytest

from QBMCP.client import QuickBaseAPIError, QuickBaseNotFoundError
from QBMCP.orchestration.integrity import (
    RelationshipValidator,
    check_foreign_key_field,
    find_orphaned_records,
    normalize_key,
)

CHILD_FIELDS = [
    {"id": 3, "label": "Record ID#", "fieldType": "recordid"},
    {"id": 6, "label": "Title", "fieldType": "text"},
    {"id": 15, "label": "Related Company", "fieldType": "reference", "properties": {"parentTableId": "bqparent"}},
]


def _row(record_id, fk):
    return {"3": {"value": record_id}, "15": {"value": fk}}


def _page(rows, total=None):
    body = {"data": rows, "metadata": {"numRecords": len(rows)}}
    if total is not None:
        body["metadata"]["totalRecords"] = total
    return body


def _queries(qb_client, table_id):
    return [c for c in qb_client.query_records.await_args_list if c.args[0] == table_id]


class TestPureChecks:
    def test_normalize_key(self):
        assert normalize_key("7") == 7
        assert normalize_key(7.0) == 7
        assert normalize_key(" ") is None
        assert normalize_key(None) is None
        assert normalize_key([]) is None
        assert normalize_key("abc") == "abc"

    def test_foreign_key_field_checks(self):
        assert check_foreign_key_field(CHILD_FIELDS, 15, "bqchild") == []
        missing = check_foreign_key_field(CHILD_FIELDS, 99, "bqchild")
        assert len(missing) == 1 and "not found" in missing[0]
        wrong = check_foreign_key_field(CHILD_FIELDS, 6, "bqchild")
        assert len(wrong) == 1 and "expected 'reference'" in wrong[0]

    def test_find_orphans_returns_child_ids(self):
        orphans, dangling = find_orphaned_records(
            [(101, 1), (102, 2), (103, 999), (104, 999)], parent_ids=[1, 2]
        )
        assert orphans == [103, 104]
        assert dangling == [999]


class TestValidateRelationship:
    async def test_valid_relationship(self, qb_client):
        qb_client.get_table_info.return_value = {"id": "x"}
        qb_client.get_table_fields.return_value = CHILD_FIELDS
        qb_client.query_records.side_effect = [
            _page([_row(101, 1), _row(102, 2)], total=2),
            _page([{"3": {"value": 1}}, {"3": {"value": 2}}]),
        ]
        validator = RelationshipValidator(qb_client, page_size=1000)

        result = await validator.validate_relationship("bqparent", "bqchild", 15)

        assert result.is_valid is True
        assert result.issues == []
        assert result.orphaned_records == []
        assert result.scanned_records == 2
        assert result.truncated is False

    async def test_orphan_scenario_1_2_999(self, qb_client):
        qb_client.get_table_info.return_value = {"id": "x"}
        qb_client.get_table_fields.return_value = CHILD_FIELDS
        qb_client.query_records.side_effect = [
            _page([_row(101, 1), _row(102, 2), _row(103, 999)], total=3),
            # Parent holds only 1 and 2
            _page([{"3": {"value": 1}}, {"3": {"value": 2}}]),
        ]
        validator = RelationshipValidator(qb_client)

        result = await validator.validate_relationship("bqparent", "bqchild", 15)

        assert result.is_valid is False
        assert result.orphaned_records == [103]
        assert result.dangling_parent_ids == [999]
        assert len(result.issues) == 1
        assert "1 orphaned record" in result.issues[0]

        parent_query = _queries(qb_client, "bqparent")[0].args[1]
        assert parent_query.where == "{3.EX.1}OR{3.EX.2}OR{3.EX.999}"

    async def test_empty_foreign_keys_are_not_orphans(self, qb_client):
        qb_client.get_table_info.return_value = {"id": "x"}
        qb_client.get_table_fields.return_value = CHILD_FIELDS
        qb_client.query_records.side_effect = [
            _page([_row(101, None), _row(102, ""), _row(103, 1)], total=3),
            _page([{"3": {"value": 1}}]),
        ]
        validator = RelationshipValidator(qb_client)

        result = await validator.validate_relationship("bqparent", "bqchild", 15)

        assert result.is_valid is True

    async def test_missing_parent_table(self, qb_client):
        qb_client.get_table_info.side_effect = [
            QuickBaseNotFoundError("Table not found", status_code=404),
            {"id": "bqchild"},
        ]
        validator = RelationshipValidator(qb_client)

        result = await validator.validate_relationship("bqgone", "bqchild", 15)

        assert result.is_valid is False
        assert any("parent table" in issue.lower() for issue in result.issues)
        qb_client.get_table_fields.assert_not_awaited()
        qb_client.query_records.assert_not_awaited()

    async def test_both_tables_missing_accumulates(self, qb_client):
        qb_client.get_table_info.side_effect = QuickBaseNotFoundError("Table not found", status_code=404)
        validator = RelationshipValidator(qb_client)

        result = await validator.validate_relationship("bqp", "bqc", 15)

        assert len(result.issues) == 2
        assert "Parent table bqp" in result.issues[0]
        assert "Child table bqc" in result.issues[1]

    async def test_wrong_field_kind_stops_before_scan(self, qb_client):
        qb_client.get_table_info.return_value = {"id": "x"}
        qb_client.get_table_fields.return_value = CHILD_FIELDS
        validator = RelationshipValidator(qb_client)

        result = await validator.validate_relationship("bqparent", "bqchild", 6)

        assert result.is_valid is False
        assert "expected 'reference'" in result.issues[0]
        qb_client.query_records.assert_not_awaited()

    async def test_other_remote_failures_propagate(self, qb_client):
        qb_client.get_table_info.side_effect = QuickBaseAPIError("Unauthorized", status_code=401)
        validator = RelationshipValidator(qb_client)

        with pytest.raises(QuickBaseAPIError):
            await validator.validate_relationship("bqp", "bqc", 15)

    async def test_scan_is_paginated(self, qb_client):
        qb_client.get_table_info.return_value = {"id": "x"}
        qb_client.get_table_fields.return_value = CHILD_FIELDS
        qb_client.query_records.side_effect = [
            _page([_row(101, 1), _row(102, 1)], total=5),
            _page([_row(103, 2), _row(104, 2)], total=5),
            _page([_row(105, 3)], total=5),
            _page([{"3": {"value": 1}}, {"3": {"value": 2}}, {"3": {"value": 3}}]),
        ]
        validator = RelationshipValidator(qb_client, page_size=2)

        result = await validator.validate_relationship("bqparent", "bqchild", 15)

        child_queries = _queries(qb_client, "bqchild")
        assert [c.args[1].skip for c in child_queries] == [0, 2, 4]
        assert all(c.args[1].top == 2 for c in child_queries)
        assert result.scanned_records == 5
        assert result.is_valid is True

    async def test_short_page_below_total_keeps_scanning(self, qb_client):
        qb_client.get_table_info.return_value = {"id": "x"}
        qb_client.get_table_fields.return_value = CHILD_FIELDS
        qb_client.query_records.side_effect = [
            # Server caps the first page at 500 even though 1000 were asked for
            _page([_row(i, 1) for i in range(1, 501)], total=600),
            _page([_row(i, 999) for i in range(501, 601)], total=600),
            _page([{"3": {"value": 1}}]),
        ]
        validator = RelationshipValidator(qb_client, page_size=1000)

        result = await validator.validate_relationship("bqparent", "bqchild", 15)

        child_queries = _queries(qb_client, "bqchild")
        assert [c.args[1].skip for c in child_queries] == [0, 500]
        for call in child_queries:
            assert [(s.field_id, s.order) for s in call.args[1].sort_by] == [(3, "ASC")]
        assert result.scanned_records == 600
        assert result.truncated is False
        assert result.is_valid is False
        assert result.orphaned_records == list(range(501, 601))
        assert result.dangling_parent_ids == [999]

    async def test_short_page_without_total_ends_scan(self, qb_client):
        qb_client.get_table_info.return_value = {"id": "x"}
        qb_client.get_table_fields.return_value = CHILD_FIELDS
        qb_client.query_records.side_effect = [
            {"data": [_row(101, 1), _row(102, 2)]},
            _page([{"3": {"value": 1}}, {"3": {"value": 2}}]),
        ]
        validator = RelationshipValidator(qb_client, page_size=5)

        result = await validator.validate_relationship("bqparent", "bqchild", 15)

        assert len(_queries(qb_client, "bqchild")) == 1
        assert result.scanned_records == 2
        assert result.is_valid is True

    async def test_scan_cap_marks_truncated_without_issue(self, qb_client):
        qb_client.get_table_info.return_value = {"id": "x"}
        qb_client.get_table_fields.return_value = CHILD_FIELDS
        qb_client.query_records.side_effect = [
            _page([_row(101, 1), _row(102, 1)], total=10),
            _page([{"3": {"value": 1}}]),
        ]
        validator = RelationshipValidator(qb_client, page_size=2, max_scan_records=2)

        result = await validator.validate_relationship("bqparent", "bqchild", 15)

        assert result.truncated is True
        assert result.scanned_records == 2
        assert result.is_valid is True

    async def test_parent_ids_resolved_in_batches(self, qb_client):
        qb_client.get_table_info.return_value = {"id": "x"}
        qb_client.get_table_fields.return_value = CHILD_FIELDS
        qb_client.query_records.side_effect = [
            _page([_row(100 + i, i) for i in range(1, 6)], total=5),
            _page([{"3": {"value": 1}}, {"3": {"value": 2}}]),
            _page([{"3": {"value": 3}}, {"3": {"value": 4}}]),
            _page([]),
        ]
        validator = RelationshipValidator(qb_client, parent_batch_size=2)

        result = await validator.validate_relationship("bqparent", "bqchild", 15)

        assert len(_queries(qb_client, "bqparent")) == 3
        assert result.orphaned_records == [105]
        assert result.dangling_parent_ids == [5]

    async def test_response_shape(self, qb_client):
        qb_client.get_table_info.side_effect = QuickBaseNotFoundError("gone", status_code=404)
        validator = RelationshipValidator(qb_client)

        result = await validator.validate_relationship("bqp", "bqc", 15)
        payload = result.to_response()

        assert payload["isValid"] is False
        assert payload["orphanedRecords"] == []
        assert payload["danglingParentIds"] == []
        assert "issues" in payload
