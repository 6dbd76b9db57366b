"""Tests for the tool endpoints."""

from fastapi.testclient import TestClient

from QBMCP.client import QuickBaseAPIError, QuickBaseNotFoundError
from QBMCP.policy import ToolPolicy
from backend.dependencies import get_dispatcher
from backend.main import app


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_list_tools(client):
    response = client.get("/api/tools")

    assert response.status_code == 200
    tools = response.json()["tools"]
    names = [tool["name"] for tool in tools]
    assert len(names) == 26
    assert len(set(names)) == 26
    assert all(name.startswith("quickbase_") for name in names)

    junction = next(t for t in tools if t["name"] == "quickbase_create_junction_table")
    schema = junction["inputSchema"]
    assert schema["type"] == "object"
    assert {"junctionTableName", "table1Id", "table2Id", "additionalFields", "confirm"} <= set(schema["properties"])
    assert "confirm" not in schema.get("required", [])
    assert "table1FieldLabel" in schema["required"]


def test_read_tool_returns_result(client, qb_client):
    qb_client.get_app_tables.return_value = [{"id": "bqorders", "name": "Orders"}]

    response = client.post("/api/tools/quickbase_get_tables", json={})

    assert response.status_code == 200
    body = response.json()
    assert body["tool"] == "quickbase_get_tables"
    assert body["success"] is True
    assert body["result"] == [{"id": "bqorders", "name": "Orders"}]


def test_call_without_body(client, qb_client):
    qb_client.get_app_info.return_value = {"id": "bqapp", "name": "Sales"}

    response = client.post("/api/tools/quickbase_get_app_info")

    assert response.status_code == 200
    assert response.json()["result"]["name"] == "Sales"


def test_unknown_tool(client):
    response = client.post("/api/tools/quickbase_drop_everything", json={})

    assert response.status_code == 404
    assert "Unknown tool: quickbase_drop_everything" in response.json()["detail"]


def test_confirmation_required(client, qb_client):
    response = client.post("/api/tools/quickbase_create_table", json={"name": "Orders"})

    assert response.status_code == 403
    body = response.json()
    assert body["reason"] == "confirmation_required"
    assert body["message"] == (
        'Tool "quickbase_create_table" can modify data or schema and requires confirmation. '
        'Re-run with { "confirm": true, ... }.'
    )
    qb_client.create_table.assert_not_awaited()


def test_confirmation_must_be_literal_true(client, qb_client):
    response = client.post("/api/tools/quickbase_create_table", json={"name": "Orders", "confirm": "true"})

    assert response.status_code == 403
    qb_client.create_table.assert_not_awaited()


def test_confirmed_create_table(client, qb_client):
    qb_client.create_table.return_value = "bqnew"

    response = client.post("/api/tools/quickbase_create_table", json={"name": "Orders", "confirm": True})

    assert response.status_code == 200
    assert response.json()["result"] == {"tableId": "bqnew", "message": "Table created with ID: bqnew"}


def test_read_only_mode(make_dispatcher, qb_client):
    read_only = make_dispatcher(ToolPolicy(read_only=True))
    app.dependency_overrides[get_dispatcher] = lambda: read_only
    try:
        client = TestClient(app)
        denied = client.post("/api/tools/quickbase_create_table", json={"name": "Orders", "confirm": True})
        qb_client.get_app_tables.return_value = []
        allowed = client.post("/api/tools/quickbase_get_tables", json={})
    finally:
        app.dependency_overrides.clear()

    assert denied.status_code == 403
    assert denied.json()["reason"] == "read_only"
    assert "QB_READONLY=true" in denied.json()["message"]
    assert allowed.status_code == 200


def test_destructive_disabled_by_default(client, qb_client):
    response = client.post("/api/tools/quickbase_delete_table", json={"tableId": "bqorders"})

    assert response.status_code == 403
    assert response.json()["reason"] == "destructive_disabled"
    qb_client.delete_table.assert_not_awaited()


def test_oversized_record_payload_rejected(client, qb_client):
    response = client.post(
        "/api/tools/quickbase_create_record",
        json={"tableId": "bqorders", "fields": {"6": "x" * 10001}, "confirm": True},
    )

    assert response.status_code == 422
    body = response.json()
    assert body["message"].startswith("Invalid arguments for quickbase_create_record:")
    assert "String value too long" in body["message"]
    qb_client.create_record.assert_not_awaited()


def test_bulk_create_limit(client, qb_client):
    records = [{"fields": {"6": f"row {i}"}} for i in range(251)]

    response = client.post(
        "/api/tools/quickbase_bulk_create_records",
        json={"tableId": "bqorders", "records": records, "confirm": True},
    )

    assert response.status_code == 422
    assert "At most 250 records" in response.json()["message"]
    qb_client.create_records.assert_not_awaited()


def test_missing_required_argument(client):
    response = client.post("/api/tools/quickbase_get_table_fields", json={})

    assert response.status_code == 422
    assert "tableId" in response.json()["message"]


def test_validate_relationship(client, qb_client):
    qb_client.get_table_info.return_value = {"id": "bq"}
    qb_client.get_table_fields.return_value = [{"id": 7, "label": "Order", "fieldType": "reference"}]
    qb_client.query_records.return_value = {"data": [], "metadata": {"totalRecords": 0}}

    response = client.post(
        "/api/tools/quickbase_validate_relationship",
        json={"parentTableId": "bqorders", "childTableId": "bqlines", "foreignKeyFieldId": 7},
    )

    assert response.status_code == 200
    result = response.json()["result"]
    assert result["isValid"] is True
    assert result["issues"] == []
    assert result["orphanedRecords"] == []


def test_partial_junction_build_reports_created_ids(client, qb_client, junction_args):
    qb_client.create_table.return_value = "bqjunc"
    qb_client.create_field.side_effect = [10, 11, QuickBaseAPIError("Bad field type", status_code=400)]

    response = client.post("/api/tools/quickbase_create_junction_table", json=junction_args)

    assert response.status_code == 502
    body = response.json()
    assert body["success"] is False
    assert body["error"]["type"] == "BuildStepError"
    assert body["error"]["step_id"] == "JCT_S4_EXTRA_FIELDS"
    assert body["created"] == {
        "junctionTableId": "bqjunc",
        "table1ReferenceFieldId": 10,
        "table2ReferenceFieldId": 11,
        "extraFieldIds": [],
    }
    qb_client.delete_table.assert_not_awaited()


def test_remote_error_maps_to_502(client, qb_client):
    qb_client.get_table_info.side_effect = QuickBaseNotFoundError(
        "Table not found", status_code=404, method="GET", path="/tables/bqgone"
    )

    response = client.post("/api/tools/quickbase_get_table_info", json={"tableId": "bqgone"})

    assert response.status_code == 502
    error = response.json()["error"]
    assert error["type"] == "QuickBaseNotFoundError"
    assert error["operation"] == "quickbase_get_table_info"
    assert "Table not found" in error["message"]
