"""The QuickBase tool catalogue.

Each tool has a stable ``quickbase_*`` name, a description, an argument
model (whose JSON schema is advertised) and a handler.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Type

from pydantic import BaseModel

from QBMCP.policy import TOOL_PREFIX
from backend.models import requests as r
from backend.tools import handlers as h


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    args_model: Type[BaseModel]
    handler: Callable[..., Awaitable[Any]]

    def input_schema(self) -> Dict[str, Any]:
        schema = self.args_model.model_json_schema(by_alias=True)
        schema.pop("title", None)
        schema.setdefault("properties", {})
        return schema


def _tool(suffix: str, description: str, args_model: Type[BaseModel], handler) -> ToolSpec:
    return ToolSpec(TOOL_PREFIX + suffix, description, args_model, handler)


_TOOLS: List[ToolSpec] = [
    # Application
    _tool("get_app_info", "Get information about the QuickBase application", r.EmptyArgs, h.get_app_info),
    _tool("get_tables", "Get list of all tables in the application", r.EmptyArgs, h.get_tables),
    _tool("test_connection", "Test connection to QuickBase", r.EmptyArgs, h.test_connection),
    # Tables
    _tool("create_table", "Create a new table in QuickBase", r.CreateTableArgs, h.create_table),
    _tool("get_table_info", "Get detailed information about a specific table", r.TableIdArgs, h.get_table_info),
    _tool("delete_table", "Delete a table from QuickBase", r.TableIdArgs, h.delete_table),
    # Fields
    _tool("get_table_fields", "Get all fields for a table", r.TableIdArgs, h.get_table_fields),
    _tool("create_field", "Create a new field in a table", r.CreateFieldArgs, h.create_field),
    _tool("update_field", "Update an existing field", r.UpdateFieldArgs, h.update_field),
    _tool("delete_field", "Delete a field from a table", r.FieldIdArgs, h.delete_field),
    # Records
    _tool(
        "query_records",
        "Query records from a table with optional filtering and sorting",
        r.QueryRecordsArgs,
        h.query_records,
    ),
    _tool("get_record", "Get a specific record by ID", r.GetRecordArgs, h.get_record),
    _tool("create_record", "Create a new record in a table", r.CreateRecordArgs, h.create_record),
    _tool("update_record", "Update an existing record", r.UpdateRecordArgs, h.update_record),
    _tool("delete_record", "Delete a record from a table", r.RecordIdArgs, h.delete_record),
    _tool("bulk_create_records", "Create multiple records at once", r.BulkCreateArgs, h.bulk_create_records),
    _tool("search_records", "Search for records containing specific text", r.SearchRecordsArgs, h.search_records),
    # Relationships & reports
    _tool(
        "create_relationship",
        "Create a parent-child relationship between tables",
        r.CreateRelationshipArgs,
        h.create_relationship,
    ),
    _tool("get_relationships", "Get relationships for a table", r.TableIdArgs, h.get_relationships),
    _tool("get_reports", "Get all reports for a table", r.TableIdArgs, h.get_reports),
    _tool("run_report", "Run a specific report", r.RunReportArgs, h.run_report),
    _tool(
        "create_advanced_relationship",
        "Create a comprehensive table relationship with automatic lookup fields",
        r.CreateAdvancedRelationshipArgs,
        h.create_advanced_relationship,
    ),
    _tool(
        "create_lookup_field",
        "Create a lookup field to pull data from a related table",
        r.CreateLookupFieldArgs,
        h.create_lookup_field,
    ),
    _tool(
        "validate_relationship",
        "Validate the integrity of a table relationship",
        r.ValidateRelationshipArgs,
        h.validate_relationship,
    ),
    _tool(
        "get_relationship_details",
        "Get detailed information about table relationships including lookup fields",
        r.GetRelationshipDetailsArgs,
        h.get_relationship_details,
    ),
    _tool(
        "create_junction_table",
        "Create a junction table for many-to-many relationships",
        r.CreateJunctionTableArgs,
        h.create_junction_table,
    ),
]

TOOL_CATALOGUE: Dict[str, ToolSpec] = {spec.name: spec for spec in _TOOLS}


def list_tool_specs() -> List[ToolSpec]:
    """All tools in catalogue order."""
    return list(_TOOLS)


def get_tool_spec(name: str) -> ToolSpec:
    """Look up a tool; raises KeyError for unknown names."""
    return TOOL_CATALOGUE[name]
