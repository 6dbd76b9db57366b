"""Tool handlers: one coroutine per tool, taking parsed arguments.

Handlers return JSON-serializable values; formatting for a particular
front-end happens in the dispatcher.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from QBMCP.client import (
    FieldDefinition,
    FieldUpdate,
    QueryOptions,
    QuickBaseClient,
    SortSpec,
    TableDefinition,
)
from QBMCP.orchestration import RelationshipOrchestrator
from backend.models import requests as r


@dataclass
class ToolContext:
    """Collaborators shared by all handlers for one process."""
    client: QuickBaseClient
    orchestrator: RelationshipOrchestrator


# ============================================================================
# Application
# ============================================================================

async def get_app_info(ctx: ToolContext, args: r.EmptyArgs) -> Dict[str, Any]:
    return await ctx.client.get_app_info()


async def get_tables(ctx: ToolContext, args: r.EmptyArgs) -> List[Dict[str, Any]]:
    return await ctx.client.get_app_tables()


async def test_connection(ctx: ToolContext, args: r.EmptyArgs) -> Dict[str, Any]:
    connected = await ctx.client.test_connection()
    return {
        "connected": connected,
        "message": f"Connection {'successful' if connected else 'failed'}",
    }


# ============================================================================
# Tables
# ============================================================================

async def create_table(ctx: ToolContext, args: r.CreateTableArgs) -> Dict[str, Any]:
    table_id = await ctx.client.create_table(
        TableDefinition(name=args.name, description=args.description)
    )
    return {"tableId": table_id, "message": f"Table created with ID: {table_id}"}


async def get_table_info(ctx: ToolContext, args: r.TableIdArgs) -> Dict[str, Any]:
    return await ctx.client.get_table_info(args.table_id)


async def delete_table(ctx: ToolContext, args: r.TableIdArgs) -> Dict[str, Any]:
    await ctx.client.delete_table(args.table_id)
    return {"tableId": args.table_id, "message": f"Table {args.table_id} deleted successfully"}


# ============================================================================
# Fields
# ============================================================================

async def get_table_fields(ctx: ToolContext, args: r.TableIdArgs) -> List[Dict[str, Any]]:
    return await ctx.client.get_table_fields(args.table_id)


async def create_field(ctx: ToolContext, args: r.CreateFieldArgs) -> Dict[str, Any]:
    field_id = await ctx.client.create_field(
        args.table_id,
        FieldDefinition(
            label=args.label,
            field_type=args.field_type,
            required=args.required,
            unique=args.unique,
            choices=args.choices,
            formula=args.formula,
            parent_table_id=args.parent_table_id,
            lookup_table_id=args.lookup_table_id,
            lookup_field_id=args.lookup_field_id,
            reference_field_id=args.reference_field_id,
        ),
    )
    return {"fieldId": field_id, "message": f"Field created with ID: {field_id}"}


async def update_field(ctx: ToolContext, args: r.UpdateFieldArgs) -> Dict[str, Any]:
    await ctx.client.update_field(
        args.table_id,
        args.field_id,
        FieldUpdate(label=args.label, required=args.required, choices=args.choices),
    )
    return {"fieldId": args.field_id, "message": f"Field {args.field_id} updated successfully"}


async def delete_field(ctx: ToolContext, args: r.FieldIdArgs) -> Dict[str, Any]:
    await ctx.client.delete_field(args.table_id, args.field_id)
    return {"fieldId": args.field_id, "message": f"Field {args.field_id} deleted successfully"}


# ============================================================================
# Records
# ============================================================================

async def query_records(ctx: ToolContext, args: r.QueryRecordsArgs) -> List[Dict[str, Any]]:
    sort_by = [SortSpec(field_id=s.field_id, order=s.order) for s in args.sort_by] if args.sort_by else None
    return await ctx.client.get_records(
        args.table_id,
        QueryOptions(select=args.select, where=args.where, sort_by=sort_by, top=args.top, skip=args.skip),
    )


async def get_record(ctx: ToolContext, args: r.GetRecordArgs) -> Optional[Dict[str, Any]]:
    return await ctx.client.get_record(args.table_id, args.record_id, args.field_ids)


async def create_record(ctx: ToolContext, args: r.CreateRecordArgs) -> Dict[str, Any]:
    record_id = await ctx.client.create_record(args.table_id, args.fields)
    return {"recordId": record_id, "message": f"Record created with ID: {record_id}"}


async def update_record(ctx: ToolContext, args: r.UpdateRecordArgs) -> Dict[str, Any]:
    await ctx.client.update_record(args.table_id, args.record_id, args.fields)
    return {"recordId": args.record_id, "message": f"Record {args.record_id} updated successfully"}


async def delete_record(ctx: ToolContext, args: r.RecordIdArgs) -> Dict[str, Any]:
    result = await ctx.client.delete_record(args.table_id, args.record_id)
    return {
        "recordId": args.record_id,
        "numberDeleted": result.get("numberDeleted"),
        "message": f"Record {args.record_id} deleted successfully",
    }


async def bulk_create_records(ctx: ToolContext, args: r.BulkCreateArgs) -> Dict[str, Any]:
    record_ids = await ctx.client.create_records(args.table_id, [rec.fields for rec in args.records])
    return {
        "recordIds": record_ids,
        "message": f"Created {len(record_ids)} records: {', '.join(str(i) for i in record_ids)}",
    }


async def search_records(ctx: ToolContext, args: r.SearchRecordsArgs) -> List[Dict[str, Any]]:
    return await ctx.client.search_records(args.table_id, args.search_term, args.field_ids)


# ============================================================================
# Relationships & reports
# ============================================================================

async def create_relationship(ctx: ToolContext, args: r.CreateRelationshipArgs) -> Dict[str, Any]:
    result = await ctx.client.create_relationship(
        args.parent_table_id, args.child_table_id, args.foreign_key_field_id
    )
    return {
        "result": result,
        "message": f"Relationship created between {args.parent_table_id} and {args.child_table_id}",
    }


async def get_relationships(ctx: ToolContext, args: r.TableIdArgs) -> List[Dict[str, Any]]:
    return await ctx.client.get_relationships(args.table_id)


async def get_reports(ctx: ToolContext, args: r.TableIdArgs) -> List[Dict[str, Any]]:
    return await ctx.client.get_reports(args.table_id)


async def run_report(ctx: ToolContext, args: r.RunReportArgs) -> Dict[str, Any]:
    return await ctx.client.run_report(args.report_id, args.table_id)


async def create_advanced_relationship(
    ctx: ToolContext, args: r.CreateAdvancedRelationshipArgs
) -> Dict[str, Any]:
    result = await ctx.orchestrator.build_relationship(
        args.parent_table_id,
        args.child_table_id,
        args.reference_field_label,
        args.lookup_fields,
        args.relationship_type,
    )
    return result.to_response()


async def create_lookup_field(ctx: ToolContext, args: r.CreateLookupFieldArgs) -> Dict[str, Any]:
    field_id = await ctx.orchestrator.build_lookup_field(
        args.child_table_id,
        args.parent_table_id,
        args.reference_field_id,
        args.parent_field_id,
        args.lookup_field_label,
    )
    return {"lookupFieldId": field_id, "message": f"Lookup field created with ID: {field_id}"}


async def validate_relationship(ctx: ToolContext, args: r.ValidateRelationshipArgs) -> Dict[str, Any]:
    result = await ctx.orchestrator.validate_relationship(
        args.parent_table_id, args.child_table_id, args.foreign_key_field_id
    )
    return result.to_response()


async def get_relationship_details(
    ctx: ToolContext, args: r.GetRelationshipDetailsArgs
) -> Dict[str, Any]:
    details = await ctx.orchestrator.get_relationship_details(args.table_id, args.include_fields)
    return details.to_response()


async def create_junction_table(ctx: ToolContext, args: r.CreateJunctionTableArgs) -> Dict[str, Any]:
    result = await ctx.orchestrator.build_junction_table(
        args.junction_table_name,
        args.table1_id,
        args.table2_id,
        args.table1_field_label,
        args.table2_field_label,
        args.additional_fields,
        args.description,
    )
    return result.to_response()
