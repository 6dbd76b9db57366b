"""Argument models for the QuickBase tools.

Field names are snake_case in Python and camelCase on the wire (``tableId``,
``referenceFieldLabel`` ...). The JSON schema of each model is what agents see.
``confirm`` is optional here; the access guard decides whether it is needed.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from QBMCP.client import FieldType
from QBMCP.orchestration.relationships import ExtraFieldSpec, LookupSpec
from QBMCP.utils.validation import get_payload_limits, validate_field_payload

TableId = Annotated[str, Field(min_length=3, max_length=64, description="QuickBase table ID (e.g., \"buXXXXXXX\")")]

# Record field values, checked against the payload shape limits
FieldsPayload = Annotated[Dict[str, Any], AfterValidator(validate_field_payload)]


class ToolArgs(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ConfirmedArgs(ToolArgs):
    confirm: Optional[bool] = Field(
        None, description="Required confirmation for schema- or data-modifying operations (must be true)"
    )


class EmptyArgs(ToolArgs):
    pass


# ----------------------------------------------------------------------------
# Tables
# ----------------------------------------------------------------------------

class TableIdArgs(ToolArgs):
    table_id: TableId


class CreateTableArgs(ConfirmedArgs):
    name: str = Field(..., min_length=1, max_length=128, description="Table name")
    description: Optional[str] = Field(None, max_length=1024, description="Table description")


# ----------------------------------------------------------------------------
# Fields
# ----------------------------------------------------------------------------

class CreateFieldArgs(ConfirmedArgs):
    table_id: TableId
    label: str = Field(..., min_length=1, max_length=128, description="Field label/name")
    field_type: FieldType = Field(..., description="Type of field")
    required: bool = Field(False, description="Whether field is required")
    unique: bool = Field(False, description="Whether field must be unique")
    choices: Optional[List[str]] = Field(None, max_length=500, description="Choices for choice fields")
    formula: Optional[str] = Field(None, max_length=10000, description="Formula for formula fields")
    parent_table_id: Optional[str] = Field(None, description="Parent table ID for reference fields")
    lookup_table_id: Optional[str] = Field(None, min_length=3, max_length=64, description="Table ID for lookup fields")
    lookup_field_id: Optional[int] = Field(None, description="Field ID for lookup fields")
    reference_field_id: Optional[int] = Field(None, description="Reference field ID for lookup fields")

    @field_validator("choices")
    @classmethod
    def _choice_length(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value and any(len(choice) > 256 for choice in value):
            raise ValueError("Choice values are limited to 256 characters")
        return value


class UpdateFieldArgs(ConfirmedArgs):
    table_id: TableId
    field_id: int = Field(..., description="Field ID to update")
    label: Optional[str] = Field(None, min_length=1, max_length=128, description="New field label")
    required: Optional[bool] = Field(None, description="Whether field is required")
    choices: Optional[List[str]] = Field(None, description="New choices for choice fields")


class FieldIdArgs(ToolArgs):
    table_id: TableId
    field_id: int = Field(..., description="Field ID")


# ----------------------------------------------------------------------------
# Records
# ----------------------------------------------------------------------------

class SortArg(ToolArgs):
    field_id: int
    order: Literal["ASC", "DESC"] = "ASC"


class QueryRecordsArgs(ToolArgs):
    table_id: TableId
    select: Optional[List[int]] = Field(None, description="Field IDs to select")
    where: Optional[str] = Field(None, max_length=5000, description="QuickBase query filter")
    sort_by: Optional[List[SortArg]] = Field(None, description="Sort criteria")
    top: Optional[int] = Field(None, ge=1, le=1000, description="Max number of records")
    skip: Optional[int] = Field(None, ge=0, le=100000, description="Number of records to skip")


class GetRecordArgs(ToolArgs):
    table_id: TableId
    record_id: int = Field(..., description="Record ID number")
    field_ids: Optional[List[int]] = Field(None, description="Field IDs to return")


class RecordIdArgs(ToolArgs):
    table_id: TableId
    record_id: int = Field(..., description="Record ID number")


class CreateRecordArgs(ConfirmedArgs):
    table_id: TableId
    fields: FieldsPayload = Field(..., description="Field values as fieldId: value pairs")


class UpdateRecordArgs(ConfirmedArgs):
    table_id: TableId
    record_id: int = Field(..., description="Record ID to update")
    fields: FieldsPayload = Field(..., description="Field values to update as fieldId: value pairs")


class RecordFields(ToolArgs):
    fields: FieldsPayload


class BulkCreateArgs(ConfirmedArgs):
    table_id: TableId
    records: List[RecordFields] = Field(..., description="Array of records to create")

    @field_validator("records")
    @classmethod
    def _bulk_limit(cls, value: List[RecordFields]) -> List[RecordFields]:
        limit = get_payload_limits().max_bulk_records
        if len(value) > limit:
            raise ValueError(f"At most {limit} records can be created at once")
        return value


class SearchRecordsArgs(ToolArgs):
    table_id: TableId
    search_term: str = Field(..., min_length=1, max_length=200, description="Text to search for")
    field_ids: Optional[List[int]] = Field(None, description="Field IDs to search in")


# ----------------------------------------------------------------------------
# Relationships & reports
# ----------------------------------------------------------------------------

class CreateRelationshipArgs(ConfirmedArgs):
    parent_table_id: str = Field(..., min_length=3, max_length=64, description="Parent table ID")
    child_table_id: str = Field(..., min_length=3, max_length=64, description="Child table ID")
    foreign_key_field_id: int = Field(..., description="Foreign key field ID in child table")


class RunReportArgs(ToolArgs):
    report_id: str = Field(..., min_length=1, description="Report ID")
    table_id: TableId


class CreateAdvancedRelationshipArgs(ConfirmedArgs):
    parent_table_id: str = Field(..., min_length=1, description="Parent table ID")
    child_table_id: str = Field(..., min_length=1, description="Child table ID")
    reference_field_label: str = Field(..., min_length=1, max_length=128, description="Label for the reference field to create")
    lookup_fields: Optional[List[LookupSpec]] = Field(None, description="Lookup fields to create automatically")
    relationship_type: Literal["one-to-many", "many-to-many"] = Field(
        "one-to-many", description="Type of relationship"
    )


class CreateLookupFieldArgs(ConfirmedArgs):
    child_table_id: str = Field(..., min_length=1, description="Child table ID where lookup field will be created")
    parent_table_id: str = Field(..., min_length=1, description="Parent table ID to lookup from")
    reference_field_id: int = Field(..., description="Reference field ID in child table")
    parent_field_id: int = Field(..., description="Field ID in parent table to lookup")
    lookup_field_label: str = Field(..., min_length=1, max_length=128, description="Label for the new lookup field")


class ValidateRelationshipArgs(ToolArgs):
    parent_table_id: str = Field(..., min_length=1, description="Parent table ID")
    child_table_id: str = Field(..., min_length=1, description="Child table ID")
    foreign_key_field_id: int = Field(..., description="Foreign key field ID to validate")


class CreateJunctionTableArgs(ConfirmedArgs):
    junction_table_name: str = Field(..., min_length=1, max_length=128, description="Name for the junction table")
    table1_id: str = Field(..., min_length=1, description="First table ID")
    table2_id: str = Field(..., min_length=1, description="Second table ID")
    table1_field_label: str = Field(..., min_length=1, max_length=128, description="Label for reference to first table")
    table2_field_label: str = Field(..., min_length=1, max_length=128, description="Label for reference to second table")
    additional_fields: Optional[List[ExtraFieldSpec]] = Field(None, description="Additional fields for the junction table")
    description: Optional[str] = Field(None, max_length=1024, description="Junction table description")


class GetRelationshipDetailsArgs(ToolArgs):
    table_id: str = Field(..., min_length=1, description="Table ID to analyze relationships for")
    include_fields: bool = Field(True, description="Include related field details")
