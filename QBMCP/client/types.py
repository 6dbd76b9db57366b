"""Pydantic models for QuickBase client inputs.

These are the client's own shapes (snake_case); agent-facing argument models
live in backend.models.requests.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field, TypeAdapter

# QuickBase built-in record id field
RECORD_ID_FIELD = 3

FieldType = Literal[
    "text", "text_choice", "text_multiline", "richtext", "numeric",
    "currency", "percent", "rating", "date", "datetime", "timeofday",
    "duration", "checkbox", "user", "multiselect", "email", "phone",
    "url", "address", "file", "lookup", "summary", "formula",
    "recordid", "reference", "autonumber",
]

FIELD_TYPE_ADAPTER: TypeAdapter = TypeAdapter(FieldType)



class QuickBaseConfig(BaseModel):
    realm: str = Field(..., min_length=1)
    user_token: str = Field(..., min_length=1)
    app_id: str = Field(..., min_length=1)
    timeout: int = Field(30000, ge=1, description="Request timeout in milliseconds")
    max_retries: int = Field(3, ge=0, le=10)
    base_url: str = "https://api.quickbase.com/v1"
    user_agent: str = "QuickBase-MCP-Server/1.0.0"


class TableDefinition(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    description: Optional[str] = Field(None, max_length=1024)
    single_record_name: Optional[str] = None
    plural_record_name: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "name": self.name,
            "singleRecordName": self.single_record_name or self.name,
            "pluralRecordName": self.plural_record_name or self.name,
        }
        if self.description is not None:
            payload["description"] = self.description
        return payload


class FieldDefinition(BaseModel):
    """A field to create.

    Reference fields name their parent table; lookup fields name the source
    table and field plus the reference field that connects the two tables.
    """
    label: str = Field(..., min_length=1, max_length=128)
    field_type: FieldType
    required: bool = False
    unique: bool = False
    choices: Optional[List[str]] = None
    formula: Optional[str] = None
    parent_table_id: Optional[str] = None
    lookup_table_id: Optional[str] = None
    lookup_field_id: Optional[int] = None
    reference_field_id: Optional[int] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "label": self.label,
            "fieldType": self.field_type,
            "required": self.required,
            "unique": self.unique,
        }
        properties: Dict[str, Any] = {}
        if self.choices is not None:
            properties["choices"] = list(self.choices)
        if self.formula is not None:
            properties["formula"] = self.formula
        if self.parent_table_id is not None:
            properties["parentTableId"] = self.parent_table_id
        if self.lookup_table_id is not None:
            lookup_reference: Dict[str, Any] = {"tableId": self.lookup_table_id}
            if self.lookup_field_id is not None:
                lookup_reference["fieldId"] = self.lookup_field_id
            if self.reference_field_id is not None:
                lookup_reference["referenceFieldId"] = self.reference_field_id
            properties["lookupReference"] = lookup_reference
        if properties:
            payload["properties"] = properties
        return payload


class FieldUpdate(BaseModel):
    label: Optional[str] = Field(None, min_length=1, max_length=128)
    required: Optional[bool] = None
    choices: Optional[List[str]] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if self.label is not None:
            payload["label"] = self.label
        if self.required is not None:
            payload["required"] = self.required
        if self.choices is not None:
            payload["properties"] = {"choices": list(self.choices)}
        return payload


class SortSpec(BaseModel):
    field_id: int
    order: Literal["ASC", "DESC"] = "ASC"


class QueryOptions(BaseModel):
    select: Optional[List[int]] = None
    where: Optional[str] = None
    sort_by: Optional[List[SortSpec]] = None
    top: Optional[int] = Field(None, ge=1)
    skip: Optional[int] = Field(None, ge=0)

    def to_payload(self, table_id: str) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"from": table_id}
        if self.select:
            payload["select"] = list(self.select)
        if self.where:
            payload["where"] = self.where
        if self.sort_by:
            payload["sortBy"] = [{"fieldId": s.field_id, "order": s.order} for s in self.sort_by]
        options: Dict[str, Any] = {}
        if self.top is not None:
            options["top"] = self.top
        if self.skip is not None:
            options["skip"] = self.skip
        if options:
            payload["options"] = options
        return payload


def wrap_field_values(fields: Dict[Any, Any]) -> Dict[str, Any]:
    """Normalize {fieldId: value} into QuickBase's {"fieldId": {"value": value}} form."""
    wrapped: Dict[str, Any] = {}
    for key, value in fields.items():
        if isinstance(value, dict) and "value" in value:
            wrapped[str(key)] = value
        else:
            wrapped[str(key)] = {"value": value}
    return wrapped


def record_field_value(record: Dict[str, Any], field_id: int) -> Any:
    """Read a field value out of a QuickBase record row ({"6": {"value": ...}})."""
    cell = record.get(str(field_id))
    if cell is None:
        cell = record.get(field_id)  # type: ignore[call-overload]
    if isinstance(cell, dict):
        return cell.get("value")
    return cell
