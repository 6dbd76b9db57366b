"""QuickBase REST client."""

from .client import QuickBaseClient, record_id_where
from .errors import (
    QuickBaseError,
    QuickBaseAPIError,
    QuickBaseNotFoundError,
    QuickBaseConnectionError,
)
from .retry import RetryPolicy, get_retry_policy
from .types import (
    RECORD_ID_FIELD,
    FieldType,
    QuickBaseConfig,
    TableDefinition,
    FieldDefinition,
    FieldUpdate,
    QueryOptions,
    SortSpec,
    wrap_field_values,
    record_field_value,
)

__all__ = [
    "QuickBaseClient",
    "record_id_where",
    "QuickBaseError",
    "QuickBaseAPIError",
    "QuickBaseNotFoundError",
    "QuickBaseConnectionError",
    "RetryPolicy",
    "get_retry_policy",
    "RECORD_ID_FIELD",
    "FieldType",
    "QuickBaseConfig",
    "TableDefinition",
    "FieldDefinition",
    "FieldUpdate",
    "QueryOptions",
    "SortSpec",
    "wrap_field_values",
    "record_field_value",
]
