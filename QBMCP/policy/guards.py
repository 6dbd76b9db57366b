"""Access-policy guard applied to every tool call before it runs.

Rules are checked in a fixed order: read-only mode, then destructive
operations, then explicit confirmation.
"""

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Optional

from QBMCP.utils.logging import get_logger

logger = get_logger(__name__)

TOOL_PREFIX = "quickbase_"

DESTRUCTIVE_TOOLS: FrozenSet[str] = frozenset({
    "quickbase_delete_table",
    "quickbase_delete_field",
    "quickbase_delete_record",
})

READ_ONLY_TOOLS: FrozenSet[str] = frozenset({
    "quickbase_get_app_info",
    "quickbase_get_tables",
    "quickbase_test_connection",
    "quickbase_get_table_info",
    "quickbase_get_table_fields",
    "quickbase_query_records",
    "quickbase_get_record",
    "quickbase_search_records",
    "quickbase_get_relationships",
    "quickbase_get_reports",
    "quickbase_run_report",
    "quickbase_validate_relationship",
    "quickbase_get_relationship_details",
})

CONFIRMATION_REQUIRED_TOOLS: FrozenSet[str] = frozenset({
    "quickbase_create_table",
    "quickbase_create_field",
    "quickbase_update_field",
    "quickbase_create_record",
    "quickbase_update_record",
    "quickbase_bulk_create_records",
    "quickbase_create_relationship",
    "quickbase_create_advanced_relationship",
    "quickbase_create_lookup_field",
    "quickbase_create_junction_table",
})


@dataclass(frozen=True)
class ToolPolicy:
    read_only: bool = False
    allow_destructive: bool = False


class PolicyDeniedError(PermissionError):
    """Raised when the access policy refuses a tool call."""

    def __init__(self, tool_name: str, reason: str, message: str):
        self.tool_name = tool_name
        self.reason = reason
        super().__init__(message)


class ToolAccessGuard:
    def __init__(self, policy: Optional[ToolPolicy] = None):
        self.policy = policy or ToolPolicy()

    def check(self, name: str, args: Optional[Dict[str, Any]] = None) -> Optional[PolicyDeniedError]:
        """Return the denial for this call, or None when it is allowed."""
        if self.policy.read_only and name not in READ_ONLY_TOOLS:
            return PolicyDeniedError(
                name,
                "read_only",
                f'Server is running in read-only mode (QB_READONLY=true). Tool "{name}" is not allowed.',
            )

        if name in DESTRUCTIVE_TOOLS and not self.policy.allow_destructive:
            return PolicyDeniedError(
                name,
                "destructive_disabled",
                f'Destructive tool "{name}" is disabled. '
                f"Set QB_ALLOW_DESTRUCTIVE=true to enable delete operations.",
            )

        if name in CONFIRMATION_REQUIRED_TOOLS:
            if (args or {}).get("confirm") is not True:
                return PolicyDeniedError(
                    name,
                    "confirmation_required",
                    f'Tool "{name}" can modify data or schema and requires confirmation. '
                    f'Re-run with {{ "confirm": true, ... }}.',
                )
        return None

    def assert_allowed(self, name: str, args: Optional[Dict[str, Any]] = None) -> None:
        """
        Raise PolicyDeniedError if the policy refuses this call.
        
        Args:
            name: Tool name
            args: Raw argument bundle (only ``confirm`` is inspected)
        """
        denial = self.check(name, args)
        if denial is not None:
            logger.warning(f"Policy denied {name}: {denial.reason}")
            raise denial
