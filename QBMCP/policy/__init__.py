"""Tool access policy."""

from .guards import (
    TOOL_PREFIX,
    DESTRUCTIVE_TOOLS,
    READ_ONLY_TOOLS,
    CONFIRMATION_REQUIRED_TOOLS,
    ToolPolicy,
    PolicyDeniedError,
    ToolAccessGuard,
)

__all__ = [
    "TOOL_PREFIX",
    "DESTRUCTIVE_TOOLS",
    "READ_ONLY_TOOLS",
    "CONFIRMATION_REQUIRED_TOOLS",
    "ToolPolicy",
    "PolicyDeniedError",
    "ToolAccessGuard",
]
