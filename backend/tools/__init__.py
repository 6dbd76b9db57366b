"""QuickBase tool catalogue and dispatcher."""

from .catalogue import ToolSpec, TOOL_CATALOGUE, list_tool_specs, get_tool_spec
from .dispatcher import (
    ToolDispatcher,
    UnknownToolError,
    InvalidToolArguments,
    format_result,
)
from .handlers import ToolContext

__all__ = [
    "ToolSpec",
    "TOOL_CATALOGUE",
    "list_tool_specs",
    "get_tool_spec",
    "ToolDispatcher",
    "UnknownToolError",
    "InvalidToolArguments",
    "format_result",
    "ToolContext",
]
