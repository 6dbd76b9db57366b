"""Tool dispatcher shared by the MCP server and the HTTP API.

Per call: unknown-name check, access guard, argument parsing (record
payloads go through the shape validator here), then the handler.
"""

import json
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from QBMCP.policy import ToolAccessGuard
from QBMCP.utils.logging import get_logger
from backend.tools.catalogue import TOOL_CATALOGUE, ToolSpec
from backend.tools.handlers import ToolContext

logger = get_logger(__name__)


class UnknownToolError(LookupError):
    def __init__(self, name: str):
        self.tool_name = name
        super().__init__(f"Unknown tool: {name}")


class InvalidToolArguments(ValueError):
    def __init__(self, name: str, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        self.tool_name = name
        self.errors = errors
        super().__init__(f"Invalid arguments for {name}: {message}")


def _summarize_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item.get("loc", ())) or "arguments"
        parts.append(f"{location}: {item.get('msg')}")
    return "; ".join(parts)


class ToolDispatcher:
    def __init__(self, context: ToolContext, guard: ToolAccessGuard):
        self.context = context
        self.guard = guard

    def resolve(self, name: str) -> ToolSpec:
        spec = TOOL_CATALOGUE.get(name)
        if spec is None:
            raise UnknownToolError(name)
        return spec

    async def dispatch(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> Any:
        """
        Run one tool call.
        
        Args:
            name: Tool name
            arguments: Raw argument bundle from the agent
            
        Returns:
            The handler's JSON-serializable result
            
        Raises:
            UnknownToolError: Name not in the catalogue
            PolicyDeniedError: Refused by the access guard
            InvalidToolArguments: Arguments fail model validation or shape limits
        """
        arguments = arguments or {}
        spec = self.resolve(name)
        self.guard.assert_allowed(name, arguments)

        try:
            args = spec.args_model.model_validate(arguments)
        except ValidationError as e:
            raise InvalidToolArguments(
                name, _summarize_validation_error(e), e.errors(include_url=False, include_context=False)
            ) from e

        logger.info(f"Executing tool {name}")
        return await spec.handler(self.context, args)

    async def call(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> str:
        """Run a tool and render its result as JSON text."""
        result = await self.dispatch(name, arguments)
        return format_result(result)


def format_result(result: Any) -> str:
    return json.dumps(result, indent=2, default=str)
