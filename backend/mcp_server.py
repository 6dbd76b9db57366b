"""MCP stdio server exposing the QuickBase tool catalogue.

stdout carries the protocol; all logging goes to stderr.
"""

import asyncio
import json
import sys
from typing import Any, Dict, List, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from QBMCP.client import QuickBaseClient
from QBMCP.orchestration import RelationshipOrchestrator
from QBMCP.policy import ToolAccessGuard
from QBMCP.utils.error_handling import StepError
from QBMCP.utils.logging import get_logger, setup_logging
from backend.config import ConfigurationError, Settings, load_settings
from backend.tools import ToolContext, ToolDispatcher, list_tool_specs

logger = get_logger(__name__)


class ToolExecutionError(RuntimeError):
    """Single descriptive failure reported back to the agent."""
    pass


def list_catalogue_tools() -> List[Tool]:
    return [
        Tool(name=spec.name, description=spec.description, inputSchema=spec.input_schema())
        for spec in list_tool_specs()
    ]


def describe_failure(error: Exception) -> str:
    """One-line cause; partial builds also list what was created before the failure."""
    if isinstance(error, StepError) and error.is_partial:
        return f"{error}; created before failure: {json.dumps(error.context.created)}"
    return str(error)


async def execute_tool_call(
    dispatcher: ToolDispatcher, name: str, arguments: Optional[Dict[str, Any]]
) -> List[TextContent]:
    """
    Run one tool call for the MCP front-end.
    
    Raises:
        ToolExecutionError: "Error executing <tool>: <cause>" for any failure;
            the SDK turns it into an error result
    """
    try:
        text = await dispatcher.call(name, arguments or {})
    except Exception as e:
        logger.error(f"Error executing tool {name}: {e}")
        raise ToolExecutionError(f"Error executing {name}: {describe_failure(e)}") from e
    return [TextContent(type="text", text=text)]


def create_server(dispatcher: ToolDispatcher, name: str = "quickbase-mcp", version: str = "1.0.0") -> Server:
    server = Server(name, version=version)

    @server.list_tools()
    async def list_tools() -> List[Tool]:
        return list_catalogue_tools()

    @server.call_tool()
    async def call_tool(tool_name: str, arguments: Dict[str, Any]) -> List[TextContent]:
        return await execute_tool_call(dispatcher, tool_name, arguments)

    return server


def build_dispatcher(settings: Settings, client: QuickBaseClient) -> ToolDispatcher:
    context = ToolContext(client=client, orchestrator=RelationshipOrchestrator(client))
    return ToolDispatcher(context, ToolAccessGuard(settings.to_policy()))


async def serve(settings: Settings) -> None:
    """Run the stdio server until the client disconnects."""
    async with QuickBaseClient(settings.to_quickbase_config()) as client:
        dispatcher = build_dispatcher(settings, client)
        server = create_server(dispatcher, settings.mcp_server_name, settings.mcp_server_version)
        policy = settings.to_policy()
        logger.info(
            f"QuickBase MCP server running on stdio "
            f"(read_only={policy.read_only}, allow_destructive={policy.allow_destructive})"
        )
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())


def run() -> None:
    """Console entry point (``qbmcp-server``)."""
    settings = load_settings()
    setup_logging(level=settings.qb_log_level)
    try:
        asyncio.run(serve(settings))
    except ConfigurationError as e:
        logger.error(f"Failed to start server: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("QuickBase MCP server stopped")


if __name__ == "__main__":
    run()
