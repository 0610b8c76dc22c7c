"""Adapters for exposing the Yeoman tools via FastMCP."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any

from anyio import to_thread
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult

from yeoman_mcp_server.errors import MCPError
from yeoman_mcp_server.services import GeneratorServices
from yeoman_mcp_server.tooling import ToolDefinition
from yeoman_mcp_server.tools import build_tools

logger = logging.getLogger(__name__)

SERVER_NAME = "yeoman-mcp-server"


class ToolDefinitionAdapter(Tool):
    """Expose a :class:`ToolDefinition` as a FastMCP tool."""

    def __init__(self, definition: ToolDefinition) -> None:
        """Create a FastMCP tool wrapper for the provided definition."""
        super().__init__(
            name=definition.name,
            description=definition.description,
            parameters=definition.parameters_model.model_json_schema(),
            tags=set(),
        )
        self._definition = definition

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        """Validate arguments and run the handler in a worker thread.

        Handlers block on subprocesses, so they run off the event loop to let
        concurrent requests proceed.
        """
        try:
            validated_arguments = self._definition.validate(arguments)
            payload = await to_thread.run_sync(
                self._definition.handler, validated_arguments
            )
        except MCPError as error:
            logger.error("Tool %s failed: %s", self._definition.name, error)
            raise ToolError(json.dumps(error.to_dict())) from error
        return ToolResult(structured_content=payload)


def to_fastmcp_tools(tool_definitions: Sequence[ToolDefinition]) -> list[Tool]:
    """Convert tool definitions into FastMCP-compatible tools."""
    return [ToolDefinitionAdapter(definition) for definition in tool_definitions]


def build_fastmcp_app(
    services: GeneratorServices,
) -> tuple[FastMCP, list[ToolDefinition]]:
    """Create a FastMCP server instance with all Yeoman tools registered."""
    app = FastMCP(
        name=SERVER_NAME,
        instructions=(
            "Search, inspect and run Yeoman generators non-interactively. "
            "Call yeoman_get_generator_options before yeoman_generate to learn "
            "which arguments and options a generator needs."
        ),
    )
    tool_definitions = build_tools(services)
    for tool in to_fastmcp_tools(tool_definitions):
        app.add_tool(tool)
    return app, tool_definitions
