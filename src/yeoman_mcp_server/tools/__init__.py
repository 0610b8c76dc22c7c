"""Tool registration helpers for the Yeoman MCP server."""

from __future__ import annotations

from yeoman_mcp_server.services import GeneratorServices
from yeoman_mcp_server.tooling import ToolDefinition
from yeoman_mcp_server.tools.generators import (
    get_generator_options_tool,
    run_generator_tool,
)
from yeoman_mcp_server.tools.search import search_templates_tool


def build_tools(services: GeneratorServices) -> list[ToolDefinition]:
    """Instantiate all tool definitions with the provided services."""
    return [
        search_templates_tool(services.search),
        get_generator_options_tool(services.runner),
        run_generator_tool(services.runner),
    ]
