"""Tool for discovering Yeoman generators on npm."""

from __future__ import annotations

from pydantic import Field

from yeoman_mcp_server.errors import MCPError, raise_mcp_error
from yeoman_mcp_server.search import TemplateSearch
from yeoman_mcp_server.tooling import ToolDefinition, ToolParameters, parse_parameters

TOOL_NAME = "yeoman_search_templates"


class SearchTemplatesParams(ToolParameters):
    """Parameters for yeoman_search_templates."""

    query: str = Field(
        min_length=1,
        description=(
            "Keywords to search for, separated by commas, "
            "e.g. react,typescript,tailwind"
        ),
    )
    page_size: int = Field(
        default=20, ge=1, le=250, description="Maximum number of templates to return"
    )


def search_templates_tool(search: TemplateSearch) -> ToolDefinition:
    """Create the yeoman_search_templates tool."""

    def handler(raw_params: dict[str, object]) -> dict[str, object]:
        params = parse_parameters(SearchTemplatesParams, raw_params, TOOL_NAME)
        try:
            templates = search.search(params.query, params.page_size)
        except MCPError:
            raise
        except Exception as exc:
            raise_mcp_error(
                "UnexpectedError", f"Error executing tool {TOOL_NAME}: {exc}", str(exc)
            )
        return {"query": params.query, "count": len(templates), "templates": templates}

    return ToolDefinition(
        name=TOOL_NAME,
        description="Search the npm registry for Yeoman generators (templates).",
        parameters_model=SearchTemplatesParams,
        handler=handler,
        output_schema={"query": "string", "count": "integer", "templates": "array"},
    )
