"""Tool definitions shared by the MCP tools."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from yeoman_mcp_server.errors import raise_mcp_error


class ToolParameters(BaseModel):
    """Base parameters schema for MCP tools."""

    model_config = ConfigDict(extra="forbid")


ParamsT = TypeVar("ParamsT", bound=ToolParameters)


def parse_parameters(
    model: type[ParamsT], parameters: dict[str, Any], tool_name: str
) -> ParamsT:
    """Validate ``parameters`` against ``model``.

    Raises:
        MCPError: ``ValidationError`` naming every offending field and the
            constraint it violates.

    """
    try:
        return model.model_validate(parameters)
    except ValidationError as error:
        problems = [
            {
                "field": ".".join(str(part) for part in issue["loc"]) or "<root>",
                "message": issue["msg"],
                "type": issue["type"],
            }
            for issue in error.errors()
        ]
        summary = "; ".join(
            f"{problem['field']}: {problem['message']}" for problem in problems
        )
        raise_mcp_error(
            "ValidationError",
            f"Invalid parameters for tool '{tool_name}': {summary}",
            problems,
        )


@dataclass
class ToolDefinition:
    """Description of a tool that can be registered with the server.

    Attributes:
        name: Unique name of the tool.
        description: Human-readable description of the tool purpose.
        parameters_model: Pydantic model used to validate input parameters.
        handler: Callable that executes the tool logic.
        output_schema: Informal description of the payload fields.

    """

    name: str
    description: str
    parameters_model: type[ToolParameters]
    handler: Callable[[dict[str, Any]], dict[str, Any]]
    output_schema: dict[str, Any] = field(default_factory=dict)

    def validate(self, parameters: dict[str, Any]) -> dict[str, Any]:
        """Validate and coerce incoming tool parameters."""
        params = parse_parameters(self.parameters_model, parameters, self.name)
        return params.model_dump()

    def metadata(self) -> dict[str, Any]:
        """Return a discovery-friendly description of the tool."""
        return {
            "name": self.name,
            "description": self.description,
            "schema": self.parameters_model.model_json_schema(),
            "output": self.output_schema,
        }


def build_catalog(tools: Sequence[ToolDefinition]) -> dict[str, dict[str, Any]]:
    """Map tool names to their discovery metadata.

    Raises:
        ValueError: If two tools share a name.

    """
    catalog: dict[str, dict[str, Any]] = {}
    for tool in tools:
        if tool.name in catalog:
            raise ValueError(f"Tool '{tool.name}' is already registered")
        catalog[tool.name] = tool.metadata()
    return catalog
