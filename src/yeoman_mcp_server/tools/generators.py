"""Tools for inspecting and running Yeoman generators."""

from __future__ import annotations

from pydantic import Field, ValidationInfo, field_validator

from yeoman_mcp_server.descriptor import GeneratorDescriptor
from yeoman_mcp_server.errors import (
    HelpUnavailable,
    InstallError,
    MCPError,
    raise_mcp_error,
)
from yeoman_mcp_server.results import InvocationResult, OutcomeKind
from yeoman_mcp_server.runner import GeneratorRunner, InvocationRequest
from yeoman_mcp_server.tooling import ToolDefinition, ToolParameters, parse_parameters

OPTIONS_TOOL_NAME = "yeoman_get_generator_options"
GENERATE_TOOL_NAME = "yeoman_generate"

GENERATOR_NAME_DESCRIPTION = (
    "Name of the Yeoman generator without the 'generator-' prefix, "
    "e.g. 'webapp' or 'webapp:component'"
)


class GeneratorOptionsParams(ToolParameters):
    """Parameters for yeoman_get_generator_options."""

    generator_name: str = Field(min_length=1, description=GENERATOR_NAME_DESCRIPTION)


class RunGeneratorParams(ToolParameters):
    """Parameters for yeoman_generate."""

    generator_name: str = Field(min_length=1, description=GENERATOR_NAME_DESCRIPTION)
    cwd: str = Field(
        min_length=1, description="Working directory the generator writes into"
    )
    app_name: str | None = Field(
        default=None,
        min_length=1,
        description="Application name, passed as first argument",
    )
    version: str | None = Field(
        default=None,
        min_length=1,
        description="Application version, passed after the name; needs app_name",
    )
    args: list[str] = Field(
        default_factory=list, description="Additional positional arguments"
    )
    options: dict[str, str | bool | int | float | None] = Field(
        default_factory=dict,
        description=(
            "Generator options; true renders --name, false/null omits the flag, "
            "other values render --name=value"
        ),
    )
    skip_preflight: bool = Field(
        default=False,
        description="Run even if the help text suggests required inputs are missing",
    )

    @field_validator("version")
    @classmethod
    def _version_requires_app_name(
        cls, value: str | None, info: ValidationInfo
    ) -> str | None:
        # A failed app_name is absent from info.data and reported on its own.
        if value is not None and info.data.get("app_name", "") is None:
            raise ValueError("version requires app_name")
        return value


def _descriptor(generator_name: str, tool_name: str) -> GeneratorDescriptor:
    try:
        return GeneratorDescriptor.parse(generator_name)
    except ValueError as exc:
        raise_mcp_error(
            "ValidationError",
            f"Invalid parameters for tool '{tool_name}': generator_name: {exc}",
            [{"field": "generator_name", "message": str(exc), "type": "value_error"}],
        )


def get_generator_options_tool(runner: GeneratorRunner) -> ToolDefinition:
    """Create the yeoman_get_generator_options tool."""

    def handler(raw_params: dict[str, object]) -> dict[str, object]:
        params = parse_parameters(GeneratorOptionsParams, raw_params, OPTIONS_TOOL_NAME)
        descriptor = _descriptor(params.generator_name, OPTIONS_TOOL_NAME)
        try:
            return runner.describe(descriptor).to_dict()
        except InstallError as error:
            return InvocationResult(
                kind=OutcomeKind.INSTALL_ERROR,
                generator=descriptor.name,
                message=error.message,
                output=error.output,
                suggestions=[error.suggestion],
            ).to_dict()
        except HelpUnavailable as error:
            return InvocationResult(
                kind=OutcomeKind.HELP_UNAVAILABLE,
                generator=descriptor.name,
                message=error.message,
                suggestions=[
                    "The generator may still run; call yeoman_generate with "
                    "skip_preflight and inspect the result."
                ],
            ).to_dict()
        except MCPError:
            raise
        except Exception as exc:
            raise_mcp_error(
                "UnexpectedError",
                f"Error executing tool {OPTIONS_TOOL_NAME}: {exc}",
                str(exc),
            )

    return ToolDefinition(
        name=OPTIONS_TOOL_NAME,
        description=(
            "Install a Yeoman generator and describe its positional arguments and "
            "options, including which ones are likely required."
        ),
        parameters_model=GeneratorOptionsParams,
        handler=handler,
        output_schema={
            "success": "boolean",
            "args": "array",
            "options": "object",
            "required_args": "array",
            "required_options": "array",
        },
    )


def run_generator_tool(runner: GeneratorRunner) -> ToolDefinition:
    """Create the yeoman_generate tool."""

    def handler(raw_params: dict[str, object]) -> dict[str, object]:
        params = parse_parameters(RunGeneratorParams, raw_params, GENERATE_TOOL_NAME)
        descriptor = _descriptor(params.generator_name, GENERATE_TOOL_NAME)
        request = InvocationRequest.build(
            descriptor.name,
            params.cwd,
            app_name=params.app_name,
            version=params.version,
            extra_args=params.args,
            options=params.options,
            skip_preflight=params.skip_preflight,
        )
        try:
            return runner.run(request).to_dict()
        except MCPError:
            raise
        except Exception as exc:
            raise_mcp_error(
                "UnexpectedError",
                f"Error executing tool {GENERATE_TOOL_NAME}: {exc}",
                str(exc),
            )

    return ToolDefinition(
        name=GENERATE_TOOL_NAME,
        description=(
            "Run a Yeoman generator non-interactively in the given directory. "
            "Missing required inputs, leftover prompts and failures are reported "
            "as structured results."
        ),
        parameters_model=RunGeneratorParams,
        handler=handler,
        output_schema={
            "success": "boolean",
            "kind": "string",
            "message": "string",
            "output": "string",
            "prompts_detected": "array",
            "missing_required": "array",
            "missing_options": "array",
            "suggestions": "array",
            "example_command": "string",
            "generator_config_exists": "boolean",
        },
    )
