"""Error types for the Yeoman MCP server."""

from __future__ import annotations

from typing import NoReturn, TypedDict


class MCPErrorPayload(TypedDict):
    """Structured JSON payload for MCP errors."""

    error: dict[str, object | None]


class MCPError(Exception):
    """Structured MCP error containing a JSON-friendly payload."""

    def __init__(
        self, error_type: str, message: str, details: object | None = None
    ) -> None:
        """Create a structured MCP error payload."""
        super().__init__(message)
        self.error_type = error_type
        self.error: MCPErrorPayload = {
            "error": {
                "type": error_type,
                "message": message,
                "details": details,
            }
        }

    def to_dict(self) -> MCPErrorPayload:
        """Return the structured error payload."""
        return self.error


def raise_mcp_error(
    error_type: str, message: str, details: object | None = None
) -> NoReturn:
    """Raise an :class:`MCPError` with a structured payload."""
    raise MCPError(error_type=error_type, message=message, details=details)


class GeneratorError(Exception):
    """Base class for failures of the generator pipeline."""

    kind = "GeneratorError"

    def __init__(self, generator: str, message: str) -> None:
        super().__init__(message)
        self.generator = generator
        self.message = message


class InstallError(GeneratorError):
    """The runner or generator package could not be installed."""

    kind = "InstallError"

    def __init__(
        self, generator: str, package: str, message: str, output: str = ""
    ) -> None:
        super().__init__(generator, message)
        self.package = package
        self.output = output

    @property
    def suggestion(self) -> str:
        """Hint for recovering from the failed install."""
        return (
            f"Verify that the package '{self.package}' exists in the npm registry "
            "(try yeoman_search_templates) and that npm can reach the network."
        )


class HelpUnavailable(GeneratorError):
    """The generator's help text could not be obtained."""

    kind = "HelpUnavailable"
