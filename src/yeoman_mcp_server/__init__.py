"""Model Context Protocol server for Yeoman generators."""

from yeoman_mcp_server.config import ServerConfig
from yeoman_mcp_server.errors import HelpUnavailable, InstallError, MCPError
from yeoman_mcp_server.help_parser import HelpInfo, parse_help
from yeoman_mcp_server.results import InvocationResult, OutcomeKind
from yeoman_mcp_server.runner import GeneratorRunner, InvocationRequest
from yeoman_mcp_server.sanitize import sanitize_output
from yeoman_mcp_server.services import GeneratorServices, build_services
from yeoman_mcp_server.tooling import ToolDefinition, ToolParameters

__all__ = [
    "GeneratorRunner",
    "GeneratorServices",
    "HelpInfo",
    "HelpUnavailable",
    "InstallError",
    "InvocationRequest",
    "InvocationResult",
    "MCPError",
    "OutcomeKind",
    "ServerConfig",
    "ToolDefinition",
    "ToolParameters",
    "build_services",
    "parse_help",
    "sanitize_output",
]
