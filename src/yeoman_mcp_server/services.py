"""Wiring of the generator pipeline from a :class:`ServerConfig`."""

from __future__ import annotations

from dataclasses import dataclass

from yeoman_mcp_server.config import ServerConfig
from yeoman_mcp_server.installer import GeneratorInstaller
from yeoman_mcp_server.introspection import HelpIntrospector
from yeoman_mcp_server.process import ProcessRunner, run_process
from yeoman_mcp_server.runner import GeneratorRunner
from yeoman_mcp_server.search import TemplateSearch
from yeoman_mcp_server.workspace import WorkspaceProvisioner


@dataclass
class GeneratorServices:
    """Collaborators used by the MCP tools."""

    config: ServerConfig
    provisioner: WorkspaceProvisioner
    runner: GeneratorRunner
    search: TemplateSearch


def build_services(
    config: ServerConfig, *, process_runner: ProcessRunner = run_process
) -> GeneratorServices:
    """Create the provisioner, installer, introspector, runner and search client."""
    provisioner = WorkspaceProvisioner(config.generator_dir)
    installer = GeneratorInstaller(
        provisioner,
        npm_command=config.npm_command,
        runner_package=config.runner_package,
        timeout=config.install_timeout,
        process_runner=process_runner,
    )
    introspector = HelpIntrospector(
        timeout=config.help_timeout, process_runner=process_runner
    )
    runner = GeneratorRunner(
        provisioner,
        installer,
        introspector,
        timeout=config.run_timeout,
        process_runner=process_runner,
    )
    search = TemplateSearch(config.registry_url, timeout=config.search_timeout)
    return GeneratorServices(
        config=config, provisioner=provisioner, runner=runner, search=search
    )
