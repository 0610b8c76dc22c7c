"""Retrieval of a generator's help text."""

from __future__ import annotations

import logging

from yeoman_mcp_server.descriptor import GeneratorDescriptor
from yeoman_mcp_server.errors import HelpUnavailable
from yeoman_mcp_server.process import ProcessRunner, non_interactive_env, run_process
from yeoman_mcp_server.sanitize import sanitize_output
from yeoman_mcp_server.workspace import Workspace

logger = logging.getLogger(__name__)


class HelpIntrospector:
    """Run ``yo <generator> --help`` inside a prepared workspace."""

    def __init__(
        self,
        *,
        runner_command: str = "yo",
        timeout: float | None = None,
        process_runner: ProcessRunner = run_process,
    ) -> None:
        self._runner_command = runner_command
        self._timeout = timeout
        self._process_runner = process_runner

    def get_help(self, descriptor: GeneratorDescriptor, workspace: Workspace) -> str:
        """Return the raw help text of ``descriptor``.

        Raises:
            HelpUnavailable: If the runner cannot be started, exits with a non-zero
                status or times out.

        """
        command = [
            str(workspace.executable(self._runner_command)),
            descriptor.name,
            "--help",
            "--no-color",
            "--no-insight",
        ]
        try:
            outcome = self._process_runner(
                command,
                cwd=workspace.path,
                env=non_interactive_env(bin_dir=workspace.bin_dir),
                timeout=self._timeout,
            )
        except OSError as exc:
            raise HelpUnavailable(
                descriptor.name, f"Could not start {self._runner_command}: {exc}"
            ) from exc

        if outcome.stderr.strip():
            logger.debug(
                "yo %s --help stderr:\n%s",
                descriptor.name,
                sanitize_output(outcome.stderr),
            )
        if outcome.timed_out:
            raise HelpUnavailable(
                descriptor.name,
                f"Help for {descriptor.name} timed out after {self._timeout}s",
            )
        if outcome.returncode != 0:
            raise HelpUnavailable(
                descriptor.name,
                f"yo {descriptor.name} --help exited with code {outcome.returncode}",
            )
        return sanitize_output(outcome.stdout)
