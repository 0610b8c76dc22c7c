"""Installation of the ``yo`` runner and generator packages into a workspace."""

from __future__ import annotations

import json
import logging
import shutil

from yeoman_mcp_server.descriptor import GeneratorDescriptor
from yeoman_mcp_server.errors import InstallError
from yeoman_mcp_server.process import ProcessRunner, non_interactive_env, run_process
from yeoman_mcp_server.sanitize import sanitize_output
from yeoman_mcp_server.workspace import Workspace, WorkspaceProvisioner

logger = logging.getLogger(__name__)

WORKSPACE_MANIFEST = {
    "name": "yeoman-mcp-generators",
    "version": "1.0.0",
    "private": True,
}


class GeneratorInstaller:
    """Make sure a workspace contains the runner and a generator package."""

    def __init__(
        self,
        provisioner: WorkspaceProvisioner,
        *,
        npm_command: str = "npm",
        runner_package: str = "yo",
        timeout: float | None = None,
        process_runner: ProcessRunner = run_process,
    ) -> None:
        self._provisioner = provisioner
        self._npm_command = npm_command
        self._runner_package = runner_package
        self._timeout = timeout
        self._process_runner = process_runner

    def is_installed(
        self, workspace: Workspace, descriptor: GeneratorDescriptor
    ) -> bool:
        """Check by path existence whether runner and generator are present."""
        return (
            workspace.package_dir(self._runner_package).is_dir()
            and workspace.package_dir(descriptor.package).is_dir()
        )

    def ensure_installed(
        self, workspace: Workspace, descriptor: GeneratorDescriptor
    ) -> None:
        """Install the runner and generator unless both already exist.

        Raises:
            InstallError: If npm cannot be started, fails or times out.

        """
        with self._provisioner.install_lock(workspace):
            self._write_manifest(workspace, descriptor)
            if self.is_installed(workspace, descriptor):
                logger.info(
                    "Generator %s already installed in %s",
                    descriptor.package,
                    workspace.path,
                )
                return
            self._install(workspace, descriptor)

    def _write_manifest(
        self, workspace: Workspace, descriptor: GeneratorDescriptor
    ) -> None:
        if workspace.manifest.exists():
            return
        try:
            workspace.manifest.write_text(
                json.dumps(WORKSPACE_MANIFEST, indent=2), encoding="utf-8"
            )
        except OSError as exc:
            raise InstallError(
                descriptor.name,
                descriptor.package,
                f"Could not write package.json in {workspace.path}: {exc}",
            ) from exc

    def _install(self, workspace: Workspace, descriptor: GeneratorDescriptor) -> None:
        npm = shutil.which(self._npm_command) or self._npm_command
        command = [
            npm,
            "install",
            "--no-audit",
            "--no-fund",
            "--loglevel=error",
            self._runner_package,
            descriptor.package,
        ]
        logger.info("Installing %s into %s", descriptor.package, workspace.path)
        try:
            outcome = self._process_runner(
                command,
                cwd=workspace.path,
                env=non_interactive_env(),
                timeout=self._timeout,
                merge_stderr=True,
            )
        except OSError as exc:
            raise InstallError(
                descriptor.name,
                descriptor.package,
                f"Failed to start '{self._npm_command}': {exc}",
            ) from exc

        output = sanitize_output(outcome.stdout)
        if outcome.timed_out:
            raise InstallError(
                descriptor.name,
                descriptor.package,
                f"Installing {descriptor.package} timed out after {self._timeout}s",
                output,
            )
        if outcome.returncode != 0:
            logger.debug("npm install output:\n%s", output)
            raise InstallError(
                descriptor.name,
                descriptor.package,
                f"npm install of {descriptor.package} exited with code "
                f"{outcome.returncode}",
                output,
            )
        logger.info("Installed %s", descriptor.package)
