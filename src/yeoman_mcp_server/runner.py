"""Non-interactive execution of Yeoman generators.

A run goes through provisioning, installation, best-effort help introspection,
the pre-flight requirement check, spawning ``yo`` with every known
non-interactive switch, and classification of the captured output. The
workspace is released on every exit path.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from yeoman_mcp_server.descriptor import GeneratorDescriptor
from yeoman_mcp_server.errors import HelpUnavailable, InstallError
from yeoman_mcp_server.help_parser import HelpInfo, parse_help
from yeoman_mcp_server.installer import GeneratorInstaller
from yeoman_mcp_server.introspection import HelpIntrospector
from yeoman_mcp_server.process import (
    NON_INTERACTIVE_FLAGS,
    ProcessOutcome,
    ProcessRunner,
    non_interactive_env,
    run_process,
)
from yeoman_mcp_server.requirements import (
    OptionValue,
    check_requirements,
    example_command,
    render_option_flags,
)
from yeoman_mcp_server.results import InvocationResult, OutcomeKind
from yeoman_mcp_server.sanitize import sanitize_output
from yeoman_mcp_server.workspace import Workspace, WorkspaceProvisioner

logger = logging.getLogger(__name__)

YO_RC_FILE = ".yo-rc.json"
NOT_FOUND_MARKERS = (
    "did not find a suitable generator",
    "you don't seem to have a generator with the name",
)
INVALID_VERSION_MARKER = "invalid version"

# "? Project name" from inquirer, "❯ option" / "› option" from selection lists.
_PROMPT_LINE_PATTERN = re.compile(r"^\s*(?:\?|❯|›)\s+\S")
_UPPERCASE_PATTERN = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass
class InvocationRequest:
    """Everything needed to run one generator.

    Attributes:
        generator: Generator to run.
        cwd: Directory the generator writes into.
        args: Positional arguments in order.
        options: Option values keyed by option name.
        skip_preflight: Spawn even when required inputs appear to be missing.

    """

    generator: GeneratorDescriptor
    cwd: Path
    args: list[str] = field(default_factory=list)
    options: dict[str, OptionValue] = field(default_factory=dict)
    skip_preflight: bool = False

    @classmethod
    def build(
        cls,
        generator_name: str,
        cwd: str | Path,
        *,
        app_name: str | None = None,
        version: str | None = None,
        extra_args: Sequence[str] = (),
        options: Mapping[str, OptionValue] | None = None,
        skip_preflight: bool = False,
    ) -> InvocationRequest:
        """Create a request, placing the identity values ahead of extra arguments.

        Raises:
            ValueError: If the generator name is empty, if ``app_name`` or
                ``version`` is an empty string, or if ``version`` is given
                without ``app_name``.

        """
        if version is not None and app_name is None:
            raise ValueError("version requires app_name")
        positional = [value for value in (app_name, version) if value is not None]
        if "" in positional:
            raise ValueError("app_name and version must not be empty")
        positional.extend(str(value) for value in extra_args)
        return cls(
            generator=GeneratorDescriptor.parse(generator_name),
            cwd=Path(cwd).expanduser(),
            args=positional,
            options=dict(options or {}),
            skip_preflight=skip_preflight,
        )


@dataclass
class GeneratorOptions:
    """Parsed requirements of a generator together with its raw help text."""

    generator: GeneratorDescriptor
    help_info: HelpInfo
    help_text: str

    def to_dict(self) -> dict[str, Any]:
        """Return the payload of the options tool."""
        return {
            "success": True,
            "generator": self.generator.name,
            "package": self.generator.package,
            "usage": self.help_info.usage,
            "args": [argument.to_dict() for argument in self.help_info.args],
            "options": {
                name: option.to_dict()
                for name, option in self.help_info.options.items()
            },
            "required_args": [
                argument.name for argument in self.help_info.required_args
            ],
            "required_options": [
                option.name for option in self.help_info.required_options
            ],
            "help_text": self.help_text,
        }


def _present_flags(command: Sequence[str], options: Mapping[str, Any]) -> set[str]:
    flags = {part.split("=", 1)[0] for part in command if part.startswith("--")}
    for key in options:
        name = key.lstrip("-")
        flags.add(f"--{name}")
        flags.add(f"--{_UPPERCASE_PATTERN.sub('-', name).lower()}")
    return flags


def build_command(executable: str, request: InvocationRequest) -> list[str]:
    """Assemble the ``yo`` argument vector for ``request``.

    Caller options are rendered first; each fixed non-interactive flag is then
    appended unless the caller already supplied it.
    """
    command = [executable, request.generator.name, *request.args]
    command.extend(render_option_flags(request.options))
    present = _present_flags(command, request.options)
    command.extend(flag for flag in NON_INTERACTIVE_FLAGS if flag not in present)
    return command


def detect_prompts(output: str) -> list[str]:
    """Return every line that looks like an unanswered interactive prompt."""
    return [line for line in output.splitlines() if _PROMPT_LINE_PATTERN.match(line)]


def generator_config_exists(cwd: Path, descriptor: GeneratorDescriptor) -> bool:
    """Check whether ``.yo-rc.json`` in ``cwd`` has an entry for the generator."""
    config_path = cwd / YO_RC_FILE
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return False
    except (OSError, ValueError) as exc:
        logger.debug("Could not read %s: %s", config_path, exc)
        return False
    return isinstance(data, dict) and descriptor.config_key in data


def classify_outcome(
    descriptor: GeneratorDescriptor, outcome: ProcessOutcome, cwd: Path
) -> InvocationResult:
    """Turn a finished ``yo`` process into an :class:`InvocationResult`.

    Output markers take precedence over the exit status: a missing generator,
    then leftover prompts, then version errors; only after those does a
    timeout or non-zero exit count as a failure.
    """
    output = sanitize_output(outcome.stdout)
    lowered = output.lower()
    common: dict[str, Any] = {
        "generator": descriptor.name,
        "output": output,
        "exit_code": outcome.returncode,
        "command": list(outcome.command),
    }

    if any(marker in lowered for marker in NOT_FOUND_MARKERS):
        return InvocationResult(
            kind=OutcomeKind.NOT_FOUND,
            message=f"yo could not find the generator '{descriptor.name}'",
            suggestions=[
                f"Check that {descriptor.package} is published on npm and exposes "
                f"the requested sub-generator."
            ],
            **common,
        )

    prompts = detect_prompts(output)
    if prompts:
        return InvocationResult(
            kind=OutcomeKind.STILL_INTERACTIVE,
            message=(
                f"Generator '{descriptor.name}' asked {len(prompts)} interactive "
                "question(s) that were not answered by options"
            ),
            prompts_detected=prompts,
            suggestions=[
                "Pass the answers as options (see yeoman_get_generator_options); "
                "prompts without an option equivalent cannot be answered."
            ],
            **common,
        )

    if INVALID_VERSION_MARKER in lowered:
        return InvocationResult(
            kind=OutcomeKind.INVALID_VERSION_FORMAT,
            message="The generator rejected a version value",
            suggestions=["Pass the version as a semantic version such as 1.0.0."],
            **common,
        )

    if outcome.timed_out:
        return InvocationResult(
            kind=OutcomeKind.TIMED_OUT,
            message=f"Generator '{descriptor.name}' did not finish in time",
            **common,
        )

    if outcome.returncode != 0:
        return InvocationResult(
            kind=OutcomeKind.GENERIC_FAILURE,
            message=(
                f"Generator '{descriptor.name}' exited with code {outcome.returncode}"
            ),
            **common,
        )

    return InvocationResult(
        kind=OutcomeKind.SUCCESS,
        message=f"Successfully ran generator '{descriptor.name}'",
        generator_config_exists=generator_config_exists(cwd, descriptor),
        **common,
    )


class GeneratorRunner:
    """Drive ``yo`` for option discovery and unattended generator runs."""

    def __init__(
        self,
        provisioner: WorkspaceProvisioner,
        installer: GeneratorInstaller,
        introspector: HelpIntrospector,
        *,
        runner_command: str = "yo",
        timeout: float | None = None,
        process_runner: ProcessRunner = run_process,
    ) -> None:
        self._provisioner = provisioner
        self._installer = installer
        self._introspector = introspector
        self._runner_command = runner_command
        self._timeout = timeout
        self._process_runner = process_runner

    def describe(self, descriptor: GeneratorDescriptor) -> GeneratorOptions:
        """Install a generator and parse its help text.

        Raises:
            InstallError: If the generator cannot be installed.
            HelpUnavailable: If its help text cannot be obtained.

        """
        with self._provisioner.workspace() as workspace:
            self._installer.ensure_installed(workspace, descriptor)
            help_text = self._introspector.get_help(descriptor, workspace)
        return GeneratorOptions(
            generator=descriptor, help_info=parse_help(help_text), help_text=help_text
        )

    def run(self, request: InvocationRequest) -> InvocationResult:
        """Run a generator without any terminal interaction."""
        descriptor = request.generator
        request.cwd.mkdir(parents=True, exist_ok=True)
        with self._provisioner.workspace() as workspace:
            logger.info("Installing %s", descriptor.package)
            try:
                self._installer.ensure_installed(workspace, descriptor)
            except InstallError as error:
                return InvocationResult(
                    kind=OutcomeKind.INSTALL_ERROR,
                    generator=descriptor.name,
                    message=error.message,
                    output=error.output,
                    suggestions=[error.suggestion],
                )

            help_text, help_info = self._introspect(descriptor, workspace)
            if help_info is not None and not request.skip_preflight:
                blocked = self._preflight(request, help_info, help_text)
                if blocked is not None:
                    return blocked

            return self._spawn(request, workspace)

    def _introspect(
        self, descriptor: GeneratorDescriptor, workspace: Workspace
    ) -> tuple[str | None, HelpInfo | None]:
        try:
            help_text = self._introspector.get_help(descriptor, workspace)
        except HelpUnavailable as error:
            logger.warning("Skipping pre-flight check: %s", error.message)
            return None, None
        return help_text, parse_help(help_text)

    def _preflight(
        self, request: InvocationRequest, help_info: HelpInfo, help_text: str | None
    ) -> InvocationResult | None:
        report = check_requirements(help_info, request.args, request.options)
        if report.ok:
            return None
        logger.info(
            "Generator %s is missing %d argument(s) and %d option(s)",
            request.generator.name,
            len(report.missing_required),
            len(report.missing_options),
        )
        details = report.to_dict()
        return InvocationResult(
            kind=OutcomeKind.MISSING_REQUIREMENT,
            generator=request.generator.name,
            message="Required arguments or options are missing; nothing was run",
            missing_required=details["missing_required"],
            missing_options=details["missing_options"],
            suggestions=report.suggestions(),
            example_command=example_command(
                request.generator.name,
                help_info,
                request.args,
                request.options,
                report,
            ),
            usage=help_text,
        )

    def _spawn(
        self, request: InvocationRequest, workspace: Workspace
    ) -> InvocationResult:
        command = build_command(
            str(workspace.executable(self._runner_command)), request
        )
        logger.info("Running %s in %s", " ".join(command[1:]), request.cwd)
        try:
            outcome = self._process_runner(
                command,
                cwd=request.cwd,
                env=non_interactive_env(bin_dir=workspace.bin_dir),
                timeout=self._timeout,
                merge_stderr=True,
            )
        except OSError as exc:
            return InvocationResult(
                kind=OutcomeKind.GENERIC_FAILURE,
                generator=request.generator.name,
                message=f"Could not start {self._runner_command}: {exc}",
                command=command,
            )
        result = classify_outcome(request.generator, outcome, request.cwd)
        logger.info(
            "Generator %s finished: %s", request.generator.name, result.kind.value
        )
        return result
