"""Child process execution for npm and ``yo``.

Every process is started with standard input bound to ``DEVNULL`` so nothing can
block waiting for a terminal, and with a timeout after which the child is killed.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnvironmentSignal:
    """Environment variable honored by some part of the npm/Yeoman ecosystem."""

    name: str
    value: str
    effect: str


# Generator authors honor different subsets of these, so all are set together.
NON_INTERACTIVE_ENVIRONMENT: tuple[EnvironmentSignal, ...] = (
    EnvironmentSignal("CI", "true", "unattended run; most prompt libraries skip"),
    EnvironmentSignal("NONINTERACTIVE", "1", "generic no-prompt switch"),
    EnvironmentSignal("YEOMAN_NON_INTERACTIVE", "true", "skip yeoman prompts"),
    EnvironmentSignal("YEOMAN_SKIP_INSTALL", "true", "skip dependency install"),
    EnvironmentSignal("YO_SKIP_INSTALL", "true", "skip dependency install"),
    EnvironmentSignal("SKIP_INSTALL", "true", "skip dependency install"),
    EnvironmentSignal("NO_UPDATE_NOTIFIER", "1", "disable update notifier"),
    EnvironmentSignal("NO_COLOR", "1", "disable colored output"),
    EnvironmentSignal("FORCE_COLOR", "0", "disable chalk colors"),
    EnvironmentSignal("TERM", "dumb", "no cursor control"),
    EnvironmentSignal("NPM_CONFIG_YES", "true", "auto-confirm npm/npx prompts"),
    EnvironmentSignal("NPM_CONFIG_COLOR", "false", "disable npm colors"),
    EnvironmentSignal("NPM_CONFIG_PROGRESS", "false", "no npm progress bar"),
    EnvironmentSignal("NPM_CONFIG_FUND", "false", "no npm funding banner"),
    EnvironmentSignal("NPM_CONFIG_AUDIT", "false", "no npm audit run"),
    EnvironmentSignal("NPM_CONFIG_UPDATE_NOTIFIER", "false", "no npm update notice"),
)

NON_INTERACTIVE_FLAGS: tuple[str, ...] = (
    "--skip-install",
    "--skip-cache",
    "--force-yes",
    "--yes",
    "--no-color",
    "--no-insight",
    "--quiet",
    "--no-interactive",
)


@dataclass
class ProcessOutcome:
    """Captured result of a finished (or killed) child process.

    Attributes:
        command: Argument vector that was executed.
        returncode: Exit status, ``None`` when the process was killed on timeout.
        stdout: Captured standard output (combined output when stderr was merged).
        stderr: Captured standard error, empty when merged into stdout.
        timed_out: Whether the timeout expired before the process exited.

    """

    command: list[str]
    returncode: int | None
    stdout: str
    stderr: str = ""
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        """Whether the process exited cleanly with status zero."""
        return self.returncode == 0 and not self.timed_out


ProcessRunner = Callable[..., ProcessOutcome]


def non_interactive_env(
    base: Mapping[str, str] | None = None, *, bin_dir: Path | None = None
) -> dict[str, str]:
    """Build an environment that suppresses prompts, installs and colors.

    Args:
        base: Environment to start from, the current process environment by
            default.
        bin_dir: Directory prepended to ``PATH`` (a workspace's
            ``node_modules/.bin``). Its parent is exported as ``NODE_PATH``.

    """
    env = dict(os.environ if base is None else base)
    for signal in NON_INTERACTIVE_ENVIRONMENT:
        env[signal.name] = signal.value
    if bin_dir is not None:
        current_path = env.get("PATH", "")
        env["PATH"] = (
            f"{bin_dir}{os.pathsep}{current_path}" if current_path else str(bin_dir)
        )
        env["NODE_PATH"] = str(bin_dir.parent)
    return env


def _decode(stream: str | bytes | None) -> str:
    if stream is None:
        return ""
    if isinstance(stream, bytes):
        return stream.decode("utf-8", errors="replace")
    return stream


def run_process(
    command: Sequence[str],
    *,
    cwd: Path,
    env: Mapping[str, str] | None = None,
    timeout: float | None = None,
    merge_stderr: bool = False,
) -> ProcessOutcome:
    """Run ``command`` to completion without a terminal attached.

    Raises:
        OSError: If the executable cannot be started.

    """
    argv = [str(part) for part in command]
    logger.debug("Running %s in %s", argv, cwd)
    try:
        completed = subprocess.run(
            argv,
            cwd=str(cwd),
            env=dict(env) if env is not None else None,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT if merge_stderr else subprocess.PIPE,
            timeout=timeout,
            check=False,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except subprocess.TimeoutExpired as exc:
        logger.warning("Process %s timed out after %ss", argv[0], timeout)
        return ProcessOutcome(
            command=argv,
            returncode=None,
            stdout=_decode(exc.stdout),
            stderr=_decode(exc.stderr),
            timed_out=True,
        )
    return ProcessOutcome(
        command=argv,
        returncode=completed.returncode,
        stdout=_decode(completed.stdout),
        stderr=_decode(completed.stderr),
    )
