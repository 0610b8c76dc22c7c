"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from yeoman_mcp_server.process import ProcessOutcome

SAMPLE_HELP_TEXT = """\
Usage:
  yo webapp:app [options] [<appName>]

Scaffold out a front-end web app.

Options:
  -h,   --help          # Print the generator's options and usage
        --skip-cache    # Do not remember prompt answers             Default: false
        --skip-install  # Do not automatically install dependencies  Default: false
        --style         # Stylesheet language [css|sass]
        --quiet         # Required: keep the output short
        --port          # Development server port                    Default: 9000

Arguments:
  appName  # Your application name  Type: String  Required: true
"""


class FakeProcessRunner:
    """Stand-in for :func:`run_process` that never spawns anything.

    ``npm install`` calls create the requested package directories when the
    configured exit code is zero, ``--help`` calls return ``help_text`` and every
    other call is treated as the generator run.
    """

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.help_text = SAMPLE_HELP_TEXT
        self.help_returncode = 0
        self.install_returncode = 0
        self.install_output = ""
        self.run_output = "create index.html\n"
        self.run_returncode: int | None = 0
        self.run_timed_out = False
        self.run_side_effect: Callable[[Path], None] | None = None

    def __call__(
        self,
        command: list[str],
        *,
        cwd: Path,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
        merge_stderr: bool = False,
    ) -> ProcessOutcome:
        argv = [str(part) for part in command]
        self.calls.append(
            {
                "command": argv,
                "cwd": Path(cwd),
                "env": env,
                "timeout": timeout,
                "merge_stderr": merge_stderr,
            }
        )
        if argv[1:2] == ["install"]:
            if self.install_returncode == 0:
                for package in argv[-2:]:
                    (Path(cwd) / "node_modules" / package).mkdir(
                        parents=True, exist_ok=True
                    )
            return ProcessOutcome(argv, self.install_returncode, self.install_output)
        if "--help" in argv:
            return ProcessOutcome(argv, self.help_returncode, self.help_text)
        if self.run_side_effect is not None:
            self.run_side_effect(Path(cwd))
        return ProcessOutcome(
            argv,
            None if self.run_timed_out else self.run_returncode,
            self.run_output,
            timed_out=self.run_timed_out,
        )

    def calls_of(self, kind: str) -> list[dict[str, Any]]:
        """Return recorded calls of one kind: ``install``, ``help`` or ``run``."""
        selected = []
        for call in self.calls:
            argv = call["command"]
            if argv[1:2] == ["install"]:
                call_kind = "install"
            elif "--help" in argv:
                call_kind = "help"
            else:
                call_kind = "run"
            if call_kind == kind:
                selected.append(call)
        return selected


@pytest.fixture()
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def sample_help_text() -> str:
    """Provide help output in the format printed by ``yo <generator> --help``."""
    return SAMPLE_HELP_TEXT


@pytest.fixture()
def fake_process() -> FakeProcessRunner:
    """Provide a scripted process runner."""
    return FakeProcessRunner()
