"""Tests for non-interactive generator runs."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from conftest import FakeProcessRunner

from yeoman_mcp_server.config import ServerConfig
from yeoman_mcp_server.descriptor import GeneratorDescriptor
from yeoman_mcp_server.process import NON_INTERACTIVE_FLAGS, ProcessOutcome
from yeoman_mcp_server.results import OutcomeKind
from yeoman_mcp_server.runner import (
    GeneratorRunner,
    InvocationRequest,
    build_command,
    classify_outcome,
    detect_prompts,
)
from yeoman_mcp_server.services import build_services


def _runner(
    fake_process: FakeProcessRunner, generator_dir: Path | None = None
) -> GeneratorRunner:
    config = ServerConfig(generator_dir=generator_dir)
    return build_services(config, process_runner=fake_process).runner


def _request(cwd: Path, **kwargs: object) -> InvocationRequest:
    kwargs.setdefault("app_name", "demo")
    kwargs.setdefault("options", {"style": "sass"})
    return InvocationRequest.build("webapp", cwd, **kwargs)  # type: ignore[arg-type]


def _workspace_of(fake_process: FakeProcessRunner) -> Path:
    return fake_process.calls_of("install")[0]["cwd"]


def test_successful_run_builds_non_interactive_command(
    tmp_path: Path, fake_process: FakeProcessRunner
) -> None:
    """Arguments, options and every non-interactive flag reach yo."""
    runner = _runner(fake_process)
    cwd = tmp_path / "project"

    result = runner.run(_request(cwd, version="1.0.0", extra_args=["extra"]))

    assert result.kind is OutcomeKind.SUCCESS
    assert result.success is True
    assert result.output == "create index.html\n"
    assert result.generator_config_exists is False
    (run_call,) = fake_process.calls_of("run")
    command = run_call["command"]
    assert command[1:5] == ["webapp", "demo", "1.0.0", "extra"]
    assert "--style=sass" in command
    for flag in NON_INTERACTIVE_FLAGS:
        assert command.count(flag) == 1
    assert run_call["cwd"] == cwd
    assert run_call["merge_stderr"] is True
    assert run_call["env"]["NO_COLOR"] == "1"
    assert cwd.is_dir()


def test_disposable_workspace_is_removed_after_success(
    tmp_path: Path, fake_process: FakeProcessRunner
) -> None:
    """The temporary workspace is gone once the run returns."""
    runner = _runner(fake_process)

    runner.run(_request(tmp_path))

    assert not _workspace_of(fake_process).exists()


def test_disposable_workspace_is_removed_after_failure(
    tmp_path: Path, fake_process: FakeProcessRunner
) -> None:
    """Cleanup also happens for failures and unexpected errors."""
    runner = _runner(fake_process)
    fake_process.run_returncode = 1
    runner.run(_request(tmp_path))
    assert not _workspace_of(fake_process).exists()

    def explode(_: Path) -> None:
        raise RuntimeError("boom")

    fake_process.calls.clear()
    fake_process.run_side_effect = explode
    with pytest.raises(RuntimeError):
        runner.run(_request(tmp_path))
    assert not _workspace_of(fake_process).exists()


def test_persistent_workspace_installs_once(
    tmp_path: Path, fake_process: FakeProcessRunner
) -> None:
    """A persistent workspace survives and skips the second install."""
    generator_dir = tmp_path / "generators"
    runner = _runner(fake_process, generator_dir)

    assert runner.run(_request(tmp_path / "a")).success
    assert runner.run(_request(tmp_path / "b")).success

    assert len(fake_process.calls_of("install")) == 1
    assert generator_dir.is_dir()
    assert (generator_dir / "node_modules" / "generator-webapp").is_dir()


def test_missing_requirements_abort_before_spawn(
    tmp_path: Path, fake_process: FakeProcessRunner
) -> None:
    """Without appName and style nothing is spawned."""
    runner = _runner(fake_process)

    result = runner.run(InvocationRequest.build("webapp", tmp_path))

    assert result.kind is OutcomeKind.MISSING_REQUIREMENT
    assert result.success is False
    assert [item["name"] for item in result.missing_required] == ["appName"]
    assert result.missing_options[0]["name"] == "style"
    assert result.missing_options[0]["enum_values"] == ["css", "sass"]
    assert result.example_command == "yo webapp <appName> --style=<css|sass>"
    assert result.suggestions
    assert result.usage is not None and "Usage:" in result.usage
    assert fake_process.calls_of("run") == []


def test_skip_preflight_runs_anyway(
    tmp_path: Path, fake_process: FakeProcessRunner
) -> None:
    """The caller can bypass the requirement check."""
    runner = _runner(fake_process)

    request = InvocationRequest.build("webapp", tmp_path, skip_preflight=True)
    result = runner.run(request)

    assert result.kind is OutcomeKind.SUCCESS


def test_unavailable_help_does_not_block_the_run(
    tmp_path: Path, fake_process: FakeProcessRunner
) -> None:
    """Help failures only disable the pre-flight check."""
    fake_process.help_returncode = 1
    runner = _runner(fake_process)

    result = runner.run(InvocationRequest.build("webapp", tmp_path))

    assert result.kind is OutcomeKind.SUCCESS
    assert len(fake_process.calls_of("run")) == 1


def test_install_failure_is_structured(
    tmp_path: Path, fake_process: FakeProcessRunner
) -> None:
    """An install failure stops the run with a suggestion."""
    fake_process.install_returncode = 1
    runner = _runner(fake_process)

    result = runner.run(_request(tmp_path))

    assert result.kind is OutcomeKind.INSTALL_ERROR
    assert "generator-webapp" in result.suggestions[0]
    assert fake_process.calls_of("help") == []
    assert fake_process.calls_of("run") == []
    assert not _workspace_of(fake_process).exists()


@pytest.mark.parametrize("returncode", [0, 1])
def test_not_found_marker_wins_regardless_of_exit_code(
    tmp_path: Path, fake_process: FakeProcessRunner, returncode: int
) -> None:
    """'Did not find a suitable generator' is always NotFound."""
    fake_process.run_output = (
        "Error webapp\n\nDid not find a suitable generator\n? Name your app\n"
    )
    fake_process.run_returncode = returncode
    runner = _runner(fake_process)

    result = runner.run(_request(tmp_path))

    assert result.kind is OutcomeKind.NOT_FOUND
    assert result.to_dict()["success"] is False


def test_prompt_lines_are_reported_verbatim(
    tmp_path: Path, fake_process: FakeProcessRunner
) -> None:
    """Unanswered prompts produce StillInteractive with the prompt lines."""
    fake_process.run_output = (
        "\x1b[32m?\x1b[39m Which framework? (Use arrow keys)\n"
        "\x1b[36m❯ react\x1b[39m\n"
        "  vue\n"
    )
    runner = _runner(fake_process)

    result = runner.run(_request(tmp_path))

    assert result.kind is OutcomeKind.STILL_INTERACTIVE
    assert result.prompts_detected == [
        "? Which framework? (Use arrow keys)",
        "❯ react",
    ]
    assert result.to_dict()["prompts_detected"][0] == (
        "? Which framework? (Use arrow keys)"
    )


def test_invalid_version_is_classified(
    tmp_path: Path, fake_process: FakeProcessRunner
) -> None:
    """semver errors map to InvalidVersionFormat."""
    fake_process.run_output = "TypeError: Invalid Version: one\n"
    fake_process.run_returncode = 1
    runner = _runner(fake_process)

    result = runner.run(_request(tmp_path, version="one"))

    assert result.kind is OutcomeKind.INVALID_VERSION_FORMAT


def test_non_zero_exit_is_generic_failure(
    tmp_path: Path, fake_process: FakeProcessRunner
) -> None:
    """Other failures carry the sanitized output and exit code."""
    fake_process.run_output = "\x1b[31mboom\x1b[0m\r\n"
    fake_process.run_returncode = 2
    runner = _runner(fake_process)

    result = runner.run(_request(tmp_path))

    assert result.kind is OutcomeKind.GENERIC_FAILURE
    assert result.exit_code == 2
    assert result.output == "boom\n"


def test_timeout_classification(
    tmp_path: Path, fake_process: FakeProcessRunner
) -> None:
    """A killed run is TimedOut unless it was stuck on a prompt."""
    fake_process.run_timed_out = True
    fake_process.run_output = "working...\n"
    runner = _runner(fake_process)

    assert runner.run(_request(tmp_path)).kind is OutcomeKind.TIMED_OUT

    fake_process.run_output = "? Project name\n"
    assert runner.run(_request(tmp_path)).kind is OutcomeKind.STILL_INTERACTIVE


def test_generator_config_is_detected(
    tmp_path: Path, fake_process: FakeProcessRunner
) -> None:
    """A .yo-rc.json entry for the generator sets generator_config_exists."""

    def write_config(cwd: Path) -> None:
        (cwd / ".yo-rc.json").write_text(
            json.dumps({"generator-webapp": {"style": "sass"}}), encoding="utf-8"
        )

    fake_process.run_side_effect = write_config
    runner = _runner(fake_process)

    result = runner.run(_request(tmp_path))

    assert result.generator_config_exists is True


def test_unreadable_generator_config_is_not_fatal(tmp_path: Path) -> None:
    """A corrupt .yo-rc.json still yields Success."""
    (tmp_path / ".yo-rc.json").write_text("{not json", encoding="utf-8")
    outcome = ProcessOutcome(["yo", "webapp"], 0, "done\n")

    result = classify_outcome(GeneratorDescriptor.parse("webapp"), outcome, tmp_path)

    assert result.kind is OutcomeKind.SUCCESS
    assert result.generator_config_exists is False


def test_caller_flags_are_not_duplicated(tmp_path: Path) -> None:
    """Flags the caller already set, in any spelling, are not appended."""
    request = InvocationRequest.build(
        "webapp",
        tmp_path,
        options={"skip-install": False, "skipCache": True, "quiet": True},
    )

    command = build_command("yo", request)

    assert "--skip-install" not in command
    assert "--skip-cache" not in command
    assert command.count("--quiet") == 1
    assert "--skipCache" in command
    assert "--no-interactive" in command


def test_detect_prompts_ignores_ordinary_lines() -> None:
    """Only lines starting with a prompt or selection marker count."""
    output = "Why? Because.\n   create file?\n? Name\n  › option\n"

    assert detect_prompts(output) == ["? Name", "  › option"]


def test_identity_arguments_keep_their_positions(tmp_path: Path) -> None:
    """The app name always comes first and the version second."""
    request = InvocationRequest.build(
        "webapp", tmp_path, app_name="demo", version="1.0.0", extra_args=["x"]
    )

    assert request.args == ["demo", "1.0.0", "x"]


@pytest.mark.parametrize(
    ("app_name", "version"),
    [(None, "1.0.0"), ("", "1.0.0"), ("", None), ("demo", "")],
)
def test_identity_arguments_cannot_shift(
    tmp_path: Path, app_name: str | None, version: str | None
) -> None:
    """A version never slides into the app name slot."""
    with pytest.raises(ValueError):
        InvocationRequest.build("webapp", tmp_path, app_name=app_name, version=version)
