"""Tests for the pre-flight requirement check."""

from __future__ import annotations

from yeoman_mcp_server.help_parser import ArgumentSpec, HelpInfo, OptionSpec, parse_help
from yeoman_mcp_server.requirements import (
    camel_case,
    check_requirements,
    example_command,
    render_option_flags,
)


def _help_info() -> HelpInfo:
    return HelpInfo(
        args=[
            ArgumentSpec(name="appName", required=True, description="App name"),
            ArgumentSpec(name="template"),
            ArgumentSpec(name="version", required=True),
        ],
        options={
            "author-name": OptionSpec(
                name="author-name", flag="--author-name", required=True
            ),
            "style": OptionSpec(
                name="style",
                flag="--style",
                required=True,
                enum_values=["css", "sass"],
            ),
            "port": OptionSpec(name="port", flag="--port", default="9000"),
        },
    )


def test_scenario_required_argument_and_enum_option(sample_help_text: str) -> None:
    """Empty input reports appName and the style choices."""
    info = parse_help(sample_help_text)

    report = check_requirements(info, [], {})

    assert [argument.name for argument in report.missing_required] == ["appName"]
    (style,) = report.missing_options
    assert style.name == "style"
    assert style.enum_values == ["css", "sass"]
    assert report.ok is False


def test_arguments_are_missing_beyond_supplied_positionals() -> None:
    """Only required arguments past the supplied count are missing."""
    report = check_requirements(_help_info(), ["demo"], {})

    assert [argument.name for argument in report.missing_required] == ["version"]


def test_options_match_literal_or_camel_case_names() -> None:
    """Both ``author-name`` and ``authorName`` satisfy the option."""
    info = _help_info()

    args = ["a", "b", "c"]
    literal = check_requirements(info, args, {"author-name": "x", "style": "css"})
    camel = check_requirements(info, args, {"authorName": "x", "style": "css"})

    assert literal.ok
    assert camel.ok


def test_defaults_are_reported_for_unsupplied_options() -> None:
    """Options with defaults are listed, never reported missing."""
    report = check_requirements(_help_info(), [], {})

    assert report.default_options == {"port": "9000"}
    assert "port" not in {option.name for option in report.missing_options}


def test_check_is_pure() -> None:
    """Same inputs produce the same report and inputs are not modified."""
    info = _help_info()
    args: list[str] = ["demo"]
    options = {"style": "sass"}

    first = check_requirements(info, args, options).to_dict()
    second = check_requirements(info, args, options).to_dict()

    assert first == second
    assert args == ["demo"]
    assert options == {"style": "sass"}


def test_suggestions_and_example_command() -> None:
    """Suggestions name each missing item and the example fills placeholders."""
    info = _help_info()
    report = check_requirements(info, [], {"skipInstall": True})

    suggestions = report.suggestions()
    command = example_command("webapp", info, [], {"skipInstall": True}, report)

    assert suggestions[0] == "Provide positional argument 'appName' (String): App name"
    assert "Choose a value for --style (one of: css, sass)" in suggestions
    assert command == (
        "yo webapp <appName> <version> --skipInstall "
        "--author-name=<value> --style=<css|sass>"
    )


def test_render_option_flags() -> None:
    """True renders a bare flag, false and None are dropped."""
    flags = render_option_flags(
        {
            "skip-install": True,
            "force": False,
            "name": "my app",
            "port": 8080,
            "x": None,
        }
    )

    assert flags == ["--skip-install", "--name=my app", "--port=8080"]


def test_camel_case() -> None:
    """Dashes and underscores become camel case."""
    assert camel_case("skip-install") == "skipInstall"
    assert camel_case("author_email") == "authorEmail"
    assert camel_case("style") == "style"
