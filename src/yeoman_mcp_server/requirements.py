"""Pre-flight comparison of a generator's requirements with caller input."""

from __future__ import annotations

import re
import shlex
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from yeoman_mcp_server.help_parser import ArgumentSpec, HelpInfo, OptionSpec

OptionValue = str | bool | int | float | None

_SEPARATOR_PATTERN = re.compile(r"[-_]+([A-Za-z0-9])")


def camel_case(name: str) -> str:
    """Convert ``skip-install`` or ``skip_install`` to ``skipInstall``."""
    return _SEPARATOR_PATTERN.sub(lambda match: match.group(1).upper(), name)


def option_supplied(name: str, provided_options: Mapping[str, Any]) -> bool:
    """Whether ``name`` is present under its literal or camel-cased spelling."""
    return name in provided_options or camel_case(name) in provided_options


@dataclass
class MissingOption:
    """Required option absent from the caller's input."""

    name: str
    flag: str
    description: str = ""
    enum_values: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the missing option as JSON-friendly data."""
        payload: dict[str, Any] = {
            "name": self.name,
            "flag": self.flag,
            "description": self.description,
        }
        if self.enum_values:
            payload["enum_values"] = list(self.enum_values)
        return payload


@dataclass
class RequirementReport:
    """Outcome of :func:`check_requirements`."""

    missing_required: list[ArgumentSpec] = field(default_factory=list)
    missing_options: list[MissingOption] = field(default_factory=list)
    default_options: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether nothing required is missing."""
        return not self.missing_required and not self.missing_options

    def suggestions(self) -> list[str]:
        """Human-readable hints for filling in the missing items."""
        hints: list[str] = []
        for argument in self.missing_required:
            detail = f": {argument.description}" if argument.description else ""
            hints.append(
                f"Provide positional argument '{argument.name}' "
                f"({argument.type}){detail}"
            )
        for option in self.missing_options:
            if option.enum_values:
                choices = ", ".join(option.enum_values)
                hints.append(f"Choose a value for {option.flag} (one of: {choices})")
            else:
                detail = f": {option.description}" if option.description else ""
                hints.append(f"Provide a value for {option.flag}{detail}")
        return hints

    def to_dict(self) -> dict[str, Any]:
        """Return the report as JSON-friendly data."""
        return {
            "missing_required": [
                argument.to_dict() for argument in self.missing_required
            ],
            "missing_options": [option.to_dict() for option in self.missing_options],
            "default_options": dict(self.default_options),
        }


def check_requirements(
    help_info: HelpInfo,
    provided_args: Sequence[str],
    provided_options: Mapping[str, Any],
) -> RequirementReport:
    """Report required arguments and options the caller did not supply.

    A required argument is missing when its position lies beyond the supplied
    positional arguments. A required option is missing when neither its name nor
    the camel-cased name is a key of ``provided_options``. Options with choices
    are reported like any other so the caller picks a value explicitly.
    """
    report = RequirementReport()
    for index, argument in enumerate(help_info.args):
        if argument.required and index >= len(provided_args):
            report.missing_required.append(argument)
    for name, option in help_info.options.items():
        if option_supplied(name, provided_options):
            continue
        if option.required:
            report.missing_options.append(_missing_option(option))
        elif option.default is not None:
            report.default_options[name] = option.default
    return report


def _missing_option(option: OptionSpec) -> MissingOption:
    return MissingOption(
        name=option.name,
        flag=option.flag,
        description=option.description,
        enum_values=list(option.enum_values) if option.enum_values else None,
    )


def render_option_flags(options: Mapping[str, OptionValue]) -> list[str]:
    """Render caller options as command-line flags.

    ``True`` becomes ``--name``, ``False`` and ``None`` are omitted and any other
    value becomes ``--name=value``.
    """
    flags: list[str] = []
    for name, value in options.items():
        if value is None or value is False:
            continue
        flag = name if name.startswith("-") else f"--{name}"
        if value is True:
            flags.append(flag)
        else:
            flags.append(f"{flag}={value}")
    return flags


def example_command(
    generator: str,
    help_info: HelpInfo,
    provided_args: Sequence[str],
    provided_options: Mapping[str, OptionValue],
    report: RequirementReport,
) -> str:
    """Synthesize a ``yo`` command line that would satisfy the pre-flight check."""
    parts = ["yo", generator, *(shlex.quote(value) for value in provided_args)]
    missing_names = {argument.name for argument in report.missing_required}
    for argument in help_info.args[len(provided_args) :]:
        if argument.name in missing_names:
            parts.append(f"<{argument.name}>")
    parts.extend(shlex.quote(flag) for flag in render_option_flags(provided_options))
    for option in report.missing_options:
        placeholder = "|".join(option.enum_values) if option.enum_values else "value"
        parts.append(f"{option.flag}=<{placeholder}>")
    return " ".join(parts)
