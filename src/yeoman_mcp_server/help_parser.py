"""Parsing of ``yo <generator> --help`` output.

Help text is free-form and differs between generator versions, so parsing is
best-effort: every step works on whatever it can recognize and unrecognized
sections simply leave the corresponding collection empty. :func:`parse_help`
never raises.

A typical input looks like::

    Usage:
      yo webapp:app [options] [<appName>]

    Options:
      -h,   --help          # Print the generator's options and usage
            --skip-install  # Do not automatically install dependencies  Default: false
            --style         # Stylesheet language [css|sass]

    Arguments:
      appName  # Your application name  Type: String  Required: true
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

# Control flags that never need an answer from the caller.
NON_REQUIRED_OPTIONS = frozenset(
    {
        "help",
        "version",
        "skip-install",
        "skip-cache",
        "skip-git",
        "skip-welcome-message",
        "skip-prompts",
        "force",
        "force-install",
        "force-yes",
        "yes",
        "quiet",
        "silent",
        "verbose",
        "debug",
        "dry-run",
        "bail",
        "no-color",
        "color",
        "no-insight",
        "insight",
        "no-interactive",
        "ask-answered",
        "local-config-only",
    }
)

# Substrings of option names that usually identify a prompt answer.
IDENTITY_TOKENS = (
    "name",
    "author",
    "email",
    "style",
    "client",
    "framework",
    "language",
    "license",
    "username",
    "github",
    "organization",
    "project",
)

_SECTION_ALIASES = {
    "usage": "usage",
    "options": "options",
    "flags": "options",
    "arguments": "arguments",
    "questions": "questions",
    "prompts": "questions",
    "inputs": "questions",
}

_HEADER_PATTERN = re.compile(
    r"^(?P<indent>\s*)(?P<title>[A-Za-z][A-Za-z ]{0,40}?)\s*:\s*(?P<rest>.*)$"
)
_PLACEHOLDER_PATTERN = re.compile(
    r"\[<(?P<optional>[\w-]+)>(?:\.\.\.)?\]|<(?P<angle>[\w-]+)>|\[(?P<square>[\w-]+)\]"
)
_ARGUMENT_PATTERN = re.compile(
    r"^\s+(?P<name>[A-Za-z_][\w-]*)"
    r"(?:(?:\s*#\s*|\s{2,})(?P<description>.*?))?"
    r"(?:\s+Type:\s*(?P<type>\S+))?"
    r"(?:\s+Required:\s*(?P<required>\w+))?\s*$",
    re.IGNORECASE,
)
_OPTION_PATTERN = re.compile(
    r"^\s*(?:-(?P<alias>[A-Za-z0-9]),?\s+)?--(?P<name>[A-Za-z0-9][\w-]*)"
    r"(?:,\s*-(?P<trailing_alias>[A-Za-z0-9])\b)?"
    r"(?:[ =]<[^>]*>|=\S+)?"
    r"(?P<rest>.*)$"
)
_DEFAULT_PATTERN = re.compile(
    r"[(\[]?\bdefault(?:s| value)?\s*[:=]\s*(?P<value>[^)\]]*?)\s*(?:[)\]]|$)",
    re.IGNORECASE,
)
_ENUM_PATTERN = re.compile(r"\[(?P<choices>[^\[\]|]+(?:\|[^\[\]|]+)+)\]")
_OPTIONAL_MARKER = re.compile(
    r"\boptional\b|\bnot\s+required\b|\brequired\s*:\s*(?:false|no)\b", re.IGNORECASE
)
_REQUIRED_MARKER = re.compile(r"\brequired\b|\bmandatory\b", re.IGNORECASE)
_PROMPT_MARKER = re.compile(r"\?|\b(?:enter|specify|provide)\b", re.IGNORECASE)


@dataclass
class ArgumentSpec:
    """Positional argument accepted by a generator."""

    name: str
    type: str = "String"
    required: bool = False
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the argument as JSON-friendly data."""
        return {
            "name": self.name,
            "type": self.type,
            "required": self.required,
            "description": self.description,
        }


@dataclass
class OptionSpec:
    """Command-line option accepted by a generator."""

    name: str
    flag: str
    description: str = ""
    default: str | None = None
    required: bool = False
    enum_values: list[str] | None = None
    alias: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the option as JSON-friendly data, omitting empty fields."""
        payload: dict[str, Any] = {
            "flag": self.flag,
            "description": self.description,
            "required": self.required,
        }
        if self.default is not None:
            payload["default"] = self.default
        if self.enum_values:
            payload["enum_values"] = list(self.enum_values)
        if self.alias:
            payload["alias"] = self.alias
        return payload


@dataclass
class HelpInfo:
    """Structured view of a generator's help text.

    Attributes:
        args: Positional arguments in invocation order.
        options: Options keyed by their long name (without dashes).
        usage: The usage line, when one was found.

    """

    args: list[ArgumentSpec] = field(default_factory=list)
    options: dict[str, OptionSpec] = field(default_factory=dict)
    usage: str | None = None

    @property
    def required_args(self) -> list[ArgumentSpec]:
        """Arguments classified as required."""
        return [argument for argument in self.args if argument.required]

    @property
    def required_options(self) -> list[OptionSpec]:
        """Options classified as required."""
        return [option for option in self.options.values() if option.required]

    def to_dict(self) -> dict[str, Any]:
        """Return the parsed help as JSON-friendly data."""
        return {
            "usage": self.usage,
            "args": [argument.to_dict() for argument in self.args],
            "options": {
                name: option.to_dict() for name, option in self.options.items()
            },
        }


def _section_key(title: str) -> str | None:
    words = title.strip().lower().split()
    if not words:
        return None
    return _SECTION_ALIASES.get(words[-1])


def split_sections(text: str) -> dict[str, list[str]]:
    """Group help lines under their section headers.

    Only recognized sections (usage, options, arguments and the question/prompt
    family) are returned. Text after an unknown header is dropped until the next
    recognized one.
    """
    sections: dict[str, list[str]] = {}
    current: list[str] | None = None
    for line in text.splitlines():
        match = _HEADER_PATTERN.match(line)
        if match:
            key = _section_key(match.group("title"))
            rest = match.group("rest").strip()
            indented = bool(match.group("indent"))
            if key is not None and not (indented and rest):
                current = sections.setdefault(key, [])
                if rest:
                    current.append(rest)
                continue
            if key is None and not rest and not indented:
                current = None
                continue
        if current is not None:
            current.append(line)
    return sections


def _usage_line(lines: list[str]) -> str | None:
    for line in lines:
        if line.strip():
            return line.strip()
    return None


def _usage_arguments(usage: str) -> list[ArgumentSpec]:
    arguments: list[ArgumentSpec] = []
    seen: set[str] = set()
    for match in _PLACEHOLDER_PATTERN.finditer(usage):
        name = match.group("optional") or match.group("angle") or match.group("square")
        if not name or name.lower() == "options" or name in seen:
            continue
        seen.add(name)
        arguments.append(ArgumentSpec(name=name))
    return arguments


def _merge_arguments(arguments: list[ArgumentSpec], lines: list[str]) -> None:
    by_name = {argument.name: argument for argument in arguments}
    for line in lines:
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        match = _ARGUMENT_PATTERN.match(line)
        if not match:
            continue
        name = match.group("name")
        description = (match.group("description") or "").strip()
        argument = by_name.get(name)
        if argument is None:
            argument = ArgumentSpec(name=name)
            by_name[name] = argument
            arguments.append(argument)
        if match.group("type"):
            argument.type = match.group("type")
        if match.group("required"):
            argument.required = match.group("required").lower() in {"true", "yes"}
        if description:
            argument.description = description


def extract_default(description: str) -> tuple[str, str | None]:
    """Split a ``Default: value`` marker off an option description.

    Returns:
        The description without the marker and the default value, or ``None``
        when the description carries no default.

    """
    match = _DEFAULT_PATTERN.search(description)
    if match is None:
        return description, None
    remainder = f"{description[: match.start()]} {description[match.end() :]}"
    return " ".join(remainder.split()), match.group("value").strip()


def extract_enum_values(description: str) -> list[str] | None:
    """Return the choices of the first ``[a|b|c]`` list in ``description``."""
    match = _ENUM_PATTERN.search(description)
    if match is None:
        return None
    choices = [choice.strip() for choice in match.group("choices").split("|")]
    return [choice for choice in choices if choice] or None


def classify_option_required(
    name: str,
    description: str,
    default: str | None,
    enum_values: list[str] | None,
) -> bool:
    """Guess whether an option must be supplied for an unattended run.

    Rules are applied in order and the first one that applies decides: control
    flags and options with defaults are optional, explicit markers in the
    description come next, then identity-like names, prompt wording and finally
    enumerated choices.
    """
    lowered = name.lower()
    if lowered in NON_REQUIRED_OPTIONS:
        return False
    if default is not None:
        return False
    if _OPTIONAL_MARKER.search(description):
        return False
    if _REQUIRED_MARKER.search(description):
        return True
    if any(token in lowered for token in IDENTITY_TOKENS):
        return True
    if _PROMPT_MARKER.search(description):
        return True
    return bool(enum_values)


def _parse_options(lines: list[str]) -> dict[str, OptionSpec]:
    options: dict[str, OptionSpec] = {}
    for line in lines:
        match = _OPTION_PATTERN.match(line)
        if not match:
            continue
        name = match.group("name")
        if name in options:
            continue
        description = match.group("rest").strip().lstrip("#").strip()
        description, default = extract_default(description)
        enum_values = extract_enum_values(description)
        options[name] = OptionSpec(
            name=name,
            flag=f"--{name}",
            description=description,
            default=default,
            required=classify_option_required(name, description, default, enum_values),
            enum_values=enum_values,
            alias=match.group("alias") or match.group("trailing_alias"),
        )
    return options


def _apply_questions(options: dict[str, OptionSpec], lines: list[str]) -> None:
    text = "\n".join(lines).lower()
    for name, option in options.items():
        if name.lower() in NON_REQUIRED_OPTIONS or option.default is not None:
            option.required = False
            continue
        pattern = rf"(?<![\w-]){re.escape(name.lower())}(?![\w-])"
        if re.search(pattern, text):
            option.required = True


def parse_help(raw_text: str | None) -> HelpInfo:
    """Parse generator help text into a :class:`HelpInfo`."""
    if not raw_text or not isinstance(raw_text, str):
        return HelpInfo()

    sections = split_sections(raw_text)
    usage = _usage_line(sections.get("usage", []))
    arguments = _usage_arguments(usage) if usage else []
    _merge_arguments(arguments, sections.get("arguments", []))
    options = _parse_options(sections.get("options", []))
    if "questions" in sections:
        _apply_questions(options, sections["questions"])
    return HelpInfo(args=arguments, options=options, usage=usage)
