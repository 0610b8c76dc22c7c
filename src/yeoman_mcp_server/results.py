"""Structured outcomes of generator operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class OutcomeKind(str, Enum):
    """Classification of an invocation's outcome."""

    SUCCESS = "Success"
    INSTALL_ERROR = "InstallError"
    HELP_UNAVAILABLE = "HelpUnavailable"
    MISSING_REQUIREMENT = "MissingRequirement"
    NOT_FOUND = "NotFound"
    STILL_INTERACTIVE = "StillInteractive"
    INVALID_VERSION_FORMAT = "InvalidVersionFormat"
    GENERIC_FAILURE = "GenericFailure"
    TIMED_OUT = "TimedOut"


@dataclass
class InvocationResult:
    """Tagged result of running (or trying to run) a generator.

    Only the fields relevant to ``kind`` are filled in; :meth:`to_dict` drops the
    ones left empty so payloads stay small.
    """

    kind: OutcomeKind
    generator: str
    message: str
    output: str = ""
    exit_code: int | None = None
    command: list[str] = field(default_factory=list)
    prompts_detected: list[str] = field(default_factory=list)
    missing_required: list[dict[str, Any]] = field(default_factory=list)
    missing_options: list[dict[str, Any]] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    example_command: str | None = None
    usage: str | None = None
    generator_config_exists: bool | None = None

    @property
    def success(self) -> bool:
        """Whether the generator ran to completion."""
        return self.kind is OutcomeKind.SUCCESS

    def to_dict(self) -> dict[str, Any]:
        """Return the result payload, dropping fields that are empty."""
        payload: dict[str, Any] = {
            "success": self.success,
            "kind": self.kind.value,
            "generator": self.generator,
            "message": self.message,
        }
        optional: dict[str, Any] = {
            "output": self.output,
            "exit_code": self.exit_code,
            "command": self.command,
            "prompts_detected": self.prompts_detected,
            "missing_required": self.missing_required,
            "missing_options": self.missing_options,
            "suggestions": self.suggestions,
            "example_command": self.example_command,
            "usage": self.usage,
            "generator_config_exists": self.generator_config_exists,
        }
        payload.update(
            {
                key: value
                for key, value in optional.items()
                if value not in (None, "", [])
            }
        )
        return payload
