"""Cleanup of captured terminal output."""

from __future__ import annotations

import re

# CSI sequences (colors, cursor movement), OSC sequences (titles, hyperlinks) and
# the remaining two-character escapes.
_CSI_PATTERN = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]")
_OSC_PATTERN = re.compile(r"\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)")
_ESCAPE_PATTERN = re.compile(r"\x1b[@-Z\\-_]")
_CONTROL_PATTERN = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_BLANK_RUN_PATTERN = re.compile(r"\n(?:[ \t]*\n){3,}")


def strip_ansi(text: str) -> str:
    """Remove terminal escape sequences from ``text``."""
    text = _OSC_PATTERN.sub("", text)
    text = _CSI_PATTERN.sub("", text)
    return _ESCAPE_PATTERN.sub("", text)


def normalize_newlines(text: str) -> str:
    """Convert CRLF and bare CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def sanitize_output(text: str | bytes | None) -> str:
    """Make captured process output safe for structured transport.

    Escape sequences and stray control characters are removed, line endings are
    normalized and runs of three or more blank lines collapse to a single blank
    line. Applying the function to its own result returns it unchanged.
    """
    if text is None:
        return ""
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    text = strip_ansi(text)
    text = normalize_newlines(text)
    text = _CONTROL_PATTERN.sub("", text)
    return _BLANK_RUN_PATTERN.sub("\n\n", text)
