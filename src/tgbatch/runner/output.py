"""Key-line extraction from noisy IaC command output."""

from __future__ import annotations

import re

# CSI (colors, cursor moves), OSC (titles, hyperlinks) and two-byte escapes.
_ANSI_RE = re.compile(
    r"\x1b\[[0-?]*[ -/]*[@-~]"
    r"|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)"
    r"|\x1b[@-Z\\-_]"
)
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")

_KEY_LINE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r'#\s+[\w\[\]\-."]+\s+will\s+be', re.IGNORECASE),
    re.compile(r"plan:", re.IGNORECASE),
    re.compile(r"warning", re.IGNORECASE),
    re.compile(r"error", re.IGNORECASE),
    re.compile(r"outputs", re.IGNORECASE),
    re.compile(r"\s+(?:~|->|\+|-|-/\+|\+/-)\s+"),
    re.compile(r"no\s+changes", re.IGNORECASE),
    re.compile(r"configuration is valid", re.IGNORECASE),
)

LINE_PREFIX = "> "
LINE_SEPARATOR = "\n...\n"


def strip_terminal_sequences(text: str) -> str:
    """Remove terminal escape sequences and stray control characters."""
    text = _ANSI_RE.sub("", text)
    return _CONTROL_RE.sub("", text)


def is_key_line(line: str) -> bool:
    return any(pattern.search(line) for pattern in _KEY_LINE_PATTERNS)


def extract_command_output_lines(output: str) -> list[str]:
    """Return the key lines of `output`, in order, each prefixed with `> `."""
    cleaned = strip_terminal_sequences(output)
    return [LINE_PREFIX + line for line in cleaned.split("\n") if is_key_line(line)]


def create_command_summary(command: str, relative_dir: str, lines: list[str]) -> str:
    return (
        f'### Operation "{command}" key points:\n'
        f"(in directory {relative_dir})\n\n"
        f"{LINE_SEPARATOR.join(lines)}\n\n"
        "-------------------------------------\n\n"
    )
