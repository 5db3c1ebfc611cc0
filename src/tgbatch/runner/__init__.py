"""Public runner exports for tgbatch."""

from __future__ import annotations

from .batch_runner import BatchRunner
from .cancellation import CancellationToken
from .command import CommandExecutor, CommandResult, SubprocessExecutor
from .output import (
    create_command_summary,
    extract_command_output_lines,
    is_key_line,
    strip_terminal_sequences,
)

__all__ = [
    "BatchRunner",
    "CancellationToken",
    "CommandExecutor",
    "CommandResult",
    "SubprocessExecutor",
    "create_command_summary",
    "extract_command_output_lines",
    "is_key_line",
    "strip_terminal_sequences",
]
