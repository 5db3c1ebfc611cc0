"""Public error exports for tgbatch."""

from __future__ import annotations

from .exceptions import (
    CheckoutError,
    CommandExecutionError,
    ConfigError,
    ExportError,
    FetchError,
    GitError,
    PlanningError,
    ReadError,
    TgBatchError,
)

__all__ = [
    "TgBatchError",
    "ConfigError",
    "ReadError",
    "PlanningError",
    "FetchError",
    "GitError",
    "CheckoutError",
    "CommandExecutionError",
    "ExportError",
]
