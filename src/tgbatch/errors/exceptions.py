"""Exception hierarchy for tgbatch."""

from __future__ import annotations

from typing import Any, Optional


class TgBatchError(Exception):
    """
    Base exception for tgbatch.

    Attributes:
        details: Optional structured information (e.g., directory, command).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class ConfigError(TgBatchError):
    """Raised when the configuration is missing or invalid."""


class ReadError(TgBatchError):
    """Raised when a module-definition file cannot be read."""


class PlanningError(TgBatchError):
    """Raised when the directory walk or classification fails."""


class FetchError(TgBatchError):
    """Raised when the base branch cannot be fetched after retries."""


class GitError(TgBatchError):
    """Raised when a git query (diff, current branch) fails."""


class CheckoutError(TgBatchError):
    """Raised when switching to or restoring a branch fails."""


class CommandExecutionError(TgBatchError):
    """Raised when the external command cannot start or exits non-zero."""


class ExportError(TgBatchError):
    """Raised when the final report cannot be handed to the CI environment."""
