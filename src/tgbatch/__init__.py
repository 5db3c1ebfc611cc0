"""tgbatch public API."""

from __future__ import annotations

from tgbatch.config import (
    COMMAND_APPLY,
    COMMAND_PLAN,
    COMMAND_VALIDATE,
    COMMANDS,
    Settings,
    load_settings,
)
from tgbatch.errors import (
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
from tgbatch.plan import (
    DirOperation,
    OperationBatch,
    OperationKind,
    OperationPlan,
    OperationPlanner,
    extract_dependencies,
)
from tgbatch.report import build_report, export_report
from tgbatch.repository import CodeRepository, GitRepository
from tgbatch.runner import BatchRunner, CancellationToken, SubprocessExecutor

__all__ = [
    # Planning
    "OperationPlanner",
    "OperationPlan",
    "OperationBatch",
    "DirOperation",
    "OperationKind",
    "extract_dependencies",
    # Execution
    "BatchRunner",
    "CancellationToken",
    "SubprocessExecutor",
    "CodeRepository",
    "GitRepository",
    # Config / report
    "Settings",
    "load_settings",
    "COMMAND_PLAN",
    "COMMAND_APPLY",
    "COMMAND_VALIDATE",
    "COMMANDS",
    "build_report",
    "export_report",
    # Errors
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
