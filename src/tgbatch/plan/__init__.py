"""Public plan exports for tgbatch."""

from __future__ import annotations

from .common_root import relative_to_root, update_common_root
from .dependencies import extract_dependencies, find_declared_paths
from .files import (
    LIBRARY_EXTENSION,
    MODULE_EXTENSIONS,
    RUNNABLE_EXTENSION,
    contains_runnable_file,
    is_module_file,
    is_runnable_file,
)
from .kinds import OperationKind
from .operation import DirOperation, OperationBatch
from .operation_plan import OperationPlan
from .planner import OperationPlanner

__all__ = [
    "OperationKind",
    "DirOperation",
    "OperationBatch",
    "OperationPlan",
    "OperationPlanner",
    "extract_dependencies",
    "find_declared_paths",
    "update_common_root",
    "relative_to_root",
    "RUNNABLE_EXTENSION",
    "LIBRARY_EXTENSION",
    "MODULE_EXTENSIONS",
    "contains_runnable_file",
    "is_module_file",
    "is_runnable_file",
]
