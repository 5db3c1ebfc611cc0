"""Directory operation and batch models."""

from __future__ import annotations

from dataclasses import dataclass

from .kinds import OperationKind


@dataclass(frozen=True, slots=True)
class DirOperation:
    """A single directory and what to do with it."""

    directory: str
    kind: OperationKind


@dataclass(frozen=True, slots=True)
class OperationBatch:
    """
    Operations executed together, in order.

    `run_on_base_branch` is set only for the batch holding destroy
    operations; it runs against the pre-change definitions.
    """

    operations: tuple[DirOperation, ...]
    run_on_base_branch: bool = False

    def without_scans(self) -> "OperationBatch":
        return OperationBatch(
            operations=tuple(op for op in self.operations if op.kind is not OperationKind.SCAN),
            run_on_base_branch=self.run_on_base_branch,
        )
