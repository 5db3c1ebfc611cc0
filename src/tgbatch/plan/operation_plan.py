"""OperationPlan model."""

from __future__ import annotations

from dataclasses import dataclass

from .common_root import relative_to_root
from .kinds import OperationKind
from .operation import OperationBatch


@dataclass(frozen=True, slots=True)
class OperationPlan:
    """Ordered batches produced by the planner. Read-only once built."""

    batches: tuple[OperationBatch, ...]
    command: str
    common_root: str = ""

    def relative(self, directory: str) -> str:
        """Return `directory` with the common root prefix stripped."""
        return relative_to_root(directory, self.common_root)

    def batch_summary(self, batch: OperationBatch) -> str:
        lines = []
        for op in batch.operations:
            marker = " [!!! DESTROY !!!] " if op.kind is OperationKind.DESTROY else ""
            lines.append(f"- {marker}{self.relative(op.directory)}")
        return "\n".join(lines)

    def summary(self) -> str:
        parts = [
            f'\nOperation plan for command "{self.command}" includes {len(self.batches)} batches.\n'
            f"Will be run in the root directory {self.common_root}.\n\n"
        ]
        for i, batch in enumerate(self.batches):
            parts.append(f"\n> Batch #{i}:\n")
            parts.append(self.batch_summary(batch))
            parts.append("\n")
        return "".join(parts)
