"""OperationPlanner: turns a changed-file list into ordered batches."""

from __future__ import annotations

import logging
import os
from typing import Iterator, Optional, Sequence

from tgbatch.errors import PlanningError, ReadError

from .common_root import relative_to_root, update_common_root
from .dependencies import extract_dependencies
from .files import contains_runnable_file, is_module_file, is_runnable_file
from .kinds import OperationKind
from .operation import DirOperation, OperationBatch
from .operation_plan import OperationPlan


class OperationPlanner:
    """
    Dependency-aware planner.

    The first batch holds the changed directories. Every other directory whose
    definition files depend, directly or transitively, on a changed directory
    is placed in the batch after the last of its dependencies, i.e. at the
    length of its longest dependency path from the changed set. Directories
    removed from the working tree are held aside and appended as a final
    batch that runs on the base branch.
    """

    def __init__(
        self,
        changed_files: Sequence[str],
        work_root: str,
        command: str,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._changed_files = [f.strip() for f in changed_files if f.strip()]
        self._work_root = os.path.abspath(work_root)
        self._command = command
        self._logger = logger or logging.getLogger(__name__)
        self._common_root = ""

    def plan(self) -> OperationPlan:
        """
        Build the OperationPlan.

        Raises:
            PlanningError: if the work root cannot be walked, a changed
                directory cannot be classified, a definition file cannot
                be read, or the dependents of the change form a cycle.
        """
        self._common_root = ""
        self._logger.info(
            "Planning %s based on %d changes", self._work_root, len(self._changed_files)
        )
        self._logger.debug("Initial changelist: %s", ",\n".join(self._changed_files))

        initial = self._initial_operations()
        destroys = tuple(op for op in initial if op.kind is OperationKind.DESTROY)

        # Removed modules still propagate to their dependents.
        first = [
            DirOperation(op.directory, OperationKind.SCAN)
            if op.kind is OperationKind.DESTROY
            else op
            for op in initial
        ]
        pinned = {op.directory for op in first}
        index = self._dependency_index()

        # A directory on a simple path can sit at most this many layers deep.
        max_depth = len({directory for directory, _, _ in index} - pinned)
        depth: dict[str, int] = {}
        kinds: dict[str, OperationKind] = {}

        frontier = pinned
        layer = 0
        while frontier:
            layer += 1
            self._logger.info("Walking path for layer %d", layer)
            found = self._dependents(index, frontier, pinned)

            self._logger.info("Found %d new items", len(found))
            self._logger.debug(
                "%s",
                ", ".join(relative_to_root(d, self._common_root) for d in found),
            )
            if found and layer > max_depth:
                raise PlanningError(
                    f"dependency cycle among {', '.join(sorted(found))}",
                    details={"directories": sorted(found)},
                )
            for directory, kind in found.items():
                depth[directory] = layer
                if kinds.get(directory) is not OperationKind.RUN:
                    kinds[directory] = kind
            frontier = set(found)

        layers: list[list[DirOperation]] = [first]
        layers.extend([] for _ in range(max(depth.values(), default=0)))
        for directory in dict.fromkeys(d for d, _, _ in index):
            if directory in depth:
                layers[depth[directory]].append(DirOperation(directory, kinds[directory]))

        batches = [OperationBatch(operations=tuple(ops)).without_scans() for ops in layers]
        batches = [b for b in batches if b.operations]
        if destroys:
            batches.append(OperationBatch(operations=destroys, run_on_base_branch=True))

        return OperationPlan(
            batches=tuple(batches),
            command=self._command,
            common_root=self._common_root,
        )

    # ----------------------------
    # Internals
    # ----------------------------
    def _changed_directories(self) -> list[str]:
        dirs = [
            os.path.normpath(os.path.join(self._work_root, os.path.dirname(f)))
            for f in self._changed_files
        ]
        dirs = list(dict.fromkeys(dirs))
        self._logger.debug("Changed dirs: %s", ",".join(dirs))
        return dirs

    def _initial_operations(self) -> list[DirOperation]:
        operations: list[DirOperation] = []
        for directory in self._changed_directories():
            operations.append(DirOperation(directory, self._classify(directory)))
            self._common_root = update_common_root(self._common_root, directory)
        return operations

    def _classify(self, directory: str) -> OperationKind:
        if not os.path.exists(directory):
            return OperationKind.DESTROY
        try:
            runnable = contains_runnable_file(directory)
        except OSError as exc:
            raise PlanningError(
                f"classifying directory {directory}: {exc}",
                details={"directory": directory},
                cause=exc,
            ) from exc
        return OperationKind.RUN if runnable else OperationKind.SCAN

    def _dependency_index(self) -> list[tuple[str, str, set[str]]]:
        """Read every module file once: (directory, path, dependencies)."""
        index: list[tuple[str, str, set[str]]] = []
        for path in self._module_files():
            try:
                deps = extract_dependencies(path)
            except ReadError as exc:
                raise PlanningError(
                    f"getting dependencies of {path}: {exc}",
                    details={"path": path},
                    cause=exc,
                ) from exc
            index.append((os.path.dirname(path), path, deps))
        return index

    def _dependents(
        self,
        index: list[tuple[str, str, set[str]]],
        frontier: set[str],
        pinned: set[str],
    ) -> dict[str, OperationKind]:
        found: dict[str, OperationKind] = {}
        for directory, path, deps in index:
            if deps.isdisjoint(frontier):
                continue

            self._logger.debug("Found match among dependencies of %s in current layer", path)
            self._common_root = update_common_root(self._common_root, path)

            # Changed directories stay in the first batch.
            if directory in pinned:
                continue
            kind = OperationKind.RUN if is_runnable_file(path) else OperationKind.SCAN
            if found.get(directory) is not OperationKind.RUN:
                found[directory] = kind
        return found

    def _module_files(self) -> Iterator[str]:
        """Yield module-definition files under the work root in a stable order."""

        def _raise(exc: OSError) -> None:
            raise exc

        try:
            for dirpath, dirnames, filenames in os.walk(self._work_root, onerror=_raise):
                # Hidden directories are usually caches.
                dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
                for name in sorted(filenames):
                    if name.startswith(".") or not is_module_file(name):
                        continue
                    yield os.path.join(dirpath, name)
        except OSError as exc:
            raise PlanningError(
                f"walking files under {self._work_root}: {exc}",
                details={"work_root": self._work_root},
                cause=exc,
            ) from exc
