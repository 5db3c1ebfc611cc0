"""BatchRunner: executes an OperationPlan against the external IaC tool."""

from __future__ import annotations

import logging
from typing import Optional

from tgbatch.config import DESTRUCTIVE_COMMAND
from tgbatch.errors import CheckoutError, CommandExecutionError, TgBatchError
from tgbatch.plan import DirOperation, OperationBatch, OperationKind, OperationPlan
from tgbatch.plan.files import contains_runnable_file
from tgbatch.repository import CodeRepository

from .cancellation import CancellationToken
from .command import CommandExecutor, SubprocessExecutor
from .output import create_command_summary, extract_command_output_lines


class BatchRunner:
    """
    Run every batch of a plan in order, one operation at a time.

    Policy:
        - The first failing operation aborts the run (no retry, later
          batches never start).
        - Batches flagged `run_on_base_branch` run on a checkout of the base
          branch; the original branch is restored afterwards, whatever the
          outcome of the operations.
        - Once the token is cancelled no further operation is started and the
          run ends without raising.
    """

    def __init__(
        self,
        plan: OperationPlan,
        repository: CodeRepository,
        command: str,
        base_branch: str,
        *,
        token: Optional[CancellationToken] = None,
        tool: str = "terragrunt",
        executor: Optional[CommandExecutor] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._plan = plan
        self._repository = repository
        self._command = command
        self._base_branch = base_branch
        self._token = token or CancellationToken()
        self._tool = tool
        self._logger = logger or logging.getLogger(__name__)
        self._executor = executor or SubprocessExecutor(self._token, logger=self._logger)
        self.summaries: dict[str, str] = {}

    @property
    def command(self) -> str:
        return self._command

    @property
    def cancelled(self) -> bool:
        return self._token.is_cancelled

    def run(self) -> None:
        """
        Execute the plan.

        Raises:
            CheckoutError: if switching to or back from the base branch fails.
            CommandExecutionError: if an operation fails to start or exits
                non-zero.
        """
        for i, batch in enumerate(self._plan.batches):
            if self.cancelled:
                break
            self._logger.info("Running batch %d", i)
            self._run_batch(batch)

    def summary(self) -> str:
        parts = [
            f'Execution results of command "{self._command}":\n'
            f"Ran in the root directory {self._plan.common_root}.\n\n"
        ]
        for batch in self._plan.batches:
            for op in batch.operations:
                parts.append(self.summaries.get(op.directory, ""))
        return "".join(parts)

    # ----------------------------
    # Internals
    # ----------------------------
    def _run_batch(self, batch: OperationBatch) -> None:
        if not batch.run_on_base_branch:
            self._run_operations(batch)
            return

        original_branch = self._current_branch()
        self._logger.debug("On branch %s", original_branch)
        self._logger.info("Checking out base branch %s", self._base_branch)
        self._checkout(self._base_branch, "checkout base branch")
        try:
            self._run_operations(batch)
        finally:
            self._logger.info("Checking out original branch %s", original_branch)
            self._checkout(original_branch, "checkout original branch")

    def _run_operations(self, batch: OperationBatch) -> None:
        for op in batch.operations:
            if self.cancelled:
                break
            self._run_operation(op)

    def _run_operation(self, op: DirOperation) -> None:
        relative_dir = self._plan.relative(op.directory)
        if not self._is_runnable(op.directory):
            self._logger.info("Skipping non-runnable directory %s", relative_dir)
            return
        if op.kind is OperationKind.SCAN:
            self._logger.debug("Skipping scan of %s", relative_dir)
            return
        if op.kind is OperationKind.DESTROY and self._command != DESTRUCTIVE_COMMAND:
            self._logger.info("Skipping destroy operation when command is %s", self._command)
            return

        self._logger.info('Running operation (command "%s") in %s', self._command, relative_dir)

        result = self._executor.run([self._tool, self._command], op.directory)
        if result.returncode != 0:
            if result.interrupted or self.cancelled:
                self._logger.info("Operation in %s interrupted", relative_dir)
                return
            raise CommandExecutionError(
                f"running {self._command} in {op.directory}: exit status {result.returncode}",
                details={
                    "command": self._command,
                    "directory": op.directory,
                    "returncode": result.returncode,
                },
            )

        lines = extract_command_output_lines(result.output)
        if lines:
            self.summaries[op.directory] = create_command_summary(self._command, relative_dir, lines)

    def _is_runnable(self, directory: str) -> bool:
        try:
            return contains_runnable_file(directory)
        except (FileNotFoundError, NotADirectoryError):
            return False
        except OSError as exc:
            raise CommandExecutionError(
                f"inspecting {directory}: {exc}",
                details={"directory": directory},
                cause=exc,
            ) from exc

    def _current_branch(self) -> str:
        try:
            return self._repository.get_current_branch()
        except TgBatchError as exc:
            raise CheckoutError(f"get current branch: {exc}", cause=exc) from exc

    def _checkout(self, branch: str, what: str) -> None:
        try:
            self._repository.checkout_branch(branch)
        except TgBatchError as exc:
            raise CheckoutError(
                f"{what}: {exc}",
                details={"branch": branch},
                cause=exc,
            ) from exc
