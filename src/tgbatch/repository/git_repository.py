"""Git client backing the CodeRepository contract."""

from __future__ import annotations

import logging
import os
import subprocess
import time
from dataclasses import dataclass
from typing import Optional, Sequence

from tgbatch.errors import CheckoutError, FetchError, GitError


@dataclass(frozen=True)
class _RetryPolicy:
    attempts: int = 2
    wait_sec: float = 3.0


class _GitCommandError(Exception):
    """A git invocation that could not start or exited non-zero."""

    def __init__(self, args: Sequence[str], returncode: Optional[int], output: str) -> None:
        super().__init__(f"git {' '.join(args)} failed ({returncode}): {output.strip()}")
        self.git_args = list(args)
        self.returncode = returncode
        self.output = output


class GitRepository:
    """
    Git working copy at `work_dir`.

    Notes:
        - Credentials prompts are disabled (GIT_ASKPASS=echo).
        - Only the fetch of the base branch is retried.
    """

    def __init__(
        self,
        repo_url: str,
        work_dir: str,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._repo_url = repo_url
        self._work_dir = work_dir
        self._logger = logger or logging.getLogger(__name__)
        self._retry_policy = _RetryPolicy()

    # ----------------------------
    # Public API
    # ----------------------------
    def get_changed_files(self, base_branch: str) -> list[str]:
        """
        Fetch `base_branch` and list the files that differ from it.

        Raises:
            FetchError: if the fetch keeps failing.
            GitError: if the diff fails.
        """
        self._fetch(base_branch)
        try:
            output = self._git("diff", f"..{base_branch}", "--name-only")
        except _GitCommandError as exc:
            raise GitError(
                f"failed to diff git: {exc}",
                details={"base_branch": base_branch},
                cause=exc,
            ) from exc
        return [line.strip() for line in output.splitlines() if line.strip()]

    def get_current_branch(self) -> str:
        try:
            return self._git("rev-parse", "--abbrev-ref", "HEAD").strip()
        except _GitCommandError as exc:
            raise GitError(f"failed to get current branch: {exc}", cause=exc) from exc

    def checkout_branch(self, branch: str) -> None:
        try:
            self._git("checkout", branch)
        except _GitCommandError as exc:
            raise CheckoutError(
                f"failed to checkout {branch}: {exc}",
                details={"branch": branch},
                cause=exc,
            ) from exc

    # ----------------------------
    # Internals
    # ----------------------------
    def _fetch(self, base_branch: str) -> None:
        last_exc: Optional[_GitCommandError] = None
        for attempt in range(self._retry_policy.attempts):
            try:
                self._git("fetch", self._repo_url, base_branch)
                return
            except _GitCommandError as exc:
                last_exc = exc
                if attempt + 1 < self._retry_policy.attempts:
                    self._logger.warning("git fetch failed (attempt %d), retrying", attempt + 1)
                    time.sleep(self._retry_policy.wait_sec)

        raise FetchError(
            f"failed to git-fetch (url: {self._repo_url}) error: {last_exc}",
            details={"repo_url": self._repo_url, "base_branch": base_branch},
            cause=last_exc,
        ) from last_exc

    def _git(self, *args: str) -> str:
        env = dict(os.environ)
        env["GIT_ASKPASS"] = "echo"
        self._logger.debug("$ git %s", " ".join(args))
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=self._work_dir,
                env=env,
                capture_output=True,
                text=True,
            )
        except OSError as exc:
            raise _GitCommandError(args, None, str(exc)) from exc
        if result.returncode != 0:
            raise _GitCommandError(args, result.returncode, result.stderr or result.stdout)
        return result.stdout
