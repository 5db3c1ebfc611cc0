"""External command invocation with live output and interrupt forwarding."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
import threading
from dataclasses import dataclass
from typing import IO, Optional, Protocol, Sequence

from tgbatch.errors import CommandExecutionError

from .cancellation import CancellationToken

_WATCH_INTERVAL_SEC = 0.1


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of one external command."""

    returncode: int
    output: str
    interrupted: bool = False


class CommandExecutor(Protocol):
    def run(self, args: Sequence[str], cwd: str) -> CommandResult: ...


class SubprocessExecutor:
    """
    Run a command as a child process in its own process group.

    stdout and stderr share one pipe. A reader thread drains it into a buffer
    and forwards each line to the log as it arrives, while the calling thread
    waits for the exit. A watcher thread sends SIGINT to the process group
    once the token is cancelled; there is no kill escalation.
    """

    def __init__(
        self,
        token: Optional[CancellationToken] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._token = token or CancellationToken()
        self._logger = logger or logging.getLogger(__name__)

    def run(self, args: Sequence[str], cwd: str) -> CommandResult:
        """
        Run `args` in `cwd` and wait for it.

        Raises:
            CommandExecutionError: if the process cannot be started.
        """
        try:
            proc = subprocess.Popen(
                list(args),
                cwd=cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            raise CommandExecutionError(
                f"starting {' '.join(args)} in {cwd}: {exc}",
                details={"command": list(args), "directory": cwd},
                cause=exc,
            ) from exc

        chunks: list[bytes] = []
        finished = threading.Event()
        interrupted = threading.Event()
        reader = threading.Thread(
            target=self._drain, args=(proc.stdout, chunks), name="command-output", daemon=True
        )
        watcher = threading.Thread(
            target=self._watch,
            args=(proc, finished, interrupted),
            name="command-cancel",
            daemon=True,
        )
        reader.start()
        watcher.start()
        try:
            returncode = proc.wait()
        finally:
            finished.set()
            watcher.join()
            reader.join()

        return CommandResult(
            returncode=returncode,
            output=b"".join(chunks).decode("utf-8", errors="replace"),
            interrupted=interrupted.is_set(),
        )

    def _drain(self, stream: Optional[IO[bytes]], chunks: list[bytes]) -> None:
        if stream is None:
            return
        with stream:
            for line in iter(stream.readline, b""):
                chunks.append(line)
                self._logger.info("%s", line.decode("utf-8", errors="replace").rstrip("\r\n"))

    def _watch(
        self,
        proc: subprocess.Popen,
        finished: threading.Event,
        interrupted: threading.Event,
    ) -> None:
        while not finished.is_set():
            if not self._token.wait(_WATCH_INTERVAL_SEC):
                continue
            if finished.is_set():
                return
            self._logger.info("Sending SIGINT to child process %d...", proc.pid)
            try:
                os.killpg(proc.pid, signal.SIGINT)
            except OSError as exc:
                self._logger.warning("Stop child process: %s", exc)
            interrupted.set()
            return
