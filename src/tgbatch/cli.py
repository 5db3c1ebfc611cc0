"""tgbatch command line (Typer)."""

from __future__ import annotations

import logging
import signal
from contextlib import contextmanager
from typing import Iterator, Optional

import typer

from tgbatch.config import Settings, load_settings
from tgbatch.errors import TgBatchError
from tgbatch.plan import OperationPlan, OperationPlanner
from tgbatch.report import build_report, export_report
from tgbatch.repository import GitRepository
from tgbatch.runner import BatchRunner, CancellationToken

app = typer.Typer(help="Plan and run IaC commands for the modules touched by a change.")

logger = logging.getLogger("tgbatch")

_SEPARATOR = "\n=================================================\n\n"
_CANCEL_SIGNALS = (signal.SIGHUP, signal.SIGINT, signal.SIGTERM)


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(message)s",
    )


@contextmanager
def _cancel_on_signals(token: CancellationToken) -> Iterator[None]:
    """Trigger `token` on SIGHUP/SIGINT/SIGTERM while the block runs."""

    def _handler(signum: int, frame: object) -> None:
        if not token.is_cancelled:
            logger.info("Operation cancelled.")
        token.cancel()

    previous = {sig: signal.signal(sig, _handler) for sig in _CANCEL_SIGNALS}
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def _build_plan(settings: Settings, repository: GitRepository) -> OperationPlan:
    changed_files = repository.get_changed_files(settings.base_branch)
    planner = OperationPlanner(changed_files, settings.work_dir, settings.command, logger=logger)
    plan = planner.plan()

    logger.info(_SEPARATOR)
    logger.info(plan.summary())
    return plan


def _run(settings: Settings, *, execute: bool) -> None:
    for name, value in settings.model_dump().items():
        logger.info("- %s: %s", name, value)

    repository = GitRepository(settings.repo_url, settings.work_dir, logger=logger)
    plan = _build_plan(settings, repository)
    if not execute:
        return

    token = CancellationToken()
    runner = BatchRunner(
        plan,
        repository,
        settings.command,
        settings.base_branch,
        token=token,
        tool=settings.tool,
        logger=logger,
    )

    logger.info(_SEPARATOR)
    logger.info("Running operations in order\n")
    with _cancel_on_signals(token):
        runner.run()

    if runner.cancelled:
        logger.info("Run stopped early after cancellation.")

    logger.info(_SEPARATOR)
    logger.info(runner.summary())

    if settings.export_output:
        export_report(build_report(plan, runner), settings.output_key)


def _invoke(execute: bool, **options: object) -> None:
    _configure_logging(bool(options.get("debug")))
    try:
        settings = load_settings(**options)
        if settings.debug:
            logging.getLogger().setLevel(logging.DEBUG)
        _run(settings, execute=execute)
    except TgBatchError as exc:
        logger.error("error: %s", exc)
        raise typer.Exit(code=1) from exc


@app.command()
def run(
    work_dir: Optional[str] = typer.Option(None, "--work-dir", help="Root of the modules."),
    base_branch: Optional[str] = typer.Option(None, "--base-branch", help="Branch to diff against."),
    command: Optional[str] = typer.Option(None, "--command", help="plan, apply or validate."),
    repo_url: Optional[str] = typer.Option(None, "--repo-url", help="Repository to fetch from."),
    tool: Optional[str] = typer.Option(None, "--tool", help="IaC executable."),
    no_export: bool = typer.Option(False, "--no-export", help="Print the report only."),
    debug: bool = typer.Option(False, "--debug", help="Verbose logging."),
) -> None:
    """Plan the changed modules and run the command in each, batch by batch."""
    _invoke(
        True,
        work_dir=work_dir,
        base_branch=base_branch,
        command=command,
        repo_url=repo_url,
        tool=tool,
        export_output=False if no_export else None,
        debug=debug or None,
    )


@app.command("show-plan")
def show_plan(
    work_dir: Optional[str] = typer.Option(None, "--work-dir", help="Root of the modules."),
    base_branch: Optional[str] = typer.Option(None, "--base-branch", help="Branch to diff against."),
    command: Optional[str] = typer.Option(None, "--command", help="plan, apply or validate."),
    repo_url: Optional[str] = typer.Option(None, "--repo-url", help="Repository to fetch from."),
    debug: bool = typer.Option(False, "--debug", help="Verbose logging."),
) -> None:
    """Print the batches that `run` would execute, without running them."""
    _invoke(
        False,
        work_dir=work_dir,
        base_branch=base_branch,
        command=command,
        repo_url=repo_url,
        debug=debug or None,
    )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
