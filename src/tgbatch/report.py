"""Final report text and its export to the CI environment."""

from __future__ import annotations

import subprocess

from tgbatch.errors import ExportError
from tgbatch.plan import OperationPlan
from tgbatch.runner import BatchRunner


def build_report(plan: OperationPlan, runner: BatchRunner) -> str:
    return (
        f"\n===================   TERRAGRUNT {plan.command}  ========================\n\n"
        f"{plan.summary()}\n\n"
        "=======================  RESULTS  ===========================\n\n"
        f"{runner.summary()}\n"
    )


def export_report(report: str, key: str) -> None:
    """
    Expose `report` to later CI steps as environment variable `key` (envman).

    Raises:
        ExportError: if envman is missing or fails.
    """
    try:
        result = subprocess.run(
            ["envman", "add", "--key", key, "--value", report],
            capture_output=True,
            text=True,
        )
    except OSError as exc:
        raise ExportError(f"export output with envman: {exc}", details={"key": key}, cause=exc) from exc
    if result.returncode != 0:
        raise ExportError(
            f"export output with envman: exit status {result.returncode}: {result.stderr.strip()}",
            details={"key": key, "returncode": result.returncode},
        )
