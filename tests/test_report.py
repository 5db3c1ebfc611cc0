import subprocess
import unittest
from unittest.mock import patch

from tgbatch.errors import ExportError
from tgbatch.plan import DirOperation, OperationBatch, OperationKind, OperationPlan
from tgbatch.report import build_report, export_report
from tgbatch.runner import BatchRunner


class _NoRepository:
    def get_changed_files(self, base_branch):
        return []

    def get_current_branch(self):
        return "feature"

    def checkout_branch(self, branch):
        return None


class TestBuildReport(unittest.TestCase):
    def test_contains_plan_and_results(self) -> None:
        plan = OperationPlan(
            batches=(OperationBatch(operations=(DirOperation("/repo/live/a", OperationKind.RUN),)),),
            command="plan",
            common_root="/repo/live/",
        )
        runner = BatchRunner(plan, _NoRepository(), "plan", "main")
        runner.summaries["/repo/live/a"] = "### Operation \"plan\" key points:\n"

        report = build_report(plan, runner)

        self.assertIn("TERRAGRUNT plan", report)
        self.assertIn("> Batch #0:\n- a", report)
        self.assertIn("RESULTS", report)
        self.assertIn('### Operation "plan" key points:', report)
        self.assertLess(report.index("> Batch #0"), report.index("RESULTS"))


class TestExportReport(unittest.TestCase):
    def test_calls_envman(self) -> None:
        with patch(
            "tgbatch.report.subprocess.run",
            return_value=subprocess.CompletedProcess(args=[], returncode=0, stdout="", stderr=""),
        ) as run:
            export_report("text", "COMMAND_OUTPUT")

        self.assertEqual(
            run.call_args.args[0],
            ["envman", "add", "--key", "COMMAND_OUTPUT", "--value", "text"],
        )

    def test_failure_raises_export_error(self) -> None:
        with patch(
            "tgbatch.report.subprocess.run",
            return_value=subprocess.CompletedProcess(args=[], returncode=1, stdout="", stderr="bad"),
        ):
            with self.assertRaises(ExportError):
                export_report("text", "COMMAND_OUTPUT")

    def test_missing_envman_raises_export_error(self) -> None:
        with patch("tgbatch.report.subprocess.run", side_effect=FileNotFoundError("envman")):
            with self.assertRaises(ExportError):
                export_report("text", "COMMAND_OUTPUT")


if __name__ == "__main__":
    unittest.main()
