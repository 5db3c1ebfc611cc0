import subprocess
import unittest
from unittest.mock import patch

import tgbatch.repository as repository
from tgbatch.errors import CheckoutError, FetchError, GitError, TgBatchError
from tgbatch.repository import GitRepository


def _done(args, returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(args=args, returncode=returncode, stdout=stdout, stderr=stderr)


class FakeGit:
    """Scripted replacement for subprocess.run, keyed by git subcommand."""

    def __init__(self, script: dict) -> None:
        self.script = {k: list(v) for k, v in script.items()}
        self.calls: list[tuple[list[str], dict]] = []

    def __call__(self, args, **kwargs):
        self.calls.append((list(args), kwargs))
        responses = self.script[args[1]]
        response = responses.pop(0) if len(responses) > 1 else responses[0]
        if isinstance(response, BaseException):
            raise response
        returncode, stdout = response
        return _done(args, returncode=returncode, stdout=stdout, stderr="fatal: nope" if returncode else "")


class TestGitRepository(unittest.TestCase):
    def setUp(self) -> None:
        self.repo = GitRepository("https://example.com/infra.git", "/work")

    def test_changed_files_fetches_then_diffs(self) -> None:
        fake = FakeGit({"fetch": [(0, "")], "diff": [(0, "live/a/terragrunt.hcl\n\nmodules/b/main.tf\n")]})
        with patch("tgbatch.repository.git_repository.subprocess.run", side_effect=fake):
            files = self.repo.get_changed_files("main")

        self.assertEqual(files, ["live/a/terragrunt.hcl", "modules/b/main.tf"])
        self.assertEqual(fake.calls[0][0], ["git", "fetch", "https://example.com/infra.git", "main"])
        self.assertEqual(fake.calls[1][0], ["git", "diff", "..main", "--name-only"])
        kwargs = fake.calls[0][1]
        self.assertEqual(kwargs["cwd"], "/work")
        self.assertEqual(kwargs["env"]["GIT_ASKPASS"], "echo")

    def test_fetch_is_retried_once(self) -> None:
        fake = FakeGit({"fetch": [(1, ""), (0, "")], "diff": [(0, "a/b.hcl\n")]})
        with patch("tgbatch.repository.git_repository.subprocess.run", side_effect=fake), patch(
            "tgbatch.repository.git_repository.time.sleep"
        ) as sleep:
            files = self.repo.get_changed_files("main")

        self.assertEqual(files, ["a/b.hcl"])
        sleep.assert_called_once_with(3.0)

    def test_fetch_failure_after_two_attempts(self) -> None:
        fake = FakeGit({"fetch": [(128, "")]})
        with patch("tgbatch.repository.git_repository.subprocess.run", side_effect=fake), patch(
            "tgbatch.repository.git_repository.time.sleep"
        ):
            with self.assertRaises(FetchError) as ctx:
                self.repo.get_changed_files("main")

        self.assertEqual(len(fake.calls), 2)
        self.assertEqual(ctx.exception.details["base_branch"], "main")

    def test_diff_failure_raises_git_error(self) -> None:
        fake = FakeGit({"fetch": [(0, "")], "diff": [(1, "")]})
        with patch("tgbatch.repository.git_repository.subprocess.run", side_effect=fake):
            with self.assertRaises(GitError):
                self.repo.get_changed_files("main")

    def test_git_failures_surface_only_as_package_errors(self) -> None:
        fake = FakeGit({"rev-parse": [(128, "")]})
        with patch("tgbatch.repository.git_repository.subprocess.run", side_effect=fake):
            with self.assertRaises(TgBatchError) as ctx:
                self.repo.get_current_branch()

        self.assertIsInstance(ctx.exception, GitError)
        self.assertIn("fatal: nope", str(ctx.exception))
        self.assertNotIn("GitCommandError", repository.__all__)
        self.assertFalse(hasattr(repository, "GitCommandError"))

    def test_current_branch(self) -> None:
        fake = FakeGit({"rev-parse": [(0, "feature/x\n")]})
        with patch("tgbatch.repository.git_repository.subprocess.run", side_effect=fake):
            self.assertEqual(self.repo.get_current_branch(), "feature/x")
        self.assertEqual(fake.calls[0][0], ["git", "rev-parse", "--abbrev-ref", "HEAD"])

    def test_checkout_failure_raises_checkout_error(self) -> None:
        fake = FakeGit({"checkout": [(1, "")]})
        with patch("tgbatch.repository.git_repository.subprocess.run", side_effect=fake):
            with self.assertRaises(CheckoutError) as ctx:
                self.repo.checkout_branch("main")
        self.assertEqual(ctx.exception.details["branch"], "main")

    def test_missing_git_binary_is_reported(self) -> None:
        fake = FakeGit({"checkout": [FileNotFoundError("git")]})
        with patch("tgbatch.repository.git_repository.subprocess.run", side_effect=fake):
            with self.assertRaises(CheckoutError):
                self.repo.checkout_branch("main")


if __name__ == "__main__":
    unittest.main()
