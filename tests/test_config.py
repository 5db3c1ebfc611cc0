import os
import unittest
from unittest.mock import patch

from tgbatch.config import COMMAND_APPLY, DESTRUCTIVE_COMMAND, load_settings
from tgbatch.errors import ConfigError

ENV = {
    "WORK_DIR": "/work",
    "BASE_BRANCH": "main",
    "COMMAND": "plan",
    "REPO_URL": "https://example.com/infra.git",
}


class TestSettings(unittest.TestCase):
    def test_reads_environment(self) -> None:
        with patch.dict(os.environ, ENV, clear=True):
            settings = load_settings()

        self.assertEqual(settings.work_dir, "/work")
        self.assertEqual(settings.base_branch, "main")
        self.assertEqual(settings.command, "plan")
        self.assertEqual(settings.tool, "terragrunt")
        self.assertEqual(settings.output_key, "COMMAND_OUTPUT")
        self.assertTrue(settings.export_output)
        self.assertFalse(settings.debug)

    def test_overrides_win_and_none_is_ignored(self) -> None:
        with patch.dict(os.environ, ENV, clear=True):
            settings = load_settings(command="apply", tool=None)

        self.assertEqual(settings.command, "apply")
        self.assertEqual(settings.tool, "terragrunt")

    def test_unknown_command_is_rejected(self) -> None:
        with patch.dict(os.environ, dict(ENV, COMMAND="destroy"), clear=True):
            with self.assertRaises(ConfigError):
                load_settings()

    def test_missing_required_value_is_rejected(self) -> None:
        env = dict(ENV)
        del env["REPO_URL"]
        with patch.dict(os.environ, env, clear=True):
            with self.assertRaises(ConfigError):
                load_settings()

    def test_apply_is_the_destructive_command(self) -> None:
        self.assertEqual(DESTRUCTIVE_COMMAND, COMMAND_APPLY)


if __name__ == "__main__":
    unittest.main()
