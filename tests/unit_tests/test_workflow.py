"""
Unit tests for CI workflow integration.
"""

import io
import os
import tempfile
import unittest
from unittest.mock import patch

from workflow import group, in_github_actions, set_failed, set_output


class TestWorkflow(unittest.TestCase):
    """Test workflow commands and step outputs."""

    def test_in_github_actions(self):
        self.assertFalse(in_github_actions())
        with patch.dict(os.environ, {"GITHUB_ACTIONS": "true"}):
            self.assertTrue(in_github_actions())

    def test_set_output_writes_file(self):
        """Test outputs are appended in delimiter form."""
        fd, path = tempfile.mkstemp()
        os.close(fd)
        self.addCleanup(os.remove, path)

        with patch.dict(os.environ, {"GITHUB_OUTPUT": path}):
            set_output("image", "ghcr.io/org/bot:v1")
            set_output("service-name", "my-bot")

        with open(path, encoding="utf-8") as fh:
            lines = fh.read().splitlines()

        self.assertEqual(len(lines), 6)
        self.assertTrue(lines[0].startswith("image<<ghadelimiter_"))
        self.assertEqual(lines[1], "ghcr.io/org/bot:v1")
        self.assertEqual(lines[2], lines[0].split("<<", 1)[1])
        self.assertTrue(lines[3].startswith("service-name<<"))
        self.assertEqual(lines[4], "my-bot")

    def test_set_output_without_file_logs(self):
        """Test outputs are logged when no output file is configured."""
        with self.assertLogs("workflow", level="INFO") as logs:
            set_output("image", "bot:v1")
        self.assertIn("INFO:workflow:Output image=bot:v1", logs.output)

    def test_group_under_actions(self):
        """Test groups emit group/endgroup commands, even on failure."""
        out = io.StringIO()
        with patch.dict(os.environ, {"GITHUB_ACTIONS": "true"}), patch(
            "workflow.sys.stdout", out
        ):
            with self.assertRaises(RuntimeError):
                with group("Deploy"):
                    raise RuntimeError("boom")

        self.assertEqual(out.getvalue(), "::group::Deploy\n::endgroup::\n")

    def test_group_outside_actions(self):
        """Test groups are rendered as a banner locally."""
        with self.assertLogs("workflow", level="INFO") as logs:
            with group("Deploy"):
                pass
        self.assertIn("INFO:workflow:Deploy", logs.output)

    def test_set_failed(self):
        with self.assertLogs("workflow", level="ERROR") as logs:
            code = set_failed("Failed to check agent: boom")
        self.assertEqual(code, 1)
        self.assertIn("ERROR:workflow:Failed to check agent: boom", logs.output)


if __name__ == "__main__":
    unittest.main()
