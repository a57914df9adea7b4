"""Tests for mac_tidy.services.shell."""
import os
import tempfile
import unittest
from unittest import mock

from mac_tidy.core.errors import ExecError
from mac_tidy.services.shell import Shell


class TestShell(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def path(self, *parts):
        return os.path.join(self.tmp.name, *parts)

    def test_success_captures_output(self) -> None:
        result = Shell().run(["echo", "hi"])
        self.assertTrue(result.ok)
        self.assertEqual(result.output.strip(), "hi")

    def test_nonzero_exit_raises(self) -> None:
        with self.assertRaises(ExecError) as ctx:
            Shell().run(["false"])
        self.assertEqual(ctx.exception.returncode, 1)

    def test_nonzero_exit_without_check(self) -> None:
        result = Shell().run(["false"], check=False)
        self.assertFalse(result.ok)

    def test_missing_program_raises(self) -> None:
        with self.assertRaises(ExecError) as ctx:
            Shell().run(["mac-tidy-no-such-program"])
        self.assertIsNone(ctx.exception.returncode)

    def test_dry_run_executes_nothing(self) -> None:
        target = self.path("keep")
        open(target, "w").close()
        result = Shell(dry_run=True).run(["rm", "-f", target])
        self.assertTrue(result.ok)
        self.assertTrue(os.path.exists(target))

    def test_sudo_prefix_for_non_root(self) -> None:
        with mock.patch("mac_tidy.services.shell.os.geteuid", return_value=501):
            result = Shell(dry_run=True).run(["purge"], need_sudo=True)
        self.assertEqual(result.args, ["sudo", "purge"])
        with mock.patch("mac_tidy.services.shell.os.geteuid", return_value=0):
            result = Shell(dry_run=True).run(["purge"], need_sudo=True)
        self.assertEqual(result.args, ["purge"])

    def test_run_steps_continues_after_failure(self) -> None:
        marker = self.path("marker")
        with self.assertRaises(ExecError):
            Shell().run_steps([["false"], ["touch", marker], ["false"]])
        self.assertTrue(os.path.exists(marker))

    def test_remove_expands_globs_including_hidden(self) -> None:
        os.makedirs(self.path("trash", "dir"))
        for name in ("a", ".hidden"):
            open(self.path("trash", name), "w").close()
        Shell().remove([self.path("trash", "*")])
        self.assertTrue(os.path.isdir(self.path("trash")))
        self.assertEqual(os.listdir(self.path("trash")), [])

    def test_remove_without_matches_is_noop(self) -> None:
        self.assertIsNone(Shell().remove([self.path("nothing", "*")]))
