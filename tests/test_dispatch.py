"""Tests for turning a selection into the shell command on stdout.

Git is never run for real: ``subprocess.run`` is patched and its argv is
inspected instead.
"""

from __future__ import annotations

import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from trypy import dispatch
from trypy.paths import expand_path, extract_repo_name, is_git_url


class PathHelperTests(unittest.TestCase):
    def test_git_url_detection(self) -> None:
        for url in (
            "https://github.com/tobi/try",
            "http://example.com/repo",
            "git@github.com:tobi/try.git",
            "ssh://git@host/repo",
            "some/path.git",
        ):
            self.assertTrue(is_git_url(url), url)
        self.assertFalse(is_git_url("my-experiment"))

    def test_repo_name_extraction(self) -> None:
        self.assertEqual(extract_repo_name("https://github.com/tobi/try.git"), "try")
        self.assertEqual(extract_repo_name("git@github.com:tobi/try"), "try")
        self.assertEqual(extract_repo_name("https://github.com/tobi/try/"), "try")
        self.assertEqual(extract_repo_name(".git"), "cloned-repo")

    def test_expand_path_handles_home_prefix(self) -> None:
        self.assertEqual(expand_path("~/work"), Path.home() / "work")
        self.assertEqual(expand_path("/abs/path"), Path("/abs/path"))


class EnterCommandTests(unittest.TestCase):
    def test_cd_command_is_quoted(self) -> None:
        self.assertEqual(dispatch.enter_command(Path("/t/it's here"), None, False), "cd '/t/it'\"'\"'s here'")

    def test_editor_command_when_requested(self) -> None:
        self.assertEqual(dispatch.enter_command(Path("/t/proj"), "code", True), "code /t/proj")

    def test_editor_flag_without_editor_falls_back_to_cd(self) -> None:
        self.assertEqual(dispatch.enter_command(Path("/t/proj"), None, True), "cd /t/proj")


class ResolveSelectionTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tries = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_existing_directory_is_entered(self) -> None:
        (self.tries / "proj").mkdir()

        with mock.patch("trypy.dispatch.subprocess.run") as run_mock:
            command = dispatch.resolve_selection("proj", self.tries)

        run_mock.assert_not_called()
        self.assertEqual(command, f"cd {self.tries / 'proj'}")

    def test_new_name_creates_directory(self) -> None:
        command = dispatch.resolve_selection("newproj", self.tries, editor_cmd="vim", open_editor=True)

        self.assertTrue((self.tries / "newproj").is_dir())
        self.assertEqual(command, f"vim {self.tries / 'newproj'}")

    def test_git_url_is_cloned_into_repo_name(self) -> None:
        completed = subprocess.CompletedProcess(args=[], returncode=0)
        url = "https://github.com/tobi/try.git"

        with mock.patch("trypy.dispatch.subprocess.run", return_value=completed) as run_mock, mock.patch(
            "trypy.dispatch.sys.stderr"
        ):
            command = dispatch.resolve_selection(url, self.tries, shallow_clone=True)

        argv = run_mock.call_args.args[0]
        self.assertEqual(
            argv,
            [
                "git",
                "clone",
                "--depth",
                "1",
                url,
                str(self.tries / "try"),
                "--recurse-submodules",
                "--no-single-branch",
            ],
        )
        self.assertEqual(run_mock.call_args.kwargs["stdout"], subprocess.DEVNULL)
        self.assertEqual(command, f"cd {self.tries / 'try'}")

    def test_failed_clone_prints_nothing(self) -> None:
        completed = subprocess.CompletedProcess(args=[], returncode=128)

        with mock.patch("trypy.dispatch.subprocess.run", return_value=completed), mock.patch(
            "trypy.dispatch.sys.stderr"
        ) as stderr_mock:
            command = dispatch.resolve_selection("git@github.com:tobi/try.git", self.tries)

        self.assertIsNone(command)
        written = "".join(call.args[0] for call in stderr_mock.write.call_args_list)
        self.assertIn("Failed to clone", written)

    def test_missing_git_binary_is_a_failed_clone(self) -> None:
        with mock.patch("trypy.dispatch.subprocess.run", side_effect=FileNotFoundError("git")), mock.patch(
            "trypy.dispatch.sys.stderr"
        ):
            self.assertIsNone(dispatch.resolve_selection("https://host/repo", self.tries))

    def test_unwritable_target_reports_error(self) -> None:
        (self.tries / "blocker").write_text("", encoding="utf-8")

        with mock.patch("trypy.dispatch.sys.stderr"):
            command = dispatch.resolve_selection("blocker/child", self.tries)

        self.assertIsNone(command)


if __name__ == "__main__":
    unittest.main()
