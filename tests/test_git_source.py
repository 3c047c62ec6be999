from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, patch

from diffbubble.git import (
    FULL_CONTEXT,
    DiffMode,
    FileStat,
    FileStatus,
    GitCommandError,
    GitDiffSource,
    context_args,
    diff_args,
    parse_name_status,
    parse_numstat,
)
from diffbubble.runtime_logging import configure_runtime_logging


class ArgumentTests(unittest.TestCase):
    def test_diff_args_per_mode(self) -> None:
        self.assertEqual(diff_args(DiffMode.ALL), ["diff", "HEAD"])
        self.assertEqual(diff_args(DiffMode.STAGED), ["diff", "--cached"])
        self.assertEqual(diff_args(DiffMode.UNSTAGED), ["diff"])

    def test_revision_scopes_the_comparison(self) -> None:
        self.assertEqual(diff_args(DiffMode.ALL, "main..feature"), ["diff", "main..feature"])
        self.assertEqual(diff_args(DiffMode.STAGED, "HEAD~1"), ["diff", "--cached", "HEAD~1"])

    def test_context_args(self) -> None:
        self.assertEqual(context_args(FULL_CONTEXT), ["-U999999"])
        self.assertEqual(context_args(0), [])
        self.assertEqual(context_args(7), ["-U7"])

    def test_mode_parse_falls_back_to_all(self) -> None:
        self.assertIs(DiffMode.parse("Staged"), DiffMode.STAGED)
        self.assertIs(DiffMode.parse("bogus"), DiffMode.ALL)
        self.assertIs(DiffMode.parse(None), DiffMode.ALL)


class ParseTests(unittest.TestCase):
    def test_numstat_and_name_status_are_combined(self) -> None:
        numstat = "5\t2\tsrc/app.py\n-\t-\tlogo.png\n\n10\t0\tdocs/new file.md\n"
        name_status = "M\tsrc/app.py\nM\tlogo.png\nA\tdocs/new file.md\nD\tgone.txt\nR100\told.py\tnew.py\n"

        files = parse_name_status(name_status, parse_numstat(numstat))

        self.assertEqual(
            files,
            [
                FileStat("src/app.py", FileStatus.MODIFIED, 5, 2),
                FileStat("logo.png", FileStatus.MODIFIED, 0, 0),
                FileStat("docs/new file.md", FileStatus.ADDED, 10, 0),
                FileStat("gone.txt", FileStatus.DELETED, 0, 0),
                FileStat("new.py", FileStatus.RENAMED, 0, 0),
            ],
        )

    def test_short_lines_are_skipped(self) -> None:
        self.assertEqual(parse_numstat("garbage\n1 2\n"), {})
        self.assertEqual(parse_name_status("M\n\n"), [])

    def test_unknown_status_letter(self) -> None:
        files = parse_name_status("X\tweird.bin\n")
        self.assertIs(files[0].status, FileStatus.UNKNOWN)
        self.assertEqual(files[0].status.icon, "?")


class _FakeProcess:
    def __init__(self, stdout: bytes, stderr: bytes = b"", returncode: int = 0) -> None:
        self._stdout = stdout
        self._stderr = stderr
        self.returncode = returncode

    async def communicate(self) -> tuple[bytes, bytes]:
        return self._stdout, self._stderr


class GitDiffSourceTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.cwd = Path(self._tmp.name)
        configure_runtime_logging(level="off")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    async def test_file_diff_builds_command(self) -> None:
        spawn = AsyncMock(return_value=_FakeProcess(b"@@ -1 +1 @@\n-a\n+b\n"))
        source = GitDiffSource(self.cwd, mode=DiffMode.STAGED)
        with patch("diffbubble.git.source.asyncio.create_subprocess_exec", spawn):
            output = await source.file_diff("src/app.py", FULL_CONTEXT)

        self.assertEqual(output, b"@@ -1 +1 @@\n-a\n+b\n")
        args = spawn.call_args.args
        self.assertEqual(args, ("git", "diff", "--cached", "-U999999", "--", "src/app.py"))
        self.assertEqual(spawn.call_args.kwargs["cwd"], str(self.cwd))

    async def test_modified_files_runs_numstat_then_name_status(self) -> None:
        spawn = AsyncMock(
            side_effect=[
                _FakeProcess(b"3\t1\ta.py\n"),
                _FakeProcess(b"M\ta.py\n"),
            ]
        )
        source = GitDiffSource(self.cwd)
        with patch("diffbubble.git.source.asyncio.create_subprocess_exec", spawn):
            files = await source.modified_files()

        self.assertEqual(files, [FileStat("a.py", FileStatus.MODIFIED, 3, 1)])
        self.assertEqual(spawn.call_args_list[0].args, ("git", "diff", "HEAD", "--numstat"))
        self.assertEqual(spawn.call_args_list[1].args, ("git", "diff", "HEAD", "--name-status"))

    async def test_non_zero_exit_raises(self) -> None:
        spawn = AsyncMock(return_value=_FakeProcess(b"", b"fatal: not a git repository\n", 128))
        source = GitDiffSource(self.cwd)
        with patch("diffbubble.git.source.asyncio.create_subprocess_exec", spawn):
            with self.assertRaises(GitCommandError) as ctx:
                await source.diff()

        self.assertEqual(ctx.exception.returncode, 128)
        self.assertIn("not a git repository", str(ctx.exception))

    async def test_missing_git_binary(self) -> None:
        source = GitDiffSource(self.cwd, git_program="definitely-not-git-xyz")
        with self.assertRaises(GitCommandError) as ctx:
            await source.diff()
        self.assertIsNone(ctx.exception.returncode)
        self.assertIn("not found", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
