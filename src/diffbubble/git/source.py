"""Run ``git diff`` and collect per-file change metadata."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from diffbubble.errors import DiffbubbleError
from diffbubble.runtime_logging import get_runtime_logger

FULL_CONTEXT = -1
DEFAULT_CONTEXT = 0
_FULL_CONTEXT_ARG = "-U999999"


class DiffMode(Enum):
    ALL = "all"
    STAGED = "staged"
    UNSTAGED = "unstaged"

    @classmethod
    def parse(cls, value: str | None) -> "DiffMode":
        if not value:
            return cls.ALL
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.ALL


class FileStatus(Enum):
    MODIFIED = "M"
    ADDED = "A"
    DELETED = "D"
    RENAMED = "R"
    UNKNOWN = "?"

    @property
    def icon(self) -> str:
        return self.value

    @classmethod
    def from_code(cls, code: str) -> "FileStatus":
        # Renames and copies carry a similarity score, e.g. "R100".
        letter = code[:1].upper()
        for status in cls:
            if status.value == letter and status is not cls.UNKNOWN:
                return status
        return cls.UNKNOWN


@dataclass(slots=True)
class FileStat:
    path: str
    status: FileStatus = FileStatus.UNKNOWN
    additions: int = 0
    deletions: int = 0


class GitCommandError(DiffbubbleError):
    def __init__(self, args: list[str], returncode: int | None, stderr: str) -> None:
        self.args_list = args
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = self.stderr or f"exit status {returncode}"
        super().__init__(f"running git {' '.join(args)}: {detail}")


def diff_args(mode: DiffMode, revision: str | None = None) -> list[str]:
    if mode is DiffMode.STAGED:
        args = ["diff", "--cached"]
        if revision:
            args.append(revision)
        return args
    if mode is DiffMode.UNSTAGED:
        return ["diff"]
    return ["diff", revision or "HEAD"]


def context_args(context_lines: int) -> list[str]:
    if context_lines == FULL_CONTEXT:
        return [_FULL_CONTEXT_ARG]
    if context_lines > 0:
        return [f"-U{context_lines}"]
    return []


def _count(value: str) -> int:
    # Binary files report "-" for both counts.
    try:
        return int(value)
    except ValueError:
        return 0


def parse_numstat(text: str) -> dict[str, FileStat]:
    stats: dict[str, FileStat] = {}
    for line in text.splitlines():
        if not line.strip():
            continue
        parts = line.split("\t", 2) if "\t" in line else line.split(None, 2)
        if len(parts) < 3:
            continue
        path = parts[2]
        stats[path] = FileStat(
            path=path,
            additions=_count(parts[0]),
            deletions=_count(parts[1]),
        )
    return stats


def parse_name_status(text: str, stats: dict[str, FileStat] | None = None) -> list[FileStat]:
    stats = stats or {}
    files: list[FileStat] = []
    for line in text.splitlines():
        if not line.strip():
            continue
        parts = line.split("\t") if "\t" in line else line.split(None, 1)
        if len(parts) < 2:
            continue

        status = FileStatus.from_code(parts[0])
        # Renames list "old<TAB>new"; the new path is the one git diff accepts.
        path = parts[-1] if status is FileStatus.RENAMED else parts[1]
        existing = stats.get(path)
        files.append(
            FileStat(
                path=path,
                status=status,
                additions=existing.additions if existing else 0,
                deletions=existing.deletions if existing else 0,
            )
        )
    return files


class GitDiffSource:
    """Produces raw unified diff text for the working tree at ``cwd``."""

    def __init__(
        self,
        cwd: Path,
        mode: DiffMode = DiffMode.ALL,
        revision: str | None = None,
        git_program: str = "git",
    ) -> None:
        self.cwd = cwd
        self.mode = mode
        self.revision = revision
        self.git_program = git_program
        self.logger = get_runtime_logger()

    async def _run(self, args: list[str]) -> bytes:
        self.logger.debug("git.command.start", args=args, cwd=str(self.cwd))
        try:
            process = await asyncio.create_subprocess_exec(
                self.git_program,
                *args,
                cwd=str(self.cwd),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            self.logger.error("git.command.missing", program=self.git_program)
            raise GitCommandError(args, None, f"{self.git_program} not found in PATH") from exc

        stdout, stderr = await process.communicate()
        if process.returncode != 0:
            message = stderr.decode("utf-8", errors="replace")
            self.logger.error(
                "git.command.failed",
                args=args,
                returncode=process.returncode,
                stderr=message.strip(),
            )
            raise GitCommandError(args, process.returncode, message)

        self.logger.debug("git.command.done", args=args, bytes=len(stdout))
        return stdout

    async def diff(self) -> bytes:
        return await self._run(diff_args(self.mode, self.revision))

    async def modified_files(self) -> list[FileStat]:
        base = diff_args(self.mode, self.revision)
        numstat = await self._run([*base, "--numstat"])
        name_status = await self._run([*base, "--name-status"])
        stats = parse_numstat(numstat.decode("utf-8", errors="replace"))
        files = parse_name_status(name_status.decode("utf-8", errors="replace"), stats)
        self.logger.info("git.files.loaded", mode=self.mode.value, count=len(files))
        return files

    async def file_diff(self, path: str, context_lines: int = DEFAULT_CONTEXT) -> bytes:
        args = [*diff_args(self.mode, self.revision), *context_args(context_lines), "--", path]
        return await self._run(args)
