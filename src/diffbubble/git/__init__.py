"""Diff source backed by the git command line."""

from diffbubble.git.source import (
    DEFAULT_CONTEXT,
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

__all__ = [
    "DEFAULT_CONTEXT",
    "FULL_CONTEXT",
    "DiffMode",
    "FileStat",
    "FileStatus",
    "GitCommandError",
    "GitDiffSource",
    "context_args",
    "diff_args",
    "parse_name_status",
    "parse_numstat",
]
