"""Textual message objects carrying worker results to the diff screen."""

from __future__ import annotations

from textual.message import Message

from diffbubble.diff.model import Row
from diffbubble.git.source import FileStat


class FilesLoaded(Message):
    def __init__(self, *, files: list[FileStat], error: Exception | None = None) -> None:
        self.files = files
        self.error = error
        super().__init__()


class DiffLoaded(Message):
    def __init__(self, *, path: str, rows: list[Row], error: Exception | None = None) -> None:
        self.path = path
        self.rows = rows
        self.error = error
        super().__init__()
