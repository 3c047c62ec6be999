"""Sidebar listing changed files with their status and line counts."""

from __future__ import annotations

from textual.widgets import OptionList
from textual.widgets.option_list import Option

from diffbubble.git.source import FileStat
from diffbubble.ui.render import render_file_list_item
from diffbubble.ui.themes import DiffStyles


class FileList(OptionList):
    DEFAULT_CSS = """
    FileList {
        width: 20%;
        min-width: 24;
        height: 1fr;
        border: round $surface-lighten-2;
    }
    """

    def __init__(self, *, id: str | None = None) -> None:  # noqa: A002
        self.files: list[FileStat] = []
        super().__init__(id=id)

    def show_files(self, files: list[FileStat], styles: DiffStyles, *, selected: int | None = None) -> None:
        self.files = list(files)
        self.clear_options()
        self.add_options(
            [Option(render_file_list_item(stat, styles), id=f"file-{index}") for index, stat in enumerate(self.files)]
        )
        if selected is not None and 0 <= selected < len(self.files):
            self.highlighted = selected

    def index_of(self, path: str) -> int | None:
        for index, stat in enumerate(self.files):
            if stat.path == path:
                return index
        return None
