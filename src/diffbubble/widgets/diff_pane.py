"""Scrollable column showing one side of an aligned diff."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Static

from diffbubble.diff.model import Row, Side
from diffbubble.ui.render import SearchHighlight, render_side
from diffbubble.ui.themes import DiffStyles


class DiffPane(VerticalScroll):
    DEFAULT_CSS = """
    DiffPane {
        width: 1fr;
        height: 1fr;
        border: round $surface-lighten-2;
        overflow-x: auto;
    }

    DiffPane > Static {
        width: auto;
    }
    """

    def __init__(self, side: Side, *, id: str | None = None) -> None:  # noqa: A002
        self.side = side
        self.rendered_lines = 0
        super().__init__(id=id)

    def compose(self) -> ComposeResult:
        yield Static("", classes="diff-content")

    def show_rows(
        self,
        rows: Sequence[Row],
        styles: DiffStyles,
        *,
        show_line_numbers: bool,
        highlights: Iterable[SearchHighlight] = (),
    ) -> None:
        text = render_side(
            rows,
            self.side,
            styles,
            show_line_numbers=show_line_numbers,
            highlights=highlights,
        )
        self.rendered_lines = text.plain.count("\n")
        self.query_one(".diff-content", Static).update(text)

    def clear_rows(self) -> None:
        self.rendered_lines = 0
        self.query_one(".diff-content", Static).update("")
