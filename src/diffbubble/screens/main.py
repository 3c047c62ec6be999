"""Main screen: file sidebar plus old/new diff columns."""

from __future__ import annotations

import asyncio
from typing import Protocol

from rich.text import Text
from textual import events
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.screen import Screen
from textual.widgets import Header, Input, OptionList, Static

from diffbubble.config.models import AppSettings
from diffbubble.diff.aligner import align
from diffbubble.diff.model import Row, Side
from diffbubble.git.source import DEFAULT_CONTEXT, FULL_CONTEXT, DiffMode, FileStat
from diffbubble.messages import DiffLoaded, FilesLoaded
from diffbubble.runtime_logging import get_runtime_logger
from diffbubble.search import Match, match_position, search_rows
from diffbubble.ui.render import SearchHighlight, display_offset, render_error, render_footer
from diffbubble.ui.themes import DiffStyles, next_theme
from diffbubble.widgets.diff_pane import DiffPane
from diffbubble.widgets.file_list import FileList

_EMPTY_HINTS = {
    DiffMode.STAGED: (
        "No staged changes found.\n\nTry one of the following:\n"
        "  • Run 'git add <file>' to stage some changes\n"
        "  • Use --unstaged to see unstaged changes\n"
        "  • Remove --staged flag to see all changes"
    ),
    DiffMode.UNSTAGED: (
        "No unstaged changes found.\n\nTry one of the following:\n"
        "  • Use --staged to see staged changes\n"
        "  • Remove --unstaged flag to see all changes\n"
        "  • Make some changes to your working directory"
    ),
    DiffMode.ALL: (
        "No changes found in the repository.\n\nMake sure you have:\n"
        "  • Modified some files in your working directory\n"
        "  • Staged some changes with 'git add'\n"
        "  • Checked that you're in a git repository"
    ),
}


class DiffSource(Protocol):
    mode: DiffMode

    async def modified_files(self) -> list[FileStat]: ...

    async def file_diff(self, path: str, context_lines: int = DEFAULT_CONTEXT) -> bytes: ...


class DiffScreen(Screen):
    BINDINGS = [
        Binding("tab", "toggle_focus", "Focus", priority=True),
        Binding("escape", "escape", "Back"),
    ]

    DEFAULT_CSS = """
    DiffScreen {
        layout: vertical;
    }

    #body {
        height: 1fr;
    }

    #error {
        height: 1fr;
        border: round $error;
        padding: 1 2;
    }

    #search {
        height: 3;
    }

    #status {
        height: auto;
        padding: 0 1;
    }

    .hidden {
        display: none;
    }
    """

    def __init__(
        self,
        *,
        source: DiffSource,
        settings: AppSettings,
        initial_file: str | None = None,
    ) -> None:
        self.source = source
        self.settings = settings
        self.initial_file = initial_file
        self.diff_styles = DiffStyles.named(settings.theme)
        self.show_line_numbers = settings.line_numbers
        self.full_context = settings.full_context

        self.files: list[FileStat] = []
        self.selected_index: int | None = None
        self.rows: list[Row] = []
        self.error: str | None = None

        self.search_mode = False
        self.search_query = ""
        self.matches: list[Match] = []
        self.current_match = -1

        self.logger = get_runtime_logger()
        self._key_actions = self._build_key_actions()
        super().__init__()

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="body"):
            yield FileList(id="files")
            yield DiffPane(Side.OLD, id="old")
            yield DiffPane(Side.NEW, id="new")
        yield Static("", id="error", classes="hidden")
        yield Input(placeholder="Search...", max_length=100, id="search", classes="hidden")
        yield Static("", id="status")

    def on_mount(self) -> None:
        old = self.query_one("#old", DiffPane)
        new = self.query_one("#new", DiffPane)
        self.watch(old, "scroll_y", lambda value: self._sync_scroll(new, value), init=False)
        self.watch(new, "scroll_y", lambda value: self._sync_scroll(old, value), init=False)
        self.query_one("#files", FileList).focus()
        self._apply_theme()
        self._refresh_status()
        self.load_files()

    def _build_key_actions(self) -> dict[str, str]:
        keys = self.settings.key_bindings
        return {
            keys.search: "start_search",
            keys.next_file: "next_file",
            keys.prev_file: "prev_file",
            keys.toggle_line_numbers: "toggle_line_numbers",
            keys.toggle_context: "toggle_context",
            keys.cycle_theme: "cycle_theme",
            keys.quit: "quit",
            "N": "prev_match",
        }

    # Loading

    def load_files(self) -> None:
        self.run_worker(self._load_files(), group="files", exclusive=True, exit_on_error=False)

    async def _load_files(self) -> None:
        try:
            files = await self.source.modified_files()
        except Exception as exc:  # surfaced in the error panel
            self.post_message(FilesLoaded(files=[], error=exc))
            return
        self.post_message(FilesLoaded(files=files))

    def load_diff(self, index: int) -> None:
        if not 0 <= index < len(self.files):
            return
        self.selected_index = index
        path = self.files[index].path
        context = FULL_CONTEXT if self.full_context else DEFAULT_CONTEXT
        self.logger.debug("screen.diff.requested", path=path, context=context)
        self.run_worker(self._load_diff(path, context), group="diff", exclusive=True, exit_on_error=False)

    async def _load_diff(self, path: str, context: int) -> None:
        try:
            raw = await self.source.file_diff(path, context)
            rows = await asyncio.to_thread(align, raw)
        except Exception as exc:  # surfaced in the error panel
            self.post_message(DiffLoaded(path=path, rows=[], error=exc))
            return
        self.post_message(DiffLoaded(path=path, rows=rows))

    def on_files_loaded(self, message: FilesLoaded) -> None:
        if message.error is not None:
            self.logger.error("screen.files.failed", error=str(message.error))
            self._show_error(render_error(message.error))
            return

        self.files = message.files
        if not self.files:
            self.logger.info("screen.files.empty", mode=self.source.mode.value)
            self._show_error(_EMPTY_HINTS[self.source.mode])
            return

        file_list = self.query_one("#files", FileList)
        file_list.show_files(self.files, self.diff_styles)
        index = file_list.index_of(self.initial_file) if self.initial_file else None
        if index is None:
            index = 0
        self.selected_index = index
        file_list.highlighted = index
        self.load_diff(index)

    def on_diff_loaded(self, message: DiffLoaded) -> None:
        if message.error is not None:
            self.logger.error("screen.diff.failed", path=message.path, error=str(message.error))
            self.rows = []
            for pane in self.query(DiffPane):
                pane.clear_rows()
            self._show_error(render_error(message.error))
            return

        self.logger.info("diff.aligned", path=message.path, rows=len(message.rows))
        self._hide_error()
        self.rows = message.rows
        if self.search_query:
            self._run_search(self.search_query)
        self._render_panes()
        self.query_one("#old", DiffPane).scroll_home(animate=False)
        self.query_one("#new", DiffPane).scroll_home(animate=False)

    def on_option_list_option_highlighted(self, event: OptionList.OptionHighlighted) -> None:
        if event.option_index != self.selected_index:
            self.load_diff(event.option_index)

    # Rendering

    def _render_panes(self) -> None:
        highlights = [
            SearchHighlight(
                row_index=match.row_index,
                side=match.side,
                column=match.column,
                length=match.length,
                is_current=index == self.current_match,
            )
            for index, match in enumerate(self.matches)
        ]
        for pane in self.query(DiffPane):
            pane.show_rows(
                self.rows,
                self.diff_styles,
                show_line_numbers=self.show_line_numbers,
                highlights=highlights,
            )
        self._refresh_status()

    def _refresh_status(self) -> None:
        info = ""
        if self.matches and self.current_match >= 0:
            info = f"Match {self.current_match + 1} of {len(self.matches)}"
        elif self.search_query and not self.matches and not self.search_mode:
            info = "No matches found"
        footer = render_footer(
            self.diff_styles,
            show_line_numbers=self.show_line_numbers,
            full_context=self.full_context,
            focus_on_files=isinstance(self.focused, OptionList),
            search_mode=self.search_mode,
            search_info=info,
        )
        self.query_one("#status", Static).update(footer)

    def _apply_theme(self) -> None:
        theme = self.diff_styles.theme
        focused = self.focused
        for widget in (*self.query(DiffPane), self.query_one("#files", FileList)):
            color = theme.focused_border_color if focused is widget else theme.border_color
            widget.styles.border = ("round", color)

    def _show_error(self, text: str) -> None:
        self.error = text
        self.query_one("#error", Static).update(Text(text, style=self.diff_styles.error))
        self.query_one("#error", Static).remove_class("hidden")
        self.query_one("#body", Horizontal).add_class("hidden")

    def _hide_error(self) -> None:
        self.error = None
        self.query_one("#error", Static).add_class("hidden")
        self.query_one("#body", Horizontal).remove_class("hidden")

    def _sync_scroll(self, other: DiffPane, value: float) -> None:
        if other.scroll_y != value:
            other.scroll_to(y=value, animate=False)

    def on_descendant_focus(self, _event: events.DescendantFocus) -> None:
        self._apply_theme()
        self._refresh_status()

    # Keys

    def on_key(self, event: events.Key) -> None:
        if self.search_mode:
            return
        action = self._key_actions.get(event.character or "") or self._key_actions.get(event.key)
        if action is None:
            return
        event.stop()
        event.prevent_default()
        getattr(self, f"action_{action}")()

    def action_toggle_focus(self) -> None:
        if self.search_mode:
            return
        if isinstance(self.focused, OptionList):
            self.query_one("#old", DiffPane).focus()
        else:
            self.query_one("#files", FileList).focus()

    def _step_file(self, delta: int) -> None:
        if not self.files:
            return
        current = self.selected_index if self.selected_index is not None else 0
        target = current + delta
        if not 0 <= target < len(self.files):
            return
        self.query_one("#files", FileList).highlighted = target

    def action_next_file(self) -> None:
        if isinstance(self.focused, OptionList):
            self._step_file(+1)
        else:
            self.query_one("#old", DiffPane).scroll_down(animate=False)

    def action_prev_file(self) -> None:
        if isinstance(self.focused, OptionList):
            self._step_file(-1)
        else:
            self.query_one("#old", DiffPane).scroll_up(animate=False)

    def action_toggle_line_numbers(self) -> None:
        if self.matches and self.current_match >= 0:
            self._jump_to_match((self.current_match + 1) % len(self.matches))
            return
        self.show_line_numbers = not self.show_line_numbers
        self.logger.debug("screen.line_numbers.toggled", enabled=self.show_line_numbers)
        self._render_panes()

    def action_prev_match(self) -> None:
        if self.matches and self.current_match >= 0:
            self._jump_to_match((self.current_match - 1) % len(self.matches))

    def action_toggle_context(self) -> None:
        self.full_context = not self.full_context
        self.logger.debug("screen.context.toggled", full=self.full_context)
        self._refresh_status()
        if self.selected_index is not None:
            self.load_diff(self.selected_index)

    def action_cycle_theme(self) -> None:
        theme = next_theme(self.diff_styles.theme.name)
        self.diff_styles = DiffStyles.from_theme(theme)
        self.settings.theme = theme.name
        self.logger.info("screen.theme.changed", theme=theme.name)
        if self.files:
            self.query_one("#files", FileList).show_files(self.files, self.diff_styles, selected=self.selected_index)
        self._apply_theme()
        self._render_panes()
        self.app.notify(f"Theme: {theme.name}", timeout=2)

    def action_quit(self) -> None:
        self.logger.info("app.exit", theme=self.diff_styles.theme.name)
        self.app.exit()

    def action_escape(self) -> None:
        if self.search_mode:
            self._close_search(keep=False)
            return
        if self.matches or self.search_query:
            self._clear_search()
            return
        self.action_quit()

    # Search

    def action_start_search(self) -> None:
        self.search_mode = True
        search = self.query_one("#search", Input)
        search.value = ""
        search.remove_class("hidden")
        search.focus()
        self._refresh_status()

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id != "search" or not self.search_mode:
            return
        self._run_search(event.value)
        if self.matches:
            self._jump_to_match(0)
        else:
            self._render_panes()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "search":
            self._close_search(keep=True)

    def _run_search(self, query: str) -> None:
        self.search_query = query
        file_name = ""
        if self.selected_index is not None and self.selected_index < len(self.files):
            file_name = self.files[self.selected_index].path
        self.matches = search_rows(self.rows, query, file_name)
        self.current_match = 0 if self.matches else -1
        self.logger.debug("screen.search", query=query, matches=len(self.matches))

    def _jump_to_match(self, index: int) -> None:
        self.current_match = index
        offset = display_offset(self.rows, match_position(self.matches[index]))
        self._render_panes()
        self.query_one("#old", DiffPane).scroll_to(y=offset, animate=False)
        self.query_one("#new", DiffPane).scroll_to(y=offset, animate=False)

    def _close_search(self, *, keep: bool) -> None:
        self.search_mode = False
        search = self.query_one("#search", Input)
        search.add_class("hidden")
        if not keep:
            self.search_query = ""
            self.matches = []
            self.current_match = -1
            search.value = ""
        self.query_one("#files", FileList).focus()
        self._render_panes()

    def _clear_search(self) -> None:
        self.search_query = ""
        self.matches = []
        self.current_match = -1
        self.query_one("#search", Input).value = ""
        self._render_panes()
