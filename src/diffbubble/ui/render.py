"""Turn aligned rows into displayable column text."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from rich.style import Style
from rich.text import Text

from diffbubble.diff.model import Line, LineKind, Row, Side
from diffbubble.git.source import FileStat, FileStatus
from diffbubble.ui.themes import DiffStyles

HEADER_SEPARATOR = "─" * 30
HEADER_INDENT = 4
MIN_NUMBER_WIDTH = 4


@dataclass(slots=True, frozen=True)
class SearchHighlight:
    row_index: int
    side: Side
    column: int
    length: int
    is_current: bool = False


def line_number_width(rows: Sequence[Row], side: Side) -> int:
    largest = 0
    for row in rows:
        line = row.side(side)
        if line is not None and line.number is not None and line.number > largest:
            largest = line.number
    return max(MIN_NUMBER_WIDTH, len(str(largest))) if largest else MIN_NUMBER_WIDTH


def _line_style(line: Line, side: Side, styles: DiffStyles) -> Style | None:
    if line.kind is LineKind.ADDITION and side is Side.NEW:
        return styles.addition
    if line.kind is LineKind.DELETION and side is Side.OLD:
        return styles.deletion
    return None


def render_side(
    rows: Sequence[Row],
    side: Side,
    styles: DiffStyles,
    *,
    show_line_numbers: bool = True,
    highlights: Iterable[SearchHighlight] = (),
) -> Text:
    """Render one column; every row produces the same number of lines on both sides."""

    width = line_number_width(rows, side) if show_line_numbers else 0
    by_row: dict[int, list[SearchHighlight]] = {}
    for highlight in highlights:
        if highlight.side is side:
            by_row.setdefault(highlight.row_index, []).append(highlight)

    text = Text(no_wrap=True, overflow="crop")
    for index, row in enumerate(rows):
        line = row.side(side)
        if line is not None and line.kind is LineKind.HEADER:
            text.append(HEADER_SEPARATOR, style=styles.header)
            text.append("\n")
            text.append(" " * HEADER_INDENT + line.content, style=styles.header)
            text.append("\n")
            continue

        if line is None:
            text.append(" " * (width + 1) if show_line_numbers else "")
            text.append("\n")
            continue

        gutter = ""
        if show_line_numbers and line.number is not None:
            gutter = f"{line.number:>{width}} "
        start = len(text)
        text.append(gutter + line.content, style=_line_style(line, side, styles))

        content_start = start + len(gutter)
        for highlight in by_row.get(index, ()):
            style = styles.current_match if highlight.is_current else styles.match
            begin = content_start + highlight.column
            text.stylize(style, begin, begin + highlight.length)
        text.append("\n")

    return text


def display_offset(rows: Sequence[Row], row_index: int) -> int:
    """Rendered line on which ``rows[row_index]`` starts; headers take two lines."""

    return sum(2 if row.is_header else 1 for row in rows[:row_index])


def truncate(value: str, max_len: int) -> str:
    if len(value) <= max_len:
        return value
    return value[: max_len - 3] + "..."


def _status_style(status: FileStatus, styles: DiffStyles) -> Style | None:
    if status in (FileStatus.MODIFIED, FileStatus.RENAMED):
        return styles.status_modified
    if status is FileStatus.ADDED:
        return styles.status_added
    if status is FileStatus.DELETED:
        return styles.status_deleted
    return None


def render_file_list_item(stat: FileStat, styles: DiffStyles, *, name_width: int = 30) -> Text:
    text = Text(no_wrap=True, overflow="ellipsis")
    text.append(stat.status.icon, style=_status_style(stat.status, styles))
    text.append(" ")
    text.append(f"{truncate(stat.path, name_width):<{name_width + 2}}", style=styles.file_item)
    text.append(f"+{stat.additions} -{stat.deletions}", style=styles.stats)
    return text


def render_footer(
    styles: DiffStyles,
    *,
    show_line_numbers: bool,
    full_context: bool,
    focus_on_files: bool = True,
    search_mode: bool = False,
    search_info: str = "",
) -> Text:
    if search_mode:
        hints = ["type to search", "enter: keep results", "esc: cancel"]
    else:
        navigate = "j/k: files" if focus_on_files else "j/k: scroll"
        hints = [
            "tab: focus",
            navigate,
            "/: search",
            f"n: line numbers ({'on' if show_line_numbers else 'off'})",
            f"c: context ({'full' if full_context else 'focus'})",
            "t: theme",
            "q/esc: quit",
        ]
    if search_info:
        hints.insert(0, search_info)
    return Text(" • ".join(hints), style=styles.footer)


def render_error(error: BaseException | str) -> str:
    return f"Unable to load git diff.\n\n{error}"


def render_plain(
    rows: Sequence[Row],
    *,
    width: int = 60,
    show_line_numbers: bool = True,
) -> str:
    """Plain-text side-by-side rendering for non-interactive output."""

    old_width = line_number_width(rows, Side.OLD)
    new_width = line_number_width(rows, Side.NEW)

    def cell(line: Line | None, number_width: int) -> str:
        if line is None:
            content = ""
            gutter = " " * (number_width + 1) if show_line_numbers else ""
        else:
            content = line.content
            gutter = ""
            if show_line_numbers:
                number = "" if line.number is None else str(line.number)
                gutter = f"{number:>{number_width}} "
        return gutter + truncate(content, width)

    out: list[str] = []
    for row in rows:
        if row.is_header:
            assert row.old is not None
            out.append(row.old.content)
            continue
        left = cell(row.old, old_width)
        right = cell(row.new, new_width)
        pad = width + (old_width + 1 if show_line_numbers else 0)
        out.append(f"{left:<{pad}} | {right}".rstrip())
    return "\n".join(out)
