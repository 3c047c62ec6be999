"""Text search over aligned diff rows."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from diffbubble.diff.model import LineKind, Row, Side


@dataclass(slots=True, frozen=True)
class Match:
    file_name: str
    row_index: int
    side: Side
    line_number: int | None
    column: int
    length: int
    content: str


def _occurrences(content: str, pattern: re.Pattern[str]) -> list[tuple[int, int]]:
    # A lookahead keeps overlapping hits; offsets index the original content.
    return [(found.start(), len(found.group(1))) for found in pattern.finditer(content)]


def search_rows(
    rows: Sequence[Row],
    query: str,
    file_name: str = "",
    *,
    case_sensitive: bool = False,
) -> list[Match]:
    """Return every occurrence of ``query``, old side before new side per row.

    Overlapping occurrences are all reported. Hunk headers are not searched.
    """

    if not query:
        return []

    flags = 0 if case_sensitive else re.IGNORECASE
    pattern = re.compile(f"(?=({re.escape(query)}))", flags)
    matches: list[Match] = []
    for row_index, row in enumerate(rows):
        for side in (Side.OLD, Side.NEW):
            line = row.side(side)
            if line is None or line.kind is LineKind.HEADER:
                continue
            for column, length in _occurrences(line.content, pattern):
                matches.append(
                    Match(
                        file_name=file_name,
                        row_index=row_index,
                        side=side,
                        line_number=line.number,
                        column=column,
                        length=length,
                        content=line.content,
                    )
                )
    return matches


def match_position(match: Match) -> int:
    return match.row_index
