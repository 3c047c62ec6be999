"""Row and line values produced by the aligner."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LineKind(Enum):
    UNKNOWN = "unknown"
    CONTEXT = "context"
    ADDITION = "addition"
    DELETION = "deletion"
    HEADER = "header"


class Side(Enum):
    OLD = "old"
    NEW = "new"


@dataclass(slots=True, frozen=True)
class Line:
    """One piece of diff content placed on a single side.

    ``content`` keeps its leading marker character. ``number`` is the
    1-based position within that side's file and is ``None`` for headers.
    """

    content: str
    kind: LineKind
    number: int | None = None


@dataclass(slots=True, frozen=True)
class Row:
    """A pair of lines shown at the same vertical position.

    A missing side is ``None``; the renderer draws it as a blank slot.
    """

    old: Line | None = None
    new: Line | None = None

    def side(self, side: Side) -> Line | None:
        return self.old if side is Side.OLD else self.new

    @property
    def is_header(self) -> bool:
        return (
            self.old is not None
            and self.new is not None
            and self.old.kind is LineKind.HEADER
            and self.new.kind is LineKind.HEADER
        )
