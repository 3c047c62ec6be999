"""Unified diff alignment into side-by-side rows."""

from diffbubble.diff.aligner import DiffReadError, Marker, align, align_text, classify
from diffbubble.diff.model import Line, LineKind, Row, Side

__all__ = [
    "DiffReadError",
    "Line",
    "LineKind",
    "Marker",
    "Row",
    "Side",
    "align",
    "align_text",
    "classify",
]
