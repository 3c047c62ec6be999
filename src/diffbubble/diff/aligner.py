"""Turn unified diff text into vertically aligned old/new rows.

Deletions and additions are buffered until the next context line, hunk
header or end of input. The buffers are then drained together so the k-th
deletion shares a row with the k-th addition and the shorter side gets an
empty slot. A changed region therefore occupies ``max(len(deletions),
len(additions))`` rows and the following context line lands on the same row
index in both columns.

Pairing is purely positional. No attempt is made to match a deletion with
the addition it most resembles.
"""

from __future__ import annotations

import io
from collections.abc import Iterable
from enum import Enum
from typing import IO, Union

from diffbubble.diff.model import Line, LineKind, Row
from diffbubble.errors import DiffbubbleError

DiffInput = Union[str, bytes, IO[str], IO[bytes], Iterable[str], Iterable[bytes]]

METADATA_PREFIXES = ("diff", "index", "---", "+++")
HUNK_PREFIX = "@@"


class Marker(Enum):
    METADATA = "metadata"
    HEADER = "header"
    DELETION = "deletion"
    ADDITION = "addition"
    CONTEXT = "context"
    UNKNOWN = "unknown"


class DiffReadError(DiffbubbleError):
    """Reading the diff stream failed part way through.

    ``partial_rows`` holds everything aligned before the failure, with the
    pending buffers already drained.
    """

    def __init__(self, message: str, *, partial_rows: list[Row]) -> None:
        super().__init__(message)
        self.partial_rows = partial_rows


def classify(raw: str) -> Marker:
    # Metadata is tested first so "--- a/x" and "+++ b/x" never count as content.
    if raw.startswith(METADATA_PREFIXES):
        return Marker.METADATA
    if raw.startswith(HUNK_PREFIX):
        return Marker.HEADER
    if not raw:
        return Marker.CONTEXT

    first = raw[0]
    if first == "-":
        return Marker.DELETION
    if first == "+":
        return Marker.ADDITION
    if first == " ":
        return Marker.CONTEXT
    return Marker.UNKNOWN


class _Aligner:
    def __init__(self) -> None:
        self.rows: list[Row] = []
        self.pending_deletions: list[str] = []
        self.pending_additions: list[str] = []
        self.old_number = 1
        self.new_number = 1

    def feed(self, raw: str) -> None:
        marker = classify(raw)
        if marker is Marker.METADATA or marker is Marker.UNKNOWN:
            return

        if marker is Marker.DELETION:
            self.pending_deletions.append(raw)
            return
        if marker is Marker.ADDITION:
            self.pending_additions.append(raw)
            return

        self.flush()
        if marker is Marker.HEADER:
            self.rows.append(
                Row(
                    old=Line(content=raw, kind=LineKind.HEADER),
                    new=Line(content=raw, kind=LineKind.HEADER),
                )
            )
            return

        self.rows.append(
            Row(
                old=Line(content=raw, kind=LineKind.CONTEXT, number=self.old_number),
                new=Line(content=raw, kind=LineKind.CONTEXT, number=self.new_number),
            )
        )
        self.old_number += 1
        self.new_number += 1

    def flush(self) -> None:
        deletions = self.pending_deletions
        additions = self.pending_additions
        for index in range(max(len(deletions), len(additions))):
            old = None
            if index < len(deletions):
                old = Line(content=deletions[index], kind=LineKind.DELETION, number=self.old_number)
                self.old_number += 1

            new = None
            if index < len(additions):
                new = Line(content=additions[index], kind=LineKind.ADDITION, number=self.new_number)
                self.new_number += 1

            self.rows.append(Row(old=old, new=new))

        self.pending_deletions = []
        self.pending_additions = []

    def finish(self) -> list[Row]:
        self.flush()
        return list(self.rows)


def _strip_terminator(raw: str | bytes) -> str:
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    if raw.endswith("\n"):
        raw = raw[:-1]
    if raw.endswith("\r"):
        raw = raw[:-1]
    return raw


def align(source: DiffInput) -> list[Row]:
    """Align a unified diff read from ``source``.

    ``source`` may be a string, raw bytes, an open text or binary stream, or
    any iterable of lines. Unrecognised lines are dropped silently; only a
    failure to read the stream itself raises :class:`DiffReadError`.
    """

    if isinstance(source, bytes):
        source = source.decode("utf-8", errors="replace")
    if isinstance(source, str):
        source = io.StringIO(source)

    aligner = _Aligner()
    lines = iter(source)
    while True:
        try:
            raw = next(lines)
        except StopIteration:
            break
        except (OSError, UnicodeDecodeError) as exc:
            raise DiffReadError(
                f"failed reading diff input: {exc}",
                partial_rows=aligner.finish(),
            ) from exc
        aligner.feed(_strip_terminator(raw))

    return aligner.finish()


def align_text(text: str) -> list[Row]:
    return align(io.StringIO(text))
