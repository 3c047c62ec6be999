"""Exception types shared across diffbubble."""

from __future__ import annotations


class DiffbubbleError(Exception):
    """Base class for errors surfaced to the user."""
