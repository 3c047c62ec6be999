"""Side-by-side git diff viewer for the terminal."""

from diffbubble.version import __version__

__all__ = ["__version__"]
