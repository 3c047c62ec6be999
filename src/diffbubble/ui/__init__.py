"""Presentation helpers: themes and column rendering."""
