"""Folio - turn a directory of markdown posts into a static or live-served site."""

__version__ = "0.1.0"
