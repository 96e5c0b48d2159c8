"""Command-line interface (``tradein-ingest``)."""

from .__main__ import main

__all__ = ["main"]
