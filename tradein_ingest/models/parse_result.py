from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

"""Output container for one batch parse.

``records`` holds every row that normalized successfully; ``errors`` holds one
human-readable string per rejected row (``"Row {n}: ..."``) or a single
file-level message when the sheet could not be read at all. Whether a batch
with errors may still be committed is the caller's decision.
"""

__all__ = [
    "ParseResult",
]

T = TypeVar("T")


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    records: list[T] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when no row or sheet error was recorded."""
        return not self.errors

    @property
    def row_count(self) -> int:
        """Number of successfully normalized records."""
        return len(self.records)
