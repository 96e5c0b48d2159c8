from __future__ import annotations

from dataclasses import dataclass

"""SUMMARY line rendering for CLI runs.

Format (one line, fixed key order):
SUMMARY command={command} files={files} records={records} errors={errors}
committable={yes|no} elapsed_sec={elapsed}
"""

__all__ = [
    "RunSummary",
    "render_summary_line",
]


@dataclass(frozen=True)
class RunSummary:
    command: str
    files: int
    records: int  # normalized records across all files
    errors: int  # row and file errors across all files
    committable: bool
    elapsed_seconds: float


def _format_seconds(value: float) -> str:
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for very short runs
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(summary: RunSummary) -> str:
    """Render the SUMMARY line for a finished run.

    >>> render_summary_line(RunSummary("trade-ins", 1, 10, 0, True, 2.0))
    'SUMMARY command=trade-ins files=1 records=10 errors=0 committable=yes elapsed_sec=2'
    """
    return (
        f"SUMMARY command={summary.command} "
        f"files={summary.files} "
        f"records={summary.records} "
        f"errors={summary.errors} "
        f"committable={'yes' if summary.committable else 'no'} "
        f"elapsed_sec={_format_seconds(summary.elapsed_seconds)}"
    )
