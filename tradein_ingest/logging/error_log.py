from __future__ import annotations

import re
from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import (
    ROW_VALIDATION_ERROR,
    SHEET_READ_ERROR,
    ErrorRecord,
)

"""Structured error log: buffered JSON Lines written once per run.

- One file per run, ``{log_dir}/errors-YYYYMMDD-HHMMSS.log`` (UTC)
- Fixed record schema (see ErrorRecord); no extra keys
- Records are buffered and appended to the file on flush()
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
    "records_from_errors",
]

LOGS_DIR = Path("logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"

_ROW_ERROR = re.compile(r"^Row (\d+): (.*)$", re.DOTALL)


class ErrorLogBuffer:
    """In-memory buffer of error records. flush() appends them as JSON Lines.

    The file path is fixed on first access. Not thread-safe (serial use only).
    """
    def __init__(self, log_dir: Path | None = None) -> None:
        self.log_dir = log_dir or LOGS_DIR
        self._records: list[ErrorRecord] = []
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self.log_dir / f"errors-{stamp}.log"
        return self._file_path

    def append(self, record: ErrorRecord) -> None:
        self._records.append(record)

    def extend(self, records: list[ErrorRecord]) -> None:
        self._records.extend(records)

    def __len__(self) -> int:
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records; returns the file written, or None when there was nothing to write."""
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp


def records_from_errors(file: str, sheet: str, errors: list[str]) -> list[ErrorRecord]:
    """Convert parse error strings into error records.

    ``"Row {n}: ..."`` entries keep their row number; anything else is a
    sheet-level error with row -1.
    """
    records = []
    for error in errors:
        match = _ROW_ERROR.match(error)
        if match:
            records.append(ErrorRecord.create(
                file=file,
                sheet=sheet,
                row=int(match.group(1)),
                error_type=ROW_VALIDATION_ERROR,
                message=match.group(2),
            ))
        else:
            records.append(ErrorRecord.create(
                file=file, sheet=sheet, row=-1, error_type=SHEET_READ_ERROR, message=error,
            ))
    return records
