from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the structured ingestion error log.

Each rejected row, unreadable sheet or refused upload becomes one ErrorRecord,
written as a single JSON line. ``row`` is the 1-based spreadsheet row number
(header row = 1); -1 marks errors that belong to the whole sheet or upload.
"""

__all__ = [
    "ErrorRecord",
    "ROW_VALIDATION_ERROR",
    "SHEET_READ_ERROR",
    "UPLOAD_VALIDATION_ERROR",
]

ROW_VALIDATION_ERROR = "ROW_VALIDATION_ERROR"
SHEET_READ_ERROR = "SHEET_READ_ERROR"
UPLOAD_VALIDATION_ERROR = "UPLOAD_VALIDATION_ERROR"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Spreadsheet filename being ingested
        sheet: Sheet name within the file
        row: Row number (1-based). Use -1 for sheet or upload level errors
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Human-readable description
    """
    timestamp: str
    file: str
    sheet: str
    row: int
    error_type: str
    message: str

    @staticmethod
    def create(file: str, sheet: str, row: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            sheet=sheet,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        """Serialize to one JSON line with exactly the dataclass keys."""
        return json.dumps(asdict(self), ensure_ascii=False)
