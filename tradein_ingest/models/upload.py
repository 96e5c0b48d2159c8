from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

"""Upload history models.

An UploadRecord describes one spreadsheet upload and its outcome. It mirrors
the upload-history entry the admin application stores next to the committed
records; the core only builds it, never persists it.
"""

__all__ = [
    "CommitPolicy",
    "FileType",
    "UploadStatus",
    "UploadRecord",
]


class FileType(Enum):
    """Kind of spreadsheet being uploaded."""
    MODEL_LIBRARY = "model-library"
    TRADE_INS = "trade-ins"
    CUSTOMER_BIDS = "customer-bids"


class CommitPolicy(Enum):
    """What a caller commits from a batch that has row errors.

    ALL_OR_NOTHING refuses the whole batch on any error; PARTIAL commits the
    rows that normalized successfully.
    """
    ALL_OR_NOTHING = "all_or_nothing"
    PARTIAL = "partial"


class UploadStatus(Enum):
    """Upload lifecycle: processing → (completed | failed)."""
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class UploadRecord:
    file_name: str
    file_type: FileType
    records_processed: int  # records eligible for commit
    status: UploadStatus
    supplier_id: str | None = None  # trade-in uploads
    customer_id: str | None = None  # customer bid uploads
    purchase_date: date | None = None
    auction_date: date | None = None
    error_count: int = 0
    error_message: str | None = None
