"""Row-level parsing: column resolution, value normalization and batch parsing."""

from .batch import parse_rows, parse_workbook
from .columns import resolve
from .dates import InvalidDateError, to_date
from .normalizers import (
    RowValidationError,
    normalize_bid_row,
    normalize_device_row,
    normalize_trade_in_row,
)
from .platform import classify_library_platform, classify_trade_in_platform
from .storage import split_model_storage

__all__ = [
    "InvalidDateError",
    "RowValidationError",
    "classify_library_platform",
    "classify_trade_in_platform",
    "normalize_bid_row",
    "normalize_device_row",
    "normalize_trade_in_row",
    "parse_rows",
    "parse_workbook",
    "resolve",
    "split_model_storage",
    "to_date",
]
