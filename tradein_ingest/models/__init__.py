"""Domain models for trade-in spreadsheet ingestion.

Records produced by the row normalizers, upload-time contexts, parse results,
trend/lead-time reporting structures and the upload history entry.
"""

from .contexts import BidContext, TradeInContext
from .error_record import ErrorRecord
from .parse_result import ParseResult
from .records import (
    BID_CURRENCIES,
    BidStatus,
    Currency,
    CustomerBid,
    DeviceRecord,
    Platform,
    TradeIn,
    TradeInStatus,
)
from .report import InventoryMetrics, SalesSummary
from .trend import UNKNOWN_BATCH, BatchEntry, LeadTimeMetrics, TrendGroup
from .upload import CommitPolicy, FileType, UploadRecord, UploadStatus

__all__ = [
    # Records
    "BID_CURRENCIES",
    "BidStatus",
    "Currency",
    "CustomerBid",
    "DeviceRecord",
    "Platform",
    "TradeIn",
    "TradeInStatus",
    # Upload context
    "BidContext",
    "TradeInContext",
    # Parsing / reporting
    "ErrorRecord",
    "ParseResult",
    "UNKNOWN_BATCH",
    "BatchEntry",
    "LeadTimeMetrics",
    "TrendGroup",
    "InventoryMetrics",
    "SalesSummary",
    # Upload history
    "CommitPolicy",
    "FileType",
    "UploadRecord",
    "UploadStatus",
]
