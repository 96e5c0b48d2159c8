from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from .records import Currency

"""Upload-time context stamped onto normalized records.

These values come from the upload form (or CLI flags), never from the
spreadsheet rows themselves.
"""

__all__ = [
    "TradeInContext",
    "BidContext",
]


@dataclass(frozen=True)
class TradeInContext:
    supplier_id: str  # opaque supplier reference, not validated here
    currency: Currency
    purchase_date: date | None = None  # optional bulk purchase date
    batch_file_name: str | None = None  # source filename, identifies the batch


@dataclass(frozen=True)
class BidContext:
    customer_id: str  # opaque customer reference, not validated here
    auction_date: date
    currency: Currency  # caller guarantees USD or AUD
