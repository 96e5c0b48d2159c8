from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

"""Normalized record models for trade-in spreadsheet ingestion.

Every record produced by the row normalizers is a frozen dataclass owned by the
caller once returned. Persistence fields (``id``, ``created_at``, ``updated_at``)
are left as ``None``; the surrounding application assigns them at commit time.
Lifecycle fields on ``TradeIn`` (auction / sale) are filled outside the parser
with ``dataclasses.replace``.
"""

__all__ = [
    "Platform",
    "Currency",
    "BID_CURRENCIES",
    "TradeInStatus",
    "BidStatus",
    "DeviceRecord",
    "TradeIn",
    "CustomerBid",
]


class Platform(Enum):
    """Device platform. Values are the strings stored downstream."""
    ANDROID = "Android"
    APPLE = "Apple"

    @classmethod
    def lookup(cls, value: object) -> Platform | None:
        """Match ``value`` against the enum values ignoring case and surrounding spaces.

        Returns None for anything that names neither platform.
        """
        text = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        return None


class Currency(Enum):
    NZD = "NZD"
    USD = "USD"
    AUD = "AUD"


# Customer bids are only ever tendered in these currencies
BID_CURRENCIES = frozenset({Currency.USD, Currency.AUD})


class TradeInStatus(Enum):
    """Trade-in lifecycle: pending → auction → sold."""
    PENDING = "pending"
    AUCTION = "auction"
    SOLD = "sold"


class BidStatus(Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass(frozen=True)
class DeviceRecord:
    """Model-library entry built from one library spreadsheet row.

    ``specifications`` keeps every unrecognised source column keyed by its
    original header, in source column order.
    """
    manufacturer: str
    model: str  # base model name, storage token removed
    storage_variant: str  # "" when the row carries no storage
    platform: Platform
    sort_order: int  # 0-based sheet position unless reseeded
    specifications: dict[str, Any] = field(default_factory=dict)
    full_model_name: str | None = None  # combined "model + storage" string as uploaded
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class TradeIn:
    """One used device accepted from a supplier."""
    supplier_id: str
    device_model: str
    grade: str
    cost: float
    currency: Currency
    date_booked: date  # date the supplier recorded the trade-in
    platform: Platform
    storage_variant: str | None = None
    imei: str | None = None
    purchase_date: date | None = None  # bulk purchase date (upload metadata)
    batch_file_name: str | None = None  # source spreadsheet, identifies the batch
    status: TradeInStatus = TradeInStatus.PENDING
    # Lifecycle fields, set outside the parser
    auction_date: date | None = None
    sold_date: date | None = None
    sold_price: float | None = None
    sold_currency: Currency | None = None
    customer_id: str | None = None
    notes: str | None = None
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class CustomerBid:
    """A customer's bid on a model/grade for one auction."""
    customer_id: str
    auction_date: date
    device_model: str
    grade: str
    bid_amount: float
    currency: Currency  # USD or AUD only
    platform: Platform | None = None  # explicit column only, no inference
    storage_variant: str | None = None
    quantity: int = 1
    status: BidStatus = BidStatus.PENDING
    notes: str | None = None
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
