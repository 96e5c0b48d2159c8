from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from .records import Currency, Platform

"""Trend and lead-time reporting models.

Trend groups are derived entirely from a snapshot of trade-in records and are
recomputed on demand; nothing here is persisted.
"""

__all__ = [
    "UNKNOWN_BATCH",
    "BatchEntry",
    "TrendGroup",
    "LeadTimeMetrics",
]

# Batch bucket for trade-ins that carry no source filename
UNKNOWN_BATCH = "Unknown"


@dataclass(frozen=True)
class BatchEntry:
    """One source batch contributing to a (model, grade) trend group."""
    batch_file_name: str
    date_booked: date
    cost: float
    currency: Currency
    quantity: int  # trade-ins from this batch in the group
    supplier_id: str


@dataclass(frozen=True)
class TrendGroup:
    """Price and volume statistics for one (device model, grade) pair.

    Price statistics are computed over per-batch costs, one sample per batch
    regardless of its quantity. Margin statistics use only sold trade-ins whose
    sale currency matches the purchase currency.

    A metric that would divide by a zero baseline is reported as ``None`` and
    named in ``undefined_metrics``.
    """
    device_model: str
    grade: str
    platform: Platform
    batches: tuple[BatchEntry, ...]  # ascending by date
    total_volume: int
    sold_volume: int
    average_price: float
    min_price: float
    max_price: float
    current_price: float  # cost of the most recent batch
    price_volatility: float  # population standard deviation of batch costs
    price_change: float  # last batch cost - first batch cost
    price_change_percent: float | None
    average_sold_price: float
    average_margin: float
    average_margin_percent: float | None  # mean of per-item percentages
    undefined_metrics: tuple[str, ...] = ()

    @property
    def model_grade(self) -> str:
        """Display label, e.g. ``"iPhone 12 Pro 64GB - C"``."""
        return f"{self.device_model} - {self.grade}"

    @property
    def supplier_ids(self) -> frozenset[str]:
        return frozenset(b.supplier_id for b in self.batches)


@dataclass(frozen=True)
class LeadTimeMetrics:
    """Average whole-day lead times between lifecycle milestones."""
    average_days_booked_to_auction: int
    average_days_auction_to_sold: int
    average_total_lead_time: int  # booked → sold
