from __future__ import annotations

import logging
import statistics
from collections.abc import Iterable, Sequence
from typing import Literal

from ..models.records import Platform, TradeIn
from ..models.trend import UNKNOWN_BATCH, BatchEntry, TrendGroup

"""Price trend aggregation over a snapshot of trade-ins.

Trade-ins are grouped by exact ``(device_model, grade)``. Within a group each
source batch (spreadsheet) contributes one price sample: the cost and booked
date of the first trade-in seen from that batch, plus a count of how many
trade-ins it holds. Price statistics are taken over those per-batch samples.

All functions here are pure; the same input always yields the same groups in
the same order (first appearance of each model/grade).
"""

__all__ = [
    "SortKey",
    "aggregate_trends",
    "filter_trends",
    "sort_trends",
]

logger = logging.getLogger(__name__)

SortKey = Literal["volume", "variance", "price_change", "model"]


class _GroupBuilder:
    """Accumulates one model/grade group while scanning trade-ins."""

    def __init__(self, first: TradeIn) -> None:
        self.first = first
        self.items: list[TradeIn] = []
        self.batches: dict[str, list[TradeIn]] = {}

    def add(self, trade_in: TradeIn) -> None:
        self.items.append(trade_in)
        key = trade_in.batch_file_name or UNKNOWN_BATCH
        self.batches.setdefault(key, []).append(trade_in)

    def batch_entries(self) -> list[BatchEntry]:
        entries = [
            BatchEntry(
                batch_file_name=name,
                date_booked=members[0].date_booked,
                cost=members[0].cost,
                currency=members[0].currency,
                quantity=len(members),
                supplier_id=members[0].supplier_id,
            )
            for name, members in self.batches.items()
        ]
        # sorted() is stable: batches booked the same day keep first-seen order
        return sorted(entries, key=lambda b: b.date_booked)

    def build(self) -> TrendGroup:
        batches = self.batch_entries()
        prices = [b.cost for b in batches]
        first_price, last_price = prices[0], prices[-1]
        average_price = statistics.fmean(prices)
        price_change = last_price - first_price

        undefined: list[str] = []
        if first_price == 0:
            price_change_percent = None
            undefined.append("price_change_percent")
        else:
            price_change_percent = price_change / first_price * 100

        sold = [
            t for t in self.items
            if t.sold_price is not None and t.sold_currency == t.currency
        ]
        if sold:
            average_sold_price = statistics.fmean(t.sold_price for t in sold)
            average_margin = statistics.fmean(t.sold_price - t.cost for t in sold)
            if any(t.cost == 0 for t in sold):
                average_margin_percent = None
                undefined.append("average_margin_percent")
            else:
                # mean of per-item percentages, not total margin over total cost
                average_margin_percent = statistics.fmean(
                    (t.sold_price - t.cost) / t.cost * 100 for t in sold
                )
        else:
            average_sold_price = average_margin = 0.0
            average_margin_percent = 0.0

        return TrendGroup(
            device_model=self.first.device_model,
            grade=self.first.grade,
            platform=self.first.platform,
            batches=tuple(batches),
            total_volume=len(self.items),
            sold_volume=len(sold),
            average_price=average_price,
            min_price=min(prices),
            max_price=max(prices),
            current_price=last_price,
            price_volatility=statistics.pstdev(prices, mu=average_price),
            price_change=price_change,
            price_change_percent=price_change_percent,
            average_sold_price=average_sold_price,
            average_margin=average_margin,
            average_margin_percent=average_margin_percent,
            undefined_metrics=tuple(undefined),
        )


def aggregate_trends(trade_ins: Iterable[TradeIn]) -> list[TrendGroup]:
    """Group trade-ins by model and grade and compute batch price statistics.

    >>> aggregate_trends([])
    []
    """
    groups: dict[tuple[str, str], _GroupBuilder] = {}
    for trade_in in trade_ins:
        key = (trade_in.device_model, trade_in.grade)
        builder = groups.get(key)
        if builder is None:
            builder = groups[key] = _GroupBuilder(trade_in)
        builder.add(trade_in)

    trends = [builder.build() for builder in groups.values()]
    logger.debug("aggregated groups=%d", len(trends))
    return trends


def filter_trends(
    trends: Iterable[TrendGroup],
    *,
    platform: Platform | None = None,
    grade: str | None = None,
    supplier_id: str | None = None,
    min_volume: int = 0,
    search: str | None = None,
) -> list[TrendGroup]:
    """Keep the groups matching every given criterion.

    ``supplier_id`` matches groups with at least one batch from that supplier;
    ``search`` is a case-insensitive substring of the device model.
    """
    needle = search.lower() if search else None
    result = []
    for trend in trends:
        if platform is not None and trend.platform is not platform:
            continue
        if grade is not None and trend.grade != grade:
            continue
        if trend.total_volume < min_volume:
            continue
        if needle and needle not in trend.device_model.lower():
            continue
        if supplier_id is not None and supplier_id not in trend.supplier_ids:
            continue
        result.append(trend)
    return result


def sort_trends(
    trends: Sequence[TrendGroup],
    by: SortKey = "volume",
    descending: bool = True,
) -> list[TrendGroup]:
    """Order groups for display. Groups with an undefined price change sort last.

    Raises:
        ValueError: for an unknown sort key
    """
    if by == "model":
        return sorted(trends, key=lambda t: t.device_model.casefold(), reverse=descending)
    if by == "volume":
        return sorted(trends, key=lambda t: t.total_volume, reverse=descending)
    if by == "variance":
        return sorted(trends, key=lambda t: t.price_volatility, reverse=descending)
    if by == "price_change":
        defined = [t for t in trends if t.price_change_percent is not None]
        undefined = [t for t in trends if t.price_change_percent is None]
        return sorted(defined, key=lambda t: t.price_change_percent, reverse=descending) + undefined
    raise ValueError(f"unknown sort key: {by!r}")
