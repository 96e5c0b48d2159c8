from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from datetime import date

from ..models.records import CustomerBid, Platform, TradeIn, TradeInStatus
from ..models.report import InventoryMetrics, SalesSummary

"""Dashboard and list-screen reporting over record snapshots."""

__all__ = [
    "inventory_metrics",
    "sales_summary",
    "filter_trade_ins",
    "group_bids_by_auction_date",
]


def inventory_metrics(trade_ins: Iterable[TradeIn]) -> InventoryMetrics:
    items = list(trade_ins)
    return InventoryMetrics(
        total_devices=len(items),
        total_cost=sum(t.cost for t in items),
        by_status=dict(Counter(t.status.value for t in items)),
        by_platform=dict(Counter(t.platform.value for t in items)),
        by_grade=dict(Counter(t.grade for t in items)),
    )


def sales_summary(trade_ins: Iterable[TradeIn]) -> SalesSummary:
    """Revenue and margin over sold, same-currency trade-ins."""
    sold = [
        t for t in trade_ins
        if t.status is TradeInStatus.SOLD and t.sold_price is not None and t.sold_currency == t.currency
    ]
    revenue = sum(t.sold_price for t in sold)
    cost = sum(t.cost for t in sold)
    profit = revenue - cost
    return SalesSummary(
        sold_count=len(sold),
        revenue=revenue,
        cost_of_sold=cost,
        profit=profit,
        margin_percent=profit / cost * 100 if cost else None,
    )


def filter_trade_ins(
    trade_ins: Iterable[TradeIn],
    *,
    status: TradeInStatus | None = None,
    platform: Platform | None = None,
    supplier_id: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
) -> list[TradeIn]:
    """Trade-ins matching every given criterion. Date bounds are inclusive."""
    return [
        t for t in trade_ins
        if (status is None or t.status is status)
        and (platform is None or t.platform is platform)
        and (supplier_id is None or t.supplier_id == supplier_id)
        and (date_from is None or t.date_booked >= date_from)
        and (date_to is None or t.date_booked <= date_to)
    ]


def group_bids_by_auction_date(bids: Iterable[CustomerBid]) -> dict[date, list[CustomerBid]]:
    """Bids keyed by auction date, latest auction first, bid order kept within a date."""
    grouped: dict[date, list[CustomerBid]] = {}
    for bid in bids:
        grouped.setdefault(bid.auction_date, []).append(bid)
    return dict(sorted(grouped.items(), key=lambda kv: kv[0], reverse=True))
