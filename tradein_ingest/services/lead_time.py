from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from datetime import date, datetime, time
from typing import Any

from ..models.records import TradeIn
from ..models.trend import LeadTimeMetrics

"""Lead-time averages between two lifecycle dates.

Per record the lead time is the whole number of days between the two
timestamps, rounded down. The average over qualifying records is rounded half
up to an integer.
"""

__all__ = [
    "average_lead_time",
    "lead_time_metrics",
]

_SECONDS_PER_DAY = 86400


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def _whole_days(start: date | datetime, end: date | datetime) -> int:
    delta = _as_datetime(end) - _as_datetime(start)
    return math.floor(delta.total_seconds() / _SECONDS_PER_DAY)


def average_lead_time(records: Iterable[Any], from_field: str, to_field: str) -> int:
    """Average whole days from ``from_field`` to ``to_field``.

    Records may be dataclasses or mappings. Records missing either field are
    ignored; 0 when none qualify.

    >>> from datetime import date
    >>> average_lead_time(
    ...     [{"a": date(2024, 1, 1), "b": date(2024, 1, 6)},
    ...      {"a": date(2024, 1, 1), "b": date(2024, 1, 8)}],
    ...     "a", "b")
    6
    """
    days = []
    for record in records:
        start = _field(record, from_field)
        end = _field(record, to_field)
        if start is None or end is None:
            continue
        days.append(_whole_days(start, end))
    if not days:
        return 0
    return math.floor(sum(days) / len(days) + 0.5)


def lead_time_metrics(trade_ins: Iterable[TradeIn]) -> LeadTimeMetrics:
    """Booked → auction, auction → sold and booked → sold averages."""
    items = list(trade_ins)
    return LeadTimeMetrics(
        average_days_booked_to_auction=average_lead_time(items, "date_booked", "auction_date"),
        average_days_auction_to_sold=average_lead_time(items, "auction_date", "sold_date"),
        average_total_lead_time=average_lead_time(items, "date_booked", "sold_date"),
    )
