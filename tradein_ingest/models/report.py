from __future__ import annotations

from dataclasses import dataclass, field

"""Dashboard summary models."""

__all__ = [
    "InventoryMetrics",
    "SalesSummary",
]


@dataclass(frozen=True)
class InventoryMetrics:
    total_devices: int
    total_cost: float  # summed across currencies as-is
    by_status: dict[str, int] = field(default_factory=dict)
    by_platform: dict[str, int] = field(default_factory=dict)
    by_grade: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class SalesSummary:
    """Totals over sold trade-ins whose sale currency matches their cost currency.

    ``margin_percent`` is total profit over total cost (not a mean of
    per-item percentages); None when the sold cost is zero.
    """
    sold_count: int
    revenue: float
    cost_of_sold: float
    profit: float
    margin_percent: float | None
