from __future__ import annotations

import time
from datetime import date, timedelta

from tradein_ingest.models.contexts import TradeInContext
from tradein_ingest.models.records import Currency
from tradein_ingest.parsing.batch import parse_rows
from tradein_ingest.parsing.normalizers import normalize_trade_in_row
from tradein_ingest.services.trends import aggregate_trends

"""Throughput smoke test: normalizing and aggregating a large batch stays fast."""

ROWS = 20_000
MODELS = ["iPhone 12 64GB", "iPhone 13 Pro 256GB", "Galaxy S21 128GB", "Pixel 7"]


def _rows() -> list[dict[str, object]]:
    start = date(2024, 1, 1)
    return [
        {
            "Date Booked": start + timedelta(days=i % 60),
            "Model": MODELS[i % len(MODELS)],
            "Grade": "ABCD"[(i // 4) % 4],
            "Cost": f"${100 + i % 300:,.2f}",
        }
        for i in range(ROWS)
    ]


def test_parse_and_aggregate_throughput():
    rows = _rows()
    context = TradeInContext(supplier_id="sup-1", currency=Currency.NZD, batch_file_name="big.xlsx")

    start = time.perf_counter()
    result = parse_rows(rows, normalize_trade_in_row, context)
    trends = aggregate_trends(result.records)
    elapsed = time.perf_counter() - start

    assert result.errors == []
    assert result.row_count == ROWS
    assert len(trends) == len(MODELS) * 4
    throughput = ROWS / elapsed
    assert elapsed < 10.0, f"parse too slow: {elapsed:.3f}s ({throughput:.0f} rows/s)"
