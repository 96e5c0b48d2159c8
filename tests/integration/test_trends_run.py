from __future__ import annotations

import dataclasses
from datetime import date
from pathlib import Path

import pytest

from tradein_ingest.cli import main as cli_main
from tradein_ingest.models.records import Currency, TradeInStatus
from tradein_ingest.models.upload import FileType
from tradein_ingest.services.lead_time import lead_time_metrics
from tradein_ingest.services.reports import inventory_metrics, sales_summary
from tradein_ingest.services.trends import aggregate_trends, filter_trends, sort_trends
from tradein_ingest.services.upload import process_upload, validate_trade_in_upload

HEADER = ["Date Booked", "Model", "Grade", "Cost"]


@pytest.fixture()
def batches(make_workbook) -> list[Path]:
    return [
        make_workbook("batch-jan.xlsx", [
            HEADER,
            ["2024-01-08", "iPhone 12 64GB", "A", 400],
            ["2024-01-08", "iPhone 12 64GB", "A", 400],
            ["2024-01-09", "Galaxy S21 128GB", "B", 250],
        ]),
        make_workbook("batch-feb.xlsx", [
            HEADER,
            ["2024-02-05", "iPhone 12 64GB", "A", 380],
            ["2024-02-05", "Galaxy S21 128GB", "B", 260],
        ]),
        make_workbook("batch-mar.xlsx", [
            HEADER,
            ["2024-03-04", "iPhone 12 64GB", "A", 360],
        ]),
    ]


def _load(paths: list[Path]):
    trade_ins = []
    for path in paths:
        context = validate_trade_in_upload(path.name, "sup-1", "NZD")
        outcome = process_upload(path, FileType.TRADE_INS, context)
        assert outcome.committable
        trade_ins.extend(outcome.records)
    return trade_ins


def test_trends_across_batches(batches):
    trends = aggregate_trends(_load(batches))

    by_label = {t.model_grade: t for t in trends}
    iphone = by_label["iPhone 12 64GB - A"]
    assert [b.batch_file_name for b in iphone.batches] == ["batch-jan.xlsx", "batch-feb.xlsx", "batch-mar.xlsx"]
    assert iphone.total_volume == 4
    assert iphone.current_price == 360.0
    assert iphone.average_price == pytest.approx(380.0)
    assert iphone.price_change == -40.0
    assert iphone.price_change_percent == pytest.approx(-10.0)
    assert iphone.price_volatility == pytest.approx(16.3299, rel=1e-4)

    galaxy = by_label["Galaxy S21 128GB - B"]
    assert galaxy.price_change_percent == pytest.approx(4.0)

    assert [t.model_grade for t in sort_trends(trends, by="volume")] == [
        "iPhone 12 64GB - A", "Galaxy S21 128GB - B",
    ]
    assert [t.model_grade for t in filter_trends(trends, search="galaxy")] == ["Galaxy S21 128GB - B"]
    assert filter_trends(trends, min_volume=3) == [iphone]


def test_lifecycle_reports(batches):
    trade_ins = _load(batches)
    sold = dataclasses.replace(
        trade_ins[0],
        status=TradeInStatus.SOLD,
        auction_date=date(2024, 1, 18),
        sold_date=date(2024, 1, 25),
        sold_price=480.0,
        sold_currency=Currency.NZD,
    )
    trade_ins = [sold] + trade_ins[1:]

    metrics = lead_time_metrics(trade_ins)
    assert metrics.average_days_booked_to_auction == 10
    assert metrics.average_days_auction_to_sold == 7
    assert metrics.average_total_lead_time == 17

    summary = sales_summary(trade_ins)
    assert summary.sold_count == 1
    assert summary.profit == pytest.approx(80.0)
    assert summary.margin_percent == pytest.approx(20.0)

    inventory = inventory_metrics(trade_ins)
    assert inventory.total_devices == 6
    assert inventory.by_status[TradeInStatus.SOLD.value] == 1


def test_trends_cli_reports_each_group(temp_workdir: Path, batches, monkeypatch, capsys):
    monkeypatch.delenv("TRADEIN_INGEST_CONFIG", raising=False)

    code = cli_main(["trends", *map(str, batches), "--currency", "NZD", "--supplier", "sup-1"])

    out = capsys.readouterr().out
    assert code == 0
    assert "INFO trend iPhone 12 64GB - A platform=Apple volume=4 batches=3" in out
    assert "change=-10.0%" in out
    assert "INFO trend Galaxy S21 128GB - B platform=Android volume=2 batches=2" in out
    assert "SUMMARY command=trends files=3 records=6 errors=0 committable=yes" in out
