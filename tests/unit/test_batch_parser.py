from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from tradein_ingest.config.loader import IngestConfig
from tradein_ingest.config.aliases import TRADE_IN_ALIASES, merge_aliases
from tradein_ingest.models.contexts import BidContext, TradeInContext
from tradein_ingest.models.records import Currency
from tradein_ingest.models.upload import FileType
from tradein_ingest.parsing.batch import parse_rows, parse_workbook
from tradein_ingest.parsing.normalizers import RowValidationError, normalize_trade_in_row

CONTEXT = TradeInContext(supplier_id="sup-1", currency=Currency.NZD)


def _rows():
    return [
        {"Date Booked": 44927, "Model": "iPhone 12", "Grade": "A", "Cost": 100},
        {"Date Booked": 44927, "Model": "iPhone 12", "Grade": None, "Cost": 100},
        {"Date Booked": 44928, "Model": "Pixel 7", "Grade": "B", "Cost": 90},
    ]


def test_missing_grade_rejects_only_that_row():
    result = parse_rows(_rows(), normalize_trade_in_row, CONTEXT)
    assert result.row_count == 2
    assert [t.device_model for t in result.records] == ["iPhone 12", "Pixel 7"]
    assert result.errors == ["Row 3: Missing or invalid required fields (Model, Grade, Cost, Date Booked)"]
    assert not result.ok


@pytest.mark.parametrize("bad_index", [0, 4, 9])
def test_row_number_is_index_plus_two(bad_index):
    rows = [{"x": i} for i in range(10)]

    def normalizer(row, index, context):
        if index == bad_index:
            raise RowValidationError("bad")
        return row["x"]

    result = parse_rows(rows, normalizer)
    assert result.errors == [f"Row {bad_index + 2}: bad"]
    assert len(result.records) == 9


def test_unexpected_exceptions_become_row_errors():
    def normalizer(row, index, context):
        raise KeyError("boom")

    result = parse_rows([{}, {}], normalizer)
    assert result.records == []
    assert len(result.errors) == 2
    assert result.errors[0].startswith("Row 2: ")


def test_empty_input():
    result = parse_rows([], normalize_trade_in_row, CONTEXT)
    assert result.ok
    assert result.row_count == 0


def test_parse_workbook_trade_ins(make_workbook, trade_in_rows):
    path = make_workbook("batch-2023-01.xlsx", trade_in_rows)
    result = parse_workbook(path, FileType.TRADE_INS, CONTEXT)
    assert result.ok, result.errors
    assert [t.date_booked for t in result.records] == [date(2023, 1, 1), date(2023, 1, 15), date(2023, 2, 1)]
    assert result.records[1].cost == 1250.5
    # filename identifies the batch
    assert {t.batch_file_name for t in result.records} == {"batch-2023-01.xlsx"}


def test_parse_workbook_keeps_explicit_batch_name(make_workbook, trade_in_rows):
    path = make_workbook("upload.xlsx", trade_in_rows)
    context = TradeInContext(supplier_id="sup-1", currency=Currency.NZD, batch_file_name="March batch")
    result = parse_workbook(path, FileType.TRADE_INS, context)
    assert {t.batch_file_name for t in result.records} == {"March batch"}


def test_parse_workbook_from_bytes(make_workbook, trade_in_rows):
    path = make_workbook("batch.xlsx", trade_in_rows)
    result = parse_workbook(path.read_bytes(), FileType.TRADE_INS, CONTEXT, file_name="batch.xlsx")
    assert result.row_count == 3
    assert result.records[0].batch_file_name == "batch.xlsx"


def test_parse_workbook_unreadable_file(tmp_path: Path):
    bogus = tmp_path / "not-excel.xlsx"
    bogus.write_text("plain text", encoding="utf-8")
    result = parse_workbook(bogus, FileType.MODEL_LIBRARY)
    assert result.records == []
    assert len(result.errors) == 1
    assert result.errors[0].startswith("File parsing error: ")


def test_parse_workbook_reports_row_errors(make_workbook):
    path = make_workbook("bids.xlsx", [
        ["Model", "Grade", "Bid"],
        ["iPhone 12", "A", 400],
        ["iPhone 12", None, 380],
        ["Pixel 7", "B", 150],
    ])
    context = BidContext(customer_id="c-1", auction_date=date(2024, 3, 1), currency=Currency.AUD)
    result = parse_workbook(path, FileType.CUSTOMER_BIDS, context)
    assert result.row_count == 2
    assert result.errors == ["Row 3: Missing or invalid required fields (Model, Grade, Bid Amount)"]


def test_parse_workbook_library_sort_order(make_workbook):
    path = make_workbook("library.xlsx", [
        ["DeviceID", "Make", "Model-Memory (clean)"],
        [2, "Apple", "iPhone 5 64GB"],
        [1, "Samsung", "Galaxy S21 128GB"],
    ])
    result = parse_workbook(path, FileType.MODEL_LIBRARY)
    assert [(d.model, d.sort_order) for d in result.records] == [("iPhone 5", 0), ("Galaxy S21", 1)]
    assert result.records[0].specifications == {"DeviceID": 2}


def test_parse_workbook_requires_matching_context(make_workbook, trade_in_rows):
    path = make_workbook("batch.xlsx", trade_in_rows)
    with pytest.raises(ValueError):
        parse_workbook(path, FileType.TRADE_INS)
    with pytest.raises(ValueError):
        parse_workbook(path, FileType.CUSTOMER_BIDS, CONTEXT)


def test_parse_workbook_uses_configured_aliases_and_sentinels(make_workbook):
    path = make_workbook("batch.xlsx", [
        ["Booked", "Model", "Grade", "Unit Cost"],
        ["2023-01-15", "iPhone 12", "A", 300],
        ["2023-01-15", "iPhone 12", "N/A", 300],
    ])
    aliases = merge_aliases(TRADE_IN_ALIASES, {"date_booked": ["Booked"], "cost": ["Unit Cost"]})
    config = IngestConfig(
        null_sentinels=frozenset({"N/A"}),
        column_aliases={FileType.TRADE_INS: aliases},
    )
    result = parse_workbook(path, FileType.TRADE_INS, CONTEXT, config)
    assert result.row_count == 1
    assert result.records[0].cost == 300.0
    assert result.errors == ["Row 3: Missing or invalid required fields (Model, Grade, Cost, Date Booked)"]


def test_parse_workbook_keep_na_strings_from_config(make_workbook):
    path = make_workbook("batch.xlsx", [
        ["Date Booked", "Model", "Grade", "Cost"],
        ["2023-01-15", "iPhone 12", "NA", 300],
    ])

    default = parse_workbook(path, FileType.TRADE_INS, CONTEXT)
    assert default.row_count == 0
    assert default.errors == ["Row 2: Missing or invalid required fields (Model, Grade, Cost, Date Booked)"]

    kept = parse_workbook(path, FileType.TRADE_INS, CONTEXT, IngestConfig(keep_na_strings=("NA",)))
    assert kept.errors == []
    assert kept.records[0].grade == "NA"
