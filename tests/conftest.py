# Shared pytest fixtures
from __future__ import annotations

import logging
import tempfile
from collections.abc import Callable
from datetime import date
from pathlib import Path

import pandas as pd
import pytest

from tradein_ingest.logging.init import LOGGER_NAME, reset_logging
from tradein_ingest.models.records import Currency, Platform, TradeIn, TradeInStatus


@pytest.fixture(autouse=True)
def _clean_logging():
    # setup_logging() binds its handler to the sys.stdout of the test that first called it
    reset_logging()
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """commit_policy: all_or_nothing
null_sentinels: ["N/A"]
log_dir: logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "ingest.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def _make_excel(path: Path, rows: list[list[object]], sheet: str = "Sheet1") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
    return path


@pytest.fixture()
def make_workbook(tmp_path: Path) -> Callable[..., Path]:
    """Write ``rows`` (header row first) to ``tmp_path/name`` and return the path."""
    def _make(name: str, rows: list[list[object]], sheet: str = "Sheet1", directory: Path | None = None) -> Path:
        return _make_excel((directory or tmp_path) / name, rows, sheet)
    return _make


@pytest.fixture()
def trade_in_rows() -> list[list[object]]:
    return [
        ["Date Booked", "Model", "Grade", "Cost", "IMEI"],
        [44927, "iPhone 12 64GB", "A", 350, "356938035643809"],
        ["2023-01-15", "Galaxy S21 128GB", "B", "$1,250.50", None],
        [date(2023, 2, 1), "Pixel 7", "C", 210.0, None],
    ]


def make_trade_in(**overrides) -> TradeIn:
    """TradeIn with sensible defaults; override any field by keyword."""
    fields = dict(
        supplier_id="sup-1",
        device_model="iPhone 12 64GB",
        grade="A",
        cost=100.0,
        currency=Currency.NZD,
        date_booked=date(2024, 1, 1),
        platform=Platform.APPLE,
        batch_file_name="batch-a.xlsx",
        status=TradeInStatus.PENDING,
    )
    fields.update(overrides)
    return TradeIn(**fields)


@pytest.fixture()
def trade_in_factory() -> Callable[..., TradeIn]:
    return make_trade_in
