from __future__ import annotations

import json
from pathlib import Path

from tradein_ingest.logging.error_log import ErrorLogBuffer, ErrorRecord, records_from_errors

KEYS = {"timestamp", "file", "sheet", "row", "error_type", "message"}


def test_error_log_buffer_flush(temp_workdir: Path):
    buf = ErrorLogBuffer()
    buf.append(ErrorRecord.create("batch.xlsx", "<FIRST_SHEET>", 3, "ROW_VALIDATION_ERROR", "Missing grade"))
    buf.append(ErrorRecord.create("batch.xlsx", "<FIRST_SHEET>", -1, "SHEET_READ_ERROR", "no header row"))
    path = buf.flush()

    assert path is not None and path.exists()
    assert path.parent == Path("logs")
    assert path.name.startswith("errors-") and path.suffix == ".log"
    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    for raw in lines:
        assert set(json.loads(raw).keys()) == KEYS
    assert len(buf) == 0


def test_error_log_buffer_multiple_flushes(temp_workdir: Path):
    buf = ErrorLogBuffer()
    buf.append(ErrorRecord.create("f.xlsx", "S", 2, "ROW_VALIDATION_ERROR", "bad"))
    path = buf.flush()
    size1 = path.stat().st_size

    buf.append(ErrorRecord.create("f.xlsx", "S", 4, "ROW_VALIDATION_ERROR", "worse"))
    path2 = buf.flush()

    assert path == path2
    assert path2.stat().st_size > size1


def test_flush_empty_buffer_writes_nothing(tmp_path: Path):
    log_dir = tmp_path / "logs"
    buf = ErrorLogBuffer(log_dir)

    assert buf.flush() is None
    assert not log_dir.exists()


def test_extend_and_custom_log_dir(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path / "custom")
    buf.extend([
        ErrorRecord.create("a.xlsx", "S", 2, "ROW_VALIDATION_ERROR", "one"),
        ErrorRecord.create("a.xlsx", "S", 3, "ROW_VALIDATION_ERROR", "two"),
    ])
    assert len(buf) == 2

    path = buf.flush()
    assert path.parent == tmp_path / "custom"
    messages = [json.loads(line)["message"] for line in path.read_text(encoding="utf-8").splitlines()]
    assert messages == ["one", "two"]


def test_records_from_errors_splits_row_and_sheet_errors():
    records = records_from_errors("batch.xlsx", "<FIRST_SHEET>", [
        "Row 4: Missing or invalid required fields (Model, Grade, Cost, Date Booked)",
        "File parsing error: File is not a zip file",
    ])

    row_rec, sheet_rec = records
    assert row_rec.row == 4
    assert row_rec.error_type == "ROW_VALIDATION_ERROR"
    assert row_rec.message == "Missing or invalid required fields (Model, Grade, Cost, Date Booked)"
    assert sheet_rec.row == -1
    assert sheet_rec.error_type == "SHEET_READ_ERROR"
    assert sheet_rec.message == "File parsing error: File is not a zip file"
    assert {r.file for r in records} == {"batch.xlsx"}
    assert {r.sheet for r in records} == {"<FIRST_SHEET>"}


def test_records_from_errors_empty():
    assert records_from_errors("f.xlsx", "S", []) == []
