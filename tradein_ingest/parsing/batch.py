from __future__ import annotations

import dataclasses
import functools
import logging
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import Any, TypeVar

from ..config.loader import IngestConfig
from ..excel.reader import SheetReadError, WorkbookSource, normalize_sheet, read_excel_file
from ..models.contexts import BidContext, TradeInContext
from ..models.parse_result import ParseResult
from ..models.upload import FileType
from .normalizers import normalize_bid_row, normalize_device_row, normalize_trade_in_row

"""Batch parser: drives a row normalizer over every row of a sheet.

A bad row never aborts the batch. Each failure is recorded as
``"Row {n}: {message}"`` where ``n`` is the spreadsheet row number (header on
row 1, so data row ``i`` is row ``i + 2``). Only a sheet that cannot be read at
all produces a single file-level error and no records.
"""

__all__ = [
    "FILE_ERROR_PREFIX",
    "RowNormalizer",
    "parse_rows",
    "parse_workbook",
    "row_error",
]

T = TypeVar("T")

RowNormalizer = Callable[[Mapping[str, Any], int, Any], T]

FILE_ERROR_PREFIX = "File parsing error: "

logger = logging.getLogger(__name__)

_NORMALIZERS: dict[FileType, Callable[..., Any]] = {
    FileType.MODEL_LIBRARY: normalize_device_row,
    FileType.TRADE_INS: normalize_trade_in_row,
    FileType.CUSTOMER_BIDS: normalize_bid_row,
}


def row_error(index: int, message: str) -> str:
    """Format the error for the data row at 0-based ``index``."""
    return f"Row {index + 2}: {message}"


def parse_rows(
    rows: Iterable[Mapping[str, Any]],
    normalizer: RowNormalizer[T],
    context: Any = None,
) -> ParseResult[T]:
    """Normalize every row, collecting records and per-row error strings."""
    records: list[T] = []
    errors: list[str] = []
    for index, row in enumerate(rows):
        try:
            records.append(normalizer(row, index, context))
        except Exception as e:
            logger.debug("rejected row %d: %s values=%r", index + 2, e, dict(row))
            errors.append(row_error(index, str(e)))
    logger.info("parsed rows=%d records=%d errors=%d", len(records) + len(errors), len(records), len(errors))
    return ParseResult(records=records, errors=errors)


def _source_name(source: WorkbookSource) -> str | None:
    if isinstance(source, (str, Path)):
        return Path(source).name
    name = getattr(source, "name", None)  # open file objects
    return Path(name).name if isinstance(name, str) else None


def parse_workbook(
    source: WorkbookSource,
    kind: FileType,
    context: TradeInContext | BidContext | None = None,
    config: IngestConfig | None = None,
    file_name: str | None = None,
) -> ParseResult[Any]:
    """Read one sheet of an uploaded workbook and normalize it as ``kind``.

    Args:
        source: workbook path, raw bytes or a binary file object
        kind: which normalizer to apply
        context: TradeInContext for trade-ins, BidContext for bids, None for the library
        config: reader and alias settings (defaults when None)
        file_name: name recorded as the trade-in batch; taken from ``source`` when omitted

    Raises:
        ValueError: if ``context`` does not match ``kind``
    """
    config = config or IngestConfig()
    if kind is FileType.TRADE_INS:
        if not isinstance(context, TradeInContext):
            raise ValueError("trade-in uploads require a TradeInContext")
        name = file_name or _source_name(source)
        if context.batch_file_name is None and name:
            context = dataclasses.replace(context, batch_file_name=name)
    elif kind is FileType.CUSTOMER_BIDS and not isinstance(context, BidContext):
        raise ValueError("customer bid uploads require a BidContext")

    try:
        sheet_name, df = read_excel_file(
            source, sheet=config.sheet, keep_na_strings=list(config.keep_na_strings) or None,
        )
        sheet = normalize_sheet(df, sheet_name, null_sentinels=config.null_sentinels)
    except SheetReadError as e:
        logger.warning("unreadable workbook kind=%s: %s", kind.value, e)
        return ParseResult(records=[], errors=[f"{FILE_ERROR_PREFIX}{e}"])

    logger.debug("sheet=%s columns=%s rows=%d", sheet.sheet_name, sheet.columns, len(sheet.rows))
    normalizer = functools.partial(_NORMALIZERS[kind], aliases=config.aliases_for(kind))
    return parse_rows(sheet.rows, normalizer, context)
