from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, Union

import pandas as pd
import pandas._libs.parsers as parsers

"""Spreadsheet reader.

Turns an uploaded workbook into the raw rows the normalizers consume:
- Row 1 is the header row; data starts at row 2
- Header strings are used exactly as written (no trimming or case folding),
  since the column alias table matches them literally
- Rows where every cell is empty are skipped
- Empty cells (and configured null sentinels) become ``None``
"""

__all__ = [
    "SheetReadError",
    "SheetHeaderError",
    "SheetData",
    "WorkbookSource",
    "read_excel_file",
    "normalize_sheet",
]

WorkbookSource = Union[Path, str, bytes, IO[bytes]]


class SheetReadError(Exception):
    """Raised when the input cannot be opened as a spreadsheet at all."""


class SheetHeaderError(SheetReadError):
    """Raised when the sheet has no header row."""


@dataclass
class SheetData:
    sheet_name: str
    columns: list[str]
    rows: list[dict[str, Any]]  # header -> cell value, one dict per data row


def read_excel_file(
    source: WorkbookSource,
    sheet: str | None = None,
    keep_na_strings: list[str] | None = None,
) -> tuple[str, pd.DataFrame]:
    """Read one sheet of a workbook into a raw DataFrame (no header applied).

    Parameters
    ----------
    source: workbook path, raw bytes or a binary file object
    sheet: sheet name (None -> first sheet)
    keep_na_strings: strings to exclude from pandas' default NaN conversion (e.g. ['NA'])

    Returns
    -------
    (sheet name, raw DataFrame)

    Raises
    ------
    SheetReadError: the source is not a readable workbook or the sheet is missing
    """
    if keep_na_strings:
        custom_na = parsers.STR_NA_VALUES - set(keep_na_strings)
        na_values: list[str] | None = list(custom_na)
        keep_default_na = False
    else:
        na_values = None
        keep_default_na = True

    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)

    try:
        xls = pd.ExcelFile(source)
    except Exception as e:
        raise SheetReadError(str(e) or type(e).__name__) from e

    names = [str(n) for n in xls.sheet_names]
    if not names:
        raise SheetReadError("workbook contains no sheets")
    name = names[0] if sheet is None else sheet
    if name not in names:
        raise SheetReadError(f"sheet '{name}' not found (available: {names})")

    try:
        df = xls.parse(name, header=None, keep_default_na=keep_default_na, na_values=na_values)
    except Exception as e:
        raise SheetReadError(str(e) or type(e).__name__) from e
    return name, df


def _header_names(header_cells: list[Any]) -> list[str | None]:
    names: list[str | None] = []
    seen: dict[str, int] = {}
    for cell in header_cells:
        if pd.isna(cell) or (isinstance(cell, str) and cell == ""):
            names.append(None)  # unnamed column, dropped
            continue
        name = str(cell)
        if name in seen:
            seen[name] += 1
            name = f"{name}_{seen[name]}"
        else:
            seen[name] = 0
        names.append(name)
    return names


def normalize_sheet(
    df: pd.DataFrame,
    sheet_name: str,
    null_sentinels: frozenset[str] | set[str] | None = None,
) -> SheetData:
    """Apply the first row as header and return the data rows as dicts.

    Duplicate headers get a numeric suffix (``Grade``, ``Grade_1``) so no
    column silently overwrites another.

    Raises
    ------
    SheetHeaderError: the sheet is empty
    """
    if df.shape[0] < 1:
        raise SheetHeaderError(f"sheet '{sheet_name}' has no header row")

    names = _header_names(df.iloc[0].tolist())
    columns = [n for n in names if n is not None]
    if not columns:
        raise SheetHeaderError(f"sheet '{sheet_name}' header row is empty")

    rows: list[dict[str, Any]] = []
    for _, raw in df.iloc[1:].iterrows():
        if raw.isna().all():
            continue
        row_dict: dict[str, Any] = {}
        for name, val in zip(names, raw.tolist(), strict=False):
            if name is None:
                continue
            if pd.isna(val):
                row_dict[name] = None
            elif isinstance(val, str) and null_sentinels and val.strip().upper() in null_sentinels:
                row_dict[name] = None
            else:
                row_dict[name] = val
        rows.append(row_dict)

    return SheetData(sheet_name=sheet_name, columns=columns, rows=rows)
