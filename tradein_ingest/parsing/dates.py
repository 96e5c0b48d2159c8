from __future__ import annotations

import math
import numbers
from datetime import date, datetime, timedelta
from typing import Any

import numpy as np
import pandas as pd

"""Cell value → calendar date.

Spreadsheet serial dates follow the 1900 date system, including its phantom
leap day: serial 60 is 1900-02-29, a date that does not exist. Serials below 60
count from 1899-12-31, serials above 60 from 1899-12-30, and 60 itself rolls
forward to 1900-03-01. This keeps round-trips identical to what spreadsheet
applications display for the same cell.
"""

__all__ = [
    "InvalidDateError",
    "serial_to_date",
    "to_date",
]

_PRE_LEAP_EPOCH = date(1899, 12, 31)
_EPOCH = date(1899, 12, 30)
_PHANTOM_LEAP_SERIAL = 60

# Words pandas resolves against the clock; a cell holding one is not a date
_RELATIVE_DATE_WORDS = frozenset({"today", "now", "yesterday", "tomorrow"})


class InvalidDateError(ValueError):
    """Raised when a cell value cannot be read as a calendar date."""


def serial_to_date(serial: float) -> date:
    """Convert a spreadsheet serial day number to a date. Time of day is dropped."""
    if not math.isfinite(serial) or serial < 0:
        raise InvalidDateError(f"Invalid date value: {serial}")
    days = math.floor(serial)
    try:
        if days < _PHANTOM_LEAP_SERIAL:
            return _PRE_LEAP_EPOCH + timedelta(days=days)
        if days == _PHANTOM_LEAP_SERIAL:
            return date(1900, 3, 1)
        return _EPOCH + timedelta(days=days)
    except OverflowError as e:
        raise InvalidDateError(f"Invalid date value: {serial}") from e


def _parse_date_string(text: str) -> date:
    if text.strip().lower() in _RELATIVE_DATE_WORDS:
        raise InvalidDateError(f"Invalid date value: {text}")
    parsed = pd.to_datetime(text.strip(), errors="coerce")
    if pd.isna(parsed):
        raise InvalidDateError(f"Invalid date value: {text}")
    return parsed.date()


def to_date(value: Any) -> date:
    """Normalize a date-like cell value.

    Accepts native dates/datetimes (time of day discarded), spreadsheet serial
    numbers and strings a general date parser understands.

    Raises:
        InvalidDateError: for anything else, including None and empty strings
    """
    if value is None or value is pd.NaT:
        raise InvalidDateError("Invalid date value: None")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, np.datetime64):
        if np.isnat(value):
            raise InvalidDateError(f"Invalid date value: {value}")
        return pd.Timestamp(value).date()
    if isinstance(value, numbers.Real) and not isinstance(value, (bool, np.bool_)):
        return serial_to_date(float(value))
    if isinstance(value, str):
        return _parse_date_string(value)
    raise InvalidDateError(f"Invalid date value: {value!r}")
