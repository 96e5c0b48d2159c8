from __future__ import annotations

import logging
import math
import numbers
import re
from collections.abc import Mapping
from typing import Any

import numpy as np

from ..config.aliases import (
    CUSTOMER_BID_ALIASES,
    DEVICE_LIBRARY_ALIASES,
    LIBRARY_IGNORED_COLUMNS,
    TRADE_IN_ALIASES,
    AliasTable,
)
from ..models.contexts import BidContext, TradeInContext
from ..models.records import CustomerBid, DeviceRecord, Platform, TradeIn, TradeInStatus
from .columns import is_blank, recognised_headers, resolve
from .dates import InvalidDateError, to_date
from .platform import classify_library_platform, classify_trade_in_platform
from .storage import split_model_storage

"""Row normalizers: one raw spreadsheet row → one typed record.

Each normalizer has the signature ``(row, index, context, aliases=...)`` so the
batch parser can drive any of them. ``index`` is the 0-based position of the
row in the sheet; ``context`` carries the upload-time values (supplier,
customer, currency, dates) that are stamped onto the record rather than read
from the row.

A row that cannot produce a valid record raises RowValidationError; the batch
parser turns it into a ``"Row {n}: ..."`` entry and moves on.
"""

__all__ = [
    "RowValidationError",
    "LIBRARY_REQUIRED_MESSAGE",
    "TRADE_IN_REQUIRED_MESSAGE",
    "BID_REQUIRED_MESSAGE",
    "to_text",
    "to_number",
    "normalize_device_row",
    "normalize_trade_in_row",
    "normalize_bid_row",
]

logger = logging.getLogger(__name__)

LIBRARY_REQUIRED_MESSAGE = "Missing manufacturer or model"
TRADE_IN_REQUIRED_MESSAGE = "Missing or invalid required fields (Model, Grade, Cost, Date Booked)"
BID_REQUIRED_MESSAGE = "Missing or invalid required fields (Model, Grade, Bid Amount)"

# Leading currency marker such as "$", "NZ$" or "US$"
_CURRENCY_PREFIX = re.compile(r"^[A-Za-z]{0,3}\$")


class RowValidationError(ValueError):
    """Raised when a row lacks a required field or carries an invalid value."""


def to_text(value: Any) -> str | None:
    """Cell value as a trimmed string; integral floats lose their ``.0``."""
    if is_blank(value):
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def to_number(value: Any) -> float | None:
    """Cell value as a finite float, or None when it does not parse.

    Strings may carry a currency prefix and thousands separators (``"$1,250.50"``).
    """
    if is_blank(value) or isinstance(value, (bool, np.bool_)):
        return None
    if isinstance(value, numbers.Real):
        number = float(value)
    elif isinstance(value, str):
        text = _CURRENCY_PREFIX.sub("", value.strip()).replace(",", "").strip()
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _to_quantity(value: Any) -> int:
    number = to_number(value)
    if number is None or not number.is_integer() or number < 1:
        return 1
    return int(number)


def normalize_device_row(
    row: Mapping[str, Any],
    index: int,
    context: None = None,
    aliases: AliasTable = DEVICE_LIBRARY_ALIASES,
) -> DeviceRecord:
    """Build a model-library entry.

    The model label may embed the storage size ("iPhone 5 64GB"); the base model
    is always the label without it. An explicit storage column wins over the
    extracted token. Columns that are not fields are kept as specifications.
    """
    manufacturer = to_text(resolve(row, aliases["manufacturer"]))
    model_label = to_text(resolve(row, aliases["model"]))
    if not manufacturer or not model_label:
        raise RowValidationError(LIBRARY_REQUIRED_MESSAGE)

    base_model, extracted_storage = split_model_storage(model_label)
    if not base_model:
        raise RowValidationError(LIBRARY_REQUIRED_MESSAGE)
    storage = to_text(resolve(row, aliases["storage_variant"])) or extracted_storage

    platform = classify_library_platform(resolve(row, aliases["platform"]), manufacturer, model_label)

    skip = recognised_headers(aliases) | LIBRARY_IGNORED_COLUMNS
    specifications = {
        key: value for key, value in row.items() if key not in skip and not is_blank(value)
    }

    return DeviceRecord(
        manufacturer=manufacturer,
        model=base_model,
        storage_variant=storage,
        platform=platform,
        sort_order=index,
        specifications=specifications,
        full_model_name=model_label,
    )


def normalize_trade_in_row(
    row: Mapping[str, Any],
    index: int,
    context: TradeInContext,
    aliases: AliasTable = TRADE_IN_ALIASES,
) -> TradeIn:
    """Build a pending trade-in.

    Model, grade, a positive cost and a resolvable booked date are required;
    any gap yields one combined error rather than one per field.
    """
    model = to_text(resolve(row, aliases["model"]))
    grade = to_text(resolve(row, aliases["grade"]))
    cost = to_number(resolve(row, aliases["cost"]))
    try:
        date_booked = to_date(resolve(row, aliases["date_booked"]))
    except InvalidDateError as e:
        logger.debug("row index=%d date booked rejected: %s", index, e)
        date_booked = None

    if not model or not grade or cost is None or cost <= 0 or date_booked is None:
        raise RowValidationError(TRADE_IN_REQUIRED_MESSAGE)

    platform = classify_trade_in_platform(
        resolve(row, aliases["platform"]), resolve(row, aliases["manufacturer"]), model,
    )

    storage = to_text(resolve(row, aliases["storage_variant"]))
    if storage is None:
        storage = split_model_storage(model).storage_variant or None

    return TradeIn(
        supplier_id=context.supplier_id,
        device_model=model,
        grade=grade,
        cost=cost,
        currency=context.currency,
        date_booked=date_booked,
        platform=platform,
        storage_variant=storage,
        imei=to_text(resolve(row, aliases["imei"])),
        purchase_date=context.purchase_date,
        batch_file_name=context.batch_file_name,
        status=TradeInStatus.PENDING,
    )


def normalize_bid_row(
    row: Mapping[str, Any],
    index: int,
    context: BidContext,
    aliases: AliasTable = CUSTOMER_BID_ALIASES,
) -> CustomerBid:
    """Build a pending customer bid.

    Quantity falls back to 1 when absent or unparseable. Platform is taken
    from an explicit column only and left unset when it names neither platform.
    """
    model = to_text(resolve(row, aliases["model"]))
    grade = to_text(resolve(row, aliases["grade"]))
    amount = to_number(resolve(row, aliases["bid_amount"]))
    if not model or not grade or amount is None or amount <= 0:
        raise RowValidationError(BID_REQUIRED_MESSAGE)

    explicit_platform = resolve(row, aliases["platform"])
    platform = None if is_blank(explicit_platform) else Platform.lookup(explicit_platform)

    return CustomerBid(
        customer_id=context.customer_id,
        auction_date=context.auction_date,
        device_model=model,
        grade=grade,
        bid_amount=amount,
        currency=context.currency,
        platform=platform,
        storage_variant=to_text(resolve(row, aliases["storage_variant"])),
        quantity=_to_quantity(resolve(row, aliases["quantity"])),
    )
