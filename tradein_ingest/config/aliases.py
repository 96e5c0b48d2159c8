from __future__ import annotations

from collections.abc import Mapping

from ..models.upload import FileType

"""Header alias table per upload kind.

Maps each logical field to the ordered header names accepted for it. The first
header present in a row with a non-empty value wins. Case variants are listed
explicitly; the resolver does no case folding of its own.
"""

__all__ = [
    "AliasTable",
    "DEVICE_LIBRARY_ALIASES",
    "TRADE_IN_ALIASES",
    "CUSTOMER_BID_ALIASES",
    "DEFAULT_ALIASES",
    "LIBRARY_IGNORED_COLUMNS",
    "merge_aliases",
]

AliasTable = Mapping[str, tuple[str, ...]]

DEVICE_LIBRARY_ALIASES: AliasTable = {
    "manufacturer": ("Manufacturer", "manufacturer", "Make"),
    "model": ("Model-Memory (clean)", "Model", "model"),
    "storage_variant": ("Storage Variant", "storage_variant", "Storage"),
    "platform": ("Platform", "platform"),
}

# Helper columns in the library workbook that are neither fields nor specs
LIBRARY_IGNORED_COLUMNS: frozenset[str] = frozenset({"Model-Memory (formula)"})

TRADE_IN_ALIASES: AliasTable = {
    "date_booked": ("Date Booked", "Date_Booked", "date_booked", "Date", "date"),
    "cost": ("Cost", "cost", "Price", "price", "Cost (NZD)", "cost_nzd"),
    "model": ("Model", "model", "Library_Model_Storage"),
    "storage_variant": ("Storage", "storage", "Storage Variant"),
    "grade": ("Grade", "grade"),
    "platform": ("Platform", "platform"),
    "manufacturer": ("Manufacturer", "Library_Make", "Make"),
    "imei": ("IMEI", "imei"),
}

CUSTOMER_BID_ALIASES: AliasTable = {
    "model": ("Model", "model"),
    "storage_variant": ("Storage", "storage", "Storage Variant"),
    "grade": ("Grade", "grade"),
    "bid_amount": ("Bid", "bid", "Bid Amount", "bid_amount", "Amount"),
    "platform": ("Platform", "platform"),
    "quantity": ("Quantity", "quantity"),
}

DEFAULT_ALIASES: dict[FileType, AliasTable] = {
    FileType.MODEL_LIBRARY: DEVICE_LIBRARY_ALIASES,
    FileType.TRADE_INS: TRADE_IN_ALIASES,
    FileType.CUSTOMER_BIDS: CUSTOMER_BID_ALIASES,
}


def merge_aliases(base: AliasTable, overrides: Mapping[str, list[str]] | None) -> AliasTable:
    """Return ``base`` with the fields named in ``overrides`` replaced.

    Raises:
        KeyError: if an override names a field the table does not define
    """
    if not overrides:
        return base
    merged = dict(base)
    for field_name, headers in overrides.items():
        if field_name not in merged:
            raise KeyError(f"unknown alias field: {field_name}")
        merged[field_name] = tuple(headers)
    return merged
