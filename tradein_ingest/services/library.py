from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping, Sequence

from ..models.records import DeviceRecord
from ..parsing.normalizers import to_number

"""Model library maintenance: display order of device records."""

__all__ = [
    "DEVICE_ID_KEYS",
    "reassign_sort_order",
    "apply_reorder",
]

# Keys in DeviceRecord.specifications holding the catalogue device number, in lookup order
DEVICE_ID_KEYS = ("DeviceID", "deviceId")


def _device_number(device: DeviceRecord) -> float:
    for key in DEVICE_ID_KEYS:
        number = to_number(device.specifications.get(key))
        if number is not None:
            return number
    return 0.0


def reassign_sort_order(devices: Iterable[DeviceRecord]) -> list[DeviceRecord]:
    """Renumber ``sort_order`` 0..n-1 by ascending device number.

    Devices without a numeric device id count as 0; ties keep input order.
    """
    ordered = sorted(devices, key=_device_number)
    return [dataclasses.replace(d, sort_order=rank) for rank, d in enumerate(ordered)]


def apply_reorder(
    devices: Sequence[DeviceRecord],
    updates: Mapping[str, int] | Iterable[Mapping[str, object]],
) -> list[DeviceRecord]:
    """Apply new sort positions, keyed by device id.

    ``updates`` is either ``{id: sort_order}`` or a list of
    ``{"id": ..., "sort_order": ...}`` items as sent by the reorder screen.
    Devices not named keep their position. The result is in input order.

    Raises:
        ValueError: if the update list is empty or names an unknown id
    """
    if isinstance(updates, Mapping):
        positions = {str(k): int(v) for k, v in updates.items()}
    else:
        positions = {str(u["id"]): int(u["sort_order"]) for u in updates}  # type: ignore[call-overload]
    if not positions:
        raise ValueError("no reorder updates given")

    known = {d.id for d in devices if d.id is not None}
    unknown = sorted(set(positions) - known)
    if unknown:
        raise ValueError(f"unknown device ids: {unknown}")

    return [
        dataclasses.replace(d, sort_order=positions[d.id]) if d.id in positions else d
        for d in devices
    ]
