from __future__ import annotations

import re
from typing import NamedTuple

"""Split a combined "model + storage" label, e.g. ``"iPhone 5 64GB"``."""

__all__ = [
    "STORAGE_PATTERN",
    "ModelStorage",
    "split_model_storage",
]

STORAGE_PATTERN = re.compile(r"\d+(?:\.\d+)?(?:GB|TB|MB)", re.IGNORECASE)


class ModelStorage(NamedTuple):
    base_model: str
    storage_variant: str  # "" when the label has no capacity token


def split_model_storage(combined: str) -> ModelStorage:
    """Extract the first capacity token (``64GB``, ``1TB``, ``0.5tb``) from a model label.

    The token keeps its original casing. The base model is what remains once the
    token and the whitespace around it are removed; the text on either side is
    joined as is (``"iPhone 64GB Pro"`` gives ``"iPhonePro"``).

    >>> split_model_storage("iPhone 5 64GB")
    ModelStorage(base_model='iPhone 5', storage_variant='64GB')
    >>> split_model_storage("Galaxy S21")
    ModelStorage(base_model='Galaxy S21', storage_variant='')
    """
    text = str(combined)
    match = STORAGE_PATTERN.search(text)
    if match is None:
        return ModelStorage(text.strip(), "")
    base = text[: match.start()].rstrip() + text[match.end():].lstrip()
    return ModelStorage(base.strip(), match.group(0))
