from __future__ import annotations

import logging
from typing import Any

from ..models.records import Platform
from .columns import is_blank

"""Platform inference for rows without a usable platform column.

Two chains exist and are intentionally kept apart: trade-in rows only look for
"iphone" in the model label, while model-library rows also accept "ipad".

Precedence, first applicable wins:
1. explicit platform value naming Android or Apple; any other value is
   ignored and the chain continues
2. manufacturer: contains "apple" → Apple, anything else → Android
3. model label keywords → Apple
4. Android

This is a substring heuristic: a manufacturer such as "Pineapple Corp" is
classified as Apple.
"""

__all__ = [
    "TRADE_IN_APPLE_KEYWORDS",
    "LIBRARY_APPLE_KEYWORDS",
    "classify_platform",
    "classify_trade_in_platform",
    "classify_library_platform",
]

logger = logging.getLogger(__name__)

TRADE_IN_APPLE_KEYWORDS: tuple[str, ...] = ("iphone",)
LIBRARY_APPLE_KEYWORDS: tuple[str, ...] = ("iphone", "ipad")


def classify_platform(
    explicit: Any,
    manufacturer: Any,
    model: Any,
    apple_keywords: tuple[str, ...],
) -> Platform:
    """Run the precedence chain with the given model keywords."""
    if not is_blank(explicit):
        platform = Platform.lookup(explicit)
        if platform is not None:
            return platform
        logger.debug("unrecognised platform %r, inferring from manufacturer/model", explicit)
    if not is_blank(manufacturer):
        return Platform.APPLE if "apple" in str(manufacturer).lower() else Platform.ANDROID
    if not is_blank(model):
        label = str(model).lower()
        if any(k in label for k in apple_keywords):
            return Platform.APPLE
    return Platform.ANDROID


def classify_trade_in_platform(explicit: Any = None, manufacturer: Any = None, model: Any = None) -> Platform:
    return classify_platform(explicit, manufacturer, model, TRADE_IN_APPLE_KEYWORDS)


def classify_library_platform(explicit: Any = None, manufacturer: Any = None, model: Any = None) -> Platform:
    return classify_platform(explicit, manufacturer, model, LIBRARY_APPLE_KEYWORDS)
