from __future__ import annotations

import pytest

from tradein_ingest.models.records import Platform
from tradein_ingest.parsing.platform import classify_library_platform, classify_trade_in_platform


def test_manufacturer_apple():
    assert classify_trade_in_platform(manufacturer="Apple Inc") is Platform.APPLE


def test_manufacturer_other_is_android():
    assert classify_trade_in_platform(manufacturer="Samsung") is Platform.ANDROID


def test_model_keyword_without_manufacturer():
    assert classify_trade_in_platform(model="iPhone 12") is Platform.APPLE


def test_default_is_android():
    assert classify_trade_in_platform(model="Pixel 7") is Platform.ANDROID
    assert classify_trade_in_platform() is Platform.ANDROID


def test_manufacturer_takes_precedence_over_model():
    assert classify_trade_in_platform(manufacturer="Samsung", model="iPhone 12") is Platform.ANDROID


@pytest.mark.parametrize("explicit", ["Apple", "apple", " APPLE "])
def test_explicit_value_wins(explicit):
    assert classify_trade_in_platform(explicit, "Samsung", "Galaxy S21") is Platform.APPLE


@pytest.mark.parametrize("explicit, manufacturer, model, expected", [
    ("iOS", None, "iPhone 12", Platform.APPLE),
    ("Windows", "Samsung", "Galaxy S21", Platform.ANDROID),
    ("Symbian", "Apple Inc", None, Platform.APPLE),
    ("n/a", None, None, Platform.ANDROID),
])
def test_unrecognised_explicit_value_falls_through(explicit, manufacturer, model, expected):
    assert classify_trade_in_platform(explicit, manufacturer, model) is expected


def test_unrecognised_explicit_value_falls_through_for_library():
    assert classify_library_platform("iPadOS", None, "iPad Air") is Platform.APPLE


def test_blank_explicit_value_falls_through():
    assert classify_trade_in_platform("  ", None, "iPhone 12") is Platform.APPLE


def test_ipad_only_recognised_for_library():
    assert classify_library_platform(model="iPad Air") is Platform.APPLE
    assert classify_trade_in_platform(model="iPad Air") is Platform.ANDROID


def test_substring_heuristic_on_manufacturer():
    assert classify_trade_in_platform(manufacturer="Pineapple Corp") is Platform.APPLE
