import re
from datetime import datetime, timezone

import pytest

from lp_oracle.report.generator import (
    PriceResult,
    SnapshotReport,
    generate_fallback_report,
    generate_report,
    utc_timestamp,
)


def test_price_result_from_usd_carries_both_representations():
    result = PriceResult.from_usd(1200.0)

    assert result.price_in_usd_float == 1200.0
    assert result.price_in_fixed_point_18 == "1200000000000000000000"
    assert result.error is None
    assert result.ok


def test_price_result_from_error():
    result = PriceResult.from_error("boom")

    assert result.to_dict() == {
        "priceInUsdFloat": None,
        "priceInFixedPoint18": None,
        "error": "boom",
    }
    assert not result.ok


def test_price_result_rejects_value_and_error():
    with pytest.raises(ValueError, match="both a value and an error"):
        PriceResult(price_in_usd_float=1.0, error="boom")


def test_price_result_from_usd_rejects_negative():
    with pytest.raises(ValueError, match="negative"):
        PriceResult.from_usd(-5.0)


def test_empty_result_is_not_ok():
    assert not PriceResult().ok


def test_utc_timestamp_format():
    now = datetime(2026, 10, 18, 9, 30, 15, 123456, tzinfo=timezone.utc)
    assert utc_timestamp(now) == "2026-10-18T09:30:15.123Z"
    assert re.fullmatch(r"\d{4}-\d\d-\d\dT\d\d:\d\d:\d\d\.\d{3}Z", utc_timestamp())


def test_generate_report_orders_symbols_and_fills_gaps():
    prices = {"AAA": PriceResult.from_usd(2.0), "REF": PriceResult.from_usd(600.0)}

    report = generate_report(prices, ["REF", "AAA", "BBB"], updated_at="t")

    assert list(report.prices) == ["REF", "AAA", "BBB"]
    assert report.prices["BBB"].error == "price not computed"
    assert report.has_errors


def test_report_is_immutable():
    report = generate_report({"REF": PriceResult.from_usd(1.0)}, ["REF"], updated_at="t")

    with pytest.raises(TypeError):
        report.prices["REF"] = PriceResult.from_error("x")  # type: ignore[index]
    with pytest.raises(AttributeError):
        report.updated_at = "later"  # type: ignore[misc]


def test_report_to_dict_layout():
    report = SnapshotReport(
        updated_at="2026-10-18T00:00:00.000Z",
        prices={"REF": PriceResult.from_usd(600.0), "AAA": PriceResult.from_error("x")},
    )

    assert report.to_dict() == {
        "updatedAt": "2026-10-18T00:00:00.000Z",
        "prices": {
            "REF": {
                "priceInUsdFloat": 600.0,
                "priceInFixedPoint18": "600000000000000000000",
                "error": None,
            },
            "AAA": {"priceInUsdFloat": None, "priceInFixedPoint18": None, "error": "x"},
        },
    }


def test_fallback_report_marks_every_symbol():
    report = generate_fallback_report("disk full", ["REF", "AAA"])

    assert {s: r.error for s, r in report.prices.items()} == {
        "REF": "disk full",
        "AAA": "disk full",
    }
