from __future__ import annotations

import pytest

from usdcad import utils
from usdcad.api.prices import PriceObservation


def test_statistics_follow_arrival_order(sample_prices) -> None:
    assert utils.current_rate(sample_prices) == 1.35
    assert utils.average_rate(sample_prices) == pytest.approx(1.355)
    assert utils.last_updated(sample_prices) == "2024-01-08T10:00:00Z"


def test_statistics_use_first_arrival_not_latest_timestamp(reversed_prices) -> None:
    assert utils.current_rate(reversed_prices) == 1.36
    assert utils.last_updated(reversed_prices) == "2024-01-09T10:00:00Z"


def test_statistics_on_empty_sequence() -> None:
    assert utils.current_rate([]) == 0
    assert utils.average_rate([]) == 0
    assert utils.last_updated([]) == ""


def test_average_is_arithmetic_mean() -> None:
    prices = [
        PriceObservation(i, p, f"2024-01-0{i}T00:00:00Z")
        for i, p in enumerate([1.31, 1.37, 1.34, 1.40], start=1)
    ]
    assert utils.average_rate(prices) == sum(p.price for p in prices) / len(prices)


def test_chart_series_is_sorted_by_time(reversed_prices) -> None:
    series = utils.chart_series(reversed_prices, label_format="%Y-%m-%d")

    assert series.labels == ["2024-01-08", "2024-01-09"]
    assert series.data == [1.35, 1.36]


def test_chart_series_default_labels_have_no_time_part(sample_prices) -> None:
    series = utils.chart_series(sample_prices)

    assert len(series.labels) == 2
    assert all("10:00" not in label for label in series.labels)


def test_chart_series_keeps_arrival_order_for_equal_timestamps() -> None:
    ts = "2024-01-08T10:00:00Z"
    prices = [
        PriceObservation(3, 1.33, ts),
        PriceObservation(1, 1.31, "2024-01-07T10:00:00Z"),
        PriceObservation(2, 1.32, ts),
    ]

    series = utils.chart_series(prices)

    assert series.data == [1.31, 1.33, 1.32]


def test_chart_series_handles_offsets_and_empty_input() -> None:
    prices = [
        PriceObservation(1, 1.30, "2024-01-08T23:30:00-05:00"),  # 2024-01-09 04:30 UTC
        PriceObservation(2, 1.31, "2024-01-09T01:00:00Z"),
    ]
    assert utils.chart_series(prices).data == [1.31, 1.30]

    empty = utils.chart_series([])
    assert empty.labels == [] and empty.data == []


def test_to_timeseries_does_not_mutate_input(reversed_prices) -> None:
    before = list(reversed_prices)

    df = utils.to_timeseries(reversed_prices)

    assert reversed_prices == before
    assert list(df["id"]) == [1, 2]
    assert list(df["timestamp"]) == ["2024-01-08T10:00:00Z", "2024-01-09T10:00:00Z"]


def test_formatting_helpers() -> None:
    assert utils.format_rate(1.355) == "1.3550 CAD"
    assert utils.format_timestamp("") == ""
    assert utils.format_timestamp("2024-01-08T10:00:00Z").startswith("Jan 8, 2024, 10:00:00")
