from __future__ import annotations
from typing import List, NamedTuple, Sequence
import pandas as pd

from usdcad.api.prices import PriceObservation

# Statistics read the raw sequence in arrival order (first element = first received),
# the chart reads a chronologically sorted copy. Both views are intentional.


class ChartSeries(NamedTuple):
    labels: List[str]
    data: List[float]


def current_rate(prices: Sequence[PriceObservation]) -> float:
    if not prices:
        return 0
    return prices[0].price


def average_rate(prices: Sequence[PriceObservation]) -> float:
    if not prices:
        return 0
    return sum(p.price for p in prices) / len(prices)


def last_updated(prices: Sequence[PriceObservation]) -> str:
    if not prices:
        return ""
    return prices[0].timestamp


def to_timeseries(prices: Sequence[PriceObservation]) -> pd.DataFrame:
    """
    Observations → DataFrame(id, price, timestamp, time), oldest first.
    Stable sort: equal timestamps stay in arrival order.
    """
    df = pd.DataFrame(
        [{"id": p.id, "price": p.price, "timestamp": p.timestamp} for p in prices],
        columns=["id", "price", "timestamp"],
    )
    df["time"] = pd.to_datetime(df["timestamp"], utc=True, format="ISO8601")
    return df.sort_values("time", kind="stable").reset_index(drop=True)


def chart_series(prices: Sequence[PriceObservation], label_format: str = "%x") -> ChartSeries:
    df = to_timeseries(prices)
    labels = [t.strftime(label_format) for t in df["time"]]
    return ChartSeries(labels=labels, data=[float(v) for v in df["price"]])


def format_rate(value: float) -> str:
    return f"{value:.4f} CAD"


def format_timestamp(ts: str) -> str:
    """Medium date-time, e.g. 'Jan 8, 2024, 10:00:00 AM'. Empty in, empty out."""
    if not ts:
        return ""
    t = pd.Timestamp(ts)
    return f"{t:%b} {t.day}, {t.year}, {t.hour % 12 or 12}:{t:%M:%S %p}"
