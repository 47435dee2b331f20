from __future__ import annotations

import sys
from concurrent.futures import Executor, Future
from pathlib import Path
from typing import Any, List, Tuple

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from usdcad.api.prices import PriceObservation  # noqa: E402


@pytest.fixture()
def sample_prices() -> List[PriceObservation]:
    return [
        PriceObservation(id=1, price=1.35, timestamp="2024-01-08T10:00:00Z"),
        PriceObservation(id=2, price=1.36, timestamp="2024-01-09T10:00:00Z"),
    ]


@pytest.fixture()
def reversed_prices() -> List[PriceObservation]:
    # arrival order is newest first
    return [
        PriceObservation(id=2, price=1.36, timestamp="2024-01-09T10:00:00Z"),
        PriceObservation(id=1, price=1.35, timestamp="2024-01-08T10:00:00Z"),
    ]


class SyncExecutor(Executor):
    """Runs submitted calls immediately on the calling thread."""

    def __init__(self) -> None:
        self.submitted = 0

    def submit(self, fn, *args, **kwargs) -> Future:
        self.submitted += 1
        future: Future = Future()
        future.set_running_or_notify_cancel()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as exc:
            future.set_exception(exc)
        return future


class ManualExecutor(Executor):
    """Keeps submitted calls in flight until the test settles them."""

    def __init__(self) -> None:
        self.calls: List[Tuple[Any, tuple, Future]] = []

    def submit(self, fn, *args, **kwargs) -> Future:
        future: Future = Future()
        future.set_running_or_notify_cancel()
        self.calls.append((fn, args, future))
        return future

    def succeed(self, index: int, result: Any) -> None:
        self.calls[index][2].set_result(result)

    def fail(self, index: int, exc: BaseException) -> None:
        self.calls[index][2].set_exception(exc)


@pytest.fixture()
def sync_executor() -> SyncExecutor:
    return SyncExecutor()


@pytest.fixture()
def manual_executor() -> ManualExecutor:
    return ManualExecutor()
