"""
Chart view: the loading / error / loaded state machine behind the USD→CAD page.

Only the latest request can change the state. Every load gets its own CancellationToken;
starting a new load (retry) or deactivating the view cancels the previous token,
and results delivered for a cancelled token are dropped (cancel-superseded policy).
"""
from __future__ import annotations
import threading
import time
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from typing import List, NamedTuple, Optional, Tuple, Union

import structlog

from usdcad import utils
from usdcad.api.prices import PriceClient, PriceObservation

LOAD_FAILURE_MESSAGE = "Failed to load data. Please try again."

# superseded requests keep a worker until they time out; retries must not queue behind them
MAX_IN_FLIGHT = 4

logger = structlog.get_logger(__name__)


# ──────────────────────────────────────────────────────────────────────────────
# States
# ──────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class Error:
    """The single user-visible failure (LoadFailure). `cause` is for logs only."""
    message: str = LOAD_FAILURE_MESSAGE
    cause: Optional[BaseException] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Loaded:
    observations: Tuple[PriceObservation, ...] = ()


ViewState = Union[Idle, Loading, Error, Loaded]


class CancellationToken:
    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


# ──────────────────────────────────────────────────────────────────────────────
# Projection
# ──────────────────────────────────────────────────────────────────────────────

class Stats(NamedTuple):
    current_rate: float
    average_rate: float
    last_updated: str


class Projection(NamedTuple):
    labels: List[str]
    series: List[float]
    stats: Stats
    loading: bool
    error: Optional[str]


def project(state: ViewState, label_format: str = "%x") -> Projection:
    """ViewState → what a UI layer renders. Stats use arrival order, series use time order."""
    if isinstance(state, Loaded):
        obs = state.observations
        s = utils.chart_series(obs, label_format=label_format)
        stats = Stats(utils.current_rate(obs), utils.average_rate(obs), utils.last_updated(obs))
        return Projection(s.labels, s.data, stats, loading=False, error=None)
    empty = Stats(0, 0, "")
    if isinstance(state, Error):
        return Projection([], [], empty, loading=False, error=state.message)
    return Projection([], [], empty, loading=True, error=None)


# ──────────────────────────────────────────────────────────────────────────────
# View
# ──────────────────────────────────────────────────────────────────────────────

class ChartView:
    def __init__(self, client: PriceClient, executor: Optional[Executor] = None):
        self._client = client
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=MAX_IN_FLIGHT, thread_name_prefix="price-load")
        self._lock = threading.RLock()
        self._state: ViewState = Idle()
        self._token: Optional[CancellationToken] = None
        self._future: Optional[Future] = None
        self._settled = threading.Event()
        self._deactivated = False

    # ---- commands ----

    def activate(self) -> Optional[Future]:
        return self.load_data()

    def retry(self) -> Optional[Future]:
        return self.load_data()

    def load_data(self) -> Optional[Future]:
        with self._lock:
            if self._deactivated:
                return None
            if self._token is not None:
                self._token.cancel()
                self._future.cancel()
                self._settled.set()
            token, settled = CancellationToken(), threading.Event()
            self._token, self._settled = token, settled
            self._state = Loading()
            logger.debug("chart_view.load_started")
            future = self._executor.submit(self._client.fetch_prices, token)
            self._future = future
        future.add_done_callback(partial(self._settle, token, settled))
        return future

    def deactivate(self) -> None:
        with self._lock:
            if self._deactivated:
                return
            self._deactivated = True
            if self._token is not None:
                self._token.cancel()
                self._future.cancel()
            self._settled.set()
        if self._owns_executor:
            self._executor.shutdown(wait=False)
        logger.debug("chart_view.deactivated")

    def wait(self, timeout: Optional[float] = None) -> ViewState:
        """Block until the current request has been applied to the state (or `timeout` elapses).

        A retry issued while waiting moves the wait onto the new request.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            with self._lock:
                if self._token is None:
                    return self._state
                settled = self._settled
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            settled.wait(remaining)
            with self._lock:
                if settled is self._settled or (deadline is not None and time.monotonic() >= deadline):
                    return self._state

    # ---- continuation ----

    def _settle(self, token: CancellationToken, settled: threading.Event, future: Future) -> None:
        with self._lock:
            if token.cancelled:
                logger.debug("chart_view.stale_response_dropped")
                return
            exc = future.exception()
            if exc is not None:
                logger.error("chart_view.load_failed", error=str(exc), error_type=type(exc).__name__)
                self._state = Error(LOAD_FAILURE_MESSAGE, cause=exc)
            else:
                observations = tuple(future.result())
                self._state = Loaded(observations)
                logger.info("chart_view.loaded", count=len(observations))
            settled.set()

    # ---- read side ----

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def loading(self) -> bool:
        return isinstance(self._state, (Idle, Loading))

    @property
    def error(self) -> Optional[str]:
        return self._state.message if isinstance(self._state, Error) else None

    @property
    def prices(self) -> Tuple[PriceObservation, ...]:
        return self._state.observations if isinstance(self._state, Loaded) else ()

    def current_rate(self) -> float:
        return utils.current_rate(self.prices)

    def average_rate(self) -> float:
        return utils.average_rate(self.prices)

    def last_updated(self) -> str:
        return utils.last_updated(self.prices)

    def projection(self, label_format: str = "%x") -> Projection:
        return project(self._state, label_format=label_format)
