# usdcad/api/prices.py — dollar-price backend client (GET /prices, GET /health)
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Dict, Optional, Any
import requests, pandas as pd
import structlog

DEFAULT_BASE_URL = "http://localhost:8080/api/v1"

logger = structlog.get_logger(__name__)


class TransportError(Exception):
    """Raised when a request fails: non-2xx, connection error or unreadable body."""

    def __init__(self, message: str, url: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class RequestCancelled(TransportError):
    """The caller cancelled the request before it was sent."""


@dataclass(frozen=True)
class PriceObservation:
    id: int
    price: float
    timestamp: str  # ISO-8601, kept exactly as received

    @classmethod
    def from_json(cls, item: Dict[str, Any]) -> "PriceObservation":
        if not isinstance(item, dict):
            raise TypeError(f"expected an object, got {type(item).__name__}")
        obs_id = item["id"]
        if isinstance(obs_id, bool) or not isinstance(obs_id, int):
            raise TypeError("id must be an integer")
        ts = item["timestamp"]
        if not isinstance(ts, str):
            raise TypeError("timestamp must be a string")
        # same parser the chart uses; the original string is what gets stored
        pd.to_datetime(ts, utc=True, format="ISO8601")
        price = item["price"]
        if isinstance(price, bool) or not isinstance(price, (int, float)):
            raise TypeError("price must be a number")
        return cls(id=obs_id, price=float(price), timestamp=ts)


@dataclass(frozen=True)
class PriceClientConfig:
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0

    def __post_init__(self):
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))


class PriceClient:
    """
    Thin wrapper over the dollar-price REST API.
    One network request per call: no retries, no caching, no state besides the config.
    """

    def __init__(self, config: Optional[PriceClientConfig] = None):
        self.config = config or PriceClientConfig()

    def _get(self, path: str) -> Any:
        url = f"{self.config.base_url}/{path}"
        logger.debug("prices.request", url=url)
        try:
            r = requests.get(url, timeout=self.config.timeout)
            r.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.error("prices.request_failed", url=url, status_code=status, error=str(e))
            raise TransportError(f"GET {url} returned {status}", url=url, status_code=status) from e
        except requests.RequestException as e:
            logger.error("prices.request_failed", url=url, error=str(e))
            raise TransportError(f"GET {url} failed: {e}", url=url) from e

        try:
            return r.json()
        except ValueError as e:
            logger.error("prices.request_failed", url=url, error="invalid JSON body")
            raise TransportError(f"GET {url} returned invalid JSON", url=url, status_code=r.status_code) from e

    def fetch_prices(self, cancel_token=None) -> List[PriceObservation]:
        """
        GET {base_url}/prices → observations in arrival order.
        `cancel_token` is checked once, before the request goes out.
        """
        if cancel_token is not None and cancel_token.cancelled:
            raise RequestCancelled("request cancelled before it was sent")

        data = self._get("prices")
        url = f"{self.config.base_url}/prices"
        if not isinstance(data, list):
            logger.error("prices.request_failed", url=url, error="payload is not a list")
            raise TransportError("expected a JSON array of prices", url=url)
        try:
            return [PriceObservation.from_json(it) for it in data]
        except (KeyError, TypeError, ValueError) as e:
            logger.error("prices.request_failed", url=url, error=f"malformed observation: {e!r}")
            raise TransportError(f"malformed price observation: {e!r}", url=url) from e

    def fetch_health(self) -> Dict[str, str]:
        """GET {base_url}/health → {"status": "..."}"""
        data = self._get("health")
        if not isinstance(data, dict) or not isinstance(data.get("status"), str):
            url = f"{self.config.base_url}/health"
            logger.error("prices.request_failed", url=url, error="health payload has no status")
            raise TransportError("health payload has no status", url=url)
        return {"status": data["status"]}
