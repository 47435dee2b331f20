# usdcad/config.py — dashboard settings read from Streamlit secrets (or any mapping)
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Mapping

import structlog

from usdcad.api.prices import DEFAULT_BASE_URL, PriceClientConfig

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Settings:
    api_base_url: str = DEFAULT_BASE_URL
    request_timeout: float = 30.0
    fetch_enabled: bool = True
    log_level: str = "INFO"
    environment: str = "development"
    label_format: str = "%x"

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "Settings":
        """
        Keys (all optional):
          PRICE_API_BASE_URL, PRICE_API_TIMEOUT, FETCH_ENABLED ("1" = on),
          LOG_LEVEL, ENVIRONMENT, CHART_LABEL_FORMAT
        """
        raw_timeout = values.get("PRICE_API_TIMEOUT", cls.request_timeout)
        try:
            timeout = float(raw_timeout)
        except (TypeError, ValueError) as e:
            raise ValueError(f"PRICE_API_TIMEOUT must be a number, got {raw_timeout!r}") from e

        return cls(
            api_base_url=str(values.get("PRICE_API_BASE_URL", DEFAULT_BASE_URL)),
            request_timeout=timeout,
            fetch_enabled=str(values.get("FETCH_ENABLED", "1")) == "1",
            log_level=str(values.get("LOG_LEVEL", "INFO")).upper(),
            environment=str(values.get("ENVIRONMENT", "development")).lower(),
            label_format=str(values.get("CHART_LABEL_FORMAT", "%x")),
        )

    def client_config(self) -> PriceClientConfig:
        return PriceClientConfig(base_url=self.api_base_url, timeout=self.request_timeout)


def load_settings(secrets: Mapping[str, Any]) -> Settings:
    # st.secrets raises FileNotFoundError on first access when no secrets.toml exists
    try:
        values = dict(secrets)
    except FileNotFoundError:
        logger.warning("config.secrets_missing", detail="no secrets.toml found, using defaults")
        values = {}
    return Settings.from_mapping(values)
