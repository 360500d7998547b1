"""Async httpx client for the open exchange-rate API."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from email.utils import parsedate_to_datetime

import httpx

from src.config import settings
from src.pricing.currency import DEFAULT_RATES, default_rate
from src.schemas.pricing import ExchangeRates

logger = logging.getLogger(__name__)

# API response field names
_FIELD_RESULT = "result"
_FIELD_RATES = "rates"
_FIELD_LAST_UPDATE = "time_last_update_utc"

FALLBACK_NOTE = "Using default exchange rates"


class ExchangeRateClient:
    """Fetches rates relative to a base currency.

    Endpoint: GET {base_url}/{base}
    Transport and API failures return the static rate table with `error` set;
    a base the static table cannot serve raises ConfigurationError instead.
    """

    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        self._base_url = (base_url or settings.exchange_rates.exchange_rate_api_url).rstrip("/")
        self._timeout = httpx.Timeout(timeout or settings.exchange_rates.exchange_rate_timeout, connect=5.0)

    async def fetch(self, base: str = "USD") -> ExchangeRates:
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(f"{self._base_url}/{base}")
                response.raise_for_status()
                payload: dict = response.json()

        except httpx.TimeoutException:
            logger.warning("Exchange-rate API timeout (base=%s)", base)
            return self.fallback(base)

        except httpx.HTTPStatusError as exc:
            logger.warning("Exchange-rate API HTTP error %s (base=%s)", exc.response.status_code, base)
            return self.fallback(base)

        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Exchange-rate API request failed (base=%s): %s", base, exc)
            return self.fallback(base)

        result = self._parse_response(base, payload)
        if result is None:
            return self.fallback(base)
        return result

    def _parse_response(self, base: str, payload: dict) -> ExchangeRates | None:
        """Parse a successful payload; None when it is not usable."""
        if payload.get(_FIELD_RESULT) != "success":
            logger.warning("Exchange-rate API returned result=%r", payload.get(_FIELD_RESULT))
            return None

        rates: dict[str, Decimal] = {}
        for code, value in (payload.get(_FIELD_RATES) or {}).items():
            try:
                rates[code] = Decimal(str(value))
            except InvalidOperation:
                logger.debug("Skipping unparseable rate %s=%r", code, value)
        if not rates:
            return None

        last_updated = datetime.now(UTC)
        raw_date = payload.get(_FIELD_LAST_UPDATE)
        if raw_date:
            try:
                # RFC 2822, e.g. "Fri, 27 Mar 2020 00:02:31 +0000"
                last_updated = parsedate_to_datetime(str(raw_date))
            except (TypeError, ValueError):
                logger.debug("Could not parse last update date: %s", raw_date)

        return ExchangeRates(base=base, rates=rates, last_updated=last_updated)

    @staticmethod
    def fallback(base: str = "USD") -> ExchangeRates:
        """Static table, rebased when `base` is not USD.

        Raises:
            ConfigurationError: `base` is not in the static table.
        """
        divisor = default_rate(base)
        return ExchangeRates(
            base=base,
            rates={code: rate / divisor for code, rate in DEFAULT_RATES.items()},
            last_updated=datetime.now(UTC),
            error=FALLBACK_NOTE,
        )


# Module-level singleton
exchange_rate_client = ExchangeRateClient()
