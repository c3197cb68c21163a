"""
Client for the USD exchange-rate snapshot endpoint.
"""
import logging
from typing import Any, Dict, Optional

from cloudfeed.clients.http_client import JsonHttpClient
from cloudfeed.models.enums import Currency
from cloudfeed.models.fx_schemas import FxSnapshot
from cloudfeed.utils.config import FeedConfig

logger = logging.getLogger(__name__)

QUOTED_CURRENCIES = (Currency.INR, Currency.EUR, Currency.GBP)


def pick_rate(rates: Dict[str, Any], currency: Currency) -> Optional[float]:
    """
    Read one rate as a float. Missing or zero rates give None.

    Raises:
        ValueError: If the rate is present but not a number
    """
    value = rates.get(str(currency))
    if not value:
        return None
    return float(value)


class FxRatesClient:
    """Fetches the latest USD-based rates."""

    def __init__(self, config: FeedConfig, http_client: Optional[JsonHttpClient] = None):
        self.config = config
        self.http = http_client or JsonHttpClient("fx", timeout=config.http_timeout)

    def get_snapshot(self) -> FxSnapshot:
        """
        Fetch and parse the rates document.

        Raises:
            ProviderError: If the request fails
            Exception: Any parse or validation error; callers treat the whole snapshot as failed
        """
        payload = self.http.fetch_json(self.config.fx_url)
        rates = payload.get("rates") or {}
        snapshot = FxSnapshot(**{
            str(currency): pick_rate(rates, currency)
            for currency in QUOTED_CURRENCIES
        })
        missing = [str(currency) for currency in QUOTED_CURRENCIES if getattr(snapshot, str(currency)) is None]
        if missing:
            logger.warning(f"FX source did not quote {', '.join(missing)}")
        return snapshot

    def fallback_snapshot(self) -> FxSnapshot:
        """Fixed rates with a fresh timestamp."""
        rates = self.config.fx_fallback_rates
        return FxSnapshot(**{
            str(currency): rates.get(currency)
            for currency in QUOTED_CURRENCIES
        })

    def close(self):
        self.http.close()
