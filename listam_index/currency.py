"""Exchange rates used to convert listing prices to USD."""

import logging
import math

import httpx

from .errors import RateFetchError
from .models import CurrencyRateSet

logger = logging.getLogger(__name__)

RATES_URL = "https://cdn.jsdelivr.net/npm/@fawazahmed0/currency-api@latest/v1/currencies/usd.json"
BASE_CURRENCY = "usd"
REQUIRED_CURRENCIES = ("amd", "rub", "eur")


class CurrencyRateProvider:
    """Fetches USD rates for the currencies seen in list.am prices."""

    def __init__(self, client: httpx.AsyncClient, url: str = RATES_URL) -> None:
        self.client = client
        self.url = url

    async def fetch_rates(self) -> CurrencyRateSet:
        """Fetch today's rates; any failure is a RateFetchError."""
        try:
            response = await self.client.get(self.url)
        except httpx.RequestError as e:
            raise RateFetchError(f"Currency request failed: {e}") from e

        if response.status_code != 200:
            raise RateFetchError(f"Currencies error {response.status_code}: {response.text}")

        try:
            all_rates = response.json()[BASE_CURRENCY]
            rates = {code: float(all_rates[code]) for code in REQUIRED_CURRENCIES}
            for code, rate in rates.items():
                if not math.isfinite(rate) or rate <= 0:
                    raise ValueError(f"invalid rate for {code}: {rate}")
        except (ValueError, KeyError, TypeError) as e:
            raise RateFetchError(f"Malformed currency payload: {e}") from e

        logger.info(f"Fetched rates per 1 {BASE_CURRENCY.upper()}: {rates}")
        return CurrencyRateSet(rates=rates)
