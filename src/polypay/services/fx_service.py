# src/polypay/services/fx_service.py

import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

import requests
from pydantic import ValidationError

from polypay.config import Config
from polypay.models.quotes import ConversionQuote

logger = logging.getLogger(__name__)


class CurrencyConversionService(ABC):
    """Anything that can convert one fiat currency into another."""

    @abstractmethod
    def get_exchange_rate(self, from_code: str, to_code: str) -> Optional[Decimal]:
        """Return how many `to_code` one `from_code` buys, or None on failure."""
        raise NotImplementedError


class FrankfurterFXService(CurrencyConversionService):
    """
    Small wrapper around the free Frankfurter API:
    https://api.frankfurter.app/latest?from=USD&to=ZAR

    - ECB reference rates, updated daily
    - No API key
    - Rates come back nested as {"rates": {"ZAR": 18.02}}
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        api_base: str = Config.FX_API_BASE,
        timeout: float = Config.HTTP_TIMEOUT_SECONDS,
    ):
        self.session = session or requests.Session()
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout

    def get_exchange_rate(self, from_code: str, to_code: str) -> Optional[Decimal]:
        """
        Get conversion rate: 1 from_code -> X to_code
        e.g. get_exchange_rate('USD', 'ZAR') => Decimal('18.02')
        """
        from_code = from_code.upper()
        to_code = to_code.upper()

        if from_code == to_code:
            return Decimal(1)

        url = f"{self.api_base}/latest"
        try:
            resp = self.session.get(
                url, params={"from": from_code, "to": to_code}, timeout=self.timeout
            )
            resp.raise_for_status()
            quote = ConversionQuote.model_validate(resp.json())
            rate = quote.rates[to_code]
        except (requests.RequestException, ValidationError, ValueError, KeyError) as e:
            logger.warning("Error fetching Forex API for %s -> %s: %r", from_code, to_code, e)
            return None

        logger.info("Fetched rate %s -> %s: %.4f", from_code, to_code, rate)
        return rate
