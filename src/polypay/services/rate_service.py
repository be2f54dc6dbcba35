# src/polypay/services/rate_service.py

import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

import requests
from pydantic import ValidationError

from polypay.config import Config
from polypay.models.quotes import TickerPrice
from polypay.utils.helpers import format_currency

logger = logging.getLogger(__name__)


class ExchangeRateService(ABC):
    """Anything that can price one unit of a crypto asset in a quote currency."""

    @abstractmethod
    def get_current_rate(self, quote_currency: str) -> Optional[Decimal]:
        """Return the spot price, or None when the lookup failed."""
        raise NotImplementedError


class BinanceRateService(ExchangeRateService):
    """
    Spot price lookup against the public Binance ticker endpoint:
    https://api.binance.com/api/v3/ticker/price?symbol=BTCUSDT

    - No API key needed
    - USD is served by the USDT market, other quotes map to BTC<QUOTE>
    - The price field is a string, parsed as Decimal without locale rules
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        asset: str = Config.CRYPTO_ASSET,
        api_base: str = Config.RATE_API_BASE,
        timeout: float = Config.HTTP_TIMEOUT_SECONDS,
    ):
        self.session = session or requests.Session()
        self.asset = asset.upper()
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout

    def symbol_for(self, quote_currency: str) -> str:
        quote = quote_currency.upper()
        if quote == "USD":
            quote = "USDT"
        return f"{self.asset}{quote}"

    def get_current_rate(self, quote_currency: str) -> Optional[Decimal]:
        symbol = self.symbol_for(quote_currency)
        url = f"{self.api_base}/api/v3/ticker/price"
        try:
            resp = self.session.get(url, params={"symbol": symbol}, timeout=self.timeout)
            resp.raise_for_status()
            ticker = TickerPrice.model_validate(resp.json())
        except (requests.RequestException, ValidationError, ValueError) as e:
            logger.warning("Binance API failed for %s: %s", symbol, e)
            return None

        logger.info(
            "The live %s price is: %s", self.asset, format_currency(ticker.price, "en-US")
        )
        return ticker.price
