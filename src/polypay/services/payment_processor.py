"""
Payment processors for polypay.

Every payment method implements the same two-step contract:

- `validate_details()` – a local, side-effect free check of the details
  captured at construction time
- `execute_transaction(amount)` – charge the amount and return a
  transaction result string

Callers are expected to validate before executing. The set of methods is
closed: a card payment that confirms immediately, and a crypto payment
that prices the charge through two chained rate lookups first.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal, localcontext
from typing import Optional

from polypay.config import Config
from polypay.models.payment_method import PaymentMethod
from polypay.models.transaction import (
    BTC_FAIL_API_ERROR,
    ZAR_FAIL_API_ERROR,
    new_transaction_id,
)
from polypay.services.fx_service import CurrencyConversionService
from polypay.services.rate_service import ExchangeRateService
from polypay.utils.helpers import format_currency

logger = logging.getLogger(__name__)

CARD_NUMBER_LENGTH = 16
MIN_WALLET_ADDRESS_LENGTH = 30


@dataclass(frozen=True)
class CryptoConversion:
    amount: Decimal
    spot_rate: Decimal
    fx_rate: Decimal
    combined_rate: Decimal
    crypto_amount: Decimal


def compute_crypto_amount(
    amount: Decimal,
    spot_rate: Decimal,
    fx_rate: Decimal,
    decimals: int = Config.CRYPTO_DECIMALS,
) -> CryptoConversion:
    """
    Convert a fiat charge into crypto via a quote currency.

    spot_rate is quote per 1 crypto (BTC/USD) and fx_rate is fiat per 1 quote
    (USD/ZAR), so their product is fiat per 1 crypto (BTC/ZAR).
    """
    if spot_rate <= 0 or fx_rate <= 0:
        raise ValueError("Rates must be positive to convert an amount.")

    combined = spot_rate * fx_rate
    with localcontext() as ctx:
        quotient = Decimal(amount) / combined
        # quantize needs room for every integer digit plus the fixed decimals
        ctx.prec = max(ctx.prec, quotient.adjusted() + decimals + 2)
        crypto_amount = quotient.quantize(Decimal(1).scaleb(-decimals))
    return CryptoConversion(
        amount=Decimal(amount),
        spot_rate=spot_rate,
        fx_rate=fx_rate,
        combined_rate=combined,
        crypto_amount=crypto_amount,
    )


def _usable(rate: Optional[Decimal]) -> bool:
    # None is a failed lookup; zero or less can't be divided by either.
    return rate is not None and rate > 0


class PaymentProcessor(ABC):
    method: PaymentMethod

    @abstractmethod
    def validate_details(self) -> bool:
        ...

    @abstractmethod
    async def execute_transaction(self, amount: Decimal) -> str:
        ...


class CardPayment(PaymentProcessor):
    method = PaymentMethod.CARD

    def __init__(self, card_number: str, cvc: str, expiration_year: int) -> None:
        if not card_number:
            raise ValueError("card_number must not be empty.")
        self._card_number = card_number
        self._cvc = cvc
        self._expiration_year = int(expiration_year)

    @property
    def card_number(self) -> str:
        return self._card_number

    @property
    def cvc(self) -> str:
        return self._cvc

    @property
    def expiration_year(self) -> int:
        return self._expiration_year

    def validate_details(self) -> bool:
        logger.info("[VISA] Checking validity for card ending in %s...", self._card_number[-4:])

        if len(self._card_number) == CARD_NUMBER_LENGTH:
            logger.info("[VISA] Validation Successful.")
            return True
        logger.info("[VISA] Validation Failed: Invalid card length.")
        return False

    async def execute_transaction(self, amount: Decimal) -> str:
        logger.info("[VISA] Executing fast charge of %s...", format_currency(amount))
        return new_transaction_id(self.method)


class CryptoPayment(PaymentProcessor):
    """
    Pays a fiat charge in crypto.

    Two lookups are chained, strictly one after the other, and the first
    failure ends the transaction:

    1. spot price of the asset in the quote currency (BTC/USD)
    2. quote currency to target fiat (USD/ZAR)

    The services are blocking clients, so each call runs on a worker thread.

    Failure codes are fixed strings (BTC_FAIL_API_ERROR, ZAR_FAIL_API_ERROR)
    whatever the configured quote and target currencies are.
    """

    method = PaymentMethod.CRYPTO

    def __init__(
        self,
        wallet_address: str,
        rate_service: ExchangeRateService,
        fx_service: CurrencyConversionService,
        quote_currency: str = Config.QUOTE_CURRENCY,
        target_currency: str = Config.TARGET_CURRENCY,
    ) -> None:
        if not wallet_address:
            raise ValueError("wallet_address must not be empty.")
        self._wallet_address = wallet_address
        self._rate_service = rate_service
        self._fx_service = fx_service
        self.quote_currency = quote_currency.upper()
        self.target_currency = target_currency.upper()

    @property
    def wallet_address(self) -> str:
        return self._wallet_address

    def validate_details(self) -> bool:
        logger.info(
            "[BTC] Checking validity for address starting with %s...", self._wallet_address[:5]
        )

        if len(self._wallet_address) >= MIN_WALLET_ADDRESS_LENGTH:
            logger.info("[BTC] Validation Successful.")
            return True
        logger.info("[BTC] Validation Unsuccessful: Invalid wallet address length.")
        return False

    async def execute_transaction(self, amount: Decimal) -> str:
        logger.info("[BTC] Executing charge of %s...", format_currency(amount))
        logger.info("[BTC] Contacting API for live exchange rate...")

        spot_rate = await asyncio.to_thread(
            self._rate_service.get_current_rate, self.quote_currency
        )
        if not _usable(spot_rate):
            logger.error("[BTC] Error: API failed. Transaction cancelled.")
            return BTC_FAIL_API_ERROR

        fx_rate = await asyncio.to_thread(
            self._fx_service.get_exchange_rate, self.quote_currency, self.target_currency
        )
        if not _usable(fx_rate):
            logger.error("[%s] Error: API failed. Conversion cancelled.", self.target_currency)
            return ZAR_FAIL_API_ERROR

        conversion = compute_crypto_amount(amount, spot_rate, fx_rate)

        logger.info(
            "[BTC] Live rate: %s. Transferring %s BTC...",
            format_currency(conversion.spot_rate, "en-US"),
            conversion.crypto_amount,
        )
        logger.info(
            "Converting [BTC] live rate %s to [%s]: %s at $1 to %s amount: %s.",
            format_currency(conversion.spot_rate, "en-US"),
            self.target_currency,
            format_currency(conversion.combined_rate, "en-ZA"),
            self.target_currency,
            format_currency(conversion.fx_rate, "en-ZA"),
        )
        return new_transaction_id(self.method)
