# src/polypay/models/payment_method.py
from enum import Enum


class PaymentMethod(str, Enum):
    CARD = "card"
    CRYPTO = "crypto"

    @property
    def prefix(self) -> str:
        """Label used at the front of transaction ids, e.g. VISA_CONFIRMED_TXN_1a2b."""
        return _PREFIXES[self]


_PREFIXES = {
    PaymentMethod.CARD: "VISA",
    PaymentMethod.CRYPTO: "BTC",
}
