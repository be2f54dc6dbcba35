from typing import Optional

from polypay.models.payment_method import PaymentMethod
from polypay.utils.helpers import generate_txn_suffix

BTC_FAIL_API_ERROR = "BTC_FAIL_API_ERROR"
ZAR_FAIL_API_ERROR = "ZAR_FAIL_API_ERROR"

FAILURE_CODES = frozenset({BTC_FAIL_API_ERROR, ZAR_FAIL_API_ERROR})


def new_transaction_id(method: PaymentMethod) -> str:
    return f"{method.prefix}_CONFIRMED_TXN_{generate_txn_suffix()}"


def is_failure(result: Optional[str]) -> bool:
    return result is None or result in FAILURE_CODES


class PaymentOutcome:
    def __init__(
        self,
        processor_name: str,
        validated: bool,
        transaction_id: Optional[str] = None,
    ):
        self.processor_name = processor_name
        self.validated = validated
        self.transaction_id = transaction_id

    @property
    def succeeded(self) -> bool:
        return self.validated and not is_failure(self.transaction_id)

    def to_dict(self) -> dict:
        return {
            "processor": self.processor_name,
            "validated": self.validated,
            "transaction_id": self.transaction_id,
            "succeeded": self.succeeded,
        }

    def __repr__(self):
        return (
            f"PaymentOutcome({self.processor_name}, validated={self.validated}, "
            f"transaction_id={self.transaction_id})"
        )
