"""Runs a list of payment processors one after the other and reports each outcome."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Callable, Iterable, List

from polypay.models.transaction import PaymentOutcome, is_failure
from polypay.services.payment_processor import PaymentProcessor

logger = logging.getLogger(__name__)


async def process_payments(
    processors: Iterable[PaymentProcessor],
    amount: Decimal,
    out: Callable[[str], None] = print,
) -> List[PaymentOutcome]:
    """
    Validate then execute every processor in order.

    Each processor finishes, network calls included, before the next one
    starts. A failing processor never stops the run.
    """
    if amount < 0:
        raise ValueError("Amount must not be negative.")

    outcomes: List[PaymentOutcome] = []
    for processor in processors:
        name = type(processor).__name__
        out(f"\n--- Attempting to process using: {name} ---")

        if not processor.validate_details():
            out("Result: FAILURE: Validation failed.")
            outcomes.append(PaymentOutcome(name, validated=False))
            continue

        transaction_id = await processor.execute_transaction(amount)
        if is_failure(transaction_id):
            out(f"Result: FAILURE: {transaction_id}")
        else:
            out(f"Result: SUCCESS! Transaction ID: {transaction_id}")
        outcomes.append(PaymentOutcome(name, validated=True, transaction_id=transaction_id))

    logger.debug("Processed %d payment method(s)", len(outcomes))
    return outcomes
