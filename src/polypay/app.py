import asyncio
import logging

from polypay.config import Config
from polypay.services.checkout import process_payments
from polypay.services.fx_service import FrankfurterFXService
from polypay.services.payment_processor import CardPayment, CryptoPayment
from polypay.services.rate_service import BinanceRateService
from polypay.utils.helpers import init_logging

logger = logging.getLogger(__name__)


def build_processors(config=Config):
    rate_service = BinanceRateService(
        asset=config.CRYPTO_ASSET,
        api_base=config.RATE_API_BASE,
        timeout=config.HTTP_TIMEOUT_SECONDS,
    )
    fx_service = FrankfurterFXService(
        api_base=config.FX_API_BASE,
        timeout=config.HTTP_TIMEOUT_SECONDS,
    )

    visa = CardPayment("4000111122223333", "123", 2028)
    btc = CryptoPayment(
        "1K6F89H4J2K1L3M4N5P6Q7R8S9T0U1V2W3X4",
        rate_service,
        fx_service,
        quote_currency=config.QUOTE_CURRENCY,
        target_currency=config.TARGET_CURRENCY,
    )
    return [visa, btc]


def main():
    init_logging(Config.DEBUG)
    outcomes = asyncio.run(process_payments(build_processors(), Config.CHARGE_AMOUNT))
    logger.debug("Outcomes: %s", [o.to_dict() for o in outcomes])
    # Per-method failures are reported above, never through the exit status.
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
