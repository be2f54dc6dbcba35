import logging
import sys
import uuid
from decimal import Decimal, ROUND_HALF_UP

# symbol, thousands separator, decimal separator
_LOCALE_FORMATS = {
    "en-US": ("$", ",", "."),
    "en-ZA": ("R", "\u00a0", ","),
}


def generate_txn_suffix(length=4):
    return uuid.uuid4().hex[:length]


def format_currency(amount, locale="en-US"):
    """Render an amount the way the given locale writes money, e.g. R1 080 000,00."""
    symbol, group_sep, decimal_sep = _LOCALE_FORMATS[locale]
    value = Decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, cents = "{:,.2f}".format(abs(value)).split(".")
    return f"{sign}{symbol}{whole.replace(',', group_sep)}{decimal_sep}{cents}"


def init_logging(debug=False):
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
