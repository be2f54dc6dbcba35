from decimal import Decimal


class Config:
    CHARGE_AMOUNT = Decimal("5000.00")  # Fixed charge for every payment method
    CRYPTO_ASSET = "BTC"
    QUOTE_CURRENCY = "USD"
    TARGET_CURRENCY = "ZAR"
    RATE_API_BASE = "https://api.binance.com"
    FX_API_BASE = "https://api.frankfurter.app"
    HTTP_TIMEOUT_SECONDS = 5  # Per outbound request
    CRYPTO_DECIMALS = 10
    DEBUG = False
