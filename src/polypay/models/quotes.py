from decimal import Decimal
from typing import Dict

from pydantic import BaseModel


class TickerPrice(BaseModel):
    symbol: str
    price: Decimal


class ConversionQuote(BaseModel):
    amount: Decimal
    base: str
    date: str
    rates: Dict[str, Decimal]
