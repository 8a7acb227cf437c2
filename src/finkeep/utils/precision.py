"""Fixed decimal precision used for money, quantities and unit prices."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

AMOUNT_DECIMALS = 2
QUANTITY_DECIMALS = 6
PRICE_DECIMALS = 4

_AMOUNT_EXP = Decimal(1).scaleb(-AMOUNT_DECIMALS)
_QUANTITY_EXP = Decimal(1).scaleb(-QUANTITY_DECIMALS)
_PRICE_EXP = Decimal(1).scaleb(-PRICE_DECIMALS)

ZERO = Decimal("0")


def quantize_amount(value: Decimal | int | str) -> Decimal:
    """Round a monetary value to 2 places."""
    return Decimal(value).quantize(_AMOUNT_EXP, rounding=ROUND_HALF_UP)


def quantize_quantity(value: Decimal | int | str) -> Decimal:
    """Round an asset quantity to 6 places."""
    return Decimal(value).quantize(_QUANTITY_EXP, rounding=ROUND_HALF_UP)


def quantize_price(value: Decimal | int | str) -> Decimal:
    """Round a unit price to 4 places."""
    return Decimal(value).quantize(_PRICE_EXP, rounding=ROUND_HALF_UP)


def optional_quantity(value: Optional[Decimal]) -> Optional[Decimal]:
    return None if value is None else quantize_quantity(value)


def optional_price(value: Optional[Decimal]) -> Optional[Decimal]:
    return None if value is None else quantize_price(value)
