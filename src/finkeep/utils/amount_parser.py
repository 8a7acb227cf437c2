"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_decimal(value_str: str) -> Decimal:
    """Parse a numeric string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "1,234.56"
    - "₹ 1,234.56"

    Args:
        value_str: Numeric string

    Returns:
        Decimal value

    Raises:
        ValueError: If the string cannot be parsed
    """
    if not value_str or not value_str.strip():
        raise ValueError("Empty amount string")

    value_str = value_str.strip()

    # Remove currency symbols
    value_str = re.sub(r"[$€£¥₹]", "", value_str)

    # Remove commas
    value_str = value_str.replace(",", "")

    value_str = value_str.strip()

    try:
        return Decimal(value_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{value_str}': {e}")


def parse_amount(amount_str: str) -> Decimal:
    """Parse a transaction amount.

    Transaction amounts are magnitudes; direction comes from the
    transaction type, so signed or zero amounts are rejected.

    Raises:
        ValueError: If the string cannot be parsed or is not positive
    """
    amount = parse_decimal(amount_str)
    if amount <= 0:
        raise ValueError(f"Amount must be positive, got '{amount_str.strip()}'")
    return amount
