"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re

MINOR_UNIT = Decimal("0.01")


def to_minor_units(amount: Decimal) -> Decimal:
    """Round an amount half-up to two decimal places."""
    return amount.quantize(MINOR_UNIT, rounding=ROUND_HALF_UP)


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "Rs. 1,234.56"
    - "-123.45"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols and the rupee prefix
    amount_str = re.sub(r"^\s*Rs\.?", "", amount_str, flags=re.IGNORECASE)
    amount_str = re.sub(r"[$€£¥₹₩฿]", "", amount_str)

    # Remove thousands separators
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}'") from e
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount


def parse_positive_amount(amount_str: str) -> Decimal:
    """Parse an amount that is at least one minor unit, rounded to minor units.

    Raises:
        ValueError: If the string cannot be parsed or rounds to zero or less
    """
    try:
        amount = to_minor_units(parse_amount(amount_str))
    except InvalidOperation as e:
        raise ValueError(f"Amount out of range: '{amount_str}'") from e
    if amount <= 0:
        raise ValueError(f"Amount must be positive, got {amount}")
    return amount
