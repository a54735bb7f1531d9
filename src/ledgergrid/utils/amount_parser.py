"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re
from typing import Union


def parse_amount(value: Union[str, int, float, Decimal]) -> Decimal:
    """Parse a ledger amount cell into a Decimal.

    Numeric cells are converted directly. Text cells may use:
    - "123.45" / "-123.45"
    - "$123.45" / "-€123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        value: Amount cell value

    Returns:
        Decimal amount

    Raises:
        ValueError: If the value cannot be parsed
    """
    if isinstance(value, bool):
        raise ValueError(f"Could not parse amount '{value}'")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))

    text = str(value).strip()
    if not text:
        raise ValueError("Empty amount string")

    is_negative = False
    if text.startswith("(") and text.endswith(")"):
        is_negative = True
        text = text[1:-1]

    text = re.sub(r"[$€£¥\s]", "", text).replace(",", "")

    try:
        amount = Decimal(text)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{value}': {e}")
    return -amount if is_negative else amount
