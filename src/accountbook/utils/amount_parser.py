"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re
from typing import Optional

_CURRENCY_CODE = re.compile(r"^([A-Za-z]{3})\s+|\s+([A-Za-z]{3})$")
_SYMBOLS = {"$": "USD", "£": "GBP", "€": "EUR"}


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles "2499.00", "2,499.00", "(150.00)" (negative in parentheses) and
    amounts with a currency symbol or code, which is discarded.

    Raises:
        ValueError: If amount string cannot be parsed
    """
    amount, _ = parse_money(amount_str)
    return amount


def parse_money(text: str) -> tuple[Decimal, Optional[str]]:
    """Parse an amount with an optional currency into (amount, currency_code).

    "USD 100", "100 usd" and "$100" all give (Decimal("100"), "USD").
    The currency is None when the text carries none.
    """
    if not text or not text.strip():
        raise ValueError("Empty amount string")

    amount_str = text.strip()
    currency = None

    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1].strip()

    match = _CURRENCY_CODE.search(amount_str)
    if match:
        currency = (match.group(1) or match.group(2)).upper()
        amount_str = _CURRENCY_CODE.sub("", amount_str)

    for symbol, code in _SYMBOLS.items():
        if symbol in amount_str:
            currency = currency or code
            amount_str = amount_str.replace(symbol, "")

    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{text.strip()}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{text.strip()}'")
    return (-amount if is_negative else amount), currency
