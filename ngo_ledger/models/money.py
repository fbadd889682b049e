"""
Money helpers.

Amounts are Decimal with two places everywhere inside the system.
Floats only appear at the edges (CSV text, model responses) and are
converted here, once.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Optional, Union

from ngo_ledger.config import get_settings

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

MoneyInput = Union[Decimal, int, float, str]


def to_money(value: MoneyInput) -> Decimal:
    """
    Convert a number-like value to a 2dp Decimal.

    Floats go through str() so 0.1 becomes Decimal("0.10"), not the
    binary expansion.

    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise ValueError(f"Not an amount: {value!r}")
    if isinstance(value, float):
        value = str(value)
    if isinstance(value, str):
        value = value.strip().replace(",", "")
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Not an amount: {value!r}") from e
    if not amount.is_finite():
        raise ValueError(f"Not an amount: {value!r}")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def parse_money(value: Optional[str], default: Optional[Decimal] = None) -> Optional[Decimal]:
    """Lenient variant of to_money for imported text: returns default on junk."""
    if value is None or not str(value).strip():
        return default
    try:
        return to_money(value)
    except ValueError:
        return default


def sum_money(amounts: Iterable[Decimal]) -> Decimal:
    return sum(amounts, ZERO)


def format_money(amount: Decimal, currency_code: Optional[str] = None) -> str:
    """
    Display formatting, e.g. ``GHS 1,234.50`` or ``-GHS 12.00``.

    Only the presentation boundary should call this. The currency defaults
    to AppSettings.currency_code.
    """
    currency_code = currency_code or get_settings().app.currency_code
    sign = "-" if amount < 0 else ""
    return f"{sign}{currency_code} {abs(amount):,.2f}"
