"""Deterministic value formatting for table cells.

Numbers are converted to ``Decimal`` from their shortest round-trip repr and
rounded half-up to whole hundredths, so ``1.005`` formats as ``1.01`` on
every platform instead of following the binary float value 1.00499...
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

logger = logging.getLogger(__name__)

FORMAT_PLAIN = "plain"
FORMAT_CURRENCY = "currency"
FORMAT_PERCENT = "percent"

DEFAULT_CURRENCY_SYMBOL = "$"

_ONE = Decimal(1)
_HUNDRED = Decimal(100)


def format_value(value: Any, kind: str = "", currency_symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Format a data value for display.

    Args:
        value: Value from the data document
        kind: Format kind: "currency", "percent", or anything else for plain
        currency_symbol: Prefix used by the currency kind

    Returns:
        Formatted string. None and unsupported types (booleans, mappings,
        lists) give an empty string; strings pass through unchanged.

    Example:
        ```python
        format_value(1234.5, "currency")  # "$1234.50"
        format_value(0.5, "percent")      # "50%"
        format_value(3.0)                 # "3"
        ```
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        logger.debug(f"Cannot format value of type {type(value).__name__}")
        return ""

    number = _to_decimal(value)
    if number is None:
        return ""

    normalized_kind = (kind or "").strip().lower()
    if normalized_kind == FORMAT_CURRENCY:
        return f"{currency_symbol}{format_number(number)}"
    if normalized_kind == FORMAT_PERCENT:
        return f"{format_number(number * _HUNDRED)}%"
    return format_number(number)


def format_number(number: Decimal) -> str:
    """Format a finite decimal: integral values without a decimal point,
    everything else with exactly two decimals, rounded half-up."""
    if number == number.to_integral_value():
        return str(int(number))

    # Round the magnitude so ties go away from zero for negatives too.
    hundredths = int((abs(number) * _HUNDRED).quantize(_ONE, rounding=ROUND_HALF_UP))
    whole, fraction = divmod(hundredths, 100)
    sign = "-" if number < 0 and hundredths else ""
    return f"{sign}{whole}.{fraction:02d}"


def _to_decimal(value: int | float | Decimal) -> Decimal | None:
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, int):
        number = Decimal(value)
    else:
        number = Decimal(repr(value))
    if not number.is_finite():
        return None
    return number
