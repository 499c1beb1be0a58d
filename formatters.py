"""Display formatting for money, percentages, and grouped numbers."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any, Optional

from field_resolver import coerce_number

MISSING_AMOUNT = "---"
AMOUNT_PLACEHOLDER = "[Amount]"


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        raw = value
    else:
        raw = coerce_number(value, default=float("nan"))
    try:
        number = Decimal(str(raw))
    except InvalidOperation:
        return None
    if not number.is_finite():
        return None
    return number


def round_half_up(value: Any, decimals: int = 0) -> Optional[Decimal]:
    """Round half away from zero; None when *value* is not numeric."""
    number = _to_decimal(value)
    if number is None:
        return None
    with localcontext() as ctx:
        # quantize needs enough precision for every integer digit plus the decimals
        ctx.prec = max(28, number.adjusted() + decimals + 2)
        return number.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)


def group_thousands(value: Any, sep: str = ",") -> str:
    """Integer digits with *sep* every three places from the right, no leading separator."""
    number = round_half_up(value, 0)
    if number is None:
        return ""
    grouped = f"{abs(int(number)):,d}"
    if sep != ",":
        grouped = grouped.replace(",", sep)
    return f"-{grouped}" if number < 0 else grouped


def format_number(value: Any, decimals: int = 0) -> str:
    """Grouped number with fixed decimals (e.g., 1234.5 → '1,234.50')."""
    number = round_half_up(value, decimals)
    if number is None:
        return ""
    if decimals <= 0:
        return group_thousands(number)
    return f"{number:,.{decimals}f}"


def format_decimal(value: Any, decimals: int = 2) -> str:
    """Rounded decimal without grouping, trailing zeros dropped (2.50 → '2.5')."""
    number = round_half_up(value, decimals)
    if number is None:
        return ""
    text = f"{number:.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_currency(value: Any) -> str:
    """Whole-dollar amount like '$1,234,567'; None and zero render as '---'."""
    number = round_half_up(value, 0)
    if number is None or number == 0:
        return MISSING_AMOUNT
    sign = "-" if number < 0 else ""
    return f"{sign}${group_thousands(number.copy_abs())}"


def format_currency_strict(value: Any) -> str:
    """Like format_currency, but a real zero renders as '$0'."""
    number = round_half_up(value, 0)
    if number is None:
        return MISSING_AMOUNT
    if number == 0:
        return "$0"
    return format_currency(number)


def format_cents(value: Any) -> str:
    """Dollar amount with cents ('$1,234.50'); None renders as '---'."""
    number = round_half_up(value, 2)
    if number is None:
        return MISSING_AMOUNT
    sign = "-" if number < 0 else ""
    return f"{sign}${number.copy_abs():,.2f}"


def format_amount_or_placeholder(value: Any, placeholder: str = AMOUNT_PLACEHOLDER) -> str:
    """Currency for filled-in amounts; a visible blank for missing or zero ones."""
    text = format_currency(value)
    return placeholder if text == MISSING_AMOUNT else text


def format_signed_currency(value: Any) -> str:
    """'+$15,000' / '-$10,000' / '$0'."""
    number = round_half_up(value, 0)
    if number is None or number == 0:
        return "$0"
    sign = "+" if number > 0 else "-"
    return f"{sign}${group_thousands(number.copy_abs())}"


def format_percent(value: Any, decimals: int = 2) -> str:
    """Round to *decimals* places and append '%' (7.456 → '7.46%')."""
    number = round_half_up(value, decimals)
    if number is None:
        return ""
    return f"{number:.{max(decimals, 0)}f}%"
