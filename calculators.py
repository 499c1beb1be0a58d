"""Derived-value calculators.

Pure functions of already-resolved fields. Nothing here caches between
renders and nothing raises on malformed input: unusable values come back as
None (or 0) and the composer shows a placeholder instead.
"""

from __future__ import annotations

import calendar
import logging
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Mapping, Optional, Sequence

from field_resolver import coerce_number, coerce_text, coerce_tristate, resolve
from formatters import format_currency, format_decimal, format_signed_currency
from schemas import CheckboxOption, ComparableRecord, LineItem, Span, Tone, TriState

log = logging.getLogger(__name__)

LEAD_PAINT_THRESHOLD_YEAR = 1978

DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%B %d, %Y", "%b %d, %Y", "%m-%d-%Y")


# ---------------------------------------------------------------------------
# Totals
# ---------------------------------------------------------------------------

def total_due(fields: Mapping[str, Any], components: Iterable[str]) -> float:
    """Sum of coerced numeric components (never string concatenation)."""
    return sum(coerce_number(resolve(fields, name)) for name in components)


def move_in_rows(
    fields: Mapping[str, Any],
    components: Sequence[tuple[str, str]],
    total_label: str = "Total Due at Move-In",
) -> list[tuple[str, str]]:
    """Label/amount rows for each (field, label) component plus a total row.

    Zero components render '---' (zero is treated as not provided).
    """
    rows = [
        (label, format_currency(coerce_number(resolve(fields, name))))
        for name, label in components
    ]
    rows.append((total_label, format_currency(total_due(fields, [name for name, _ in components]))))
    return rows


def balance_due_at_closing(
    purchase_price: float,
    deposits: Iterable[float] = (),
    loan_amount: float = 0.0,
) -> float:
    """Cash the buyer brings to closing, before prorations and closing costs."""
    balance = purchase_price - sum(deposits) - loan_amount
    return round(max(balance, 0.0), 2)


def late_fee_total(rent_due: float, late_fees: float = 0.0, other_charges: float = 0.0) -> float:
    return round(rent_due + late_fees + other_charges, 2)


def commission_amount(price: float, rate_percent: float, flat_fee: Optional[float] = None) -> float:
    """Flat fee when given, otherwise price × rate."""
    if flat_fee:
        return round(flat_fee, 2)
    return round(price * rate_percent / 100.0, 2)


def invoice_totals(
    items: Sequence[LineItem],
    tax_rate_percent: float = 0.0,
    discount: float = 0.0,
) -> dict[str, float]:
    """Subtotal, discount, tax on the discounted amount, and total."""
    subtotal = round(sum(item.line_total for item in items), 2)
    discount = min(max(discount, 0.0), subtotal)
    taxable = subtotal - discount
    tax = round(taxable * tax_rate_percent / 100.0, 2)
    return {
        "subtotal": subtotal,
        "discount": round(discount, 2),
        "tax": tax,
        "total": round(taxable + tax, 2),
    }


def escalated_price(
    competing_offer: Optional[float],
    increment: float,
    maximum: float,
) -> Optional[float]:
    """Competing bona fide offer plus the increment, capped at the maximum price."""
    if not competing_offer or competing_offer <= 0:
        return None
    price = competing_offer + max(increment, 0.0)
    if maximum > 0:
        price = min(price, maximum)
    return round(price, 2)


# ---------------------------------------------------------------------------
# Dates and proration
# ---------------------------------------------------------------------------

def parse_date(value: Any) -> Optional[date]:
    """Parse ISO, MM/DD/YYYY, or 'Month D, YYYY' dates; None otherwise."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = coerce_text(value)
    if not text:
        return None
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    log.debug("Unparseable date: %r", text)
    return None


def prorate(monthly_amount: float, occupied_days: int, days_in_month: int) -> float:
    if days_in_month <= 0 or occupied_days <= 0:
        return 0.0
    occupied_days = min(occupied_days, days_in_month)
    return round(monthly_amount * occupied_days / days_in_month, 2)


def prorated_first_month(monthly_amount: float, start: Any) -> Optional[float]:
    """Rent owed from the start date through the end of that month."""
    start_date = parse_date(start)
    if start_date is None or monthly_amount <= 0:
        return None
    days_in_month = calendar.monthrange(start_date.year, start_date.month)[1]
    occupied = days_in_month - start_date.day + 1
    return prorate(monthly_amount, occupied, days_in_month)


def notice_deadline(served: Any, days: int = 3) -> Optional[date]:
    """Date *days* business days after service, skipping Saturdays and Sundays."""
    current = parse_date(served)
    if current is None:
        return None
    remaining = max(days, 0)
    while remaining:
        current += timedelta(days=1)
        if current.weekday() < 5:
            remaining -= 1
    return current


def format_long_date(value: Optional[date], placeholder: str = "[Date]") -> str:
    if value is None:
        return placeholder
    return f"{value.strftime('%B')} {value.day}, {value.year}"


# ---------------------------------------------------------------------------
# Date-boundary classification
# ---------------------------------------------------------------------------

def built_before(year: Any, threshold: int) -> bool:
    """True for a known construction year strictly before *threshold*."""
    value = coerce_number(year)
    return 0 < value < threshold


def is_pre_1978(year: Any) -> bool:
    return built_before(year, LEAD_PAINT_THRESHOLD_YEAR)


# ---------------------------------------------------------------------------
# Tri-state disclosures
# ---------------------------------------------------------------------------

TRISTATE_LABELS = {
    TriState.YES: "Yes",
    TriState.NO: "No",
    TriState.UNKNOWN: "Unknown",
}


def tristate_options(value: Any) -> list[CheckboxOption]:
    """Three mutually exclusive options; exactly one is checked, default 'unknown'."""
    selected = coerce_tristate(value)
    return [
        CheckboxOption(label=TRISTATE_LABELS[state], checked=state == selected)
        for state in (TriState.YES, TriState.NO, TriState.UNKNOWN)
    ]


# ---------------------------------------------------------------------------
# Comparable sales
# ---------------------------------------------------------------------------

def delta_tone(amount: float) -> Tone:
    if amount > 0:
        return Tone.POSITIVE
    if amount < 0:
        return Tone.NEGATIVE
    return Tone.NORMAL


def adjustment_cell(record: ComparableRecord, category: str, raw_value: Any) -> list[Span]:
    """Raw comparable value followed by its signed dollar adjustment, if one exists."""
    raw_text = raw_value if isinstance(raw_value, str) else format_decimal(raw_value)
    spans = [Span(text=raw_text or "---")]
    adj = record.adjustment_for(category)
    if adj is None:
        return spans
    spans.append(Span(text=f" ({format_signed_currency(adj.amount)})", tone=delta_tone(adj.amount)))
    return spans


def weighted_average_price(records: Sequence[ComparableRecord]) -> Optional[float]:
    """Weight-averaged adjusted price; plain mean when every weight is zero."""
    priced = [r for r in records if r.adjusted_price is not None]
    if not priced:
        return None
    total_weight = sum(r.weight for r in priced)
    if total_weight <= 0:
        return round(sum(r.adjusted_price for r in priced) / len(priced), 2)
    return round(sum(r.adjusted_price * r.weight for r in priced) / total_weight, 2)


def price_per_square_foot(price: Optional[float], square_feet: Optional[float]) -> Optional[float]:
    if not price or not square_feet or square_feet <= 0:
        return None
    return round(price / square_feet, 2)


def adjusted_price_range(records: Sequence[ComparableRecord]) -> Optional[tuple[float, float]]:
    prices = [r.adjusted_price for r in records if r.adjusted_price is not None]
    if not prices:
        return None
    return min(prices), max(prices)


def adjusted_price_cell(record: ComparableRecord) -> list[Span]:
    """Adjusted price with the caller-supplied net adjustment beside it."""
    spans = [Span(text=format_currency(record.adjusted_price), tone=Tone.STRONG)]
    if record.total_adjustment is not None:
        spans.append(Span(
            text=f" (net {format_signed_currency(record.total_adjustment)})",
            tone=delta_tone(record.total_adjustment),
        ))
    return spans
