"""Tests for derived-value calculators."""

from __future__ import annotations

from datetime import date

import pytest

from calculators import (
    adjusted_price_cell,
    adjusted_price_range,
    adjustment_cell,
    balance_due_at_closing,
    built_before,
    commission_amount,
    escalated_price,
    invoice_totals,
    is_pre_1978,
    late_fee_total,
    move_in_rows,
    notice_deadline,
    parse_date,
    price_per_square_foot,
    prorate,
    prorated_first_month,
    total_due,
    tristate_options,
    weighted_average_price,
)
from schemas import Adjustment, TriState, Tone

from tests.conftest import make_comparable, make_line_item


class TestTotals:
    """Tests for total_due() and move_in_rows()."""

    def test_sums_coerced_components(self):
        fields = {"rent": "1500", "deposit": "$1,500", "pet": 0}
        assert total_due(fields, ["rent", "deposit", "pet"]) == 3000.0

    def test_never_concatenates_strings(self):
        fields = {"a": "1", "b": "2"}
        assert total_due(fields, ["a", "b"]) == 3.0

    def test_missing_and_malformed_count_as_zero(self):
        assert total_due({"a": "abc"}, ["a", "b"]) == 0.0

    def test_move_in_scenario(self):
        fields = {"monthly_rent": 1500, "security_deposit": 1500, "pet_deposit": 0}
        rows = move_in_rows(fields, [
            ("monthly_rent", "First Month's Rent"),
            ("security_deposit", "Security Deposit"),
            ("pet_deposit", "Pet Deposit"),
        ])
        assert rows == [
            ("First Month's Rent", "$1,500"),
            ("Security Deposit", "$1,500"),
            ("Pet Deposit", "---"),
            ("Total Due at Move-In", "$3,000"),
        ]

    def test_recomputed_per_call(self):
        components = [("rent", "Rent")]
        assert move_in_rows({"rent": 100}, components)[-1][1] == "$100"
        assert move_in_rows({"rent": 200}, components)[-1][1] == "$200"


class TestMoneyMath:
    def test_balance_due(self):
        assert balance_due_at_closing(485000, [10000, 5000], 388000) == 82000.0

    def test_balance_never_negative(self):
        assert balance_due_at_closing(100, [500]) == 0.0

    def test_late_fee_total(self):
        assert late_fee_total(1850, 92.5, 10) == 1952.5

    def test_commission_percentage(self):
        assert commission_amount(500000, 5.5) == 27500.0

    def test_commission_flat_fee_wins(self):
        assert commission_amount(500000, 5.5, flat_fee=9995) == 9995.0

    def test_invoice_totals(self):
        items = [
            make_line_item(unit_price=250),
            make_line_item(description="Courier", quantity=2, unit_price=35.5),
        ]
        totals = invoice_totals(items, tax_rate_percent=7, discount=50)
        assert totals == {"subtotal": 321.0, "discount": 50.0, "tax": 18.97, "total": 289.97}

    def test_invoice_discount_capped_at_subtotal(self):
        totals = invoice_totals([make_line_item(unit_price=20)], discount=100)
        assert totals["discount"] == 20.0
        assert totals["total"] == 0.0

    def test_invoice_empty(self):
        assert invoice_totals([])["total"] == 0.0

    def test_line_item_amount_override(self):
        assert make_line_item(quantity=3, unit_price=10, amount=25).line_total == 25


class TestEscalatedPrice:
    def test_competing_plus_increment(self):
        assert escalated_price(490000, 2500, 510000) == 492500.0

    def test_capped_at_maximum(self):
        assert escalated_price(500000, 15000, 510000) == 510000.0

    def test_no_competing_offer(self):
        assert escalated_price(None, 2500, 510000) is None
        assert escalated_price(0, 2500, 510000) is None

    def test_no_cap_when_maximum_missing(self):
        assert escalated_price(490000, 2500, 0) == 492500.0


class TestDates:
    """Tests for parse_date(), proration, and notice deadlines."""

    @pytest.mark.parametrize("text", ["2025-03-15", "03/15/2025", "March 15, 2025", "Mar 15, 2025"])
    def test_parse_formats(self, text):
        assert parse_date(text) == date(2025, 3, 15)

    def test_parse_garbage(self):
        assert parse_date("soon") is None
        assert parse_date(None) is None

    def test_prorate(self):
        assert prorate(1500, 17, 31) == 822.58

    def test_prorate_invalid_days(self):
        assert prorate(1500, 0, 31) == 0.0
        assert prorate(1500, 10, 0) == 0.0

    def test_prorated_first_month(self):
        assert prorated_first_month(1500, "2025-03-15") == 822.58

    def test_prorated_full_month(self):
        assert prorated_first_month(1500, "2025-04-01") == 1500.0

    def test_prorated_unparseable(self):
        assert prorated_first_month(1500, "whenever") is None
        assert prorated_first_month(0, "2025-03-15") is None

    def test_notice_deadline_skips_weekend(self):
        # Thursday service → Friday, Monday, Tuesday
        assert notice_deadline("2025-03-06", 3) == date(2025, 3, 11)

    def test_notice_deadline_midweek(self):
        # Monday service → Tuesday, Wednesday, Thursday
        assert notice_deadline("2025-03-03", 3) == date(2025, 3, 6)

    def test_notice_deadline_unparseable(self):
        assert notice_deadline("", 3) is None


class TestDateBoundary:
    """Tests for built_before() / is_pre_1978()."""

    @pytest.mark.parametrize("year,expected", [
        (1977, True),
        ("1950", True),
        (1978, False),
        (1995, False),
        (None, False),
        (0, False),
        ("unknown", False),
    ])
    def test_pre_1978(self, year, expected):
        assert is_pre_1978(year) is expected

    def test_custom_threshold(self):
        assert built_before(1990, 2000)
        assert not built_before(2000, 2000)


class TestTristateOptions:
    """Tests for tristate_options() — exactly one checked, default unknown."""

    def test_unset_selects_unknown(self):
        options = tristate_options(None)
        assert [o.label for o in options] == ["Yes", "No", "Unknown"]
        assert [o.checked for o in options] == [False, False, True]

    def test_yes(self):
        assert [o.checked for o in tristate_options("yes")] == [True, False, False]

    def test_no(self):
        assert [o.checked for o in tristate_options(TriState.NO)] == [False, True, False]

    @pytest.mark.parametrize("value", ["false", "maybe", 0, ""])
    def test_unrecognized_never_becomes_no(self, value):
        assert [o.checked for o in tristate_options(value)] == [False, False, True]

    @pytest.mark.parametrize("value", [None, "yes", "no", "unknown", "junk", True, False])
    def test_exactly_one_checked(self, value):
        assert sum(o.checked for o in tristate_options(value)) == 1


class TestAdjustmentCell:
    """Tests for adjustment_cell() on comparable records."""

    def test_positive_adjustment(self):
        spans = adjustment_cell(make_comparable(bedrooms=2), "Bedrooms", 2)
        assert spans[0].text == "2"
        assert spans[1].text == " (+$15,000)"
        assert spans[1].tone == Tone.POSITIVE

    def test_negative_adjustment(self):
        comp = make_comparable(adjustments=[Adjustment(category="Bedrooms", amount=-10000)])
        spans = adjustment_cell(comp, "Bedrooms", 4)
        assert spans[1].text == " (-$10,000)"
        assert spans[1].tone == Tone.NEGATIVE

    def test_zero_adjustment_has_no_sign(self):
        comp = make_comparable(adjustments=[Adjustment(category="Bedrooms", amount=0)])
        spans = adjustment_cell(comp, "Bedrooms", 3)
        assert spans[1].text == " ($0)"
        assert spans[1].tone == Tone.NORMAL

    def test_absent_adjustment_renders_raw_value_only(self):
        spans = adjustment_cell(make_comparable(), "Bathrooms", 2.5)
        assert len(spans) == 1
        assert spans[0].text == "2.5"

    def test_category_match_is_case_insensitive(self):
        spans = adjustment_cell(make_comparable(), "bedrooms", 2)
        assert len(spans) == 2

    def test_missing_raw_value(self):
        spans = adjustment_cell(make_comparable(), "Bedrooms", None)
        assert spans[0].text == "---"

    def test_adjusted_price_trusts_caller(self):
        comp = make_comparable(sale_price=470000, total_adjustment=15000, adjusted_price=999999)
        spans = adjusted_price_cell(comp)
        assert spans[0].text == "$999,999"
        assert spans[0].tone == Tone.STRONG
        assert spans[1].text == " (net +$15,000)"


class TestComparableMath:
    def test_weighted_average(self, comparables):
        # (485000*1 + 502000*3 + 478500*1) / 5
        assert weighted_average_price(comparables) == 493900.0

    def test_zero_weights_fall_back_to_mean(self):
        comps = [make_comparable(adjusted_price=100, weight=0), make_comparable(adjusted_price=200, weight=0)]
        assert weighted_average_price(comps) == 150.0

    def test_unpriced_records_ignored(self):
        comps = [make_comparable(adjusted_price=None), make_comparable(adjusted_price=300000)]
        assert weighted_average_price(comps) == 300000.0

    def test_empty(self):
        assert weighted_average_price([]) is None
        assert adjusted_price_range([]) is None

    def test_range(self, comparables):
        assert adjusted_price_range(comparables) == (478500, 502000)

    def test_price_per_square_foot(self):
        assert price_per_square_foot(470000, 1720) == 273.26
        assert price_per_square_foot(470000, 0) is None
        assert price_per_square_foot(None, 1720) is None
