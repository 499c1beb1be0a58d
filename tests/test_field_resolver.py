"""Tests for input resolution, coercion, and the per-template field registry."""

from __future__ import annotations

import math

import pytest

from field_resolver import (
    FieldRegistry,
    ResolvedFields,
    choice_field,
    coerce_bool,
    coerce_choice,
    coerce_int,
    coerce_number,
    coerce_records,
    coerce_text,
    coerce_tristate,
    flag_field,
    is_filled,
    number_field,
    records_field,
    resolve,
    text_field,
    tristate_field,
)
from schemas import ComparableRecord, LineItem, TriState


class TestResolve:
    """Tests for field_resolver.resolve()."""

    @pytest.mark.parametrize("default", ["", "fallback", 0, 12.5, False, True, [], ["x"]])
    def test_absent_field_returns_exact_default(self, default):
        assert resolve({}, "missing", default) is default

    def test_none_value_returns_default(self):
        assert resolve({"rent": None}, "rent", 0) == 0

    def test_present_value_returned(self):
        assert resolve({"rent": "1500"}, "rent", 0) == "1500"

    def test_falsy_values_are_present(self):
        assert resolve({"rent": 0}, "rent", 99) == 0
        assert resolve({"flag": False}, "flag", True) is False
        assert resolve({"name": ""}, "name", "x") == ""

    def test_non_mapping_input_returns_default(self):
        assert resolve(None, "rent", 5) == 5
        assert resolve(["rent"], "rent", 5) == 5

    def test_default_is_none_when_omitted(self):
        assert resolve({}, "rent") is None


class TestCoerceBool:
    """Tests for field_resolver.coerce_bool()."""

    @pytest.mark.parametrize("value", [True, "true"])
    def test_true_values(self, value):
        assert coerce_bool(value) is True

    @pytest.mark.parametrize(
        "value",
        [False, "false", "0", 0, 1, None, "", "yes", "True", "TRUE", " true", "on", [], {}, 1.0],
    )
    def test_everything_else_is_false(self, value):
        assert coerce_bool(value) is False

    def test_string_false_is_not_truthy(self):
        """A naive truthiness check would get this wrong."""
        assert bool("false") is True
        assert coerce_bool("false") is False


class TestCoerceNumber:
    """Tests for field_resolver.coerce_number()."""

    def test_passes_numbers_through(self):
        assert coerce_number(1500) == 1500.0
        assert coerce_number(7.25) == 7.25

    def test_parses_numeric_strings(self):
        assert coerce_number("1500") == 1500.0
        assert coerce_number(" 12.5 ") == 12.5

    def test_strips_currency_and_grouping(self):
        assert coerce_number("$1,500") == 1500.0
        assert coerce_number("7.5%") == 7.5

    @pytest.mark.parametrize("value", ["abc", "", "   ", None, [], {}, "1.2.3"])
    def test_unparseable_returns_default(self, value):
        assert coerce_number(value) == 0.0
        assert coerce_number(value, default=42.0) == 42.0

    def test_bool_is_not_a_number(self):
        assert coerce_number(True) == 0.0

    def test_nan_and_inf_fail_closed(self):
        assert coerce_number("nan") == 0.0
        assert coerce_number(float("inf"), default=1.0) == 1.0

    def test_negative_values(self):
        assert coerce_number("-250") == -250.0


class TestCoerceIntAndText:
    """Tests for coerce_int() and coerce_text()."""

    def test_int_truncates(self):
        assert coerce_int("1978.9") == 1978

    def test_int_default(self):
        assert coerce_int("unknown", default=-1) == -1

    def test_text_strips(self):
        assert coerce_text("  Maria  ") == "Maria"

    def test_text_from_integral_float(self):
        assert coerce_text(1978.0) == "1978"
        assert coerce_text(2.5) == "2.5"

    def test_text_default_for_non_scalars(self):
        assert coerce_text(None, "x") == "x"
        assert coerce_text(True, "x") == "x"
        assert coerce_text(["a"], "x") == "x"


class TestCoerceTristate:
    """Tests for coerce_tristate() — unrecognized values stay unknown."""

    @pytest.mark.parametrize("value,expected", [
        ("yes", TriState.YES),
        ("NO", TriState.NO),
        (" Unknown ", TriState.UNKNOWN),
        (True, TriState.YES),
        (False, TriState.NO),
        (TriState.NO, TriState.NO),
    ])
    def test_recognized(self, value, expected):
        assert coerce_tristate(value) == expected

    @pytest.mark.parametrize("value", [None, "", "maybe", "n", 0, 1, "false"])
    def test_unrecognized_is_unknown(self, value):
        assert coerce_tristate(value) == TriState.UNKNOWN


class TestCoerceChoiceAndRecords:
    """Tests for coerce_choice() and coerce_records()."""

    def test_choice_case_insensitive(self):
        assert coerce_choice("Single_Agent", ["single_agent", "transaction_broker"], "transaction_broker") == "single_agent"

    def test_choice_unknown_uses_default(self):
        assert coerce_choice("dual_agent", ["single_agent", "transaction_broker"], "transaction_broker") == "transaction_broker"
        assert coerce_choice(None, ["a"], "a") == "a"

    def test_records_builds_models(self):
        items = coerce_records([{"description": "Fee", "unit_price": 10}], LineItem)
        assert len(items) == 1
        assert items[0].line_total == 10.0

    def test_records_skips_malformed_entries(self):
        raw = [
            {"address": "1 Main St", "adjusted_price": 100000},
            "not a record",
            {"address": "2 Main St", "weight": -1},
        ]
        records = coerce_records(raw, ComparableRecord)
        assert [r.address for r in records] == ["1 Main St"]

    def test_records_non_list_is_empty(self):
        assert coerce_records("oops", LineItem) == []
        assert coerce_records(None, LineItem) == []


class TestIsFilled:
    def test_blank_strings_are_not_filled(self):
        assert not is_filled("")
        assert not is_filled("   ")
        assert not is_filled(None)
        assert not is_filled([])

    def test_values_are_filled(self):
        assert is_filled("x")
        assert is_filled(0)
        assert is_filled(False)
        assert is_filled([{}])


class TestFieldRegistry:
    """Tests for FieldRegistry.validate() and ResolvedFields."""

    @pytest.fixture
    def registry(self):
        return FieldRegistry([
            text_field("tenant_name", required=True),
            number_field("monthly_rent", required=True),
            flag_field("has_pets"),
            tristate_field("has_prior_flooding"),
            choice_field("condition", ["as_is", "warranted"], default="as_is"),
            records_field("items"),
        ])

    def test_duplicate_spec_rejected(self):
        with pytest.raises(ValueError, match="Duplicate"):
            FieldRegistry([text_field("a"), number_field("a")])

    def test_required_and_optional_names(self, registry):
        assert registry.required_names == ["tenant_name", "monthly_rent"]
        assert "has_pets" in registry.optional_names

    def test_defaults_for_empty_input(self, registry):
        fields = registry.validate({})
        assert fields["tenant_name"] == ""
        assert fields["monthly_rent"] == 0.0
        assert fields["has_pets"] is False
        assert fields["has_prior_flooding"] == TriState.UNKNOWN
        assert fields["condition"] == "as_is"
        assert fields["items"] == []

    def test_missing_required_warnings(self, registry):
        fields = registry.validate({})
        assert "Missing required field: tenant_name" in fields.warnings
        assert "Missing required field: monthly_rent" in fields.warnings

    def test_malformed_values_warn_and_degrade(self, registry):
        fields = registry.validate({
            "tenant_name": "Maria",
            "monthly_rent": "lots",
            "has_pets": "yes",
            "has_prior_flooding": "maybe",
            "condition": "like new",
        })
        assert fields["monthly_rent"] == 0.0
        assert fields["has_pets"] is False
        assert fields["has_prior_flooding"] == TriState.UNKNOWN
        assert fields["condition"] == "as_is"
        assert len(fields.warnings) == 4
        assert all(w.startswith("Malformed value for") for w in fields.warnings)

    def test_blank_optional_answers_are_not_malformed(self, registry):
        fields = registry.validate({
            "tenant_name": "Maria",
            "monthly_rent": 1500,
            "has_pets": "",
            "has_prior_flooding": "  ",
            "condition": "",
        })
        assert fields["has_prior_flooding"] == TriState.UNKNOWN
        assert fields["condition"] == "as_is"
        assert fields.warnings == ()

    def test_coerces_declared_types(self, registry):
        fields = registry.validate({
            "tenant_name": " Maria ",
            "monthly_rent": "$1,500",
            "has_pets": "true",
            "has_prior_flooding": "Yes",
        })
        assert fields["tenant_name"] == "Maria"
        assert fields["monthly_rent"] == 1500.0
        assert fields["has_pets"] is True
        assert fields["has_prior_flooding"] == TriState.YES
        assert fields.warnings == ()

    def test_non_mapping_input_uses_defaults(self, registry):
        fields = registry.validate("not a map")
        assert fields["monthly_rent"] == 0.0

    def test_resolved_fields_are_read_only(self, registry):
        fields = registry.validate({"tenant_name": "Maria"})
        with pytest.raises(TypeError):
            fields["tenant_name"] = "Other"  # type: ignore[index]
        with pytest.raises(TypeError):
            fields.raw["tenant_name"] = "Other"  # type: ignore[index]

    def test_input_map_not_mutated(self, registry):
        inputs = {"tenant_name": "Maria", "monthly_rent": "1500"}
        snapshot = dict(inputs)
        registry.validate(inputs)
        assert inputs == snapshot

    def test_undeclared_keys_fall_through(self, registry):
        fields = registry.validate({"extra": "value"})
        assert fields.text("extra") == "value"
        assert "extra" in list(fields)

    def test_records_helper(self, registry):
        fields = registry.validate({"items": [{"description": "Fee", "quantity": 2, "unit_price": 5}]})
        items = fields.records("items", LineItem)
        assert items[0].line_total == 10.0

    def test_text_prefers_supplied_then_caller_default(self, registry):
        assert registry.validate({}).text("tenant_name", "[Tenant]") == "[Tenant]"
        assert registry.validate({"tenant_name": " "}).text("tenant_name", "[Tenant]") == "[Tenant]"
        assert registry.validate({"tenant_name": "Maria"}).text("tenant_name", "[Tenant]") == "Maria"

    def test_text_falls_back_to_declared_default(self):
        fields = FieldRegistry([text_field("payment_terms", default="Net 30")]).validate({})
        assert fields.text("payment_terms") == "Net 30"

    def test_text_of_choice_field_is_coerced(self, registry):
        assert registry.validate({"condition": "like new"}).text("condition", "[Condition]") == "as_is"

    def test_was_supplied(self, registry):
        fields = registry.validate({"tenant_name": "Maria"})
        assert fields.was_supplied("tenant_name")
        assert not fields.was_supplied("monthly_rent")


class TestResolvedFieldsHelpers:
    def test_accessors_never_raise(self):
        fields = ResolvedFields({}, {})
        assert fields.text("x", "dflt") == "dflt"
        assert fields.number("x") == 0.0
        assert fields.integer("x", 7) == 7
        assert fields.flag("x") is False
        assert fields.tristate("x") == TriState.UNKNOWN
        assert fields.records("x", LineItem) == []
        assert not fields.filled("x")

    def test_number_nan_never_leaks(self):
        fields = ResolvedFields({"x": "NaN"}, {})
        assert not math.isnan(fields.number("x"))
