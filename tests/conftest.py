"""Shared fixtures for the document generator test suite."""

from __future__ import annotations

import copy

import pytest

from composer import DocumentTemplate, para
from generate_samples import SAMPLE_INPUTS
from schemas import Adjustment, ComparableRecord, LineItem
from section_selector import SectionRule, filled, flag


# ---------------------------------------------------------------------------
# Factory functions
# ---------------------------------------------------------------------------


def make_comparable(**overrides) -> ComparableRecord:
    """Factory for a ComparableRecord with one +$15,000 Bedrooms adjustment."""
    defaults = {
        "address": "4712 Ridgeline Ct",
        "sale_price": 470000,
        "sale_date": "2024-11-03",
        "bedrooms": 2,
        "bathrooms": 2,
        "square_feet": 1720,
        "year_built": 1966,
        "weight": 1.0,
        "adjustments": [Adjustment(category="Bedrooms", amount=15000)],
        "total_adjustment": 15000,
        "adjusted_price": 485000,
    }
    defaults.update(overrides)
    return ComparableRecord(**defaults)


def make_line_item(**overrides) -> LineItem:
    defaults = {"description": "Title search", "quantity": 1, "unit_price": 250}
    defaults.update(overrides)
    return LineItem(**defaults)


def make_lease_inputs(**overrides) -> dict:
    """Minimal complete input map for florida_lease (post-1978, no options)."""
    defaults = {
        "landlord_name": "Coastal Rentals LLC",
        "tenant_name": "Maria Delgado",
        "property_address": "2417 Bayshore Dr, Tampa, FL 33606",
        "monthly_rent": 1500,
        "security_deposit": 1500,
        "pet_deposit": 0,
        "lease_start": "2025-04-01",
        "lease_end": "2026-03-31",
        "year_built": 1995,
    }
    defaults.update(overrides)
    return defaults


def make_toggle_template(**overrides) -> DocumentTemplate:
    """Small template with required sections around four optional ones."""

    def body(text):
        return lambda ctx: [para(text)]

    defaults = {
        "name": "toggle_test",
        "title": "TOGGLE TEST",
        "description": "Template used to exercise section selection",
        "fields": [],
        "sections": [
            SectionRule("intro", "Introduction", body("intro")),
            SectionRule("alpha", "Alpha", body("alpha"), flag("alpha")),
            SectionRule("beta", "Beta", body("beta"), flag("beta")),
            SectionRule("middle", "Middle", body("middle")),
            SectionRule("gamma", "Gamma", body("gamma"), flag("gamma")),
            SectionRule("notes", "Notes", body("notes"), filled("notes")),
        ],
        "addenda": [
            SectionRule("alpha_addendum", "Alpha Addendum", body("a"), flag("alpha")),
            SectionRule("gamma_addendum", "Gamma Addendum", body("g"), flag("gamma")),
        ],
    }
    defaults.update(overrides)
    return DocumentTemplate(**defaults)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_inputs():
    """Deep copy of every template's sample input map."""
    return copy.deepcopy(SAMPLE_INPUTS)


@pytest.fixture
def lease_inputs():
    return make_lease_inputs()


@pytest.fixture
def comparables():
    """Three comparables: positive, negative, and zero adjustments."""
    return [
        make_comparable(),
        make_comparable(
            address="101 Crestview Ln",
            sale_price=512000,
            bedrooms=4,
            adjustments=[Adjustment(category="Bedrooms", amount=-10000)],
            total_adjustment=-10000,
            adjusted_price=502000,
            weight=3.0,
        ),
        make_comparable(
            address="39 Palm Way",
            sale_price=478500,
            bedrooms=3,
            adjustments=[],
            total_adjustment=None,
            adjusted_price=478500,
        ),
    ]


@pytest.fixture
def toggle_template():
    return make_toggle_template()
