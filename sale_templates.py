"""Sale-side templates: purchase contract, escalation addendum, listing
agreement, bill of sale, and comparative market analysis."""

from __future__ import annotations

import logging

from calculators import (
    adjusted_price_cell,
    adjusted_price_range,
    adjustment_cell,
    balance_due_at_closing,
    commission_amount,
    escalated_price,
    price_per_square_foot,
    tristate_options,
    weighted_average_price,
)
from composer import (
    DocumentTemplate,
    RenderContext,
    checkboxes,
    field_table,
    para,
    placeholder,
    strong,
    table,
)
from field_resolver import (
    choice_field,
    flag_field,
    integer_field,
    number_field,
    records_field,
    text_field,
    tristate_field,
)
from formatters import (
    format_amount_or_placeholder,
    format_currency,
    format_currency_strict,
    format_decimal,
    format_percent,
)
from schemas import ComparableRecord, InspectionItem, LabelStyle, LineItem, Span, Tone
from section_selector import (
    SectionRule,
    any_of,
    built_before,
    expand_toggle_rows,
    filled,
    flag,
    not_equals,
)

log = logging.getLogger(__name__)

PRE_1978 = built_before("year_built", 1978)

FINANCING_TYPES = ["cash", "conventional", "fha", "va"]

FINANCING_LABELS = {
    "cash": "Cash (no financing contingency)",
    "conventional": "Conventional",
    "fha": "FHA",
    "va": "VA",
}


def _party_signatures(*roles: tuple[str, str]):
    """Signature builder for fixed (role, field) pairs."""
    def build(ctx: RenderContext) -> list[str]:
        return [f"{role}: {ctx.fields.text(name, f'[{role}]')}" for role, name in roles]
    return build


# ---------------------------------------------------------------------------
# Florida residential purchase contract
# ---------------------------------------------------------------------------

INSPECTION_OPTIONS = [
    ("general", "General home inspection"),
    ("wdo", "Wood-destroying organism (termite) inspection"),
    ("roof", "Roof inspection"),
    ("four_point", "Four-point insurance inspection"),
    ("wind_mitigation", "Wind mitigation inspection"),
    ("mold", "Mold inspection"),
    ("septic", "Septic system inspection"),
    ("survey", "Boundary survey"),
]

PURCHASE_FIELDS = [
    text_field("seller_name", required=True),
    text_field("buyer_name", required=True),
    text_field("property_address", required=True),
    text_field("property_city", required=True),
    text_field("property_county", required=True),
    text_field("property_zip", required=True),
    number_field("purchase_price", required=True),
    number_field("earnest_money", required=True),
    text_field("closing_date", required=True),
    text_field("seller_address"),
    text_field("seller_email"),
    text_field("buyer_address"),
    text_field("buyer_email"),
    text_field("parcel_id"),
    text_field("legal_description"),
    text_field("property_type", default="Single Family Residence"),
    integer_field("year_built"),
    choice_field("financing_type", FINANCING_TYPES, default="conventional"),
    number_field("loan_amount"),
    number_field("max_interest_rate"),
    integer_field("loan_term", default=30),
    integer_field("loan_approval_days", default=30),
    number_field("additional_deposit"),
    text_field("earnest_money_due_date"),
    text_field("escrow_agent_name"),
    text_field("escrow_agent_address"),
    text_field("closing_location"),
    text_field("title_company"),
    choice_field("title_insurance_paid_by", ["seller", "buyer"], default="seller"),
    choice_field("doc_stamps_paid_by", ["seller", "buyer"], default="seller"),
    integer_field("inspection_period_days", default=15),
    choice_field("inspection_contingency_type", ["standard", "as_is"], default="standard"),
    *[flag_field(f"inspect_{key}") for key, _ in INSPECTION_OPTIONS],
    records_field("inspections"),
    tristate_field("has_prior_flooding"),
    text_field("flooding_description"),
    tristate_field("has_flood_claims"),
    tristate_field("has_flood_assistance"),
    flag_field("has_hoa"),
    text_field("hoa_name"),
    number_field("hoa_assessment"),
    text_field("hoa_assessment_frequency", default="month"),
    tristate_field("lead_paint_known"),
    text_field("lead_paint_details"),
    flag_field("lead_reports_available"),
    flag_field("lead_inspection_waived"),
    text_field("known_defects"),
    text_field("past_repairs"),
    tristate_field("has_environmental_issues"),
    text_field("environmental_details"),
    flag_field("mediation_required"),
    text_field("additional_provisions"),
]


def _purchase_intro(ctx: RenderContext) -> list:
    f = ctx.fields
    return [para(
        strong(f.text("seller_name", "[Seller]")),
        " (\"Seller\") and ",
        strong(f.text("buyer_name", "[Buyer]")),
        " (\"Buyer\") agree that Seller shall sell and Buyer shall buy the property described "
        "below on the terms of this Contract.",
    )]


def _purchase_parties(ctx: RenderContext) -> list:
    f = ctx.fields
    return [field_table([
        ("Seller:", f.text("seller_name", "[Seller]")),
        ("Seller Address:", f.text("seller_address", "---")),
        ("Seller Email:", f.text("seller_email", "---")),
        ("Buyer:", f.text("buyer_name", "[Buyer]")),
        ("Buyer Address:", f.text("buyer_address", "---")),
        ("Buyer Email:", f.text("buyer_email", "---")),
    ])]


def _purchase_property(ctx: RenderContext) -> list:
    f = ctx.fields
    city_line = ", ".join(
        part for part in (f.text("property_city"), f.text("property_zip")) if part
    )
    return [field_table([
        ("Street Address:", f.text("property_address", "[Property Address]")),
        ("City / ZIP:", city_line or "[City, ZIP]"),
        ("County:", f.text("property_county", "[County]")),
        ("Parcel ID:", f.text("parcel_id", "---")),
        ("Legal Description:", f.text("legal_description", "---")),
        ("Property Type:", f.text("property_type")),
        ("Year Built:", str(f.integer("year_built")) if f.integer("year_built") else "---"),
    ])]


def _loan_amount(ctx: RenderContext) -> float:
    if ctx.fields["financing_type"] == "cash":
        return 0.0
    return ctx.fields.number("loan_amount")


def _purchase_price(ctx: RenderContext) -> list:
    f = ctx.fields
    price = f.number("purchase_price")
    deposits = [f.number("earnest_money"), f.number("additional_deposit")]
    loan = _loan_amount(ctx)
    balance = balance_due_at_closing(price, deposits, loan)
    return [
        table(
            ["Item", "Amount"],
            [
                ("Purchase Price", format_amount_or_placeholder(price)),
                ("Initial Deposit", format_currency(deposits[0])),
                ("Additional Deposit", format_currency(deposits[1])),
                ("Financing", format_currency(loan)),
                ("Balance Due at Closing", format_currency_strict(balance) if price else "[Amount]"),
            ],
            emphasize_last_row=True,
        ),
        para(
            "The balance is due in cash or by wire transfer at closing, subject to adjustments "
            "and prorations.",
            small=True,
        ),
    ]


def _purchase_deposits(ctx: RenderContext) -> list:
    f = ctx.fields
    return [para(
        "Buyer's initial deposit of ",
        strong(format_amount_or_placeholder(f.number("earnest_money"))),
        " shall be delivered to ",
        strong(f.text("escrow_agent_name", "[Escrow Agent]")),
        f" ({f.text('escrow_agent_address', '[Escrow Address]')}) by ",
        f.text("earnest_money_due_date", "three (3) days after the Effective Date"),
        ".",
    )]


def _purchase_financing(ctx: RenderContext) -> list:
    f = ctx.fields
    rate = f.number("max_interest_rate")
    return [
        para(
            "This Contract is contingent upon Buyer obtaining a ",
            strong(FINANCING_LABELS[f["financing_type"]]),
            " loan of ",
            strong(format_amount_or_placeholder(f.number("loan_amount"))),
            f" for a term of {f.integer('loan_term', 30)} years",
            f" at an interest rate not to exceed {format_percent(rate, 2)}" if rate else "",
            ".",
        ),
        para(
            f"Buyer shall obtain loan approval within {f.integer('loan_approval_days', 30)} days after "
            "the Effective Date. If approval is not obtained, either party may cancel this Contract "
            "and Buyer's deposit shall be refunded.",
        ),
    ]


def _purchase_inspections(ctx: RenderContext) -> list:
    f = ctx.fields
    days = f.integer("inspection_period_days", 15)
    if f["inspection_contingency_type"] == "as_is":
        lead = (
            f"Buyer accepts the property in its AS IS condition but may conduct inspections within "
            f"{days} days and cancel in Buyer's sole discretion."
        )
    else:
        lead = (
            f"Buyer may conduct the inspections selected below within {days} days after the "
            "Effective Date. Seller shall make repairs as provided in this Contract."
        )
    blocks = [
        para(lead),
        checkboxes("Inspections", expand_toggle_rows(f, INSPECTION_OPTIONS, prefix="inspect_")),
    ]
    extra = f.records("inspections", InspectionItem)
    if extra:
        blocks.append(table(
            ["Inspection", "Selected", "Days", "Paid By"],
            [
                (item.name, "Yes" if item.selected else "No",
                 str(item.days) if item.days else str(days), item.paid_by or "Buyer")
                for item in extra
            ],
        ))
    return blocks


def _purchase_title_closing(ctx: RenderContext) -> list:
    f = ctx.fields
    return [field_table([
        ("Closing Date:", f.text("closing_date", "[Closing Date]")),
        ("Closing Location:", f.text("closing_location", "Title agent's office or by mail")),
        ("Title Company:", f.text("title_company", "---")),
        ("Owner's Title Policy Paid By:", f["title_insurance_paid_by"].title()),
        ("Documentary Stamps on Deed Paid By:", f["doc_stamps_paid_by"].title()),
    ])]


def _purchase_hoa(ctx: RenderContext) -> list:
    f = ctx.fields
    assessment = f.number("hoa_assessment")
    return [
        para(
            "The property is subject to ",
            strong(f.text("hoa_name", "[Association]")),
            ". Current assessments are ",
            strong(format_amount_or_placeholder(assessment)),
            f" per {f.text('hoa_assessment_frequency', 'month')}.",
        ),
        para(
            "IF THE DISCLOSURE SUMMARY REQUIRED BY SECTION 720.401, FLORIDA STATUTES, HAS NOT BEEN "
            "PROVIDED TO THE PROSPECTIVE PURCHASER BEFORE EXECUTING THIS CONTRACT FOR SALE, THIS "
            "CONTRACT IS VOIDABLE BY BUYER.",
            small=True,
        ),
    ]


def _purchase_lead_paint(ctx: RenderContext) -> list:
    f = ctx.fields
    blocks = [
        para(
            "The residence was built before 1978. Seller discloses the following regarding "
            "lead-based paint and lead-based paint hazards:"
        ),
        checkboxes("Seller has knowledge of lead-based paint in the housing", tristate_options(f["lead_paint_known"])),
    ]
    if f.filled("lead_paint_details"):
        blocks.append(para("Details: ", f.text("lead_paint_details")))
    blocks.append(checkboxes("Reports and waivers", expand_toggle_rows(f, [
        ("lead_reports_available", "Seller has provided all available records and reports"),
        ("lead_inspection_waived", "Buyer waives the 10-day lead-based paint inspection opportunity"),
    ])))
    return blocks


def _purchase_disclosures(ctx: RenderContext) -> list:
    f = ctx.fields
    blocks = [
        para(strong("Radon Gas (§ 404.056): "),
             "Radon is a naturally occurring radioactive gas that, when accumulated in a building in "
             "sufficient quantities, may present health risks to persons exposed to it over time."),
        para(strong("Property Tax (§ 689.261): "),
             "Buyer should not rely on Seller's current property taxes as the amount of taxes Buyer "
             "will be obligated to pay after purchase. A change of ownership or improvements may "
             "trigger reassessment."),
        para(strong("Flood Disclosure (§ 689.302):")),
        checkboxes("Seller is aware of flooding that damaged the property", tristate_options(f["has_prior_flooding"])),
        checkboxes("Seller has filed a flood insurance claim", tristate_options(f["has_flood_claims"])),
        checkboxes("Seller has received federal flood disaster assistance", tristate_options(f["has_flood_assistance"])),
    ]
    if f.filled("flooding_description"):
        blocks.append(para("Flood details: ", f.text("flooding_description")))
    blocks.append(para(
        strong("Energy Efficiency (§ 553.996): "),
        "Buyer may have the building's energy-efficiency rating determined.",
    ))
    return blocks


def _purchase_seller_disclosure(ctx: RenderContext) -> list:
    f = ctx.fields
    blocks = [field_table([
        ("Known Defects:", f.text("known_defects", "None disclosed")),
        ("Past Repairs:", f.text("past_repairs", "None disclosed")),
    ])]
    blocks.append(checkboxes(
        "Seller is aware of environmental issues affecting the property",
        tristate_options(f["has_environmental_issues"]),
    ))
    if f.filled("environmental_details"):
        blocks.append(para("Environmental details: ", f.text("environmental_details")))
    return blocks


def _mediation(ctx: RenderContext) -> list:
    return [para(
        "Any unresolved dispute arising out of this agreement shall first be submitted to mediation "
        "under the rules of the American Arbitration Association or another mediator agreed upon by "
        "the parties before either party may file suit."
    )]


def _additional_provisions(ctx: RenderContext) -> list:
    return [para(ctx.fields.text("additional_provisions"))]


FLORIDA_PURCHASE_CONTRACT = DocumentTemplate(
    name="florida_purchase_contract",
    title="RESIDENTIAL CONTRACT FOR SALE AND PURCHASE",
    subtitle="State of Florida",
    description=(
        "Florida residential purchase contract with mandatory disclosures (radon, property tax, "
        "flood, HOA, energy, lead paint)"
    ),
    fields=PURCHASE_FIELDS,
    intro=_purchase_intro,
    sections=[
        SectionRule("parties", "Parties", _purchase_parties),
        SectionRule("property", "Property Description", _purchase_property),
        SectionRule("purchase_price", "Purchase Price and Balance Due", _purchase_price),
        SectionRule("deposits", "Deposits and Escrow", _purchase_deposits),
        SectionRule("financing", "Financing Contingency", _purchase_financing, not_equals("financing_type", "cash")),
        SectionRule("inspections", "Inspections", _purchase_inspections),
        SectionRule("title_closing", "Title and Closing", _purchase_title_closing),
        SectionRule("hoa", "Homeowners' Association Disclosure", _purchase_hoa, flag("has_hoa")),
        SectionRule("lead_paint", "Lead-Based Paint Disclosure", _purchase_lead_paint, PRE_1978),
        SectionRule("disclosures", "Statutory Disclosures", _purchase_disclosures),
        SectionRule("seller_disclosure", "Seller's Property Disclosure", _purchase_seller_disclosure),
        SectionRule("mediation", "Mediation", _mediation, flag("mediation_required")),
        SectionRule("additional_provisions", "Additional Provisions", _additional_provisions,
                    filled("additional_provisions")),
    ],
    signatures=_party_signatures(("Buyer", "buyer_name"), ("Seller", "seller_name")),
    disclaimer="This form is provided for convenience and is not legal advice.",
    include_toc=True,
)


# ---------------------------------------------------------------------------
# Escalation addendum
# ---------------------------------------------------------------------------

ESCALATION_FIELDS = [
    text_field("seller_name", required=True),
    text_field("buyer_name", required=True),
    text_field("property_address", required=True),
    text_field("contract_date", required=True),
    number_field("base_purchase_price", required=True),
    number_field("escalation_increment", required=True),
    number_field("maximum_purchase_price", required=True),
    number_field("competing_offer"),
    text_field("escalation_deadline"),
    flag_field("require_full_offer_copy"),
    integer_field("proof_deadline_hours", default=24),
    flag_field("appraisal_gap_coverage"),
    number_field("appraisal_gap_amount"),
    flag_field("appraisal_waiver"),
    choice_field("financing_type", FINANCING_TYPES, default="conventional"),
    integer_field("updated_proof_days", default=3),
    flag_field("additional_down_payment_available"),
    number_field("additional_funds"),
    flag_field("increase_earnest_money"),
    number_field("additional_earnest_percentage"),
    integer_field("additional_earnest_days", default=3),
    flag_field("has_additional_parties"),
    text_field("additional_buyer_name"),
    text_field("additional_seller_name"),
    text_field("additional_terms"),
]


def _escalation_intro(ctx: RenderContext) -> list:
    f = ctx.fields
    return [para(
        "This Addendum is made part of the Contract dated ",
        strong(f.text("contract_date", "[Contract Date]")),
        " between ",
        strong(f.text("seller_name", "[Seller]")),
        " and ",
        strong(f.text("buyer_name", "[Buyer]")),
        " for the property at ",
        strong(f.text("property_address", "[Property Address]")),
        ".",
    )]


def _escalation_terms(ctx: RenderContext) -> list:
    f = ctx.fields
    base = f.number("base_purchase_price")
    increment = f.number("escalation_increment")
    maximum = f.number("maximum_purchase_price")
    blocks = [
        field_table([
            ("Base Purchase Price:", format_amount_or_placeholder(base)),
            ("Escalation Increment:", format_amount_or_placeholder(increment)),
            ("Maximum Purchase Price:", format_amount_or_placeholder(maximum)),
            ("Escalation Deadline:", f.text("escalation_deadline", "Until Seller accepts an offer")),
        ]),
        para(
            "If Seller receives a bona fide competing offer with a net price equal to or greater "
            "than the Base Purchase Price, the Purchase Price shall increase to the competing net "
            "price plus the Escalation Increment, but shall not exceed the Maximum Purchase Price."
        ),
    ]
    competing = f.number("competing_offer")
    price = escalated_price(competing, increment, maximum)
    if price is not None:
        capped = maximum > 0 and competing + increment > maximum
        blocks.append(table(
            ["Competing Offer", "Increment", "Escalated Price"],
            [(
                format_currency(competing),
                format_currency(increment),
                [Span(text=format_currency(price), tone=Tone.STRONG)]
                + ([Span(text=" (capped)", tone=Tone.MUTED)] if capped else []),
            )],
        ))
    return blocks


def _escalation_bona_fide(ctx: RenderContext) -> list:
    f = ctx.fields
    hours = f.integer("proof_deadline_hours", 24)
    if f.flag("require_full_offer_copy"):
        proof = "a complete copy of the competing offer, with personal information redacted"
    else:
        proof = "the signature page and price terms of the competing offer"
    return [para(
        f"Before the Purchase Price escalates, Seller shall deliver to Buyer {proof} within "
        f"{hours} hours of accepting this escalation. A competing offer that is itself an "
        "escalation offer is not a bona fide offer for this purpose.",
    )]


def _escalation_appraisal(ctx: RenderContext) -> list:
    f = ctx.fields
    if f.flag("appraisal_waiver"):
        return [para(
            "Buyer waives the appraisal contingency. If the appraised value is less than the "
            "escalated Purchase Price, Buyer shall pay the difference in cash at closing."
        )]
    return [para(
        "If the appraised value is less than the escalated Purchase Price, Buyer shall cover a "
        "shortfall of up to ",
        strong(format_amount_or_placeholder(f.number("appraisal_gap_amount"))),
        " in additional cash at closing.",
    )]


def _escalation_financing(ctx: RenderContext) -> list:
    f = ctx.fields
    blocks = [para(
        f"Buyer shall deliver updated {FINANCING_LABELS[f['financing_type']]} pre-approval reflecting "
        f"the escalated price within {f.integer('updated_proof_days', 3)} days.",
    )]
    if f.flag("additional_down_payment_available"):
        blocks.append(para(
            "Buyer has additional funds available for down payment of ",
            strong(format_amount_or_placeholder(f.number("additional_funds"))),
            ".",
        ))
    return blocks


def _escalation_earnest(ctx: RenderContext) -> list:
    f = ctx.fields
    pct = f.number("additional_earnest_percentage")
    return [para(
        "Buyer shall increase the earnest money deposit by ",
        strong(format_percent(pct, 1) if pct else "[Percentage]"),
        " of the amount by which the Purchase Price escalates, within "
        f"{f.integer('additional_earnest_days', 3)} days of escalation.",
    )]


def _escalation_parties(ctx: RenderContext) -> list:
    f = ctx.fields
    return [field_table([
        ("Additional Buyer:", f.text("additional_buyer_name", "---")),
        ("Additional Seller:", f.text("additional_seller_name", "---")),
    ])]


def _escalation_signatures(ctx: RenderContext) -> list[str]:
    f = ctx.fields
    parties = [f"Buyer: {f.text('buyer_name', '[Buyer]')}"]
    if f.flag("has_additional_parties") and f.filled("additional_buyer_name"):
        parties.append(f"Buyer: {f.text('additional_buyer_name')}")
    parties.append(f"Seller: {f.text('seller_name', '[Seller]')}")
    if f.flag("has_additional_parties") and f.filled("additional_seller_name"):
        parties.append(f"Seller: {f.text('additional_seller_name')}")
    return parties


FLORIDA_ESCALATION_ADDENDUM = DocumentTemplate(
    name="florida_escalation_addendum",
    title="ESCALATION ADDENDUM TO CONTRACT FOR SALE AND PURCHASE",
    description="Escalation addendum with maximum price cap and bona fide offer verification",
    fields=ESCALATION_FIELDS,
    intro=_escalation_intro,
    sections=[
        SectionRule("escalation", "Escalation of Purchase Price", _escalation_terms),
        SectionRule("bona_fide_offer", "Proof of Competing Offer", _escalation_bona_fide),
        SectionRule("appraisal_gap", "Appraisal Gap", _escalation_appraisal,
                    any_of(flag("appraisal_gap_coverage"), flag("appraisal_waiver"))),
        SectionRule("financing_proof", "Financing", _escalation_financing, not_equals("financing_type", "cash")),
        SectionRule("earnest_money", "Additional Earnest Money", _escalation_earnest, flag("increase_earnest_money")),
        SectionRule("additional_parties", "Additional Parties", _escalation_parties, flag("has_additional_parties")),
        SectionRule("additional_terms", "Additional Terms",
                    lambda ctx: [para(ctx.fields.text("additional_terms"))], filled("additional_terms")),
    ],
    signatures=_escalation_signatures,
)


# ---------------------------------------------------------------------------
# Exclusive listing agreement (§ 475.278 brokerage relationship)
# ---------------------------------------------------------------------------

FINANCING_ACCEPTED = [
    ("cash", "Cash"),
    ("conventional", "Conventional"),
    ("fha", "FHA"),
    ("va", "VA"),
]

MARKETING_OPTIONS = [
    ("list_on_mls", "List on the Multiple Listing Service"),
    ("professional_photos", "Professional photography"),
    ("virtual_tour", "Virtual tour"),
    ("open_houses", "Open houses"),
]

BROKERAGE_DISCLOSURES = {
    "single_agent": (
        "SINGLE AGENT NOTICE",
        "FLORIDA LAW REQUIRES THAT REAL ESTATE LICENSEES OWE THESE DUTIES TO SELLERS WHEN ACTING "
        "AS A SINGLE AGENT: dealing honestly and fairly; loyalty; confidentiality; obedience; full "
        "disclosure; accounting for all funds; skill, care, and diligence; presenting all offers; "
        "and disclosing all known facts that materially affect the value of the property.",
    ),
    "transaction_broker": (
        "TRANSACTION BROKER NOTICE",
        "FLORIDA LAW REQUIRES THAT REAL ESTATE LICENSEES OPERATING AS TRANSACTION BROKERS DISCLOSE "
        "THEIR DUTIES: dealing honestly and fairly; accounting for all funds; using skill, care, and "
        "diligence; disclosing all known facts that materially affect the value of the property; "
        "presenting all offers; limited confidentiality; and any additional duties agreed to in "
        "writing. A transaction broker provides a limited form of representation.",
    ),
}

LISTING_FIELDS = [
    text_field("seller_name", required=True),
    text_field("broker_name", required=True),
    text_field("broker_license", required=True),
    text_field("property_address", required=True),
    number_field("listing_price", required=True),
    text_field("listing_start_date", required=True),
    text_field("listing_expiration_date", required=True),
    number_field("commission_rate", required=True),
    choice_field("brokerage_relationship", ["single_agent", "transaction_broker"], default="transaction_broker"),
    text_field("seller_address"),
    text_field("seller_phone"),
    text_field("seller_email"),
    flag_field("has_additional_seller"),
    text_field("additional_seller_name"),
    text_field("brokerage_firm"),
    text_field("broker_address"),
    text_field("broker_phone"),
    text_field("broker_email"),
    text_field("agent_name"),
    text_field("agent_license"),
    text_field("property_city"),
    text_field("property_county"),
    text_field("property_zip"),
    text_field("parcel_id"),
    text_field("legal_description"),
    text_field("property_type", default="Single Family Residence"),
    number_field("minimum_price"),
    *[flag_field(f"accept_{key}") for key, _ in FINANCING_ACCEPTED],
    text_field("included_items"),
    text_field("excluded_items"),
    choice_field("commission_type", ["percentage", "flat"], default="percentage"),
    number_field("flat_fee"),
    number_field("coop_commission_rate"),
    number_field("coop_flat_fee"),
    integer_field("protection_period_days", default=90),
    *[flag_field(key) for key, _ in MARKETING_OPTIONS],
    flag_field("lockbox_authorized"),
    text_field("showing_instructions"),
    flag_field("property_occupied"),
    text_field("occupant_type"),
    flag_field("has_hoa"),
    flag_field("mediation_required"),
    text_field("additional_provisions"),
    text_field("agreement_date"),
]


def _listing_intro(ctx: RenderContext) -> list:
    f = ctx.fields
    firm = f.text("brokerage_firm") or f.text("broker_name", "[Broker]")
    return [para(
        "This Exclusive Right of Sale Listing Agreement is entered into ",
        f.text("agreement_date", "[Date]"),
        " between ",
        strong(f.text("seller_name", "[Seller]")),
        " (\"Seller\") and ",
        strong(firm),
        " (\"Broker\").",
    )]


def _listing_parties(ctx: RenderContext) -> list:
    f = ctx.fields
    rows = [("Seller:", f.text("seller_name", "[Seller]"))]
    if f.flag("has_additional_seller"):
        rows.append(("Additional Seller:", f.text("additional_seller_name", "[Seller]")))
    rows += [
        ("Seller Contact:", " / ".join(p for p in (f.text("seller_phone"), f.text("seller_email")) if p) or "---"),
        ("Broker:", f"{f.text('broker_name', '[Broker]')} (License {f.text('broker_license', '[License]')})"),
        ("Brokerage Firm:", f.text("brokerage_firm", "---")),
        ("Listing Agent:", f.text("agent_name", "---")),
    ]
    return [field_table(rows)]


def _listing_property(ctx: RenderContext) -> list:
    f = ctx.fields
    return [field_table([
        ("Address:", f.text("property_address", "[Property Address]")),
        ("City / County / ZIP:", " / ".join(
            p for p in (f.text("property_city"), f.text("property_county"), f.text("property_zip")) if p
        ) or "---"),
        ("Parcel ID:", f.text("parcel_id", "---")),
        ("Legal Description:", f.text("legal_description", "---")),
        ("Property Type:", f.text("property_type")),
    ])]


def _listing_term(ctx: RenderContext) -> list:
    f = ctx.fields
    return [para(
        "This Agreement begins on ",
        strong(f.text("listing_start_date", "[Start Date]")),
        " and terminates at 11:59 p.m. on ",
        strong(f.text("listing_expiration_date", "[Expiration Date]")),
        ".",
    )]


def _listing_price(ctx: RenderContext) -> list:
    f = ctx.fields
    blocks = [para(
        "Seller authorizes Broker to list the property at ",
        strong(format_amount_or_placeholder(f.number("listing_price"))),
        ".",
    )]
    if f.number("minimum_price"):
        blocks.append(para(
            "Seller's minimum acceptable price: ", strong(format_currency(f.number("minimum_price"))), ".",
        ))
    blocks.append(checkboxes(
        "Acceptable financing",
        expand_toggle_rows(f, FINANCING_ACCEPTED, prefix="accept_"),
    ))
    return blocks


def _listing_relationship(ctx: RenderContext) -> list:
    heading, text = BROKERAGE_DISCLOSURES[ctx.fields["brokerage_relationship"]]
    return [para(strong(heading)), para(text, small=True)]


def _listing_commission(ctx: RenderContext) -> list:
    f = ctx.fields
    price = f.number("listing_price")
    if f["commission_type"] == "flat":
        terms = format_amount_or_placeholder(f.number("flat_fee"))
        estimate = commission_amount(price, 0.0, f.number("flat_fee"))
    else:
        rate = f.number("commission_rate")
        terms = f"{format_percent(rate, 2)} of the gross sales price" if rate else "[Rate]"
        estimate = commission_amount(price, rate)
    coop_rate = f.number("coop_commission_rate")
    coop = format_percent(coop_rate, 2) if coop_rate else format_currency(f.number("coop_flat_fee"))
    return [
        field_table([
            ("Broker Compensation:", terms),
            ("Estimated at Listing Price:", format_currency(estimate)),
            ("Cooperating Broker Compensation:", coop),
            ("Protection Period:", f"{f.integer('protection_period_days', 90)} days after expiration"),
        ]),
    ]


def _listing_items(ctx: RenderContext) -> list:
    f = ctx.fields
    return [field_table([
        ("Included:", f.text("included_items", "---")),
        ("Excluded:", f.text("excluded_items", "---")),
    ])]


def _listing_marketing(ctx: RenderContext) -> list:
    return [checkboxes("Broker is authorized to", expand_toggle_rows(ctx.fields, MARKETING_OPTIONS))]


def _listing_access(ctx: RenderContext) -> list:
    f = ctx.fields
    occupancy = (
        f"Occupied by {f.text('occupant_type', 'owner')}" if f.flag("property_occupied") else "Vacant"
    )
    return [field_table([
        ("Lockbox Authorized:", "Yes" if f.flag("lockbox_authorized") else "No"),
        ("Occupancy:", occupancy),
        ("Showing Instructions:", f.text("showing_instructions", "Contact listing agent")),
    ])]


def _listing_hoa(ctx: RenderContext) -> list:
    return [para(
        "The property is subject to a homeowners' association. Seller shall provide Broker with the "
        "governing documents and the § 720.401 disclosure summary for delivery to prospective buyers."
    )]


def _listing_signatures(ctx: RenderContext) -> list[str]:
    f = ctx.fields
    parties = [f"Seller: {f.text('seller_name', '[Seller]')}"]
    if f.flag("has_additional_seller"):
        parties.append(f"Seller: {f.text('additional_seller_name', '[Seller]')}")
    parties.append(f"Broker: {f.text('broker_name', '[Broker]')}")
    return parties


FLORIDA_LISTING_AGREEMENT = DocumentTemplate(
    name="florida_listing_agreement",
    title="EXCLUSIVE RIGHT OF SALE LISTING AGREEMENT",
    subtitle="State of Florida",
    description="Florida exclusive listing agreement with § 475.278 brokerage relationship disclosure",
    fields=LISTING_FIELDS,
    intro=_listing_intro,
    sections=[
        SectionRule("parties", "Parties", _listing_parties),
        SectionRule("property", "Property", _listing_property),
        SectionRule("term", "Term", _listing_term),
        SectionRule("price", "Listing Price and Terms", _listing_price),
        SectionRule("brokerage_relationship", "Brokerage Relationship", _listing_relationship),
        SectionRule("commission", "Compensation", _listing_commission),
        SectionRule("items", "Included and Excluded Items", _listing_items,
                    any_of(filled("included_items"), filled("excluded_items"))),
        SectionRule("marketing", "Marketing", _listing_marketing),
        SectionRule("access", "Access and Showings", _listing_access),
        SectionRule("hoa", "Homeowners' Association", _listing_hoa, flag("has_hoa")),
        SectionRule("mediation", "Mediation", _mediation, flag("mediation_required")),
        SectionRule("additional_provisions", "Additional Provisions", _additional_provisions,
                    filled("additional_provisions")),
    ],
    signatures=_listing_signatures,
    disclaimer="This form is provided for convenience and is not legal advice.",
)


# ---------------------------------------------------------------------------
# Bill of sale
# ---------------------------------------------------------------------------

BILL_OF_SALE_FIELDS = [
    text_field("seller_name", required=True),
    text_field("buyer_name", required=True),
    text_field("sale_date", required=True),
    records_field("items", required=True),
    number_field("price"),
    text_field("seller_address"),
    text_field("buyer_address"),
    text_field("payment_method", default="cash"),
    choice_field("condition", ["as_is", "warranted"], default="as_is"),
    text_field("warranty_terms"),
    tristate_field("has_liens"),
    text_field("lien_details"),
]


def _sale_price(ctx: RenderContext) -> float:
    explicit = ctx.fields.number("price")
    if explicit:
        return explicit
    return sum(item.line_total for item in ctx.fields.records("items", LineItem))


def _bill_conveyance(ctx: RenderContext) -> list:
    f = ctx.fields
    return [para(
        "For the consideration stated below, ",
        strong(f.text("seller_name", "[Seller]")),
        f" of {f.text('seller_address', '[Address]')} (\"Seller\") sells and transfers to ",
        strong(f.text("buyer_name", "[Buyer]")),
        f" of {f.text('buyer_address', '[Address]')} (\"Buyer\") the personal property listed "
        f"below, effective {f.text('sale_date', '[Date]')}.",
    )]


def _bill_items(ctx: RenderContext) -> list:
    items = ctx.fields.records("items", LineItem)
    if not items:
        return [placeholder("No items listed")]
    return [table(
        ["Description", "Qty", "Unit Price", "Amount"],
        [
            (item.description or "---", format_decimal(item.quantity),
             format_currency(item.unit_price), format_currency(item.line_total))
            for item in items
        ],
    )]


def _bill_price(ctx: RenderContext) -> list:
    return [para(
        "Buyer has paid Seller ",
        strong(format_amount_or_placeholder(_sale_price(ctx))),
        f" by {ctx.fields.text('payment_method', 'cash')}, receipt of which Seller acknowledges.",
    )]


def _bill_condition(ctx: RenderContext) -> list:
    f = ctx.fields
    if f["condition"] == "warranted":
        return [para(
            "Seller warrants the property as follows: ",
            f.text("warranty_terms", "[Warranty Terms]"),
        )]
    return [para(
        "The property is sold AS IS, WHERE IS, with no warranty of condition, merchantability, or "
        "fitness for a particular purpose."
    )]


def _bill_liens(ctx: RenderContext) -> list:
    f = ctx.fields
    blocks = [checkboxes("The property is subject to liens or encumbrances", tristate_options(f["has_liens"]))]
    if f.filled("lien_details"):
        blocks.append(para("Details: ", f.text("lien_details")))
    blocks.append(para(
        "Seller warrants that Seller has good title to the property and the right to sell it."
    ))
    return blocks


BILL_OF_SALE = DocumentTemplate(
    name="bill_of_sale",
    title="BILL OF SALE",
    description="Bill of sale for personal property with condition and lien disclosures",
    fields=BILL_OF_SALE_FIELDS,
    sections=[
        SectionRule("conveyance", "Conveyance", _bill_conveyance),
        SectionRule("items", "Property Sold", _bill_items),
        SectionRule("price", "Purchase Price", _bill_price),
        SectionRule("condition", "Condition", _bill_condition),
        SectionRule("liens", "Title and Liens", _bill_liens),
    ],
    signatures=_party_signatures(("Seller", "seller_name"), ("Buyer", "buyer_name")),
)


# ---------------------------------------------------------------------------
# Comparative market analysis
# ---------------------------------------------------------------------------

# (adjustment category, ComparableRecord attribute, subject field)
CMA_CATEGORIES = [
    ("Bedrooms", "bedrooms", "subject_bedrooms"),
    ("Bathrooms", "bathrooms", "subject_bathrooms"),
    ("Square Feet", "square_feet", "subject_square_feet"),
    ("Year Built", "year_built", "subject_year_built"),
    ("Lot Size", "lot_size", "subject_lot_size"),
]

CMA_FIELDS = [
    text_field("subject_address", required=True),
    records_field("comparables", required=True),
    number_field("subject_bedrooms"),
    number_field("subject_bathrooms"),
    number_field("subject_square_feet"),
    integer_field("subject_year_built"),
    text_field("subject_lot_size"),
    text_field("prepared_for"),
    text_field("prepared_by"),
    text_field("report_date"),
    text_field("notes"),
]

NO_COMPARABLES = "No comparable sales available"


def _subject_value(ctx: RenderContext, name: str) -> str:
    value = ctx.fields[name]
    if isinstance(value, str):
        return value or "---"
    return format_decimal(value) if value else "---"


def _cma_intro(ctx: RenderContext) -> list:
    f = ctx.fields
    return [field_table([
        ("Prepared For:", f.text("prepared_for", "---")),
        ("Prepared By:", f.text("prepared_by", "---")),
        ("Report Date:", f.text("report_date", "---")),
    ])]


def _cma_subject(ctx: RenderContext) -> list:
    rows = [("Address:", ctx.fields.text("subject_address", "[Subject Address]"))]
    rows += [(f"{category}:", _subject_value(ctx, name)) for category, _, name in CMA_CATEGORIES]
    return [field_table(rows)]


def _cma_grid(ctx: RenderContext) -> list:
    comps = ctx.fields.records("comparables", ComparableRecord)
    if not comps:
        return [placeholder(NO_COMPARABLES)]
    log.debug("Building comparables grid with %d record(s)", len(comps))
    header = ["Feature", "Subject"] + [f"Comp {i}" for i in range(1, len(comps) + 1)]
    rows: list[list] = [
        ["Address", ctx.fields.text("subject_address", "---")] + [c.address or "---" for c in comps],
        ["Sale Price", "---"] + [format_currency(c.sale_price) for c in comps],
        ["Sale Date", "---"] + [c.sale_date or "---" for c in comps],
    ]
    for category, attr, subject_name in CMA_CATEGORIES:
        rows.append(
            [category, _subject_value(ctx, subject_name)]
            + [adjustment_cell(c, category, getattr(c, attr)) for c in comps]
        )
    rows.append(["Adjusted Price", "---"] + [adjusted_price_cell(c) for c in comps])
    rows.append(["Weight", "---"] + [format_decimal(c.weight) for c in comps])
    return [table(header, rows, emphasize_last_row=False)]


def _cma_price_per_sqft(ctx: RenderContext) -> list:
    comps = ctx.fields.records("comparables", ComparableRecord)
    if not comps:
        return [placeholder(NO_COMPARABLES)]
    rows = []
    for c in comps:
        ppsf = price_per_square_foot(c.sale_price, c.square_feet)
        adjusted = price_per_square_foot(c.adjusted_price, c.square_feet)
        rows.append((
            c.address or "---",
            f"${format_decimal(ppsf)}" if ppsf else "---",
            f"${format_decimal(adjusted)}" if adjusted else "---",
        ))
    return [table(["Comparable", "Sale $/Sq Ft", "Adjusted $/Sq Ft"], rows)]


def _cma_estimate(ctx: RenderContext) -> list:
    comps = ctx.fields.records("comparables", ComparableRecord)
    estimate = weighted_average_price(comps)
    if estimate is None:
        return [placeholder("Insufficient data for a value estimate")]
    low, high = adjusted_price_range(comps)
    subject_sqft = ctx.fields.number("subject_square_feet")
    ppsf = price_per_square_foot(estimate, subject_sqft)
    return [
        table(
            ["Measure", "Value"],
            [
                ("Adjusted Price Range", f"{format_currency(low)} - {format_currency(high)}"),
                ("Indicated Price per Sq Ft", f"${format_decimal(ppsf)}" if ppsf else "---"),
                ("Weighted Estimate of Value", format_currency(estimate)),
            ],
            emphasize_last_row=True,
        ),
        para(
            "The estimate weights each comparable's adjusted price by its assigned weight. It is "
            "not an appraisal.",
            small=True,
        ),
    ]


COMPARATIVE_MARKET_ANALYSIS = DocumentTemplate(
    name="comparative_market_analysis",
    title="COMPARATIVE MARKET ANALYSIS",
    description="Comparable-sales grid with per-category adjustments and a weighted value estimate",
    fields=CMA_FIELDS,
    intro=_cma_intro,
    sections=[
        SectionRule("subject", "Subject Property", _cma_subject),
        SectionRule("comparables", "Comparable Sales", _cma_grid),
        SectionRule("price_per_sqft", "Price per Square Foot", _cma_price_per_sqft),
        SectionRule("estimate", "Estimated Market Value", _cma_estimate),
        SectionRule("notes", "Notes", lambda ctx: [para(ctx.fields.text("notes"))], filled("notes")),
    ],
    section_style=LabelStyle.ROMAN,
    include_toc=True,
    disclaimer=(
        "A comparative market analysis is an opinion of price prepared by a real estate licensee "
        "and is not an appraisal."
    ),
)
