"""Residential lease and landlord notice templates (Florida, Chapter 83)."""

from __future__ import annotations

from datetime import timedelta

from calculators import (
    TRISTATE_LABELS,
    format_long_date,
    late_fee_total,
    move_in_rows,
    notice_deadline,
    parse_date,
    prorated_first_month,
    tristate_options,
)
from composer import (
    DocumentTemplate,
    RenderContext,
    checkboxes,
    field_table,
    para,
    strong,
    table,
)
from field_resolver import (
    choice_field,
    flag_field,
    integer_field,
    number_field,
    text_field,
    tristate_field,
)
from formatters import format_amount_or_placeholder, format_cents, format_currency
from schemas import CheckboxOption
from section_selector import SectionRule, always, any_of, built_before, equals, filled, flag

PRE_1978 = any_of(flag("is_pre_1978"), built_before("year_built", 1978))

FLOOD_HISTORY = any_of(
    equals("has_prior_flooding", "yes"),
    equals("has_flood_claims", "yes"),
    equals("has_fema_assistance", "yes"),
)

MOVE_IN_COMPONENTS = [
    ("monthly_rent", "First Month's Rent"),
    ("security_deposit", "Security Deposit"),
    ("pet_deposit", "Pet Deposit"),
]


# ---------------------------------------------------------------------------
# Florida residential lease
# ---------------------------------------------------------------------------

LEASE_FIELDS = [
    text_field("landlord_name", required=True),
    text_field("tenant_name", required=True),
    text_field("property_address", required=True),
    number_field("monthly_rent", required=True),
    text_field("lease_start", required=True),
    text_field("lease_end", required=True),
    text_field("landlord_address"),
    text_field("landlord_email"),
    text_field("tenant_email"),
    integer_field("year_built"),
    flag_field("is_pre_1978"),
    tristate_field("known_lead_paint"),
    number_field("security_deposit"),
    number_field("pet_deposit"),
    number_field("pet_rent"),
    number_field("late_fee"),
    integer_field("rent_due_day", default=1),
    text_field("deposit_details"),
    text_field("deposit_holder"),
    flag_field("deposit_interest_bearing"),
    flag_field("has_pets"),
    text_field("pet_description"),
    text_field("tenant_utilities", default="electricity, water, sewer, internet"),
    flag_field("email_consent"),
    flag_field("has_hoa"),
    text_field("hoa_name"),
    tristate_field("has_prior_flooding"),
    tristate_field("has_flood_claims"),
    tristate_field("has_fema_assistance"),
    text_field("flooding_description"),
    text_field("additional_terms"),
]


def _lease_intro(ctx: RenderContext) -> list:
    f = ctx.fields
    return [para(
        "This Residential Lease Agreement (\"Lease\") is made between ",
        strong(f.text("landlord_name", "[Landlord]")),
        " (\"Landlord\") and ",
        strong(f.text("tenant_name", "[Tenant]")),
        " (\"Tenant\") for the premises described below.",
    )]


def _lease_parties(ctx: RenderContext) -> list:
    f = ctx.fields
    return [field_table([
        ("Landlord:", f.text("landlord_name", "[Landlord]")),
        ("Landlord Address:", f.text("landlord_address", "[Address]")),
        ("Landlord Email:", f.text("landlord_email", "---")),
        ("Tenant:", f.text("tenant_name", "[Tenant]")),
        ("Tenant Email:", f.text("tenant_email", "---")),
    ])]


def _lease_premises(ctx: RenderContext) -> list:
    f = ctx.fields
    blocks = [para(
        "Landlord leases to Tenant the residential dwelling located at ",
        strong(f.text("property_address", "[Property Address]")),
        ", together with its fixtures and appliances.",
    )]
    if f.integer("year_built"):
        blocks.append(para(f"Year built: {f.integer('year_built')}."))
    return blocks


def _lease_term(ctx: RenderContext) -> list:
    f = ctx.fields
    return [para(
        "The term of this Lease begins on ",
        strong(f.text("lease_start", "[Start Date]")),
        " and ends on ",
        strong(f.text("lease_end", "[End Date]")),
        ". Any holdover after expiration creates a month-to-month tenancy.",
    )]


def _lease_rent(ctx: RenderContext) -> list:
    f = ctx.fields
    rent = f.number("monthly_rent")
    due_day = f.integer("rent_due_day", 1) or 1
    blocks = [para(
        "Tenant shall pay monthly rent of ",
        strong(format_amount_or_placeholder(rent)),
        f", due on day {due_day} of each month.",
    )]
    if f.number("late_fee"):
        blocks.append(para(
            "Rent received after the fifth day of the month incurs a late fee of ",
            strong(format_currency(f.number("late_fee"))),
            ".",
        ))
    start = parse_date(f.text("lease_start"))
    prorated = prorated_first_month(rent, start)
    if prorated is not None and start.day != 1:
        blocks.append(para(
            "Because the term begins mid-month, the first month's rent is prorated to ",
            strong(format_cents(prorated)),
            ".",
        ))
    rows = move_in_rows(f, MOVE_IN_COMPONENTS)
    blocks.append(table(["Move-In Cost", "Amount"], rows, emphasize_last_row=True))
    return blocks


def _lease_deposit(ctx: RenderContext) -> list:
    f = ctx.fields
    holder = f.text("deposit_holder", "[Depository]")
    interest = "an interest-bearing" if f.flag("deposit_interest_bearing") else "a non-interest-bearing"
    blocks = [
        para(
            "Tenant has paid a security deposit of ",
            strong(format_amount_or_placeholder(f.number("security_deposit"))),
            f". The deposit is held in {interest} account at {holder}, as required by § 83.49, "
            "Florida Statutes.",
        ),
        para(
            "YOUR LEASE REQUIRES PAYMENT OF CERTAIN DEPOSITS. THE LANDLORD MAY TRANSFER ADVANCE RENTS "
            "TO THE LANDLORD'S ACCOUNT AS THEY ARE DUE AND WITHOUT NOTICE. WHEN YOU MOVE OUT, YOU MUST "
            "GIVE THE LANDLORD YOUR NEW ADDRESS SO THAT THE LANDLORD CAN SEND YOU NOTICES REGARDING "
            "YOUR DEPOSIT.",
            small=True,
        ),
    ]
    if f.filled("deposit_details"):
        blocks.append(para(f.text("deposit_details")))
    return blocks


def _lease_pets(ctx: RenderContext) -> list:
    f = ctx.fields
    blocks = [para(
        "Tenant may keep the following pet(s): ",
        strong(f.text("pet_description", "[Pet Description]")),
        f". Pet terms are set out in {ctx.addendum_ref('pet_addendum')}.",
    )]
    if f.number("pet_rent"):
        blocks.append(para("Monthly pet rent: ", strong(format_currency(f.number("pet_rent"))), "."))
    return blocks


def _lease_utilities(ctx: RenderContext) -> list:
    return [para(
        "Tenant is responsible for the following utilities: ",
        ctx.fields.text("tenant_utilities", "[Utilities]"),
        ". All other utilities are furnished by Landlord.",
    )]


def _lease_maintenance(ctx: RenderContext) -> list:
    return [para(
        "Landlord shall comply with applicable building, housing, and health codes as required "
        "by § 83.51, Florida Statutes. Tenant shall keep the premises clean and sanitary and "
        "promptly report any needed repairs."
    )]


def _lease_hoa(ctx: RenderContext) -> list:
    return [para(
        "The premises are subject to the rules of ",
        strong(ctx.fields.text("hoa_name", "[Association]")),
        f". Tenant agrees to comply with the association rules attached as "
        f"{ctx.addendum_ref('hoa_addendum')}.",
    )]


def _lease_email_consent(ctx: RenderContext) -> list:
    f = ctx.fields
    return [
        para(
            "Landlord and Tenant consent to receive notices under Chapter 83, Florida Statutes, by "
            "electronic mail at the addresses below."
        ),
        field_table([
            ("Landlord Email:", f.text("landlord_email", "[Email]")),
            ("Tenant Email:", f.text("tenant_email", "[Email]")),
        ]),
    ]


def _lease_radon(ctx: RenderContext) -> list:
    return [para(
        strong("RADON GAS: "),
        "Radon is a naturally occurring radioactive gas that, when it has accumulated in a building "
        "in sufficient quantities, may present health risks to persons who are exposed to it over "
        "time. Levels of radon that exceed federal and state guidelines have been found in buildings "
        "in Florida. Additional information regarding radon and radon testing may be obtained from "
        "your county health department. (§ 404.056(5), Florida Statutes)",
    )]


def _lease_lead_paint(ctx: RenderContext) -> list:
    return [para(
        "The dwelling was built before 1978 and may contain lead-based paint. Landlord's disclosure "
        "of known lead-based paint and hazards, and Tenant's acknowledgment of the EPA pamphlet, "
        f"are set out in {ctx.addendum_ref('lead_paint_addendum')}.",
    )]


def _lease_flood(ctx: RenderContext) -> list:
    f = ctx.fields
    blocks = [
        para("Landlord discloses the following regarding flooding of the premises (§ 83.512, Florida Statutes):"),
        checkboxes(
            "Landlord is aware of flooding that damaged the premises during Landlord's ownership",
            tristate_options(f["has_prior_flooding"]),
        ),
        checkboxes(
            "Landlord has filed a flood insurance claim for the premises",
            tristate_options(f["has_flood_claims"]),
        ),
        checkboxes(
            "Landlord has received federal flood assistance (e.g., FEMA) for the premises",
            tristate_options(f["has_fema_assistance"]),
        ),
    ]
    if f.filled("flooding_description"):
        blocks.append(para("Details: ", f.text("flooding_description")))
    blocks.append(para(
        "Tenant should obtain renter's insurance; Landlord's flood insurance does not cover Tenant's "
        "personal property.",
        small=True,
    ))
    return blocks


def _lease_additional(ctx: RenderContext) -> list:
    return [para(ctx.fields.text("additional_terms"))]


def _pet_addendum(ctx: RenderContext) -> list:
    f = ctx.fields
    return [
        field_table([
            ("Pet(s):", f.text("pet_description", "[Pet Description]")),
            ("Pet Deposit:", format_currency(f.number("pet_deposit"))),
            ("Monthly Pet Rent:", format_currency(f.number("pet_rent"))),
        ]),
        para(
            "Tenant is responsible for all damage caused by the pet(s) and shall keep the pet(s) "
            "under control at all times."
        ),
    ]


def _lead_paint_addendum(ctx: RenderContext) -> list:
    return [
        para(strong("Lead Warning Statement: "),
             "Housing built before 1978 may contain lead-based paint. Lead from paint, paint chips, "
             "and dust can pose health hazards if not managed properly. Before renting pre-1978 "
             "housing, lessors must disclose the presence of known lead-based paint and/or "
             "lead-based paint hazards in the dwelling. Lessees must also receive a federally "
             "approved pamphlet on lead poisoning prevention."),
        checkboxes(
            "Lessor has knowledge of lead-based paint and/or lead-based paint hazards in the housing",
            tristate_options(ctx.fields["known_lead_paint"]),
        ),
        para(
            "Lessee has received the pamphlet Protect Your Family from Lead in Your Home. "
            "Lessee initials: ________",
        ),
    ]


def _hoa_addendum(ctx: RenderContext) -> list:
    return [para(
        "Tenant acknowledges receipt of the declaration, bylaws, and rules of ",
        strong(ctx.fields.text("hoa_name", "[Association]")),
        ". Violations of association rules by Tenant are a default under this Lease.",
    )]


def _flood_addendum(ctx: RenderContext) -> list:
    f = ctx.fields
    return [
        para(
            "Landlord has disclosed a flooding history for the premises in "
            f"{ctx.section_ref('flood')}. Tenant acknowledges the following:",
        ),
        field_table([
            ("Prior flooding:", TRISTATE_LABELS[f["has_prior_flooding"]]),
            ("Flood insurance claims:", TRISTATE_LABELS[f["has_flood_claims"]]),
            ("Federal flood assistance:", TRISTATE_LABELS[f["has_fema_assistance"]]),
            ("Details:", f.text("flooding_description", "---")),
        ]),
        para("Tenant initials: ________"),
    ]


def _lease_signatures(ctx: RenderContext) -> list[str]:
    f = ctx.fields
    return [
        f"Landlord: {f.text('landlord_name', '[Landlord]')}",
        f"Tenant: {f.text('tenant_name', '[Tenant]')}",
    ]


FLORIDA_LEASE = DocumentTemplate(
    name="florida_lease",
    title="RESIDENTIAL LEASE AGREEMENT",
    subtitle="State of Florida, Chapter 83, Part II",
    description="Florida residential lease with HB 615 email consent and § 83.512 flood disclosure",
    fields=LEASE_FIELDS,
    intro=_lease_intro,
    sections=[
        SectionRule("parties", "Parties", _lease_parties),
        SectionRule("premises", "Premises", _lease_premises),
        SectionRule("term", "Term", _lease_term),
        SectionRule("rent", "Rent and Move-In Costs", _lease_rent),
        SectionRule("security_deposit", "Security Deposit", _lease_deposit),
        SectionRule("pets", "Pets", _lease_pets, flag("has_pets")),
        SectionRule("utilities", "Utilities", _lease_utilities),
        SectionRule("maintenance", "Maintenance and Repairs", _lease_maintenance),
        SectionRule("hoa", "Homeowners' Association", _lease_hoa, flag("has_hoa")),
        SectionRule("electronic_notices", "Consent to Electronic Notices", _lease_email_consent, flag("email_consent")),
        SectionRule("radon", "Radon Gas Disclosure", _lease_radon, always()),
        SectionRule("lead_paint", "Lead-Based Paint", _lease_lead_paint, PRE_1978),
        SectionRule("flood", "Flood Disclosure", _lease_flood),
        SectionRule("additional_terms", "Additional Terms", _lease_additional, filled("additional_terms")),
    ],
    addenda=[
        SectionRule("pet_addendum", "Pet Addendum", _pet_addendum, flag("has_pets")),
        SectionRule("lead_paint_addendum", "Lead-Based Paint Disclosure", _lead_paint_addendum, PRE_1978),
        SectionRule("hoa_addendum", "Association Rules", _hoa_addendum, flag("has_hoa")),
        SectionRule("flood_addendum", "Flood History Acknowledgment", _flood_addendum, FLOOD_HISTORY),
    ],
    signatures=_lease_signatures,
    disclaimer="This form is provided for convenience and is not legal advice.",
    include_toc=True,
)


# ---------------------------------------------------------------------------
# Three-day notice to pay rent or deliver possession (§ 83.56(3))
# ---------------------------------------------------------------------------

NOTICE_FIELDS = [
    text_field("landlord_name", required=True),
    text_field("tenant_name", required=True),
    text_field("property_address", required=True),
    number_field("rent_due", required=True),
    text_field("service_date", required=True),
    number_field("late_fees"),
    number_field("other_charges"),
    text_field("rent_period"),
    text_field("payment_address"),
    choice_field("service_method", ["hand_delivery", "posting", "mail"], default="hand_delivery"),
]

SERVICE_METHOD_LABELS = {
    "hand_delivery": "Hand delivery to the tenant",
    "posting": "Posting in a conspicuous place at the premises (tenant absent)",
    "mail": "Mail",
}

# Extra calendar days allowed when a notice is served by mail
MAIL_SERVICE_DAYS = 5


def _notice_demand(ctx: RenderContext) -> list:
    f = ctx.fields
    rent = f.number("rent_due")
    total = late_fee_total(rent, f.number("late_fees"), f.number("other_charges"))
    period = f.text("rent_period", "the current rental period")
    return [
        para(
            "You are hereby notified that you are indebted to the undersigned for rent and use of "
            "the premises at ",
            strong(f.text("property_address", "[Property Address]")),
            f" for {period}, in the amount of ",
            strong(format_amount_or_placeholder(total)),
            ".",
        ),
        table(
            ["Charge", "Amount"],
            [
                ("Rent Due", format_currency(rent)),
                ("Late Fees", format_currency(f.number("late_fees"))),
                ("Other Charges", format_currency(f.number("other_charges"))),
                ("Total Demanded", format_currency(total)),
            ],
            emphasize_last_row=True,
        ),
    ]


def _notice_deadline(ctx: RenderContext) -> list:
    f = ctx.fields
    deadline = notice_deadline(f.text("service_date"), 3)
    if deadline is not None and f["service_method"] == "mail":
        deadline += timedelta(days=MAIL_SERVICE_DAYS)
    return [para(
        "You must pay the full amount or deliver possession of the premises on or before ",
        strong(format_long_date(deadline)),
        " (three days after delivery of this notice, excluding Saturday, Sunday, and legal "
        "holidays), or legal proceedings will be commenced against you.",
    )]


def _notice_payment(ctx: RenderContext) -> list:
    return [para("Payment shall be delivered to: ", strong(ctx.fields.text("payment_address")))]


def _notice_service(ctx: RenderContext) -> list:
    f = ctx.fields
    method = f["service_method"]
    return [
        para(f"Served on {f.text('service_date', '[Date]')} by the method checked below."),
        checkboxes("Method of service", [
            CheckboxOption(label=label, checked=key == method)
            for key, label in SERVICE_METHOD_LABELS.items()
        ]),
    ]


THREE_DAY_NOTICE = DocumentTemplate(
    name="three_day_notice",
    title="THREE-DAY NOTICE TO PAY RENT OR DELIVER POSSESSION",
    subtitle="§ 83.56(3), Florida Statutes",
    description="Landlord's three-day notice for unpaid rent with weekend-excluded deadline",
    fields=NOTICE_FIELDS,
    intro=lambda ctx: [para("To: ", strong(ctx.fields.text("tenant_name", "[Tenant]")))],
    sections=[
        SectionRule("demand", "Amount Due", _notice_demand),
        SectionRule("deadline", "Deadline", _notice_deadline),
        SectionRule("payment", "Payment Instructions", _notice_payment, filled("payment_address")),
        SectionRule("service", "Certificate of Service", _notice_service),
    ],
    signatures=lambda ctx: [f"Landlord: {ctx.fields.text('landlord_name', '[Landlord]')}"],
)
