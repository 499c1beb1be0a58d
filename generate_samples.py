#!/usr/bin/env python3
"""Generate sample documents for every registered template.

Writes <DOCGEN_OUTPUT_DIR>/samples/<template>.pdf for each entry in
SAMPLE_INPUTS. The same input maps back the test suite.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from pdf_renderer import write_pdf
from template_registry import render_document

SAMPLE_INPUTS: dict[str, dict] = {
    "florida_lease": {
        "landlord_name": "Coastal Rentals LLC",
        "landlord_address": "100 Harbor Blvd, Tampa, FL 33602",
        "landlord_email": "leasing@coastalrentals.example",
        "tenant_name": "Maria Delgado",
        "tenant_email": "maria.delgado@example.com",
        "property_address": "2417 Bayshore Dr, Unit 4, Tampa, FL 33606",
        "monthly_rent": "1,500",
        "security_deposit": 1500,
        "pet_deposit": 300,
        "pet_rent": 35,
        "late_fee": 75,
        "lease_start": "2025-03-15",
        "lease_end": "2026-03-14",
        "year_built": 1972,
        "deposit_holder": "First Gulf Bank, Tampa",
        "has_pets": True,
        "pet_description": "One spayed cat, 9 lbs",
        "email_consent": "true",
        "has_hoa": True,
        "hoa_name": "Bayshore Commons Association",
        "has_prior_flooding": "yes",
        "has_flood_claims": "no",
        "has_fema_assistance": "unknown",
        "flooding_description": "Minor garage flooding during Hurricane Idalia (2023); repaired.",
    },
    "three_day_notice": {
        "landlord_name": "Coastal Rentals LLC",
        "tenant_name": "Jordan Pike",
        "property_address": "88 Palmetto Ave, Orlando, FL 32801",
        "rent_due": 1850,
        "late_fees": 92.5,
        "rent_period": "March 2025",
        "service_date": "2025-03-07",
        "service_method": "posting",
        "payment_address": "100 Harbor Blvd, Tampa, FL 33602",
    },
    "florida_purchase_contract": {
        "seller_name": "Gregory T. Navarro",
        "buyer_name": "Daniel R. Whitfield",
        "buyer_email": "dwhitfield@example.com",
        "property_address": "4738 Ridgeline Ct",
        "property_city": "Sarasota",
        "property_county": "Sarasota",
        "property_zip": "34232",
        "parcel_id": "0045-12-0031",
        "year_built": 1968,
        "purchase_price": 485000,
        "earnest_money": 10000,
        "additional_deposit": 5000,
        "financing_type": "conventional",
        "loan_amount": 388000,
        "max_interest_rate": 7.25,
        "closing_date": "2025-05-30",
        "escrow_agent_name": "Suncoast Title & Escrow",
        "escrow_agent_address": "1 Main St, Sarasota, FL 34236",
        "title_company": "Suncoast Title & Escrow",
        "inspection_period_days": 10,
        "inspect_general": True,
        "inspect_wdo": True,
        "inspect_four_point": "true",
        "inspect_wind_mitigation": True,
        "has_hoa": True,
        "hoa_name": "Ridgeline Estates HOA",
        "hoa_assessment": 425,
        "hoa_assessment_frequency": "quarter",
        "lead_paint_known": "no",
        "lead_reports_available": True,
        "has_prior_flooding": "no",
        "has_flood_claims": "no",
        "has_flood_assistance": "no",
        "known_defects": "Hairline crack in pool deck",
        "mediation_required": True,
    },
    "florida_escalation_addendum": {
        "seller_name": "Gregory T. Navarro",
        "buyer_name": "Daniel R. Whitfield",
        "property_address": "4738 Ridgeline Ct, Sarasota, FL 34232",
        "contract_date": "2025-04-02",
        "base_purchase_price": 485000,
        "escalation_increment": 2500,
        "maximum_purchase_price": 510000,
        "competing_offer": 500000,
        "escalation_deadline": "2025-04-05 5:00 p.m.",
        "require_full_offer_copy": True,
        "appraisal_gap_coverage": True,
        "appraisal_gap_amount": 15000,
        "financing_type": "fha",
        "increase_earnest_money": True,
        "additional_earnest_percentage": 10,
    },
    "florida_listing_agreement": {
        "seller_name": "Lisa A. Navarro",
        "broker_name": "Ana Ruiz",
        "broker_license": "BK3312456",
        "brokerage_firm": "Gulf Gate Realty",
        "property_address": "4738 Ridgeline Ct",
        "property_city": "Sarasota",
        "property_county": "Sarasota",
        "property_zip": "34232",
        "listing_price": 499000,
        "listing_start_date": "2025-02-01",
        "listing_expiration_date": "2025-08-01",
        "commission_rate": 5.5,
        "coop_commission_rate": 2.5,
        "brokerage_relationship": "single_agent",
        "accept_cash": True,
        "accept_conventional": True,
        "accept_va": True,
        "list_on_mls": True,
        "professional_photos": True,
        "lockbox_authorized": True,
        "included_items": "Refrigerator, washer, dryer, window treatments",
        "excluded_items": "Dining room chandelier",
        "agreement_date": "January 28, 2025",
    },
    "bill_of_sale": {
        "seller_name": "Harold Kim",
        "buyer_name": "Priya Natarajan",
        "sale_date": "2025-06-12",
        "items": [
            {"description": "2019 Sea Ray SPX 190 boat", "quantity": 1, "unit_price": 28500},
            {"description": "Trailer, tandem axle", "quantity": 1, "unit_price": 3200},
            {"description": "Life vests", "quantity": 6, "unit_price": 45},
        ],
        "payment_method": "cashier's check",
        "condition": "as_is",
        "has_liens": "no",
    },
    "comparative_market_analysis": {
        "subject_address": "4738 Ridgeline Ct, Sarasota, FL 34232",
        "subject_bedrooms": 3,
        "subject_bathrooms": 2,
        "subject_square_feet": 1850,
        "subject_year_built": 1968,
        "subject_lot_size": "0.25 ac",
        "prepared_for": "Lisa A. Navarro",
        "prepared_by": "Ana Ruiz, Gulf Gate Realty",
        "report_date": "2025-01-20",
        "comparables": [
            {
                "address": "4712 Ridgeline Ct",
                "sale_price": 470000,
                "sale_date": "2024-11-03",
                "bedrooms": 2,
                "bathrooms": 2,
                "square_feet": 1720,
                "year_built": 1966,
                "lot_size": "0.22 ac",
                "weight": 1.5,
                "adjustments": [
                    {"category": "Bedrooms", "amount": 15000},
                    {"category": "Square Feet", "amount": 6500},
                ],
                "total_adjustment": 21500,
                "adjusted_price": 491500,
            },
            {
                "address": "101 Crestview Ln",
                "sale_price": 512000,
                "sale_date": "2024-12-15",
                "bedrooms": 4,
                "bathrooms": 2.5,
                "square_feet": 2010,
                "year_built": 1974,
                "lot_size": "0.28 ac",
                "weight": 1.0,
                "adjustments": [
                    {"category": "Bedrooms", "amount": -10000},
                    {"category": "Bathrooms", "amount": -5000},
                    {"category": "Square Feet", "amount": -8000},
                ],
                "total_adjustment": -23000,
                "adjusted_price": 489000,
            },
            {
                "address": "39 Palm Way",
                "sale_price": 478500,
                "sale_date": "2024-10-22",
                "bedrooms": 3,
                "bathrooms": 2,
                "square_feet": 1880,
                "year_built": 1970,
                "weight": 1.0,
                "adjustments": [{"category": "Lot Size", "amount": 0}],
                "total_adjustment": 0,
                "adjusted_price": 478500,
            },
        ],
    },
    "invoice": {
        "company_name": "Suncoast Title & Escrow",
        "company_address": "1 Main St, Sarasota, FL 34236",
        "client_name": "Daniel R. Whitfield",
        "invoice_number": "INV-2025-0417",
        "date": "2025-05-30",
        "due_date": "2025-06-29",
        "items": [
            {"description": "Title search", "quantity": 1, "unit_price": 250},
            {"description": "Settlement fee", "quantity": 1, "unit_price": 595},
            {"description": "Courier", "quantity": 2, "unit_price": 35.5},
        ],
        "tax_rate": 7,
        "discount": 50,
        "notes": "Wire instructions provided separately; verify by phone before sending funds.",
    },
    "letter": {
        "sender_name": "Coastal Rentals LLC",
        "sender_address": "100 Harbor Blvd\nTampa, FL 33602",
        "recipient_name": "Maria Delgado",
        "recipient_address": "2417 Bayshore Dr\nTampa, FL 33606",
        "date": "2025-03-03",
        "subject": "Lease renewal for 2417 Bayshore Dr",
        "body": (
            "Your lease ends on March 31, 2026. We would be glad to renew it for another twelve "
            "months at the current rent.\n\n"
            "Please let us know by January 31 whether you plan to renew."
        ),
        "closing": "Best regards",
    },
}


def main():
    load_dotenv()
    output_dir = Path(os.getenv("DOCGEN_OUTPUT_DIR", "dist")) / "samples"
    output_dir.mkdir(parents=True, exist_ok=True)
    print("Generating sample documents...")
    for name, inputs in SAMPLE_INPUTS.items():
        document = render_document(name, inputs)
        path = write_pdf(document, output_dir / f"{name}.pdf")
        print(f"  Created: {path} ({len(document.warnings)} warning(s))")
    print("Done.")


if __name__ == "__main__":
    main()
