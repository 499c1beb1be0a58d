"""Invoice template."""

from __future__ import annotations

from calculators import invoice_totals
from composer import DocumentTemplate, RenderContext, field_table, para, placeholder, table
from field_resolver import number_field, records_field, text_field
from formatters import format_cents, format_decimal, format_percent
from schemas import LineItem
from section_selector import SectionRule, filled

INVOICE_FIELDS = [
    text_field("company_name", required=True),
    text_field("client_name", required=True),
    records_field("items", required=True),
    text_field("company_address"),
    text_field("client_address"),
    text_field("invoice_number"),
    text_field("date"),
    text_field("due_date"),
    number_field("tax_rate", description="Sales tax as a percentage (e.g., 7 for 7%)"),
    number_field("discount", description="Flat discount applied before tax"),
    text_field("payment_terms", default="Net 30"),
    text_field("notes"),
]


def _invoice_header(ctx: RenderContext) -> list:
    f = ctx.fields
    return [
        field_table([
            ("From:", f.text("company_name", "[Company]")),
            ("", f.text("company_address")),
            ("Bill To:", f.text("client_name", "[Client]")),
            ("", f.text("client_address")),
        ]),
        field_table([
            ("Invoice #:", f.text("invoice_number", "---")),
            ("Date:", f.text("date", "---")),
            ("Due Date:", f.text("due_date", "---")),
            ("Terms:", f.text("payment_terms", "Net 30")),
        ]),
    ]


def _invoice_items(ctx: RenderContext) -> list:
    items = ctx.fields.records("items", LineItem)
    if not items:
        return [placeholder("No line items")]
    return [table(
        ["Description", "Qty", "Unit Price", "Amount"],
        [
            (item.description or "---", format_decimal(item.quantity),
             format_cents(item.unit_price), format_cents(item.line_total))
            for item in items
        ],
    )]


def _invoice_totals(ctx: RenderContext) -> list:
    f = ctx.fields
    items = f.records("items", LineItem)
    tax_rate = f.number("tax_rate")
    totals = invoice_totals(items, tax_rate, f.number("discount"))
    rows = [("Subtotal", format_cents(totals["subtotal"]))]
    if totals["discount"]:
        rows.append(("Discount", f"-{format_cents(totals['discount'])}"))
    if tax_rate:
        rows.append((f"Tax ({format_percent(tax_rate, 2)})", format_cents(totals["tax"])))
    rows.append(("Total Due", format_cents(totals["total"])))
    return [table(["", "Amount"], rows, emphasize_last_row=True)]


INVOICE = DocumentTemplate(
    name="invoice",
    title="INVOICE",
    description="Professional invoice with line items, discount, tax, and total due",
    fields=INVOICE_FIELDS,
    intro=_invoice_header,
    sections=[
        SectionRule("items", "Line Items", _invoice_items),
        SectionRule("totals", "Totals", _invoice_totals),
        SectionRule("notes", "Notes", lambda ctx: [para(ctx.fields.text("notes"))], filled("notes")),
    ],
    disclaimer="Thank you for your business.",
)
