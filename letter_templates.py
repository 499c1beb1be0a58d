"""Formal business letter template."""

from __future__ import annotations

import re
from datetime import date

from calculators import format_long_date, parse_date
from composer import DocumentTemplate, RenderContext, heading, para, placeholder, strong
from field_resolver import text_field
from section_selector import SectionRule, filled

LETTER_FIELDS = [
    text_field("sender_name", required=True),
    text_field("recipient_name", required=True),
    text_field("body", required=True),
    text_field("sender_address"),
    text_field("recipient_address"),
    text_field("date", description="Letter date; today's date when omitted"),
    text_field("subject"),
    text_field("closing", default="Sincerely"),
]


def _lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def letter_date(value: str) -> str:
    """Long-form date for the letterhead; unparseable text is kept as written."""
    if not value:
        return format_long_date(date.today())
    parsed = parse_date(value)
    return format_long_date(parsed) if parsed is not None else value


def _letterhead(ctx: RenderContext) -> list:
    f = ctx.fields
    blocks = [heading(f.text("sender_name", "[Sender]"), level=1)]
    blocks += [para(line, small=True) for line in _lines(f.text("sender_address"))]
    blocks.append(para(letter_date(f.text("date"))))
    return blocks


def _recipient(ctx: RenderContext) -> list:
    f = ctx.fields
    blocks = [para(strong(f.text("recipient_name", "[Recipient]")))]
    blocks += [para(line) for line in _lines(f.text("recipient_address"))]
    return blocks


def _subject(ctx: RenderContext) -> list:
    return [para(strong(f"RE: {ctx.fields.text('subject')}"))]


def _body(ctx: RenderContext) -> list:
    f = ctx.fields
    blocks = [para(f"Dear {f.text('recipient_name', '[Recipient]')},")]
    paragraphs = [p.strip() for p in re.split(r"\n\s*\n", f.text("body")) if p.strip()]
    if not paragraphs:
        return blocks + [placeholder("[Letter body]")]
    return blocks + [para(" ".join(_lines(p))) for p in paragraphs]


def _closing(ctx: RenderContext) -> list:
    f = ctx.fields
    return [
        para(f"{f.text('closing', 'Sincerely').rstrip(',')},"),
        para(strong(f.text("sender_name", "[Sender]"))),
    ]


LETTER = DocumentTemplate(
    name="letter",
    title="LETTER",
    description="Formal business letter template",
    fields=LETTER_FIELDS,
    intro=_letterhead,
    sections=[
        SectionRule("recipient", "", _recipient),
        SectionRule("subject", "", _subject, filled("subject")),
        SectionRule("body", "", _body),
        SectionRule("closing", "", _closing),
    ],
    number_sections=False,
)
