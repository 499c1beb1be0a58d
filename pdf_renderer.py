"""Paginated PDF renderer for composed documents (reportlab platypus).

Consumes the content tree from composer.compose() and owns everything the
composer leaves out: page size, margins, page breaks, running footer with
page numbers, and text styling per Tone.
"""

import logging
import os
from io import BytesIO
from pathlib import Path
from typing import Iterable, List, Union
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY
from reportlab.lib.pagesizes import A4, letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import (
    HRFlowable,
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from schemas import (
    CheckboxBlock,
    Document,
    FieldTableBlock,
    HeadingBlock,
    PageBreakBlock,
    ParagraphBlock,
    PlaceholderBlock,
    SectionBlock,
    SignatureBlock,
    Span,
    TableBlock,
    Tone,
)

log = logging.getLogger(__name__)

PAGE_SIZES = {"letter": letter, "a4": A4}

INK = colors.HexColor("#1a1a2e")
SECTION_INK = colors.HexColor("#16213e")
HEADER_FILL = colors.HexColor("#f0f0f5")
GRID_LINE = colors.HexColor("#cccccc")

TONE_COLORS = {
    Tone.MUTED: "#808080",
    Tone.POSITIVE: "#1b7f3b",
    Tone.NEGATIVE: "#b00020",
}

CHECKED = "[X]"
UNCHECKED = "[&nbsp;&nbsp;]"


def page_size_from_env():
    name = os.getenv("DOCGEN_PAGE_SIZE", "letter").strip().lower()
    if name not in PAGE_SIZES:
        log.warning("Unknown DOCGEN_PAGE_SIZE %r, using letter", name)
        name = "letter"
    return PAGE_SIZES[name]


# ---------------------------------------------------------------------------
# Styles
# ---------------------------------------------------------------------------

def _build_styles() -> dict:
    styles = getSampleStyleSheet()
    return {
        "title": ParagraphStyle(
            "DocTitle",
            parent=styles["Heading1"],
            fontSize=16,
            alignment=TA_CENTER,
            spaceAfter=6,
            textColor=INK,
        ),
        "subtitle": ParagraphStyle(
            "DocSubtitle",
            parent=styles["Normal"],
            fontSize=10,
            alignment=TA_CENTER,
            spaceAfter=18,
            textColor=colors.grey,
        ),
        "section": ParagraphStyle(
            "SectionHeader",
            parent=styles["Heading2"],
            fontSize=12,
            spaceBefore=14,
            spaceAfter=6,
            textColor=SECTION_INK,
        ),
        "heading": ParagraphStyle(
            "SubHeader",
            parent=styles["Heading3"],
            fontSize=11,
            spaceBefore=8,
            spaceAfter=4,
            textColor=SECTION_INK,
        ),
        "body": ParagraphStyle(
            "DocBody",
            parent=styles["Normal"],
            fontSize=10,
            leading=14,
            alignment=TA_JUSTIFY,
            spaceAfter=8,
        ),
        "small": ParagraphStyle(
            "SmallText",
            parent=styles["Normal"],
            fontSize=8,
            leading=10,
            textColor=colors.grey,
            spaceAfter=6,
        ),
        "cell": ParagraphStyle(
            "TableCell",
            parent=styles["Normal"],
            fontSize=9,
            leading=11,
        ),
        "placeholder": ParagraphStyle(
            "Placeholder",
            parent=styles["Normal"],
            fontSize=10,
            leading=14,
            textColor=colors.grey,
            fontName="Helvetica-Oblique",
            spaceAfter=8,
        ),
    }


# ---------------------------------------------------------------------------
# Markup
# ---------------------------------------------------------------------------

def span_markup(span: Span) -> str:
    """Escape span text and wrap it in reportlab paragraph markup for its tone."""
    text = escape(span.text)
    if span.tone == Tone.STRONG:
        return f"<b>{text}</b>"
    color = TONE_COLORS.get(span.tone)
    if color:
        return f'<font color="{color}">{text}</font>'
    return text


def spans_markup(spans: Iterable[Span]) -> str:
    return "".join(span_markup(s) for s in spans)


# ---------------------------------------------------------------------------
# Block → flowables
# ---------------------------------------------------------------------------

class _StoryBuilder:
    def __init__(self, width: float):
        self.width = width
        self.styles = _build_styles()

    def grid_style(self, header: bool = True) -> list:
        commands = [
            ("FONTSIZE", (0, 0), (-1, -1), 9),
            ("GRID", (0, 0), (-1, -1), 0.5, GRID_LINE),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("TOPPADDING", (0, 0), (-1, -1), 4),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
            ("LEFTPADDING", (0, 0), (-1, -1), 6),
        ]
        if header:
            commands += [
                ("BACKGROUND", (0, 0), (-1, 0), HEADER_FILL),
                ("TEXTCOLOR", (0, 0), (-1, 0), INK),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ]
        return commands

    def cell(self, markup: str) -> Paragraph:
        return Paragraph(markup, self.styles["cell"])

    def field_table(self, block: FieldTableBlock) -> list:
        if not block.rows:
            return []
        data = [
            [self.cell(f"<b>{escape(label)}</b>"), self.cell(escape(value))]
            for label, value in block.rows
        ]
        table = Table(data, colWidths=[self.width * 0.32, self.width * 0.68])
        table.setStyle(TableStyle([
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("TOPPADDING", (0, 0), (-1, -1), 3),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
            ("LINEBELOW", (0, 0), (-1, -1), 0.25, GRID_LINE),
        ]))
        return [table, Spacer(1, 8)]

    def grid(self, block: TableBlock) -> list:
        columns = max([len(block.header)] + [len(r) for r in block.rows]) or 1
        data = []
        if block.header:
            data.append([self.cell(f"<b>{escape(h)}</b>") for h in block.header])
        for row in block.rows:
            cells = [self.cell(spans_markup(cell)) for cell in row]
            cells += [""] * (columns - len(cells))
            data.append(cells)
        if not data:
            return []
        table = Table(data, colWidths=[self.width / columns] * columns, repeatRows=1 if block.header else 0)
        commands = self.grid_style(header=bool(block.header))
        if block.emphasize_last_row and block.rows:
            commands += [
                ("BACKGROUND", (0, -1), (-1, -1), HEADER_FILL),
                ("LINEABOVE", (0, -1), (-1, -1), 1, INK),
            ]
        table.setStyle(TableStyle(commands))
        return [table, Spacer(1, 8)]

    def checkboxes(self, block: CheckboxBlock) -> list:
        options = "&nbsp;&nbsp;&nbsp;".join(
            f"{CHECKED if opt.checked else UNCHECKED} {escape(opt.label)}" for opt in block.options
        )
        return [Paragraph(f"{escape(block.label)}:<br/>{options}", self.styles["body"])]

    def signatures(self, block: SignatureBlock) -> list:
        if not block.parties:
            return []
        data = []
        fonts = []
        for party in block.parties:
            role, _, name = party.partition(":")
            data.append([f"{role}: ______________________________", "Date: _______________"])
            data.append([name.strip(), ""])
            fonts.append(len(data) - 1)
            data.append(["", ""])
        table = Table(data, colWidths=[self.width * 0.6, self.width * 0.4])
        commands = [
            ("FONTSIZE", (0, 0), (-1, -1), 10),
            ("TOPPADDING", (0, 0), (-1, -1), 2),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 2),
        ]
        for row in fonts:
            commands.append(("FONTNAME", (0, row), (0, row), "Helvetica-Oblique"))
            commands.append(("TEXTCOLOR", (0, row), (0, row), colors.grey))
        table.setStyle(TableStyle(commands))
        return [
            Spacer(1, 16),
            HRFlowable(width="100%", thickness=1, color=INK),
            Spacer(1, 12),
            Paragraph(
                "By signing below, the parties acknowledge that they have read, understand, and "
                "agree to all terms of this document.",
                self.styles["body"],
            ),
            Spacer(1, 12),
            table,
        ]

    def block(self, block) -> list:
        if isinstance(block, SectionBlock):
            flowables = [Paragraph(escape(block.heading), self.styles["section"])] if block.heading else []
            for child in block.blocks:
                flowables.extend(self.block(child))
            return flowables
        if isinstance(block, ParagraphBlock):
            style = self.styles["small" if block.small else "body"]
            return [Paragraph(spans_markup(block.spans), style)]
        if isinstance(block, HeadingBlock):
            style = self.styles["section" if block.level == 1 else "heading"]
            return [Paragraph(escape(block.text), style)]
        if isinstance(block, FieldTableBlock):
            return self.field_table(block)
        if isinstance(block, TableBlock):
            return self.grid(block)
        if isinstance(block, CheckboxBlock):
            return self.checkboxes(block)
        if isinstance(block, PlaceholderBlock):
            return [Paragraph(escape(block.text), self.styles["placeholder"])]
        if isinstance(block, SignatureBlock):
            return self.signatures(block)
        if isinstance(block, PageBreakBlock):
            return [PageBreak()]
        log.warning("Skipping unsupported block kind: %s", getattr(block, "kind", type(block).__name__))
        return []

    def story(self, document: Document) -> list:
        story: List = [Paragraph(escape(document.title), self.styles["title"])]
        if document.subtitle:
            story.append(Paragraph(escape(document.subtitle), self.styles["subtitle"]))
        story.append(HRFlowable(width="100%", thickness=1, color=INK))
        story.append(Spacer(1, 12))

        if document.toc:
            story.append(Paragraph("CONTENTS", self.styles["heading"]))
            rows = [[entry.label, entry.title] for entry in document.toc]
            toc = Table(rows, colWidths=[self.width * 0.2, self.width * 0.8])
            toc.setStyle(TableStyle([
                ("FONTSIZE", (0, 0), (-1, -1), 9),
                ("TOPPADDING", (0, 0), (-1, -1), 1),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 1),
            ]))
            story += [toc, Spacer(1, 12)]

        for block in document.blocks:
            story.extend(self.block(block))
        return story


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def _footer(title: str):
    def draw(canvas, doc):
        canvas.saveState()
        canvas.setFont("Helvetica", 8)
        canvas.setFillColor(colors.grey)
        canvas.drawString(doc.leftMargin, 0.5 * inch, title)
        canvas.drawRightString(doc.pagesize[0] - doc.rightMargin, 0.5 * inch, f"Page {doc.page}")
        canvas.restoreState()
    return draw


def render_pdf(document: Document, pagesize=None) -> bytes:
    """Render a composed document to PDF bytes."""
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=pagesize or page_size_from_env(),
        topMargin=0.75 * inch,
        bottomMargin=0.85 * inch,
        leftMargin=1 * inch,
        rightMargin=1 * inch,
        title=document.title,
    )
    story = _StoryBuilder(doc.width).story(document)
    footer = _footer(document.title)
    doc.build(story, onFirstPage=footer, onLaterPages=footer)
    pdf = buffer.getvalue()
    log.info("Rendered %s: %d bytes, %d block(s)", document.template, len(pdf), len(document.blocks))
    return pdf


def write_pdf(document: Document, path: Union[str, Path], pagesize=None) -> Path:
    """Render and write a PDF, creating parent directories as needed."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(render_pdf(document, pagesize=pagesize))
    return out
