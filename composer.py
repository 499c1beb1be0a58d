"""Document composer — turns a template plus an input map into a content tree.

Order of the emitted tree:
  intro → numbered sections → signature block → lettered addenda → disclaimer

Page layout, running footers, and styling belong to the renderer; the
composer only guarantees ordering and labels.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Sequence, Union

from field_resolver import FieldRegistry, ResolvedFields
from schemas import (
    CheckboxBlock,
    CheckboxOption,
    Document,
    FieldSpec,
    FieldTableBlock,
    HeadingBlock,
    LabelStyle,
    PageBreakBlock,
    ParagraphBlock,
    PlaceholderBlock,
    SectionBlock,
    SignatureBlock,
    Span,
    TableBlock,
    TemplateInfo,
    TocEntry,
    Tone,
)
from section_selector import SectionRule, SelectedSection, build_toc, label_for, select_sections

log = logging.getLogger(__name__)

TEMPLATE_URI_PREFIX = "docgen://templates/"


# ---------------------------------------------------------------------------
# Block helpers used by template builders
# ---------------------------------------------------------------------------

def para(*parts: Union[str, Span], small: bool = False) -> ParagraphBlock:
    spans = [p if isinstance(p, Span) else Span(text=p) for p in parts]
    return ParagraphBlock(spans=spans, small=small)


def strong(text: str) -> Span:
    return Span(text=text, tone=Tone.STRONG)


def muted(text: str) -> Span:
    return Span(text=text, tone=Tone.MUTED)


def field_table(rows: Iterable[Sequence[str]]) -> FieldTableBlock:
    return FieldTableBlock(rows=[[str(label), str(value)] for label, value in rows])


def table(header: Sequence[str], rows: Iterable[Sequence[Any]], emphasize_last_row: bool = False) -> TableBlock:
    """Grid table; plain strings are wrapped into single-span cells."""
    cells = []
    for row in rows:
        cells.append([
            cell if isinstance(cell, list) else [cell if isinstance(cell, Span) else Span(text=str(cell))]
            for cell in row
        ])
    return TableBlock(header=list(header), rows=cells, emphasize_last_row=emphasize_last_row)


def checkboxes(label: str, options: Sequence[CheckboxOption]) -> CheckboxBlock:
    return CheckboxBlock(label=label, options=list(options))


def placeholder(text: str) -> PlaceholderBlock:
    return PlaceholderBlock(text=text)


def heading(text: str, level: int = 2) -> HeadingBlock:
    return HeadingBlock(text=text, level=level)


# ---------------------------------------------------------------------------
# Templates and render context
# ---------------------------------------------------------------------------

@dataclass
class RenderContext:
    """What a section builder sees: resolved fields plus the selection result."""
    template: "DocumentTemplate"
    fields: ResolvedFields
    sections: list[SelectedSection]
    addenda: list[SelectedSection]

    def section_ref(self, key: str, default: str = "[omitted]") -> str:
        label = label_for(self.sections, key)
        return f"Section {label}" if label else default

    def addendum_ref(self, key: str, default: str = "[not attached]") -> str:
        label = label_for(self.addenda, key)
        return f"Addendum {label}" if label else default


@dataclass
class DocumentTemplate:
    """Declarative document type: field specs plus sections in canonical order."""
    name: str
    title: str
    description: str
    fields: Sequence[FieldSpec]
    sections: Sequence[SectionRule]
    addenda: Sequence[SectionRule] = ()
    subtitle: Optional[str] = None
    intro: Optional[Callable[[RenderContext], list]] = None
    signatures: Optional[Callable[[RenderContext], list[str]]] = None
    disclaimer: Optional[str] = None
    section_style: LabelStyle = LabelStyle.NUMERIC
    addendum_style: LabelStyle = LabelStyle.ALPHA
    include_toc: bool = False
    number_sections: bool = True
    registry: FieldRegistry = field(init=False)

    def __post_init__(self) -> None:
        self.registry = FieldRegistry(self.fields)

    @property
    def uri(self) -> str:
        return f"{TEMPLATE_URI_PREFIX}{self.name}"

    def info(self) -> TemplateInfo:
        return TemplateInfo(
            name=self.name,
            title=self.title,
            description=self.description,
            uri=self.uri,
            required_inputs=self.registry.required_names,
            optional_inputs=self.registry.optional_names,
        )


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------

def _guarded(
    what: str,
    build: Callable[[RenderContext], Iterable],
    ctx: RenderContext,
    warnings: list[str],
) -> Optional[list]:
    """Run one builder; a failure is logged and warned about, and yields None."""
    try:
        return list(build(ctx))
    except (ArithmeticError, KeyError, TypeError, ValueError) as e:
        log.exception("%s of %s failed to build", what, ctx.template.name)
        warnings.append(f"{what} could not be completed: {e}")
        return None


def _build_section(
    selected: SelectedSection,
    ctx: RenderContext,
    warnings: list[str],
    prefix: Optional[str] = None,
) -> SectionBlock:
    blocks = _guarded(f"Section {selected.key}", selected.rule.build, ctx, warnings)
    if blocks is None:
        blocks = [placeholder(f"[{selected.title} could not be completed from the supplied data]")]
    return SectionBlock(
        key=selected.key,
        label=selected.label if ctx.template.number_sections or prefix else "",
        title=selected.title,
        prefix=prefix,
        blocks=blocks,
    )


def compose(template: DocumentTemplate, inputs: Any) -> Document:
    """Build the content tree for one input map. Never fails on bad input."""
    fields = template.registry.validate(inputs)
    sections = select_sections(template.sections, fields, template.section_style)
    addenda = select_sections(template.addenda, fields, template.addendum_style)
    ctx = RenderContext(template=template, fields=fields, sections=sections, addenda=addenda)
    warnings = list(fields.warnings)

    blocks: list = []
    if template.intro is not None:
        intro = _guarded("Introduction", template.intro, ctx, warnings)
        blocks.extend(intro if intro is not None else [
            placeholder("[Introduction could not be completed from the supplied data]"),
        ])

    for selected in sections:
        blocks.append(_build_section(selected, ctx, warnings))

    if template.signatures is not None:
        parties = _guarded("Signature block", template.signatures, ctx, warnings)
        if parties is None:
            blocks.append(placeholder("[Signature block could not be completed from the supplied data]"))
        else:
            blocks.append(SignatureBlock(parties=[str(p) for p in parties]))

    for selected in addenda:
        blocks.append(PageBreakBlock())
        blocks.append(_build_section(selected, ctx, warnings, prefix="Addendum"))

    if template.disclaimer:
        blocks.append(para(muted(template.disclaimer), small=True))

    toc: list[TocEntry] = []
    if template.include_toc:
        toc = build_toc(sections) + [
            TocEntry(key=a.key, label=f"Addendum {a.label}", title=a.title) for a in addenda
        ]

    log.info(
        "Composed %s: %d/%d sections, %d/%d addenda, %d warning(s)",
        template.name,
        len(sections),
        len(template.sections),
        len(addenda),
        len(template.addenda),
        len(warnings),
    )

    return Document(
        template=template.name,
        title=template.title,
        subtitle=template.subtitle,
        toc=toc,
        blocks=blocks,
        warnings=warnings,
    )
