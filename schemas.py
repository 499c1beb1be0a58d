"""Pydantic models for document assembly — field specs, input records, and the content tree."""

from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field, computed_field


# =============================================================================
# Enums
# =============================================================================

class FieldType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    TRISTATE = "tristate"
    CHOICE = "choice"
    RECORDS = "records"


class TriState(str, Enum):
    YES = "yes"
    NO = "no"
    UNKNOWN = "unknown"


class Tone(str, Enum):
    NORMAL = "normal"
    STRONG = "strong"
    MUTED = "muted"
    POSITIVE = "positive"
    NEGATIVE = "negative"


class LabelStyle(str, Enum):
    NUMERIC = "numeric"
    ALPHA = "alpha"
    ROMAN = "roman"


class RenderStatus(str, Enum):
    SUCCESS = "success"
    INCOMPLETE = "incomplete"


# =============================================================================
# Field Declarations
# =============================================================================

class FieldSpec(BaseModel):
    """Declared contract for one input field: name, expected type, and default."""
    name: str = Field(description="Input key (e.g., 'monthly_rent')")
    field_type: FieldType = Field(default=FieldType.STRING)
    default: Any = Field(default=None, description="Value used when absent or malformed")
    choices: Optional[List[str]] = Field(default=None, description="Allowed values for choice fields")
    required: bool = Field(default=False)
    description: str = Field(default="")


# =============================================================================
# List Records (comparables, line items, inspections)
# =============================================================================

class Adjustment(BaseModel):
    """A dollar adjustment applied to a comparable sale for one category."""
    category: str = Field(description="Adjustment category (e.g., 'Bedrooms')")
    amount: float = Field(default=0.0, description="Signed dollar delta")


class ComparableRecord(BaseModel):
    """One comparable sale in a market analysis.

    total_adjustment and adjusted_price are supplied by the caller and
    rendered as-is.
    """
    address: str = Field(default="", description="Street address of the comparable")
    sale_price: Optional[float] = Field(default=None)
    sale_date: Optional[str] = Field(default=None)
    bedrooms: Optional[float] = Field(default=None)
    bathrooms: Optional[float] = Field(default=None)
    square_feet: Optional[float] = Field(default=None)
    year_built: Optional[int] = Field(default=None)
    lot_size: Optional[str] = Field(default=None)
    weight: float = Field(default=1.0, ge=0.0, description="Relative weight in the value estimate")
    adjustments: List[Adjustment] = Field(default_factory=list)
    total_adjustment: Optional[float] = Field(default=None)
    adjusted_price: Optional[float] = Field(default=None)

    def adjustment_for(self, category: str) -> Optional[Adjustment]:
        """Return the adjustment matching *category* (case-insensitive), if any."""
        wanted = category.strip().lower()
        for adj in self.adjustments:
            if adj.category.strip().lower() == wanted:
                return adj
        return None


class LineItem(BaseModel):
    """Invoice or bill-of-sale line."""
    description: str = Field(default="")
    quantity: float = Field(default=1.0)
    unit_price: float = Field(default=0.0)
    amount: Optional[float] = Field(default=None, description="Explicit line total override")

    @computed_field
    @property
    def line_total(self) -> float:
        if self.amount is not None:
            return self.amount
        return round(self.quantity * self.unit_price, 2)


class InspectionItem(BaseModel):
    """A selectable inspection type in a purchase contract."""
    name: str
    selected: bool = False
    days: Optional[int] = Field(default=None, description="Days allowed to complete")
    paid_by: Optional[str] = Field(default=None)


# =============================================================================
# Content Tree (consumed by the paginated renderer)
# =============================================================================

class Span(BaseModel):
    text: str
    tone: Tone = Tone.NORMAL


class HeadingBlock(BaseModel):
    kind: Literal["heading"] = "heading"
    text: str
    level: int = Field(default=1, ge=1, le=3)


class ParagraphBlock(BaseModel):
    kind: Literal["paragraph"] = "paragraph"
    spans: List[Span] = Field(default_factory=list)
    small: bool = False

    @property
    def text(self) -> str:
        return "".join(s.text for s in self.spans)


class FieldTableBlock(BaseModel):
    """Two-column label/value table."""
    kind: Literal["field_table"] = "field_table"
    rows: List[List[str]] = Field(default_factory=list)


class TableBlock(BaseModel):
    """Grid table; every cell is a list of styled spans."""
    kind: Literal["table"] = "table"
    header: List[str] = Field(default_factory=list)
    rows: List[List[List[Span]]] = Field(default_factory=list)
    emphasize_last_row: bool = False


class CheckboxOption(BaseModel):
    label: str
    checked: bool = False


class CheckboxBlock(BaseModel):
    kind: Literal["checkboxes"] = "checkboxes"
    label: str
    options: List[CheckboxOption] = Field(default_factory=list)


class PlaceholderBlock(BaseModel):
    """Visible stand-in for missing data (e.g., an empty list-valued field)."""
    kind: Literal["placeholder"] = "placeholder"
    text: str


class SignatureBlock(BaseModel):
    kind: Literal["signatures"] = "signatures"
    parties: List[str] = Field(default_factory=list)


class PageBreakBlock(BaseModel):
    kind: Literal["page_break"] = "page_break"


class SectionBlock(BaseModel):
    kind: Literal["section"] = "section"
    key: str
    label: str
    title: str
    prefix: Optional[str] = Field(default=None, description="e.g. 'Addendum' for lettered addenda")
    blocks: List["Block"] = Field(default_factory=list)

    @property
    def heading(self) -> str:
        if self.prefix:
            return f"{self.prefix} {self.label}: {self.title}"
        return f"{self.label}. {self.title}" if self.label else self.title


Block = Annotated[
    Union[
        HeadingBlock,
        ParagraphBlock,
        FieldTableBlock,
        TableBlock,
        CheckboxBlock,
        PlaceholderBlock,
        SignatureBlock,
        PageBreakBlock,
        SectionBlock,
    ],
    Field(discriminator="kind"),
]

SectionBlock.model_rebuild()


class TocEntry(BaseModel):
    key: str
    label: str
    title: str


class Document(BaseModel):
    """Correctly ordered, correctly labelled content tree for one render."""
    template: str
    title: str
    subtitle: Optional[str] = None
    toc: List[TocEntry] = Field(default_factory=list)
    blocks: List[Block] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    @computed_field
    @property
    def status(self) -> RenderStatus:
        return RenderStatus.INCOMPLETE if self.warnings else RenderStatus.SUCCESS

    def sections(self) -> List[SectionBlock]:
        """Top-level sections and addenda in document order."""
        return [b for b in self.blocks if isinstance(b, SectionBlock)]

    def section(self, key: str) -> Optional[SectionBlock]:
        for s in self.sections():
            if s.key == key:
                return s
        return None


# =============================================================================
# Registry / API Models
# =============================================================================

class TemplateInfo(BaseModel):
    """Information about an available template."""
    name: str = Field(description="Template name (used in URIs)")
    title: str
    description: str
    uri: str
    required_inputs: List[str] = Field(default_factory=list)
    optional_inputs: List[str] = Field(default_factory=list)


class RenderRequest(BaseModel):
    template: str = Field(description="Template name or docgen://templates/<name> URI")
    inputs: dict = Field(default_factory=dict)


class RenderResponse(BaseModel):
    status: RenderStatus
    document: Document
