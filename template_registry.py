"""Template registry and the single render entry point.

render_document() is stateless: each call validates its own input map and
builds a fresh content tree, so concurrent renders share nothing mutable.
"""

from __future__ import annotations

import logging
from typing import Any

from composer import TEMPLATE_URI_PREFIX, DocumentTemplate, compose
from invoice_templates import INVOICE
from lease_templates import FLORIDA_LEASE, THREE_DAY_NOTICE
from letter_templates import LETTER
from sale_templates import (
    BILL_OF_SALE,
    COMPARATIVE_MARKET_ANALYSIS,
    FLORIDA_ESCALATION_ADDENDUM,
    FLORIDA_LISTING_AGREEMENT,
    FLORIDA_PURCHASE_CONTRACT,
)
from schemas import Document, TemplateInfo

log = logging.getLogger(__name__)


class TemplateNotFoundError(LookupError):
    """Raised when a template name or URI does not match a registered template."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown template: {name!r}. Available: {', '.join(TEMPLATES)}")


TEMPLATES: dict[str, DocumentTemplate] = {
    t.name: t
    for t in (
        FLORIDA_LEASE,
        THREE_DAY_NOTICE,
        FLORIDA_PURCHASE_CONTRACT,
        FLORIDA_ESCALATION_ADDENDUM,
        FLORIDA_LISTING_AGREEMENT,
        BILL_OF_SALE,
        COMPARATIVE_MARKET_ANALYSIS,
        INVOICE,
        LETTER,
    )
}


def parse_template_uri(uri: str) -> str:
    """Extract the template name from 'docgen://templates/<name>'.

    Bare names pass through unchanged.

    Raises:
        ValueError: for a URI with a different scheme or an empty name.
    """
    uri = uri.strip()
    if "://" not in uri:
        return uri
    if not uri.startswith(TEMPLATE_URI_PREFIX):
        raise ValueError(f"Invalid template URI: {uri!r} (expected {TEMPLATE_URI_PREFIX}<name>)")
    name = uri[len(TEMPLATE_URI_PREFIX):].strip("/")
    if not name:
        raise ValueError(f"Template URI has no name: {uri!r}")
    return name


def get_template(name_or_uri: str) -> DocumentTemplate:
    """Look up a registered template by name or URI.

    Raises:
        TemplateNotFoundError: if no template matches.
    """
    try:
        name = parse_template_uri(name_or_uri)
    except ValueError:
        raise TemplateNotFoundError(name_or_uri)
    template = TEMPLATES.get(name)
    if template is None:
        raise TemplateNotFoundError(name)
    return template


def list_templates() -> list[TemplateInfo]:
    return [t.info() for t in TEMPLATES.values()]


def render_document(name: str, inputs: Any) -> Document:
    """Render one document's content tree.

    Args:
        name: Template name or docgen:// URI.
        inputs: Flat input map. Missing or malformed values degrade to
                defaults and are reported in Document.warnings.

    Returns:
        The composed Document.
    """
    template = get_template(name)
    log.debug("Rendering %s", template.name)
    return compose(template, inputs)
