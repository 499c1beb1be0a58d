"""Conditional section selection and sequential labelling.

A template lists its optional sections as SectionRule objects in canonical
order. Selection evaluates each rule's predicate against the resolved fields
and numbers only the included ones, so labels stay contiguous (1, 2, 3 or
A, B, C) whichever subset a given input map turns on. Cross-references look
labels up by key rather than hard-coding them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from calculators import built_before as _built_before
from field_resolver import coerce_bool, coerce_text, is_filled, resolve
from schemas import CheckboxOption, LabelStyle, TocEntry

log = logging.getLogger(__name__)

Predicate = Callable[[Mapping[str, Any]], bool]

_ROMAN_NUMERALS = [
    (1000, "M"), (900, "CM"), (500, "D"), (400, "CD"),
    (100, "C"), (90, "XC"), (50, "L"), (40, "XL"),
    (10, "X"), (9, "IX"), (5, "V"), (4, "IV"), (1, "I"),
]


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

def always() -> Predicate:
    return lambda fields: True


def flag(name: str) -> Predicate:
    """Included when the boolean field is true (True or "true")."""
    return lambda fields: coerce_bool(resolve(fields, name))


def filled(name: str) -> Predicate:
    """Included when the field holds a non-empty value."""
    return lambda fields: is_filled(resolve(fields, name))


def equals(name: str, *values: str) -> Predicate:
    """Included when the field matches one of a small fixed set (case-insensitive)."""
    wanted = {v.lower() for v in values}
    return lambda fields: coerce_text(resolve(fields, name)).lower() in wanted


def not_equals(name: str, *values: str) -> Predicate:
    match = equals(name, *values)
    return lambda fields: not match(fields)


def built_before(name: str, year: int) -> Predicate:
    return lambda fields: _built_before(resolve(fields, name), year)


def any_of(*predicates: Predicate) -> Predicate:
    return lambda fields: any(p(fields) for p in predicates)


def all_of(*predicates: Predicate) -> Predicate:
    return lambda fields: all(p(fields) for p in predicates)


def negate(predicate: Predicate) -> Predicate:
    return lambda fields: not predicate(fields)


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------

def make_label(ordinal: int, style: LabelStyle) -> str:
    """1-based ordinal → '3', 'C', or 'III'."""
    if ordinal < 1:
        raise ValueError(f"Ordinal must be positive, got {ordinal}")
    if style == LabelStyle.NUMERIC:
        return str(ordinal)
    if style == LabelStyle.ALPHA:
        # Bijective base-26: Z is followed by AA
        letters = ""
        n = ordinal
        while n:
            n, rem = divmod(n - 1, 26)
            letters = chr(ord("A") + rem) + letters
        return letters
    out = []
    n = ordinal
    for value, numeral in _ROMAN_NUMERALS:
        count, n = divmod(n, value)
        out.append(numeral * count)
    return "".join(out)


# ---------------------------------------------------------------------------
# Rules and selection
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SectionRule:
    """One section in a template's canonical order."""
    key: str
    title: str
    build: Callable[..., list]
    predicate: Predicate = field(default_factory=always)

    def included(self, fields: Mapping[str, Any]) -> bool:
        return bool(self.predicate(fields))


@dataclass(frozen=True)
class SelectedSection:
    key: str
    title: str
    label: str
    ordinal: int
    rule: SectionRule


def select_sections(
    rules: Sequence[SectionRule],
    fields: Mapping[str, Any],
    style: LabelStyle = LabelStyle.NUMERIC,
) -> list[SelectedSection]:
    """Included rules in canonical order, labelled with a gap-free sequence."""
    seen: set[str] = set()
    selected: list[SelectedSection] = []
    for rule in rules:
        if rule.key in seen:
            raise ValueError(f"Duplicate section key: {rule.key}")
        seen.add(rule.key)
        if not rule.included(fields):
            log.debug("Section %s omitted", rule.key)
            continue
        ordinal = len(selected) + 1
        selected.append(SelectedSection(
            key=rule.key,
            title=rule.title,
            label=make_label(ordinal, style),
            ordinal=ordinal,
            rule=rule,
        ))
    return selected


def label_for(selected: Iterable[SelectedSection], key: str) -> Optional[str]:
    """Label of an included section, or None when it was omitted."""
    for section in selected:
        if section.key == key:
            return section.label
    return None


def build_toc(selected: Iterable[SelectedSection]) -> list[TocEntry]:
    return [TocEntry(key=s.key, label=s.label, title=s.title) for s in selected]


# ---------------------------------------------------------------------------
# List-driven rows
# ---------------------------------------------------------------------------

def expand_toggle_rows(
    fields: Mapping[str, Any],
    options: Sequence[tuple[str, str]],
    prefix: str = "",
) -> list[CheckboxOption]:
    """One row per (key, label) option, each toggled by its own boolean flag."""
    return [
        CheckboxOption(label=label, checked=coerce_bool(resolve(fields, f"{prefix}{key}")))
        for key, label in options
    ]
