"""Input resolution and type coercion for template input maps.

Every accessor here is total: a missing key or a malformed value resolves to
the caller's default and never raises. Templates declare their fields once as
FieldSpec lists; FieldRegistry validates an input map against them before
rendering and hands back a read-only ResolvedFields view.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any, Iterable, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from schemas import FieldSpec, FieldType, TriState

log = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

_NUMERIC_STRIP = str.maketrans("", "", "$,")


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------

def resolve(inputs: Any, name: str, default: Any = None) -> Any:
    """Return inputs[name] if present and non-null, else *default*."""
    if not isinstance(inputs, Mapping):
        return default
    value = inputs.get(name)
    return default if value is None else value


# ---------------------------------------------------------------------------
# Coercers
# ---------------------------------------------------------------------------

def coerce_bool(value: Any) -> bool:
    """True only for literal True or the exact string "true"."""
    if value is True:
        return True
    return isinstance(value, str) and value == "true"


def coerce_number(value: Any, default: float = 0.0) -> float:
    """Parse numbers and numeric strings ("$1,500", "7.5%"); fail closed to *default*."""
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip().translate(_NUMERIC_STRIP)
        if text.endswith("%"):
            text = text[:-1].strip()
        if not text:
            return default
        try:
            number = float(text)
        except ValueError:
            return default
    else:
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def coerce_int(value: Any, default: int = 0) -> int:
    number = coerce_number(value, default=float("nan"))
    if math.isnan(number):
        return default
    return int(number)


def coerce_text(value: Any, default: str = "") -> str:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return default
        return str(int(value)) if value.is_integer() else str(value)
    return default


def coerce_tristate(value: Any) -> TriState:
    """Map a disclosure answer onto yes/no/unknown; anything unrecognized is unknown."""
    if isinstance(value, TriState):
        return value
    if value is True:
        return TriState.YES
    if value is False:
        return TriState.NO
    if isinstance(value, str):
        try:
            return TriState(value.strip().lower())
        except ValueError:
            pass
    return TriState.UNKNOWN


def coerce_choice(value: Any, choices: Sequence[str], default: str) -> str:
    """Case-insensitive match against a fixed set, else the conservative *default*."""
    if isinstance(value, str):
        wanted = value.strip().lower()
        for choice in choices:
            if choice.lower() == wanted:
                return choice
    return default


def coerce_records(value: Any, model: Type[M]) -> list[M]:
    """Build *model* instances from a list of dicts, skipping malformed entries."""
    if not isinstance(value, list):
        return []
    records: list[M] = []
    for i, raw in enumerate(value):
        if isinstance(raw, model):
            records.append(raw)
            continue
        if not isinstance(raw, Mapping):
            log.warning("Skipping %s entry %d: expected an object, got %s", model.__name__, i, type(raw).__name__)
            continue
        try:
            records.append(model.model_validate(dict(raw)))
        except ValidationError as e:
            log.warning("Skipping malformed %s entry %d: %s", model.__name__, i, e.errors()[0]["msg"])
    return records


def is_filled(value: Any) -> bool:
    """Non-empty after stripping (strings) or simply present (everything else)."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, dict)):
        return bool(value)
    return True


# ---------------------------------------------------------------------------
# Field registry
# ---------------------------------------------------------------------------

def _coerce_by_spec(spec: FieldSpec, raw: Any) -> Any:
    if raw is None:
        return spec.default
    ft = spec.field_type
    if ft == FieldType.STRING:
        return coerce_text(raw, spec.default if spec.default is not None else "")
    if ft == FieldType.NUMBER:
        return coerce_number(raw, spec.default if spec.default is not None else 0.0)
    if ft == FieldType.INTEGER:
        return coerce_int(raw, spec.default if spec.default is not None else 0)
    if ft == FieldType.BOOLEAN:
        return coerce_bool(raw)
    if ft == FieldType.TRISTATE:
        return coerce_tristate(raw)
    if ft == FieldType.CHOICE:
        return coerce_choice(raw, spec.choices or [], spec.default)
    if ft == FieldType.RECORDS:
        # Parsed lazily by ResolvedFields.records() with the template's model
        return raw if isinstance(raw, list) else []
    return raw


def _looks_malformed(spec: FieldSpec, raw: Any) -> bool:
    ft = spec.field_type
    # A blank answer is absent, not malformed
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return False
    if ft in (FieldType.NUMBER, FieldType.INTEGER):
        return math.isnan(coerce_number(raw, default=float("nan")))
    if ft == FieldType.BOOLEAN:
        return not isinstance(raw, bool) and raw not in ("true", "false")
    if ft == FieldType.TRISTATE:
        return coerce_tristate(raw) == TriState.UNKNOWN and not (
            isinstance(raw, str) and raw.strip().lower() == "unknown"
        )
    if ft == FieldType.CHOICE:
        return not isinstance(raw, str) or raw.strip().lower() not in {c.lower() for c in spec.choices or []}
    if ft == FieldType.RECORDS:
        return not isinstance(raw, list)
    return False


class ResolvedFields(Mapping):
    """Read-only, coerced view over one input map.

    Declared fields come back typed; undeclared keys fall through to the raw
    input so templates can still reach ad hoc values with the coercers.
    """

    def __init__(self, raw: Mapping[str, Any], values: Mapping[str, Any], warnings: Iterable[str] = ()):
        self._raw = MappingProxyType(dict(raw))
        self._values = MappingProxyType(dict(values))
        self.warnings: tuple[str, ...] = tuple(warnings)

    def __getitem__(self, name: str) -> Any:
        if name in self._values:
            return self._values[name]
        return self._raw[name]

    def __iter__(self) -> Iterator[str]:
        yield from self._values
        for key in self._raw:
            if key not in self._values:
                yield key

    def __len__(self) -> int:
        return len(set(self._values) | set(self._raw))

    @property
    def raw(self) -> Mapping[str, Any]:
        return self._raw

    def was_supplied(self, name: str) -> bool:
        return self._raw.get(name) is not None

    def text(self, name: str, default: str = "") -> str:
        """Coerced text, or the caller's *default* when that comes out blank."""
        return coerce_text(resolve(self, name)) or default

    def number(self, name: str, default: float = 0.0) -> float:
        return coerce_number(resolve(self, name), default)

    def integer(self, name: str, default: int = 0) -> int:
        return coerce_int(resolve(self, name), default)

    def flag(self, name: str) -> bool:
        return coerce_bool(resolve(self, name))

    def tristate(self, name: str) -> TriState:
        return coerce_tristate(resolve(self, name))

    def records(self, name: str, model: Type[M]) -> list[M]:
        value = resolve(self, name, [])
        if isinstance(value, list) and all(isinstance(v, model) for v in value):
            return list(value)
        return coerce_records(value, model)

    def filled(self, name: str) -> bool:
        return is_filled(resolve(self, name))


class FieldRegistry:
    """Per-template schema: name → FieldSpec, validated once before rendering."""

    def __init__(self, specs: Iterable[FieldSpec]):
        self._specs: dict[str, FieldSpec] = {}
        for spec in specs:
            if spec.name in self._specs:
                raise ValueError(f"Duplicate field spec: {spec.name}")
            self._specs[spec.name] = spec

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self._specs.values())

    def get(self, name: str) -> Optional[FieldSpec]:
        return self._specs.get(name)

    @property
    def required_names(self) -> list[str]:
        return [s.name for s in self._specs.values() if s.required]

    @property
    def optional_names(self) -> list[str]:
        return [s.name for s in self._specs.values() if not s.required]

    def validate(self, inputs: Any) -> ResolvedFields:
        """Coerce every declared field and collect warnings; never raises on input."""
        raw: Mapping[str, Any] = inputs if isinstance(inputs, Mapping) else {}
        if not isinstance(inputs, Mapping) and inputs is not None:
            log.warning("Input map is %s, not a mapping — using defaults", type(inputs).__name__)

        values: dict[str, Any] = {}
        warnings: list[str] = []
        for spec in self._specs.values():
            value = resolve(raw, spec.name)
            if spec.required and not is_filled(value):
                warnings.append(f"Missing required field: {spec.name}")
            elif _looks_malformed(spec, value):
                warnings.append(f"Malformed value for {spec.name}: {value!r}")
            values[spec.name] = _coerce_by_spec(spec, value)

        if warnings:
            log.info("Resolved %d fields with %d warning(s)", len(values), len(warnings))
        return ResolvedFields(raw, values, warnings)


# ---------------------------------------------------------------------------
# FieldSpec shorthands for template declarations
# ---------------------------------------------------------------------------

def text_field(name: str, required: bool = False, default: str = "", description: str = "") -> FieldSpec:
    return FieldSpec(name=name, field_type=FieldType.STRING, default=default, required=required, description=description)


def number_field(name: str, required: bool = False, default: float = 0.0, description: str = "") -> FieldSpec:
    return FieldSpec(name=name, field_type=FieldType.NUMBER, default=default, required=required, description=description)


def integer_field(name: str, required: bool = False, default: int = 0, description: str = "") -> FieldSpec:
    return FieldSpec(name=name, field_type=FieldType.INTEGER, default=default, required=required, description=description)


def flag_field(name: str, description: str = "") -> FieldSpec:
    return FieldSpec(name=name, field_type=FieldType.BOOLEAN, default=False, description=description)


def tristate_field(name: str, description: str = "") -> FieldSpec:
    return FieldSpec(name=name, field_type=FieldType.TRISTATE, default=TriState.UNKNOWN, description=description)


def choice_field(name: str, choices: Sequence[str], default: str, description: str = "") -> FieldSpec:
    return FieldSpec(
        name=name,
        field_type=FieldType.CHOICE,
        choices=list(choices),
        default=default,
        description=description,
    )


def records_field(name: str, required: bool = False, description: str = "") -> FieldSpec:
    return FieldSpec(name=name, field_type=FieldType.RECORDS, default=[], required=required, description=description)
