"""Field Validator.

Applies the per-field rules declared in the Schema Registry: type check,
pattern or format match, allowed-value membership, and numeric bounds.

Every check reads exactly one raw value and one FieldSpec and returns a
FieldOutcome. Checks never look at other fields, so the engine may run them
concurrently.
"""

from __future__ import annotations

import ipaddress
import re
from collections.abc import Collection, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from aksconf_core.diagnostics import (
    Diagnostic,
    enum_violation,
    join_path,
    missing_required,
    out_of_range,
    pattern_mismatch,
    type_mismatch,
    unknown_field,
)
from aksconf_core.registry import FieldSpec, FieldType, StringFormat

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_SEQUENCE_TYPES = (list, tuple, set, frozenset)


@dataclass(frozen=True)
class FieldOutcome:
    """Result of checking one field.

    Attributes:
        path: Dotted path of the field.
        name: Field name within its section.
        provided: Whether the input supplied a non-null value.
        value: Accepted, typed value (None when not provided or rejected).
        diagnostics: Violations found for this field.
    """

    path: str
    name: str
    provided: bool
    value: Any = None
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    @property
    def accepted(self) -> bool:
        """True when a user value was supplied and passed every check."""
        return self.provided and self.ok


@dataclass(frozen=True)
class FieldCheck:
    """A scheduled field check: one spec applied to one raw value.

    Attributes:
        section: Path of the section owning the field.
        entry: Map entry key for map sections, otherwise None.
        spec: Field declaration.
        raw: Raw input value (None when absent).
        provided: Whether the input supplied a non-null value.
        path: Dotted path of the field.
    """

    section: str
    entry: str | None
    spec: FieldSpec
    raw: Any
    provided: bool
    path: str

    def run(self) -> FieldOutcome:
        return check_field(self.spec, self.raw, provided=self.provided, path=self.path)


def plan_field_checks(
    fields: Collection[FieldSpec],
    raw: Mapping[str, Any],
    path: str,
    *,
    section: str,
    entry: str | None = None,
) -> list[FieldCheck]:
    """Schedule one check per declared field, in declaration order.

    An explicit null counts as "not provided", so defaults apply to it.
    """
    checks: list[FieldCheck] = []
    for spec in fields:
        value = raw.get(spec.name)
        checks.append(
            FieldCheck(
                section=section,
                entry=entry,
                spec=spec,
                raw=value,
                provided=value is not None,
                path=join_path(path, spec.name),
            )
        )
    return checks


def find_unknown_keys(
    raw: Mapping[Any, Any],
    allowed: Collection[str],
    path: str,
) -> list[Diagnostic]:
    """Report every key of ``raw`` that is not declared for its section."""
    return [unknown_field(join_path(path, str(key))) for key in raw if key not in allowed]


def check_field(spec: FieldSpec, raw: Any, *, provided: bool, path: str) -> FieldOutcome:
    """Check one raw value against its FieldSpec.

    Args:
        spec: Field declaration from the Schema Registry.
        raw: Raw input value.
        provided: Whether the input supplied a non-null value.
        path: Dotted path used to tag diagnostics.

    Returns:
        FieldOutcome with the typed value or the diagnostics found.
    """
    if not provided:
        if spec.required:
            return FieldOutcome(
                path=path,
                name=spec.name,
                provided=False,
                diagnostics=(missing_required(path),),
            )
        return FieldOutcome(path=path, name=spec.name, provided=False)

    checker = _CHECKERS[spec.type]
    value, diagnostics = checker(spec, raw, path)
    if diagnostics:
        return FieldOutcome(
            path=path,
            name=spec.name,
            provided=True,
            diagnostics=tuple(diagnostics),
        )
    return FieldOutcome(path=path, name=spec.name, provided=True, value=value)


def _check_string(spec: FieldSpec, raw: Any, path: str) -> tuple[Any, list[Diagnostic]]:
    if not isinstance(raw, str):
        return None, [type_mismatch(path, "string", raw)]
    return _check_string_value(spec, raw, path)


def _check_string_value(spec: FieldSpec, raw: str, path: str) -> tuple[Any, list[Diagnostic]]:
    if spec.non_empty and not raw.strip():
        return None, [pattern_mismatch(path, raw, r"\S", what="a non-empty string")]

    if spec.choices is not None and raw not in spec.choices:
        return None, [enum_violation(path, raw, spec.choices)]

    if spec.pattern is not None and re.fullmatch(spec.pattern, raw) is None:
        return None, [pattern_mismatch(path, raw, spec.pattern)]

    if spec.format is StringFormat.CIDR:
        try:
            return str(ipaddress.ip_network(raw, strict=True)), []
        except ValueError:
            return None, [
                pattern_mismatch(path, raw, "cidr", what="a CIDR network (e.g. 10.0.0.0/16)")
            ]

    if spec.format is StringFormat.IP_ADDRESS:
        try:
            return str(ipaddress.ip_address(raw)), []
        except ValueError:
            return None, [pattern_mismatch(path, raw, "ip_address", what="an IP address")]

    return raw, []


def _check_integer(spec: FieldSpec, raw: Any, path: str) -> tuple[Any, list[Diagnostic]]:
    # bool is an int subclass
    if isinstance(raw, bool) or not isinstance(raw, int):
        return None, [type_mismatch(path, "integer", raw)]

    too_low = spec.minimum is not None and raw < spec.minimum
    too_high = spec.maximum is not None and raw > spec.maximum
    if too_low or too_high:
        return None, [out_of_range(path, raw, minimum=spec.minimum, maximum=spec.maximum)]
    return raw, []


def _check_boolean(spec: FieldSpec, raw: Any, path: str) -> tuple[Any, list[Diagnostic]]:
    if not isinstance(raw, bool):
        return None, [type_mismatch(path, "boolean", raw)]
    return raw, []


def _check_string_set(spec: FieldSpec, raw: Any, path: str) -> tuple[Any, list[Diagnostic]]:
    if isinstance(raw, str) or not isinstance(raw, _SEQUENCE_TYPES):
        return None, [type_mismatch(path, "list of strings", raw)]

    diagnostics: list[Diagnostic] = []
    items: set[str] = set()
    for item in raw:
        if not isinstance(item, str):
            diagnostics.append(type_mismatch(path, "list of strings", item))
            continue
        if spec.pattern is not None and re.fullmatch(spec.pattern, item) is None:
            diagnostics.append(pattern_mismatch(path, item, spec.pattern))
            continue
        items.add(item)

    if spec.choices is not None:
        unrecognized = sorted(items.difference(spec.choices))
        if unrecognized:
            diagnostics.append(enum_violation(path, unrecognized, spec.choices))

    if diagnostics:
        return None, diagnostics
    return tuple(sorted(items)), []


def _check_string_map(spec: FieldSpec, raw: Any, path: str) -> tuple[Any, list[Diagnostic]]:
    if not isinstance(raw, Mapping):
        return None, [type_mismatch(path, "mapping of strings", raw)]

    diagnostics: list[Diagnostic] = []
    for key, item in raw.items():
        if not isinstance(key, str):
            diagnostics.append(type_mismatch(path, "string key", key))
        elif not isinstance(item, str):
            diagnostics.append(type_mismatch(join_path(path, key), "string", item))

    if diagnostics:
        return None, diagnostics
    return dict(raw), []


def _check_date(spec: FieldSpec, raw: Any, path: str) -> tuple[Any, list[Diagnostic]]:
    if isinstance(raw, datetime):
        return None, [
            pattern_mismatch(path, raw.isoformat(), "YYYY-MM-DD", what="a date (YYYY-MM-DD)")
        ]
    if isinstance(raw, date):
        return raw, []
    if not isinstance(raw, str):
        return None, [type_mismatch(path, "date string", raw)]

    if _ISO_DATE.match(raw):
        try:
            return date.fromisoformat(raw), []
        except ValueError:
            pass
    return None, [pattern_mismatch(path, raw, "YYYY-MM-DD", what="a date (YYYY-MM-DD)")]


def _check_datetime(spec: FieldSpec, raw: Any, path: str) -> tuple[Any, list[Diagnostic]]:
    what = "a date-time with UTC offset (e.g. 2025-01-01T00:00:00Z)"
    if isinstance(raw, datetime):
        parsed = raw
    elif isinstance(raw, date):
        return None, [pattern_mismatch(path, raw.isoformat(), "date-time", what=what)]
    elif isinstance(raw, str):
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            return None, [pattern_mismatch(path, raw, "date-time", what=what)]
    else:
        return None, [type_mismatch(path, "date-time string", raw)]

    if parsed.tzinfo is None or parsed.utcoffset() is None:
        shown = raw if isinstance(raw, str) else raw.isoformat()
        return None, [pattern_mismatch(path, shown, "date-time", what=what)]
    return parsed, []


def _check_record_list(spec: FieldSpec, raw: Any, path: str) -> tuple[Any, list[Diagnostic]]:
    if isinstance(raw, str) or not isinstance(raw, (list, tuple)):
        return None, [type_mismatch(path, "list", raw)]
    return tuple(raw), []


_CHECKERS = {
    FieldType.STRING: _check_string,
    FieldType.INTEGER: _check_integer,
    FieldType.BOOLEAN: _check_boolean,
    FieldType.STRING_SET: _check_string_set,
    FieldType.STRING_MAP: _check_string_map,
    FieldType.DATE: _check_date,
    FieldType.DATETIME: _check_datetime,
    FieldType.RECORD_LIST: _check_record_list,
}
