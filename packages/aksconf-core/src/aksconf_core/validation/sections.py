"""Section resolution for cluster configuration documents.

Decides, for every section declared in the registry, what the engine should
do with it before any field is checked:

- present: a mapping was supplied; validate it.
- defaulted: a section with defaults was omitted; validate an empty mapping.
- absent: a nullable section was omitted or null; skip it and every nested
  section, its canonical value is None.
- invalid: a required section is missing or the value is not a mapping.
- skipped: the enclosing section is absent or invalid.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from aksconf_core.diagnostics import Diagnostic, missing_required, type_mismatch
from aksconf_core.registry import ROOT_PATH, FieldSpec, Registry, SectionSpec
from aksconf_core.validation.fields import FieldOutcome


class SectionState(str, Enum):
    """What the engine does with a section."""

    PRESENT = "present"
    DEFAULTED = "defaulted"
    ABSENT = "absent"
    INVALID = "invalid"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class SectionInput:
    """A registry section paired with its raw input.

    Attributes:
        spec: Section declaration.
        state: Resolution outcome.
        raw: The section's raw mapping ({} unless present).
        diagnostics: Shape problems found while resolving.
    """

    spec: SectionSpec
    state: SectionState
    raw: Mapping[Any, Any] = field(default_factory=dict)
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def path(self) -> str:
        return self.spec.path

    @property
    def active(self) -> bool:
        """True when the section's fields are validated."""
        return self.state in (SectionState.PRESENT, SectionState.DEFAULTED)


def resolve_sections(document: Mapping[Any, Any], registry: Registry) -> list[SectionInput]:
    """Resolve every registry section against the document, in registry order.

    Args:
        document: The top-level configuration mapping.
        registry: Section declarations. Parents must precede their children.

    Returns:
        One SectionInput per declared section.
    """
    resolved: dict[str, SectionInput] = {}
    for spec in registry:
        if spec.path == ROOT_PATH:
            resolved[spec.path] = SectionInput(spec=spec, state=SectionState.PRESENT, raw=document)
            continue

        parent = resolved[spec.parent_path or ROOT_PATH]
        if not parent.active:
            resolved[spec.path] = SectionInput(spec=spec, state=SectionState.SKIPPED)
            continue

        resolved[spec.path] = _resolve_child(spec, parent.raw.get(spec.key))

    return list(resolved.values())


def _resolve_child(spec: SectionSpec, value: Any) -> SectionInput:
    if value is None:
        if spec.required:
            return SectionInput(
                spec=spec,
                state=SectionState.INVALID,
                diagnostics=(missing_required(spec.path),),
            )
        if spec.nullable:
            return SectionInput(spec=spec, state=SectionState.ABSENT)
        return SectionInput(spec=spec, state=SectionState.DEFAULTED)

    if not isinstance(value, Mapping):
        return SectionInput(
            spec=spec,
            state=SectionState.INVALID,
            diagnostics=(type_mismatch(spec.path, "mapping", value),),
        )

    return SectionInput(spec=spec, state=SectionState.PRESENT, raw=value)


@dataclass(frozen=True)
class SectionView:
    """Read-only view of one object's checked fields.

    Rules that span fields read values through this view so that only
    accepted values or registry defaults are ever compared.

    Attributes:
        path: Dotted path of the object (section, or map entry).
        fields: Field declarations of the object.
        outcomes: Field outcomes keyed by field name.
    """

    path: str
    fields: tuple[FieldSpec, ...]
    outcomes: Mapping[str, FieldOutcome]

    @property
    def clean(self) -> bool:
        """True when every field of the object passed its checks."""
        return all(outcome.ok for outcome in self.outcomes.values())

    def provided(self, name: str) -> bool:
        return self.outcomes[name].provided

    def accepted(self, name: str) -> bool:
        return self.outcomes[name].accepted

    def usable(self, name: str) -> bool:
        """True when the field either passed or was omitted."""
        return self.outcomes[name].ok

    def value(self, name: str) -> Any:
        """Return the accepted value, the registry default when omitted, or None."""
        outcome = self.outcomes[name]
        if outcome.provided:
            return outcome.value
        for spec in self.fields:
            if spec.name == name:
                return spec.default
        raise KeyError(name)

    def diagnostics(self) -> list[Diagnostic]:
        """Field diagnostics in declaration order."""
        return [d for spec in self.fields for d in self.outcomes[spec.name].diagnostics]


@dataclass(frozen=True)
class SectionResult:
    """Outcome of the section-level phase for one section.

    Attributes:
        path: Dotted path of the section.
        diagnostics: Violations found by the section's rules.
        overrides: Canonical values replacing normalized field values.
    """

    path: str
    diagnostics: tuple[Diagnostic, ...] = ()
    overrides: Mapping[str, Any] = field(default_factory=dict)
