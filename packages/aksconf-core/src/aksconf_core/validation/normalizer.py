"""Normalizer.

Merges accepted user values with registry defaults. It only runs on
sections that validated cleanly, so a default never hides a rejected value.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from aksconf_core.validation.sections import SectionView


def normalize_fields(
    view: SectionView,
    overrides: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Return a fully-populated mapping for one object.

    Omitted fields take their registry default. Overrides (canonical values
    computed by a section rule) replace the normalized value.

    Raises:
        ValueError: If the view still carries diagnostics.
    """
    if not view.clean:
        raise ValueError(f"Cannot normalize {view.path or '<root>'}: validation failed")

    normalized: dict[str, Any] = {}
    for spec in view.fields:
        outcome = view.outcomes[spec.name]
        if outcome.provided:
            normalized[spec.name] = outcome.value
        else:
            # Registry defaults are shared, never hand them out
            normalized[spec.name] = copy.deepcopy(spec.default)

    if overrides:
        normalized.update(overrides)
    return normalized


def normalize_map(views: Mapping[str, SectionView]) -> dict[str, dict[str, Any]]:
    """Normalize every entry of a map section, keeping input key order."""
    return {key: normalize_fields(view) for key, view in views.items()}
