"""Maintenance Window Resolver.

Validates and canonicalizes the recurring-schedule objects
maintenance_window_auto_upgrade and maintenance_window_node_os. Both share one
rule set. They differ only in the frequencies the registry allows for them.

Field-level rules (duration bounds, interval lower bound, start_time and
utc_offset patterns, frequency membership) run in the Field Validator. This
module adds the rules that depend on the chosen frequency and checks every
blackout period.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

import structlog

from aksconf_core.diagnostics import (
    Diagnostic,
    conflicting_fields,
    cross_field_violation,
    join_path,
    missing_required,
    out_of_range,
    type_mismatch,
    unknown_field,
)
from aksconf_core.registry import BLACKOUT_PERIOD_FIELDS, MAX_INTERVAL_BY_FREQUENCY
from aksconf_core.validation.fields import check_field
from aksconf_core.validation.sections import SectionResult, SectionView

logger = structlog.get_logger(__name__)

SCHEDULE_FIELDS: tuple[str, ...] = ("day_of_week", "day_of_month", "week_index")

REQUIRED_BY_FREQUENCY: dict[str, tuple[str, ...]] = {
    "Daily": (),
    "Weekly": ("day_of_week",),
    "AbsoluteMonthly": ("day_of_month",),
    "RelativeMonthly": ("week_index", "day_of_week"),
}
"""Companion fields each frequency requires."""

_BLACKOUT_KEYS = frozenset(spec.name for spec in BLACKOUT_PERIOD_FIELDS)


def resolve_window(view: SectionView) -> SectionResult:
    """Check one maintenance window and canonicalize its blackout periods.

    Rules that depend on a field only run when that field was accepted, so a
    rejected frequency never produces companion-field diagnostics.

    Args:
        view: Checked fields of the window.

    Returns:
        SectionResult with frequency and blackout diagnostics, and the
        canonical blackout list as an override.
    """
    diagnostics: list[Diagnostic] = []

    if view.accepted("frequency"):
        diagnostics.extend(_check_frequency_rules(view, view.value("frequency")))

    overrides: dict[str, Any] = {}
    if view.accepted("blackout_periods"):
        blackout_diagnostics, periods = check_blackout_periods(
            view.value("blackout_periods"),
            join_path(view.path, "blackout_periods"),
        )
        diagnostics.extend(blackout_diagnostics)
        if not blackout_diagnostics:
            overrides["blackout_periods"] = canonical_blackout_periods(periods)

    if diagnostics:
        logger.debug("maintenance_window_invalid", window=view.path, count=len(diagnostics))
    return SectionResult(path=view.path, diagnostics=tuple(diagnostics), overrides=overrides)


def _check_frequency_rules(view: SectionView, frequency: str) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []

    max_interval = MAX_INTERVAL_BY_FREQUENCY[frequency]
    interval = view.value("interval")
    if view.accepted("interval") and interval > max_interval:
        diagnostics.append(
            out_of_range(
                join_path(view.path, "interval"),
                interval,
                minimum=1,
                maximum=max_interval,
                reason=f"exceeds the maximum of {max_interval} for {frequency} frequency",
            )
        )

    required = REQUIRED_BY_FREQUENCY[frequency]
    for name in required:
        if not view.provided(name):
            diagnostics.append(
                missing_required(
                    join_path(view.path, name),
                    f"{frequency} frequency requires {name}",
                )
            )

    for name in SCHEDULE_FIELDS:
        if name not in required and view.provided(name):
            diagnostics.append(
                conflicting_fields(
                    join_path(view.path, name),
                    f"{name} does not apply to {frequency} frequency",
                    view.outcomes[name].value,
                )
            )

    return diagnostics


def check_blackout_periods(
    records: tuple[Any, ...],
    path: str,
) -> tuple[list[Diagnostic], list[tuple[datetime, datetime]]]:
    """Check every blackout period. Never stops at the first violation.

    Overlapping periods are allowed.

    Args:
        records: Raw blackout period entries.
        path: Dotted path of the blackout_periods field.

    Returns:
        Tuple of (diagnostics, accepted (start, end) pairs).
    """
    diagnostics: list[Diagnostic] = []
    periods: list[tuple[datetime, datetime]] = []

    for index, record in enumerate(records):
        record_path = join_path(path, str(index))
        if not isinstance(record, Mapping):
            diagnostics.append(type_mismatch(record_path, "mapping with start and end", record))
            continue

        record_diagnostics = [
            unknown_field(join_path(record_path, str(key)))
            for key in record
            if key not in _BLACKOUT_KEYS
        ]
        bounds: dict[str, datetime] = {}
        for spec in BLACKOUT_PERIOD_FIELDS:
            value = record.get(spec.name)
            outcome = check_field(
                spec,
                value,
                provided=value is not None,
                path=join_path(record_path, spec.name),
            )
            record_diagnostics.extend(outcome.diagnostics)
            if outcome.accepted:
                bounds[spec.name] = outcome.value

        if "start" in bounds and "end" in bounds and bounds["end"] <= bounds["start"]:
            record_diagnostics.append(
                cross_field_violation(
                    record_path,
                    "Blackout period end must be after start",
                    {"start": bounds["start"].isoformat(), "end": bounds["end"].isoformat()},
                )
            )

        diagnostics.extend(record_diagnostics)
        if not record_diagnostics:
            periods.append((bounds["start"], bounds["end"]))

    return diagnostics, periods


def canonical_blackout_periods(
    periods: list[tuple[datetime, datetime]],
) -> tuple[dict[str, datetime], ...]:
    """Return blackout periods sorted by (start, end) without duplicates."""
    return tuple({"start": start, "end": end} for start, end in sorted(set(periods)))
