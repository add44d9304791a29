"""Validation stages for aksconf.

This module exports the engine's internal stages:
- check_field / FieldOutcome: Field Validator
- check_section / SECTION_RULES: Cross-Field Validator
- resolve_window: Maintenance Window Resolver
- NodePoolPolicyChecker: Node Pool Policy Checker
- normalize_fields / normalize_map: Normalizer
- assemble / ValidationReport: Output Assembler
- run_ordered: Ordered task execution with optional worker threads
"""

from __future__ import annotations

from aksconf_core.validation.assembler import ValidationReport, assemble, compose_document
from aksconf_core.validation.cross_field import SECTION_RULES, check_section
from aksconf_core.validation.fields import (
    FieldCheck,
    FieldOutcome,
    check_field,
    find_unknown_keys,
    plan_field_checks,
)
from aksconf_core.validation.maintenance import (
    REQUIRED_BY_FREQUENCY,
    canonical_blackout_periods,
    check_blackout_periods,
    resolve_window,
)
from aksconf_core.validation.node_pools import NodePoolEntries, NodePoolPolicyChecker
from aksconf_core.validation.normalizer import normalize_fields, normalize_map
from aksconf_core.validation.parallel import run_ordered
from aksconf_core.validation.sections import (
    SectionInput,
    SectionResult,
    SectionState,
    SectionView,
    resolve_sections,
)

__all__ = [
    # Field Validator
    "FieldCheck",
    "FieldOutcome",
    "check_field",
    "find_unknown_keys",
    "plan_field_checks",
    # Sections
    "SectionInput",
    "SectionResult",
    "SectionState",
    "SectionView",
    "resolve_sections",
    # Section rules
    "SECTION_RULES",
    "check_section",
    "REQUIRED_BY_FREQUENCY",
    "canonical_blackout_periods",
    "check_blackout_periods",
    "resolve_window",
    "NodePoolEntries",
    "NodePoolPolicyChecker",
    # Output
    "normalize_fields",
    "normalize_map",
    "ValidationReport",
    "assemble",
    "compose_document",
    # Execution
    "run_ordered",
]
