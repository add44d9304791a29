"""Configuration engine.

Orchestrates one validation run over a raw cluster configuration document:

1. Resolve sections (presence, nullability, shape).
2. Field phase: every field check runs as an independent task (join).
3. Section phase: cross-field rules, maintenance windows, and node pool
   policies run as independent tasks, one per section (join).
4. Normalize every clean section and assemble the ClusterConfig, or return
   every diagnostic in registry order.

The engine keeps no state between runs.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog

from aksconf_core.diagnostics import Diagnostic, join_path, type_name
from aksconf_core.errors import StructuralError
from aksconf_core.registry import (
    MAINTENANCE_WINDOW_SECTIONS,
    REGISTRY,
    Registry,
    SectionKind,
)
from aksconf_core.settings import EngineSettings
from aksconf_core.validation.assembler import ValidationReport, assemble
from aksconf_core.validation.cross_field import check_section
from aksconf_core.validation.fields import (
    FieldCheck,
    FieldOutcome,
    find_unknown_keys,
    plan_field_checks,
)
from aksconf_core.validation.maintenance import resolve_window
from aksconf_core.validation.node_pools import NodePoolPolicyChecker
from aksconf_core.validation.normalizer import normalize_fields, normalize_map
from aksconf_core.validation.parallel import run_ordered
from aksconf_core.validation.sections import (
    SectionInput,
    SectionResult,
    SectionView,
    resolve_sections,
)

logger = structlog.get_logger(__name__)


@dataclass
class _SectionPlan:
    """Work scheduled for one section during a run."""

    section: SectionInput
    shape_diagnostics: list[Diagnostic] = field(default_factory=list)
    unknown_diagnostics: list[Diagnostic] = field(default_factory=list)
    checks: list[FieldCheck] = field(default_factory=list)
    entries: list[str] = field(default_factory=list)
    view: SectionView | None = None
    entry_views: dict[str, SectionView] = field(default_factory=dict)

    @property
    def path(self) -> str:
        return self.section.path

    @property
    def is_map(self) -> bool:
        return self.section.spec.kind is SectionKind.MAP

    def field_diagnostics(self) -> list[Diagnostic]:
        if self.is_map:
            return [d for view in self.entry_views.values() for d in view.diagnostics()]
        if self.view is None:
            return []
        return self.view.diagnostics()


class ConfigEngine:
    """Validates and normalizes cluster configuration documents.

    Attributes:
        settings: Engine settings (worker count).
        registry: Schema Registry the engine interprets.

    Example:
        >>> engine = ConfigEngine(EngineSettings(max_workers=0))
        >>> report = engine.validate({"name": "aks-1"})
        >>> [d.path for d in report.diagnostics]
        ['network']
    """

    def __init__(
        self,
        settings: EngineSettings | None = None,
        registry: Registry = REGISTRY,
    ) -> None:
        """Initialize the engine.

        Args:
            settings: Engine settings. Defaults to EngineSettings().
            registry: Section declarations. Defaults to the built-in registry.
        """
        self.settings = settings or EngineSettings()
        self.registry = registry
        self._node_pools = NodePoolPolicyChecker()
        self._log = logger.bind(component="config_engine")

    def validate(self, raw: Any) -> ValidationReport:
        """Validate one raw configuration document.

        Args:
            raw: Decoded configuration document (top level must be a mapping).

        Returns:
            ValidationReport with the canonical ClusterConfig, or with every
            diagnostic found and no configuration.

        Raises:
            StructuralError: If the document is not a mapping.
            ValidationTaskError: If a rule crashed (a defect, not bad input).
        """
        if not isinstance(raw, Mapping):
            raise StructuralError(
                f"Cluster configuration must be a mapping, got {type_name(raw)}",
            )

        start_time = time.monotonic()
        name = raw.get("name")
        log = self._log.bind(cluster=name if isinstance(name, str) else None)
        log.info("validation_started", max_workers=self.settings.max_workers)

        plans = [self._plan(section) for section in resolve_sections(raw, self.registry)]

        checks = [check for plan in plans for check in plan.checks]
        outcomes = run_ordered(
            [(check.path, check.run) for check in checks],
            max_workers=self.settings.max_workers,
        )
        self._attach_outcomes(plans, checks, outcomes)
        log.debug("field_phase_completed", checks=len(checks))

        active = [plan for plan in plans if plan.section.active]
        results = run_ordered(
            [(plan.path or "<root>", self._section_task(plan)) for plan in active],
            max_workers=self.settings.max_workers,
        )
        results_by_path = {result.path: result for result in results}

        diagnostics: list[Diagnostic] = []
        normalized: list[tuple[SectionInput, Any]] = []
        for plan in plans:
            result = results_by_path.get(plan.path)
            section_diagnostics = [
                *plan.section.diagnostics,
                *plan.shape_diagnostics,
                *plan.field_diagnostics(),
                *plan.unknown_diagnostics,
                *(result.diagnostics if result else ()),
            ]
            if section_diagnostics:
                log.debug(
                    "section_failed",
                    section=plan.path or "<root>",
                    count=len(section_diagnostics),
                )
                diagnostics.extend(section_diagnostics)
                continue
            normalized.append((plan.section, self._normalize(plan, result)))

        report = assemble(diagnostics, normalized)

        log.info(
            "validation_completed",
            ok=report.ok,
            diagnostics=len(report.diagnostics),
            duration_ms=int((time.monotonic() - start_time) * 1000),
        )
        return report

    def _plan(self, section: SectionInput) -> _SectionPlan:
        plan = _SectionPlan(section=section)
        if not section.active:
            return plan

        spec = section.spec
        if spec.kind is SectionKind.MAP:
            partitioned = self._node_pools.partition(section.raw)
            plan.shape_diagnostics.extend(partitioned.diagnostics)
            for key, entry in partitioned.entries.items():
                entry_path = join_path(spec.path, key)
                plan.entries.append(key)
                plan.checks.extend(
                    plan_field_checks(spec.fields, entry, entry_path, section=spec.path, entry=key)
                )
                plan.unknown_diagnostics.extend(
                    find_unknown_keys(entry, spec.field_names, entry_path)
                )
            return plan

        plan.checks.extend(
            plan_field_checks(spec.fields, section.raw, spec.path, section=spec.path)
        )
        plan.unknown_diagnostics.extend(
            find_unknown_keys(section.raw, self.registry.allowed_keys(spec.path), spec.path)
        )
        return plan

    @staticmethod
    def _attach_outcomes(
        plans: list[_SectionPlan],
        checks: list[FieldCheck],
        outcomes: list[FieldOutcome],
    ) -> None:
        by_scope: dict[tuple[str, str | None], dict[str, FieldOutcome]] = {}
        for check, outcome in zip(checks, outcomes, strict=True):
            by_scope.setdefault((check.section, check.entry), {})[check.spec.name] = outcome

        for plan in plans:
            if not plan.section.active:
                continue
            spec = plan.section.spec
            if plan.is_map:
                plan.entry_views = {
                    key: SectionView(
                        path=join_path(spec.path, key),
                        fields=spec.fields,
                        outcomes=by_scope[(spec.path, key)],
                    )
                    for key in plan.entries
                }
            else:
                plan.view = SectionView(
                    path=spec.path,
                    fields=spec.fields,
                    outcomes=by_scope[(spec.path, None)],
                )

    def _section_task(self, plan: _SectionPlan) -> Callable[[], SectionResult]:
        if plan.is_map:
            views = plan.entry_views
            return lambda: self._node_pools.check(views)

        view = plan.view
        assert view is not None
        if plan.path in MAINTENANCE_WINDOW_SECTIONS:
            return lambda: resolve_window(view)
        return lambda: SectionResult(path=view.path, diagnostics=tuple(check_section(view)))

    @staticmethod
    def _normalize(plan: _SectionPlan, result: SectionResult | None) -> Any:
        if not plan.section.active:
            return None
        if plan.is_map:
            return normalize_map(plan.entry_views)
        assert plan.view is not None
        return normalize_fields(plan.view, result.overrides if result else None)


def validate_cluster_config(
    raw: Any,
    settings: EngineSettings | None = None,
) -> ValidationReport:
    """Validate and normalize one cluster configuration document.

    Convenience function that creates an engine and runs it once.

    Args:
        raw: Decoded configuration document.
        settings: Engine settings. Defaults to EngineSettings().

    Returns:
        ValidationReport with the canonical configuration or every diagnostic.

    Raises:
        StructuralError: If the document is not a mapping.

    Example:
        >>> report = validate_cluster_config(document)
        >>> if report.ok:
        ...     print(report.config.network.network_policy.value)
    """
    engine = ConfigEngine(settings)
    return engine.validate(raw)
