"""Output Assembler.

Composes normalized sections into one immutable ClusterConfig, or returns
every diagnostic of the run with no partial configuration (fail together,
never fail fast).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from aksconf_core.diagnostics import Diagnostic, DiagnosticKind
from aksconf_core.errors import AssemblyError, ConfigValidationError
from aksconf_core.registry import ROOT_PATH
from aksconf_core.schemas import ClusterConfig
from aksconf_core.validation.sections import SectionInput, SectionState

logger = structlog.get_logger(__name__)


class ValidationReport(BaseModel):
    """Result of one validation run.

    Exactly one of ``config`` and ``diagnostics`` is meaningful: a report with
    diagnostics never carries a configuration.

    Attributes:
        config: Canonical configuration (None when validation failed).
        diagnostics: Every violation found, in registry order.

    Example:
        >>> report = validate_cluster_config(document)
        >>> if report.ok:
        ...     provision(report.config)
        ... else:
        ...     for diagnostic in report.diagnostics:
        ...         print(diagnostic.format())
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    config: ClusterConfig | None = Field(default=None, description="Canonical configuration")
    diagnostics: tuple[Diagnostic, ...] = Field(default=(), description="All diagnostics")

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    def raise_for_diagnostics(self) -> None:
        """Raise ConfigValidationError if the run produced any diagnostic."""
        if self.diagnostics:
            raise ConfigValidationError(self.diagnostics)

    def unwrap(self) -> ClusterConfig:
        """Return the configuration or raise ConfigValidationError."""
        self.raise_for_diagnostics()
        assert self.config is not None
        return self.config

    def diagnostics_at(self, path: str) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.path == path)

    def kinds(self) -> list[DiagnosticKind]:
        """Diagnostic kinds in report order."""
        return [d.kind for d in self.diagnostics]


def compose_document(sections: Sequence[tuple[SectionInput, Any]]) -> dict[str, Any]:
    """Nest normalized sections into one document.

    Args:
        sections: (section, normalized value) pairs in registry order.
            Parents precede their children. Absent sections carry None.

    Returns:
        The canonical document as nested plain mappings.
    """
    documents: dict[str, dict[str, Any]] = {}
    for section, normalized in sections:
        spec = section.spec
        if section.state is SectionState.SKIPPED:
            continue
        if spec.path == ROOT_PATH:
            documents[ROOT_PATH] = dict(normalized)
            continue

        parent = documents[spec.parent_path or ROOT_PATH]
        if section.state is SectionState.ABSENT:
            parent[spec.key] = None
            continue
        parent[spec.key] = normalized
        if isinstance(normalized, dict):
            documents[spec.path] = normalized

    return documents[ROOT_PATH]


def assemble(
    diagnostics: Sequence[Diagnostic],
    sections: Sequence[tuple[SectionInput, Any]],
) -> ValidationReport:
    """Build the final report.

    Args:
        diagnostics: Every diagnostic of the run, in report order.
        sections: Normalized sections (ignored when diagnostics exist).

    Raises:
        AssemblyError: If clean, normalized sections fail to build a
            ClusterConfig. This indicates the registry and the models
            disagree.
    """
    if diagnostics:
        return ValidationReport(diagnostics=tuple(diagnostics))

    document = compose_document(sections)
    try:
        config = ClusterConfig.model_validate(document)
    except ValidationError as e:
        raise AssemblyError(
            "Validated configuration could not be assembled",
            internal_details=str(e),
        ) from e

    logger.debug("cluster_config_assembled", cluster=config.name)
    return ValidationReport(config=config)
