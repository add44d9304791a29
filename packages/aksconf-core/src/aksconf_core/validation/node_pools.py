"""Node Pool Policy Checker.

Validates the node_pools map as a unit. Map keys are the stable identity of
a pool and are independent of the pool's ``name`` field.

Two passes:
- partition: before field checks, split the raw map into well-formed
  entries and key/entry shape diagnostics.
- check: after field checks, apply the map-wide os_sku policy (reporting
  every offending key) and the per-pool count and zone rules.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog

from aksconf_core.diagnostics import (
    Diagnostic,
    enum_violation,
    join_path,
    pattern_mismatch,
    type_mismatch,
)
from aksconf_core.registry import OS_SKUS
from aksconf_core.schemas import AVAILABILITY_ZONES
from aksconf_core.validation.cross_field import min_count_not_above_max_count
from aksconf_core.validation.sections import SectionResult, SectionView

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class NodePoolEntries:
    """Result of partitioning the raw node_pools map.

    Attributes:
        entries: Well-formed entries keyed by map key, in input order.
        diagnostics: Key and entry shape violations.
    """

    entries: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    diagnostics: tuple[Diagnostic, ...] = ()


class NodePoolPolicyChecker:
    """Enforces per-pool and map-wide node pool invariants.

    Args:
        path: Dotted path of the node pool map.
        allowed_os_skus: OS SKUs every pool must use.
        allowed_zones: Recognized availability zone identifiers.

    Example:
        >>> checker = NodePoolPolicyChecker()
        >>> partitioned = checker.partition({"": {}})
        >>> partitioned.diagnostics[0].kind.value
        'PatternMismatch'
    """

    def __init__(
        self,
        path: str = "node_pools",
        *,
        allowed_os_skus: tuple[str, ...] = OS_SKUS,
        allowed_zones: tuple[str, ...] = AVAILABILITY_ZONES,
    ) -> None:
        self.path = path
        self.allowed_os_skus = allowed_os_skus
        self.allowed_zones = allowed_zones

    def partition(self, raw: Mapping[Any, Any]) -> NodePoolEntries:
        """Separate well-formed entries from malformed keys and entries."""
        entries: dict[str, Mapping[str, Any]] = {}
        diagnostics: list[Diagnostic] = []

        for key, entry in raw.items():
            if not isinstance(key, str):
                diagnostics.append(type_mismatch(self.path, "string key", key))
                continue
            if not key.strip():
                diagnostics.append(
                    pattern_mismatch(self.path, key, r"\S", what="a non-empty node pool key")
                )
                continue
            if not isinstance(entry, Mapping):
                diagnostics.append(type_mismatch(join_path(self.path, key), "mapping", entry))
                continue
            entries[key] = entry

        return NodePoolEntries(entries=entries, diagnostics=tuple(diagnostics))

    def check(self, pools: Mapping[str, SectionView]) -> SectionResult:
        """Apply the pool policies to checked entries.

        Args:
            pools: Checked fields of each well-formed entry, keyed by map key.

        Returns:
            SectionResult with every policy violation across the map.
        """
        diagnostics = self._check_os_skus(pools)
        for view in pools.values():
            diagnostics.extend(self._check_pool(view))

        if diagnostics:
            logger.debug("node_pool_policies_failed", pools=len(pools), count=len(diagnostics))
        return SectionResult(path=self.path, diagnostics=tuple(diagnostics))

    def _check_os_skus(self, pools: Mapping[str, SectionView]) -> list[Diagnostic]:
        # Collect every offender rather than stopping at the first
        return [
            enum_violation(
                join_path(view.path, "os_sku"),
                view.value("os_sku"),
                self.allowed_os_skus,
            )
            for view in pools.values()
            if view.accepted("os_sku") and view.value("os_sku") not in self.allowed_os_skus
        ]

    def _check_pool(self, view: SectionView) -> list[Diagnostic]:
        diagnostics: list[Diagnostic] = []

        if view.accepted("min_count") and view.accepted("max_count"):
            diagnostics.extend(min_count_not_above_max_count(view))

        if view.accepted("zones"):
            unrecognized = sorted(set(view.value("zones")).difference(self.allowed_zones))
            if unrecognized:
                diagnostics.append(
                    enum_violation(join_path(view.path, "zones"), unrecognized, self.allowed_zones)
                )

        return diagnostics
