"""Unit tests for the Node Pool Policy Checker."""

from __future__ import annotations

from typing import Any

import pytest

from aksconf_core.diagnostics import DiagnosticKind
from aksconf_core.registry import REGISTRY
from aksconf_core.validation.fields import check_field
from aksconf_core.validation.node_pools import NodePoolPolicyChecker
from aksconf_core.validation.sections import SectionView


def pool(**overrides: Any) -> dict[str, Any]:
    return {
        "name": "work",
        "vm_size": "Standard_D2d_v5",
        "orchestrator_version": "1.28",
        **overrides,
    }


def make_views(pools: dict[str, dict[str, Any]]) -> dict[str, SectionView]:
    spec = REGISTRY.get("node_pools")
    views: dict[str, SectionView] = {}
    for key, raw in pools.items():
        path = f"node_pools.{key}"
        outcomes = {
            field.name: check_field(
                field,
                raw.get(field.name),
                provided=raw.get(field.name) is not None,
                path=f"{path}.{field.name}",
            )
            for field in spec.fields
        }
        views[key] = SectionView(path=path, fields=spec.fields, outcomes=outcomes)
    return views


@pytest.fixture
def checker() -> NodePoolPolicyChecker:
    return NodePoolPolicyChecker()


class TestPartition:
    """Tests for key and entry shape checks."""

    def test_well_formed_entries(self, checker: NodePoolPolicyChecker) -> None:
        partitioned = checker.partition({"a": pool(), "b": pool(name="b")})

        assert list(partitioned.entries) == ["a", "b"]
        assert partitioned.diagnostics == ()

    def test_bad_keys_and_entries(self, checker: NodePoolPolicyChecker) -> None:
        partitioned = checker.partition({"": pool(), 7: pool(), "c": ["x"], "ok": pool()})

        assert list(partitioned.entries) == ["ok"]
        assert [(d.path, d.kind) for d in partitioned.diagnostics] == [
            ("node_pools", DiagnosticKind.PATTERN_MISMATCH),
            ("node_pools", DiagnosticKind.TYPE_MISMATCH),
            ("node_pools.c", DiagnosticKind.TYPE_MISMATCH),
        ]

    def test_whitespace_key(self, checker: NodePoolPolicyChecker) -> None:
        partitioned = checker.partition({"  ": pool()})
        assert partitioned.diagnostics[0].kind is DiagnosticKind.PATTERN_MISMATCH


class TestOsSkuPolicy:
    """Tests for the map-wide os_sku policy."""

    def test_all_allowed(self, checker: NodePoolPolicyChecker) -> None:
        views = make_views(
            {"a": pool(os_sku="Ubuntu"), "b": pool(os_sku="AzureLinux"), "c": pool()}
        )
        assert checker.check(views).diagnostics == ()

    def test_every_offending_key_reported(self, checker: NodePoolPolicyChecker) -> None:
        views = make_views(
            {
                "a": pool(os_sku="Windows"),
                "b": pool(os_sku="Ubuntu"),
                "c": pool(os_sku="Windows2022"),
            }
        )
        diagnostics = checker.check(views).diagnostics

        assert [(d.path, d.kind) for d in diagnostics] == [
            ("node_pools.a.os_sku", DiagnosticKind.ENUM_VIOLATION),
            ("node_pools.c.os_sku", DiagnosticKind.ENUM_VIOLATION),
        ]
        assert diagnostics[0].allowed == ("Ubuntu", "AzureLinux")

    def test_custom_allowed_set(self) -> None:
        checker = NodePoolPolicyChecker(allowed_os_skus=("Ubuntu",))
        diagnostics = checker.check(make_views({"a": pool(os_sku="AzureLinux")})).diagnostics
        assert len(diagnostics) == 1


class TestPerPoolRules:
    """Tests for count and zone rules."""

    def test_min_above_max(self, checker: NodePoolPolicyChecker) -> None:
        views = make_views({"a": pool(min_count=5, max_count=2)})
        diagnostics = checker.check(views).diagnostics

        assert [(d.path, d.kind) for d in diagnostics] == [
            ("node_pools.a", DiagnosticKind.CROSS_FIELD_CONSTRAINT_VIOLATION),
        ]

    def test_counts_only_compared_when_both_present(self, checker: NodePoolPolicyChecker) -> None:
        views = make_views({"a": pool(min_count=5), "b": pool(max_count=1)})
        assert checker.check(views).diagnostics == ()

    def test_unrecognized_zones(self, checker: NodePoolPolicyChecker) -> None:
        views = make_views({"a": pool(zones=["1", "4"])})
        diagnostics = checker.check(views).diagnostics

        assert [(d.path, d.kind) for d in diagnostics] == [
            ("node_pools.a.zones", DiagnosticKind.ENUM_VIOLATION),
        ]
        assert diagnostics[0].value == ["4"]

    def test_result_path(self, checker: NodePoolPolicyChecker) -> None:
        assert checker.check({}).path == "node_pools"
