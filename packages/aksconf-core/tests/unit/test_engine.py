"""Unit tests for the configuration engine."""

from __future__ import annotations

import copy
from typing import Any

import pytest
from structlog.testing import capture_logs

from aksconf_core import (
    ConfigEngine,
    DiagnosticKind,
    EngineSettings,
    StructuralError,
    ValidationTaskError,
    validate_cluster_config,
)
from aksconf_core.validation import cross_field


def kinds_at(report: Any, path: str) -> list[DiagnosticKind]:
    return [d.kind for d in report.diagnostics if d.path == path]


def count(report: Any, kind: DiagnosticKind) -> int:
    return sum(1 for d in report.diagnostics if d.kind is kind)


class TestMinimalConfig:
    """Tests for the smallest valid document."""

    def test_defaults_applied(
        self, minimal_config: dict[str, Any], sequential: EngineSettings
    ) -> None:
        report = validate_cluster_config(minimal_config, sequential)

        assert report.ok
        assert report.diagnostics == ()
        config = report.unwrap()
        assert config.automatic_upgrade_channel.value == "stable"
        assert config.network.network_policy.value == "cilium"
        assert config.node_pools == {}
        assert config.default_node_pool.max_count == 9
        assert config.image_cleaner_interval_hours == 168
        assert config.lock is None
        assert config.ingress_profile is None

    def test_input_is_not_mutated(
        self, minimal_config: dict[str, Any], sequential: EngineSettings
    ) -> None:
        original = copy.deepcopy(minimal_config)
        validate_cluster_config(minimal_config, sequential)
        assert minimal_config == original


class TestFullConfig:
    """Tests for a document with every section populated."""

    def test_valid(self, full_config: dict[str, Any], sequential: EngineSettings) -> None:
        report = validate_cluster_config(full_config, sequential)

        assert report.diagnostics == ()
        config = report.unwrap()
        assert config.default_node_pool.zones == ("1", "2", "3")
        assert list(config.node_pools) == ["workload", "batch"]
        assert config.node_pools["batch"].os_sku.value == "AzureLinux"
        assert config.safeguard_profile is not None
        assert config.safeguard_profile.excluded_namespaces == ("kube-system", "monitoring")
        assert config.ingress_profile is not None
        assert config.ingress_profile.nginx is not None
        window = config.maintenance_window_node_os
        assert window is not None
        assert (window.interval, window.duration) == (1, 4)
        assert config.maintenance_window_auto_upgrade is not None
        assert len(config.maintenance_window_auto_upgrade.blackout_periods) == 1

    def test_result_cannot_be_edited(
        self, full_config: dict[str, Any], sequential: EngineSettings
    ) -> None:
        """The canonical configuration shares no mutable state with callers."""
        config = validate_cluster_config(full_config, sequential).unwrap()

        with pytest.raises(TypeError):
            config.tags["cost_center"] = "someone"  # type: ignore[index]
        with pytest.raises(TypeError):
            config.node_pools["extra"] = config.node_pools["batch"]  # type: ignore[index]
        with pytest.raises(TypeError):
            config.node_pools["workload"].labels["tier"] = "x"  # type: ignore[index]

        full_config["tags"]["cost_center"] = "someone"
        assert "cost_center" not in config.tags

    def test_idempotent(self, full_config: dict[str, Any], sequential: EngineSettings) -> None:
        """Feeding the canonical output back in yields the same configuration."""
        first = validate_cluster_config(full_config, sequential).unwrap()
        second = validate_cluster_config(first.to_document(), sequential)

        assert second.diagnostics == ()
        assert second.config == first

    def test_idempotent_minimal(
        self, minimal_config: dict[str, Any], sequential: EngineSettings
    ) -> None:
        first = validate_cluster_config(minimal_config, sequential).unwrap()
        assert validate_cluster_config(first.to_document(), sequential).config == first

    def test_parallel_matches_sequential(self, full_config: dict[str, Any]) -> None:
        sequential = validate_cluster_config(full_config, EngineSettings(max_workers=0))
        parallel = validate_cluster_config(full_config, EngineSettings(max_workers=8))
        assert parallel == sequential


class TestClusterName:
    """Name pattern properties."""

    @pytest.mark.parametrize("name", ["a", "aks-1", "Prod_Cluster-02", "x" * 63])
    def test_valid_names(
        self, minimal_config: dict[str, Any], sequential: EngineSettings, name: str
    ) -> None:
        report = validate_cluster_config({**minimal_config, "name": name}, sequential)
        assert report.ok

    @pytest.mark.parametrize("name", ["-aks", "aks-", "aks@prod", "x" * 64])
    def test_invalid_names(
        self, minimal_config: dict[str, Any], sequential: EngineSettings, name: str
    ) -> None:
        report = validate_cluster_config({**minimal_config, "name": name}, sequential)

        assert report.config is None
        assert kinds_at(report, "name") == [DiagnosticKind.PATTERN_MISMATCH]
        assert len(report.diagnostics) == 1


class TestLock:
    """Lock presence properties."""

    @pytest.mark.parametrize("kind", ["Delete", "canNotDelete", "None"])
    def test_bad_kind(
        self, minimal_config: dict[str, Any], sequential: EngineSettings, kind: str
    ) -> None:
        report = validate_cluster_config({**minimal_config, "lock": {"kind": kind}}, sequential)

        assert report.kinds() == [DiagnosticKind.ENUM_VIOLATION]
        assert report.diagnostics[0].path == "lock.kind"

    def test_null_lock(self, minimal_config: dict[str, Any], sequential: EngineSettings) -> None:
        report = validate_cluster_config({**minimal_config, "lock": None}, sequential)
        assert report.ok
        assert report.unwrap().lock is None

    def test_lock_requires_kind(
        self, minimal_config: dict[str, Any], sequential: EngineSettings
    ) -> None:
        report = validate_cluster_config({**minimal_config, "lock": {}}, sequential)
        assert kinds_at(report, "lock.kind") == [DiagnosticKind.MISSING_REQUIRED_FIELD]


class TestOptionalProfiles:
    """Presence-gated checks on nullable sub-profiles."""

    def test_absent_ingress_skips_nested_fields(
        self, minimal_config: dict[str, Any], sequential: EngineSettings
    ) -> None:
        report = validate_cluster_config({**minimal_config, "ingress_profile": None}, sequential)
        assert report.ok

    def test_bad_nginx_type(
        self, minimal_config: dict[str, Any], sequential: EngineSettings
    ) -> None:
        document = {
            **minimal_config,
            "ingress_profile": {"nginx": {"default_ingress_controller_type": "Public"}},
        }
        report = validate_cluster_config(document, sequential)

        assert kinds_at(report, "ingress_profile.nginx.default_ingress_controller_type") == [
            DiagnosticKind.ENUM_VIOLATION
        ]

    def test_bad_safeguard_level(
        self, minimal_config: dict[str, Any], sequential: EngineSettings
    ) -> None:
        document = {**minimal_config, "safeguard_profile": {"level": "Strict"}}
        report = validate_cluster_config(document, sequential)
        assert report.kinds() == [DiagnosticKind.ENUM_VIOLATION]

    def test_ingress_without_nginx(
        self, minimal_config: dict[str, Any], sequential: EngineSettings
    ) -> None:
        report = validate_cluster_config({**minimal_config, "ingress_profile": {}}, sequential)

        profile = report.unwrap().ingress_profile
        assert profile is not None
        assert profile.nginx is None


class TestMaintenanceWindows:
    """Maintenance window properties."""

    def test_duration_out_of_range(self, sequential: EngineSettings) -> None:
        report = validate_cluster_config(
            {"name": "aks-1", "maintenance_window_auto_upgrade": {"duration": 30}},
            sequential,
        )

        assert count(report, DiagnosticKind.OUT_OF_RANGE) == 1
        assert kinds_at(report, "maintenance_window_auto_upgrade.duration") == [
            DiagnosticKind.OUT_OF_RANGE
        ]
        assert report.config is None

    def test_weekly_without_day(
        self, minimal_config: dict[str, Any], sequential: EngineSettings
    ) -> None:
        window = {"frequency": "Weekly", "start_time": "01:00"}
        report = validate_cluster_config(
            {**minimal_config, "maintenance_window_auto_upgrade": window}, sequential
        )

        assert report.kinds() == [DiagnosticKind.MISSING_REQUIRED_FIELD]

        window["day_of_week"] = "Saturday"
        fixed = validate_cluster_config(
            {**minimal_config, "maintenance_window_auto_upgrade": window}, sequential
        )
        assert fixed.ok

    def test_daily_auto_upgrade_rejected(
        self, minimal_config: dict[str, Any], sequential: EngineSettings
    ) -> None:
        document = {**minimal_config, "maintenance_window_auto_upgrade": {"frequency": "Daily"}}
        report = validate_cluster_config(document, sequential)
        assert kinds_at(report, "maintenance_window_auto_upgrade.frequency") == [
            DiagnosticKind.ENUM_VIOLATION
        ]

    def test_every_bad_blackout_reported(
        self, minimal_config: dict[str, Any], sequential: EngineSettings
    ) -> None:
        window = {
            "blackout_periods": [
                {"start": "2026-01-02T00:00:00Z", "end": "2026-01-01T00:00:00Z"},
                {"start": "2026-02-02T00:00:00Z", "end": "2026-02-01T00:00:00Z"},
            ]
        }
        report = validate_cluster_config(
            {**minimal_config, "maintenance_window_node_os": window}, sequential
        )

        assert count(report, DiagnosticKind.CROSS_FIELD_CONSTRAINT_VIOLATION) == 2


class TestNodePools:
    """Node pool map properties."""

    def test_min_above_max_example(self, sequential: EngineSettings) -> None:
        document = {
            "name": "aks-1",
            "node_pools": {
                "a": {
                    "name": "a",
                    "vm_size": "Standard_D2d_v5",
                    "orchestrator_version": "1.28",
                    "min_count": 5,
                    "max_count": 2,
                    "os_sku": "AzureLinux",
                }
            },
        }
        report = validate_cluster_config(document, sequential)

        assert report.config is None
        assert count(report, DiagnosticKind.CROSS_FIELD_CONSTRAINT_VIOLATION) == 1
        assert kinds_at(report, "node_pools.a") == [
            DiagnosticKind.CROSS_FIELD_CONSTRAINT_VIOLATION
        ]

    def test_windows_pools(
        self, minimal_config: dict[str, Any], sequential: EngineSettings
    ) -> None:
        base = {"vm_size": "Standard_D2d_v5", "orchestrator_version": "1.28"}
        pools = {
            "a": {**base, "name": "a", "os_sku": "Windows"},
            "b": {**base, "name": "b", "os_sku": "Ubuntu"},
            "c": {**base, "name": "c", "os_sku": "Windows"},
        }
        report = validate_cluster_config({**minimal_config, "node_pools": pools}, sequential)

        assert [d.path for d in report.diagnostics] == [
            "node_pools.a.os_sku",
            "node_pools.c.os_sku",
        ]
        assert report.kinds() == [DiagnosticKind.ENUM_VIOLATION] * 2

        pools["a"]["os_sku"] = "Ubuntu"
        pools["c"]["os_sku"] = "AzureLinux"
        fixed = validate_cluster_config({**minimal_config, "node_pools": pools}, sequential)
        assert fixed.ok

    def test_unknown_pool_field(
        self, minimal_config: dict[str, Any], sequential: EngineSettings
    ) -> None:
        pools = {
            "a": {
                "name": "a",
                "vm_size": "Standard_D2d_v5",
                "orchestrator_version": "1.28",
                "node_count": 3,
            }
        }
        report = validate_cluster_config({**minimal_config, "node_pools": pools}, sequential)
        assert kinds_at(report, "node_pools.a.node_count") == [DiagnosticKind.UNKNOWN_FIELD]


class TestFailTogether:
    """All diagnostics are returned together, in registry order."""

    def test_collects_across_sections(self, sequential: EngineSettings) -> None:
        document = {
            "name": "-bad",
            "extra": True,
            "network": {"pod_cidr": "10.0.0.1/16"},
            "default_node_pool": {"min_count": 0},
            "lock": {"kind": "Delete"},
            "maintenance_window_node_os": {"duration": 2},
        }
        report = validate_cluster_config(document, sequential)

        assert [d.path for d in report.diagnostics] == [
            "name",
            "extra",
            "network.node_subnet_id",
            "network.pod_cidr",
            "default_node_pool.min_count",
            "lock.kind",
            "maintenance_window_node_os.duration",
        ]
        assert report.config is None

    def test_non_mapping_section(self, sequential: EngineSettings) -> None:
        report = validate_cluster_config({"name": "aks-1", "network": "10.0.0.0/8"}, sequential)
        assert kinds_at(report, "network") == [DiagnosticKind.TYPE_MISMATCH]


class TestEngineErrors:
    """Fatal conditions raised by the engine."""

    @pytest.mark.parametrize("raw", [None, [], "name: aks-1"])
    def test_non_mapping_document(self, raw: Any) -> None:
        with pytest.raises(StructuralError, match="must be a mapping"):
            ConfigEngine().validate(raw)

    def test_crashing_rule_surfaces(
        self,
        minimal_config: dict[str, Any],
        sequential: EngineSettings,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        def broken(view: Any) -> list[Any]:
            raise RuntimeError("rule defect")

        monkeypatch.setitem(cross_field.SECTION_RULES, "network", (broken,))

        with pytest.raises(ValidationTaskError) as exc_info:
            ConfigEngine(sequential).validate(minimal_config)
        assert exc_info.value.failures == [("network", "RuntimeError", "rule defect")]

    def test_logs_run(self, minimal_config: dict[str, Any], sequential: EngineSettings) -> None:
        with capture_logs() as logs:
            ConfigEngine(sequential).validate(minimal_config)

        events = [entry["event"] for entry in logs]
        assert events[0] == "validation_started"
        assert events[-1] == "validation_completed"
        assert logs[-1]["ok"] is True
        assert logs[-1]["component"] == "config_engine"


class TestUnknownKeys:
    """Undeclared keys are reported with their own kind."""

    def test_reported_at_key_path(
        self, minimal_config: dict[str, Any], sequential: EngineSettings
    ) -> None:
        raw = {
            **minimal_config,
            "colour": "blue",
            "network": {**minimal_config["network"], "mtu": 1500},
        }

        report = validate_cluster_config(raw, sequential)

        assert [(d.path, d.kind) for d in report.diagnostics] == [
            ("colour", DiagnosticKind.UNKNOWN_FIELD),
            ("network.mtu", DiagnosticKind.UNKNOWN_FIELD),
        ]
