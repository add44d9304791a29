"""Unit tests for the Normalizer."""

from __future__ import annotations

from typing import Any

import pytest

from aksconf_core.registry import REGISTRY
from aksconf_core.validation.fields import check_field
from aksconf_core.validation.normalizer import normalize_fields, normalize_map
from aksconf_core.validation.sections import SectionView


def make_view(path: str, raw: dict[str, Any]) -> SectionView:
    spec = REGISTRY.get(path)
    outcomes = {
        field.name: check_field(
            field,
            raw.get(field.name),
            provided=raw.get(field.name) is not None,
            path=f"{path}.{field.name}",
        )
        for field in spec.fields
    }
    return SectionView(path=path, fields=spec.fields, outcomes=outcomes)


class TestNormalizeFields:
    """Tests for normalize_fields."""

    def test_defaults_fill_omitted_fields(self) -> None:
        normalized = normalize_fields(make_view("default_node_pool", {"max_count": 12}))

        assert normalized == {
            "vm_size": "Standard_D4d_v5",
            "min_count": 3,
            "max_count": 12,
            "os_sku": "AzureLinux",
            "zones": ("1", "2", "3"),
            "os_disk_size_gb": None,
        }

    def test_declaration_order(self) -> None:
        normalized = normalize_fields(make_view("managed_identities", {}))
        assert list(normalized) == ["system_assigned", "user_assigned_resource_ids"]

    def test_accepted_values_are_canonical(self) -> None:
        normalized = normalize_fields(make_view("default_node_pool", {"zones": ["2", "1", "2"]}))
        assert normalized["zones"] == ("1", "2")

    def test_overrides_win(self) -> None:
        view = make_view("maintenance_window_node_os", {"frequency": "Daily"})
        normalized = normalize_fields(view, {"blackout_periods": ({"start": 1, "end": 2},)})
        assert normalized["blackout_periods"] == ({"start": 1, "end": 2},)

    def test_defaults_are_copies(self) -> None:
        root = make_view("", {"name": "aks-1"})
        first = normalize_fields(root)
        first["tags"]["added"] = "x"

        assert normalize_fields(root)["tags"] == {}
        assert REGISTRY.get("").field("tags").default == {}

    def test_refuses_failed_section(self) -> None:
        """Defaults never mask a rejected value."""
        view = make_view("default_node_pool", {"min_count": 0})
        with pytest.raises(ValueError, match="validation failed"):
            normalize_fields(view)


class TestNormalizeMap:
    def test_keeps_key_order(self) -> None:
        spec = REGISTRY.get("node_pools")
        views = {}
        for key in ("zeta", "alpha"):
            raw = {"name": key[:5], "vm_size": "Standard_D2d_v5", "orchestrator_version": "1.28"}
            outcomes = {
                field.name: check_field(
                    field,
                    raw.get(field.name),
                    provided=raw.get(field.name) is not None,
                    path=f"node_pools.{key}.{field.name}",
                )
                for field in spec.fields
            }
            views[key] = SectionView(
                path=f"node_pools.{key}", fields=spec.fields, outcomes=outcomes
            )

        normalized = normalize_map(views)

        assert list(normalized) == ["zeta", "alpha"]
        assert normalized["alpha"]["tags"] == {}
        assert normalized["alpha"]["labels"] == {}
        assert normalized["alpha"]["os_disk_size_gb"] is None
        assert normalized["alpha"]["mode"] == "User"
