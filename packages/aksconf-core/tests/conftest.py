"""Shared pytest fixtures for aksconf-core tests.

This module provides common fixtures used across unit and integration tests.
"""

from __future__ import annotations

from typing import Any

import pytest
import structlog

from aksconf_core import EngineSettings

SUBSCRIPTION = "/subscriptions/00000000-0000-0000-0000-000000000000"
RESOURCE_GROUP = f"{SUBSCRIPTION}/resourceGroups/rg-aks"
NETWORK_PROVIDER = f"{RESOURCE_GROUP}/providers/Microsoft.Network"
VNET = f"{NETWORK_PROVIDER}/virtualNetworks/vnet-aks"


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture.

    The factory resolves sys.stdout per logger, so capsys sees the output
    of loggers created inside a test.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,  # Important for test isolation
    )


@pytest.fixture
def ids() -> dict[str, str]:
    """Return well-formed Azure resource IDs used across tests."""
    return {
        "resource_group": RESOURCE_GROUP,
        "node_subnet": f"{VNET}/subnets/nodes",
        "api_subnet": f"{VNET}/subnets/apiserver",
        "endpoint_subnet": f"{VNET}/subnets/endpoints",
        "private_zone": f"{NETWORK_PROVIDER}/privateDnsZones/privatelink.westeurope.azmk8s.io",
        "acr_zone": f"{NETWORK_PROVIDER}/privateDnsZones/privatelink.azurecr.io",
        "public_zone": f"{NETWORK_PROVIDER}/dnszones/apps.example.com",
        "identity": (
            f"{RESOURCE_GROUP}/providers/Microsoft.ManagedIdentity/userAssignedIdentities/id-aks"
        ),
    }


@pytest.fixture
def minimal_config(ids: dict[str, str]) -> dict[str, Any]:
    """Return the smallest valid cluster configuration.

    Only the cluster name and the two required network fields are set;
    everything else comes from registry defaults.
    """
    return {
        "name": "aks-1",
        "network": {
            "node_subnet_id": ids["node_subnet"],
            "pod_cidr": "192.168.0.0/16",
        },
    }


@pytest.fixture
def full_config(ids: dict[str, str]) -> dict[str, Any]:
    """Return a valid configuration with every section populated."""
    return {
        "name": "aks-prod-01",
        "location": "westeurope",
        "resource_group_id": ids["resource_group"],
        "kubernetes_version": "1.29",
        "automatic_upgrade_channel": "patch",
        "node_os_upgrade_channel": "SecurityPatch",
        "sku_tier": "Premium",
        "private_cluster_enabled": True,
        "private_dns_zone_id": ids["private_zone"],
        "image_cleaner_interval_hours": 48,
        "tags": {"env": "prod", "owner": "platform"},
        "network": {
            "node_subnet_id": ids["node_subnet"],
            "pod_cidr": "192.168.0.0/16",
            "service_cidr": "10.0.0.0/16",
            "dns_service_ip": "10.0.0.10",
            "api_server_subnet_id": ids["api_subnet"],
            "api_server_private_dns_zone_id": ids["private_zone"],
            "network_policy": "calico",
            "outbound_type": "userDefinedRouting",
        },
        "default_node_pool": {
            "vm_size": "Standard_D8d_v5",
            "min_count": 3,
            "max_count": 6,
            "zones": ["3", "1", "2", "1"],
        },
        "node_pools": {
            "workload": {
                "name": "work",
                "vm_size": "Standard_D4d_v5",
                "orchestrator_version": "1.29",
                "min_count": 0,
                "max_count": 10,
                "os_sku": "Ubuntu",
                "labels": {"tier": "apps"},
            },
            "batch": {
                "name": "batch",
                "vm_size": "Standard_F8s_v2",
                "orchestrator_version": "1.29",
                "max_pods": 50,
                "zones": ["2"],
            },
        },
        "acr": {
            "name": "acrprod001",
            "private_dns_zone_resource_ids": [ids["acr_zone"]],
            "subnet_resource_id": ids["endpoint_subnet"],
        },
        "lock": {"kind": "CanNotDelete"},
        "managed_identities": {"user_assigned_resource_ids": [ids["identity"]]},
        "monitor_metrics": {
            "annotations_allowed": "pods=[prometheus.io/scrape]",
            "labels_allowed": "namespaces=[team]",
        },
        "ingress_profile": {
            "dns_zone_resource_ids": [ids["public_zone"]],
            "nginx": {"default_ingress_controller_type": "Internal"},
        },
        "safeguard_profile": {
            "level": "Warning",
            "excluded_namespaces": ["monitoring", "kube-system"],
        },
        "maintenance_window_auto_upgrade": {
            "frequency": "Weekly",
            "duration": 6,
            "day_of_week": "Sunday",
            "start_time": "02:00",
            "utc_offset": "+01:00",
            "blackout_periods": [
                {"start": "2025-12-20T00:00:00Z", "end": "2026-01-03T00:00:00Z"},
            ],
        },
        "maintenance_window_node_os": {
            "frequency": "Daily",
            "start_time": "03:30",
            "start_date": "2025-01-01",
        },
    }


@pytest.fixture
def sequential() -> EngineSettings:
    """Return settings that run every check on the calling thread."""
    return EngineSettings(max_workers=0)
