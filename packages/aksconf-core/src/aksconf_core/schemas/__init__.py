"""Canonical configuration models for aksconf.

Root Model:
- ClusterConfig: Fully validated, defaults-applied cluster configuration

Section Models:
- NetworkConfig: Subnets, address ranges, network policy
- DefaultNodePoolConfig / NodePoolConfig: Node pools
- MaintenanceWindow / BlackoutPeriod: Maintenance schedules
- LockConfig, ManagedIdentityConfig, AcrConfig, MonitorMetricsConfig,
  IngressProfile, NginxConfig, SafeguardProfile: Optional sub-profiles
"""

from __future__ import annotations

from aksconf_core.schemas.cluster_config import (
    ClusterConfig,
    NodeOsUpgradeChannel,
    SkuTier,
    UpgradeChannel,
)
from aksconf_core.schemas.maintenance import (
    AUTO_UPGRADE_FREQUENCIES,
    NODE_OS_FREQUENCIES,
    BlackoutPeriod,
    DayOfWeek,
    MaintenanceFrequency,
    MaintenanceWindow,
    WeekIndex,
)
from aksconf_core.schemas.network import NetworkConfig, NetworkPolicy, OutboundType
from aksconf_core.schemas.node_pool import (
    AVAILABILITY_ZONES,
    DefaultNodePoolConfig,
    NodePoolConfig,
    NodePoolMode,
    OsSku,
)
from aksconf_core.schemas.profiles import (
    AcrConfig,
    IngressControllerType,
    IngressProfile,
    LockConfig,
    LockKind,
    ManagedIdentityConfig,
    MonitorMetricsConfig,
    NginxConfig,
    SafeguardLevel,
    SafeguardProfile,
)

__all__ = [
    # Root
    "ClusterConfig",
    "UpgradeChannel",
    "NodeOsUpgradeChannel",
    "SkuTier",
    # Network
    "NetworkConfig",
    "NetworkPolicy",
    "OutboundType",
    # Node pools
    "AVAILABILITY_ZONES",
    "DefaultNodePoolConfig",
    "NodePoolConfig",
    "NodePoolMode",
    "OsSku",
    # Maintenance
    "AUTO_UPGRADE_FREQUENCIES",
    "NODE_OS_FREQUENCIES",
    "BlackoutPeriod",
    "DayOfWeek",
    "MaintenanceFrequency",
    "MaintenanceWindow",
    "WeekIndex",
    # Profiles
    "AcrConfig",
    "IngressControllerType",
    "IngressProfile",
    "LockConfig",
    "LockKind",
    "ManagedIdentityConfig",
    "MonitorMetricsConfig",
    "NginxConfig",
    "SafeguardLevel",
    "SafeguardProfile",
]
