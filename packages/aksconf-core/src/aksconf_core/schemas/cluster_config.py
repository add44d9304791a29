"""ClusterConfig root model for aksconf.

ClusterConfig is the canonical, fully-resolved cluster configuration: every
default applied, every set canonicalized, every optional sub-profile either
present and valid or None. It is the sole successful output of the engine and
the only input an orchestrator needs.

Instances are built by the engine's Output Assembler. Constructing one by
hand skips the validation rules, which live in the Schema Registry.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer

from aksconf_core.schemas.frozen import StringMap, freeze_mapping, thaw_mapping
from aksconf_core.schemas.maintenance import MaintenanceWindow
from aksconf_core.schemas.network import NetworkConfig
from aksconf_core.schemas.node_pool import DefaultNodePoolConfig, NodePoolConfig
from aksconf_core.schemas.profiles import (
    AcrConfig,
    IngressProfile,
    LockConfig,
    ManagedIdentityConfig,
    MonitorMetricsConfig,
    SafeguardProfile,
)

NodePoolMap = Annotated[
    Mapping[str, NodePoolConfig],
    AfterValidator(freeze_mapping),
    PlainSerializer(thaw_mapping, return_type=dict[str, NodePoolConfig]),
]
"""Read-only node pool map, keyed by stable identifier."""


class UpgradeChannel(str, Enum):
    """Kubernetes automatic upgrade channel."""

    STABLE = "stable"
    RAPID = "rapid"
    PATCH = "patch"
    NODE_IMAGE = "node-image"
    NONE = "none"


class NodeOsUpgradeChannel(str, Enum):
    """Node OS upgrade channel."""

    NODE_IMAGE = "NodeImage"
    SECURITY_PATCH = "SecurityPatch"
    UNMANAGED = "Unmanaged"
    NONE = "None"


class SkuTier(str, Enum):
    """Managed control plane pricing tier."""

    FREE = "Free"
    STANDARD = "Standard"
    PREMIUM = "Premium"


class ClusterConfig(BaseModel):
    """Canonical managed Kubernetes cluster configuration.

    Attributes:
        name: Cluster name (1-63 chars, alphanumeric with inner '-'/'_').
        location: Azure region.
        resource_group_id: Resource ID of the parent resource group.
        kubernetes_version: Kubernetes minor version, None for the default.
        automatic_upgrade_channel: Kubernetes automatic upgrade channel.
        node_os_upgrade_channel: Node OS upgrade channel.
        sku_tier: Control plane pricing tier.
        private_cluster_enabled: Whether the API server is private.
        private_dns_zone_id: Private DNS zone for a private cluster.
        image_cleaner_enabled: Whether stale images are removed from nodes.
        image_cleaner_interval_hours: Image cleaner scan interval.
        tags: Azure resource tags.
        network: Network configuration.
        default_node_pool: Built-in system node pool.
        node_pools: Additional node pools keyed by stable identifier.
        acr: Attached container registry.
        lock: Management lock.
        managed_identities: Cluster identities.
        monitor_metrics: Managed Prometheus allow-lists.
        ingress_profile: Application routing profile.
        safeguard_profile: Deployment safeguards.
        maintenance_window_auto_upgrade: Auto-upgrade maintenance window.
        maintenance_window_node_os: Node OS maintenance window.

    Example:
        >>> from aksconf_core import validate_cluster_config
        >>> report = validate_cluster_config({
        ...     "name": "aks-1",
        ...     "network": {
        ...         "node_subnet_id": "/subscriptions/0000/resourceGroups/rg/providers/"
        ...         "Microsoft.Network/virtualNetworks/vnet/subnets/nodes",
        ...         "pod_cidr": "192.168.0.0/16",
        ...     },
        ... })
        >>> report.config.automatic_upgrade_channel.value
        'stable'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., description="Cluster name")
    location: str | None = Field(default=None, description="Azure region")
    resource_group_id: str | None = Field(default=None, description="Parent resource group ID")
    kubernetes_version: str | None = Field(default=None, description="Kubernetes minor version")
    automatic_upgrade_channel: UpgradeChannel = Field(
        default=UpgradeChannel.STABLE,
        description="Automatic upgrade channel",
    )
    node_os_upgrade_channel: NodeOsUpgradeChannel = Field(
        default=NodeOsUpgradeChannel.NODE_IMAGE,
        description="Node OS upgrade channel",
    )
    sku_tier: SkuTier = Field(default=SkuTier.STANDARD, description="Control plane tier")
    private_cluster_enabled: bool = Field(default=False, description="Private API server")
    private_dns_zone_id: str | None = Field(default=None, description="Private DNS zone ID")
    image_cleaner_enabled: bool = Field(default=True, description="Enable image cleaner")
    image_cleaner_interval_hours: int = Field(default=168, description="Image cleaner interval")
    tags: StringMap = Field(
        default_factory=dict, validate_default=True, description="Azure resource tags"
    )
    network: NetworkConfig = Field(..., description="Network configuration")
    default_node_pool: DefaultNodePoolConfig = Field(
        default_factory=DefaultNodePoolConfig,
        description="Default system node pool",
    )
    node_pools: NodePoolMap = Field(
        default_factory=dict,
        validate_default=True,
        description="Additional node pools keyed by stable identifier",
    )
    acr: AcrConfig | None = Field(default=None, description="Container registry")
    lock: LockConfig | None = Field(default=None, description="Management lock")
    managed_identities: ManagedIdentityConfig = Field(
        default_factory=ManagedIdentityConfig,
        description="Managed identities",
    )
    monitor_metrics: MonitorMetricsConfig | None = Field(
        default=None,
        description="Managed Prometheus allow-lists",
    )
    ingress_profile: IngressProfile | None = Field(default=None, description="Ingress profile")
    safeguard_profile: SafeguardProfile | None = Field(
        default=None,
        description="Deployment safeguards",
    )
    maintenance_window_auto_upgrade: MaintenanceWindow | None = Field(
        default=None,
        description="Auto-upgrade maintenance window",
    )
    maintenance_window_node_os: MaintenanceWindow | None = Field(
        default=None,
        description="Node OS maintenance window",
    )

    def to_document(self) -> dict[str, Any]:
        """Return the canonical configuration as a plain JSON-compatible document.

        Feeding the returned document back into the engine yields an equal
        ClusterConfig with zero diagnostics.
        """
        return self.model_dump(mode="json")
