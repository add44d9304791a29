"""Network configuration model.

This module defines the NetworkPolicy and OutboundType enums and the
NetworkConfig model for cluster networking (node subnet, pod and service
address ranges, API-server VNet integration).
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class NetworkPolicy(str, Enum):
    """Network policy engines supported for the cluster."""

    AZURE = "azure"
    CALICO = "calico"
    CILIUM = "cilium"


class OutboundType(str, Enum):
    """Egress routing modes for cluster nodes."""

    LOAD_BALANCER = "loadBalancer"
    MANAGED_NAT_GATEWAY = "managedNATGateway"
    USER_ASSIGNED_NAT_GATEWAY = "userAssignedNATGateway"
    USER_DEFINED_ROUTING = "userDefinedRouting"


class NetworkConfig(BaseModel):
    """Cluster network configuration.

    Attributes:
        node_subnet_id: Resource ID of the subnet hosting the nodes.
        pod_cidr: Address range for pods (overlay).
        service_cidr: Address range for Kubernetes services.
        dns_service_ip: Cluster DNS service IP, inside service_cidr.
        api_server_subnet_id: Subnet for API-server VNet integration.
        api_server_private_dns_zone_id: Private DNS zone for the API server.
        network_policy: Network policy engine.
        outbound_type: Egress routing mode.

    Example:
        >>> network = NetworkConfig(
        ...     node_subnet_id="/subscriptions/0000/resourceGroups/rg/providers/"
        ...     "Microsoft.Network/virtualNetworks/vnet/subnets/nodes",
        ...     pod_cidr="192.168.0.0/16",
        ... )
        >>> network.network_policy
        <NetworkPolicy.CILIUM: 'cilium'>
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    node_subnet_id: str = Field(..., description="Node subnet resource ID")
    pod_cidr: str = Field(..., description="Pod address range (CIDR)")
    service_cidr: str | None = Field(default=None, description="Service address range (CIDR)")
    dns_service_ip: str | None = Field(default=None, description="Cluster DNS service IP")
    api_server_subnet_id: str | None = Field(
        default=None,
        description="API-server subnet resource ID",
    )
    api_server_private_dns_zone_id: str | None = Field(
        default=None,
        description="API-server private DNS zone resource ID",
    )
    network_policy: NetworkPolicy = Field(
        default=NetworkPolicy.CILIUM,
        description="Network policy engine",
    )
    outbound_type: OutboundType = Field(
        default=OutboundType.LOAD_BALANCER,
        description="Egress routing mode",
    )
