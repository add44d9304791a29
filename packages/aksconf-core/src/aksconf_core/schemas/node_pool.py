"""Node pool configuration models.

This module defines the node pool enums and models:
- OsSku: Operating system SKUs allowed for every pool
- NodePoolMode: System or User pool
- DefaultNodePoolConfig: The cluster's built-in system pool
- NodePoolConfig: One entry of the node_pools map (keyed by a stable map key)
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from aksconf_core.schemas.frozen import StringMap

AVAILABILITY_ZONES: tuple[str, ...] = ("1", "2", "3")
"""Recognized availability zone identifiers."""


class OsSku(str, Enum):
    """Node operating system SKUs."""

    UBUNTU = "Ubuntu"
    AZURE_LINUX = "AzureLinux"


class NodePoolMode(str, Enum):
    """Node pool mode."""

    SYSTEM = "System"
    USER = "User"


class DefaultNodePoolConfig(BaseModel):
    """Configuration of the default (system) node pool.

    Attributes:
        vm_size: VM size for pool nodes.
        min_count: Autoscaler lower bound.
        max_count: Autoscaler upper bound.
        os_sku: Node OS SKU.
        zones: Availability zones (sorted, unique).
        os_disk_size_gb: OS disk size, None for the platform default.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    vm_size: str = Field(default="Standard_D4d_v5", description="VM size")
    min_count: int = Field(default=3, description="Minimum node count")
    max_count: int = Field(default=9, description="Maximum node count")
    os_sku: OsSku = Field(default=OsSku.AZURE_LINUX, description="Node OS SKU")
    zones: tuple[str, ...] = Field(default=AVAILABILITY_ZONES, description="Availability zones")
    os_disk_size_gb: int | None = Field(default=None, description="OS disk size in GB")


class NodePoolConfig(BaseModel):
    """Configuration of one additional node pool.

    The pool's identity is its key in ClusterConfig.node_pools, not its
    ``name``; the key must stay stable across runs.

    Attributes:
        name: Agent pool name.
        vm_size: VM size for pool nodes.
        orchestrator_version: Kubernetes minor version for the pool.
        min_count: Autoscaler lower bound (optional).
        max_count: Autoscaler upper bound (optional).
        os_sku: Node OS SKU.
        mode: System or User pool.
        os_disk_size_gb: OS disk size, None for the platform default.
        max_pods: Maximum pods per node, None for the platform default.
        tags: Azure resource tags.
        labels: Kubernetes node labels.
        zones: Availability zones (sorted, unique).

    Example:
        >>> pool = NodePoolConfig(
        ...     name="workload",
        ...     vm_size="Standard_D2d_v5",
        ...     orchestrator_version="1.28",
        ...     min_count=1,
        ...     max_count=5,
        ... )
        >>> pool.zones
        ('1', '2', '3')
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., description="Agent pool name")
    vm_size: str = Field(..., description="VM size")
    orchestrator_version: str = Field(..., description="Kubernetes minor version")
    min_count: int | None = Field(default=None, description="Minimum node count")
    max_count: int | None = Field(default=None, description="Maximum node count")
    os_sku: OsSku = Field(default=OsSku.AZURE_LINUX, description="Node OS SKU")
    mode: NodePoolMode = Field(default=NodePoolMode.USER, description="Pool mode")
    os_disk_size_gb: int | None = Field(default=None, description="OS disk size in GB")
    max_pods: int | None = Field(default=None, description="Maximum pods per node")
    tags: StringMap = Field(
        default_factory=dict, validate_default=True, description="Azure resource tags"
    )
    labels: StringMap = Field(
        default_factory=dict, validate_default=True, description="Kubernetes node labels"
    )
    zones: tuple[str, ...] = Field(default=AVAILABILITY_ZONES, description="Availability zones")
