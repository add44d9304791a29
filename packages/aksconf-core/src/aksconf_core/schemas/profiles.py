"""Optional cluster sub-profiles.

This module defines the smaller sub-objects of a cluster configuration:
- LockConfig: Management lock on the cluster resource
- ManagedIdentityConfig: System and user-assigned identities
- AcrConfig: Attached container registry
- MonitorMetricsConfig: Managed Prometheus metric allow-lists
- IngressProfile / NginxConfig: Application routing add-on
- SafeguardProfile: Deployment safeguards policy level
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class LockKind(str, Enum):
    """Management lock level."""

    CAN_NOT_DELETE = "CanNotDelete"
    READ_ONLY = "ReadOnly"


class IngressControllerType(str, Enum):
    """Default NGINX ingress controller exposure."""

    ANNOTATION_CONTROLLED = "AnnotationControlled"
    EXTERNAL = "External"
    INTERNAL = "Internal"
    NONE = "None"


class SafeguardLevel(str, Enum):
    """Deployment safeguards enforcement level."""

    ENFORCEMENT = "Enforcement"
    WARNING = "Warning"
    OFF = "Off"


class LockConfig(BaseModel):
    """Management lock applied to the cluster resource."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: LockKind = Field(..., description="Lock level")
    name: str | None = Field(default=None, description="Lock name")


class ManagedIdentityConfig(BaseModel):
    """Managed identities assigned to the cluster.

    Attributes:
        system_assigned: Whether a system-assigned identity is enabled.
        user_assigned_resource_ids: User-assigned identity resource IDs
            (sorted, unique).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    system_assigned: bool = Field(default=False, description="Enable system-assigned identity")
    user_assigned_resource_ids: tuple[str, ...] = Field(
        default=(),
        description="User-assigned identity resource IDs",
    )


class AcrConfig(BaseModel):
    """Container registry created alongside the cluster.

    Attributes:
        name: Registry name (5-50 alphanumerics).
        private_dns_zone_resource_ids: Private DNS zones for the registry
            private endpoint (sorted, unique).
        subnet_resource_id: Subnet for the private endpoint.
        zone_redundancy_enabled: Whether the registry is zone redundant.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., description="Registry name")
    private_dns_zone_resource_ids: tuple[str, ...] = Field(
        default=(),
        description="Private DNS zone resource IDs",
    )
    subnet_resource_id: str | None = Field(default=None, description="Private endpoint subnet")
    zone_redundancy_enabled: bool = Field(default=True, description="Zone redundancy")


class MonitorMetricsConfig(BaseModel):
    """Managed Prometheus allow-lists (``namespaces=[a,b],pods=[c]``)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    annotations_allowed: str | None = Field(default=None, description="Allowed annotations")
    labels_allowed: str | None = Field(default=None, description="Allowed labels")


class NginxConfig(BaseModel):
    """NGINX settings of the application routing add-on."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    default_ingress_controller_type: IngressControllerType = Field(
        default=IngressControllerType.ANNOTATION_CONTROLLED,
        description="Default ingress controller exposure",
    )


class IngressProfile(BaseModel):
    """Application routing (managed NGINX ingress) profile.

    Attributes:
        dns_zone_resource_ids: DNS zones managed by the add-on (sorted, unique).
        nginx: NGINX settings, None when not configured.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    dns_zone_resource_ids: tuple[str, ...] = Field(default=(), description="DNS zone resource IDs")
    nginx: NginxConfig | None = Field(default=None, description="NGINX settings")


class SafeguardProfile(BaseModel):
    """Deployment safeguards profile.

    Attributes:
        level: Enforcement level.
        version: Safeguards policy version.
        excluded_namespaces: Namespaces exempt from safeguards (sorted, unique).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    level: SafeguardLevel = Field(..., description="Enforcement level")
    version: str = Field(default="v2", description="Policy version")
    excluded_namespaces: tuple[str, ...] = Field(default=(), description="Excluded namespaces")
