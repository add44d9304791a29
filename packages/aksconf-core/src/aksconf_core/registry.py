"""Schema Registry for cluster configuration documents.

The registry is a static, read-only table of field definitions for every
configuration section: declared type, whether the field is required, its
default, its allowed-value set, pattern or format, and numeric bounds.

It holds no behavior. The Field Validator interprets FieldSpec entries, the
Normalizer reads their defaults, and the section validators look sections up
by path. Section order in REGISTRY is the order diagnostics are reported in.

Section presence semantics:
- required: the section must be present (absence is MissingRequiredField).
- nullable: absent or null means "not configured"; nested fields are never
  evaluated and the canonical value is None.
- neither: absent or null means "all defaults".
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from aksconf_core.schemas import (
    AUTO_UPGRADE_FREQUENCIES,
    AVAILABILITY_ZONES,
    NODE_OS_FREQUENCIES,
    DayOfWeek,
    IngressControllerType,
    LockKind,
    NetworkPolicy,
    NodeOsUpgradeChannel,
    NodePoolMode,
    OsSku,
    OutboundType,
    SafeguardLevel,
    SkuTier,
    UpgradeChannel,
    WeekIndex,
)

# Resource name and identifier patterns
CLUSTER_NAME_PATTERN = r"^[a-zA-Z0-9]$|^[a-zA-Z0-9][-_a-zA-Z0-9]{0,61}[a-zA-Z0-9]$"
RESOURCE_GROUP_ID_PATTERN = r"^/subscriptions/[^/]+/resourceGroups/[^/]+$"
SUBNET_ID_PATTERN = (
    r"^/subscriptions/[^/]+/resourceGroups/[^/]+/providers/Microsoft\.Network"
    r"/virtualNetworks/[^/]+/subnets/[^/]+$"
)
PRIVATE_DNS_ZONE_ID_PATTERN = (
    r"^/subscriptions/[^/]+/resourceGroups/[^/]+/providers/Microsoft\.Network"
    r"/privateDnsZones/[^/]+$"
)
DNS_ZONE_ID_PATTERN = (
    r"^/subscriptions/[^/]+/resourceGroups/[^/]+/providers/Microsoft\.Network"
    r"/[dD]ns[zZ]ones/[^/]+$"
)
USER_ASSIGNED_IDENTITY_ID_PATTERN = (
    r"^/subscriptions/[^/]+/resourceGroups/[^/]+/providers/Microsoft\.ManagedIdentity"
    r"/userAssignedIdentities/[^/]+$"
)
MINOR_VERSION_PATTERN = r"^\d+\.\d+$"
ACR_NAME_PATTERN = r"^[a-zA-Z0-9]{5,50}$"
NODE_POOL_NAME_PATTERN = r"^[a-z][a-z0-9]{0,11}$"
K8S_NAMESPACE_PATTERN = r"^[a-z0-9]([-a-z0-9]{0,61}[a-z0-9])?$"
METRICS_ALLOWLIST_PATTERN = r"^[a-z][a-z0-9]*=\[[^\]]*\](,[a-z][a-z0-9]*=\[[^\]]*\])*$"

# Maintenance schedule patterns
START_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
"""HH:mm, 24-hour clock."""

UTC_OFFSET_PATTERN = r"^[+-](0\d|1[0-4]):[0-5]\d$"
"""+HH:MM or -HH:MM."""

ROOT_PATH = ""


class FieldType(str, Enum):
    """Declared value types understood by the Field Validator."""

    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    STRING_SET = "string_set"
    STRING_MAP = "string_map"
    DATE = "date"
    DATETIME = "datetime"
    RECORD_LIST = "record_list"


class StringFormat(str, Enum):
    """Structured string formats checked beyond regular expressions."""

    CIDR = "cidr"
    IP_ADDRESS = "ip_address"


class SectionKind(str, Enum):
    """Shape of a section: a single object or a map of keyed objects."""

    OBJECT = "object"
    MAP = "map"


def enum_values(enum_cls: type[Enum] | tuple[Enum, ...]) -> tuple[str, ...]:
    """Return the string values of an enum class or tuple of members."""
    return tuple(member.value for member in enum_cls)


class FieldSpec(BaseModel):
    """Declaration of one configuration field.

    Attributes:
        name: Key of the field within its section.
        type: Declared value type.
        required: Whether the field must be supplied (null counts as absent).
        default: Value applied by the Normalizer when the field is absent.
        choices: Allowed values (strings and string-set items).
        pattern: Regular expression for strings and string-set items.
        format: Structured format (CIDR, IP address) for strings.
        minimum: Inclusive lower bound for integers.
        maximum: Inclusive upper bound for integers.
        non_empty: Reject empty strings.
        description: Short human-readable description.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1)
    type: FieldType
    required: bool = False
    default: Any = None
    choices: tuple[str, ...] | None = None
    pattern: str | None = None
    format: StringFormat | None = None
    minimum: int | None = None
    maximum: int | None = None
    non_empty: bool = False
    description: str = ""


class SectionSpec(BaseModel):
    """Declaration of one configuration section.

    Attributes:
        path: Dotted path of the section ("" for the document root).
        fields: Field declarations in declaration order.
        kind: Single object or map of keyed objects.
        required: Section must be present.
        nullable: Absent/null section means "not configured".
        description: Short human-readable description.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: str
    fields: tuple[FieldSpec, ...]
    kind: SectionKind = SectionKind.OBJECT
    required: bool = False
    nullable: bool = False
    description: str = ""

    @property
    def key(self) -> str:
        """Last segment of the path (the key in the parent mapping)."""
        return self.path.rsplit(".", 1)[-1]

    @property
    def parent_path(self) -> str | None:
        """Path of the enclosing section, None for the root."""
        if self.path == ROOT_PATH:
            return None
        if "." not in self.path:
            return ROOT_PATH
        return self.path.rsplit(".", 1)[0]

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def field(self, name: str) -> FieldSpec:
        """Return the FieldSpec named ``name``.

        Raises:
            KeyError: If the section declares no such field.
        """
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(f"{self.path or '<root>'} has no field {name!r}")


class Registry(BaseModel):
    """Ordered, read-only collection of section declarations."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    sections: tuple[SectionSpec, ...]

    def __iter__(self) -> Iterator[SectionSpec]:  # type: ignore[override]
        return iter(self.sections)

    def get(self, path: str) -> SectionSpec:
        """Return the section declared at ``path``.

        Raises:
            KeyError: If no section is declared at that path.
        """
        for section in self.sections:
            if section.path == path:
                return section
        raise KeyError(f"No section declared at {path!r}")

    def children(self, path: str) -> tuple[SectionSpec, ...]:
        """Return the sections nested directly under ``path``."""
        return tuple(s for s in self.sections if s.parent_path == path)

    def allowed_keys(self, path: str) -> frozenset[str]:
        """Return every key a mapping at ``path`` may contain."""
        section = self.get(path)
        return frozenset(section.field_names) | {c.key for c in self.children(path)}


# ---------------------------------------------------------------------------
# Cluster root
# ---------------------------------------------------------------------------

ROOT_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec(
        name="name",
        type=FieldType.STRING,
        required=True,
        pattern=CLUSTER_NAME_PATTERN,
        description="Cluster name",
    ),
    FieldSpec(name="location", type=FieldType.STRING, non_empty=True, description="Azure region"),
    FieldSpec(
        name="resource_group_id",
        type=FieldType.STRING,
        pattern=RESOURCE_GROUP_ID_PATTERN,
        description="Parent resource group ID",
    ),
    FieldSpec(
        name="kubernetes_version",
        type=FieldType.STRING,
        pattern=MINOR_VERSION_PATTERN,
        description="Kubernetes minor version",
    ),
    FieldSpec(
        name="automatic_upgrade_channel",
        type=FieldType.STRING,
        default=UpgradeChannel.STABLE.value,
        choices=enum_values(UpgradeChannel),
        description="Automatic upgrade channel",
    ),
    FieldSpec(
        name="node_os_upgrade_channel",
        type=FieldType.STRING,
        default=NodeOsUpgradeChannel.NODE_IMAGE.value,
        choices=enum_values(NodeOsUpgradeChannel),
        description="Node OS upgrade channel",
    ),
    FieldSpec(
        name="sku_tier",
        type=FieldType.STRING,
        default=SkuTier.STANDARD.value,
        choices=enum_values(SkuTier),
        description="Control plane tier",
    ),
    FieldSpec(
        name="private_cluster_enabled",
        type=FieldType.BOOLEAN,
        default=False,
        description="Private API server",
    ),
    FieldSpec(
        name="private_dns_zone_id",
        type=FieldType.STRING,
        pattern=PRIVATE_DNS_ZONE_ID_PATTERN,
        description="Private DNS zone for a private cluster",
    ),
    FieldSpec(
        name="image_cleaner_enabled",
        type=FieldType.BOOLEAN,
        default=True,
        description="Enable image cleaner",
    ),
    FieldSpec(
        name="image_cleaner_interval_hours",
        type=FieldType.INTEGER,
        default=168,
        minimum=24,
        maximum=2160,
        description="Image cleaner interval",
    ),
    FieldSpec(name="tags", type=FieldType.STRING_MAP, default={}, description="Resource tags"),
)

# ---------------------------------------------------------------------------
# Network
# ---------------------------------------------------------------------------

NETWORK_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec(
        name="node_subnet_id",
        type=FieldType.STRING,
        required=True,
        pattern=SUBNET_ID_PATTERN,
        description="Node subnet resource ID",
    ),
    FieldSpec(
        name="pod_cidr",
        type=FieldType.STRING,
        required=True,
        format=StringFormat.CIDR,
        description="Pod address range",
    ),
    FieldSpec(
        name="service_cidr",
        type=FieldType.STRING,
        format=StringFormat.CIDR,
        description="Service address range",
    ),
    FieldSpec(
        name="dns_service_ip",
        type=FieldType.STRING,
        format=StringFormat.IP_ADDRESS,
        description="Cluster DNS service IP",
    ),
    FieldSpec(
        name="api_server_subnet_id",
        type=FieldType.STRING,
        pattern=SUBNET_ID_PATTERN,
        description="API-server subnet resource ID",
    ),
    FieldSpec(
        name="api_server_private_dns_zone_id",
        type=FieldType.STRING,
        pattern=PRIVATE_DNS_ZONE_ID_PATTERN,
        description="API-server private DNS zone",
    ),
    FieldSpec(
        name="network_policy",
        type=FieldType.STRING,
        default=NetworkPolicy.CILIUM.value,
        choices=enum_values(NetworkPolicy),
        description="Network policy engine",
    ),
    FieldSpec(
        name="outbound_type",
        type=FieldType.STRING,
        default=OutboundType.LOAD_BALANCER.value,
        choices=enum_values(OutboundType),
        description="Egress routing mode",
    ),
)

# ---------------------------------------------------------------------------
# Node pools
# ---------------------------------------------------------------------------

OS_SKUS: tuple[str, ...] = enum_values(OsSku)
"""OS SKUs allowed for every pool of the node_pools map."""

DEFAULT_NODE_POOL_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec(
        name="vm_size",
        type=FieldType.STRING,
        default="Standard_D4d_v5",
        non_empty=True,
        description="VM size",
    ),
    FieldSpec(
        name="min_count",
        type=FieldType.INTEGER,
        default=3,
        minimum=1,
        maximum=1000,
        description="Minimum node count",
    ),
    FieldSpec(
        name="max_count",
        type=FieldType.INTEGER,
        default=9,
        minimum=1,
        maximum=1000,
        description="Maximum node count",
    ),
    FieldSpec(
        name="os_sku",
        type=FieldType.STRING,
        default=OsSku.AZURE_LINUX.value,
        choices=OS_SKUS,
        description="Node OS SKU",
    ),
    FieldSpec(
        name="zones",
        type=FieldType.STRING_SET,
        default=AVAILABILITY_ZONES,
        choices=AVAILABILITY_ZONES,
        description="Availability zones",
    ),
    FieldSpec(
        name="os_disk_size_gb",
        type=FieldType.INTEGER,
        minimum=30,
        maximum=2048,
        description="OS disk size in GB",
    ),
)

# os_sku and zones membership is enforced map-wide by the Node Pool Policy
# Checker so each offending pool is reported exactly once.
NODE_POOL_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec(
        name="name",
        type=FieldType.STRING,
        required=True,
        pattern=NODE_POOL_NAME_PATTERN,
        description="Agent pool name",
    ),
    FieldSpec(
        name="vm_size",
        type=FieldType.STRING,
        required=True,
        non_empty=True,
        description="VM size",
    ),
    FieldSpec(
        name="orchestrator_version",
        type=FieldType.STRING,
        required=True,
        pattern=MINOR_VERSION_PATTERN,
        description="Kubernetes minor version",
    ),
    FieldSpec(
        name="min_count",
        type=FieldType.INTEGER,
        minimum=0,
        maximum=1000,
        description="Minimum node count",
    ),
    FieldSpec(
        name="max_count",
        type=FieldType.INTEGER,
        minimum=1,
        maximum=1000,
        description="Maximum node count",
    ),
    FieldSpec(
        name="os_sku",
        type=FieldType.STRING,
        default=OsSku.AZURE_LINUX.value,
        description="Node OS SKU",
    ),
    FieldSpec(
        name="mode",
        type=FieldType.STRING,
        default=NodePoolMode.USER.value,
        choices=enum_values(NodePoolMode),
        description="Pool mode",
    ),
    FieldSpec(
        name="os_disk_size_gb",
        type=FieldType.INTEGER,
        minimum=30,
        maximum=2048,
        description="OS disk size in GB",
    ),
    FieldSpec(
        name="max_pods",
        type=FieldType.INTEGER,
        minimum=10,
        maximum=250,
        description="Maximum pods per node",
    ),
    FieldSpec(name="tags", type=FieldType.STRING_MAP, default={}, description="Resource tags"),
    FieldSpec(name="labels", type=FieldType.STRING_MAP, default={}, description="Node labels"),
    FieldSpec(
        name="zones",
        type=FieldType.STRING_SET,
        default=AVAILABILITY_ZONES,
        description="Availability zones",
    ),
)

# ---------------------------------------------------------------------------
# Sub-profiles
# ---------------------------------------------------------------------------

ACR_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec(
        name="name",
        type=FieldType.STRING,
        required=True,
        pattern=ACR_NAME_PATTERN,
        description="Registry name",
    ),
    FieldSpec(
        name="private_dns_zone_resource_ids",
        type=FieldType.STRING_SET,
        default=(),
        pattern=PRIVATE_DNS_ZONE_ID_PATTERN,
        description="Private DNS zones for the registry endpoint",
    ),
    FieldSpec(
        name="subnet_resource_id",
        type=FieldType.STRING,
        pattern=SUBNET_ID_PATTERN,
        description="Private endpoint subnet",
    ),
    FieldSpec(
        name="zone_redundancy_enabled",
        type=FieldType.BOOLEAN,
        default=True,
        description="Zone redundancy",
    ),
)

LOCK_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec(
        name="kind",
        type=FieldType.STRING,
        required=True,
        choices=enum_values(LockKind),
        description="Lock level",
    ),
    FieldSpec(name="name", type=FieldType.STRING, non_empty=True, description="Lock name"),
)

MANAGED_IDENTITY_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec(
        name="system_assigned",
        type=FieldType.BOOLEAN,
        default=False,
        description="System-assigned identity",
    ),
    FieldSpec(
        name="user_assigned_resource_ids",
        type=FieldType.STRING_SET,
        default=(),
        pattern=USER_ASSIGNED_IDENTITY_ID_PATTERN,
        description="User-assigned identity resource IDs",
    ),
)

MONITOR_METRICS_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec(
        name="annotations_allowed",
        type=FieldType.STRING,
        pattern=METRICS_ALLOWLIST_PATTERN,
        description="Allowed Kubernetes annotations",
    ),
    FieldSpec(
        name="labels_allowed",
        type=FieldType.STRING,
        pattern=METRICS_ALLOWLIST_PATTERN,
        description="Allowed Kubernetes labels",
    ),
)

INGRESS_PROFILE_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec(
        name="dns_zone_resource_ids",
        type=FieldType.STRING_SET,
        default=(),
        pattern=DNS_ZONE_ID_PATTERN,
        description="DNS zones managed by the add-on",
    ),
)

NGINX_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec(
        name="default_ingress_controller_type",
        type=FieldType.STRING,
        default=IngressControllerType.ANNOTATION_CONTROLLED.value,
        choices=enum_values(IngressControllerType),
        description="Default ingress controller exposure",
    ),
)

SAFEGUARD_PROFILE_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec(
        name="level",
        type=FieldType.STRING,
        required=True,
        choices=enum_values(SafeguardLevel),
        description="Enforcement level",
    ),
    FieldSpec(name="version", type=FieldType.STRING, default="v2", non_empty=True),
    FieldSpec(
        name="excluded_namespaces",
        type=FieldType.STRING_SET,
        default=(),
        pattern=K8S_NAMESPACE_PATTERN,
        description="Namespaces exempt from safeguards",
    ),
)

# ---------------------------------------------------------------------------
# Maintenance windows
# ---------------------------------------------------------------------------

BLACKOUT_PERIOD_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec(name="start", type=FieldType.DATETIME, required=True, description="Start"),
    FieldSpec(name="end", type=FieldType.DATETIME, required=True, description="End"),
)
"""Fields of one blackout period, checked by the Maintenance Window Resolver."""

# Upper interval bound per frequency (days, weeks, months)
MAX_INTERVAL_BY_FREQUENCY: dict[str, int] = {
    "Daily": 7,
    "Weekly": 4,
    "AbsoluteMonthly": 6,
    "RelativeMonthly": 6,
}


def _maintenance_window_fields(frequencies: tuple[str, ...]) -> tuple[FieldSpec, ...]:
    return (
        FieldSpec(
            name="frequency",
            type=FieldType.STRING,
            choices=frequencies,
            description="Recurrence frequency",
        ),
        FieldSpec(
            name="interval",
            type=FieldType.INTEGER,
            default=1,
            minimum=1,
            description="Recurrence interval",
        ),
        FieldSpec(
            name="duration",
            type=FieldType.INTEGER,
            default=4,
            minimum=4,
            maximum=24,
            description="Window length in hours",
        ),
        FieldSpec(
            name="day_of_month",
            type=FieldType.INTEGER,
            minimum=1,
            maximum=31,
            description="Day of month",
        ),
        FieldSpec(
            name="day_of_week",
            type=FieldType.STRING,
            choices=enum_values(DayOfWeek),
            description="Day of week",
        ),
        FieldSpec(name="start_date", type=FieldType.DATE, description="Effective start date"),
        FieldSpec(
            name="start_time",
            type=FieldType.STRING,
            pattern=START_TIME_PATTERN,
            description="Start time (HH:mm)",
        ),
        FieldSpec(
            name="utc_offset",
            type=FieldType.STRING,
            pattern=UTC_OFFSET_PATTERN,
            description="UTC offset (+HH:MM)",
        ),
        FieldSpec(
            name="week_index",
            type=FieldType.STRING,
            choices=enum_values(WeekIndex),
            description="Week of month",
        ),
        FieldSpec(
            name="blackout_periods",
            type=FieldType.RECORD_LIST,
            default=(),
            description="Blackout periods",
        ),
    )


MAINTENANCE_WINDOW_SECTIONS: tuple[str, ...] = (
    "maintenance_window_auto_upgrade",
    "maintenance_window_node_os",
)

REGISTRY = Registry(
    sections=(
        SectionSpec(path=ROOT_PATH, fields=ROOT_FIELDS, required=True, description="Cluster"),
        SectionSpec(path="network", fields=NETWORK_FIELDS, required=True, description="Network"),
        SectionSpec(
            path="default_node_pool",
            fields=DEFAULT_NODE_POOL_FIELDS,
            description="Default system node pool",
        ),
        SectionSpec(
            path="node_pools",
            fields=NODE_POOL_FIELDS,
            kind=SectionKind.MAP,
            description="Additional node pools",
        ),
        SectionSpec(path="acr", fields=ACR_FIELDS, nullable=True, description="Registry"),
        SectionSpec(path="lock", fields=LOCK_FIELDS, nullable=True, description="Lock"),
        SectionSpec(
            path="managed_identities",
            fields=MANAGED_IDENTITY_FIELDS,
            description="Managed identities",
        ),
        SectionSpec(
            path="monitor_metrics",
            fields=MONITOR_METRICS_FIELDS,
            nullable=True,
            description="Managed Prometheus allow-lists",
        ),
        SectionSpec(
            path="ingress_profile",
            fields=INGRESS_PROFILE_FIELDS,
            nullable=True,
            description="Application routing",
        ),
        SectionSpec(
            path="ingress_profile.nginx",
            fields=NGINX_FIELDS,
            nullable=True,
            description="NGINX settings",
        ),
        SectionSpec(
            path="safeguard_profile",
            fields=SAFEGUARD_PROFILE_FIELDS,
            nullable=True,
            description="Deployment safeguards",
        ),
        SectionSpec(
            path="maintenance_window_auto_upgrade",
            fields=_maintenance_window_fields(enum_values(AUTO_UPGRADE_FREQUENCIES)),
            nullable=True,
            description="Auto-upgrade maintenance window",
        ),
        SectionSpec(
            path="maintenance_window_node_os",
            fields=_maintenance_window_fields(enum_values(NODE_OS_FREQUENCIES)),
            nullable=True,
            description="Node OS maintenance window",
        ),
    )
)
