"""Cross-Field Validator.

Rules spanning several fields of one section. They run after the section's
field checks and only when every field of the section passed, so they never
compare rejected values.

Presence-gated enum checks for nullable sub-profiles (lock.kind,
ingress_profile.nginx.default_ingress_controller_type, safeguard_profile.level)
need no rule here: the registry marks those sections nullable, so their fields
are evaluated only when the object is present.
"""

from __future__ import annotations

import ipaddress
from collections.abc import Callable

import structlog

from aksconf_core.diagnostics import (
    Diagnostic,
    conflicting_fields,
    cross_field_violation,
    join_path,
    missing_required,
)
from aksconf_core.validation.sections import SectionView

logger = structlog.get_logger(__name__)

SectionRule = Callable[[SectionView], list[Diagnostic]]


def private_dns_zone_requires_private_cluster(view: SectionView) -> list[Diagnostic]:
    """A private DNS zone only applies to a private cluster."""
    if view.value("private_dns_zone_id") and not view.value("private_cluster_enabled"):
        return [
            conflicting_fields(
                join_path(view.path, "private_dns_zone_id"),
                "private_dns_zone_id is set but private_cluster_enabled is false",
                view.value("private_dns_zone_id"),
            )
        ]
    return []


def pod_and_service_cidrs_disjoint(view: SectionView) -> list[Diagnostic]:
    pod_cidr = view.value("pod_cidr")
    service_cidr = view.value("service_cidr")
    if not pod_cidr or not service_cidr:
        return []

    pod_net = ipaddress.ip_network(pod_cidr)
    service_net = ipaddress.ip_network(service_cidr)
    if pod_net.version == service_net.version and pod_net.overlaps(service_net):
        return [
            conflicting_fields(
                view.path,
                f"pod_cidr {pod_cidr} overlaps service_cidr {service_cidr}",
                {"pod_cidr": pod_cidr, "service_cidr": service_cidr},
            )
        ]
    return []


def dns_service_ip_within_service_cidr(view: SectionView) -> list[Diagnostic]:
    dns_service_ip = view.value("dns_service_ip")
    if not dns_service_ip:
        return []

    service_cidr = view.value("service_cidr")
    if not service_cidr:
        return [
            missing_required(
                join_path(view.path, "service_cidr"),
                "dns_service_ip requires service_cidr",
            )
        ]

    address = ipaddress.ip_address(dns_service_ip)
    network = ipaddress.ip_network(service_cidr)
    if address.version != network.version or address not in network:
        return [
            cross_field_violation(
                join_path(view.path, "dns_service_ip"),
                f"dns_service_ip {dns_service_ip} is outside service_cidr {service_cidr}",
                dns_service_ip,
            )
        ]
    return []


def api_server_subnet_distinct(view: SectionView) -> list[Diagnostic]:
    api_subnet = view.value("api_server_subnet_id")
    node_subnet = view.value("node_subnet_id")
    # Azure resource IDs compare case-insensitively
    if api_subnet and node_subnet and api_subnet.lower() == node_subnet.lower():
        return [
            conflicting_fields(
                view.path,
                "api_server_subnet_id must differ from node_subnet_id",
                api_subnet,
            )
        ]
    return []


def api_server_dns_zone_requires_subnet(view: SectionView) -> list[Diagnostic]:
    if view.value("api_server_private_dns_zone_id") and not view.value("api_server_subnet_id"):
        return [
            missing_required(
                join_path(view.path, "api_server_subnet_id"),
                "api_server_private_dns_zone_id requires api_server_subnet_id",
            )
        ]
    return []


def min_count_not_above_max_count(view: SectionView) -> list[Diagnostic]:
    min_count = view.value("min_count")
    max_count = view.value("max_count")
    if min_count is not None and max_count is not None and min_count > max_count:
        return [
            cross_field_violation(
                view.path,
                f"min_count ({min_count}) must be <= max_count ({max_count})",
                {"min_count": min_count, "max_count": max_count},
            )
        ]
    return []


def acr_dns_zones_require_subnet(view: SectionView) -> list[Diagnostic]:
    if view.value("private_dns_zone_resource_ids") and not view.value("subnet_resource_id"):
        return [
            missing_required(
                join_path(view.path, "subnet_resource_id"),
                "private_dns_zone_resource_ids require a private endpoint subnet",
            )
        ]
    return []


SECTION_RULES: dict[str, tuple[SectionRule, ...]] = {
    "": (private_dns_zone_requires_private_cluster,),
    "network": (
        pod_and_service_cidrs_disjoint,
        dns_service_ip_within_service_cidr,
        api_server_subnet_distinct,
        api_server_dns_zone_requires_subnet,
    ),
    "default_node_pool": (min_count_not_above_max_count,),
    "acr": (acr_dns_zones_require_subnet,),
}
"""Cross-field rules per section path, applied in order."""


def check_section(view: SectionView) -> list[Diagnostic]:
    """Apply the cross-field rules registered for the view's section.

    Returns no diagnostics when any field of the section failed, since
    relationships between rejected values are meaningless.
    """
    rules = SECTION_RULES.get(view.path, ())
    if not rules or not view.clean:
        return []

    diagnostics: list[Diagnostic] = []
    for rule in rules:
        diagnostics.extend(rule(view))

    if diagnostics:
        logger.debug(
            "cross_field_rules_failed",
            section=view.path or "<root>",
            count=len(diagnostics),
        )
    return diagnostics
