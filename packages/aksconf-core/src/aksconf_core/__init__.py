"""aksconf-core: Cluster configuration validation and normalization.

This package provides:
- validate_cluster_config / ConfigEngine: Validate a raw document into a
  canonical ClusterConfig or a complete list of diagnostics
- ClusterConfig: Canonical, defaults-applied cluster configuration
- Diagnostic / DiagnosticKind: Structured validation failures
- REGISTRY: Declarative field rules for every configuration section
- load_document / parse_document: Structural loading of YAML/JSON documents
- JSON Schema export utilities
"""

from __future__ import annotations

__version__ = "0.1.0"

# Diagnostics
from aksconf_core.diagnostics import Diagnostic, DiagnosticKind

# Engine
from aksconf_core.engine import ConfigEngine, validate_cluster_config

# Error types
from aksconf_core.errors import (
    AksConfError,
    AssemblyError,
    ConfigValidationError,
    SettingsError,
    StructuralError,
    ValidationTaskError,
)

# JSON Schema export functions
from aksconf_core.export import export_cluster_config_schema

# Document loading
from aksconf_core.loader import load_document, parse_document

# Schema Registry
from aksconf_core.registry import REGISTRY, FieldSpec, FieldType, SectionSpec

# Schema models
from aksconf_core.schemas import (
    AcrConfig,
    BlackoutPeriod,
    ClusterConfig,
    DefaultNodePoolConfig,
    IngressProfile,
    LockConfig,
    MaintenanceWindow,
    ManagedIdentityConfig,
    MonitorMetricsConfig,
    NetworkConfig,
    NginxConfig,
    NodePoolConfig,
    SafeguardProfile,
)
from aksconf_core.settings import EngineSettings
from aksconf_core.validation import ValidationReport

__all__ = [
    "__version__",
    # Engine
    "ConfigEngine",
    "EngineSettings",
    "ValidationReport",
    "validate_cluster_config",
    # Diagnostics
    "Diagnostic",
    "DiagnosticKind",
    # Errors
    "AksConfError",
    "AssemblyError",
    "ConfigValidationError",
    "SettingsError",
    "StructuralError",
    "ValidationTaskError",
    # Loading
    "load_document",
    "parse_document",
    # Registry
    "REGISTRY",
    "FieldSpec",
    "FieldType",
    "SectionSpec",
    # Export
    "export_cluster_config_schema",
    # Schemas
    "AcrConfig",
    "BlackoutPeriod",
    "ClusterConfig",
    "DefaultNodePoolConfig",
    "IngressProfile",
    "LockConfig",
    "MaintenanceWindow",
    "ManagedIdentityConfig",
    "MonitorMetricsConfig",
    "NetworkConfig",
    "NginxConfig",
    "NodePoolConfig",
    "SafeguardProfile",
]
