"""Diagnostic models for cluster configuration validation.

A Diagnostic is one structured validation failure: where (dotted field
path), what kind, a human-readable message and, where applicable, the
offending value and the allowed set, pattern, or range.

Diagnostics are plain values. Every validation stage returns them; none
raises them.

Besides the seven rule kinds, keys a section does not declare are reported
as ``UnknownField`` (the offending key is the last path segment). Consumers
matching on ``kind`` should expect all eight values of DiagnosticKind.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DiagnosticKind(str, Enum):
    """Violation kinds reported by the engine.

    Values:
        TYPE_MISMATCH: Value's shape does not match the declared field type.
        OUT_OF_RANGE: Numeric value outside declared bounds.
        PATTERN_MISMATCH: String fails a required pattern or format.
        ENUM_VIOLATION: Value not a member of a declared allowed set.
        MISSING_REQUIRED_FIELD: A required field (or one required by another
            field's value) is absent.
        CONFLICTING_FIELDS: Mutually exclusive or inconsistent fields both set.
        CROSS_FIELD_CONSTRAINT_VIOLATION: Ordering or relational constraint
            between two present fields is violated.
        UNKNOWN_FIELD: Key not declared for its section.
    """

    TYPE_MISMATCH = "TypeMismatch"
    OUT_OF_RANGE = "OutOfRange"
    PATTERN_MISMATCH = "PatternMismatch"
    ENUM_VIOLATION = "EnumViolation"
    MISSING_REQUIRED_FIELD = "MissingRequiredField"
    CONFLICTING_FIELDS = "ConflictingFields"
    CROSS_FIELD_CONSTRAINT_VIOLATION = "CrossFieldConstraintViolation"
    UNKNOWN_FIELD = "UnknownField"


class Diagnostic(BaseModel):
    """One validation failure.

    Attributes:
        path: Dotted field path (e.g. "node_pools.workload.min_count").
            The empty string denotes the document root.
        kind: Violation kind.
        message: Human-readable description.
        value: Offending value (if applicable).
        allowed: Allowed values for enum violations.
        pattern: Required pattern or format for pattern mismatches.
        minimum: Lower bound for range violations.
        maximum: Upper bound for range violations.

    Example:
        >>> Diagnostic(
        ...     path="lock.kind",
        ...     kind=DiagnosticKind.ENUM_VIOLATION,
        ...     message="Value 'Delete' is not one of: CanNotDelete, ReadOnly",
        ...     value="Delete",
        ...     allowed=("CanNotDelete", "ReadOnly"),
        ... )
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: str = Field(..., description="Dotted field path")
    kind: DiagnosticKind = Field(..., description="Violation kind")
    message: str = Field(..., min_length=1, description="Human-readable message")
    value: Any = Field(default=None, description="Offending value")
    allowed: tuple[str, ...] | None = Field(default=None, description="Allowed values")
    pattern: str | None = Field(default=None, description="Required pattern or format")
    minimum: int | None = Field(default=None, description="Lower bound")
    maximum: int | None = Field(default=None, description="Upper bound")

    def format(self) -> str:
        """Return a single-line rendering like 'name: [PatternMismatch] ...'."""
        location = self.path or "<root>"
        return f"{location}: [{self.kind.value}] {self.message}"


def join_path(*parts: str) -> str:
    """Join path segments with dots, skipping empty segments.

    Example:
        >>> join_path("", "name")
        'name'
        >>> join_path("node_pools", "workload", "min_count")
        'node_pools.workload.min_count'
    """
    return ".".join(p for p in parts if p)


def type_name(value: Any) -> str:
    """Return a user-facing type name for an input value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "mapping"
    if isinstance(value, (list, tuple, set, frozenset)):
        return "list"
    return type(value).__name__


def type_mismatch(path: str, expected: str, value: Any) -> Diagnostic:
    return Diagnostic(
        path=path,
        kind=DiagnosticKind.TYPE_MISMATCH,
        message=f"Expected {expected}, got {type_name(value)}",
        value=value,
    )


def out_of_range(
    path: str,
    value: int,
    *,
    minimum: int | None = None,
    maximum: int | None = None,
    reason: str | None = None,
) -> Diagnostic:
    if reason is None:
        if minimum is not None and maximum is not None:
            reason = f"must be between {minimum} and {maximum}"
        elif minimum is not None:
            reason = f"must be >= {minimum}"
        else:
            reason = f"must be <= {maximum}"
    return Diagnostic(
        path=path,
        kind=DiagnosticKind.OUT_OF_RANGE,
        message=f"Value {value} {reason}",
        value=value,
        minimum=minimum,
        maximum=maximum,
    )


def pattern_mismatch(path: str, value: Any, pattern: str, *, what: str | None = None) -> Diagnostic:
    described = what or f"pattern {pattern}"
    return Diagnostic(
        path=path,
        kind=DiagnosticKind.PATTERN_MISMATCH,
        message=f"Value {value!r} does not match {described}",
        value=value,
        pattern=pattern,
    )


def enum_violation(path: str, value: Any, allowed: Iterable[str]) -> Diagnostic:
    allowed_values = tuple(allowed)
    return Diagnostic(
        path=path,
        kind=DiagnosticKind.ENUM_VIOLATION,
        message=f"Value {value!r} is not one of: {', '.join(allowed_values)}",
        value=value,
        allowed=allowed_values,
    )


def missing_required(path: str, reason: str | None = None) -> Diagnostic:
    message = "Required field is missing"
    if reason:
        message = f"{message}: {reason}"
    return Diagnostic(
        path=path,
        kind=DiagnosticKind.MISSING_REQUIRED_FIELD,
        message=message,
    )


def conflicting_fields(path: str, message: str, value: Any = None) -> Diagnostic:
    return Diagnostic(
        path=path,
        kind=DiagnosticKind.CONFLICTING_FIELDS,
        message=message,
        value=value,
    )


def cross_field_violation(path: str, message: str, value: Any = None) -> Diagnostic:
    return Diagnostic(
        path=path,
        kind=DiagnosticKind.CROSS_FIELD_CONSTRAINT_VIOLATION,
        message=message,
        value=value,
    )


def unknown_field(path: str) -> Diagnostic:
    return Diagnostic(
        path=path,
        kind=DiagnosticKind.UNKNOWN_FIELD,
        message="Unknown field",
    )
