"""Custom exception hierarchy for aksconf-core.

This module defines the exception classes used throughout aksconf:
- AksConfError: Base exception for all aksconf errors
- StructuralError: Raised when a document cannot be read as a cluster configuration at all
- ConfigValidationError: Raised on request when a validation report carries diagnostics
- SettingsError: Raised when engine settings are invalid
- ValidationTaskError: Raised when a validation task crashes inside the worker pool
- AssemblyError: Raised when validated sections do not form a ClusterConfig

Validation diagnostics are values, not exceptions. The engine returns them in a
ValidationReport; ConfigValidationError only exists for callers that prefer to
raise (``report.unwrap()``).

User-facing messages are safe to display. Technical details are logged
internally via structlog.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from aksconf_core.diagnostics import Diagnostic

logger = structlog.get_logger(__name__)


class AksConfError(Exception):
    """Base exception for aksconf.

    All aksconf exceptions inherit from this class. User-facing messages
    are safe to display; technical details are logged internally.

    Args:
        user_message: Safe message to display to the user.
        internal_details: Optional technical details for logging. This is
            logged internally but never exposed to the user.

    Example:
        >>> raise AksConfError(
        ...     "Configuration unreadable",
        ...     internal_details="yaml scanner error at cluster.yaml:12",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        super().__init__(user_message)
        self.user_message = user_message

        if internal_details:
            logger.error(
                "aksconf_error",
                error_type=self.__class__.__name__,
                user_message=user_message,
                internal_details=internal_details,
            )


class StructuralError(AksConfError):
    """Raised when the input cannot be parsed into the expected shape at all.

    This is the fatal, pre-validation stage: undecodable YAML/JSON, duplicate
    mapping keys, an empty document, or a top level that is not a mapping.
    No field-level validation can run, so no diagnostics are produced.

    Attributes:
        source: Where the document came from (file path or "<string>").
        line_number: 1-based line of the problem (if known).
        column: 1-based column of the problem (if known).

    Example:
        >>> raise StructuralError(
        ...     "Document must be a mapping",
        ...     source="cluster.yaml",
        ... )
        # User sees: "Document must be a mapping (in cluster.yaml)"
    """

    def __init__(
        self,
        user_message: str,
        *,
        source: str | None = None,
        line_number: int | None = None,
        column: int | None = None,
        internal_details: str | None = None,
    ) -> None:
        location = _describe_location(source, line_number, column)
        super().__init__(
            f"{user_message} ({location})" if location else user_message,
            internal_details=internal_details,
        )

        self.source = source
        self.line_number = line_number
        self.column = column


def _describe_location(source: str | None, line: int | None, column: int | None) -> str:
    parts = [f"in {source}"] if source else []
    if line:
        parts.append(f"line {line}")
    if column:
        parts.append(f"column {column}")
    return ", ".join(parts)


class ConfigValidationError(AksConfError):
    """Raised when a caller asks a failed ValidationReport for its config.

    Carries every diagnostic of the run, in report order.

    Attributes:
        diagnostics: All diagnostics produced by the validation run.

    Example:
        >>> report = validate_cluster_config({"name": "-bad"})
        >>> report.unwrap()
        Traceback (most recent call last):
        ConfigValidationError: Cluster configuration invalid: 2 diagnostic(s)
    """

    def __init__(self, diagnostics: Sequence[Diagnostic]) -> None:
        self.diagnostics: tuple[Diagnostic, ...] = tuple(diagnostics)
        super().__init__(
            f"Cluster configuration invalid: {len(self.diagnostics)} diagnostic(s)"
        )

    def __str__(self) -> str:
        lines = [self.user_message]
        lines.extend(f"  - {d.format()}" for d in self.diagnostics)
        return "\n".join(lines)


class SettingsError(AksConfError):
    """Raised when engine settings (arguments or environment) are invalid.

    Attributes:
        setting: Name of the offending setting or environment variable.
    """

    def __init__(self, setting: str, reason: str) -> None:
        super().__init__(f"Invalid setting '{setting}': {reason}")
        self.setting = setting


class ValidationTaskError(AksConfError):
    """Raised when one or more validation tasks crash in the worker pool.

    Field and section checks are pure functions. An exception escaping one of
    them is a defect in a rule, not a diagnostic, so it is surfaced with the
    keys of every failing task.

    Attributes:
        failures: (task key, exception type name, message) per failing task.
    """

    def __init__(self, failures: Sequence[tuple[str, str, str]]) -> None:
        self.failures: list[tuple[str, str, str]] = list(failures)
        summary = "; ".join(f"[{key}] {exc_type}: {msg}" for key, exc_type, msg in self.failures)
        super().__init__(
            f"{len(self.failures)} validation task(s) failed",
            internal_details=summary,
        )


class AssemblyError(AksConfError):
    """Raised when clean, normalized sections cannot form a ClusterConfig.

    This never reflects bad user input. It means the Schema Registry and the
    canonical models disagree, and the technical details are logged.
    """
