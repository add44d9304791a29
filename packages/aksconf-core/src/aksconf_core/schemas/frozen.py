"""Read-only mapping fields for the canonical models.

``frozen=True`` only blocks attribute assignment. Mapping fields are also
wrapped in ``MappingProxyType`` so a validated configuration cannot be
edited in place. They serialize back to plain dicts.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Annotated, Any

from pydantic import AfterValidator, PlainSerializer


def freeze_mapping(value: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return a read-only view over a private copy of ``value``."""
    return MappingProxyType(dict(value))


def thaw_mapping(value: Mapping[str, Any]) -> dict[str, Any]:
    """Return a plain dict copy of a frozen mapping."""
    return dict(value)


StringMap = Annotated[
    Mapping[str, str],
    AfterValidator(freeze_mapping),
    PlainSerializer(thaw_mapping, return_type=dict[str, str]),
]
"""Read-only ``str -> str`` mapping (tags, labels)."""
