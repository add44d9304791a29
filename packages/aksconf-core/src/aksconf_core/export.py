"""JSON Schema export for aksconf.

Exports JSON Schema Draft 2020-12 for the canonical ClusterConfig so that
provisioning components written in other languages can validate the
engine's output.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from aksconf_core.schemas import ClusterConfig

SCHEMA_DRAFT = "https://json-schema.org/draft/2020-12/schema"
CLUSTER_CONFIG_SCHEMA_ID = "https://aksconf.dev/schemas/cluster-config.schema.json"


def export_cluster_config_schema(
    output_path: Path | str | None = None,
) -> dict[str, Any]:
    """Export the canonical ClusterConfig JSON Schema.

    The schema describes the engine's output (every default applied), not
    the looser input documents the engine accepts.

    Args:
        output_path: Where to also write the schema (parents are created).

    Returns:
        The schema as a dictionary.

    Example:
        >>> schema = export_cluster_config_schema()
        >>> schema["$schema"]
        'https://json-schema.org/draft/2020-12/schema'
    """
    schema = ClusterConfig.model_json_schema(mode="serialization")

    schema["$schema"] = SCHEMA_DRAFT
    schema["$id"] = CLUSTER_CONFIG_SCHEMA_ID

    if "additionalProperties" not in schema:
        schema["additionalProperties"] = False

    if output_path is not None:
        _write_schema_file(schema, output_path)

    return schema


def _write_schema_file(schema: dict[str, Any], path: Path | str) -> None:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(schema, indent=2) + "\n", encoding="utf-8")
