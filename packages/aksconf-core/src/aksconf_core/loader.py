"""Document loading for aksconf.

This is the structural stage that runs before validation: it turns a file or
a string into the raw mapping the engine consumes. Anything that prevents a
minimally well-formed document (undecodable YAML/JSON, duplicate keys, an
empty document, a top level that is not a mapping) raises StructuralError.
No diagnostics are produced here.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

import structlog
import yaml
from yaml.constructor import ConstructorError

from aksconf_core.diagnostics import type_name
from aksconf_core.errors import StructuralError

logger = structlog.get_logger(__name__)

JSON_SUFFIXES = frozenset({".json"})


class UniqueKeySafeLoader(yaml.SafeLoader):
    """SafeLoader that rejects duplicate mapping keys.

    PyYAML keeps the last value of a duplicated key, which would silently
    drop half of a node pool or section definition.
    """

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
        seen: set[Any] = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)
            try:
                duplicate = key in seen
            except TypeError:
                # Unhashable keys are reported by the base constructor
                continue
            if duplicate:
                raise ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    f"found duplicate key {key!r}",
                    key_node.start_mark,
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


# YAML 1.1 reads 22:00 and -10:00 as base-60 integers. Times and UTC offsets
# are strings; the int resolver is re-registered without that form.
INT_TAG = "tag:yaml.org,2002:int"
DECIMAL_INT_PATTERN = re.compile(
    r"""^(?:[-+]?0b[0-1_]+
    |[-+]?0[0-7_]+
    |[-+]?(?:0|[1-9][0-9_]*)
    |[-+]?0x[0-9a-fA-F_]+)$""",
    re.X,
)

UniqueKeySafeLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != INT_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
UniqueKeySafeLoader.add_implicit_resolver(INT_TAG, DECIMAL_INT_PATTERN, list("-+0123456789"))


def parse_document(text: str, *, source: str = "<string>", fmt: str = "yaml") -> dict[str, Any]:
    """Parse configuration text into a raw mapping.

    Args:
        text: Document text.
        source: Name used in error messages.
        fmt: "yaml" or "json". JSON is also valid YAML, but parsing it as
            JSON gives JSON-specific error positions.

    Returns:
        The top-level mapping.

    Raises:
        StructuralError: If the text cannot be decoded into a mapping.
    """
    if fmt == "json":
        data = _parse_json(text, source)
    elif fmt == "yaml":
        data = _parse_yaml(text, source)
    else:
        raise ValueError(f"Unsupported document format: {fmt!r}")

    if data is None:
        raise StructuralError("Document is empty", source=source)
    if not isinstance(data, dict):
        raise StructuralError(
            f"Cluster configuration must be a mapping, got {type_name(data)}",
            source=source,
        )

    logger.debug("document_parsed", source=source, format=fmt, keys=len(data))
    return data


def load_document(path: Path | str) -> dict[str, Any]:
    """Load a configuration document from a YAML or JSON file.

    The format is chosen by file suffix: ``.json`` is JSON, anything else
    is YAML.

    Args:
        path: Path to the document.

    Returns:
        The top-level mapping.

    Raises:
        FileNotFoundError: If the file does not exist.
        StructuralError: If the file cannot be decoded into a mapping.

    Example:
        >>> raw = load_document("cluster.yaml")
        >>> report = validate_cluster_config(raw)
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    try:
        text = file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise StructuralError(
            "Document is not valid UTF-8 text",
            source=str(file_path),
            internal_details=str(e),
        ) from e

    fmt = "json" if file_path.suffix.lower() in JSON_SUFFIXES else "yaml"
    return parse_document(text, source=str(file_path), fmt=fmt)


def _parse_yaml(text: str, source: str) -> Any:
    try:
        return yaml.load(text, Loader=UniqueKeySafeLoader)  # noqa: S506
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        problem = getattr(e, "problem", None) or str(e)
        raise StructuralError(
            f"Invalid YAML: {problem}",
            source=source,
            line_number=mark.line + 1 if mark is not None else None,
            column=mark.column + 1 if mark is not None else None,
            internal_details=str(e),
        ) from e


def _parse_json(text: str, source: str) -> Any:
    try:
        return json.loads(text, object_pairs_hook=_unique_json_object)
    except json.JSONDecodeError as e:
        raise StructuralError(
            f"Invalid JSON: {e.msg}",
            source=source,
            line_number=e.lineno,
            column=e.colno,
            internal_details=str(e),
        ) from e
    except _DuplicateKeyError as e:
        raise StructuralError(f"Invalid JSON: {e}", source=source) from e


class _DuplicateKeyError(ValueError):
    pass


def _unique_json_object(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise _DuplicateKeyError(f"found duplicate key {key!r}")
        result[key] = value
    return result
