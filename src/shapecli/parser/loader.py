"""Load service models and paginator documents from a local file or stdin.

Fetching models over the network and caching them is the job of an external
collaborator; this module only parses what it is handed.  Both JSON and YAML
are supported with automatic format detection.

The public functions are:

* :func:`load_model` -- Load a ``service-2`` style model document.
* :func:`load_pagination` -- Load a ``paginators-1`` document and return the
  per-operation configuration mapping.
* :func:`merge_pagination` -- Attach explicit pagination configuration to a
  model dict.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import yaml

from shapecli.exceptions import ModelParseError


def load_model(source: str) -> dict[str, Any]:
    """Load a service model from a file path or stdin (``'-'``).

    A model may be partial or even empty; only the document itself must be a
    JSON/YAML object.

    Args:
        source: A file path, or ``'-'`` for stdin.

    Returns:
        The parsed model as a dictionary.

    Raises:
        ModelParseError: If the source cannot be read or parsed.
    """
    if source == "-":
        return _load_from_stdin()
    return _load_from_file(source)


def load_pagination(source: str) -> dict[str, Any]:
    """Load explicit pagination configuration.

    Accepts either a botocore ``paginators-1.json`` document
    (``{"pagination": {"ListThings": {...}}}``) or the bare per-operation
    mapping.

    Raises:
        ModelParseError: If the file cannot be parsed or has the wrong shape.
    """
    document = load_model(source)
    pagination = document.get("pagination", document)
    if not isinstance(pagination, dict):
        raise ModelParseError(f"Pagination document {source} must map operation names to configs")
    return pagination


def merge_pagination(model: dict[str, Any], pagination: dict[str, Any]) -> dict[str, Any]:
    """Return a shallow copy of *model* with *pagination* entries layered over its own."""
    merged = dict(model)
    existing = model.get("pagination")
    combined = dict(existing) if isinstance(existing, dict) else {}
    combined.update(pagination)
    merged["pagination"] = combined
    return merged


def _load_from_stdin() -> dict[str, Any]:
    """Read a model from stdin.

    Raises:
        ModelParseError: If stdin is empty or content cannot be parsed.
    """
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise ModelParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise ModelParseError("No input received from stdin")

    return _parse_content(content, hint="stdin")


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a model from a local file, using the extension as a format hint."""
    file_path = Path(path)
    if not file_path.is_file():
        raise ModelParseError(f"Model file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ModelParseError(f"Failed to read model file {path}: {exc}") from exc

    if not content.strip():
        raise ModelParseError(f"Model file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hinted as YAML), then falls back to YAML.

    Raises:
        ModelParseError: If the content is not a JSON/YAML object.
    """
    json_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise ModelParseError(f"Invalid JSON: {exc}") from exc
        else:
            return _require_mapping(result)

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        msg = "Failed to parse model as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise ModelParseError(msg) from exc

    return _require_mapping(result)


def _require_mapping(result: Any) -> dict[str, Any]:
    """Reject documents whose top level is not an object."""
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise ModelParseError(f"Model must be a JSON/YAML object (got {kind})")
    return result
