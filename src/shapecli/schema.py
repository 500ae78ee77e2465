"""Build, validate, and persist the compiled service schema.

The service schema is the artefact handed to the runtime dispatcher: every
operation with its resolved input/output shapes and pagination, the
service's errors and inferred resources, and service metadata.  It is
written as ``<service>.json``.

:func:`validate_schema` works on the plain record form so it can check
schemas from any source, including hand-edited files.  :func:`save_schema`
uses it as a gate before writing.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union

from shapecli import __version__
from shapecli.config import atomic_write
from shapecli.exceptions import ModelParseError, SchemaValidationError
from shapecli.inference.pagination import detect_pagination
from shapecli.inference.resources import infer_resources
from shapecli.models import OperationRecord, ServiceSchema, ValidationResult
from shapecli.parser.errors import extract_errors
from shapecli.parser.extractor import (
    derive_service_name,
    extract_metadata,
    extract_operations,
)

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0"

REQUIRED_FIELDS = ("service", "operations", "metadata", "generated_at", "schema_version", "extractor_version")
"""Top-level fields every schema record must carry."""

REQUIRED_OPERATION_FIELDS = ("name", "original_name", "http_method", "http_uri")
"""Fields every entry of ``operations`` must carry."""

_TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?Z$")


def build_schema(
    model: dict[str, Any],
    service: Optional[str] = None,
    *,
    max_depth: Optional[int] = None,
) -> ServiceSchema:
    """Compile a raw model into a :class:`~shapecli.models.ServiceSchema`.

    Partial and empty models are accepted; missing sections become empty
    lists and the service name falls back to ``"service"``.

    Args:
        model: The raw service model, optionally with merged ``pagination``.
        service: CLI-facing service name; derived from metadata when omitted.
        max_depth: Shape resolution depth limit.

    Example::

        schema = build_schema(load_model("s3/service-2.json"))
        schema.service              # 's3'
        schema.to_record()["generated_at"]   # '2026-01-01T12:00:00Z'
    """
    metadata = extract_metadata(model)
    name = service or derive_service_name(metadata)
    operations = extract_operations(model, max_depth=max_depth)
    pagination = model.get("pagination") if isinstance(model, dict) else None
    if not isinstance(pagination, dict):
        pagination = {}

    records = [
        OperationRecord(
            name=op.name,
            original_name=op.original_name,
            http_method=op.http_method,
            http_uri=op.http_uri,
            input_shape=op.input_shape,
            output_shape=op.output_shape,
            input_schema=op.input,
            output_schema=op.output,
            errors=op.errors,
            documentation=op.documentation,
            deprecated=op.deprecated,
            deprecation_message=op.deprecation_message,
            pagination=detect_pagination(op, pagination.get(op.original_name)),
        )
        for op in operations
    ]
    shapes = model.get("shapes") if isinstance(model, dict) else None

    logger.debug("Built schema for %s with %d operations", name, len(records))
    return ServiceSchema(
        service=name,
        operations=records,
        errors=extract_errors(shapes if isinstance(shapes, dict) else {}),
        resources=infer_resources(operations),
        metadata={
            "api_version": metadata.api_version,
            "protocol": metadata.protocol,
            "service_full_name": metadata.service_full_name,
            "endpoint_prefix": metadata.endpoint_prefix,
            "signature_version": metadata.signature_version,
        },
        generated_at=datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        schema_version=SCHEMA_VERSION,
        extractor_version=__version__,
    )


def validate_schema(record: Any) -> ValidationResult:  # noqa: ANN401
    """Check a schema record for the fields the runtime relies on.

    Args:
        record: A schema in record form (``ServiceSchema.to_record()`` or a
            loaded JSON document).

    Returns:
        A :class:`~shapecli.models.ValidationResult`; ``errors`` holds one
        human-readable message per problem.

    Example::

        result = validate_schema({"service": "s3"})
        result.valid    # False
        result.errors   # ['Missing required field: operations', ...]
    """
    if not isinstance(record, dict):
        return ValidationResult(valid=False, errors=["Schema must be a JSON object"])

    errors: list[str] = []
    for field in REQUIRED_FIELDS:
        if field not in record or record[field] is None:
            errors.append(f"Missing required field: {field}")

    service = record.get("service")
    if service is not None and (not isinstance(service, str) or not service):
        errors.append("Field 'service' must be a non-empty string")

    metadata = record.get("metadata")
    if metadata is not None and not isinstance(metadata, dict):
        errors.append("Field 'metadata' must be an object")

    generated_at = record.get("generated_at")
    if generated_at is not None and (
        not isinstance(generated_at, str) or not _TIMESTAMP_RE.match(generated_at)
    ):
        errors.append(
            "Field 'generated_at' must be an ISO-8601 UTC timestamp such as 2024-01-01T00:00:00Z"
        )

    operations = record.get("operations")
    if operations is not None:
        if not isinstance(operations, list):
            errors.append("Field 'operations' must be a list")
        else:
            for index, entry in enumerate(operations):
                errors.extend(_validate_operation(index, entry))

    return ValidationResult(valid=not errors, errors=errors)


def save_schema(
    schema: Union[ServiceSchema, dict[str, Any]],
    output_dir: Union[str, Path],
    *,
    validate: bool = True,
) -> Path:
    """Write *schema* atomically to ``<output_dir>/<service>.json``.

    Args:
        schema: The schema, as a model or in record form.
        output_dir: Target directory, created if needed.
        validate: Refuse to write a schema that fails :func:`validate_schema`.

    Returns:
        The path of the written file.

    Raises:
        SchemaValidationError: If *validate* is set and the schema is invalid.
    """
    record = schema.to_record() if isinstance(schema, ServiceSchema) else schema
    if validate:
        result = validate_schema(record)
        if not result.valid:
            raise SchemaValidationError(
                f"Schema failed validation with {len(result.errors)} error(s): "
                + "; ".join(result.errors),
                errors=result.errors,
            )

    service = record.get("service") if isinstance(record.get("service"), str) else ""
    target = Path(output_dir) / f"{service or 'service'}.json"
    atomic_write(target, json.dumps(record, indent=2, ensure_ascii=False) + "\n")
    return target


def load_schema(path: Union[str, Path]) -> dict[str, Any]:
    """Read a persisted schema record.

    Raises:
        ModelParseError: If the file cannot be read or is not a JSON object.
    """
    source = Path(path)
    try:
        data = json.loads(source.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ModelParseError(f"Schema file not found: {source}") from None
    except (OSError, json.JSONDecodeError) as exc:
        raise ModelParseError(f"Cannot read schema {source}: {exc}") from exc
    if not isinstance(data, dict):
        raise ModelParseError(f"Schema {source} is not a JSON object")
    return data


def _validate_operation(index: int, entry: Any) -> list[str]:  # noqa: ANN401
    if not isinstance(entry, dict):
        return [f"Operation {index} must be an object"]
    label = entry.get("original_name") or entry.get("name") or "<unnamed>"
    return [
        f"Operation {index} ({label}) missing required field '{field}'"
        for field in REQUIRED_OPERATION_FIELDS
        if not entry.get(field)
    ]
