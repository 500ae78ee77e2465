"""Extract canonical operations and service metadata from a raw service model.

This module walks the ``operations`` and ``metadata`` sections of a raw model
and builds immutable :class:`~shapecli.models.Operation` and
:class:`~shapecli.models.ServiceMetadata` instances.  Input and output shapes
are resolved through :func:`~shapecli.parser.resolver.resolve_shape`.

The extractor never fails on a sparse definition.  Each field has a
documented fallback:

========================  ==================
Field                     Fallback
========================  ==================
``http.method``           ``"POST"``
``http.requestUri``       ``"/"``
``input`` / ``output``    empty structure
``errors``                ``[]``
``documentation``         ``""``
========================  ==================

Public entry points: :func:`extract_operation`, :func:`extract_operations`,
:func:`extract_metadata`, and :func:`derive_service_name`.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from shapecli.models import Operation, ResolvedShape, ServiceMetadata, StructureShape
from shapecli.naming import to_kebab_case
from shapecli.parser.resolver import resolve_shape

logger = logging.getLogger(__name__)

DEFAULT_HTTP_METHOD = "POST"
DEFAULT_HTTP_URI = "/"


def extract_operations(
    model: dict[str, Any],
    *,
    max_depth: Optional[int] = None,
) -> list[Operation]:
    """Extract every operation from *model*, preserving the model's order.

    Args:
        model: The raw service model.  Missing or malformed ``operations``
            and ``shapes`` sections are treated as empty.
        max_depth: Shape resolution depth limit passed to the resolver.

    Returns:
        One :class:`~shapecli.models.Operation` per raw operation entry.
    """
    operations = model.get("operations") if isinstance(model, dict) else None
    if not isinstance(operations, dict):
        return []
    shapes = _shapes_of(model)
    return [
        extract_operation(str(key), raw, shapes, max_depth=max_depth)
        for key, raw in operations.items()
    ]


def extract_operation(
    key: str,
    raw: Any,
    shapes: dict[str, Any],
    *,
    max_depth: Optional[int] = None,
) -> Operation:
    """Normalize one raw operation entry into a canonical :class:`~shapecli.models.Operation`.

    Args:
        key: The operation's key in the model's ``operations`` mapping.  Used
            as the original name when the entry has no ``name`` field.
        raw: The raw operation definition.  Anything that is not a dict is
            treated as an empty definition.
        shapes: The model's raw ``shapes`` table.
        max_depth: Shape resolution depth limit.

    Returns:
        The canonical operation.

    Example::

        op = extract_operation("ListBuckets", {"http": {"method": "GET"}}, {})
        assert op.name == "list-buckets"
        assert op.http_uri == "/"
    """
    if not isinstance(raw, dict):
        logger.debug("Operation %s has no definition; using fallbacks", key)
        raw = {}

    original_name = raw.get("name") if isinstance(raw.get("name"), str) else key
    http = raw.get("http") if isinstance(raw.get("http"), dict) else {}
    method = http.get("method")
    uri = http.get("requestUri")

    input_name = _shape_ref(raw.get("input"))
    output_name = _shape_ref(raw.get("output"))

    documentation = raw.get("documentation")
    deprecation_message = raw.get("deprecatedMessage")

    return Operation(
        name=to_kebab_case(original_name),
        original_name=original_name,
        http_method=method.upper() if isinstance(method, str) and method else DEFAULT_HTTP_METHOD,
        http_uri=uri if isinstance(uri, str) and uri else DEFAULT_HTTP_URI,
        input_shape=input_name,
        output_shape=output_name,
        input=_resolve_or_empty(input_name, shapes, max_depth),
        output=_resolve_or_empty(output_name, shapes, max_depth),
        errors=_extract_error_names(raw.get("errors")),
        documentation=documentation if isinstance(documentation, str) else "",
        deprecated=bool(raw.get("deprecated")),
        deprecation_message=deprecation_message if isinstance(deprecation_message, str) else None,
    )


def extract_metadata(model: dict[str, Any]) -> ServiceMetadata:
    """Extract service metadata from the model's ``metadata`` object.

    Missing fields default to empty strings.
    """
    meta = model.get("metadata") if isinstance(model, dict) else None
    if not isinstance(meta, dict):
        meta = {}

    def _text(key: str) -> str:
        value = meta.get(key)
        return str(value) if value is not None else ""

    return ServiceMetadata(
        api_version=_text("apiVersion"),
        protocol=_text("protocol"),
        service_full_name=_text("serviceFullName"),
        endpoint_prefix=_text("endpointPrefix"),
        signature_version=_text("signatureVersion"),
        service_id=_text("serviceId"),
    )


def derive_service_name(metadata: ServiceMetadata, fallback: str = "service") -> str:
    """Pick the CLI-facing service name for a model.

    Prefers the endpoint prefix (``s3``, ``dynamodb``), then the service ID,
    then *fallback*.  The result is kebab-cased.
    """
    for candidate in (metadata.endpoint_prefix, metadata.service_id):
        name = to_kebab_case(candidate)
        if name:
            return name
    return to_kebab_case(fallback) or "service"


def _shapes_of(model: dict[str, Any]) -> dict[str, Any]:
    """Return the model's ``shapes`` table, or an empty dict when malformed."""
    shapes = model.get("shapes")
    return shapes if isinstance(shapes, dict) else {}


def _shape_ref(ref: Any) -> Optional[str]:
    """Return the shape name from an ``{"shape": ...}`` reference, if any."""
    if isinstance(ref, dict):
        name = ref.get("shape")
        return name if isinstance(name, str) and name else None
    if isinstance(ref, str) and ref:
        return ref
    return None


def _resolve_or_empty(
    name: Optional[str],
    shapes: dict[str, Any],
    max_depth: Optional[int],
) -> ResolvedShape:
    """Resolve *name*, or return an empty structure when there is no reference."""
    if name is None:
        return StructureShape()
    return resolve_shape(name, shapes, max_depth=max_depth)


def _extract_error_names(errors: Any) -> list[str]:
    """Collect error shape names from an operation's ``errors`` list."""
    if not isinstance(errors, list):
        return []
    names: list[str] = []
    for entry in errors:
        name = _shape_ref(entry)
        if name is not None:
            names.append(name)
    return names
