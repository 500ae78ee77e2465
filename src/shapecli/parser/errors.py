"""Harvest exception shapes into :class:`~shapecli.models.ErrorDescriptor` records.

Only shapes carrying the ``exception`` marker are considered; structurally
similar shapes without it are ignored.  The HTTP status comes from the
shape's ``error.httpStatusCode``.  A shape is *retryable* only when it has an
explicit ``retryable`` marker (botocore writes ``"retryable": {}`` or
``"retryable": {"throttling": true}``); the ``throttling`` sub-flag is
reported separately.
"""

from __future__ import annotations

from typing import Any, Optional

from shapecli.models import ErrorDescriptor
from shapecli.naming import strip_html


def extract_errors(shapes: dict[str, Any]) -> list[ErrorDescriptor]:
    """Return one :class:`~shapecli.models.ErrorDescriptor` per exception shape.

    Args:
        shapes: The model's raw ``shapes`` table.

    Returns:
        Descriptors in the order the shapes are declared.
    """
    if not isinstance(shapes, dict):
        return []

    descriptors: list[ErrorDescriptor] = []
    for name, raw in shapes.items():
        if not isinstance(raw, dict) or not raw.get("exception"):
            continue

        error = raw.get("error") if isinstance(raw.get("error"), dict) else {}
        retry_marker = raw.get("retryable")
        code = error.get("code")

        descriptors.append(
            ErrorDescriptor(
                name=str(name),
                code=code if isinstance(code, str) else None,
                http_status=_http_status(error.get("httpStatusCode")),
                retryable=retry_marker is not None and retry_marker is not False,
                throttling=isinstance(retry_marker, dict) and bool(retry_marker.get("throttling")),
                fault=_fault(raw, error),
                description=strip_html(raw.get("documentation")),
            )
        )
    return descriptors


def _http_status(value: Any) -> Optional[int]:
    """Coerce a declared status code to ``int``; ``None`` when absent or invalid."""
    if isinstance(value, bool):
        return None
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _fault(raw: dict[str, Any], error: dict[str, Any]) -> Optional[str]:
    """Classify the error as a ``client`` or ``server`` fault when the model says so."""
    if raw.get("fault"):
        return "server"
    if "senderFault" in error:
        return "client" if error.get("senderFault") else "server"
    return None
