"""Decide whether, and how, an operation's output can be paged.

Policy, in order:

1. An operation without an output shape is never paginated.
2. An explicit paginator configuration (``paginators-1.json``) is used
   verbatim.
3. Otherwise pagination is inferred when the input and output both carry a
   ``NextToken``-like member, the input carries a ``MaxResults``-like member,
   and the output carries a list member.  Names are compared
   case-insensitively with separators ignored.
4. Otherwise the operation is non-paginated.

Inference is best effort.  It can under-match services that page with
``Marker``/``MaxItems`` and carry no paginator configuration.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from shapecli.models import (
    ListShape,
    Operation,
    PaginationDescriptor,
    ResolvedShape,
    StructureShape,
)

logger = logging.getLogger(__name__)

TOKEN_NAME = "nexttoken"
LIMIT_NAME = "maxresults"

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")

NOT_PAGINATED = PaginationDescriptor(paginated=False)


def detect_pagination(
    operation: Operation,
    explicit: Optional[dict[str, Any]] = None,
) -> PaginationDescriptor:
    """Return the pagination descriptor for *operation*.

    Args:
        operation: The canonical operation.
        explicit: This operation's entry from the model's ``pagination``
            section, if any (``input_token``, ``output_token``,
            ``limit_key``, ``result_key``).

    Returns:
        A :class:`~shapecli.models.PaginationDescriptor`; ``source`` tells
        whether it came from explicit configuration or inference.

    Example::

        descriptor = detect_pagination(list_functions_op)
        descriptor.input_token   # 'NextToken'
        descriptor.limit_key     # 'MaxResults'
    """
    if operation.output_shape is None:
        return NOT_PAGINATED

    if isinstance(explicit, dict) and explicit:
        return _from_explicit(explicit)

    return infer_pagination(operation.input, operation.output)


def infer_pagination(input_shape: ResolvedShape, output_shape: ResolvedShape) -> PaginationDescriptor:
    """Infer pagination from member names alone.

    Returns :data:`NOT_PAGINATED` unless every required member is found.
    """
    if not isinstance(input_shape, StructureShape) or not isinstance(output_shape, StructureShape):
        return NOT_PAGINATED

    input_token = _find_member(input_shape, TOKEN_NAME)
    output_token = _find_member(output_shape, TOKEN_NAME)
    limit_key = _find_member(input_shape, LIMIT_NAME)
    result_key = next(
        (m.name for m in output_shape.members if isinstance(m.shape, ListShape)),
        None,
    )
    if not (input_token and output_token and limit_key and result_key):
        return NOT_PAGINATED

    logger.debug(
        "Inferred pagination: %s -> %s (limit %s, results %s)",
        input_token,
        output_token,
        limit_key,
        result_key,
    )
    return PaginationDescriptor(
        paginated=True,
        input_token=input_token,
        output_token=output_token,
        limit_key=limit_key,
        result_key=result_key,
        source="inferred",
    )


def _from_explicit(config: dict[str, Any]) -> PaginationDescriptor:
    limit_key = config.get("limit_key")
    return PaginationDescriptor(
        paginated=True,
        input_token=_token_value(config.get("input_token")),
        output_token=_token_value(config.get("output_token")),
        limit_key=limit_key if isinstance(limit_key, str) else None,
        result_key=_token_value(config.get("result_key")),
        source="explicit",
    )


def _token_value(value: Any) -> Any:  # noqa: ANN401
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return [str(item) for item in value]
    return None


def _find_member(shape: StructureShape, normalized: str) -> Optional[str]:
    for member in shape.members:
        if _NON_ALNUM_RE.sub("", member.name.lower()) == normalized:
            return member.name
    return None
