"""Generate signatures for every operation of a service model.

Each operation is extracted, resolved, paginated, and assembled on its own,
so the work fans out over a :class:`concurrent.futures.ThreadPoolExecutor`.
Every task is tagged with its operation's index in the model; results are
placed by index, not completion order, so the returned list always follows
model order.
"""

from __future__ import annotations

import concurrent.futures
import logging
from typing import Any, Optional

from shapecli.inference.pagination import detect_pagination
from shapecli.models import GeneratorConfig, Signature
from shapecli.parser.errors import extract_errors
from shapecli.parser.extractor import derive_service_name, extract_metadata, extract_operation
from shapecli.generator.signature import assemble_signature

logger = logging.getLogger(__name__)


def generate_signatures(
    model: dict[str, Any],
    *,
    service: Optional[str] = None,
    config: Optional[GeneratorConfig] = None,
    workers: Optional[int] = None,
) -> list[Signature]:
    """Return one signature per operation, in model order.

    Args:
        model: The raw service model, optionally with merged ``pagination``.
        service: CLI-facing service name.  Derived from the model metadata
            when omitted.
        config: Generator settings.
        workers: Worker thread count; defaults to ``config.workers``.  One
            or fewer runs sequentially.

    Returns:
        The signatures, ``result[i]`` belonging to the *i*-th operation.
    """
    cfg = config or GeneratorConfig()
    name = service or derive_service_name(extract_metadata(model))
    shapes = _section(model, "shapes")
    pagination = _section(model, "pagination")
    errors = extract_errors(shapes)
    entries = list(_section(model, "operations").items())
    pool_size = workers if workers is not None else cfg.workers

    def _build(key: str, raw: Any) -> Signature:  # noqa: ANN401
        operation = extract_operation(key, raw, shapes, max_depth=cfg.max_depth)
        page = detect_pagination(operation, pagination.get(operation.original_name))
        return assemble_signature(
            operation, service=name, pagination=page, errors=errors, config=cfg
        )

    if pool_size <= 1 or len(entries) <= 1:
        return [_build(str(key), raw) for key, raw in entries]

    logger.debug("Generating %d signatures with %d workers", len(entries), pool_size)
    results: list[Optional[Signature]] = [None] * len(entries)
    with concurrent.futures.ThreadPoolExecutor(max_workers=pool_size) as executor:
        futures = {
            executor.submit(_build, str(key), raw): index
            for index, (key, raw) in enumerate(entries)
        }
        for future in concurrent.futures.as_completed(futures):
            results[futures[future]] = future.result()
    return [signature for signature in results if signature is not None]


def _section(model: dict[str, Any], key: str) -> dict[str, Any]:
    value = model.get(key) if isinstance(model, dict) else None
    return value if isinstance(value, dict) else {}
