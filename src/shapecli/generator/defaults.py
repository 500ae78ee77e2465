"""Synthesize type-appropriate default and sample values.

Used for example/mock input generation and validation fixtures.  The values
are illustrative, not authoritative: a *datetime* default is the current UTC
time rather than a fixed constant.

:func:`synthesize_default` never raises.  A type it cannot model falls back
to the zero value of the closest primitive (ultimately ``None``).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from shapecli.models import (
    ResolvedShape,
    ShapeConstraints,
    StructureShape,
    TargetType,
    TypeContext,
    TypeKind,
)
from shapecli.generator.type_mapper import map_type


class FileSize(int):
    """An integer byte count, rendered as a filesize literal (``0b``)."""

    def __repr__(self) -> str:
        return f"FileSize({int(self)})"

    def render(self) -> str:
        """Return the host-language filesize literal."""
        return f"{int(self)}b"


def synthesize_default(
    target: TargetType,
    constraints: Optional[ShapeConstraints] = None,
) -> Any:  # noqa: ANN401
    """Return a default value for *target*.

    Args:
        target: The mapped type.
        constraints: Optional constraints; integer and float defaults use
            ``constraints.min`` when present.

    Returns:
        ``""`` for strings, the minimum or ``0`` for ints, the minimum or
        ``0.0`` for floats, ``False`` for bools, ``[]`` for lists and
        tables, ``{}`` for records, ``b""`` for binary, the current UTC time
        for datetimes, the first choice for choice strings, ``FileSize(0)``
        for filesizes, and ``None`` for *any* and *nothing*.

    Example::

        >>> synthesize_default(TargetType(kind=TypeKind.INT), ShapeConstraints(min=5))
        5
    """
    kind = target.kind
    minimum = constraints.min if constraints is not None else None

    if kind == TypeKind.STRING:
        return ""
    if kind == TypeKind.INT:
        return int(minimum) if minimum is not None else 0
    if kind == TypeKind.FLOAT:
        return float(minimum) if minimum is not None else 0.0
    if kind == TypeKind.BOOL:
        return False
    if kind in (TypeKind.LIST, TypeKind.TABLE):
        return []
    if kind == TypeKind.RECORD:
        return {}
    if kind == TypeKind.BINARY:
        return b""
    if kind == TypeKind.DATETIME:
        return datetime.now(timezone.utc)
    if kind == TypeKind.CHOICE:
        return target.choices[0] if target.choices else ""
    if kind == TypeKind.FILESIZE:
        return FileSize(0)
    return None


def synthesize_example(
    shape: ResolvedShape,
    *,
    include_optional: bool = False,
    max_depth: int = 4,
) -> Any:  # noqa: ANN401
    """Build a sample value for a whole resolved shape.

    Structures become dicts keyed by member name (required members only,
    unless *include_optional*), nested structures are expanded up to
    *max_depth*, and every leaf uses :func:`synthesize_default` with the
    member name as type context.

    Args:
        shape: Usually an operation's resolved input shape.
        include_optional: Also fill optional members.
        max_depth: Nesting limit; deeper structures become ``{}``.

    Returns:
        A JSON-compatible sample, except for datetimes and binary values.
    """
    return _example(shape, None, include_optional, max_depth)


def _example(
    shape: ResolvedShape,
    field_name: Optional[str],
    include_optional: bool,
    depth: int,
) -> Any:  # noqa: ANN401
    target = map_type(shape, TypeContext(field_name=field_name))
    if isinstance(shape, StructureShape) and not shape.self_referencing:
        if depth <= 0:
            return {}
        return {
            member.name: _example(member.shape, member.name, include_optional, depth - 1)
            for member in shape.members
            if member.required or include_optional
        }
    return synthesize_default(target, shape.constraints)
