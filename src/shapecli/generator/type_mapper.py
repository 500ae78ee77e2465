"""Map resolved shapes to target semantic types.

The mapping is an ordered rule table, :data:`MAPPING_RULES`, evaluated
first-match-wins.  Keeping the order as data makes it inspectable and
testable on its own:

1. ``enum`` -- enum-constrained strings become a *choice* string carrying
   the completion set.
2. ``byte-size`` -- numeric scalars whose field name looks like a byte count
   (``ContentLength``, ``SizeInBytes``, ``ObjectSize``) become *filesize*.
3. ``timestamp`` -- *datetime*.
4. ``blob`` -- *binary*.
5. ``primitive`` -- boolean, string, and the integer/float families.
6. ``list-of-structure`` -- a list of a non-recursive structure becomes a
   *table*; recursive or union elements fall back to a generic list.
7. ``list`` -- a generic list of the mapped element type.
8. ``map`` -- *record*.
9. ``structure`` -- *record*, or *any* when the structure is
   self-referencing.

Anything no rule claims maps to *any*.  :func:`map_type` is pure: the same
``(shape, context)`` pair always yields the same :class:`~shapecli.models.TargetType`.
"""

from __future__ import annotations

import re
from typing import Callable, Optional

from shapecli.models import (
    AnyShape,
    EnumShape,
    ListShape,
    MapShape,
    ResolvedShape,
    ScalarShape,
    StructureShape,
    TargetType,
    TypeContext,
    TypeKind,
)

NUMERIC_TYPES = frozenset({"integer", "long", "short", "byte", "float", "double"})

_PRIMITIVES: dict[str, TypeKind] = {
    "boolean": TypeKind.BOOL,
    "string": TypeKind.STRING,
    "integer": TypeKind.INT,
    "long": TypeKind.INT,
    "short": TypeKind.INT,
    "byte": TypeKind.INT,
    "float": TypeKind.FLOAT,
    "double": TypeKind.FLOAT,
}

_BYTE_SIZE_RE = re.compile(r"(bytes|size|contentlength)", re.IGNORECASE)
# "size" names that count items rather than bytes.
_COUNT_SIZE_RE = re.compile(
    r"(page|batch|pool|cluster|fleet|group|window|sample|queue|step|instance|font|population)size",
    re.IGNORECASE,
)
_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]")

Rule = Callable[[ResolvedShape, TypeContext], Optional[TargetType]]


def map_type(shape: ResolvedShape, context: Optional[TypeContext] = None) -> TargetType:
    """Map *shape* to its target type.

    Args:
        shape: A resolved shape.
        context: Optional field name and constraints for the semantic
            heuristics.

    Returns:
        The first match from :data:`MAPPING_RULES`, or *any*.  Never raises.

    Example::

        >>> map_type(ScalarShape(type_name="long"), TypeContext(field_name="ContentLength")).kind
        <TypeKind.FILESIZE: 'filesize'>
    """
    ctx = context or TypeContext()
    for _name, rule in MAPPING_RULES:
        result = rule(shape, ctx)
        if result is not None:
            return result
    return _fallback(shape)


def is_byte_size_field(field_name: Optional[str]) -> bool:
    """Return ``True`` when *field_name* looks like a byte count."""
    if not field_name:
        return False
    compact = _NON_ALNUM_RE.sub("", field_name)
    if _COUNT_SIZE_RE.search(compact):
        return False
    return bool(_BYTE_SIZE_RE.search(compact))


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


def _map_enum(shape: ResolvedShape, ctx: TypeContext) -> Optional[TargetType]:
    if isinstance(shape, EnumShape):
        return TargetType(kind=TypeKind.CHOICE, choices=list(shape.choices))
    if (
        isinstance(shape, ScalarShape)
        and shape.type_name == "string"
        and ctx.constraints is not None
        and ctx.constraints.enum
    ):
        return TargetType(kind=TypeKind.CHOICE, choices=list(ctx.constraints.enum))
    return None


def _map_byte_size(shape: ResolvedShape, ctx: TypeContext) -> Optional[TargetType]:
    if (
        isinstance(shape, ScalarShape)
        and shape.type_name in NUMERIC_TYPES
        and is_byte_size_field(ctx.field_name)
    ):
        return TargetType(kind=TypeKind.FILESIZE)
    return None


def _map_timestamp(shape: ResolvedShape, ctx: TypeContext) -> Optional[TargetType]:
    if isinstance(shape, ScalarShape) and shape.type_name == "timestamp":
        return TargetType(kind=TypeKind.DATETIME)
    return None


def _map_blob(shape: ResolvedShape, ctx: TypeContext) -> Optional[TargetType]:
    if isinstance(shape, ScalarShape) and shape.type_name == "blob":
        return TargetType(kind=TypeKind.BINARY)
    return None


def _map_primitive(shape: ResolvedShape, ctx: TypeContext) -> Optional[TargetType]:
    if isinstance(shape, ScalarShape) and shape.type_name in _PRIMITIVES:
        return TargetType(kind=_PRIMITIVES[shape.type_name])
    return None


def _map_table(shape: ResolvedShape, ctx: TypeContext) -> Optional[TargetType]:
    if not isinstance(shape, ListShape) or not isinstance(shape.member, StructureShape):
        return None
    element = shape.member
    if shape.self_referencing or element.self_referencing:
        label = element.name or shape.name or "element"
        return TargetType(
            kind=TypeKind.LIST,
            element=TargetType(kind=TypeKind.ANY),
            note=f"self-referencing structure '{label}' kept as a generic list",
        )
    return TargetType(kind=TypeKind.TABLE)


def _map_list(shape: ResolvedShape, ctx: TypeContext) -> Optional[TargetType]:
    if not isinstance(shape, ListShape):
        return None
    element = map_type(shape.member, TypeContext(field_name=ctx.field_name))
    note = element.note
    if shape.self_referencing:
        note = f"self-referencing list '{shape.name}'"
    return TargetType(kind=TypeKind.LIST, element=element, note=note)


def _map_map(shape: ResolvedShape, ctx: TypeContext) -> Optional[TargetType]:
    if isinstance(shape, MapShape):
        return TargetType(kind=TypeKind.RECORD)
    return None


def _map_structure(shape: ResolvedShape, ctx: TypeContext) -> Optional[TargetType]:
    if not isinstance(shape, StructureShape):
        return None
    if shape.self_referencing:
        return TargetType(
            kind=TypeKind.ANY,
            note=f"self-referencing structure '{shape.name}'",
        )
    return TargetType(kind=TypeKind.RECORD)


def _fallback(shape: ResolvedShape) -> TargetType:
    if isinstance(shape, AnyShape):
        return TargetType(kind=TypeKind.ANY, note=shape.reason or None)
    return TargetType(kind=TypeKind.ANY, note=f"unrecognized shape kind '{shape.kind}'")


MAPPING_RULES: tuple[tuple[str, Rule], ...] = (
    ("enum", _map_enum),
    ("byte-size", _map_byte_size),
    ("timestamp", _map_timestamp),
    ("blob", _map_blob),
    ("primitive", _map_primitive),
    ("list-of-structure", _map_table),
    ("list", _map_list),
    ("map", _map_map),
    ("structure", _map_structure),
)
"""Ordered ``(name, rule)`` pairs; the first rule returning a type wins."""
