"""Flatten structures into named, typed columns for tabular output.

Members are walked in declaration order.  Scalar members produce one column
named after the member.  Nested (non-recursive) structures are flattened
recursively, each child column prefixed with the parent member's name
(``User.Name`` becomes ``user-name``), which keeps columns from different
parents apart.  Lists and maps produce a single column of their mapped type
without further flattening, bounding the table width.

Name conversion can still fold two distinct members into the same column
name (``UserName`` next to a nested ``User.Name``); such residual collisions
get a numeric suffix in encounter order.
"""

from __future__ import annotations

from typing import Optional

from shapecli.models import (
    Column,
    ListShape,
    ResolvedShape,
    StructureShape,
    TypeContext,
)
from shapecli.naming import to_kebab_case
from shapecli.generator.type_mapper import map_type

DEFAULT_MAX_FLATTEN_DEPTH = 4


def extract_columns(
    shape: ResolvedShape,
    *,
    max_depth: int = DEFAULT_MAX_FLATTEN_DEPTH,
) -> list[Column]:
    """Return the ordered column list for a structure or list of structures.

    Args:
        shape: A :class:`~shapecli.models.StructureShape`, or a
            :class:`~shapecli.models.ListShape` whose element is one.
        max_depth: Nesting levels to flatten; deeper structures become a
            single *record* column.

    Returns:
        The columns, or an empty list when *shape* has no structure to
        flatten.

    Example::

        columns = extract_columns(owner_list_shape)
        [c.name for c in columns]   # ['id', 'user-name', 'group-name']
    """
    if isinstance(shape, ListShape):
        shape = shape.member
    if not isinstance(shape, StructureShape):
        return []

    columns: list[Column] = []
    taken: set[str] = set()
    for column in _flatten(shape, None, max_depth):
        name = column.name
        counter = 2
        while name in taken:
            name = f"{column.name}-{counter}"
            counter += 1
        taken.add(name)
        columns.append(Column(name=name, type=column.type))
    return columns


def _flatten(
    shape: StructureShape,
    prefix: Optional[str],
    depth: int,
) -> list[Column]:
    columns: list[Column] = []
    for member in shape.members:
        base = to_kebab_case(member.name) or "column"
        name = f"{prefix}-{base}" if prefix else base
        child = member.shape
        if isinstance(child, StructureShape) and not child.self_referencing and depth > 1:
            columns.extend(_flatten(child, name, depth - 1))
            continue
        columns.append(
            Column(name=name, type=map_type(child, TypeContext(field_name=member.name)))
        )
    return columns
