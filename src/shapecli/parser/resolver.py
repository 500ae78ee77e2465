"""Resolve named shape references into a tree of :data:`~shapecli.models.ResolvedShape` nodes.

Service models describe every data type as a named entry in the ``shapes``
table, and members refer to other shapes by name
(``{"shape": "BucketName"}``).  This module walks those references
depth-first and builds a self-contained tree of tagged shape variants that
the generator can pattern-match on without probing optional dict keys.

**Cycles.**  The set of shape names on the active resolution path is passed
down each recursive call.  A reference to a name already on the path is not
followed; it becomes :class:`~shapecli.models.AnyShape` with
``self_referencing=True``.  A **new** set is created for every branch so that
sibling members never see each other's paths, and nothing is shared between
separate :func:`resolve_shape` calls.  Resolution therefore terminates for any
finite shape table, including direct self-reference and mutual recursion of
any length.  The structure, list, or map whose subtree referred back to it is
itself flagged ``self_referencing``.

**Malformed input.**  Dangling references, shapes without a ``type``,
non-mapping ``members``, and unsupported types all resolve to ``AnyShape``
with an explanatory ``reason``.  Unions resolve to ``AnyShape(union=True)``.
Nothing in this module raises on bad model data.

The single public function is :func:`resolve_shape`.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from shapecli.models import (
    AnyShape,
    EnumShape,
    ListShape,
    MapShape,
    ResolvedShape,
    ScalarShape,
    ShapeConstraints,
    ShapeMember,
    StructureShape,
)

logger = logging.getLogger(__name__)

SCALAR_TYPES = frozenset(
    {
        "string",
        "integer",
        "long",
        "short",
        "byte",
        "float",
        "double",
        "boolean",
        "timestamp",
        "blob",
    }
)
"""Raw ``type`` values resolved to :class:`~shapecli.models.ScalarShape`."""

_NO_REFS: frozenset[str] = frozenset()


def resolve_shape(
    name: Optional[str],
    shapes: dict[str, Any],
    *,
    max_depth: Optional[int] = None,
) -> ResolvedShape:
    """Resolve the shape called *name* against the *shapes* table.

    Args:
        name: The shape name to resolve (e.g. ``"ListBucketsOutput"``).
        shapes: The model's raw ``shapes`` mapping.
        max_depth: Maximum nesting depth of container shapes.  Containers
            deeper than this become ``AnyShape``.  ``None`` means unbounded;
            termination is still guaranteed by cycle detection.

    Returns:
        The resolved shape tree.  Never raises for malformed shape data.

    Example::

        shapes = {
            "Node": {
                "type": "structure",
                "members": {"Child": {"shape": "Node"}},
            },
        }
        node = resolve_shape("Node", shapes)
        assert node.self_referencing
        assert node.members[0].shape.kind == "any"
    """
    if not isinstance(shapes, dict):
        shapes = {}
    shape, _ = _resolve(name, shapes, _NO_REFS, 0, max_depth)
    return shape


def _resolve(
    name: Any,
    shapes: dict[str, Any],
    path: frozenset[str],
    depth: int,
    max_depth: Optional[int],
) -> tuple[ResolvedShape, frozenset[str]]:
    """Resolve *name* on the given *path*.

    Returns:
        A ``(shape, back_refs)`` tuple where *back_refs* holds the names of
        shapes on the path that the subtree referred back to.
    """
    if not isinstance(name, str) or not name:
        return AnyShape(reason="missing shape reference"), _NO_REFS

    if name in path:
        logger.debug("Breaking shape cycle at %s", name)
        return (
            AnyShape(
                name=name,
                reason=f"self-referencing shape '{name}'",
                self_referencing=True,
                reference=name,
            ),
            frozenset({name}),
        )

    raw = shapes.get(name)
    if not isinstance(raw, dict):
        logger.debug("Shape %s is not defined; using any", name)
        return AnyShape(name=name, reason=f"shape '{name}' is not defined"), _NO_REFS

    documentation = raw.get("documentation")
    common: dict[str, Any] = {
        "name": name,
        "documentation": documentation if isinstance(documentation, str) else "",
        "constraints": _extract_constraints(raw),
    }

    shape_type = raw.get("type")
    if not isinstance(shape_type, str) or not shape_type:
        logger.debug("Shape %s has no type; using any", name)
        return AnyShape(reason=f"shape '{name}' has no type", **common), _NO_REFS

    if raw.get("union"):
        return (
            AnyShape(
                reason=f"union shape '{name}' holds one of several member types",
                union=True,
                **common,
            ),
            _NO_REFS,
        )

    if shape_type in SCALAR_TYPES:
        enum_values = common["constraints"].enum
        if shape_type == "string" and enum_values:
            return EnumShape(choices=list(enum_values), **common), _NO_REFS
        return ScalarShape(type_name=shape_type, **common), _NO_REFS

    if shape_type not in ("structure", "list", "map"):
        return (
            AnyShape(reason=f"unsupported shape type '{shape_type}'", **common),
            _NO_REFS,
        )

    if max_depth is not None and depth >= max_depth:
        return (
            AnyShape(
                reason=f"maximum resolution depth ({max_depth}) reached at '{name}'",
                **common,
            ),
            _NO_REFS,
        )

    # New set per branch so siblings do not share a path.
    inner_path = path | {name}
    if shape_type == "structure":
        return _resolve_structure(name, raw, common, shapes, inner_path, depth, max_depth)
    if shape_type == "list":
        member, refs = _resolve_reference(
            raw.get("member"), shapes, inner_path, depth + 1, max_depth
        )
        return (
            ListShape(member=member, self_referencing=name in refs, **common),
            refs - {name},
        )

    key, key_refs = _resolve_reference(raw.get("key"), shapes, inner_path, depth + 1, max_depth)
    value, value_refs = _resolve_reference(
        raw.get("value"), shapes, inner_path, depth + 1, max_depth
    )
    refs = key_refs | value_refs
    return (
        MapShape(key=key, value=value, self_referencing=name in refs, **common),
        refs - {name},
    )


def _resolve_structure(
    name: str,
    raw: dict[str, Any],
    common: dict[str, Any],
    shapes: dict[str, Any],
    path: frozenset[str],
    depth: int,
    max_depth: Optional[int],
) -> tuple[ResolvedShape, frozenset[str]]:
    """Resolve every member of a structure in declaration order."""
    raw_members = raw.get("members")
    if raw_members is None:
        raw_members = {}
    if not isinstance(raw_members, dict):
        logger.debug("Structure %s has malformed members; using any", name)
        return AnyShape(reason=f"structure '{name}' has malformed members", **common), _NO_REFS

    raw_required = raw.get("required")
    required = (
        {r for r in raw_required if isinstance(r, str)}
        if isinstance(raw_required, list)
        else set()
    )

    members: list[ShapeMember] = []
    refs: frozenset[str] = _NO_REFS
    for member_name, ref in raw_members.items():
        child, child_refs = _resolve_reference(ref, shapes, path, depth + 1, max_depth)
        refs = refs | child_refs
        ref_data = ref if isinstance(ref, dict) else {}
        documentation = ref_data.get("documentation")
        deprecation_message = ref_data.get("deprecatedMessage")
        members.append(
            ShapeMember(
                name=str(member_name),
                shape=child,
                required=member_name in required,
                documentation=documentation if isinstance(documentation, str) else "",
                deprecated=bool(ref_data.get("deprecated")),
                deprecation_message=(
                    deprecation_message if isinstance(deprecation_message, str) else None
                ),
                location=ref_data.get("location"),
                location_name=ref_data.get("locationName"),
            )
        )

    structure = StructureShape(
        members=members,
        self_referencing=name in refs,
        exception=bool(raw.get("exception")),
        **common,
    )
    return structure, refs - {name}


def _resolve_reference(
    ref: Any,
    shapes: dict[str, Any],
    path: frozenset[str],
    depth: int,
    max_depth: Optional[int],
) -> tuple[ResolvedShape, frozenset[str]]:
    """Resolve a member reference (``{"shape": "Name"}`` or a bare name)."""
    if isinstance(ref, dict):
        target = ref.get("shape")
    elif isinstance(ref, str):
        target = ref
    else:
        return AnyShape(reason="malformed member reference"), _NO_REFS
    return _resolve(target, shapes, path, depth, max_depth)


def _extract_constraints(raw: dict[str, Any]) -> ShapeConstraints:
    """Collect ``min``, ``max``, ``pattern``, and ``enum`` from a raw shape."""
    enum_values = raw.get("enum")
    pattern = raw.get("pattern")
    return ShapeConstraints(
        min=_as_number(raw.get("min")),
        max=_as_number(raw.get("max")),
        pattern=pattern if isinstance(pattern, str) else None,
        enum=[str(v) for v in enum_values] if isinstance(enum_values, list) else None,
    )


def _as_number(value: Any) -> Union[int, float, None]:
    """Return *value* if it is numeric (and not a bool), else ``None``."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value
