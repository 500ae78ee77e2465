"""Tests for shapecli.generator.type_mapper."""

from __future__ import annotations

from typing import Any

import pytest

from shapecli.generator.type_mapper import MAPPING_RULES, is_byte_size_field, map_type
from shapecli.models import (
    AnyShape,
    EnumShape,
    ListShape,
    MapShape,
    ScalarShape,
    ShapeConstraints,
    StructureShape,
    TypeContext,
    TypeKind,
)
from shapecli.parser.resolver import resolve_shape


def _ctx(field_name: str) -> TypeContext:
    return TypeContext(field_name=field_name)


class TestPrimitives:
    """Test mapping scalar shapes."""

    @pytest.mark.parametrize(
        "type_name, expected",
        [
            ("string", TypeKind.STRING),
            ("integer", TypeKind.INT),
            ("long", TypeKind.INT),
            ("short", TypeKind.INT),
            ("float", TypeKind.FLOAT),
            ("double", TypeKind.FLOAT),
            ("boolean", TypeKind.BOOL),
            ("timestamp", TypeKind.DATETIME),
            ("blob", TypeKind.BINARY),
        ],
    )
    def test_scalar_kinds(self, type_name: str, expected: TypeKind) -> None:
        assert map_type(ScalarShape(type_name=type_name)).kind == expected

    def test_enum_is_choice(self) -> None:
        target = map_type(EnumShape(choices=["url"]))
        assert target.kind == TypeKind.CHOICE
        assert target.choices == ["url"]
        assert target.render() == "string"

    def test_enum_from_member_constraints(self) -> None:
        ctx = TypeContext(constraints=ShapeConstraints(enum=["a", "b"]))
        target = map_type(ScalarShape(type_name="string"), ctx)
        assert target.kind == TypeKind.CHOICE
        assert target.choices == ["a", "b"]


class TestByteSizeHeuristic:
    """Test the filesize heuristic for byte-count members."""

    @pytest.mark.parametrize("field", ["ContentLength", "SizeInBytes", "ObjectSize", "Size", "Content-Length"])
    def test_byte_counts_become_filesize(self, field: str) -> None:
        assert map_type(ScalarShape(type_name="long"), _ctx(field)).kind == TypeKind.FILESIZE

    @pytest.mark.parametrize("field", ["PageSize", "BatchSize", "MaxKeys", "ClusterSize"])
    def test_counts_stay_integers(self, field: str) -> None:
        assert map_type(ScalarShape(type_name="integer"), _ctx(field)).kind == TypeKind.INT

    def test_strings_never_become_filesize(self) -> None:
        assert map_type(ScalarShape(type_name="string"), _ctx("ContentLength")).kind == TypeKind.STRING

    def test_is_byte_size_field_without_name(self) -> None:
        assert not is_byte_size_field(None)
        assert not is_byte_size_field("")


class TestContainers:
    """Test mapping lists, maps and structures."""

    def test_list_of_structure_is_table(self) -> None:
        shape = ListShape(member=StructureShape(name="Bucket"))
        assert map_type(shape).kind == TypeKind.TABLE
        assert map_type(shape).render() == "table"

    def test_list_of_scalars(self) -> None:
        target = map_type(ListShape(member=ScalarShape(type_name="string")))
        assert target.kind == TypeKind.LIST
        assert target.render() == "list<string>"

    def test_list_element_uses_field_context(self) -> None:
        target = map_type(ListShape(member=ScalarShape(type_name="long")), _ctx("ObjectSizes"))
        assert target.render() == "list<filesize>"

    def test_self_referencing_list_is_generic_list(self, malformed_model: dict[str, Any]) -> None:
        response = resolve_shape("TreeResponse", malformed_model["shapes"])
        target = map_type(response.members[0].shape, _ctx("Nodes"))
        assert target.kind == TypeKind.LIST
        assert target.render() == "list<any>"
        assert target.note == "self-referencing structure 'Node' kept as a generic list"

    def test_map_is_record(self) -> None:
        shape = MapShape(key=ScalarShape(type_name="string"), value=ScalarShape(type_name="string"))
        assert map_type(shape).kind == TypeKind.RECORD

    def test_structure_is_record(self) -> None:
        assert map_type(StructureShape(name="Owner")).kind == TypeKind.RECORD

    def test_self_referencing_structure_is_any(self) -> None:
        target = map_type(StructureShape(name="Node", self_referencing=True))
        assert target.kind == TypeKind.ANY
        assert "Node" in (target.note or "")


class TestFallback:
    """Test the any fallback for unknown shapes."""

    def test_any_shape_keeps_reason(self) -> None:
        target = map_type(AnyShape(reason="shape 'X' is not defined"))
        assert target.kind == TypeKind.ANY
        assert target.note == "shape 'X' is not defined"

    def test_union(self) -> None:
        assert map_type(AnyShape(union=True, reason="union")).kind == TypeKind.ANY


class TestRuleTable:
    """Test the ordering of the mapping rule table."""

    def test_rule_order(self) -> None:
        assert [name for name, _ in MAPPING_RULES] == [
            "enum",
            "byte-size",
            "timestamp",
            "blob",
            "primitive",
            "list-of-structure",
            "list",
            "map",
            "structure",
        ]

    def test_pure(self, s3_model: dict[str, Any]) -> None:
        shape = resolve_shape("ListObjectsV2Output", s3_model["shapes"])
        for member in shape.members:
            assert map_type(member.shape, _ctx(member.name)) == map_type(member.shape, _ctx(member.name))
