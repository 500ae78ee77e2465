"""Tests for shapecli.generator.defaults."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import pytest

from shapecli.generator.defaults import FileSize, synthesize_default, synthesize_example
from shapecli.models import ShapeConstraints, TargetType, TypeKind
from shapecli.parser.resolver import resolve_shape


class TestSynthesizeDefault:
    """Test per-type default values."""

    @pytest.mark.parametrize(
        "kind, expected",
        [
            (TypeKind.STRING, ""),
            (TypeKind.INT, 0),
            (TypeKind.FLOAT, 0.0),
            (TypeKind.BOOL, False),
            (TypeKind.LIST, []),
            (TypeKind.TABLE, []),
            (TypeKind.RECORD, {}),
            (TypeKind.BINARY, b""),
            (TypeKind.ANY, None),
            (TypeKind.NOTHING, None),
        ],
    )
    def test_zero_values(self, kind: TypeKind, expected: Any) -> None:
        assert synthesize_default(TargetType(kind=kind)) == expected

    def test_int_uses_minimum(self) -> None:
        assert synthesize_default(TargetType(kind=TypeKind.INT), ShapeConstraints(min=5)) == 5

    def test_float_uses_minimum(self) -> None:
        value = synthesize_default(TargetType(kind=TypeKind.FLOAT), ShapeConstraints(min=1))
        assert value == 1.0
        assert isinstance(value, float)

    def test_choice_takes_first(self) -> None:
        target = TargetType(kind=TypeKind.CHOICE, choices=["STANDARD", "GLACIER"])
        assert synthesize_default(target) == "STANDARD"

    def test_empty_choice(self) -> None:
        assert synthesize_default(TargetType(kind=TypeKind.CHOICE)) == ""

    def test_filesize(self) -> None:
        value = synthesize_default(TargetType(kind=TypeKind.FILESIZE))
        assert isinstance(value, FileSize)
        assert value == 0
        assert value.render() == "0b"

    def test_datetime_is_current_utc(self) -> None:
        value = synthesize_default(TargetType(kind=TypeKind.DATETIME))
        assert isinstance(value, datetime)
        assert value.tzinfo is not None


class TestSynthesizeExample:
    """Test example input synthesis."""

    def test_required_members_only(self, s3_model: dict[str, Any]) -> None:
        shape = resolve_shape("GetObjectRequest", s3_model["shapes"])
        assert synthesize_example(shape) == {"Bucket": "", "Key": ""}

    def test_include_optional(self, s3_model: dict[str, Any]) -> None:
        shape = resolve_shape("ListObjectsV2Request", s3_model["shapes"])
        example = synthesize_example(shape, include_optional=True)
        assert list(example) == [
            "Bucket",
            "Delimiter",
            "EncodingType",
            "MaxKeys",
            "Prefix",
            "ContinuationToken",
            "FetchOwner",
            "StartAfter",
        ]
        assert example["EncodingType"] == "url"
        assert example["MaxKeys"] == 0
        assert example["FetchOwner"] is False

    def test_leaf_constraints(self, lambda_model: dict[str, Any]) -> None:
        shape = resolve_shape("ListFunctionsRequest", lambda_model["shapes"])
        example = synthesize_example(shape, include_optional=True)
        assert example["MaxResults"] == 1

    def test_nested_depth_limit(self) -> None:
        shapes = {
            "Outer": {"type": "structure", "required": ["Inner"], "members": {"Inner": {"shape": "Inner"}}},
            "Inner": {"type": "structure", "required": ["V"], "members": {"V": {"shape": "S"}}},
            "S": {"type": "string"},
        }
        shape = resolve_shape("Outer", shapes)
        assert synthesize_example(shape) == {"Inner": {"V": ""}}
        assert synthesize_example(shape, max_depth=1) == {"Inner": {}}

    def test_unresolvable_input(self, malformed_model: dict[str, Any]) -> None:
        shape = resolve_shape("NoTypeShape", malformed_model["shapes"])
        assert synthesize_example(shape) is None
