"""Tests for shapecli.parser.extractor."""

from __future__ import annotations

from typing import Any

from shapecli.models import AnyShape, ServiceMetadata, StructureShape
from shapecli.parser.extractor import (
    derive_service_name,
    extract_metadata,
    extract_operation,
    extract_operations,
)


class TestExtractOperations:
    """Test building canonical operation records."""

    def test_preserves_model_order(self, s3_model: dict[str, Any]) -> None:
        ops = extract_operations(s3_model)
        assert [op.original_name for op in ops] == [
            "ListBuckets",
            "ListObjectsV2",
            "GetObject",
            "DeleteBucket",
            "GetBucketLifecycle",
        ]
        assert [op.name for op in ops] == [
            "list-buckets",
            "list-objects-v2",
            "get-object",
            "delete-bucket",
            "get-bucket-lifecycle",
        ]

    def test_http_and_errors(self, s3_model: dict[str, Any]) -> None:
        ops = {op.original_name: op for op in extract_operations(s3_model)}
        list_objects = ops["ListObjectsV2"]
        assert list_objects.http_method == "GET"
        assert list_objects.http_uri == "/{Bucket}?list-type=2"
        assert list_objects.errors == ["NoSuchBucket", "SlowDown"]
        assert list_objects.input_shape == "ListObjectsV2Request"
        assert list_objects.output_shape == "ListObjectsV2Output"

    def test_deprecation(self, s3_model: dict[str, Any]) -> None:
        ops = {op.original_name: op for op in extract_operations(s3_model)}
        op = ops["GetBucketLifecycle"]
        assert op.deprecated
        assert op.deprecation_message == "Use GetBucketLifecycleConfiguration instead"
        assert not ops["ListBuckets"].deprecated

    def test_missing_output_is_empty_structure(self, s3_model: dict[str, Any]) -> None:
        ops = {op.original_name: op for op in extract_operations(s3_model)}
        delete = ops["DeleteBucket"]
        assert delete.output_shape is None
        assert isinstance(delete.output, StructureShape)
        assert delete.output.members == []

    def test_no_operations_section(self) -> None:
        assert extract_operations({}) == []
        assert extract_operations({"operations": ["not", "a", "dict"]}) == []

    def test_deterministic(self, s3_model: dict[str, Any]) -> None:
        first = [op.model_dump() for op in extract_operations(s3_model)]
        second = [op.model_dump() for op in extract_operations(s3_model)]
        assert first == second


class TestExtractOperation:
    """Sparse and malformed definitions fall back instead of failing."""

    def test_sparse_definition(self) -> None:
        op = extract_operation("Sparse", {}, {})
        assert op.original_name == "Sparse"
        assert op.name == "sparse"
        assert op.http_method == "POST"
        assert op.http_uri == "/"
        assert op.errors == []
        assert op.documentation == ""
        assert isinstance(op.input, StructureShape)
        assert isinstance(op.output, StructureShape)

    def test_non_dict_definition(self) -> None:
        op = extract_operation("Weird", "not a dict", {})
        assert op.original_name == "Weird"
        assert op.http_method == "POST"

    def test_method_is_uppercased(self) -> None:
        op = extract_operation("Put", {"http": {"method": "put", "requestUri": "/x"}}, {})
        assert op.http_method == "PUT"
        assert op.http_uri == "/x"

    def test_name_field_wins_over_key(self) -> None:
        op = extract_operation("key", {"name": "DescribeThings"}, {})
        assert op.original_name == "DescribeThings"
        assert op.name == "describe-things"

    def test_dangling_input_resolves_to_any(self) -> None:
        op = extract_operation("Ghost", {"input": {"shape": "Nowhere"}}, {})
        assert op.input_shape == "Nowhere"
        assert isinstance(op.input, AnyShape)

    def test_malformed_error_entries_skipped(self) -> None:
        raw = {"errors": [{"shape": "Good"}, {"nope": 1}, 42, "Bare"]}
        op = extract_operation("Errs", raw, {})
        assert op.errors == ["Good", "Bare"]

    def test_malformed_model_extracts_every_operation(self, malformed_model: dict[str, Any]) -> None:
        ops = extract_operations(malformed_model)
        assert [op.original_name for op in ops] == [
            "DescribeTree",
            "Untyped",
            "Dangling",
            "Sparse",
            "Unions",
        ]
        untyped = ops[1]
        assert isinstance(untyped.input, AnyShape)
        assert isinstance(untyped.output, AnyShape)


class TestMetadata:
    """Test service metadata and name derivation."""

    def test_extract_metadata(self, s3_model: dict[str, Any]) -> None:
        meta = extract_metadata(s3_model)
        assert meta.endpoint_prefix == "s3"
        assert meta.service_id == "S3"
        assert meta.api_version == "2006-03-01"
        assert meta.protocol == "rest-xml"

    def test_missing_metadata(self) -> None:
        meta = extract_metadata({})
        assert meta == ServiceMetadata()

    def test_service_name_prefers_endpoint_prefix(self) -> None:
        meta = ServiceMetadata(endpoint_prefix="dynamodb", service_id="DynamoDB")
        assert derive_service_name(meta) == "dynamodb"

    def test_service_name_from_service_id(self, malformed_model: dict[str, Any]) -> None:
        meta = extract_metadata(malformed_model)
        assert derive_service_name(meta) == "broken-service"

    def test_service_name_fallback(self) -> None:
        assert derive_service_name(ServiceMetadata(), fallback="MyThing") == "my-thing"
        assert derive_service_name(ServiceMetadata(), fallback="") == "service"
