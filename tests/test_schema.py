"""Tests for shapecli.schema -- building, validating, and persisting service schemas."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from shapecli import __version__
from shapecli.exceptions import ModelParseError, SchemaValidationError
from shapecli.parser.loader import load_pagination, merge_pagination
from shapecli.schema import SCHEMA_VERSION, build_schema, load_schema, save_schema, validate_schema


def _valid_record() -> dict[str, Any]:
    return {
        "service": "s3",
        "operations": [
            {"name": "list-buckets", "original_name": "ListBuckets", "http_method": "GET", "http_uri": "/"}
        ],
        "metadata": {},
        "generated_at": "2026-01-01T00:00:00Z",
        "schema_version": "1.0",
        "extractor_version": "0.4.0",
    }


# ---------------------------------------------------------------------------
# Building
# ---------------------------------------------------------------------------


class TestBuildSchema:
    """Test building a service schema from a model."""

    def test_core_fields(self, s3_model: dict[str, Any]) -> None:
        schema = build_schema(s3_model)
        assert schema.service == "s3"
        assert schema.schema_version == SCHEMA_VERSION
        assert schema.extractor_version == __version__
        assert schema.metadata["endpoint_prefix"] == "s3"
        assert schema.metadata["protocol"] == "rest-xml"
        assert [op.original_name for op in schema.operations] == [
            "ListBuckets",
            "ListObjectsV2",
            "GetObject",
            "DeleteBucket",
            "GetBucketLifecycle",
        ]

    def test_errors_and_resources(self, s3_model: dict[str, Any]) -> None:
        schema = build_schema(s3_model)
        assert [e.name for e in schema.errors] == ["NoSuchBucket", "NoSuchKey", "SlowDown"]
        assert schema.resources[0].name == "bucket"

    def test_pagination_from_merged_config(
        self, s3_model: dict[str, Any], s3_paginators_path: Path
    ) -> None:
        model = merge_pagination(s3_model, load_pagination(str(s3_paginators_path)))
        ops = {op.original_name: op for op in build_schema(model).operations}
        assert ops["ListObjectsV2"].pagination.source == "explicit"
        assert not ops["GetObject"].pagination.paginated

    def test_record_is_valid(self, s3_model: dict[str, Any]) -> None:
        record = build_schema(s3_model).to_record()
        result = validate_schema(record)
        assert result.valid, result.errors
        json.dumps(record)

    def test_record_keeps_resolved_shapes(self, s3_model: dict[str, Any]) -> None:
        record = build_schema(s3_model).to_record()
        list_objects = record["operations"][1]
        assert list_objects["input_schema"]["kind"] == "structure"
        assert list_objects["input_schema"]["members"][0]["name"] == "Bucket"

    def test_malformed_model(self, malformed_model: dict[str, Any]) -> None:
        schema = build_schema(malformed_model)
        assert schema.service == "broken-service"
        assert len(schema.operations) == 5
        assert validate_schema(schema.to_record()).valid

    def test_empty_model(self) -> None:
        schema = build_schema({})
        assert schema.service == "service"
        assert schema.operations == []
        assert validate_schema(schema.to_record()).valid

    def test_service_override(self, s3_model: dict[str, Any]) -> None:
        assert build_schema(s3_model, "storage").service == "storage"


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidateSchema:
    """Test validating a schema record."""

    def test_valid(self) -> None:
        assert validate_schema(_valid_record()).valid

    def test_not_an_object(self) -> None:
        result = validate_schema(["s3"])
        assert not result.valid
        assert result.errors == ["Schema must be a JSON object"]

    def test_missing_operations(self) -> None:
        record = _valid_record()
        del record["operations"]
        result = validate_schema(record)
        assert not result.valid
        assert any("operations" in e for e in result.errors)

    def test_every_missing_field_reported(self) -> None:
        result = validate_schema({})
        assert len(result.errors) == 6

    def test_operation_missing_field(self) -> None:
        record = _valid_record()
        del record["operations"][0]["http_uri"]
        result = validate_schema(record)
        assert not result.valid
        assert result.errors == ["Operation 0 (ListBuckets) missing required field 'http_uri'"]

    def test_operation_not_an_object(self) -> None:
        record = _valid_record()
        record["operations"].append("oops")
        result = validate_schema(record)
        assert any(e.startswith("Operation 1") for e in result.errors)

    def test_bad_types(self) -> None:
        record = _valid_record()
        record.update(service="", metadata=[], operations={}, generated_at="yesterday")
        errors = validate_schema(record).errors
        assert "Field 'service' must be a non-empty string" in errors
        assert "Field 'metadata' must be an object" in errors
        assert "Field 'operations' must be a list" in errors
        assert any("generated_at" in e for e in errors)


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------


class TestSaveAndLoad:
    """Test persisting and reading schema files."""

    def test_save_writes_service_file(self, tmp_path: Path, s3_model: dict[str, Any]) -> None:
        path = save_schema(build_schema(s3_model), tmp_path)
        assert path == tmp_path / "s3.json"
        assert load_schema(path)["service"] == "s3"

    def test_invalid_schema_not_written(self, tmp_path: Path) -> None:
        record = _valid_record()
        del record["operations"]
        with pytest.raises(SchemaValidationError) as excinfo:
            save_schema(record, tmp_path)
        assert excinfo.value.exit_code == 8
        assert any("operations" in e for e in excinfo.value.errors)
        assert not (tmp_path / "s3.json").exists()

    def test_validation_can_be_skipped(self, tmp_path: Path) -> None:
        record = _valid_record()
        del record["operations"]
        assert save_schema(record, tmp_path, validate=False).exists()

    def test_load_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ModelParseError, match="not found"):
            load_schema(tmp_path / "absent.json")

    def test_load_non_object(self, tmp_path: Path) -> None:
        path = tmp_path / "list.json"
        path.write_text("[]")
        with pytest.raises(ModelParseError, match="not a JSON object"):
            load_schema(path)
