"""Tests for shapecli.generator.batch."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from shapecli.generator.batch import generate_signatures
from shapecli.generator.signature import render_signature
from shapecli.models import GeneratorConfig, TypeKind
from shapecli.parser.loader import load_pagination, merge_pagination


def _wide_model(count: int) -> dict[str, Any]:
    operations = {
        f"GetThing{i:03d}": {"name": f"GetThing{i:03d}", "input": {"shape": "Request"}}
        for i in range(count)
    }
    shapes = {
        "Request": {"type": "structure", "required": ["Id"], "members": {"Id": {"shape": "S"}}},
        "S": {"type": "string"},
    }
    return {"metadata": {"endpointPrefix": "things"}, "operations": operations, "shapes": shapes}


class TestGenerateSignatures:
    """Test batch signature generation."""

    def test_model_order(self, s3_model: dict[str, Any]) -> None:
        sigs = generate_signatures(s3_model)
        assert [s.original_name for s in sigs] == [
            "ListBuckets",
            "ListObjectsV2",
            "GetObject",
            "DeleteBucket",
            "GetBucketLifecycle",
        ]
        assert all(s.service == "s3" for s in sigs)

    def test_explicit_service_name(self, s3_model: dict[str, Any]) -> None:
        sigs = generate_signatures(s3_model, service="storage")
        assert sigs[0].command == "aws storage list-buckets"

    def test_explicit_pagination_is_used(self, s3_model: dict[str, Any], s3_paginators_path: Path) -> None:
        model = merge_pagination(s3_model, load_pagination(str(s3_paginators_path)))
        sigs = {s.original_name: s for s in generate_signatures(model)}
        page = sigs["ListObjectsV2"].pagination
        assert page.paginated
        assert page.source == "explicit"
        assert page.result_key == ["Contents", "CommonPrefixes"]
        assert not sigs["ListBuckets"].pagination.paginated

    def test_inferred_pagination(self, lambda_model: dict[str, Any]) -> None:
        sigs = {s.original_name: s for s in generate_signatures(lambda_model)}
        assert sigs["ListFunctions"].pagination.source == "inferred"
        assert sigs["ListFunctions"].return_type.kind == TypeKind.TABLE
        assert not sigs["DeleteFunction"].pagination.paginated

    def test_errors_are_shared(self, lambda_model: dict[str, Any]) -> None:
        sigs = {s.original_name: s for s in generate_signatures(lambda_model)}
        assert "retryable errors: TooManyRequestsException" in sigs["GetFunction"].comments

    @pytest.mark.parametrize("workers", [2, 4, 8])
    def test_parallel_matches_sequential(self, workers: int) -> None:
        model = _wide_model(40)
        sequential = generate_signatures(model, workers=1)
        parallel = generate_signatures(model, workers=workers)
        assert parallel == sequential
        assert [s.original_name for s in parallel] == sorted(model["operations"])

    def test_workers_from_config(self) -> None:
        model = _wide_model(10)
        sigs = generate_signatures(model, config=GeneratorConfig(workers=3))
        assert len(sigs) == 10

    def test_malformed_model_never_raises(self, malformed_model: dict[str, Any]) -> None:
        sigs = generate_signatures(malformed_model, workers=4)
        assert [s.operation for s in sigs] == [
            "describe-tree",
            "untyped",
            "dangling",
            "sparse",
            "unions",
        ]
        for sig in sigs:
            text = render_signature(sig)
            assert sig.command in text

    def test_empty_model(self) -> None:
        assert generate_signatures({}) == []
