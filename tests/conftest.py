"""Shared test fixtures for shapecli.

Provides reusable fixtures for loading model fixtures, creating isolated
config environments, managing output state, and running CLI commands.
These fixtures are automatically discovered by pytest and available to
all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from shapecli.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    Resetting forces a fresh manager to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Raw model fixtures (plain dicts loaded from JSON files)
# ---------------------------------------------------------------------------


@pytest.fixture
def s3_model_path() -> Path:
    return FIXTURES_DIR / "s3_like.json"


@pytest.fixture
def s3_paginators_path() -> Path:
    return FIXTURES_DIR / "s3_paginators.json"


@pytest.fixture
def malformed_model_path() -> Path:
    return FIXTURES_DIR / "malformed.json"


@pytest.fixture
def s3_model(s3_model_path: Path) -> dict[str, Any]:
    """Raw S3-style model: list, get, delete, and a deprecated operation."""
    with open(s3_model_path) as f:
        return json.load(f)


@pytest.fixture
def malformed_model(malformed_model_path: Path) -> dict[str, Any]:
    """Raw model with cycles, untyped shapes, dangling references, and unions."""
    with open(malformed_model_path) as f:
        return json.load(f)


@pytest.fixture
def lambda_model() -> dict[str, Any]:
    """A small Lambda-style model whose list operation pages with NextToken/MaxResults."""
    return {
        "metadata": {
            "apiVersion": "2015-03-31",
            "endpointPrefix": "lambda",
            "protocol": "rest-json",
            "serviceFullName": "AWS Lambda",
            "serviceId": "Lambda",
            "signatureVersion": "v4",
        },
        "operations": {
            "ListFunctions": {
                "name": "ListFunctions",
                "http": {"method": "GET", "requestUri": "/2015-03-31/functions/"},
                "input": {"shape": "ListFunctionsRequest"},
                "output": {"shape": "ListFunctionsResponse"},
            },
            "GetFunction": {
                "name": "GetFunction",
                "http": {"method": "GET", "requestUri": "/2015-03-31/functions/{FunctionName}"},
                "input": {"shape": "GetFunctionRequest"},
                "output": {"shape": "FunctionConfiguration"},
                "errors": [{"shape": "TooManyRequestsException"}],
            },
            "DeleteFunction": {
                "name": "DeleteFunction",
                "http": {"method": "DELETE", "requestUri": "/2015-03-31/functions/{FunctionName}"},
                "input": {"shape": "GetFunctionRequest"},
            },
            "Invoke": {
                "name": "Invoke",
                "http": {"method": "POST", "requestUri": "/2015-03-31/functions/{FunctionName}/invocations"},
                "input": {"shape": "GetFunctionRequest"},
            },
        },
        "shapes": {
            "FunctionName": {"type": "string", "min": 1, "max": 170},
            "String": {"type": "string"},
            "MaxListItems": {"type": "integer", "min": 1, "max": 10000},
            "Runtime": {"type": "string", "enum": ["python3.12", "nodejs20.x"]},
            "CodeSize": {"type": "long"},
            "ListFunctionsRequest": {
                "type": "structure",
                "members": {
                    "Marker": {"shape": "String", "location": "querystring"},
                    "NextToken": {"shape": "String"},
                    "MaxResults": {"shape": "MaxListItems"},
                },
            },
            "FunctionConfiguration": {
                "type": "structure",
                "members": {
                    "FunctionName": {"shape": "FunctionName"},
                    "Runtime": {"shape": "Runtime"},
                    "CodeSize": {"shape": "CodeSize"},
                },
            },
            "FunctionList": {"type": "list", "member": {"shape": "FunctionConfiguration"}},
            "ListFunctionsResponse": {
                "type": "structure",
                "members": {
                    "NextToken": {"shape": "String"},
                    "Functions": {"shape": "FunctionList"},
                },
            },
            "GetFunctionRequest": {
                "type": "structure",
                "required": ["FunctionName"],
                "members": {"FunctionName": {"shape": "FunctionName", "location": "uri"}},
            },
            "TooManyRequestsException": {
                "type": "structure",
                "members": {},
                "error": {"httpStatusCode": 429},
                "exception": True,
                "retryable": {},
            },
        },
    }


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path so
    that tests never touch real user config, clears all SHAPECLI_*
    environment variables, and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("shapecli.config._is_xdg_platform", lambda: True)

    for var in [
        "SHAPECLI_PREFIX",
        "SHAPECLI_MAX_DEPTH",
        "SHAPECLI_WORKERS",
        "SHAPECLI_OUTPUT_DIR",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner() -> CliRunner:
    """Typer CLI test runner."""
    return CliRunner()
