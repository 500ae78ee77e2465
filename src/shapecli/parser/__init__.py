"""Service model parser -- load models, resolve shapes, and extract operations.

This sub-package is responsible for the first half of the shapecli pipeline:
turning a raw service model (JSON or YAML, local file or stdin) into
canonical :class:`~shapecli.models.Operation` records with fully resolved,
cycle-safe input and output shapes.

Typical usage::

    from shapecli.parser import load_model, extract_operations

    model = load_model("s3/service-2.json")
    operations = extract_operations(model, max_depth=16)

Sub-modules:

* :mod:`~shapecli.parser.loader` -- I/O layer (file, stdin) plus format
  detection and paginator document loading.
* :mod:`~shapecli.parser.resolver` -- Recursive shape resolution with
  cycle detection and graceful degradation.
* :mod:`~shapecli.parser.extractor` -- Operation and metadata extraction.
* :mod:`~shapecli.parser.errors` -- Exception shape harvesting.
"""

from shapecli.parser.errors import extract_errors
from shapecli.parser.extractor import (
    derive_service_name,
    extract_metadata,
    extract_operation,
    extract_operations,
)
from shapecli.parser.loader import load_model, load_pagination, merge_pagination
from shapecli.parser.resolver import resolve_shape

__all__ = [
    "derive_service_name",
    "extract_errors",
    "extract_metadata",
    "extract_operation",
    "extract_operations",
    "load_model",
    "load_pagination",
    "merge_pagination",
    "resolve_shape",
]
