"""Signature generator -- map types and turn operations into shell commands.

This sub-package is the second half of the shapecli pipeline.  It consumes
canonical operations from :mod:`shapecli.parser` and produces typed command
signatures and the module text that defines them.

Typical usage::

    from shapecli.generator import generate_signatures, render_module

    signatures = generate_signatures(model, service="s3", workers=4)
    text = render_module(signatures, service="s3")

Sub-modules:

* :mod:`~shapecli.generator.type_mapper` -- Ordered shape-to-type rules.
* :mod:`~shapecli.generator.defaults` -- Default and example values.
* :mod:`~shapecli.generator.columns` -- Table column flattening.
* :mod:`~shapecli.generator.signature` -- Signature assembly and rendering.
* :mod:`~shapecli.generator.batch` -- Concurrent per-operation generation.
* :mod:`~shapecli.generator.emitter` -- Jinja2 module rendering.
"""

from shapecli.generator.batch import generate_signatures
from shapecli.generator.columns import extract_columns
from shapecli.generator.defaults import FileSize, synthesize_default, synthesize_example
from shapecli.generator.emitter import render_module, write_module
from shapecli.generator.signature import assemble_signature, render_signature
from shapecli.generator.type_mapper import MAPPING_RULES, map_type

__all__ = [
    "FileSize",
    "MAPPING_RULES",
    "assemble_signature",
    "extract_columns",
    "generate_signatures",
    "map_type",
    "render_module",
    "render_signature",
    "synthesize_default",
    "synthesize_example",
    "write_module",
]
