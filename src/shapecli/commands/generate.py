"""Generation commands -- compile a service model into a schema and commands.

Implements the top-level ``generate``, ``signatures``, ``validate`` and
``example`` commands.  Model loading, configuration resolution, and error
reporting are shared through :func:`load_model_or_exit` and
:func:`resolve_config_or_exit`, which the ``inspect`` commands reuse.

Every :class:`~shapecli.exceptions.ShapecliError` raised below is reported
on stderr and turned into a :class:`typer.Exit` carrying the error's exit
code.
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from shapecli.exceptions import InvalidUsageError, SchemaValidationError, ShapecliError
from shapecli.models import GlobalConfig, Operation
from shapecli.output import (
    OutputFormat,
    debug,
    error,
    get_output,
    print_data,
    print_record,
    success,
    suggest,
)


def fail(exc: ShapecliError) -> typer.Exit:
    """Report *exc* on stderr and return the matching :class:`typer.Exit`."""
    error(str(exc))
    return typer.Exit(code=exc.exit_code)


def resolve_config_or_exit(
    prefix: Optional[str] = None,
    max_depth: Optional[int] = None,
    workers: Optional[int] = None,
    output_dir: Optional[str] = None,
) -> GlobalConfig:
    """Resolve the effective configuration, exiting on a config error."""
    from shapecli.config import resolve_config

    try:
        return resolve_config(
            cli_prefix=prefix,
            cli_max_depth=max_depth,
            cli_workers=workers,
            cli_output_dir=output_dir,
        )
    except ShapecliError as exc:
        raise fail(exc) from None


def load_model_or_exit(source: str, pagination: Optional[str] = None) -> dict[str, Any]:
    """Load a model (and optional paginator document), exiting on a parse error."""
    from shapecli.parser import load_model, load_pagination, merge_pagination

    try:
        model = load_model(source)
        if pagination is not None:
            model = merge_pagination(model, load_pagination(pagination))
    except ShapecliError as exc:
        raise fail(exc) from None
    debug(f"Loaded model from {source}")
    return model


def find_operation(operations: list[Operation], name: str) -> Operation:
    """Return the operation whose original or kebab-case name is *name*.

    Raises:
        InvalidUsageError: If no operation matches.
    """
    for operation in operations:
        if name in (operation.original_name, operation.name):
            return operation
    raise InvalidUsageError(f"Unknown operation: {name}")


def generate_command(
    model: str = typer.Argument(help="Service model file path ('-' for stdin)."),
    pagination: Optional[str] = typer.Option(
        None, "--pagination", "-p", help="Paginator document (paginators-1.json)."
    ),
    service: Optional[str] = typer.Option(
        None, "--service", "-s", help="Service name (derived from the model if omitted)."
    ),
    output_dir: Optional[str] = typer.Option(
        None, "--output-dir", "-o", help="Directory for the schema and module."
    ),
    prefix: Optional[str] = typer.Option(None, "--prefix", help="Command name prefix."),
    max_depth: Optional[int] = typer.Option(
        None, "--max-depth", help="Shape resolution depth limit (0 for unbounded)."
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", "-w", help="Worker threads for signature generation."
    ),
    no_validate: bool = typer.Option(
        False, "--no-validate", help="Write the schema even if it fails validation."
    ),
    no_module: bool = typer.Option(
        False, "--no-module", help="Only write the schema, not the command module."
    ),
) -> None:
    """Compile a service model into <service>.json and <service>.nu.

    The schema is validated before it is written unless ``--no-validate``
    is given.  The paths of the written files are printed to stdout.

    Example::

        shapecli generate s3/service-2.json -p s3/paginators-1.json -o ./nu
        shapecli --json generate - < lambda.json
    """
    from shapecli.config import resolve_output_dir
    from shapecli.generator import generate_signatures, write_module
    from shapecli.schema import build_schema, save_schema

    config = resolve_config_or_exit(prefix, max_depth, workers, output_dir)
    raw = load_model_or_exit(model, pagination)
    target_dir = resolve_output_dir(config)

    schema = build_schema(raw, service, max_depth=config.generator.max_depth)
    try:
        schema_path = save_schema(schema, target_dir, validate=not no_validate)
    except SchemaValidationError as exc:
        for message in exc.errors:
            error(message)
        raise fail(exc) from None
    success(f"Wrote schema for {schema.service} ({len(schema.operations)} operations)")

    result = {"service": schema.service, "schema": str(schema_path), "module": None}
    if not no_module:
        signatures = generate_signatures(raw, service=schema.service, config=config.generator)
        module_path = write_module(
            signatures, target_dir, service=schema.service, config=config.generator
        )
        result["module"] = str(module_path)
        success(f"Wrote {len(signatures)} command definitions")
        suggest(f"use {module_path}")

    print_record(result)


def signatures_command(
    model: str = typer.Argument(help="Service model file path ('-' for stdin)."),
    operation: Optional[str] = typer.Option(
        None, "--operation", "-O", help="Only this operation (original or kebab-case name)."
    ),
    pagination: Optional[str] = typer.Option(
        None, "--pagination", "-p", help="Paginator document (paginators-1.json)."
    ),
    service: Optional[str] = typer.Option(
        None, "--service", "-s", help="Service name (derived from the model if omitted)."
    ),
    prefix: Optional[str] = typer.Option(None, "--prefix", help="Command name prefix."),
) -> None:
    """Print generated command definitions.

    Prints the rendered source text, or the signature records with
    ``--json``.

    Example::

        shapecli signatures s3/service-2.json --operation ListObjectsV2
        shapecli --json signatures s3/service-2.json
    """
    from shapecli.generator import generate_signatures, render_signature

    config = resolve_config_or_exit(prefix)
    raw = load_model_or_exit(model, pagination)
    signatures = generate_signatures(raw, service=service, config=config.generator)

    if operation is not None:
        signatures = [s for s in signatures if operation in (s.original_name, s.operation)]
        if not signatures:
            raise fail(InvalidUsageError(f"Unknown operation: {operation}"))

    if get_output().format == OutputFormat.JSON:
        print_record([s.model_dump(mode="json") for s in signatures])
        return
    print_data(
        "\n\n".join(render_signature(s, dispatcher=config.generator.dispatcher) for s in signatures)
    )


def validate_command(
    schema: str = typer.Argument(help="Path to a generated <service>.json schema."),
) -> None:
    """Validate a persisted service schema.

    Exits with code 8 and lists every problem when the schema is invalid.

    Example::

        shapecli validate ./nu/s3.json
    """
    from shapecli.schema import load_schema, validate_schema

    try:
        record = load_schema(schema)
    except ShapecliError as exc:
        raise fail(exc) from None

    result = validate_schema(record)
    if get_output().format == OutputFormat.JSON:
        print_record(result.model_dump(mode="json"))
    if not result.valid:
        for message in result.errors:
            error(message)
        raise fail(SchemaValidationError(f"{schema} is not a valid service schema", errors=result.errors))
    success(f"{schema} is valid")


def example_command(
    model: str = typer.Argument(help="Service model file path ('-' for stdin)."),
    operation: str = typer.Argument(help="Operation name (original or kebab-case)."),
    all_members: bool = typer.Option(
        False, "--all", "-a", help="Include optional members too."
    ),
) -> None:
    """Print a sample input record for an operation.

    Values are type-appropriate placeholders: empty strings, minimum
    numbers, the first enum choice, and the current time for timestamps.

    Example::

        shapecli example s3/service-2.json PutObject
    """
    from shapecli.generator import synthesize_example
    from shapecli.parser import extract_operations

    config = resolve_config_or_exit()
    raw = load_model_or_exit(model)
    operations = extract_operations(raw, max_depth=config.generator.max_depth)
    try:
        selected = find_operation(operations, operation)
    except ShapecliError as exc:
        raise fail(exc) from None

    print_record(synthesize_example(selected.input, include_optional=all_members))
