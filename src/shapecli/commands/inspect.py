"""Inspect commands -- examine what shapecli derives from a service model.

Provides the ``shapecli inspect`` sub-command group: read-only tables of
the model's operations, error shapes, inferred resources, pagination
descriptors, and the flattened output columns of one operation.  Every
sub-command compiles the model with :func:`~shapecli.schema.build_schema`
and prints through :func:`~shapecli.output.print_table`, so ``--json`` and
``--plain`` apply.
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from shapecli.commands.generate import (
    fail,
    find_operation,
    load_model_or_exit,
    resolve_config_or_exit,
)
from shapecli.exceptions import ShapecliError
from shapecli.models import ServiceSchema
from shapecli.output import print_table


inspect_app = typer.Typer(no_args_is_help=True)


def _compile(model: str, pagination: Optional[str] = None) -> tuple[dict[str, Any], ServiceSchema]:
    from shapecli.schema import build_schema

    config = resolve_config_or_exit()
    raw = load_model_or_exit(model, pagination)
    return raw, build_schema(raw, max_depth=config.generator.max_depth)


def _key_text(value: Any) -> str:  # noqa: ANN401
    if value is None:
        return "-"
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value)


@inspect_app.command("operations")
def inspect_operations(
    model: str = typer.Argument(help="Service model file path ('-' for stdin)."),
) -> None:
    """List every operation with its HTTP binding and shapes.

    Example::

        shapecli inspect operations s3/service-2.json
    """
    _, schema = _compile(model)
    rows = [
        [
            op.name,
            op.original_name,
            op.http_method,
            op.http_uri,
            op.input_shape or "-",
            op.output_shape or "-",
            "Yes" if op.deprecated else "",
        ]
        for op in schema.operations
    ]
    print_table(
        ["Command", "Operation", "Method", "URI", "Input", "Output", "Deprecated"],
        rows,
        title=f"{schema.service} -- Operations ({len(rows)})",
    )


@inspect_app.command("errors")
def inspect_errors(
    model: str = typer.Argument(help="Service model file path ('-' for stdin)."),
) -> None:
    """List the model's exception shapes.

    Example::

        shapecli inspect errors dynamodb/service-2.json
    """
    _, schema = _compile(model)
    rows = [
        [
            err.name,
            err.code or "-",
            str(err.http_status) if err.http_status is not None else "-",
            "Yes" if err.retryable else "",
            "Yes" if err.throttling else "",
            err.fault or "-",
        ]
        for err in schema.errors
    ]
    print_table(
        ["Error", "Code", "Status", "Retryable", "Throttling", "Fault"],
        rows,
        title=f"{schema.service} -- Errors ({len(rows)})",
    )


@inspect_app.command("resources")
def inspect_resources(
    model: str = typer.Argument(help="Service model file path ('-' for stdin)."),
) -> None:
    """List resources inferred from operation names.

    Example::

        shapecli inspect resources lambda/service-2.json
    """
    _, schema = _compile(model)
    rows = [[res.name, ", ".join(res.operations)] for res in schema.resources]
    print_table(
        ["Resource", "Operations"],
        rows,
        title=f"{schema.service} -- Resources ({len(rows)})",
    )


@inspect_app.command("pagination")
def inspect_pagination(
    model: str = typer.Argument(help="Service model file path ('-' for stdin)."),
    pagination: Optional[str] = typer.Option(
        None, "--pagination", "-p", help="Paginator document (paginators-1.json)."
    ),
) -> None:
    """List paginated operations and their token, limit, and result keys.

    Example::

        shapecli inspect pagination s3/service-2.json -p s3/paginators-1.json
    """
    _, schema = _compile(model, pagination)
    rows = [
        [
            op.original_name,
            op.pagination.source or "-",
            _key_text(op.pagination.input_token),
            _key_text(op.pagination.output_token),
            _key_text(op.pagination.limit_key),
            _key_text(op.pagination.result_key),
        ]
        for op in schema.operations
        if op.pagination.paginated
    ]
    print_table(
        ["Operation", "Source", "Input token", "Output token", "Limit", "Result key"],
        rows,
        title=f"{schema.service} -- Pagination ({len(rows)})",
    )


@inspect_app.command("columns")
def inspect_columns(
    model: str = typer.Argument(help="Service model file path ('-' for stdin)."),
    operation: str = typer.Argument(help="Operation name (original or kebab-case)."),
) -> None:
    """Show the table columns an operation's output flattens to.

    The output's single data list is used when there is one, otherwise the
    output structure itself.

    Example::

        shapecli inspect columns s3/service-2.json ListBuckets
    """
    from shapecli.generator import extract_columns
    from shapecli.models import ListShape, StructureShape
    from shapecli.parser import extract_operations

    config = resolve_config_or_exit()
    raw = load_model_or_exit(model)
    try:
        selected = find_operation(
            extract_operations(raw, max_depth=config.generator.max_depth), operation
        )
    except ShapecliError as exc:
        raise fail(exc) from None

    shape = selected.output
    if isinstance(shape, StructureShape):
        lists = [m.shape for m in shape.members if isinstance(m.shape, ListShape)]
        if len(lists) == 1:
            shape = lists[0]

    columns = extract_columns(shape)
    print_table(
        ["Column", "Type"],
        [[column.name, column.type.render()] for column in columns],
        title=f"{selected.original_name} -- Columns ({len(columns)})",
    )
