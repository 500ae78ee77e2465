"""Exception hierarchy for shapecli.

All exceptions inherit from :class:`ShapecliError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`shapecli.exit_codes`.
The top-level error handler in :func:`shapecli.app.main` catches
``ShapecliError`` and exits with the appropriate code.

Structural defects inside a service model (dangling shape references,
missing ``type`` fields, malformed members) are never raised; the resolver
and assembler degrade them to annotated ``any`` types instead.  Exceptions
are reserved for I/O, configuration, and the final schema validation gate.

Subclass hierarchy::

    ShapecliError (exit 1)
    +-- InvalidUsageError      (exit 2)
    +-- ModelParseError        (exit 7)
    +-- SchemaValidationError  (exit 8)
    +-- ConfigError            (exit 1)
"""

from __future__ import annotations

from shapecli.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_MODEL_PARSE_ERROR,
    EXIT_SCHEMA_INVALID,
)


class ShapecliError(Exception):
    """Base exception for all shapecli errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ShapecliError):
    """Raised for invalid CLI arguments, e.g. an unknown operation name."""

    exit_code = EXIT_INVALID_USAGE


class ModelParseError(ShapecliError):
    """Raised when a service model or paginator document cannot be read or parsed."""

    exit_code = EXIT_MODEL_PARSE_ERROR


class SchemaValidationError(ShapecliError):
    """Raised when a service schema fails the validation gate before persistence.

    The individual problems are available as :attr:`errors`.
    """

    exit_code = EXIT_SCHEMA_INVALID

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = list(errors or [])


class ConfigError(ShapecliError):
    """Raised for configuration problems (invalid JSON, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
