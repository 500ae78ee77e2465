"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~shapecli.exceptions.ShapecliError` subclass.

Example::

    $ shapecli validate build/s3.json
    $ echo $?
    8   # EXIT_SCHEMA_INVALID -- the schema failed validation
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_MODEL_PARSE_ERROR = 7
"""The service model could not be read or parsed."""

EXIT_SCHEMA_INVALID = 8
"""A generated or loaded service schema failed validation."""
