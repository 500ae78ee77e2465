"""shapecli -- Compile AWS-CLI-style service models into typed command signatures.

This package turns a botocore-style service description (``metadata``,
``operations``, ``shapes`` and optional ``pagination``) into a normalized,
cycle-safe intermediate representation and one Nushell command signature per
operation.

Typical workflow::

    shapecli generate s3/service-2.json      # write s3.json and s3.nu
    shapecli signatures s3/service-2.json    # print signatures to stdout

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the entire package.
    naming: Name conversion and documentation cleanup helpers.
    schema: Service schema assembly, persistence, and validation.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.4.0"
