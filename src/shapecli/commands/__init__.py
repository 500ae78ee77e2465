"""Built-in CLI sub-commands for shapecli.

This package groups the Typer command modules that form the CLI's command
tree:

* :mod:`~shapecli.commands.generate` -- ``generate``, ``signatures``,
  ``validate``, and ``example``, registered directly on the root app.
* :mod:`~shapecli.commands.inspect` -- read-only views of a model's
  operations, errors, resources, pagination, and output columns.
* :mod:`~shapecli.commands.config` -- view and modify global settings.

Multi-command groups export a :class:`typer.Typer` sub-application; single
commands are plain callbacks registered on the root app.
"""
