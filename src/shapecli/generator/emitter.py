"""Render a complete host-shell module from a list of signatures.

The module is produced with Jinja2 from ``generator/templates/module.nu.j2``.
It contains one completer definition per distinct live resource referenced
by a dynamic completion hint, followed by every command definition as
rendered by :func:`~shapecli.generator.signature.render_signature`.  Each
command body forwards its arguments to the configured dispatcher.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from shapecli import __version__
from shapecli.config import atomic_write
from shapecli.models import GeneratorConfig, Signature
from shapecli.generator.signature import completion_command, render_signature

TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``generator/templates/``)."""

MODULE_TEMPLATE = "module.nu.j2"


def render_module(
    signatures: list[Signature],
    *,
    service: str,
    config: Optional[GeneratorConfig] = None,
    title: Optional[str] = None,
) -> str:
    """Render the module source text for *signatures*.

    Args:
        signatures: Signatures in the order they should appear.
        service: CLI-facing service name.
        config: Generator settings; supplies the command prefix and the
            dispatcher command.
        title: Header line; defaults to ``"<prefix> <service> commands"``.

    Returns:
        The module text, ending with a newline.
    """
    cfg = config or GeneratorConfig()
    context = {
        "title": title or f"{cfg.command_prefix} {service} commands",
        "version": __version__,
        "service": service,
        "dispatcher": cfg.dispatcher,
        "completers": _completers(signatures, cfg.command_prefix, service),
        "definitions": [render_signature(s, dispatcher=cfg.dispatcher) for s in signatures],
    }
    template = _create_jinja_env().get_template(MODULE_TEMPLATE)
    return template.render(**context)


def write_module(
    signatures: list[Signature],
    output_dir: str | Path,
    *,
    service: str,
    config: Optional[GeneratorConfig] = None,
) -> Path:
    """Render the module and write it atomically to ``<output_dir>/<service>.nu``.

    Returns:
        The path of the written module.
    """
    target = Path(output_dir) / f"{service}.nu"
    atomic_write(target, render_module(signatures, service=service, config=config))
    return target


def _create_jinja_env() -> Environment:
    """Create the Jinja2 environment for module templates.

    Autoescape is disabled for ``.nu.j2`` files, which produce shell source,
    not HTML.
    """
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(disabled_extensions=("nu.j2",)),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def _completers(signatures: list[Signature], prefix: str, service: str) -> list[dict[str, str]]:
    """Distinct dynamic completers, in order of first use."""
    seen: dict[str, dict[str, str]] = {}
    for signature in signatures:
        for param in signature.parameters:
            hint = param.completion
            if hint is None or hint.kind != "dynamic" or not hint.resource:
                continue
            command = completion_command(prefix, hint.service or service, hint.resource)
            seen.setdefault(command, {"command": command, "resource": hint.resource})
    return list(seen.values())
