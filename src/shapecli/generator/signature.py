"""Assemble command signatures from canonical operations and render them.

:func:`assemble_signature` turns one :class:`~shapecli.models.Operation`
into a :class:`~shapecli.models.Signature`; :func:`render_signature` turns
that into host-shell source text.

**Parameter order** is fixed:

* Required input members first, in declared order, as positional
  parameters named with :func:`~shapecli.naming.to_identifier`.
* Optional members next, in declared order, as ``--kebab-case`` named
  parameters.  Optional booleans become bare flags with no type annotation.

**Completion hints.**  An enum-typed parameter gets a *static* hint with its
choices.  A parameter whose name matches a known live-resource pattern
(``Bucket``, ``FunctionName``, ``LogGroupName``, ...) or a configured
pattern gets a *dynamic* hint naming the resource; the runtime performs the
lookup.

**Return type.**  ``nothing`` for operations without an output or with a
memberless one.  When the output wraps a single data list (or the
pagination ``result_key`` names one) the list's type is returned and the
member name recorded as ``unwrap_key``.  Otherwise the output's mapped type.

**Degradation.**  An input that is not a structure yields a single
``...args: any`` rest parameter and an explanatory comment.  Nothing here
raises on bad model data.

Example::

    from shapecli.generator.signature import assemble_signature, render_signature

    sig = assemble_signature(op, service="s3")
    print(render_signature(sig))
"""

from __future__ import annotations

import json
import logging
import re
from typing import Optional

from shapecli.models import (
    AnyShape,
    CompletionHint,
    ErrorDescriptor,
    GeneratorConfig,
    ListShape,
    Operation,
    PaginationDescriptor,
    ShapeMember,
    Signature,
    SignatureParameter,
    StructureShape,
    TargetType,
    TypeContext,
    TypeKind,
)
from shapecli.naming import strip_html, summarize, to_identifier, to_kebab_case
from shapecli.generator.type_mapper import map_type

logger = logging.getLogger(__name__)

REST_PARAMETER = "args"

DYNAMIC_RESOURCE_PATTERNS: tuple[tuple[str, str], ...] = (
    (r"bucket(name)?", "bucket"),
    (r"functionname", "function"),
    (r"loggroupname", "log-group"),
    (r"queue(url|name)", "queue"),
    (r"tablename", "table"),
    (r"stackname", "stack"),
    (r"rolename", "role"),
    (r"cluster(name|identifier)?", "cluster"),
    (r"instanceids?", "instance"),
    (r"keyid", "key"),
    (r"secretid", "secret"),
    (r"topicarn", "topic"),
    (r"dbinstanceidentifier", "db-instance"),
)
"""``(regex, resource)`` pairs matched in full against the compacted,
lowercased member name."""

# Output members that describe paging rather than data.
_METADATA_MEMBERS = frozenset(
    {"nexttoken", "marker", "nextmarker", "istruncated", "continuationtoken", "nextcontinuationtoken"}
)
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")
_BARE_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def assemble_signature(
    operation: Operation,
    *,
    service: str,
    pagination: Optional[PaginationDescriptor] = None,
    errors: Optional[list[ErrorDescriptor]] = None,
    config: Optional[GeneratorConfig] = None,
) -> Signature:
    """Build the signature for *operation*.

    Args:
        operation: The canonical operation with resolved shapes.
        service: CLI-facing service name, the second word of the command.
        pagination: The operation's pagination descriptor, if known.
        errors: The service's error descriptors; the ones this operation
            declares and that are retryable are listed in a comment.
        config: Generator settings (command prefix, dynamic completion
            patterns, output unwrapping).

    Returns:
        The assembled :class:`~shapecli.models.Signature`.
    """
    cfg = config or GeneratorConfig()
    page = pagination or PaginationDescriptor()
    comments: list[str] = []

    if isinstance(operation.input, StructureShape):
        parameters = _build_parameters(operation.input, service, cfg, comments)
    else:
        reason = _reason_for(operation.input) or "input is not a structure"
        logger.debug("Operation %s: %s; accepting any arguments", operation.original_name, reason)
        comments.append(f"input shape could not be resolved ({reason}); accepting any arguments")
        parameters = [
            SignatureParameter(
                name=REST_PARAMETER,
                original_name="",
                type=TargetType(kind=TypeKind.ANY, note=reason),
                rest=True,
            )
        ]

    return_type, unwrap_key = _return_type(operation, page, cfg)
    if return_type.note:
        comments.append(f"returns {return_type.render()}: {return_type.note}")
    if page.paginated:
        comments.append(f"paginated ({page.source or 'explicit'})")

    retryable = _retryable_errors(operation.errors, errors)
    if retryable:
        comments.append("retryable errors: " + ", ".join(retryable))

    return Signature(
        command=f"{cfg.command_prefix} {service} {operation.name}",
        operation=operation.name,
        original_name=operation.original_name,
        service=service,
        parameters=parameters,
        return_type=return_type,
        documentation=summarize(operation.documentation),
        comments=comments,
        deprecated=operation.deprecated,
        deprecation_message=operation.deprecation_message,
        pagination=page,
        errors=list(operation.errors),
        unwrap_key=unwrap_key,
    )


def completion_for(
    member_name: str,
    target: TargetType,
    *,
    service: str,
    config: Optional[GeneratorConfig] = None,
) -> Optional[CompletionHint]:
    """Return the completion hint for a parameter, or ``None``.

    Enum choices win over name patterns.  Configured patterns
    (``GeneratorConfig.dynamic_completions``) are tried before the built-in
    :data:`DYNAMIC_RESOURCE_PATTERNS`.
    """
    if target.kind == TypeKind.CHOICE and target.choices:
        return CompletionHint(kind="static", choices=list(target.choices))

    cfg = config or GeneratorConfig()
    for pattern, resource in cfg.dynamic_completions.items():
        if re.search(pattern, member_name, re.IGNORECASE):
            return CompletionHint(kind="dynamic", resource=resource, service=service)

    compact = _compact(member_name)
    for pattern, resource in DYNAMIC_RESOURCE_PATTERNS:
        if re.fullmatch(pattern, compact):
            return CompletionHint(kind="dynamic", resource=resource, service=service)
    return None


# ---------------------------------------------------------------------------
# Assembly helpers
# ---------------------------------------------------------------------------


def _build_parameters(
    shape: StructureShape,
    service: str,
    cfg: GeneratorConfig,
    comments: list[str],
) -> list[SignatureParameter]:
    required = [m for m in shape.members if m.required]
    optional = [m for m in shape.members if not m.required]

    parameters: list[SignatureParameter] = []
    taken: set[str] = set()
    for member in required:
        parameters.append(_parameter(member, True, service, cfg, taken, comments))
    for member in optional:
        parameters.append(_parameter(member, False, service, cfg, taken, comments))
    return parameters


def _parameter(
    member: ShapeMember,
    required: bool,
    service: str,
    cfg: GeneratorConfig,
    taken: set[str],
    comments: list[str],
) -> SignatureParameter:
    target = map_type(member.shape, TypeContext(field_name=member.name))
    base = to_identifier(member.name) if required else (to_kebab_case(member.name) or "param")
    name = _unique(base, taken, "_" if required else "-")
    if target.note:
        comments.append(f"{name}: {target.note}")

    return SignatureParameter(
        name=name,
        original_name=member.name,
        type=target,
        required=required,
        positional=required,
        flag=not required and target.kind == TypeKind.BOOL,
        completion=completion_for(member.name, target, service=service, config=cfg),
        documentation=summarize(member.documentation or member.shape.documentation),
        deprecated=member.deprecated,
        deprecation_message=member.deprecation_message,
    )


def _unique(base: str, taken: set[str], separator: str) -> str:
    # Flags and positionals share one variable namespace ("--max-keys" is $max_keys).
    name = base
    counter = 2
    while name.replace("-", "_") in taken:
        name = f"{base}{separator}{counter}"
        counter += 1
    taken.add(name.replace("-", "_"))
    return name


def _return_type(
    operation: Operation,
    pagination: PaginationDescriptor,
    cfg: GeneratorConfig,
) -> tuple[TargetType, Optional[str]]:
    output = operation.output
    if operation.output_shape is None:
        return TargetType(kind=TypeKind.NOTHING), None
    if isinstance(output, StructureShape) and not output.members and not output.self_referencing:
        return TargetType(kind=TypeKind.NOTHING), None

    if cfg.unwrap_list_outputs and isinstance(output, StructureShape) and not output.self_referencing:
        key = _data_list_member(output, pagination)
        if key is not None:
            member = output.get_member(key)
            if member is not None:
                return map_type(member.shape, TypeContext(field_name=member.name)), key

    return map_type(output), None


def _data_list_member(output: StructureShape, pagination: PaginationDescriptor) -> Optional[str]:
    """Name of the one list member holding the output's data, if unambiguous."""
    result_key = pagination.result_key
    if isinstance(result_key, str):
        member = output.get_member(result_key)
        if member is not None and isinstance(member.shape, ListShape):
            return result_key

    lists = [
        m.name
        for m in output.members
        if isinstance(m.shape, ListShape) and _compact(m.name) not in _METADATA_MEMBERS
    ]
    return lists[0] if len(lists) == 1 else None


def _retryable_errors(
    names: list[str],
    descriptors: Optional[list[ErrorDescriptor]],
) -> list[str]:
    if not descriptors or not names:
        return []
    by_name = {d.name: d for d in descriptors}
    return [n for n in names if n in by_name and by_name[n].retryable]


def _reason_for(shape: object) -> str:
    if isinstance(shape, AnyShape):
        return shape.reason
    return ""


def _compact(name: str) -> str:
    return _NON_ALNUM_RE.sub("", name.lower())


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def render_signature(signature: Signature, *, dispatcher: str = "aws-dispatch") -> str:
    """Render *signature* as a complete host-shell command definition.

    The body forwards the parameters as a record keyed by original member
    names to *dispatcher*, together with the service and the original
    operation name.

    Example output::

        # List the objects in a bucket.
        export def "aws s3 list-objects" [
            bucket: string@"nu-complete aws s3 bucket"
            --max-keys: int  # Sets the maximum number of keys returned.
        ]: nothing -> table {
            aws-dispatch s3 ListObjects {Bucket: $bucket, MaxKeys: $max_keys}
        }
    """
    prefix = signature.command.split(" ", 1)[0]
    lines: list[str] = []
    if signature.documentation:
        lines.append(f"# {signature.documentation}")
    if signature.deprecated:
        lines.append(f"# {_deprecation_text(signature.deprecation_message)}")
    lines.extend(f"# NOTE: {comment}" for comment in signature.comments)

    lines.append(f"export def {_quote(signature.command)} [")
    lines.extend(f"    {_render_parameter(p, prefix)}" for p in signature.parameters)
    lines.append(f"]: nothing -> {signature.return_type.render()} {{")
    lines.append(f"    {_render_call(signature, dispatcher)}")
    lines.append("}")
    return "\n".join(lines)


def completion_command(prefix: str, service: str, resource: str) -> str:
    """Name of the completer command for a dynamic *resource*."""
    return f"nu-complete {prefix} {service} {resource}"


def _render_parameter(param: SignatureParameter, prefix: str) -> str:
    if param.rest:
        text = f"...{param.name}: {param.type.render()}"
    elif param.flag:
        text = f"--{param.name}"
    elif param.positional:
        text = f"{param.name}: {param.type.render()}"
    else:
        text = f"--{param.name}: {param.type.render()}"

    hint = param.completion
    if hint is not None and not param.flag:
        if hint.kind == "static":
            text += "@[" + " ".join(_quote(choice) for choice in hint.choices) + "]"
        else:
            command = completion_command(prefix, hint.service or "", hint.resource or param.name)
            text += "@" + _quote(command)

    if param.deprecated:
        return f"{text}  # {_deprecation_text(param.deprecation_message)}"
    if param.documentation:
        return f"{text}  # {param.documentation}"
    return text


def _deprecation_text(message: Optional[str]) -> str:
    # Rendered inside a one-line comment.
    text = strip_html(message)
    return f"DEPRECATED: {text}" if text else "DEPRECATED"


def _render_call(signature: Signature, dispatcher: str) -> str:
    head = f"{dispatcher} {signature.service} {signature.original_name}"
    if any(p.rest for p in signature.parameters):
        return f"{head} ...${REST_PARAMETER}"
    fields = ", ".join(
        f"{_record_key(p.original_name)}: ${p.name.replace('-', '_')}"
        for p in signature.parameters
    )
    return f"{head} {{{fields}}}"


def _record_key(name: str) -> str:
    return name if _BARE_KEY_RE.match(name) else _quote(name)


def _quote(text: str) -> str:
    return json.dumps(text)
