"""Canonical Pydantic models shared across all shapecli modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`GeneratorConfig`, :class:`OutputConfig`, and :class:`GlobalConfig`.

**Intermediate representation** -- produced by the parser and inference
passes:
    the :data:`ResolvedShape` tagged union (:class:`ScalarShape`,
    :class:`EnumShape`, :class:`StructureShape`, :class:`ListShape`,
    :class:`MapShape`, :class:`AnyShape`), :class:`ShapeMember`,
    :class:`ServiceMetadata`, :class:`Operation`,
    :class:`PaginationDescriptor`, :class:`ErrorDescriptor`, and
    :class:`Resource`.

**Generator output models** -- consumed by the renderer and persisted for the
runtime dispatcher:
    :class:`TargetType`, :class:`Column`, :class:`CompletionHint`,
    :class:`SignatureParameter`, :class:`Signature`,
    :class:`OperationRecord`, :class:`ServiceSchema`, and
    :class:`ValidationResult`.

Intermediate and output models are frozen: they are built once per operation
and never mutated afterwards, which is what allows operations to be processed
concurrently without shared mutable state.
"""

from __future__ import annotations

import enum
import re
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Configuration ---


class GeneratorConfig(BaseModel):
    """Settings that shape the generated signatures.

    Example::

        GeneratorConfig(command_prefix="aws", max_depth=12, workers=4)
    """

    command_prefix: str = Field(
        default="aws", description="First word of every generated command name"
    )
    max_depth: Optional[int] = Field(
        default=16,
        description="Maximum shape resolution depth (None for unbounded)",
    )
    workers: int = Field(
        default=1, description="Worker threads for batch signature generation"
    )
    dispatcher: str = Field(
        default="aws-dispatch",
        description="External command that generated bodies forward to",
    )
    unwrap_list_outputs: bool = Field(
        default=True,
        description="Return the single data list of an output instead of the wrapper record",
    )
    dynamic_completions: dict[str, str] = Field(
        default_factory=dict,
        description="Extra parameter-name regex -> live resource completion tag",
    )

    @field_validator("dynamic_completions")
    @classmethod
    def _check_patterns(cls, value: dict[str, str]) -> dict[str, str]:
        for pattern in value:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"invalid completion pattern {pattern!r}: {exc}") from exc
        return value


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/shapecli/config.json``.

    Loaded and saved by :func:`~shapecli.config.load_global_config` and
    :func:`~shapecli.config.save_global_config`. See
    :func:`~shapecli.config.resolve_config` for the full precedence chain.
    """

    output_dir: Optional[str] = Field(
        default=None, description="Directory for generated schemas and modules"
    )
    generator: GeneratorConfig = Field(default_factory=GeneratorConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Resolved shapes ---


class ShapeConstraints(BaseModel):
    """Value constraints declared on a raw shape (``min``, ``max``, ``pattern``, ``enum``)."""

    model_config = ConfigDict(frozen=True)

    min: Union[int, float, None] = None
    max: Union[int, float, None] = None
    pattern: Optional[str] = None
    enum: Optional[list[str]] = None


class _ShapeBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = Field(default=None, description="Shape name in the model")
    documentation: str = ""
    constraints: ShapeConstraints = Field(default_factory=ShapeConstraints)


class ScalarShape(_ShapeBase):
    """A primitive value: string, integer, long, float, double, boolean, timestamp, blob."""

    kind: Literal["scalar"] = "scalar"
    type_name: str


class EnumShape(_ShapeBase):
    """A string restricted to a fixed set of choices."""

    kind: Literal["enum"] = "enum"
    choices: list[str] = Field(default_factory=list)


class StructureShape(_ShapeBase):
    """A record with ordered, named members.

    ``self_referencing`` is set when a member graph below this structure
    refers back to it; such structures map to ``any`` rather than an
    unbounded record.
    """

    kind: Literal["structure"] = "structure"
    members: list[ShapeMember] = Field(default_factory=list)
    self_referencing: bool = False
    exception: bool = False

    def get_member(self, name: str) -> Optional[ShapeMember]:
        """Return the member called *name*, or ``None``."""
        for member in self.members:
            if member.name == name:
                return member
        return None


class ListShape(_ShapeBase):
    """A homogeneous sequence of ``member`` values."""

    kind: Literal["list"] = "list"
    member: ResolvedShape
    self_referencing: bool = False


class MapShape(_ShapeBase):
    """A mapping from ``key`` to ``value`` shapes."""

    kind: Literal["map"] = "map"
    key: ResolvedShape
    value: ResolvedShape
    self_referencing: bool = False


class AnyShape(_ShapeBase):
    """Terminal fallback for shapes that cannot (or must not) be expanded.

    Produced for cycles (``self_referencing``/``reference``), unions
    (``union``), dangling references, missing ``type`` fields, unsupported
    types, and depth limits. ``reason`` explains which.
    """

    kind: Literal["any"] = "any"
    reason: str = ""
    self_referencing: bool = False
    union: bool = False
    reference: Optional[str] = None


ResolvedShape = Annotated[
    Union[ScalarShape, EnumShape, StructureShape, ListShape, MapShape, AnyShape],
    Field(discriminator="kind"),
]
"""Closed set of resolved shape variants, discriminated on ``kind``."""


class ShapeMember(BaseModel):
    """One member of a :class:`StructureShape`, in declaration order."""

    model_config = ConfigDict(frozen=True)

    name: str
    shape: ResolvedShape
    required: bool = False
    documentation: str = ""
    deprecated: bool = False
    deprecation_message: Optional[str] = None
    location: Optional[str] = None
    location_name: Optional[str] = None


ShapeMember.model_rebuild()
StructureShape.model_rebuild()
ListShape.model_rebuild()
MapShape.model_rebuild()


# --- Operations and derived descriptors ---


class ServiceMetadata(BaseModel):
    """Service-level metadata from the model's ``metadata`` object."""

    model_config = ConfigDict(frozen=True)

    api_version: str = ""
    protocol: str = ""
    service_full_name: str = ""
    endpoint_prefix: str = ""
    signature_version: str = ""
    service_id: str = ""


class Operation(BaseModel):
    """A canonical operation, created once per raw operation entry.

    Sparse definitions are filled with fallbacks: ``POST``, ``/``, an empty
    structure for missing input/output shapes, no errors, and empty
    documentation.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    original_name: str
    http_method: str = "POST"
    http_uri: str = "/"
    input_shape: Optional[str] = None
    output_shape: Optional[str] = None
    input: ResolvedShape = Field(default_factory=StructureShape)
    output: ResolvedShape = Field(default_factory=StructureShape)
    errors: list[str] = Field(default_factory=list)
    documentation: str = ""
    deprecated: bool = False
    deprecation_message: Optional[str] = None


class PaginationDescriptor(BaseModel):
    """How an operation's output can be paged.

    Token and key fields hold either a single member name or, for explicit
    paginator configurations, the list given verbatim.
    """

    model_config = ConfigDict(frozen=True)

    paginated: bool = False
    input_token: Union[str, list[str], None] = None
    output_token: Union[str, list[str], None] = None
    limit_key: Optional[str] = None
    result_key: Union[str, list[str], None] = None
    source: Optional[Literal["explicit", "inferred"]] = None


class ErrorDescriptor(BaseModel):
    """An exception shape harvested from the model."""

    model_config = ConfigDict(frozen=True)

    name: str
    code: Optional[str] = None
    http_status: Optional[int] = None
    retryable: bool = False
    throttling: bool = False
    fault: Optional[Literal["client", "server"]] = None
    description: str = ""


class Resource(BaseModel):
    """A best-effort grouping of operations sharing a noun."""

    model_config = ConfigDict(frozen=True)

    name: str
    operations: list[str] = Field(default_factory=list)


# --- Generator output ---


class TypeKind(str, enum.Enum):
    """Target semantic types a shape can map to."""

    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    DATETIME = "datetime"
    BINARY = "binary"
    FILESIZE = "filesize"
    CHOICE = "choice"
    LIST = "list"
    RECORD = "record"
    TABLE = "table"
    ANY = "any"
    NOTHING = "nothing"


class TypeContext(BaseModel):
    """Context the type mapper uses for semantic heuristics.

    ``field_name`` is the enclosing member name (``"ContentLength"``);
    ``constraints`` are the member's constraints when they differ from the
    shape's own.
    """

    model_config = ConfigDict(frozen=True)

    field_name: Optional[str] = None
    constraints: Optional[ShapeConstraints] = None


class TargetType(BaseModel):
    """A mapped target type.

    ``element`` is set for lists, ``choices`` for choice strings, and
    ``note`` carries an explanation whenever the mapper fell back (cycles,
    unions, unresolvable shapes).
    """

    model_config = ConfigDict(frozen=True)

    kind: TypeKind
    element: Optional[TargetType] = None
    choices: list[str] = Field(default_factory=list)
    note: Optional[str] = None

    def render(self) -> str:
        """Return the host-language spelling of this type."""
        if self.kind == TypeKind.CHOICE:
            return "string"
        if self.kind == TypeKind.LIST and self.element is not None:
            return f"list<{self.element.render()}>"
        return self.kind.value


class Column(BaseModel):
    """One column of a flattened table."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: TargetType


class CompletionHint(BaseModel):
    """Tag telling the runtime which completion strategy applies to a parameter.

    ``static`` hints carry their ``choices``; ``dynamic`` hints name the live
    ``resource`` to enumerate at completion time.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["static", "dynamic"]
    choices: list[str] = Field(default_factory=list)
    resource: Optional[str] = None
    service: Optional[str] = None


class SignatureParameter(BaseModel):
    """One parameter of a generated command."""

    model_config = ConfigDict(frozen=True)

    name: str
    original_name: str
    type: TargetType
    required: bool = False
    positional: bool = False
    flag: bool = False
    rest: bool = False
    completion: Optional[CompletionHint] = None
    documentation: str = ""
    deprecated: bool = False
    deprecation_message: Optional[str] = None


class Signature(BaseModel):
    """The synthesized command signature for one operation."""

    model_config = ConfigDict(frozen=True)

    command: str
    operation: str
    original_name: str
    service: str
    parameters: list[SignatureParameter] = Field(default_factory=list)
    return_type: TargetType
    documentation: str = ""
    comments: list[str] = Field(default_factory=list)
    deprecated: bool = False
    deprecation_message: Optional[str] = None
    pagination: PaginationDescriptor = Field(default_factory=PaginationDescriptor)
    errors: list[str] = Field(default_factory=list)
    unwrap_key: Optional[str] = None


class OperationRecord(BaseModel):
    """Persisted form of an :class:`Operation` inside a :class:`ServiceSchema`."""

    name: str
    original_name: str
    http_method: str
    http_uri: str
    input_shape: Optional[str] = None
    output_shape: Optional[str] = None
    input_schema: Optional[ResolvedShape] = None
    output_schema: Optional[ResolvedShape] = None
    errors: list[str] = Field(default_factory=list)
    documentation: str = ""
    deprecated: bool = False
    deprecation_message: Optional[str] = None
    pagination: PaginationDescriptor = Field(default_factory=PaginationDescriptor)


class ServiceSchema(BaseModel):
    """Complete compiled representation of one service model.

    Persisted as ``<service>.json`` for the runtime dispatcher to load.

    See Also:
        :func:`~shapecli.schema.build_schema`: Builds an instance from a raw model.
        :func:`~shapecli.schema.validate_schema`: Validates the record form.
    """

    service: str
    operations: list[OperationRecord] = Field(default_factory=list)
    errors: list[ErrorDescriptor] = Field(default_factory=list)
    resources: list[Resource] = Field(default_factory=list)
    metadata: dict[str, str] = Field(default_factory=dict)
    generated_at: str
    schema_version: str
    extractor_version: str

    def to_record(self) -> dict[str, Any]:
        """Return the JSON-compatible record form of this schema."""
        return self.model_dump(mode="json")


class ValidationResult(BaseModel):
    """Outcome of :func:`~shapecli.schema.validate_schema`."""

    valid: bool
    errors: list[str] = Field(default_factory=list)
