"""Canonical data shapes shared across all openapi2ts modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- validated with Pydantic and loaded from the
project config file or CLI flags:
    :class:`GenerateConfig`.

**Loader models** -- produced by :func:`~openapi2ts.parser.loader.load`:
    :class:`Hint`, :class:`Subschema`, :class:`DiscriminatorObject`,
    :class:`ParameterLocation`.

**Transform context** -- threaded through every transformer call:
    :class:`GlobalContext` and :class:`TransformSchemaObjectOptions`. Both
    are frozen dataclasses; a recursive descent receives a copy with a new
    ``indent_lv`` instead of mutating the caller's value.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Loader models ---


class Hint(str, enum.Enum):
    """The kind of OpenAPI construct a document (or a path inside one) denotes.

    Every loaded document is tagged with a hint so the generator knows which
    transformer renders it. The root document is always :attr:`OPENAPI3`.
    """

    OPENAPI3 = "OpenAPI3"
    PATH_ITEM = "PathItemObject"
    OPERATION = "OperationObject"
    PARAMETER = "ParameterObject"
    REQUEST_BODY = "RequestBodyObject"
    RESPONSE = "ResponseObject"
    MEDIA_TYPE = "MediaTypeObject"
    HEADER = "HeaderObject"
    SCHEMA = "SchemaObject"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field.

    Declaration order is the order parameter groups are rendered in.
    """

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"


@dataclass
class Subschema:
    """A parsed document tagged with the construct kind its root represents.

    ``schema`` is the parsed JSON/YAML value itself (not a copy); the loader
    rewrites ``$ref`` strings inside it in place.
    """

    hint: Hint
    schema: Any


class DiscriminatorObject(BaseModel):
    """An OpenAPI *Discriminator Object* registered by the loader.

    Example::

        DiscriminatorObject.model_validate(
            {"propertyName": "petType", "mapping": {"cat": "#/components/schemas/Cat"}}
        )
    """

    model_config = ConfigDict(populate_by_name=True)

    property_name: str = Field(alias="propertyName")
    mapping: Optional[dict[str, str]] = None


@dataclass(frozen=True)
class ParameterRef:
    """Where a component parameter lives and whether it is required.

    Lets the operation transformer place ``$ref`` parameters in the right
    location group without re-reading the referenced document.
    """

    location: str
    required: bool = False


# --- Transform context ---


@dataclass(frozen=True)
class GlobalContext:
    """Per-invocation settings threaded through every transformer call.

    Created once by :func:`~openapi2ts.generator.openapi_ts`. The
    ``discriminators``, ``operations`` and ``parameter_locations`` mappings
    are shared between all copies; ``operations`` is the only one written to
    during transformation (path items hoist operations with an
    ``operationId`` into it).
    """

    additional_properties: bool = False
    alphabetize: bool = False
    default_non_nullable: bool = False
    immutable_types: bool = False
    support_array_length: bool = False
    path_params_as_types: bool = False
    discriminators: dict[str, DiscriminatorObject] = field(default_factory=dict)
    operations: dict[str, str] = field(default_factory=dict)
    parameter_locations: dict[str, ParameterRef] = field(default_factory=dict)
    indent_lv: int = 0
    transform: Optional[Callable[[Any, TransformSchemaObjectOptions], Optional[str]]] = None
    post_transform: Optional[Callable[[str, TransformSchemaObjectOptions], Optional[str]]] = None

    def with_indent(self, indent_lv: int) -> GlobalContext:
        """Return a copy of this context at a different indentation depth."""
        return replace(self, indent_lv=indent_lv)


@dataclass(frozen=True)
class TransformSchemaObjectOptions:
    """Arguments passed to every transformer and to the user hooks.

    ``path`` is the JSON-pointer location of the node being rendered, e.g.
    ``#/components/schemas/Pet``.
    """

    path: str
    ctx: GlobalContext


# --- Configuration models ---


class GenerateConfig(BaseModel):
    """Options for one generation run.

    Resolved by :func:`~openapi2ts.config.resolve_config` from CLI flags,
    environment variables and the project config file. See
    :func:`~openapi2ts.generator.openapi_ts` for how each field is used.
    """

    additional_properties: bool = Field(
        default=False, description="Allow arbitrary properties on every object"
    )
    alphabetize: bool = Field(
        default=False, description="Sort object members alphabetically"
    )
    default_non_nullable: bool = Field(
        default=False, description="Treat optional properties with a default as required"
    )
    immutable_types: bool = Field(
        default=False, description="Mark every member and array readonly"
    )
    support_array_length: bool = Field(
        default=False, description="Render minItems/maxItems as tuples"
    )
    path_params_as_types: bool = Field(
        default=False, description="Render path keys as template literal types"
    )
    export_type: bool = Field(
        default=False, description="Use 'export type' instead of 'export interface'"
    )
    auth: Optional[str] = Field(
        default=None, description="Authorization header value for remote schemas"
    )
    http_headers: dict[str, Any] = Field(
        default_factory=dict, description="Extra headers sent when fetching remote schemas"
    )
    http_method: str = Field(
        default="GET", description="HTTP method used to fetch remote schemas"
    )
    comment_header: Optional[str] = Field(
        default=None, description="Replace the generated file banner"
    )
    inject: Optional[str] = Field(
        default=None, description="Arbitrary TypeScript injected after the banner"
    )
    output: Optional[str] = Field(
        default=None, description="Output file path (stdout when unset)"
    )
