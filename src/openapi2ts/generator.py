"""Assemble the generated TypeScript source.

:func:`openapi_ts` is the library entry point: it loads the document graph,
renders the root document's ``paths``, ``webhooks`` and ``components``,
renders every other loaded document under ``external``, and finishes with
the hoisted ``operations``. :func:`generate` is the blocking wrapper used by
the CLI.

The result always declares the same five exports, so consumers can index
``components["schemas"]`` or ``external["common.yaml"]`` without checking
whether the source document declared them::

    export interface paths { ... }
    export type webhooks = Record<string, never>;
    export interface components { ... }
    export type external = Record<string, never>;
    export interface operations { ... }
"""

from __future__ import annotations

import asyncio
import copy
from pathlib import PurePath
from typing import Any, Callable, Optional

from openapi2ts.exceptions import RefResolutionError
from openapi2ts.models import (
    GenerateConfig,
    GlobalContext,
    Hint,
    ParameterLocation,
    ParameterRef,
    Subschema,
    TransformSchemaObjectOptions,
)
from openapi2ts.output import debug
from openapi2ts.parser.loader import VIRTUAL_JSON_URL, Fetch, LoadOptions, default_fetch, load, resolve_schema
from openapi2ts.parser.refs import make_ts_index
from openapi2ts.transform import (
    transform_header_object,
    transform_media_type_object,
    transform_operation_object,
    transform_parameter_object,
    transform_path_item_object,
    transform_request_body_object,
    transform_response_object,
    transform_schema,
    transform_schema_object,
)
from openapi2ts.typescript import ONE_OF_HELPERS, esc_obj_key, esc_str, get_entries, indent

COMMENT_HEADER = """/**
 * This file was auto-generated by openapi2ts.
 * Do not make direct changes to the file.
 */
"""

_ROOT_SECTIONS = ("paths", "webhooks", "components")
_ROOT_KEYS = frozenset(("openapi", *_ROOT_SECTIONS))

_SUBSCHEMA_TRANSFORMERS: dict[Hint, Callable[[Any, TransformSchemaObjectOptions], str]] = {
    Hint.PATH_ITEM: transform_path_item_object,
    Hint.OPERATION: transform_operation_object,
    Hint.PARAMETER: transform_parameter_object,
    Hint.REQUEST_BODY: transform_request_body_object,
    Hint.RESPONSE: transform_response_object,
    Hint.MEDIA_TYPE: transform_media_type_object,
    Hint.HEADER: transform_header_object,
    Hint.SCHEMA: transform_schema_object,
}


def _looks_like_root(document: Any) -> bool:
    """Whether *document* is shaped like a whole API description."""
    return isinstance(document, dict) and bool(_ROOT_KEYS & document.keys())


def _collect_parameter_locations(schemas: dict[str, Subschema]) -> dict[str, ParameterRef]:
    """Index every ``components.parameters`` entry of every loaded document."""
    locations: dict[str, ParameterRef] = {}
    for subschema_id, subschema in schemas.items():
        document = subschema.schema
        if not isinstance(document, dict):
            continue
        parameters = (document.get("components") or {}).get("parameters")
        if not isinstance(parameters, dict):
            continue
        prefix = [] if subschema_id == "." else ["external", subschema_id]
        for name, p in parameters.items():
            if not isinstance(p, dict) or not isinstance(p.get("in"), str):
                continue
            location = p["in"]
            required = location == ParameterLocation.PATH.value or bool(p.get("required"))
            index = make_ts_index([*prefix, "components", "parameters", name])
            locations[index] = ParameterRef(location=location, required=required)
    return locations


def _export(name: str, body: str, export_type: bool) -> str:
    if not body:
        return f"export type {name} = Record<string, never>;"
    if export_type:
        return f"export type {name} = {body};"
    return f"export interface {name} {body}"


def _render_external(schemas: dict[str, Subschema], ctx: GlobalContext, export_type: bool) -> list[str]:
    external_ids = [k for k, _ in get_entries(dict.fromkeys(k for k in schemas if k != "."), alphabetize=True)]
    if not external_ids:
        return ["export type external = Record<string, never>;", ""]

    output = ["export type external = {" if export_type else "export interface external {"]
    indent_lv = 1
    for subschema_id in external_ids:
        subschema = schemas[subschema_id]
        key = esc_str(subschema_id)

        if subschema.hint == Hint.OPENAPI3 or _looks_like_root(subschema.schema):
            sections = transform_schema(subschema.schema, ctx.with_indent(indent_lv + 1))
            output.append(indent(f"{key}: {{", indent_lv))
            for section, body in sections.items():
                output.append(indent(f"{esc_obj_key(section)}: {body or 'Record<string, never>'};", indent_lv + 1))
            output.append(indent("};", indent_lv))
            continue

        transformer = _SUBSCHEMA_TRANSFORMERS.get(subschema.hint)
        if transformer is None:
            raise RefResolutionError(
                f'Could not resolve subschema {subschema_id}. Unknown type "{subschema.hint}".'
            )
        rendered = transformer(
            subschema.schema,
            TransformSchemaObjectOptions(path=f"{subschema_id}#", ctx=ctx.with_indent(indent_lv)),
        )
        output.append(indent(f"{key}: {rendered};", indent_lv))

    output.append("};" if export_type else "}")
    output.append("")
    return output


def _render_operations(operations: dict[str, str], export_type: bool) -> list[str]:
    if not operations:
        return ["export type operations = Record<string, never>;", ""]
    output = ["export type operations = {" if export_type else "export interface operations {", ""]
    for operation_id, operation_type in operations.items():
        output.append(indent(f"{esc_obj_key(operation_id)}: {operation_type};", 1))
    output.append("};" if export_type else "}")
    return output


async def openapi_ts(
    schema: Any,
    config: Optional[GenerateConfig] = None,
    *,
    transform: Optional[Callable[[Any, TransformSchemaObjectOptions], Optional[str]]] = None,
    post_transform: Optional[Callable[[str, TransformSchemaObjectOptions], Optional[str]]] = None,
    fetch: Optional[Fetch] = None,
) -> str:
    """Generate TypeScript declarations for *schema*.

    Args:
        schema: A filesystem path, ``file:``/``http(s):`` URL, readable
            stream, or parsed dict. Dicts are copied, never modified.
        config: Generation options; defaults when ``None``.
        transform: Hook called for every schema object before the default
            rendering; a non-empty return value is used instead.
        post_transform: Hook called with every rendered schema type; a
            non-empty return value replaces it.
        fetch: Coroutine used for remote documents (see
            :func:`~openapi2ts.parser.loader.default_fetch`).

    Returns:
        The complete TypeScript source text.

    Raises:
        Openapi2tsError: Any loader failure (see :mod:`openapi2ts.exceptions`).
    """
    config = config or GenerateConfig()

    if isinstance(schema, (str, PurePath)):
        root = resolve_schema(str(schema))
        locator: Any = root
    elif isinstance(schema, dict):
        root = VIRTUAL_JSON_URL
        locator = copy.deepcopy(schema)
    else:
        root = VIRTUAL_JSON_URL
        locator = schema

    options = LoadOptions(
        root_url=root,
        auth=config.auth,
        http_headers=config.http_headers,
        http_method=config.http_method,
        fetch=fetch or default_fetch,
    )
    schemas = await load(locator, options)
    debug(f"Loaded {len(schemas)} document(s) from {root}")

    ctx = GlobalContext(
        additional_properties=config.additional_properties,
        alphabetize=config.alphabetize,
        default_non_nullable=config.default_non_nullable,
        immutable_types=config.immutable_types,
        support_array_length=config.support_array_length,
        path_params_as_types=config.path_params_as_types,
        discriminators=options.discriminators,
        parameter_locations=_collect_parameter_locations(schemas),
        transform=transform,
        post_transform=post_transform,
    )

    output: list[str] = [config.comment_header if config.comment_header is not None else COMMENT_HEADER]
    if config.inject:
        output.append(config.inject)

    root_types = transform_schema(schemas["."].schema, ctx)
    for section in _ROOT_SECTIONS:
        output.append(_export(section, root_types.get(section, ""), config.export_type))
        output.append("")

    output.extend(_render_external(schemas, ctx, config.export_type))
    output.extend(_render_operations(ctx.operations, config.export_type))

    if "OneOf" in "\n".join(output):
        output[1:1] = ONE_OF_HELPERS
    return "\n".join(output)


def generate(
    schema: Any,
    config: Optional[GenerateConfig] = None,
    *,
    transform: Optional[Callable[[Any, TransformSchemaObjectOptions], Optional[str]]] = None,
    post_transform: Optional[Callable[[str, TransformSchemaObjectOptions], Optional[str]]] = None,
    fetch: Optional[Fetch] = None,
) -> str:
    """Blocking wrapper around :func:`openapi_ts`."""
    return asyncio.run(
        openapi_ts(schema, config, transform=transform, post_transform=post_transform, fetch=fetch)
    )
