"""Render an OpenAPI *Operation Object*.

The result is an object type with up to three members::

    {
      parameters: {
        query?: { limit?: number };
        path: { id: string };
      };
      requestBody?: { content: { "application/json": ... } };
      responses: { 200: { ... } };
    }

Inline parameters are grouped by their ``in`` location. Referenced
parameters are looked up in ``ctx.parameter_locations`` and rendered as a
``Pick`` of the component collection they live in.
"""

from __future__ import annotations

from typing import Any

from openapi2ts.models import ParameterLocation, ParameterRef, TransformSchemaObjectOptions
from openapi2ts.parser.refs import make_ts_index, parse_ts_index
from openapi2ts.transform.parameter_object import transform_parameter_object
from openapi2ts.transform.request_body_object import transform_request_body_object
from openapi2ts.transform.response_object import transform_response_object
from openapi2ts.transform.schema_object import transform_schema_object
from openapi2ts.typescript import (
    esc_obj_key,
    get_entries,
    get_schema_object_comment,
    indent,
    ts_intersection_of,
    ts_non_nullable,
    ts_optional_property,
    ts_partial,
    ts_pick,
    ts_readonly,
)


def transform_operation_object(
    operation_object: dict[str, Any],
    options: TransformSchemaObjectOptions,
    wrap_object: bool = True,
) -> str:
    """Render *operation_object*.

    Args:
        operation_object: The operation (or, for path-level parameters, a
            dict holding only ``parameters``).
        options: Node path and context.
        wrap_object: When ``False`` the surrounding braces are left out so
            the members can be spliced into an enclosing object.
    """
    path, ctx = options.path, options.ctx
    indent_lv = ctx.indent_lv + 1
    output = ["{"] if wrap_object else []

    c = get_schema_object_comment(operation_object, indent_lv)
    if c:
        output.append(indent(c, indent_lv))

    parameters = operation_object.get("parameters")
    if isinstance(parameters, list) and parameters:
        output.extend(_transform_parameters(parameters, options, indent_lv))

    request_body = operation_object.get("requestBody")
    if isinstance(request_body, dict) and request_body:
        c = get_schema_object_comment(request_body, indent_lv)
        if c:
            output.append(indent(c, indent_lv))
        key = "requestBody"
        if ctx.immutable_types:
            key = ts_readonly(key)
        if "$ref" in request_body:
            body_type = transform_schema_object(request_body, options)
        else:
            if not request_body.get("required"):
                key = ts_optional_property(key)
            body_type = transform_request_body_object(
                request_body,
                TransformSchemaObjectOptions(path=f"{path}/requestBody", ctx=ctx.with_indent(indent_lv)),
            )
        output.append(indent(f"{key}: {body_type};", indent_lv))

    responses = operation_object.get("responses")
    if isinstance(responses, dict):
        output.append(indent("responses: {", indent_lv))
        response_lv = indent_lv + 1
        for code, response_object in get_entries(responses, ctx.alphabetize):
            if code.startswith("x-") or not isinstance(response_object, dict):
                continue
            c = get_schema_object_comment(response_object, response_lv)
            if c:
                output.append(indent(c, response_lv))
            response_options = TransformSchemaObjectOptions(
                path=f"{path}/responses/{code}", ctx=ctx.with_indent(response_lv)
            )
            if "$ref" in response_object:
                response_type = transform_schema_object(response_object, response_options)
            else:
                response_type = transform_response_object(response_object, response_options)
            output.append(indent(f"{esc_obj_key(code)}: {response_type};", response_lv))
        output.append(indent("};", indent_lv))

    if wrap_object:
        output.append(indent("}", ctx.indent_lv))
    return "\n".join(output)


def _transform_parameters(
    parameters: list[Any],
    options: TransformSchemaObjectOptions,
    indent_lv: int,
) -> list[str]:
    path, ctx = options.path, options.ctx
    group_lv = indent_lv + 1
    member_lv = group_lv + 1
    groups: list[str] = []
    all_optional = True

    for location in ParameterLocation:
        inline: list[str] = []
        # (root index, required) -> picked keys
        refs: dict[tuple[str, bool], list[str]] = {}
        group_required = False

        for p in parameters:
            if not isinstance(p, dict):
                continue
            if "in" in p:
                if p["in"] != location.value:
                    continue
                key = esc_obj_key(str(p.get("name", "")))
                if location is ParameterLocation.PATH or p.get("required"):
                    group_required = True
                else:
                    key = ts_optional_property(key)
                if ctx.immutable_types:
                    key = ts_readonly(key)
                c = get_schema_object_comment(p, member_lv)
                if c:
                    inline.append(indent(c, member_lv))
                parameter_type = transform_parameter_object(
                    p,
                    TransformSchemaObjectOptions(
                        path=f"{path}/parameters/{p.get('name')}", ctx=ctx.with_indent(member_lv)
                    ),
                )
                inline.append(indent(f"{key}: {parameter_type};", member_lv))
            elif isinstance(p.get("$ref"), str):
                parts = parse_ts_index(p["$ref"])
                if "parameters" not in parts or len(parts) < 2:
                    continue
                found = ctx.parameter_locations.get(p["$ref"], ParameterRef(ParameterLocation.QUERY.value))
                if found.location != location.value:
                    continue
                required = location is ParameterLocation.PATH or found.required
                group_required = group_required or required
                refs.setdefault((make_ts_index(parts[:-1]), required), []).append(parts[-1])

        if not inline and not refs:
            continue

        members: list[str] = []
        if inline:
            members.append("{\n" + "\n".join(inline) + "\n" + indent("}", group_lv))
        for (root, required), keys in refs.items():
            if required:
                members.append(ts_pick(root, keys))
            else:
                members.append(ts_partial(ts_pick(ts_non_nullable(root), keys)))

        key = location.value
        if group_required:
            all_optional = False
        else:
            key = ts_optional_property(key)
        if ctx.immutable_types:
            key = ts_readonly(key)
        groups.append(indent(f"{key}: {ts_intersection_of(*members)};", group_lv))

    if not groups:
        return []
    key = "parameters?" if all_optional else "parameters"
    if ctx.immutable_types:
        key = ts_readonly(key)
    return [indent(f"{key}: {{", indent_lv), *groups, indent("};", indent_lv)]
