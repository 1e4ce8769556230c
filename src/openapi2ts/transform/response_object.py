"""Render an OpenAPI *Response Object* as ``{ headers: {...}; content: {...} }``."""

from __future__ import annotations

from typing import Any

from openapi2ts.models import TransformSchemaObjectOptions
from openapi2ts.transform.header_object import transform_header_object
from openapi2ts.transform.media_type_object import transform_media_type_object
from openapi2ts.typescript import (
    esc_obj_key,
    esc_str,
    get_entries,
    get_schema_object_comment,
    indent,
    ts_optional_property,
    ts_readonly,
)


def transform_response_object(response_object: dict[str, Any], options: TransformSchemaObjectOptions) -> str:
    """Render a response.

    Headers are optional unless marked ``required``; ``$ref`` headers are
    emitted as their index. A response without ``content`` gets
    ``content: never`` so callers can still index it.
    """
    path, ctx = options.path, options.ctx
    indent_lv = ctx.indent_lv + 1
    member_lv = indent_lv + 1
    output = ["{"]

    headers = response_object.get("headers")
    if isinstance(headers, dict) and headers:
        output.append(indent("headers: {", indent_lv))
        for name, header_object in get_entries(headers, ctx.alphabetize):
            c = get_schema_object_comment(header_object, member_lv)
            if c:
                output.append(indent(c, member_lv))
            key = esc_obj_key(name)
            if ctx.immutable_types:
                key = ts_readonly(key)
            if "$ref" in header_object:
                output.append(indent(f"{key}: {header_object['$ref']};", member_lv))
                continue
            if not header_object.get("required"):
                key = ts_optional_property(key)
            header_type = transform_header_object(
                header_object,
                TransformSchemaObjectOptions(path=f"{path}/headers/{name}", ctx=ctx.with_indent(member_lv)),
            )
            output.append(indent(f"{key}: {header_type};", member_lv))
        output.append(indent("};", indent_lv))

    content = response_object.get("content")
    if isinstance(content, dict):
        output.append(indent("content: {", indent_lv))
        for content_type, media_type_object in get_entries(content, ctx.alphabetize):
            key = esc_str(content_type)
            if ctx.immutable_types:
                key = ts_readonly(key)
            media_type = transform_media_type_object(
                media_type_object,
                TransformSchemaObjectOptions(path=f"{path}/content/{content_type}", ctx=ctx.with_indent(member_lv)),
            )
            output.append(indent(f"{key}: {media_type};", member_lv))
        output.append(indent("};", indent_lv))
    else:
        output.append(indent("content: never;", indent_lv))

    output.append(indent("}", ctx.indent_lv))
    return "\n".join(output)
