"""Render an OpenAPI *Header Object*.

A header is typed by its ``schema`` when it has one, otherwise by a map of
its ``content`` media types, otherwise as ``unknown``.
"""

from __future__ import annotations

from typing import Any

from openapi2ts.models import TransformSchemaObjectOptions
from openapi2ts.transform.media_type_object import transform_media_type_object
from openapi2ts.transform.schema_object import transform_schema_object
from openapi2ts.typescript import esc_str, get_entries, get_schema_object_comment, indent, ts_readonly


def transform_header_object(header_object: dict[str, Any], options: TransformSchemaObjectOptions) -> str:
    path, ctx = options.path, options.ctx
    if header_object.get("schema"):
        return transform_schema_object(header_object["schema"], options)

    content = header_object.get("content")
    if not isinstance(content, dict):
        return "unknown"

    indent_lv = ctx.indent_lv + 1
    output = ["{"]
    for content_type, media_type_object in get_entries(content, ctx.alphabetize):
        c = get_schema_object_comment(media_type_object, indent_lv)
        if c:
            output.append(indent(c, indent_lv))
        key = esc_str(content_type)
        if ctx.immutable_types:
            key = ts_readonly(key)
        nested = TransformSchemaObjectOptions(path=f"{path}/{content_type}", ctx=ctx.with_indent(indent_lv))
        if "$ref" in media_type_object:
            media_type = transform_schema_object(media_type_object, nested)
        else:
            media_type = transform_media_type_object(media_type_object, nested)
        output.append(indent(f"{key}: {media_type};", indent_lv))
    output.append(indent("}", ctx.indent_lv))
    return "\n".join(output)
