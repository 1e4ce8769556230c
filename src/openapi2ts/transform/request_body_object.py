"""Render an OpenAPI *Request Body Object* as ``{ content: { "mime": T } }``."""

from __future__ import annotations

from typing import Any

from openapi2ts.models import TransformSchemaObjectOptions
from openapi2ts.transform.media_type_object import transform_media_type_object
from openapi2ts.transform.schema_object import transform_schema_object
from openapi2ts.typescript import esc_str, get_entries, get_schema_object_comment, indent, ts_readonly


def transform_request_body_object(request_body_object: dict[str, Any], options: TransformSchemaObjectOptions) -> str:
    """Render one member per media type; an empty ``content`` becomes ``"*/*": never``."""
    path, ctx = options.path, options.ctx
    indent_lv = ctx.indent_lv + 1
    output = ["{", indent(ts_readonly("content: {") if ctx.immutable_types else "content: {", indent_lv)]

    content_lv = indent_lv + 1
    content = request_body_object.get("content") or {}
    if not content:
        output.append(indent(f"{esc_str('*/*')}: never;", content_lv))
    for content_type, media_type_object in get_entries(content, ctx.alphabetize):
        c = get_schema_object_comment(media_type_object, content_lv)
        if c:
            output.append(indent(c, content_lv))
        key = esc_str(content_type)
        if ctx.immutable_types:
            key = ts_readonly(key)
        nested = TransformSchemaObjectOptions(path=f"{path}/{content_type}", ctx=ctx.with_indent(content_lv))
        if "$ref" in media_type_object:
            media_type = transform_schema_object(media_type_object, nested)
        else:
            media_type = transform_media_type_object(media_type_object, nested)
        output.append(indent(f"{key}: {media_type};", content_lv))

    output.append(indent("};", indent_lv))
    output.append(indent("}", ctx.indent_lv))
    return "\n".join(output)
