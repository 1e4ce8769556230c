"""Render the OpenAPI 3.1 *Webhooks Object*."""

from __future__ import annotations

from typing import Any

from openapi2ts.models import GlobalContext, TransformSchemaObjectOptions
from openapi2ts.transform.path_item_object import transform_path_item_object
from openapi2ts.typescript import esc_str, get_entries, indent


def transform_webhooks_object(webhooks_object: dict[str, Any], ctx: GlobalContext) -> str:
    indent_lv = ctx.indent_lv + 1
    output = ["{"]
    for name, path_item in get_entries(webhooks_object, ctx.alphabetize):
        if name.startswith("x-") or not isinstance(path_item, dict):
            continue
        if "$ref" in path_item:
            item_type = path_item["$ref"]
        else:
            item_type = transform_path_item_object(
                path_item, TransformSchemaObjectOptions(path=f"#/webhooks/{name}", ctx=ctx.with_indent(indent_lv))
            )
        output.append(indent(f"{esc_str(name)}: {item_type};", indent_lv))
    output.append(indent("}", ctx.indent_lv))
    return "\n".join(output)
