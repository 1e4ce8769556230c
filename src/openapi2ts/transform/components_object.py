"""Render the OpenAPI *Components Object*.

Every supported collection is always present in the output so that
``components["responses"]`` and friends can be indexed even when a
document declares none; a missing collection is typed ``never``.
"""

from __future__ import annotations

from typing import Any, Callable

from openapi2ts.models import GlobalContext, TransformSchemaObjectOptions
from openapi2ts.transform.header_object import transform_header_object
from openapi2ts.transform.parameter_object import transform_parameter_object
from openapi2ts.transform.path_item_object import transform_path_item_object
from openapi2ts.transform.request_body_object import transform_request_body_object
from openapi2ts.transform.response_object import transform_response_object
from openapi2ts.transform.schema_object import transform_schema_object
from openapi2ts.typescript import (
    esc_obj_key,
    get_entries,
    get_schema_object_comment,
    indent,
    ts_optional_property,
    ts_readonly,
)

_TRANSFORMERS: dict[str, Callable[[Any, TransformSchemaObjectOptions], str]] = {
    "schemas": transform_schema_object,
    "responses": transform_response_object,
    "parameters": transform_parameter_object,
    "requestBodies": transform_request_body_object,
    "headers": transform_header_object,
    "pathItems": transform_path_item_object,
}


def transform_components_object(components: dict[str, Any], ctx: GlobalContext) -> str:
    indent_lv = ctx.indent_lv + 1
    member_lv = indent_lv + 1
    output = ["{"]

    for collection, transformer in _TRANSFORMERS.items():
        entries = components.get(collection)
        if not isinstance(entries, dict) or not entries:
            output.append(indent(f"{collection}: never;", indent_lv))
            continue

        output.append(indent(f"{collection}: {{", indent_lv))
        for name, obj in get_entries(entries, ctx.alphabetize):
            c = get_schema_object_comment(obj, member_lv)
            if c:
                output.append(indent(c, member_lv))
            key = esc_obj_key(name)
            # a parameter that may be omitted is optional in the collection too
            if (
                collection == "parameters"
                and isinstance(obj, dict)
                and "$ref" not in obj
                and not obj.get("required")
                and obj.get("in") != "path"
            ):
                key = ts_optional_property(key)
            if ctx.immutable_types:
                key = ts_readonly(key)
            options = TransformSchemaObjectOptions(
                path=f"#/components/{collection}/{name}", ctx=ctx.with_indent(member_lv)
            )
            if isinstance(obj, dict) and "$ref" in obj:
                member_type = transform_schema_object(obj, options)
            else:
                member_type = transformer(obj, options)
            output.append(indent(f"{key}: {member_type};", member_lv))
        output.append(indent("};", indent_lv))

    output.append(indent("}", ctx.indent_lv))
    return "\n".join(output)
