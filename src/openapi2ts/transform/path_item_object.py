"""Render an OpenAPI *Path Item Object*: one member per HTTP method."""

from __future__ import annotations

from typing import Any

from openapi2ts.models import TransformSchemaObjectOptions
from openapi2ts.transform.operation_object import transform_operation_object
from openapi2ts.typescript import esc_str, get_schema_object_comment, indent

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


def transform_path_item_object(path_item: dict[str, Any], options: TransformSchemaObjectOptions) -> str:
    """Render *path_item*.

    Operations with an ``operationId`` are rendered once into
    ``ctx.operations`` and referenced here as ``operations["id"]``.
    Path-level parameters are spliced in as a ``parameters`` member.
    """
    ctx = options.ctx
    indent_lv = ctx.indent_lv + 1
    output = ["{"]

    for method in HTTP_METHODS:
        operation_object = path_item.get(method)
        if not isinstance(operation_object, dict):
            continue
        c = get_schema_object_comment(operation_object, indent_lv)
        if c:
            output.append(indent(c, indent_lv))
        if "$ref" in operation_object:
            output.append(indent(f"{method}: {operation_object['$ref']};", indent_lv))
        elif operation_object.get("operationId"):
            operation_id = str(operation_object["operationId"])
            ctx.operations[operation_id] = transform_operation_object(
                operation_object, TransformSchemaObjectOptions(path=options.path, ctx=ctx.with_indent(1))
            )
            output.append(indent(f"{method}: operations[{esc_str(operation_id)}];", indent_lv))
        else:
            operation_type = transform_operation_object(
                operation_object, TransformSchemaObjectOptions(path=options.path, ctx=ctx.with_indent(indent_lv))
            )
            output.append(indent(f"{method}: {operation_type};", indent_lv))

    parameters = path_item.get("parameters")
    if isinstance(parameters, list) and parameters:
        members = transform_operation_object({"parameters": parameters}, options, wrap_object=False)
        if members:
            output.append(members)

    output.append(indent("}", ctx.indent_lv))
    return "\n".join(output)
