"""Transformers from OpenAPI constructs to TypeScript source fragments.

Each ``transform_*`` function renders one kind of OpenAPI object and returns
a string; nesting is expressed through ``ctx.indent_lv``.
"""

from __future__ import annotations

from typing import Any

from openapi2ts.models import GlobalContext
from openapi2ts.transform.components_object import transform_components_object
from openapi2ts.transform.header_object import transform_header_object
from openapi2ts.transform.media_type_object import transform_media_type_object
from openapi2ts.transform.operation_object import transform_operation_object
from openapi2ts.transform.parameter_object import transform_parameter_object
from openapi2ts.transform.path_item_object import transform_path_item_object
from openapi2ts.transform.paths_object import transform_paths_object
from openapi2ts.transform.request_body_object import transform_request_body_object
from openapi2ts.transform.response_object import transform_response_object
from openapi2ts.transform.schema_object import transform_schema_object
from openapi2ts.transform.webhooks_object import transform_webhooks_object


def transform_schema(schema: Any, ctx: GlobalContext) -> dict[str, str]:
    """Render the ``paths``, ``webhooks`` and ``components`` of a root document.

    Sections the document does not declare are returned as ``""``.
    """
    if not isinstance(schema, dict):
        return {}
    output: dict[str, str] = {}
    paths = schema.get("paths")
    output["paths"] = transform_paths_object(paths, ctx) if isinstance(paths, dict) else ""
    webhooks = schema.get("webhooks")
    output["webhooks"] = transform_webhooks_object(webhooks, ctx) if isinstance(webhooks, dict) else ""
    components = schema.get("components")
    output["components"] = transform_components_object(components, ctx) if isinstance(components, dict) else ""
    return output


__all__ = [
    "transform_components_object",
    "transform_header_object",
    "transform_media_type_object",
    "transform_operation_object",
    "transform_parameter_object",
    "transform_path_item_object",
    "transform_paths_object",
    "transform_request_body_object",
    "transform_response_object",
    "transform_schema",
    "transform_schema_object",
    "transform_webhooks_object",
]
