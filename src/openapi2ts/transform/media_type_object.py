"""Render an OpenAPI *Media Type Object* as the type of its payload."""

from __future__ import annotations

from typing import Any

from openapi2ts.models import TransformSchemaObjectOptions
from openapi2ts.transform.schema_object import transform_schema_object


def transform_media_type_object(media_type_object: dict[str, Any], options: TransformSchemaObjectOptions) -> str:
    schema = media_type_object.get("schema")
    if not schema:
        return "unknown"
    return transform_schema_object(schema, options)
