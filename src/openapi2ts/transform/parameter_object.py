"""Render an OpenAPI *Parameter Object* as the type of its value."""

from __future__ import annotations

from typing import Any

from openapi2ts.models import TransformSchemaObjectOptions
from openapi2ts.transform.schema_object import transform_schema_object


def transform_parameter_object(parameter_object: dict[str, Any], options: TransformSchemaObjectOptions) -> str:
    """Type of the parameter's ``schema``; parameters without one are strings."""
    schema = parameter_object.get("schema")
    if schema is None:
        return "string"
    return transform_schema_object(schema, options)
