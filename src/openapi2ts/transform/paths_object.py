"""Render the OpenAPI *Paths Object* (``paths`` at the document root)."""

from __future__ import annotations

import re
from typing import Any

from openapi2ts.models import GlobalContext, TransformSchemaObjectOptions
from openapi2ts.transform.parameter_object import transform_parameter_object
from openapi2ts.transform.path_item_object import HTTP_METHODS, transform_path_item_object
from openapi2ts.typescript import esc_str, get_entries, indent

_PATH_PARAM_RE = re.compile(r"\{([^{}]+)\}")


def _extract_path_params(path_item: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Inline ``in: path`` parameters declared on the path item or any of its operations."""
    params: dict[str, dict[str, Any]] = {}
    sources = [path_item, *(path_item.get(m) for m in HTTP_METHODS)]
    for source in sources:
        if not isinstance(source, dict):
            continue
        for p in source.get("parameters") or []:
            if isinstance(p, dict) and p.get("in") == "path" and "name" in p:
                params.setdefault(str(p["name"]), p)
    return params


def _template_key(url: str, path_item: dict[str, Any], ctx: GlobalContext) -> str:
    """Build ``[path: `/users/${string}`]`` for a templated URL."""
    params = _extract_path_params(path_item)

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        p = params.get(name)
        if p is None:
            # undeclared segments still match any string
            return "${string}"
        param_type = transform_parameter_object(
            p, TransformSchemaObjectOptions(path=f"#/paths/{url}/parameters/{name}", ctx=ctx)
        )
        return f"${{{param_type}}}"

    return f"[path: `{_PATH_PARAM_RE.sub(_replace, url)}`]"


def transform_paths_object(paths_object: dict[str, Any], ctx: GlobalContext) -> str:
    indent_lv = ctx.indent_lv + 1
    output = ["{"]
    for url, path_item in get_entries(paths_object, ctx.alphabetize):
        if url.startswith("x-") or not isinstance(path_item, dict):
            continue
        if ctx.path_params_as_types and _PATH_PARAM_RE.search(url):
            key = _template_key(url, path_item, ctx)
        else:
            key = esc_str(url)
        if "$ref" in path_item:
            item_type = path_item["$ref"]
        else:
            item_type = transform_path_item_object(
                path_item, TransformSchemaObjectOptions(path=f"#/paths/{url}", ctx=ctx.with_indent(indent_lv))
            )
        output.append(indent(f"{key}: {item_type};", indent_lv))
    output.append(indent("}", ctx.indent_lv))
    return "\n".join(output)
