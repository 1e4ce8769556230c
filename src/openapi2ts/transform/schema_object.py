"""Render an OpenAPI *Schema Object* as a TypeScript type expression.

:func:`transform_schema_object` is the recursive core of the package; every
other transformer calls it for the schema positions it contains. Dispatch is
first-match-wins, in this order:

1. non-dict values, raw lists (tuples) and ``$ref`` nodes
2. the user ``transform`` hook
3. ``const`` (an enum of one)
4. ``enum``
5. ``oneOf`` without discriminated members
6. ``type`` (primitive, list of types, or array)
7. the structural fallback: properties, additional properties, the
   discriminator literal, and ``oneOf`` / ``allOf`` / ``anyOf`` composition

Unrecognised shapes never raise; they fall back to ``Record<string, never>``.
"""

from __future__ import annotations

from typing import Any

from openapi2ts.models import GlobalContext, TransformSchemaObjectOptions
from openapi2ts.parser.refs import parse_ref
from openapi2ts.typescript import (
    esc_obj_key,
    esc_str,
    get_entries,
    get_schema_object_comment,
    indent,
    literal,
    ts_array_of,
    ts_intersection_of,
    ts_omit,
    ts_one_of,
    ts_optional_property,
    ts_readonly,
    ts_tuple_of,
    ts_union_of,
)

ARRAY_LENGTH_CEILING = 30


def transform_schema_object(schema_object: Any, options: TransformSchemaObjectOptions) -> str:
    """Render *schema_object*, then give ``ctx.post_transform`` a chance to replace the result."""
    result = default_schema_object_transform(schema_object, options)
    post_transform = options.ctx.post_transform
    if post_transform is not None:
        post_result = post_transform(result, options)
        if post_result:
            return post_result
    return result


def _transform(schema_object: Any, path: str, ctx: GlobalContext) -> str:
    return transform_schema_object(schema_object, TransformSchemaObjectOptions(path=path, ctx=ctx))


def _is_nullable(schema_object: dict[str, Any]) -> bool:
    type_ = schema_object.get("type")
    return bool(schema_object.get("nullable")) or (isinstance(type_, list) and "null" in type_)


def default_schema_object_transform(schema_object: Any, options: TransformSchemaObjectOptions) -> str:
    path, ctx = options.path, options.ctx
    indent_lv = ctx.indent_lv

    if isinstance(schema_object, list):
        final_type = ts_tuple_of(*(literal(item) for item in schema_object))
        return ts_readonly(final_type) if ctx.immutable_types else final_type
    if not isinstance(schema_object, dict):
        return literal(schema_object)
    if "$ref" in schema_object:
        return literal(schema_object["$ref"])

    if ctx.transform is not None:
        result = ctx.transform(schema_object, options)
        if result:
            return result

    if "const" in schema_object:
        as_enum = {k: schema_object[k] for k in ("type", "nullable") if k in schema_object}
        as_enum["enum"] = [schema_object["const"]]
        return _transform(as_enum, path, ctx.with_indent(indent_lv + 1))

    if isinstance(schema_object.get("enum"), list):
        return _transform_enum(schema_object)

    one_of = schema_object.get("oneOf")
    if isinstance(one_of, list) and not any(_discriminator_for(item, ctx) for item in one_of):
        maybe_types = [_transform(item, path, ctx) for item in one_of]
        if any("{" in t for t in maybe_types):
            return ts_one_of(*maybe_types)
        return ts_union_of(*maybe_types)

    if "type" in schema_object:
        typed = _transform_typed(schema_object, path, ctx)
        if typed is not None:
            return typed

    return _transform_structure(schema_object, path, ctx)


def _transform_enum(schema_object: dict[str, Any]) -> str:
    items: list[Any] = list(schema_object["enum"])
    type_ = schema_object.get("type")
    if type_ is None or type_ == "string" or (isinstance(type_, list) and "string" in type_):
        items = [esc_str(item or "") for item in items]
    extra = ["null"] if _is_nullable(schema_object) else []
    return ts_union_of(*items, *extra)


def _transform_typed(schema_object: dict[str, Any], path: str, ctx: GlobalContext) -> str | None:
    """Render a node by its ``type``; ``None`` means fall through to the structural rules."""
    type_ = schema_object["type"]

    if isinstance(type_, list):
        return ts_one_of(*(_transform({**schema_object, "type": t}, path, ctx) for t in type_))
    if type_ == "null":
        return "null"
    if type_ in ("string", "boolean"):
        return ts_union_of(type_, "null") if schema_object.get("nullable") else type_
    if type_ in ("number", "integer"):
        return ts_union_of("number", "null") if schema_object.get("nullable") else "number"
    if type_ == "array":
        return _transform_array(schema_object, path, ctx)
    return None


def _transform_array(schema_object: dict[str, Any], path: str, ctx: GlobalContext) -> str:
    readonly = ctx.immutable_types or bool(schema_object.get("readOnly"))
    nullable = bool(schema_object.get("nullable"))
    items = schema_object.get("items")
    item_type = _transform(items, path, ctx.with_indent(ctx.indent_lv + 1)) if items else "unknown"

    raw_min = schema_object.get("minItems")
    raw_max = schema_object.get("maxItems")
    min_items = raw_min if _is_count(raw_min) else 0
    max_items = raw_max if _is_count(raw_max) and min_items <= raw_max else None

    if max_items is None:
        estimate = min_items
    else:
        estimate = (max_items * (max_items + 1) - min_items * (min_items - 1)) // 2

    if (
        ctx.support_array_length
        and not nullable
        and (min_items != 0 or max_items is not None)
        and estimate < ARRAY_LENGTH_CEILING
    ):
        if max_items is None:
            tuple_type = ts_tuple_of(*([item_type] * min_items), f"...{ts_array_of(item_type)}")
            return ts_readonly(tuple_type) if readonly else tuple_type
        tuples = []
        for length in range(min_items, max_items + 1):
            tuple_type = ts_tuple_of(*([item_type] * length))
            tuples.append(ts_readonly(tuple_type) if readonly else tuple_type)
        return ts_union_of(*tuples)

    array_type = ts_array_of(item_type)
    if nullable:
        array_type = ts_union_of(array_type, "null")
    return ts_readonly(array_type) if readonly else array_type


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _discriminator_for(item: Any, ctx: GlobalContext):
    if isinstance(item, dict) and isinstance(item.get("$ref"), str):
        return ctx.discriminators.get(item["$ref"])
    return None


def _discriminator_value(path: str, mapping: dict[str, str] | None) -> str | None:
    """The literal tag for the schema at *path*.

    Defaults to the schema's own name; an explicit mapping entry that points
    at this schema wins. Pointer targets must address this exact location,
    bare names only need to match the schema name.
    """
    location = parse_ref(path)
    if not location.path:
        return None
    value = location.path[-1]
    for tag, target in (mapping or {}).items():
        if "#" in target or "/" in target:
            if parse_ref(target) == location:
                return tag
        elif target == value:
            return tag
    return value


def _transform_structure(schema_object: dict[str, Any], path: str, ctx: GlobalContext) -> str:
    indent_lv = ctx.indent_lv
    core_type: list[str] = []
    readonly = ctx.immutable_types or bool(schema_object.get("readOnly"))

    properties = schema_object.get("properties")
    additional = schema_object.get("additionalProperties")
    allows_additional = additional is not None and additional is not False
    if (isinstance(properties, dict) and properties) or allows_additional:
        member_lv = indent_lv + 1
        member_ctx = ctx.with_indent(member_lv)
        required = schema_object.get("required")
        for key, value in get_entries(properties or {}, ctx.alphabetize):
            c = get_schema_object_comment(value, member_lv)
            if c:
                core_type.append(indent(c, member_lv))
            member_key = esc_obj_key(key)
            is_optional = not isinstance(required, list) or key not in required
            if is_optional and ctx.default_non_nullable and isinstance(value, dict) and "default" in value:
                is_optional = False
            if is_optional:
                member_key = ts_optional_property(member_key)
            if readonly:
                member_key = ts_readonly(member_key)
            core_type.append(indent(f"{member_key}: {_transform(value, path, member_ctx)};", member_lv))

        if allows_additional or ctx.additional_properties:
            additional_type = "unknown"
            if isinstance(additional, dict) and additional:
                additional_type = _transform(additional, path, member_ctx)
            core_type.append(
                indent(f"[key: string]: {ts_union_of(additional_type, 'undefined')};", member_lv)
            )

    for key in ("oneOf", "allOf", "anyOf"):
        members = schema_object.get(key)
        if not isinstance(members, list):
            continue
        discriminator = next(
            (d for d in (_discriminator_for(item, ctx) for item in members) if d is not None),
            None,
        )
        if discriminator is None:
            continue
        value = _discriminator_value(path, discriminator.mapping)
        if value is not None:
            core_type.insert(
                0, indent(f"{discriminator.property_name}: {esc_str(value)};", indent_lv + 1)
            )
        break

    final_type = "{\n" + "\n".join(core_type) + "\n" + indent("}", indent_lv) if core_type else ""

    def collect_compositions(items: list[Any]) -> list[str]:
        output: list[str] = []
        for item in items:
            item_type = _transform(item, path, ctx)
            discriminator = _discriminator_for(item, ctx)
            if discriminator is not None:
                output.append(ts_omit(item_type, [discriminator.property_name]))
                continue
            output.append(item_type)
        return output

    one_of = schema_object.get("oneOf")
    all_of = schema_object.get("allOf")
    any_of = schema_object.get("anyOf")
    if isinstance(one_of, list):
        one_of_type = ts_one_of(*collect_compositions(one_of))
        final_type = ts_intersection_of(final_type, one_of_type) if final_type else one_of_type
    else:
        if isinstance(all_of, list):
            final_type = ts_intersection_of(final_type, *collect_compositions(all_of))
        if isinstance(any_of, list):
            any_of_type = ts_union_of(*collect_compositions(any_of))
            final_type = ts_intersection_of(final_type, any_of_type) if final_type else any_of_type

    if schema_object.get("nullable"):
        final_type = ts_union_of(final_type or "Record<string, unknown>", "null")
    return final_type or "Record<string, never>"
