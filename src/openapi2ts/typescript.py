"""Small helpers that build TypeScript source fragments.

Every transformer composes its output from these functions so that quoting,
parenthesisation and comment formatting stay consistent across the file.
None of them know anything about OpenAPI; they take strings and return
strings.
"""

from __future__ import annotations

import json
import re
from typing import Any, Iterable

INDENT = "  "

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_$][a-zA-Z0-9_$]*$")
_LINE_BREAK_RE = re.compile(r"\r?\n")
_COMMENT_END_RE = re.compile(r"\*/")
_NATURAL_SPLIT_RE = re.compile(r"(\d+)")

ONE_OF_HELPERS = [
    "/** OneOf type helpers */",
    "type Without<T, U> = { [P in Exclude<keyof T, keyof U>]?: never };",
    "type XOR<T, U> = (T | U) extends object ? (Without<T, U> & U) | (Without<U, T> & T) : T | U;",
    "type OneOf<T extends any[]> = T extends [infer Only] ? Only : T extends [infer A, infer B, ...infer Rest] ? OneOf<[XOR<A, B>, ...Rest]> : never;",
]


def indent(text: str, level: int) -> str:
    """Prefix *text* with *level* indentation units."""
    if level > 0:
        return INDENT * level + text
    return text


def esc_str(value: Any) -> str:
    """Render *value* as a double-quoted TypeScript string literal.

    Non-string values are rendered as JSON literals (``1``, ``true``, ``null``).
    Line breaks are dropped.
    """
    if not isinstance(value, str):
        return json.dumps(value)
    return '"' + _LINE_BREAK_RE.sub("", value).replace('"', '\\"') + '"'


def esc_obj_key(key: str) -> str:
    """Quote an object key unless it is a valid identifier."""
    if _IDENTIFIER_RE.match(key):
        return key
    return esc_str(key)


def literal(value: Any) -> str:
    """Render a raw JSON value found in a schema as TypeScript text."""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def get_entries(obj: dict[str, Any], alphabetize: bool = False) -> list[tuple[str, Any]]:
    """Return the items of *obj*, optionally in natural alphabetical order."""
    entries = [(str(key), value) for key, value in obj.items()]
    if alphabetize:
        entries.sort(key=lambda item: _natural_key(item[0]))
    return entries


def _natural_key(text: str) -> list[Any]:
    """Sort key that orders ``"2"`` before ``"10"``."""
    return [
        (0, int(part), "") if part.isdigit() else (1, 0, part.lower())
        for part in _NATURAL_SPLIT_RE.split(text)
        if part
    ]


# ------------------------------------------------------------------ #
# Type combinators
# ------------------------------------------------------------------ #


def ts_union_of(*types: Any) -> str:
    """Join *types* with ``|``, deduplicating members.

    ``unknown`` absorbs every other member; an empty union is ``never``.
    """
    if not types:
        return "never"
    members: list[str] = []
    for t in types:
        text = literal(t)
        if text == "unknown":
            return "unknown"
        if text not in members:
            members.append(text)
    if len(members) == 1:
        return members[0]
    return " | ".join(members)


def ts_intersection_of(*types: str) -> str:
    """Join the non-empty *types* with ``&``, parenthesising unions."""
    members = [t for t in types if t]
    if not members:
        return "unknown"
    if len(members) == 1:
        return members[0]
    return " & ".join(f"({t})" if " | " in t else t for t in members)


def ts_one_of(*types: str) -> str:
    """Exclusive union: at most one member's shape may match."""
    if not types:
        return "never"
    if len(types) == 1:
        return types[0]
    return f"OneOf<[{', '.join(types)}]>"


def ts_array_of(type_: str) -> str:
    if " | " in type_ or " & " in type_ or type_.startswith("readonly "):
        return f"({type_})[]"
    return f"{type_}[]"


def ts_tuple_of(*types: str) -> str:
    return f"[{', '.join(types)}]"


def ts_readonly(type_: str) -> str:
    return f"readonly {type_}"


def ts_optional_property(key: str) -> str:
    return f"{key}?"


def ts_non_nullable(type_: str) -> str:
    return f"NonNullable<{type_}>"


def ts_partial(type_: str) -> str:
    return f"Partial<{type_}>"


def ts_pick(root: str, keys: Iterable[str]) -> str:
    return f"Pick<{root}, {ts_union_of(*(esc_str(k) for k in keys))}>"


def ts_omit(root: str, keys: Iterable[str]) -> str:
    return f"Omit<{root}, {ts_union_of(*(esc_str(k) for k in keys))}>"


# ------------------------------------------------------------------ #
# Comments
# ------------------------------------------------------------------ #


def comment(text: str, indent_lv: int = 0) -> str:
    """Wrap *text* in a JSDoc block, single-line when it fits on one line."""
    body = _COMMENT_END_RE.sub("*\\/", text.strip())
    if "\n" not in body:
        return f"/** {body} */"
    prefix = indent(" * ", indent_lv)
    lines = _LINE_BREAK_RE.split(body)
    return "\n".join(["/**", prefix + f"\n{prefix}".join(lines), indent(" */", indent_lv)])


def get_schema_object_comment(node: Any, indent_lv: int = 0) -> str | None:
    """Build the JSDoc comment for a schema, parameter, response or operation.

    Returns ``None`` when the node carries nothing worth documenting.
    """
    if not isinstance(node, dict):
        return None
    output: list[str] = []

    if node.get("title"):
        output.append(str(node["title"]))
    if node.get("summary"):
        output.append(str(node["summary"]))
    if node.get("format"):
        output.append(f"Format: {node['format']}")
    if node.get("deprecated"):
        output.append("@deprecated")

    for tag in ("description", "default", "example"):
        if tag not in node:
            continue
        value = node[tag]
        if value == "" and tag == "description":
            continue
        if isinstance(value, (dict, list)):
            value = json.dumps(value, indent=2)
        elif not isinstance(value, str):
            value = json.dumps(value)
        output.append(f"@{tag} {value}")

    if "const" in node:
        output.append("@constant")

    if "enum" in node:
        type_ = node.get("type", "unknown")
        if isinstance(type_, list):
            type_ = "|".join(type_)
        output.append(f"@enum {{{type_}{'|null' if node.get('nullable') else ''}}}")

    if not output:
        return None
    return comment("\n".join(output), indent_lv)
