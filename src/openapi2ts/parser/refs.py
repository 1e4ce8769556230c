"""Tree walking and ``$ref`` pointer helpers.

OpenAPI documents refer to each other with JSON Reference pointers
(``other.yaml#/components/schemas/Pet``). Once loaded, every pointer is
rewritten into a TypeScript indexed-access path
(``components["schemas"]["Pet"]``) that addresses the same node in the
generated output. This module holds the pure helpers for both forms:

* :func:`walk` -- visit every object node of a parsed document.
* :func:`parse_ref` -- split a pointer (either form) into document and path.
* :func:`make_ts_index` / :func:`parse_ts_index` -- build and split
  indexed-access paths.
"""

from __future__ import annotations

from typing import Any, Callable, NamedTuple
from urllib.parse import unquote

from openapi2ts.typescript import esc_str

Path = tuple[str, ...]


class Ref(NamedTuple):
    """A parsed reference pointer.

    ``filename`` is ``"."`` when the pointer targets the current document.
    """

    filename: str
    path: list[str]


def walk(
    obj: Any,
    callback: Callable[[dict[str, Any], Path], None],
    path: Path = (),
) -> None:
    """Call *callback* with every dict inside *obj* and its path.

    Lists are descended into but not passed to the callback; their indices
    appear in the path as strings. The callback runs before a node's
    children are visited, so it may rewrite or remove keys in place and the
    walk follows the updated node.

    Args:
        obj: Any parsed JSON/YAML value.
        callback: Called as ``callback(node, path)``.
        path: Path of *obj* itself (used by the recursion).
    """
    if isinstance(obj, list):
        for i, item in enumerate(obj):
            walk(item, callback, (*path, str(i)))
        return
    if not isinstance(obj, dict):
        return
    callback(obj, path)
    for key in list(obj):
        if key in obj:
            walk(obj[key], callback, (*path, str(key)))


def _decode_segment(segment: str) -> str:
    """Undo RFC 6901 escaping (``~1`` for ``/``, ``~0`` for ``~``) and URL encoding."""
    return unquote(segment).replace("~1", "/").replace("~0", "~")


def parse_ref(ref: Any) -> Ref:
    """Split a ``$ref`` into its document part and path segments.

    Accepts JSON pointers (``common.yaml#/components/schemas/Id``), already
    rewritten indexed-access paths (``components["schemas"]["Id"]``), and
    bare document locators (``pet.yaml``). ``properties`` segments are
    dropped, since indexing the generated object type addresses a property
    directly.

    Example::

        >>> parse_ref("common.yaml#/components/schemas/Id")
        Ref(filename='common.yaml', path=['components', 'schemas', 'Id'])
        >>> parse_ref("#/components/schemas/Pet/properties/name")
        Ref(filename='.', path=['components', 'schemas', 'Pet', 'name'])
    """
    if not isinstance(ref, str):
        return Ref(".", [])

    if "#/" in ref:
        filename, _, pointer = ref.partition("#")
        path = [
            _decode_segment(part)
            for part in pointer.split("/")
            if part and part != "properties"
        ]
        return Ref(filename or ".", path)

    if '["' in ref:
        return Ref(".", parse_ts_index(ref))

    if ref.endswith("#"):
        ref = ref[:-1]
    return Ref(ref or ".", [])


def make_ts_index(path: list[str] | Path) -> str:
    """Build an indexed-access path such as ``components["schemas"]["Pet"]``."""
    if not path:
        return ""
    head, *rest = path
    return str(head) + "".join(f"[{esc_str(str(part))}]" for part in rest)


def parse_ts_index(type_: str) -> list[str]:
    """Split an indexed-access path back into its segments."""
    parts: list[str] = []
    for part in type_.split('["'):
        cleaned = part.replace('"]', "").strip()
        if cleaned and cleaned != "properties":
            parts.append(cleaned.replace('\\"', '"'))
    return parts


def has_extension_segment(path: list[str]) -> bool:
    """Whether any segment is a specification extension (``x-...``)."""
    return any(segment.startswith("x-") for segment in path)
