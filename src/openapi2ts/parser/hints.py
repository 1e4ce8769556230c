"""Work out which kind of OpenAPI construct a path points at.

When a document references another document, the loader needs to know what
the target's root represents (a schema? a response? a whole API
description?) so that the generator can render it with the right
transformer. :func:`get_hint` answers that from the path alone: the path of
the referencing node followed by the pointer's own path.

Resolution is a lookup table with one continuation rule per
:class:`~openapi2ts.models.Hint`. Each rule inspects the next path segment
and either descends into a nested construct or stops at its own kind. Any
path that runs out of recognised segments is a schema, the most common
``$ref`` position, so resolution never fails.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from openapi2ts.models import Hint

Segments = Sequence[str]

_COMPOSITION_KEYS = ("allOf", "anyOf", "oneOf")


def _head(path: Segments) -> Optional[str]:
    return path[0] if path else None


def _from_schema(path: Segments) -> Hint:
    if _head(path) in _COMPOSITION_KEYS:
        return _from_schema(path[2:])
    return Hint.SCHEMA


def _from_media_type(path: Segments) -> Hint:
    if _head(path) == "schema":
        return _from_schema(path[1:])
    return Hint.MEDIA_TYPE


def _from_header(path: Segments) -> Hint:
    head = _head(path)
    if head == "schema":
        return _from_schema(path[1:])
    if head == "content":
        return _from_media_type(path[2:])
    return Hint.HEADER


def _from_parameter(path: Segments) -> Hint:
    head = _head(path)
    if head == "content":
        return _from_media_type(path[2:])
    if head == "schema":
        return _from_schema(path[1:])
    return Hint.PARAMETER


def _from_request_body(path: Segments) -> Hint:
    if _head(path) == "content":
        return _from_media_type(path[2:])
    return Hint.REQUEST_BODY


def _from_response(path: Segments) -> Hint:
    head = _head(path)
    if head == "headers":
        return _from_schema(path[2:])
    if head == "content":
        return _from_media_type(path[2:])
    return Hint.RESPONSE


def _from_operation(path: Segments) -> Hint:
    head = _head(path)
    if head == "parameters":
        return _from_parameter(path[2:])
    if head == "requestBody":
        return _from_request_body(path[1:])
    if head == "responses":
        return _from_response(path[2:])
    return Hint.OPERATION


def _from_path_item(path: Segments) -> Hint:
    head = _head(path)
    if head is None:
        return Hint.PATH_ITEM
    if head == "parameters":
        return _from_parameter(path[2:])
    return _from_operation(path[1:])


_COMPONENT_RULES: dict[str, Callable[[Segments], Hint]] = {
    "schemas": _from_schema,
    "headers": _from_schema,
    "parameters": _from_parameter,
    "responses": _from_response,
    "requestBodies": _from_request_body,
    "pathItems": _from_path_item,
}


def _from_components(path: Segments) -> Hint:
    rule = _COMPONENT_RULES.get(_head(path) or "")
    if rule is None:
        return Hint.SCHEMA
    return rule(path[2:])


def _from_root(path: Segments) -> Hint:
    head = _head(path)
    if head == "paths":
        return _from_path_item(path[2:])
    if head == "components":
        return _from_components(path[1:])
    return Hint.SCHEMA


_RULES: dict[Hint, Callable[[Segments], Hint]] = {
    Hint.OPENAPI3: _from_root,
    Hint.PATH_ITEM: _from_path_item,
    Hint.OPERATION: _from_operation,
    Hint.PARAMETER: _from_parameter,
    Hint.REQUEST_BODY: _from_request_body,
    Hint.RESPONSE: _from_response,
    Hint.MEDIA_TYPE: _from_media_type,
    Hint.HEADER: _from_header,
    Hint.SCHEMA: _from_schema,
}


def get_hint(path: Segments, start_from: Optional[Hint] = None) -> Hint:
    """Return the construct kind denoted by *path*.

    Args:
        path: Path segments, usually the referencing node's path followed by
            the ``$ref``'s own path.
        start_from: Kind of the document *path* starts in. ``None`` means a
            root API description.

    Returns:
        The resolved :class:`~openapi2ts.models.Hint`; never ``None``.

    Example::

        get_hint(["paths", "/pets", "get", "responses", "200"])
        # Hint.RESPONSE
        get_hint(["content", "application/json"], Hint.REQUEST_BODY)
        # Hint.MEDIA_TYPE
    """
    return _RULES[start_from or Hint.OPENAPI3](list(path))
