"""Document loading and ``$ref`` resolution.

:func:`load` builds the document map; :func:`get_hint` classifies paths;
the helpers in :mod:`~openapi2ts.parser.refs` handle pointer syntax.
"""

from openapi2ts.parser.hints import get_hint
from openapi2ts.parser.loader import (
    VIRTUAL_JSON_URL,
    LoadOptions,
    default_fetch,
    load,
    relative_path,
    resolve_schema,
)
from openapi2ts.parser.refs import make_ts_index, parse_ref, parse_ts_index, walk

__all__ = [
    "VIRTUAL_JSON_URL",
    "LoadOptions",
    "default_fetch",
    "get_hint",
    "load",
    "make_ts_index",
    "parse_ref",
    "parse_ts_index",
    "relative_path",
    "resolve_schema",
    "walk",
]
