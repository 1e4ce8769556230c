"""Load an OpenAPI document and every document it references.

This module handles all I/O for fetching raw schema documents and stitching
them into a single document map. It supports JSON and YAML from local files,
remote URLs, readable streams and in-memory dicts.

The entry point is :func:`load`. Starting from the root document it:

1. fetches and parses the document,
2. walks it, scheduling a concurrent load for every document referenced by
   a ``$ref`` and normalising each pointer's document part,
3. waits for all of those loads,
4. (root only) rewrites every remaining pointer into a TypeScript
   indexed-access path and registers every ``discriminator`` it finds.

All ``$ref`` rewriting happens inside the walk callbacks of steps 2 and 4;
nothing else in the package mutates a loaded document.

:func:`resolve_schema` turns the user's input (a path, a URL, a
protocol-relative URL) into the URL :func:`load` expects.
"""

from __future__ import annotations

import asyncio
import json
import posixpath
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, Union
from urllib.parse import urljoin, urlsplit
from urllib.request import url2pathname

import httpx
import yaml

from openapi2ts.exceptions import (
    ConnectionError_,
    InvalidUsageError,
    RefResolutionError,
    SchemaNotFoundError,
    SpecParseError,
)
from openapi2ts.models import DiscriminatorObject, Hint, Subschema
from openapi2ts.output import debug, warning
from openapi2ts.parser.hints import get_hint
from openapi2ts.parser.refs import has_extension_segment, make_ts_index, parse_ref, walk

VIRTUAL_JSON_URL = "file:///_json"
"""Root URL assigned to in-memory and streamed schemas.

Such a root has no directory, so relative references cannot be resolved
from it.
"""

USER_AGENT = "openapi2ts"

Fetch = Callable[..., Awaitable[httpx.Response]]
Locator = Union[str, dict, Any]


async def default_fetch(
    url: str,
    *,
    method: str = "GET",
    headers: Optional[dict[str, str]] = None,
) -> httpx.Response:
    """Fetch *url* with :class:`httpx.AsyncClient`.

    Redirects are followed and HTTP error statuses raise
    :class:`httpx.HTTPStatusError`. No retries are attempted.
    """
    async with httpx.AsyncClient(follow_redirects=True, timeout=30.0) as client:
        response = await client.request(method, url, headers=headers)
        response.raise_for_status()
        return response


@dataclass
class LoadOptions:
    """State shared by one top-level :func:`load` and all of its recursive loads.

    ``schemas``, ``url_cache`` and ``discriminators`` are shared by every
    copy made for a recursive load; only ``hint`` differs between copies.

    Attributes:
        root_url: URL of the root document (``VIRTUAL_JSON_URL`` for dicts
            and streams).
        schemas: The document map being built, keyed by document id.
        url_cache: Ids of documents already scheduled for loading.
        discriminators: Discriminator registry, filled by the root load.
        hint: Kind of construct the document being loaded represents.
        auth: Value for the ``Authorization`` header on remote fetches.
        http_headers: Extra headers for remote fetches.
        http_method: HTTP method for remote fetches.
        fetch: Coroutine function used for remote fetches.
    """

    root_url: str
    schemas: dict[str, Subschema] = field(default_factory=dict)
    url_cache: set[str] = field(default_factory=set)
    discriminators: dict[str, DiscriminatorObject] = field(default_factory=dict)
    hint: Optional[Hint] = None
    auth: Optional[str] = None
    http_headers: Optional[dict[str, Any]] = None
    http_method: str = "GET"
    fetch: Fetch = default_fetch


# ------------------------------------------------------------------ #
# Locators
# ------------------------------------------------------------------ #


def is_remote_url(value: str) -> bool:
    """Whether *value* is an ``http(s)`` or protocol-relative URL."""
    return value.startswith(("http://", "https://", "//"))


def is_filepath(value: str) -> bool:
    """Whether *value* is a ``file:`` URL or an absolute filesystem path."""
    return value.startswith("file:") or Path(value).is_absolute()


def resolve_schema(filename: str) -> str:
    """Turn a user-supplied path or URL into the URL :func:`load` expects.

    Protocol-relative URLs get an ``https:`` scheme; local paths are made
    absolute (relative to the working directory) and converted to
    ``file://`` URLs.

    Raises:
        SchemaNotFoundError: If a local path does not exist or is a
            directory.
    """
    if is_remote_url(filename):
        return f"https:{filename}" if filename.startswith("//") else filename

    local_path = Path(url2pathname(urlsplit(filename).path)) if filename.startswith("file:") else Path(filename)
    local_path = local_path.expanduser().resolve()
    if not local_path.exists():
        raise SchemaNotFoundError(f"Could not locate {filename}")
    if local_path.is_dir():
        raise SchemaNotFoundError(f"{local_path} is a directory not a file")
    return local_path.as_uri()


def relative_path(src: str, dest: str) -> str:
    """Id of *dest* as seen from *src*.

    Same-origin HTTP URLs and ``file:`` URLs give a POSIX path relative to
    *src*'s directory; anything else gives *dest* unchanged.
    """
    src_parts = urlsplit(src)
    dest_parts = urlsplit(dest)
    same_origin = (
        dest_parts.scheme.startswith("http")
        and src_parts.scheme.startswith("http")
        and (dest_parts.scheme, dest_parts.netloc) == (src_parts.scheme, src_parts.netloc)
    )
    same_disk = dest_parts.scheme == "file" and src_parts.scheme == "file"
    if same_origin or same_disk:
        return posixpath.relpath(dest_parts.path or "/", posixpath.dirname(src_parts.path) or "/")
    return dest


def parse_http_headers(http_headers: dict[str, Any]) -> dict[str, str]:
    """Serialise header values, JSON-encoding anything that is not a string.

    A value that cannot be serialised is skipped with a warning; the
    remaining headers are still sent.
    """
    final_headers: dict[str, str] = {}
    for key, value in http_headers.items():
        if isinstance(value, str):
            final_headers[key] = value
            continue
        try:
            final_headers[key] = json.dumps(value)
        except (TypeError, ValueError):
            warning(
                f"Cannot parse key: {key} into JSON format. "
                "Continuing with the next HTTP header that is specified"
            )
    return final_headers


# ------------------------------------------------------------------ #
# Parsing
# ------------------------------------------------------------------ #


def _parse_json(content: str, source: str) -> Any:
    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        raise SpecParseError(f"JSON: {exc} ({source})") from exc


def _stringify_keys(node: Any) -> Any:
    """YAML reads unquoted keys such as ``200:`` as ints; JSON keys are always strings."""
    if isinstance(node, dict):
        return {str(k): _stringify_keys(v) for k, v in node.items()}
    if isinstance(node, list):
        return [_stringify_keys(item) for item in node]
    return node


def _parse_yaml(content: str, source: str) -> Any:
    try:
        return _stringify_keys(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        raise SpecParseError(f"YAML: {exc} ({source})") from exc


def _parse_sniffed(content: str, source: str) -> Any:
    """Parse by looking at the first non-space character: ``{`` means JSON."""
    content = content.strip()
    if content.startswith("{"):
        return _parse_json(content, source)
    return _parse_yaml(content, source)


def _parse_by_format(content: str, ext: str, content_type: str, source: str) -> Any:
    if ext == ".json" or "json" in content_type:
        return _parse_json(content, source)
    if ext in (".yaml", ".yml") or "yaml" in content_type:
        return _parse_yaml(content, source)
    return _parse_sniffed(content, source)


async def _read_url(url: str, options: LoadOptions) -> Any:
    """Fetch or read the document at *url* and parse it."""
    parts = urlsplit(url)
    ext = posixpath.splitext(parts.path)[1].lower()

    if parts.scheme in ("http", "https"):
        headers = {"User-Agent": USER_AGENT}
        if options.auth:
            headers["Authorization"] = options.auth
        if options.http_headers:
            headers.update(parse_http_headers(options.http_headers))
        debug(f"Fetching {url}")
        try:
            response = await options.fetch(url, method=options.http_method or "GET", headers=headers)
        except httpx.HTTPStatusError as exc:
            raise ConnectionError_(
                f"HTTP {exc.response.status_code} fetching schema from {url}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ConnectionError_(f"Failed to fetch schema from {url}: {exc}") from exc
        content_type = response.headers.get("content-type") or ""
        return _parse_by_format(response.text, ext, content_type, url)

    if parts.scheme == "file":
        file_path = Path(url2pathname(parts.path))
        debug(f"Reading {file_path}")
        try:
            contents = await asyncio.to_thread(file_path.read_text, encoding="utf-8")
        except FileNotFoundError as exc:
            raise RefResolutionError(f"Can't resolve \"{url}\": file not found") from exc
        except OSError as exc:
            raise RefResolutionError(f"Failed to read {file_path}: {exc}") from exc
        return _parse_by_format(contents, ext, "", str(file_path))

    raise RefResolutionError(f"Can't resolve \"{url}\": unsupported scheme \"{parts.scheme}\"")


async def _read_stream(stream: Any) -> Any:
    """Drain a readable stream and parse it."""
    contents = await asyncio.to_thread(stream.read)
    if isinstance(contents, bytes):
        contents = contents.decode("utf-8")
    return _parse_sniffed(contents, "stream")


# ------------------------------------------------------------------ #
# Loading
# ------------------------------------------------------------------ #


async def load(schema: Locator, options: LoadOptions) -> dict[str, Subschema]:
    """Load *schema* and every document reachable from it through ``$ref``.

    Args:
        schema: A URL string (``file:`` or ``http(s):``), a readable stream,
            or an already-parsed dict.
        options: Shared loader state; ``options.schemas`` is filled in place.

    Returns:
        The document map, keyed by document id (``"."`` for the root).

    Raises:
        InvalidUsageError: If *schema* is not a supported locator, or an
            in-memory root uses a relative reference.
        SpecParseError: If a document is not valid JSON/YAML.
        RefResolutionError: If a referenced document cannot be located.
        ConnectionError_: If a remote document cannot be fetched.
    """
    schema_id = "."
    hint = options.hint or Hint.OPENAPI3

    if isinstance(schema, str):
        if schema != options.root_url:
            schema_id = relative_path(options.root_url, schema)
        if schema_id in options.url_cache:
            return options.schemas
        options.url_cache.add(schema_id)
        document = await _read_url(schema, options)
    elif hasattr(schema, "read"):
        options.url_cache.add(schema_id)
        hint = Hint.OPENAPI3
        document = await _read_stream(schema)
    elif isinstance(schema, dict):
        options.url_cache.add(schema_id)
        hint = Hint.OPENAPI3
        document = schema
    else:
        raise InvalidUsageError(f"Invalid schema: {type(schema).__name__}")

    if not isinstance(document, dict):
        raise SpecParseError(
            f"Schema {schema if isinstance(schema, str) else 'stream'} must be a JSON/YAML object"
        )

    options.schemas[schema_id] = Subschema(hint=hint, schema=document)

    if hint == Hint.OPENAPI3 and isinstance(document, dict):
        components = document.get("components")
        if isinstance(components, dict):
            components.pop("examples", None)

    pending: list[Awaitable[Any]] = []
    scheduled: set[str] = set()

    def _resolve_external(node: dict[str, Any], node_path: tuple[str, ...]) -> None:
        for key in ("allOf", "anyOf", "oneOf"):
            if isinstance(node.get(key), list):
                node[key] = [
                    item
                    for item in node[key]
                    if not (
                        isinstance(item, dict)
                        and isinstance(item.get("$ref"), str)
                        and has_extension_segment(parse_ref(item["$ref"]).path)
                    )
                ]

        if not isinstance(node.get("$ref"), str):
            return
        ref = parse_ref(node["$ref"])
        if ref.filename == ".":
            return
        if has_extension_segment(ref.path):
            del node["$ref"]
            return

        next_hint = get_hint([*node_path, *ref.path], hint)

        if isinstance(schema, str):
            next_url = urljoin(schema, ref.filename)
            next_ref = relative_path(schema, next_url)
        elif is_remote_url(ref.filename) or is_filepath(ref.filename):
            next_url = ref.filename if ref.filename.startswith("file:") else resolve_schema(ref.filename)
            next_ref = next_url
        elif options.root_url == VIRTUAL_JSON_URL:
            raise InvalidUsageError(
                f"Can't resolve \"{ref.filename}\" from dynamic JSON. "
                "Load this schema from a URL instead."
            )
        else:
            raise RefResolutionError(f"Can't resolve \"{ref.filename}\"")

        next_id = "." if next_url == options.root_url else relative_path(options.root_url, next_url)
        if next_id not in options.url_cache and next_id not in scheduled:
            scheduled.add(next_id)
            pending.append(load(next_url, replace(options, hint=next_hint)))
        node["$ref"] = node["$ref"].replace(ref.filename, next_ref, 1)

    walk(document, _resolve_external)

    await asyncio.gather(*pending)

    if schema_id == ".":
        _rewrite_local_refs(options)
        _register_discriminators(options)

    return options.schemas


def _rewrite_local_refs(options: LoadOptions) -> None:
    """Turn every ``$ref`` in every loaded document into an indexed-access path."""
    for subschema_id, subschema in options.schemas.items():
        base_url = urljoin(options.root_url, subschema_id) if subschema_id != "." else options.root_url

        def _rewrite(node: dict[str, Any], _path: tuple[str, ...]) -> None:
            if not isinstance(node.get("$ref"), str):
                return
            ref = parse_ref(node["$ref"])
            if ref.filename == ".":
                if subschema_id == ".":
                    node["$ref"] = make_ts_index(ref.path)
                else:
                    node["$ref"] = make_ts_index(["external", subschema_id, *ref.path])
            else:
                ref_url = urljoin(base_url, ref.filename)
                if ref_url == options.root_url:
                    node["$ref"] = make_ts_index(ref.path)
                else:
                    node["$ref"] = make_ts_index(
                        ["external", relative_path(options.root_url, ref_url), *ref.path]
                    )

        walk(subschema.schema, _rewrite)


def _register_discriminators(options: LoadOptions) -> None:
    """Record every discriminator, keyed by the indexed-access path of its schema."""
    for subschema_id, subschema in options.schemas.items():

        def _register(node: dict[str, Any], node_path: tuple[str, ...]) -> None:
            discriminator = node.get("discriminator")
            if not isinstance(discriminator, dict) or not isinstance(
                discriminator.get("propertyName"), str
            ):
                return
            index_path = [segment for segment in node_path if segment != "properties"]
            if subschema_id == ".":
                key = make_ts_index(index_path)
            else:
                key = make_ts_index(["external", subschema_id, *index_path])
            options.discriminators[key] = DiscriminatorObject.model_validate(discriminator)

        walk(subschema.schema, _register)
