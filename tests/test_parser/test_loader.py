"""Tests for openapi2ts.parser.loader."""

from __future__ import annotations

import asyncio
import io
import json
import textwrap
from pathlib import Path
from typing import Any, Optional

import httpx
import pytest

from openapi2ts.exceptions import (
    ConnectionError_,
    InvalidUsageError,
    RefResolutionError,
    SchemaNotFoundError,
    SpecParseError,
)
from openapi2ts.models import Hint
from openapi2ts.parser.loader import (
    VIRTUAL_JSON_URL,
    LoadOptions,
    load,
    parse_http_headers,
    relative_path,
    resolve_schema,
)

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"


def _load(schema: Any, root_url: str, **kwargs: Any) -> tuple[dict, LoadOptions]:
    options = LoadOptions(root_url=root_url, **kwargs)
    return asyncio.run(load(schema, options)), options


class FakeFetch:
    """Serves canned documents and records every request."""

    def __init__(self, documents: dict[str, str], status_code: int = 200) -> None:
        self.documents = documents
        self.status_code = status_code
        self.calls: list[tuple[str, str, dict[str, str]]] = []

    async def __call__(
        self, url: str, *, method: str = "GET", headers: Optional[dict[str, str]] = None
    ) -> httpx.Response:
        self.calls.append((url, method, dict(headers or {})))
        response = httpx.Response(
            status_code=self.status_code if url in self.documents else 404,
            text=self.documents.get(url, ""),
            headers={"content-type": "application/yaml"},
            request=httpx.Request(method, url),
        )
        response.raise_for_status()
        return response


# ---------------------------------------------------------------------------
# Locators
# ---------------------------------------------------------------------------


class TestResolveSchema:
    def test_local_file_becomes_file_url(self, tmp_path: Path) -> None:
        spec = tmp_path / "openapi.yaml"
        spec.write_text("openapi: 3.0.3\n", encoding="utf-8")
        assert resolve_schema(str(spec)) == spec.resolve().as_uri()

    def test_file_url_is_accepted(self, tmp_path: Path) -> None:
        spec = tmp_path / "openapi.yaml"
        spec.write_text("openapi: 3.0.3\n", encoding="utf-8")
        assert resolve_schema(spec.as_uri()) == spec.resolve().as_uri()

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(SchemaNotFoundError, match="Could not locate"):
            resolve_schema(str(tmp_path / "missing.yaml"))

    def test_directory_raises(self, tmp_path: Path) -> None:
        with pytest.raises(SchemaNotFoundError, match="is a directory not a file"):
            resolve_schema(str(tmp_path))

    def test_remote_urls(self) -> None:
        assert resolve_schema("https://example.com/openapi.json") == "https://example.com/openapi.json"
        assert resolve_schema("//example.com/openapi.json") == "https://example.com/openapi.json"


class TestRelativePath:
    def test_same_directory(self) -> None:
        assert relative_path("file:///a/b/root.yaml", "file:///a/b/common.yaml") == "common.yaml"

    def test_sibling_directory(self) -> None:
        assert relative_path("file:///a/b/root.yaml", "file:///a/c/x.yaml") == "../c/x.yaml"

    def test_same_origin_http(self) -> None:
        assert (
            relative_path("https://example.com/api/root.yaml", "https://example.com/api/common.yaml")
            == "common.yaml"
        )

    def test_cross_origin_is_absolute(self) -> None:
        assert (
            relative_path("https://example.com/root.yaml", "https://other.com/common.yaml")
            == "https://other.com/common.yaml"
        )


class TestParseHttpHeaders:
    def test_non_string_values_are_json(self) -> None:
        assert parse_http_headers({"X-A": "a", "X-B": {"k": 1}, "X-C": 3}) == {
            "X-A": "a",
            "X-B": '{"k": 1}',
            "X-C": "3",
        }

    def test_unserializable_value_is_skipped(self, quiet_output, capsys) -> None:
        assert parse_http_headers({"X-Bad": object(), "X-Good": "ok"}) == {"X-Good": "ok"}
        assert "X-Bad" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# In-memory and stream roots
# ---------------------------------------------------------------------------


class TestLoadInMemory:
    def test_local_refs_become_ts_indexes(self) -> None:
        doc = {
            "openapi": "3.0.3",
            "components": {
                "schemas": {
                    "Pet": {"type": "object"},
                    "Pets": {"type": "array", "items": {"$ref": "#/components/schemas/Pet"}},
                }
            },
        }
        schemas, _ = _load(doc, VIRTUAL_JSON_URL)
        assert list(schemas) == ["."]
        assert schemas["."].hint == Hint.OPENAPI3
        assert doc["components"]["schemas"]["Pets"]["items"]["$ref"] == 'components["schemas"]["Pet"]'

    def test_examples_are_stripped(self) -> None:
        doc = {"openapi": "3.0.3", "components": {"examples": {"a": {}}, "schemas": {}}}
        schemas, _ = _load(doc, VIRTUAL_JSON_URL)
        assert "examples" not in schemas["."].schema["components"]

    def test_relative_ref_from_memory_is_rejected(self) -> None:
        doc = {"components": {"schemas": {"A": {"$ref": "other.yaml#/components/schemas/B"}}}}
        with pytest.raises(InvalidUsageError, match="dynamic JSON"):
            _load(doc, VIRTUAL_JSON_URL)

    def test_absolute_file_ref_from_memory(self, tmp_path: Path) -> None:
        other = tmp_path / "other.yaml"
        other.write_text("components:\n  schemas:\n    B:\n      type: string\n", encoding="utf-8")
        doc = {"components": {"schemas": {"A": {"$ref": f"{other.as_uri()}#/components/schemas/B"}}}}
        schemas, _ = _load(doc, VIRTUAL_JSON_URL)
        assert len(schemas) == 2
        assert doc["components"]["schemas"]["A"]["$ref"].endswith('["components"]["schemas"]["B"]')
        assert doc["components"]["schemas"]["A"]["$ref"].startswith('external["')

    def test_invalid_locator(self) -> None:
        with pytest.raises(InvalidUsageError, match="Invalid schema"):
            _load(42, VIRTUAL_JSON_URL)

    def test_stream(self) -> None:
        stream = io.StringIO(json.dumps({"openapi": "3.1.0", "paths": {}}))
        schemas, _ = _load(stream, VIRTUAL_JSON_URL)
        assert schemas["."].schema["openapi"] == "3.1.0"

    def test_bytes_stream_yaml(self) -> None:
        stream = io.BytesIO(b"openapi: 3.1.0\npaths: {}\n")
        schemas, _ = _load(stream, VIRTUAL_JSON_URL)
        assert schemas["."].schema["paths"] == {}

    def test_non_object_document_raises(self) -> None:
        with pytest.raises(SpecParseError, match="JSON/YAML object"):
            _load(io.StringIO("[1, 2, 3]"), VIRTUAL_JSON_URL)

    def test_extension_refs_are_pruned(self) -> None:
        doc = {
            "components": {
                "schemas": {
                    "A": {"allOf": [{"$ref": "other.yaml#/x-internal/B"}, {"type": "object"}]},
                    "C": {"$ref": "other.yaml#/x-internal/D"},
                }
            }
        }
        schemas, _ = _load(doc, VIRTUAL_JSON_URL)
        assert list(schemas) == ["."]
        assert doc["components"]["schemas"]["A"]["allOf"] == [{"type": "object"}]
        assert "$ref" not in doc["components"]["schemas"]["C"]

    def test_discriminators_are_registered(self) -> None:
        doc = {
            "components": {
                "schemas": {
                    "Pet": {
                        "type": "object",
                        "discriminator": {
                            "propertyName": "petType",
                            "mapping": {"cat": "#/components/schemas/Cat"},
                        },
                    }
                }
            }
        }
        _, options = _load(doc, VIRTUAL_JSON_URL)
        discriminator = options.discriminators['components["schemas"]["Pet"]']
        assert discriminator.property_name == "petType"
        assert discriminator.mapping == {"cat": "#/components/schemas/Cat"}


# ---------------------------------------------------------------------------
# Multi-document graphs on disk
# ---------------------------------------------------------------------------


class TestLoadFiles:
    def test_external_document_loaded_and_rewritten(self) -> None:
        root = resolve_schema(str(FIXTURES_DIR / "petstore.yaml"))
        schemas, _ = _load(root, root)
        assert sorted(schemas) == [".", "common.yaml"]
        pet = schemas["."].schema["components"]["schemas"]["Pet"]
        assert pet["properties"]["id"]["$ref"] == 'external["common.yaml"]["components"]["schemas"]["Id"]'

    def test_local_refs_in_external_documents_are_prefixed(self) -> None:
        root = resolve_schema(str(FIXTURES_DIR / "petstore.yaml"))
        schemas, _ = _load(root, root)
        error = schemas["common.yaml"].schema["components"]["responses"]["Error"]
        assert (
            error["content"]["application/json"]["schema"]["$ref"]
            == 'external["common.yaml"]["components"]["schemas"]["Error"]'
        )

    def test_cycle_terminates_with_each_document_once(self) -> None:
        root = resolve_schema(str(FIXTURES_DIR / "cycle" / "a.yaml"))
        schemas, _ = _load(root, root)
        assert sorted(schemas) == [".", "b.yaml"]
        b = schemas["b.yaml"].schema["components"]["schemas"]["B"]
        assert b["properties"]["a"]["$ref"] == 'components["schemas"]["A"]'

    def test_unquoted_yaml_keys_become_strings(self, tmp_path: Path) -> None:
        root = tmp_path / "openapi.yaml"
        root.write_text(
            textwrap.dedent("""\
                openapi: "3.0.3"
                paths:
                  /pets:
                    get:
                      responses:
                        200:
                          description: OK
            """),
            encoding="utf-8",
        )
        schemas, _ = _load(root.as_uri(), root.as_uri())
        assert list(schemas["."].schema["paths"]["/pets"]["get"]["responses"]) == ["200"]

    def test_parse_error(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text("{invalid json", encoding="utf-8")
        with pytest.raises(SpecParseError, match="JSON"):
            _load(bad.as_uri(), bad.as_uri())

    def test_yaml_parse_error(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.yaml"
        bad.write_text("key: [unclosed\n", encoding="utf-8")
        with pytest.raises(SpecParseError, match="YAML"):
            _load(bad.as_uri(), bad.as_uri())

    def test_missing_referenced_file(self, tmp_path: Path) -> None:
        spec = tmp_path / "openapi.yaml"
        spec.write_text(
            textwrap.dedent("""\
                components:
                  schemas:
                    A:
                      $ref: "missing.yaml#/components/schemas/B"
            """),
            encoding="utf-8",
        )
        with pytest.raises(RefResolutionError, match="missing.yaml"):
            _load(spec.as_uri(), spec.as_uri())


# ---------------------------------------------------------------------------
# Remote documents
# ---------------------------------------------------------------------------

ROOT_URL = "https://example.com/api/openapi.yaml"
COMMON_URL = "https://example.com/api/common.yaml"

REMOTE_ROOT = textwrap.dedent("""\
    openapi: "3.0.3"
    components:
      schemas:
        Pet:
          type: object
          properties:
            id:
              $ref: "./common.yaml#/components/schemas/Id"
            ownerId:
              $ref: "./common.yaml#/components/schemas/Id"
""")

REMOTE_COMMON = textwrap.dedent("""\
    components:
      schemas:
        Id:
          type: integer
""")


class TestLoadRemote:
    def test_shared_document_fetched_once(self) -> None:
        fetch = FakeFetch({ROOT_URL: REMOTE_ROOT, COMMON_URL: REMOTE_COMMON})
        schemas, _ = _load(ROOT_URL, ROOT_URL, fetch=fetch)
        assert [url for url, _, _ in fetch.calls] == [ROOT_URL, COMMON_URL]
        props = schemas["."].schema["components"]["schemas"]["Pet"]["properties"]
        expected = 'external["common.yaml"]["components"]["schemas"]["Id"]'
        assert props["id"]["$ref"] == expected
        assert props["ownerId"]["$ref"] == expected

    def test_auth_and_custom_headers_are_sent(self) -> None:
        fetch = FakeFetch({ROOT_URL: "openapi: 3.0.3\n"})
        _load(
            ROOT_URL,
            ROOT_URL,
            fetch=fetch,
            auth="Bearer secret",
            http_headers={"X-Count": 2},
            http_method="POST",
        )
        _, method, headers = fetch.calls[0]
        assert method == "POST"
        assert headers["Authorization"] == "Bearer secret"
        assert headers["X-Count"] == "2"
        assert headers["User-Agent"] == "openapi2ts"

    def test_http_error_raises_connection_error(self) -> None:
        fetch = FakeFetch({})
        with pytest.raises(ConnectionError_, match="HTTP 404"):
            _load(ROOT_URL, ROOT_URL, fetch=fetch)

    def test_transport_error_raises_connection_error(self) -> None:
        async def failing_fetch(url: str, **kwargs: Any) -> httpx.Response:
            raise httpx.ConnectError("connection refused")

        with pytest.raises(ConnectionError_, match="Failed to fetch"):
            _load(ROOT_URL, ROOT_URL, fetch=failing_fetch)
