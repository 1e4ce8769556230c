"""Tests for openapi2ts.parser.hints."""

from __future__ import annotations

import itertools

import pytest

from openapi2ts.models import Hint
from openapi2ts.parser.hints import get_hint


class TestGetHintFromRoot:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            (["paths", "/pets"], Hint.PATH_ITEM),
            (["paths", "/pets", "get"], Hint.OPERATION),
            (["paths", "/pets", "parameters", "0"], Hint.PARAMETER),
            (["paths", "/pets", "get", "parameters", "0"], Hint.PARAMETER),
            (["paths", "/pets", "get", "parameters", "0", "schema"], Hint.SCHEMA),
            (["paths", "/pets", "get", "requestBody"], Hint.REQUEST_BODY),
            (["paths", "/pets", "get", "requestBody", "content", "application/json"], Hint.MEDIA_TYPE),
            (
                ["paths", "/pets", "get", "requestBody", "content", "application/json", "schema"],
                Hint.SCHEMA,
            ),
            (["paths", "/pets", "get", "responses", "200"], Hint.RESPONSE),
            (["paths", "/pets", "get", "responses", "200", "headers", "X-Rate"], Hint.SCHEMA),
            (["components", "schemas", "Pet"], Hint.SCHEMA),
            (["components", "schemas", "Pet", "allOf", "0"], Hint.SCHEMA),
            (["components", "responses", "NotFound"], Hint.RESPONSE),
            (["components", "parameters", "limit"], Hint.PARAMETER),
            (["components", "requestBodies", "Pet"], Hint.REQUEST_BODY),
            (["components", "headers", "X-Rate"], Hint.SCHEMA),
            (["components", "pathItems", "Pets"], Hint.PATH_ITEM),
            (["components", "examples", "pet"], Hint.SCHEMA),
            (["info", "title"], Hint.SCHEMA),
        ],
    )
    def test_root_paths(self, path: list[str], expected: Hint) -> None:
        assert get_hint(path) == expected


class TestGetHintFromStart:
    def test_request_body_content(self) -> None:
        assert get_hint(["content", "application/json"], Hint.REQUEST_BODY) == Hint.MEDIA_TYPE

    def test_response_header(self) -> None:
        assert get_hint(["headers", "X-Rate"], Hint.RESPONSE) == Hint.SCHEMA

    def test_header_kinds(self) -> None:
        assert get_hint([], Hint.HEADER) == Hint.HEADER
        assert get_hint(["schema"], Hint.HEADER) == Hint.SCHEMA
        assert get_hint(["content", "text/plain"], Hint.HEADER) == Hint.MEDIA_TYPE

    def test_media_type_schema(self) -> None:
        assert get_hint(["schema"], Hint.MEDIA_TYPE) == Hint.SCHEMA

    def test_empty_path_keeps_kind(self) -> None:
        assert get_hint([], Hint.OPERATION) == Hint.OPERATION
        assert get_hint([], Hint.PATH_ITEM) == Hint.PATH_ITEM


class TestGetHintIsTotal:
    def test_every_path_resolves(self) -> None:
        segments = ["paths", "components", "get", "parameters", "content", "schema", "0", "x"]
        for start in [None, *Hint]:
            for length in range(4):
                for path in itertools.product(segments, repeat=length):
                    assert isinstance(get_hint(list(path), start), Hint)
