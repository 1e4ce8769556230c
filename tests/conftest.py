"""Shared test fixtures for openapi2ts.

Provides reusable fixtures for rendering schema fragments, creating isolated
config environments, managing output state, and running CLI commands.
These fixtures are automatically discovered by pytest and available to
all test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from openapi2ts.models import GlobalContext, TransformSchemaObjectOptions
from openapi2ts.output import OutputManager, reset_output, set_output

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches a reference to sys.stderr at creation time.
    When Typer's CliRunner redirects that stream and the test finishes, the
    cached reference becomes stale. Resetting forces a fresh manager to be
    created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Transform fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def make_options() -> Callable[..., TransformSchemaObjectOptions]:
    """Factory for transformer options.

    Keyword arguments other than ``path`` are passed to
    :class:`~openapi2ts.models.GlobalContext`.
    """

    def _make(path: str = "#/components/schemas/Test", **ctx_kwargs: Any) -> TransformSchemaObjectOptions:
        return TransformSchemaObjectOptions(path=path, ctx=GlobalContext(**ctx_kwargs))

    return _make


@pytest.fixture
def petstore_path() -> Path:
    """Root fixture document that references ``common.yaml``."""
    return FIXTURES_DIR / "petstore.yaml"


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_DATA_HOME to a subdirectory of tmp_path, clears all
    OPENAPI2TS_* environment variables and changes the working directory
    to tmp_path so no stray ``openapi2ts.json`` is picked up.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ["OPENAPI2TS_AUTH", "OPENAPI2TS_HTTP_METHOD"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet, colourless output manager for the test."""
    output = OutputManager(no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
