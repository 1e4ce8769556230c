"""Tests for the output system.

Covers:
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Quiet mode suppression rules
- Verbose mode debug output
- Atomic output file writes
- Global instance management
"""

from __future__ import annotations

from pathlib import Path

import pytest

from openapi2ts import output as output_module
from openapi2ts.output import (
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


# ------------------------------------------------------------------ #
# Colour detection
# ------------------------------------------------------------------ #


class TestColorDetection:
    def test_no_color_env(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_dumb_terminal(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_colour_allowed(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# Stream discipline
# ------------------------------------------------------------------ #


class TestStreams:
    def test_print_data_goes_to_stdout(self, capsys):
        OutputManager(no_color=True).print_data("export type a = string;")
        captured = capsys.readouterr()
        assert captured.out == "export type a = string;\n"
        assert captured.err == ""

    def test_diagnostics_go_to_stderr(self, capsys):
        mgr = OutputManager(no_color=True)
        mgr.info("loading")
        mgr.warning("careful")
        mgr.error("broken")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "loading\nWarning: careful\nError: broken\n"

    def test_quiet_suppresses_info_and_success(self, capsys):
        mgr = OutputManager(no_color=True, quiet=True)
        mgr.info("loading")
        mgr.success("done")
        mgr.warning("careful")
        assert capsys.readouterr().err == "Warning: careful\n"

    def test_debug_only_when_verbose(self, capsys):
        OutputManager(no_color=True).debug("hidden")
        assert capsys.readouterr().err == ""
        OutputManager(no_color=True, verbose=True).debug("shown")
        assert capsys.readouterr().err == "[debug] shown\n"


# ------------------------------------------------------------------ #
# File output
# ------------------------------------------------------------------ #


class TestWriteFile:
    def test_writes_with_trailing_newline(self, tmp_path: Path):
        target = tmp_path / "out" / "schema.ts"
        OutputManager(no_color=True).write_file(str(target), "export type a = string;")
        assert target.read_text(encoding="utf-8") == "export type a = string;\n"

    def test_replaces_existing_file_without_leftovers(self, tmp_path: Path):
        target = tmp_path / "schema.ts"
        target.write_text("old\n", encoding="utf-8")
        OutputManager(no_color=True).write_file(str(target), "new\n")
        assert target.read_text(encoding="utf-8") == "new\n"
        assert [p.name for p in tmp_path.iterdir()] == ["schema.ts"]

    def test_failed_write_keeps_original(self, tmp_path: Path, monkeypatch):
        target = tmp_path / "schema.ts"
        target.write_text("old\n", encoding="utf-8")

        def _fail(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(output_module.os, "replace", _fail)
        with pytest.raises(OSError, match="disk full"):
            OutputManager(no_color=True).write_file(str(target), "new\n")
        assert target.read_text(encoding="utf-8") == "old\n"
        assert [p.name for p in tmp_path.iterdir()] == ["schema.ts"]


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_lazy_default(self):
        reset_output()
        assert isinstance(get_output(), OutputManager)

    def test_set_and_use(self, capsys):
        set_output(OutputManager(no_color=True, verbose=True))
        output_module.debug("via module")
        assert capsys.readouterr().err == "[debug] via module\n"
