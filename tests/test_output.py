"""Tests for the output formatting system.

Covers format resolution, NO_COLOR handling, stdout/stderr discipline,
quiet and verbose modes, and the global instance helpers.
"""

from __future__ import annotations

import json

import pytest

from schemacache import output as output_module
from schemacache.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


@pytest.fixture(autouse=True)
def _reset_global_output():
    reset_output()
    yield
    reset_output()


@pytest.fixture()
def non_tty(monkeypatch):
    monkeypatch.setattr("schemacache.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    monkeypatch.setattr("schemacache.output._is_tty", lambda: True)


class TestFormatResolution:
    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.RICH

    def test_auto_resolves_to_plain_when_no_color(self, tty):
        assert OutputManager(format=OutputFormat.AUTO, no_color=True).format == OutputFormat.PLAIN

    def test_no_color_env(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True


class TestDataOutput:
    def test_json_mode_pretty_prints_schema_string(self, capsys):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.format_response('{"type":"string"}')
        out = capsys.readouterr().out
        assert json.loads(out) == {"type": "string"}
        assert "\n  " in out

    def test_json_mode_quotes_non_json_string(self, capsys):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.format_response("plain text")
        assert capsys.readouterr().out.strip() == '"plain text"'

    def test_plain_mode_list(self, capsys):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.format_response(["orders-value", "billing-value"])
        assert capsys.readouterr().out == "orders-value\nbilling-value\n"

    def test_plain_mode_dict(self, capsys):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.format_response({"id": 12, "version": 3})
        assert capsys.readouterr().out == "id\t12\nversion\t3\n"

    def test_plain_mode_string_verbatim(self, capsys):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.format_response('{"type":"string"}')
        assert capsys.readouterr().out == '{"type":"string"}\n'


class TestDiagnostics:
    def test_info_goes_to_stderr(self, capsys):
        OutputManager(no_color=True).info("hello")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "hello\n"

    def test_quiet_suppresses_info_not_error(self, capsys):
        mgr = OutputManager(no_color=True, quiet=True)
        mgr.info("hidden")
        mgr.success("hidden")
        mgr.error("shown")
        assert capsys.readouterr().err == "Error: shown\n"

    def test_debug_only_when_verbose(self, capsys):
        OutputManager(no_color=True).debug("quiet")
        OutputManager(no_color=True, verbose=True).debug("loud")
        assert capsys.readouterr().err == "[debug] loud\n"

    def test_warning(self, capsys):
        OutputManager(no_color=True, quiet=True).warning("careful")
        assert capsys.readouterr().err == "Warning: careful\n"


class TestGlobalInstance:
    def test_get_output_creates_default(self):
        assert isinstance(get_output(), OutputManager)

    def test_set_output_installs_instance(self, capsys):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        set_output(mgr)
        assert get_output() is mgr
        output_module.print_data("x")
        assert capsys.readouterr().out == "x\n"
