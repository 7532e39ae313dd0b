"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Quiet and verbose modes
- JSON, plain and rich rendering of response bodies and tables
- Dry-run request dumps
- Routing of package log records through the Rich log handler
- Global instance management and convenience functions
"""

from __future__ import annotations

import io
import json
import logging
import sys

import pytest
from rich.logging import RichHandler

from crudwizard import output as output_module
from crudwizard.models import RequestDescriptor
from crudwizard.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("crudwizard.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("crudwizard.output._is_tty", lambda: True)


@pytest.fixture()
def package_logger():
    """Yield the package logger and restore its handlers and level afterwards."""
    logger = logging.getLogger("crudwizard")
    handlers, level = list(logger.handlers), logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)


# ------------------------------------------------------------------ #
# OutputFormat resolution
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.RICH

    def test_auto_resolves_to_plain_when_no_color(self, tty):
        assert OutputManager(format=OutputFormat.AUTO, no_color=True).format == OutputFormat.PLAIN

    def test_explicit_json_stays_json(self, tty):
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON


class TestColorDisabling:
    def test_no_color_env_any_value(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb_disables_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term_keeps_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# stdout vs stderr discipline
# ------------------------------------------------------------------ #


class TestStdoutStderrDiscipline:
    """Data goes to stdout and diagnostics go to stderr."""

    def test_body_goes_to_stdout(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).print_body("hello world", "text/plain")
        captured = capfd.readouterr()
        assert captured.out == "hello world\n"
        assert captured.err == ""

    @pytest.mark.parametrize("method", ["info", "error", "success"])
    def test_notices_go_to_stderr(self, capfd, non_tty, method):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        getattr(mgr, method)("diagnostic text")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "diagnostic text" in captured.err

    def test_error_prefix(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).error("broken")
        assert capfd.readouterr().err == "Error: broken\n"

    def test_brackets_are_not_markup(self, capfd, non_tty):
        OutputManager(format=OutputFormat.RICH).info("[bold]petId[/bold] is required")
        assert "[bold]petId[/bold] is required" in capfd.readouterr().err

    def test_long_notices_are_not_wrapped(self, capfd, non_tty):
        message = "Failed to load document " + "/very/long/path" * 10
        OutputManager(format=OutputFormat.PLAIN, no_color=True).error(message)
        assert capfd.readouterr().err == f"Error: {message}\n"

    def test_streams_looked_up_at_write_time(self, monkeypatch, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        buffer = io.StringIO()
        monkeypatch.setattr(sys, "stderr", buffer)

        mgr.info("after redirect")

        assert buffer.getvalue() == "after redirect\n"


class TestQuietAndVerbose:
    def test_quiet_drops_info_and_success(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.info("a")
        mgr.success("b")
        assert capfd.readouterr().err == ""

    def test_quiet_keeps_errors_and_data(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.error("still here")
        mgr.print_body({"id": 1})
        captured = capfd.readouterr()
        assert "still here" in captured.err
        assert captured.out == "id\t1\n"

    def test_debug_only_when_verbose(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).debug("hidden")
        assert capfd.readouterr().err == ""

        OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True).debug("shown")
        assert capfd.readouterr().err == "[debug] shown\n"


# ------------------------------------------------------------------ #
# Rendering
# ------------------------------------------------------------------ #


class TestPrintBody:
    def test_json_dict(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).print_body({"id": 1, "tags": ["a"]})
        assert json.loads(capfd.readouterr().out) == {"id": 1, "tags": ["a"]}

    def test_json_string_is_reparsed(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).print_body('{"a":1}', "text/plain")
        assert capfd.readouterr().out == '{\n  "a": 1\n}\n'

    def test_json_mode_passes_non_json_text_through(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).print_body("pong", "text/plain")
        assert capfd.readouterr().out == "pong\n"

    def test_plain_dict_is_tab_separated(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN).print_body({"id": 1, "name": "Rex"})
        assert capfd.readouterr().out == "id\t1\nname\tRex\n"

    def test_plain_list_of_dicts(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN).print_body([{"id": 1, "name": "Rex"}, "x"])
        assert capfd.readouterr().out == "1\tRex\nx\n"

    def test_plain_json_text_is_flattened(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN).print_body('{"sold": 3}', "application/json")
        assert capfd.readouterr().out == "sold\t3\n"

    def test_rich_highlights_json(self, capfd, tty):
        OutputManager(format=OutputFormat.RICH, no_color=True).print_body({"name": "Rex"})
        out = capfd.readouterr().out
        assert "name" in out
        assert "Rex" in out


class TestPrintTable:
    def test_plain_table(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN).print_table(["ID", "Plural"], [["pet", "Pets"]], title="ignored")
        assert capfd.readouterr().out == "ID\tPlural\npet\tPets\n"

    def test_json_table(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).print_table(["ID", "Plural"], [["pet", "Pets"]])
        assert json.loads(capfd.readouterr().out) == [{"ID": "pet", "Plural": "Pets"}]

    def test_rich_table(self, capfd, tty):
        OutputManager(format=OutputFormat.RICH, no_color=True).print_table(["ID"], [["pet"]], title="Resources")
        out = capfd.readouterr().out
        assert "Resources" in out
        assert "pet" in out


class TestPrintRequest:
    def test_request_line_headers_and_body(self, capfd, non_tty):
        request = RequestDescriptor(
            method="POST",
            url="https://petstore.swagger.io/v2/pet",
            params=[("dryRun", "true")],
            headers={"Content-Type": "application/json"},
            json_body={"name": "Rex"},
            has_body=True,
        )

        OutputManager(format=OutputFormat.PLAIN, no_color=True).print_request(request)

        captured = capfd.readouterr()
        assert captured.out == ""
        lines = captured.err.splitlines()
        assert lines[0] == "[dry-run] POST https://petstore.swagger.io/v2/pet?dryRun=true"
        assert lines[1] == "  Content-Type: application/json"
        assert '"name": "Rex"' in captured.err

    def test_bodyless_request(self, capfd, non_tty):
        request = RequestDescriptor(method="GET", url="https://petstore.swagger.io/v2/store/inventory")

        OutputManager(format=OutputFormat.PLAIN, no_color=True).print_request(request)

        assert capfd.readouterr().err == "[dry-run] GET https://petstore.swagger.io/v2/store/inventory\n"


# ------------------------------------------------------------------ #
# Logging bridge
# ------------------------------------------------------------------ #


class TestLogHandler:
    def test_levels_follow_flags(self, package_logger, non_tty):
        OutputManager(verbose=True).install_log_handler()
        assert package_logger.level == logging.DEBUG

        OutputManager(quiet=True).install_log_handler()
        assert package_logger.level == logging.ERROR

        OutputManager().install_log_handler()
        assert package_logger.level == logging.WARNING

    def test_reinstall_replaces_handler(self, package_logger, non_tty):
        first = OutputManager().install_log_handler()
        second = OutputManager().install_log_handler()

        rich_handlers = [h for h in package_logger.handlers if isinstance(h, RichHandler)]
        assert rich_handlers == [second]
        assert first is not second

    def test_records_reach_stderr(self, capfd, package_logger, non_tty):
        OutputManager(no_color=True).install_log_handler()
        logging.getLogger("crudwizard.client.dispatcher").warning("Operation getPetById failed")

        captured = capfd.readouterr()
        assert "Operation getPetById failed" in captured.err
        assert captured.out == ""


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_get_output_creates_default(self):
        reset_output()
        assert isinstance(get_output(), OutputManager)
        assert get_output() is get_output()

    def test_set_then_reset(self):
        mgr = OutputManager(format=OutputFormat.JSON)
        set_output(mgr)
        assert get_output() is mgr
        reset_output()
        assert get_output() is not mgr

    def test_convenience_functions_use_global(self, capfd, non_tty):
        set_output(OutputManager(format=OutputFormat.JSON, no_color=True))
        output_module.info("note")
        output_module.error("bad")
        output_module.debug("hidden")

        captured = capfd.readouterr()
        assert captured.out == ""
        assert captured.err == "note\nError: bad\n"
