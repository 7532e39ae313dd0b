"""Terminal rendering for crudwizard commands.

Two channels, never mixed:

* **stdout** carries data: decoded response bodies and the operation,
  resource and parameter tables.
* **stderr** carries everything about the run: status lines, dry-run
  request dumps, notices and the package's log records.

Rendering depends on the resolved :class:`OutputFormat`. ``JSON`` and
``PLAIN`` are meant for pipes and scripts; ``RICH`` adds tables and syntax
highlighting on an interactive terminal. ``NO_COLOR`` and ``TERM=dumb``
disable colour.

:func:`~crudwizard.app.main_callback` builds one :class:`OutputManager`
per run and installs it with :func:`set_output`. Library code only logs;
:meth:`OutputManager.install_log_handler` is what makes those records
visible.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from enum import Enum
from typing import TYPE_CHECKING, Any, NamedTuple, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from crudwizard.models import RequestDescriptor

_PACKAGE_LOGGER = "crudwizard"


class OutputFormat(str, Enum):
    """Output formats selectable from the command line.

    ``AUTO`` becomes ``RICH`` on a colour-capable TTY and ``PLAIN`` otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class _Notice(NamedTuple):
    label: str
    label_style: str
    style: str
    hushable: bool


# Stderr notice kinds. ``hushable`` notices are dropped under --quiet.
_NOTICES = {
    "info": _Notice("", "", "", True),
    "success": _Notice("", "", "green", True),
    "error": _Notice("Error:", "bold red", "", False),
    "debug": _Notice("[debug]", "dim", "dim", True),
}


class OutputManager:
    """Per-run rendering state: format, colour and verbosity.

    Args:
        format: Requested format; ``AUTO`` is resolved immediately.
        no_color: Disable colour even on a TTY.
        quiet: Drop informational notices (errors and data still print).
        verbose: Show debug notices and DEBUG log records.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            format = OutputFormat.RICH if _is_tty() and not self._no_color else OutputFormat.PLAIN
        self._format = format

        # No ``file=``: rich looks sys.stdout / sys.stderr up on every write.
        self._stdout = Console(no_color=self._no_color, force_terminal=format == OutputFormat.RICH)
        self._stderr = Console(no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # ------------------------------------------------------------------ #
    # stdout
    # ------------------------------------------------------------------ #

    def print_body(self, data: Any, content_type: str = "application/json") -> None:
        """Render a decoded response body.

        JSON text is parsed first, so a body the server mislabelled as
        ``text/plain`` still renders as structured data in JSON mode.

        Args:
            data: A JSON value or the raw response text.
            content_type: The response's ``Content-Type`` header.
        """
        if isinstance(data, str):
            data = _maybe_json(data) if self._format == OutputFormat.JSON or "json" in content_type else data

        if self._format == OutputFormat.JSON:
            self._write(data if isinstance(data, str) else _dumps(data))
        elif self._format == OutputFormat.PLAIN:
            for line in _plain_lines(data):
                self._write(line)
        elif isinstance(data, (dict, list)):
            self._stdout.print(Syntax(_dumps(data), "json", theme="monokai", word_wrap=True))
        else:
            self._stdout.print(str(data), markup=False, highlight=False)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Render rows under *headers*.

        JSON mode emits one object per row keyed by header, plain mode emits
        tab-separated lines (header first), and rich mode draws a table.
        *title* is only shown in rich mode.
        """
        if self._format == OutputFormat.JSON:
            self._write(json.dumps([dict(zip(headers, row)) for row in rows], indent=2, ensure_ascii=False))
            return
        if self._format == OutputFormat.PLAIN:
            for row in [headers, *rows]:
                self._write("\t".join(row))
            return

        table = Table(title=title, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    # ------------------------------------------------------------------ #
    # stderr
    # ------------------------------------------------------------------ #

    def print_request(self, request: RequestDescriptor) -> None:
        """Describe a request that ``--dry-run`` kept from being sent."""
        lines = [f"[dry-run] {request.method} {request.full_url}"]
        lines += [f"  {name}: {value}" for name, value in request.headers.items()]
        if request.has_body:
            lines.append(f"  Body: {json.dumps(request.json_body, indent=2, default=str)}")
        for line in lines:
            self._notify("info", line)

    def info(self, message: str) -> None:
        self._notify("info", message)

    def success(self, message: str) -> None:
        self._notify("success", message)

    def error(self, message: str) -> None:
        self._notify("error", message)

    def debug(self, message: str) -> None:
        if self._verbose:
            self._notify("debug", message)

    def install_log_handler(self) -> logging.Handler:
        """Send ``crudwizard.*`` log records to stderr.

        The package logger runs at DEBUG with ``--verbose``, ERROR with
        ``--quiet`` and WARNING otherwise. A handler from an earlier call
        is replaced, never stacked.

        Returns:
            The installed :class:`rich.logging.RichHandler`.
        """
        logger = logging.getLogger(_PACKAGE_LOGGER)
        for existing in list(logger.handlers):
            if isinstance(existing, RichHandler):
                logger.removeHandler(existing)

        if self._verbose:
            level = logging.DEBUG
        elif self._quiet:
            level = logging.ERROR
        else:
            level = logging.WARNING

        handler = RichHandler(console=self._stderr, show_time=False, show_path=self._verbose)
        handler.setLevel(level)
        logger.addHandler(handler)
        logger.setLevel(level)
        return handler

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _notify(self, kind: str, message: str) -> None:
        notice = _NOTICES[kind]
        if notice.hushable and self._quiet:
            return
        text = Text()
        if notice.label:
            text.append(f"{notice.label} ", style=notice.label_style)
        text.append(message, style=notice.style)
        self._stderr.print(text, soft_wrap=True, highlight=False)

    @staticmethod
    def _write(line: str) -> None:
        print(line, file=sys.stdout, flush=True)


def _dumps(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _maybe_json(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError:
        return text


def _plain_lines(data: Any) -> list[str]:
    """Flatten a body into tab-separated lines for ``--plain``."""
    if isinstance(data, dict):
        return [f"{key}\t{value}" for key, value in data.items()]
    if isinstance(data, list):
        return ["\t".join(str(v) for v in item.values()) if isinstance(item, dict) else str(item) for item in data]
    return [str(data)]


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when NO_COLOR is set (to anything) or TERM is ``dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Process-wide instance
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager; tests call this between cases."""
    global _output
    _output = None


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
