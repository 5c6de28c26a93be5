"""Console output for the schemacache CLI.

Schema documents, ids and listings go to **stdout** and nothing else does,
so ``schemacache fetch 42 > order.avsc`` always yields a clean file. Status
lines, warnings, errors and debug traces go to **stderr**.

The data format is chosen once per invocation:

* ``json`` -- machine readable; schema documents are re-indented.
* ``plain`` -- one item per line, ``key<TAB>value`` for records.
* ``rich`` -- syntax-highlighted JSON for interactive terminals.
* ``auto`` -- ``rich`` on a colour-capable TTY, ``plain`` otherwise.

Colour is disabled by ``--no-color``, ``NO_COLOR`` (any value) or
``TERM=dumb``.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.syntax import Syntax


class OutputFormat(str, Enum):
    """Data formats accepted by ``--json`` / ``--plain`` and ``output.format``."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Per-invocation output settings plus the two consoles.

    Args:
        format: Requested data format; ``AUTO`` is resolved here.
        no_color: Force colour off regardless of the environment.
        quiet: Hide ``info`` and ``success`` lines.
        verbose: Show ``debug`` lines.
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
            rich_ok = _is_tty() and not self._no_color
            format = OutputFormat.RICH if rich_ok else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    # --- stdout ---

    def format_response(self, data: Any) -> None:
        """Write *data* to stdout in the resolved format.

        A string holding JSON (a schema document, usually) is parsed first
        so that ``json`` and ``rich`` can re-indent it; ``plain`` prints it
        untouched.
        """
        if self._format == OutputFormat.PLAIN:
            self._emit_plain(data)
            return

        parsed = _maybe_json(data)
        if self._format == OutputFormat.JSON:
            if isinstance(data, str) and parsed is data:
                self.print_data(json.dumps(data, ensure_ascii=False))
            else:
                self.print_data(json.dumps(parsed, indent=2, ensure_ascii=False, default=str))
        elif isinstance(parsed, (dict, list)):
            text = json.dumps(parsed, indent=2, ensure_ascii=False, default=str)
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))
        else:
            self._stdout.print(str(parsed), markup=False)

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def _emit_plain(self, data: Any) -> None:
        if isinstance(data, dict):
            lines = [f"{key}\t{value}" for key, value in data.items()]
        elif isinstance(data, list):
            lines = [str(item) for item in data]
        else:
            lines = [str(data)]
        for line in lines:
            self.print_data(line)

    # --- stderr ---

    def info(self, message: str) -> None:
        """Status line; hidden by ``--quiet``."""
        if not self._quiet:
            self._diagnostic(message)

    def success(self, message: str) -> None:
        """Completion line in green; hidden by ``--quiet``."""
        if not self._quiet:
            self._diagnostic(message, style="green")

    def warning(self, message: str) -> None:
        """Always shown."""
        self._diagnostic(message, label="Warning:", style="yellow")

    def error(self, message: str) -> None:
        """Always shown."""
        self._diagnostic(message, label="Error:", style="bold red")

    def debug(self, message: str) -> None:
        """Only shown with ``--verbose``."""
        if self._verbose:
            self._diagnostic(f"[debug] {message}", style="dim")

    def _diagnostic(self, message: str, label: str = "", style: str = "") -> None:
        if self._no_color:
            text = f"{label} {message}" if label else message
            print(text, file=sys.stderr, flush=True)
        elif label:
            self._stderr.print(f"[{style}]{label}[/{style}] {message}")
        elif style:
            self._stderr.print(message, style=style, markup=False)
        else:
            self._stderr.print(message, markup=False)


def _maybe_json(data: Any) -> Any:
    """Parse *data* if it is a JSON string, else return it unchanged."""
    if not isinstance(data, str):
        return data
    try:
        return json.loads(data)
    except json.JSONDecodeError:
        return data


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set to anything or ``TERM`` is ``dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# --- Process-wide instance, installed by the root CLI callback ---

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_data(text: str) -> None:
    get_output().print_data(text)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
