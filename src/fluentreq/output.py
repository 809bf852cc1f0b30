"""Debug output for requests sent with ``Request.set_debug()``.

Everything here writes to **stderr** so that debug traces never mix with
whatever the calling program prints on stdout.  Rich formatting is used
unless colour is disabled (``NO_COLOR`` set, ``TERM=dumb`` or
``no_color=True``), in which case plain text is printed.

The module exposes two layers:

1. :class:`DebugOutput` -- holds the Rich console and colour preference.
2. :func:`get_output` / :func:`set_output` / :func:`reset_output` --
   manage the process-wide instance, so tests can swap in a mock.

Library diagnostics (codec selection, registry changes) go through
:mod:`logging` instead; this module is only for the opt-in trace.
"""

from __future__ import annotations

import os
import sys
from typing import Any, Mapping, Optional

from rich.console import Console
from rich.syntax import Syntax

_SYNTAX_LEXERS = {
    "application/json": "json",
    "application/xml": "xml",
    "text/html": "html",
    "application/x-yaml": "yaml",
}


class DebugOutput:
    """Prints request and response traces to stderr.

    Args:
        no_color: Disable colour and Rich markup.
    """

    def __init__(self, no_color: bool = False) -> None:
        self._no_color = no_color or _should_disable_color()
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    def request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[Any] = None,
        content_type: Optional[str] = None,
    ) -> None:
        """Print an outgoing request line, its headers and its body."""
        self._line(f"> {method} {url}", style="bold cyan")
        for name, value in headers.items():
            self._line(f"> {name}: {value}")
        if body:
            self._body(body, content_type)

    def response(
        self,
        code: int,
        headers: Mapping[str, str],
        content_type: Optional[str] = None,
    ) -> None:
        """Print a received status code and headers."""
        style = "bold red" if code >= 400 else "bold green"
        self._line(f"< {code}", style=style)
        for name, value in headers.items():
            self._line(f"< {name}: {value}")
        if content_type:
            self._line(f"< (parsed as {content_type})", style="dim")

    def _line(self, message: str, style: Optional[str] = None) -> None:
        if self._no_color or style is None:
            self._stderr.print(message, markup=False, highlight=False)
        else:
            self._stderr.print(message, style=style, markup=False, highlight=False)

    def _body(self, body: Any, content_type: Optional[str]) -> None:
        text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else str(body)
        lexer = _SYNTAX_LEXERS.get(content_type or "")
        if lexer and not self._no_color:
            self._stderr.print(Syntax(text, lexer, word_wrap=True))
        else:
            self._stderr.print(text, markup=False, highlight=False)


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    if os.environ.get("NO_COLOR") is not None:
        return True
    return os.environ.get("TERM") == "dumb"


_output: Optional[DebugOutput] = None


def get_output() -> DebugOutput:
    """Return the process-wide :class:`DebugOutput`, creating it lazily."""
    global _output
    if _output is None:
        _output = DebugOutput()
    return _output


def set_output(output: DebugOutput) -> None:
    """Install *output* as the process-wide :class:`DebugOutput`."""
    global _output
    _output = output


def reset_output() -> None:
    """Drop the process-wide instance; the next :func:`get_output` builds a fresh one."""
    global _output
    _output = None
