"""Parsing of raw HTTP response header blocks.

A header block is the status line followed by ``Name: value`` lines,
CRLF-delimited, exactly as it came off the wire::

    HTTP/1.1 200 OK\\r\\n
    Content-Type: application/json\\r\\n
    Set-Cookie: a=1\\r\\n
    Set-Cookie: b=2\\r\\n

:func:`parse_status_code` extracts the numeric status from the first line
and :meth:`ParsedHeaders.from_string` builds a read-only, case-insensitive
view of the rest.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping

from fluentreq.exceptions import MalformedResponse

_LINE_SPLIT = re.compile(r"[\r\n]+")


def parse_status_code(header_block: str) -> int:
    """Return the status code from the first line of *header_block*.

    The code is the token after the first space, e.g. ``404`` in
    ``HTTP/1.1 404 Not Found``.

    Raises:
        MalformedResponse: If the first line has fewer than two
            space-delimited tokens or the second is not numeric.
    """
    end = header_block.find("\r\n")
    status_line = header_block if end == -1 else header_block[:end]
    parts = status_line.split(" ")
    if len(parts) < 2 or not parts[1].isdigit():
        raise MalformedResponse(
            "Unable to parse response code from HTTP response due to malformed response"
        )
    return int(parts[1])


class ParsedHeaders(Mapping[str, str]):
    """Read-only response headers with case-insensitive lookup.

    A header that appears more than once is folded into a single entry
    whose values are joined with ``,`` in the order they were received
    (RFC 2616 section 4.2).  The first spelling of the name is kept.

    Example::

        headers = ParsedHeaders.from_string(raw)
        headers["content-type"] == headers["Content-Type"]
    """

    def __init__(self, headers: Mapping[str, str] | None = None) -> None:
        self._headers: dict[str, str] = {}
        self._names: dict[str, str] = {}
        for name, value in (headers or {}).items():
            self._add(name, value)

    @classmethod
    def from_string(cls, header_block: str) -> ParsedHeaders:
        """Parse the ``Name: value`` lines of *header_block*.

        The first line (the status line) is skipped, as are lines without
        a ``:``.
        """
        parsed = cls()
        lines = [line for line in _LINE_SPLIT.split(header_block) if line]
        for line in lines[1:]:
            if ":" not in line:
                continue
            name, value = line.split(":", 1)
            parsed._add(name.strip(), value.strip())
        return parsed

    def _add(self, name: str, value: str) -> None:
        key = name.lower()
        if key in self._names:
            original = self._names[key]
            self._headers[original] = f"{self._headers[original]},{value}"
        else:
            self._names[key] = name
            self._headers[name] = value

    def __getitem__(self, name: str) -> str:
        return self._headers[self._names[name.lower()]]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def to_dict(self) -> dict[str, str]:
        """Return a plain ``dict`` copy using the received header names."""
        return dict(self._headers)

    def __repr__(self) -> str:
        return f"ParsedHeaders({self._headers!r})"
