"""fluentreq -- a fluent HTTP client with content-type driven codecs.

Requests are built with chainable setters, sent through :mod:`httpx`, and
their responses parsed according to their ``Content-Type``::

    from fluentreq import Request

    response = Request.get("https://example.com/users.json").expects_json().send()
    response.body  # -> dict

The interesting part is codec dispatch: a registry maps MIME types to
codecs (JSON, XML, form, CSV built in; YAML on request), response
``Content-Type`` values are interpreted (charset defaults, ``vnd.`` and
``prs.`` trees, ``+json`` style suffixes), and a fixed precedence decides
which codec parses a body and which serializes a payload.

Modules:
    mime: Alias table and alias -> MIME type resolution.
    registry: MIME type -> codec registry and its process-wide default.
    content_type: ``Content-Type`` interpretation.
    headers: Raw header block parsing.
    codecs: Built-in codecs.
    client: Request builder, response, transport and pipeline pieces.
    config: Configuration loading and registry bootstrap.
    exceptions: Exception hierarchy.
"""

__version__ = "0.1.0"

from fluentreq.client import Request, Response  # noqa: E402

__all__ = ["Request", "Response", "__version__"]
