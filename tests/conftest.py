"""Shared test fixtures for fluentreq.

Provides a fresh codec registry, a mock-transport factory, and autouse
fixtures that reset the process-wide configuration, request template and
debug output between tests.  These fixtures are automatically discovered
by pytest and available to all test modules without explicit imports.
"""

from __future__ import annotations

from typing import Callable

import httpx
import pytest

from fluentreq.client.request import Request
from fluentreq.client.transport import HttpxTransport
from fluentreq.config import reset_config, set_config
from fluentreq.models import ClientConfig
from fluentreq.output import reset_output
from fluentreq.registry import MimeRegistry


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _isolate_globals(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pin the process-wide config to defaults and drop the request template.

    ``FLUENTREQ_*`` variables from the developer's shell would otherwise
    leak into the library defaults.
    """
    for var in ["FLUENTREQ_CONFIG", "FLUENTREQ_TIMEOUT", "FLUENTREQ_VERIFY_SSL"]:
        monkeypatch.delenv(var, raising=False)
    set_config(ClientConfig())
    Request._template = None
    yield
    Request._template = None
    reset_config()
    reset_output()


# ---------------------------------------------------------------------------
# Registry fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def registry() -> MimeRegistry:
    """A private registry with the built-in codecs installed."""
    fresh = MimeRegistry()
    fresh.install_builtin_codecs()
    return fresh


@pytest.fixture
def empty_registry() -> MimeRegistry:
    """A private registry with nothing registered."""
    return MimeRegistry()


# ---------------------------------------------------------------------------
# Transport fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_transport() -> Callable[..., HttpxTransport]:
    """Factory building an :class:`HttpxTransport` over ``httpx.MockTransport``.

    Usage::

        transport = mock_transport(lambda request: httpx.Response(200, text="ok"))
    """

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> HttpxTransport:
        return HttpxTransport(transport=httpx.MockTransport(handler))

    return _make
