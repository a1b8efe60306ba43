"""
Reactive test client backend.

Requests go through an ``httpx.AsyncClient`` into an ASGI application. Each
dispatch is awaited on its own event loop, so chains stay synchronous for the
caller. A ready made client can be supplied instead of an application.
"""

from typing import Any, Callable, Optional

import httpx

from . import dsl
from .config import InProcessConfig
from .drivers import AsgiDriver, Driver
from .filters import Filter
from .models import Response
from .specification import RequestSender, RequestSpecification

config = InProcessConfig()


class ReactiveRequestSpecification(RequestSpecification):
    """Request specification dispatched into an ASGI application."""

    def __init__(self, config: InProcessConfig):
        super().__init__(config)
        self._app = self._config.app
        self._client: Optional[httpx.AsyncClient] = None

    def app(self, application: Any) -> "ReactiveRequestSpecification":
        """Dispatch this request into the given ASGI application."""
        self._app = application
        self._client = None
        return self

    def client(self, client: httpx.AsyncClient) -> "ReactiveRequestSpecification":
        """Dispatch this request through an existing async client."""
        self._client = client
        return self

    def _create_driver(self) -> Driver:
        return AsgiDriver(self._app, client=self._client, base_url=self._config.base_uri)

    def __repr__(self) -> str:
        return f"ReactiveRequestSpecification(app={self._app!r}, client={self._client!r})"


def given(block: Optional[Callable[[ReactiveRequestSpecification], Any]] = None) -> ReactiveRequestSpecification:
    """Start a chain with a new request specification configured by the block."""
    return dsl.given(lambda: ReactiveRequestSpecification(config), block)


def when(block: Optional[Callable[[RequestSender], Response]] = None):
    """Start a chain at dispatch, using the backend's configured application."""
    return ReactiveRequestSpecification(config).when(block)


def app(application: Any) -> None:
    """Use this ASGI application for every request that does not name its own."""
    config.app = application


def filters(*request_filters: Filter) -> None:
    """Add filters applied to every request of this backend."""
    config.filters.extend(request_filters)


def reset() -> None:
    """Restore this backend's configuration to its defaults."""
    config.reset()
