"""
In-process mock dispatch backend.

Requests are dispatched straight into a WSGI application, without a server or
a socket. The application is either configured once for the backend with
``app(...)`` or per specification with ``req.app(...)``.
"""

from typing import Any, Callable, Optional

from . import dsl
from .config import InProcessConfig
from .drivers import Driver, WsgiDriver
from .filters import Filter
from .models import Response
from .specification import RequestSender, RequestSpecification

config = InProcessConfig()


class MockAppRequestSpecification(RequestSpecification):
    """Request specification dispatched into a WSGI application."""

    def __init__(self, config: InProcessConfig):
        super().__init__(config)
        self._app = self._config.app

    def app(self, application: Any) -> "MockAppRequestSpecification":
        """Dispatch this request into the given WSGI application."""
        self._app = application
        return self

    def _create_driver(self) -> Driver:
        return WsgiDriver(self._app, base_url=self._config.base_uri)

    def __repr__(self) -> str:
        return f"MockAppRequestSpecification(app={self._app!r})"


def given(block: Optional[Callable[[MockAppRequestSpecification], Any]] = None) -> MockAppRequestSpecification:
    """Start a chain with a new request specification configured by the block."""
    return dsl.given(lambda: MockAppRequestSpecification(config), block)


def when(block: Optional[Callable[[RequestSender], Response]] = None):
    """Start a chain at dispatch, using the backend's configured application."""
    return MockAppRequestSpecification(config).when(block)


def app(application: Any) -> None:
    """Use this WSGI application for every request that does not name its own."""
    config.app = application


def filters(*request_filters: Filter) -> None:
    """Add filters applied to every request of this backend."""
    config.filters.extend(request_filters)


def reset() -> None:
    """Restore this backend's configuration to its defaults."""
    config.reset()
