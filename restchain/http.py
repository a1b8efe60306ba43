"""
Direct HTTP backend.

Requests go over the network through ``requests`` to ``config.base_uri`` on
``config.port``, unless the specification overrides them.

    given(lambda req: req.port(7000).param("name", "Johan")) \
        .when(lambda send: send.get("/greeting")) \
        .then(lambda res: res.status_code(200))
"""

from typing import Any, Callable, Optional

from . import dsl
from .config import RestChainConfig
from .drivers import Driver, RequestsDriver
from .filters import Filter
from .models import Response
from .specification import RequestSender, RequestSpecification

config = RestChainConfig()


class HttpRequestSpecification(RequestSpecification):
    """Request specification dispatched over real HTTP."""

    def _create_driver(self) -> Driver:
        return RequestsDriver()

    def __repr__(self) -> str:
        return f"HttpRequestSpecification(base_uri={self._config.base_uri!r}, port={self._config.port!r})"


def given(block: Optional[Callable[[HttpRequestSpecification], Any]] = None) -> HttpRequestSpecification:
    """Start a chain with a new request specification configured by the block."""
    return dsl.given(lambda: HttpRequestSpecification(config), block)


def when(block: Optional[Callable[[RequestSender], Response]] = None):
    """Start a chain at dispatch, with a default request specification."""
    return HttpRequestSpecification(config).when(block)


def filters(*request_filters: Filter) -> None:
    """Add filters applied to every request of this backend."""
    config.filters.extend(request_filters)


def reset() -> None:
    """Restore this backend's configuration to its defaults."""
    config.reset()
