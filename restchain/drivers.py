"""
Driver implementations for the different dispatch backends.

Drivers know how to hand a resolved HttpRequest to a transport and translate
whatever comes back into a Response. They never retry and never translate
transport errors; whatever the transport raises reaches the caller as is.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

import httpx
import requests

from .exceptions import MissingApplicationError
from .models import HttpRequest, Response

logger = logging.getLogger(__name__)


class Driver(ABC):
    """Abstract interface for all drivers."""

    @abstractmethod
    def execute(self, request: HttpRequest) -> Response:
        """Execute an HTTP request and return the response."""
        pass


class RequestsDriver(Driver):
    """
    Driver that executes requests through actual HTTP calls.

    A new requests session is opened for every dispatch so that no connection
    or cookie state leaks from one chain into the next.
    """

    def __init__(self, session_factory: Callable[[], requests.Session] = requests.Session):
        self.session_factory = session_factory

    def execute(self, request: HttpRequest) -> Response:
        """Execute request through actual HTTP call."""
        logger.debug(f"Dispatching {request.method} {request.url} over HTTP")
        with self.session_factory() as session:
            response = session.request(
                method=request.method,
                url=request.url,
                headers=request.headers,
                params=request.query_params or None,
                cookies=request.cookies or None,
                data=request.body,
                timeout=request.timeout,
            )
        logger.debug(f"{request.method} {request.url} answered {response.status_code}")
        return Response(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.content,
            cookies=response.cookies.get_dict(),
            elapsed_ms=response.elapsed.total_seconds() * 1000,
            reason=response.reason,
        )


def _with_cookie_header(request: HttpRequest):
    headers = dict(request.headers)
    if request.cookies:
        cookie_header = "; ".join(f"{name}={value}" for name, value in request.cookies.items())
        existing = request.get_header("Cookie")
        headers = {k: v for k, v in headers.items() if k.lower() != "cookie"}
        headers["Cookie"] = f"{existing}; {cookie_header}" if existing else cookie_header
    return headers


def _from_httpx_response(response: httpx.Response) -> Response:
    try:
        elapsed_ms = response.elapsed.total_seconds() * 1000
    except RuntimeError:
        # elapsed is only set once the response has been closed
        elapsed_ms = 0.0
    return Response(
        status_code=response.status_code,
        headers=dict(response.headers),
        body=response.content,
        cookies=dict(response.cookies),
        elapsed_ms=elapsed_ms,
        reason=response.reason_phrase or None,
    )


class WsgiDriver(Driver):
    """
    Driver that dispatches requests into a WSGI application in process.

    No socket is opened; the request goes straight through httpx's WSGI
    transport into the application callable.
    """

    def __init__(self, app: Optional[Any] = None, base_url: str = "http://testserver"):
        self.app = app
        self.base_url = base_url

    def execute(self, request: HttpRequest) -> Response:
        """Execute request directly through the WSGI application."""
        if self.app is None:
            raise MissingApplicationError(
                "No WSGI application configured. Use app(...) on the specification "
                "or restchain.mockapp.app(...) before dispatching."
            )
        logger.debug(f"Dispatching {request.method} {request.url} into WSGI app {self.app!r}")
        transport = httpx.WSGITransport(app=self.app)
        with httpx.Client(transport=transport, base_url=self.base_url) as client:
            response = client.request(
                request.method,
                request.url,
                headers=_with_cookie_header(request),
                params=request.query_params or None,
                content=request.body,
                timeout=request.timeout,
            )
        logger.debug(f"{request.method} {request.url} answered {response.status_code}")
        return _from_httpx_response(response)


class AsgiDriver(Driver):
    """
    Driver that dispatches requests into an ASGI application through an async client.

    Each dispatch runs on its own event loop, so it must not be called from
    inside a running loop. A preconfigured httpx.AsyncClient can be supplied
    instead of an application; it is used as is and never closed by the driver.
    """

    def __init__(self, app: Optional[Any] = None, client: Optional[httpx.AsyncClient] = None,
                 base_url: str = "http://testserver"):
        self.app = app
        self.client = client
        self.base_url = base_url

    def execute(self, request: HttpRequest) -> Response:
        """Execute request through the async client and wait for the result."""
        if self.app is None and self.client is None:
            raise MissingApplicationError(
                "No ASGI application or client configured. Use app(...) or client(...) "
                "on the specification or restchain.reactive.app(...) before dispatching."
            )
        logger.debug(f"Dispatching {request.method} {request.url} through async client")
        response = asyncio.run(self._send(request))
        logger.debug(f"{request.method} {request.url} answered {response.status_code}")
        return _from_httpx_response(response)

    async def _send(self, request: HttpRequest) -> httpx.Response:
        kwargs = {
            "headers": _with_cookie_header(request),
            "params": request.query_params or None,
            "content": request.body,
            "timeout": request.timeout,
        }
        if self.client is not None:
            return await self.client.request(request.method, request.url, **kwargs)

        transport = httpx.ASGITransport(app=self.app)
        async with httpx.AsyncClient(transport=transport, base_url=self.base_url) as client:
            return await client.request(request.method, request.url, **kwargs)
