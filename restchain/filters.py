"""
Filters that sit between a request specification and its driver.

A filter is any callable taking the resolved request and a FilterContext. It
either answers the request itself by returning a Response, or passes it on
with ``context.next(request)``. Filters run in the order they were added,
global filters before the ones configured on a single specification.
"""

import logging
from typing import Callable, List, Optional, Sequence

from .drivers import Driver
from .models import HttpRequest, Response

Filter = Callable[[HttpRequest, "FilterContext"], Response]

log = logging.getLogger("restchain.log")


class FilterContext:
    """The remainder of the filter chain for one dispatch."""

    def __init__(self, filters: Sequence[Filter], driver: Driver):
        self._filters = list(filters)
        self._driver = driver

    @property
    def driver(self) -> Driver:
        return self._driver

    def next(self, request: HttpRequest) -> Response:
        """Pass the request to the next filter, or to the driver after the last one."""
        if not self._filters:
            return self._driver.execute(request)
        current, rest = self._filters[0], self._filters[1:]
        return current(request, FilterContext(rest, self._driver))


def dispatch(request: HttpRequest, filters: Sequence[Filter], driver: Driver) -> Response:
    """Run a request through the given filters and the driver."""
    return FilterContext(filters, driver).next(request)


def format_request(request: HttpRequest) -> str:
    lines = [f"Request method:\t{request.method}", f"Request URI:\t{request.url}"]
    if request.query_params:
        params = ", ".join(f"{name}={value}" for name, value in request.query_params)
        lines.append(f"Query params:\t{params}")
    lines.append("Headers:\t" + _format_mapping(request.headers))
    lines.append("Cookies:\t" + _format_mapping(request.cookies))
    body = request.body.decode("utf-8", errors="replace") if request.body else "<none>"
    lines.append(f"Body:\t\t{body}")
    return "\n".join(lines)


def format_response(response: Response) -> str:
    lines = [response.status_line, _format_mapping(response.headers, "\n"), "", response.text]
    return "\n".join(lines)


def _format_mapping(mapping, separator: str = "\n\t\t") -> str:
    if not mapping:
        return "<none>"
    return separator.join(f"{name}: {value}" for name, value in mapping.items())


class RequestLoggingFilter:
    """Logs every request before it is dispatched."""

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.INFO):
        self.logger = logger or log
        self.level = level

    def __call__(self, request: HttpRequest, context: FilterContext) -> Response:
        self.logger.log(self.level, format_request(request))
        return context.next(request)


class ResponseLoggingFilter:
    """Logs every response once it comes back from the rest of the chain."""

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.INFO):
        self.logger = logger or log
        self.level = level

    def __call__(self, request: HttpRequest, context: FilterContext) -> Response:
        response = context.next(request)
        self.logger.log(self.level, format_response(response))
        return response


def canned_response(status_code: int = 200, body: str = "", content_type: Optional[str] = None,
                    headers: Optional[dict] = None) -> Filter:
    """
    Build a filter that answers every request with the same response.

    The driver is never reached, which makes this useful for exercising a chain
    without any server or application.
    """
    response_headers = dict(headers or {})
    if content_type is not None:
        response_headers["Content-Type"] = content_type

    def respond(request: HttpRequest, context: FilterContext) -> Response:
        return Response(
            status_code=status_code,
            headers=dict(response_headers),
            body=body.encode("utf-8"),
            request=request,
        )

    return respond


def logging_filters() -> List[Filter]:
    return [RequestLoggingFilter(), ResponseLoggingFilter()]
