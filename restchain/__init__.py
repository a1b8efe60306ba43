"""
Fluent given / when / then / extract chains for HTTP API tests.

The top level package is the direct HTTP backend. ``restchain.mockapp``
dispatches into a WSGI application in process and ``restchain.reactive``
dispatches into an ASGI application through an async client; all three share
the same chain:

    from hamcrest import equal_to
    from restchain import given

    greeting = (
        given(lambda req: req.port(7000).param("name", "Johan"))
        .when(lambda send: send.get("/greeting"))
        .then(lambda res: res.status_code(200).body("content", equal_to("Hello, Johan!")))
        .extract(lambda ex: ex.path("content"))
    )
"""

from .config import RestChainConfig
from .dsl import SupportsDeferredAssertion
from .exceptions import (
    ExpectationsFailedError,
    InvalidParameterError,
    MissingApplicationError,
    PathEvaluationError,
    RestChainError,
)
from .extraction import ExtractableResponse, JsonPath
from .filters import (
    FilterContext,
    RequestLoggingFilter,
    ResponseLoggingFilter,
    canned_response,
)
from .http import HttpRequestSpecification, config, filters, given, reset, when
from .models import HttpRequest, Response
from .specification import RequestSender, RequestSpecification
from .validation import ValidatableResponse

__version__ = "0.1.0"
__license__ = "MIT"

__all__ = [
    "given",
    "when",
    "config",
    "filters",
    "reset",
    "RestChainConfig",
    "HttpRequestSpecification",
    "RequestSpecification",
    "RequestSender",
    "HttpRequest",
    "Response",
    "ValidatableResponse",
    "ExtractableResponse",
    "JsonPath",
    "SupportsDeferredAssertion",
    "FilterContext",
    "RequestLoggingFilter",
    "ResponseLoggingFilter",
    "canned_response",
    "RestChainError",
    "InvalidParameterError",
    "MissingApplicationError",
    "PathEvaluationError",
    "ExpectationsFailedError",
]
