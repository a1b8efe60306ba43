"""
Validatable response: the entry point for response expectations.
"""

from typing import Any, Dict, Optional

from hamcrest.core.matcher import Matcher

from .expectations import (
    BodyExpectation,
    BodyPathExpectation,
    ContentTypeExpectation,
    CookieExpectation,
    HeaderExpectation,
    ResponseExpectations,
    StatusCodeExpectation,
    StatusLineExpectation,
    TimeExpectation,
)
from .extraction import ExtractableResponse
from .filters import format_request, format_response, log as request_log
from .models import Response


class ValidatableResponse:
    """
    Registers expectations against a response.

    Every method returns the validatable response itself, so expectations can
    be chained. Used on its own, each call is asserted immediately. Inside a
    ``then`` block, expectations are collected and asserted together when the
    block ends, so one failure never hides the next.
    """

    def __init__(self, response: Response):
        self._response = response
        self._root = ""
        self._log_if_validation_fails = response.log_if_validation_fails
        self._expectations = ResponseExpectations(response, on_failure=self._log_failure)

    # Deferred assertion control

    def force_disable_eager_assert(self) -> None:
        self._expectations.force_disable_eager_assert()

    def force_validate_response(self) -> None:
        self._expectations.force_validate_response()

    @property
    def expectations(self) -> ResponseExpectations:
        return self._expectations

    # Expectations

    def status_code(self, expected: Any) -> "ValidatableResponse":
        """Expect a status code, given as an int or a matcher."""
        self._expectations.register([StatusCodeExpectation(expected)])
        return self

    def status_line(self, expected: Any) -> "ValidatableResponse":
        self._expectations.register([StatusLineExpectation(expected)])
        return self

    def body(self, path_or_matcher: Any, *more: Any) -> "ValidatableResponse":
        """
        Expect something of the body.

        ``body(matcher)`` matches the whole body as text. ``body(path, matcher)``
        matches the value at a JSON path; more path/matcher pairs may follow and
        are registered in the order given. A plain value is compared for
        equality, so ``body("id", None)`` expects a JSON null or a missing path.
        """
        if not more:
            if not isinstance(path_or_matcher, Matcher):
                raise ValueError(f"A matcher is required for path {path_or_matcher!r}")
            self._expectations.register([BodyExpectation(path_or_matcher)])
            return self

        arguments = [path_or_matcher, *more]
        if len(arguments) % 2:
            raise ValueError("body() takes path and matcher pairs, got an odd number of arguments")
        pairs = zip(arguments[::2], arguments[1::2])
        self._expectations.register(
            BodyPathExpectation(self._full_path(path), expected) for path, expected in pairs
        )
        return self

    def header(self, name: str, expected: Any) -> "ValidatableResponse":
        self._expectations.register([HeaderExpectation(name, expected)])
        return self

    def headers(self, expected: Optional[Dict[str, Any]] = None, **more: Any) -> "ValidatableResponse":
        self._expectations.register(
            HeaderExpectation(name, value) for name, value in {**(expected or {}), **more}.items()
        )
        return self

    def content_type(self, expected: Any) -> "ValidatableResponse":
        self._expectations.register([ContentTypeExpectation(expected)])
        return self

    def cookie(self, name: str, expected: Any = None) -> "ValidatableResponse":
        """Expect a cookie to be present, or to match a value or matcher."""
        self._expectations.register([CookieExpectation(name, expected)])
        return self

    def time(self, matcher: Matcher) -> "ValidatableResponse":
        """Expect the response time, in milliseconds, to match."""
        self._expectations.register([TimeExpectation(matcher)])
        return self

    def root(self, path: str) -> "ValidatableResponse":
        """Prefix every following body path with ``path``."""
        self._root = path
        return self

    def no_root(self) -> "ValidatableResponse":
        return self.root("")

    def and_(self) -> "ValidatableResponse":
        return self

    assert_that = and_

    def log_if_validation_fails(self) -> "ValidatableResponse":
        self._log_if_validation_fails = True
        return self

    # Extraction

    def extract(self, block=None):
        """Return an ExtractableResponse, or with a block, the value the block extracts."""
        if block is None:
            return ExtractableResponse(self._response)
        from .dsl import extract
        return extract(self, block)

    def response(self) -> Response:
        return self._response

    def _full_path(self, path: str) -> str:
        if not self._root:
            return path
        return f"{self._root}.{path}" if path else self._root

    def _log_failure(self, error) -> None:
        if not self._log_if_validation_fails:
            return
        if self._response.request is not None:
            request_log.info(format_request(self._response.request))
        request_log.info(format_response(self._response))

    def __repr__(self) -> str:
        return f"ValidatableResponse({self._response.status_line!r})"
