"""
Response expectations and their evaluation.

An expectation pairs a part of a response (status, header, body path, ...)
with a PyHamcrest matcher. ResponseExpectations keeps them in declaration
order and evaluates them either as they are registered (eager) or all at once
when asked to (deferred). Either way every failure found in one evaluation is
reported through a single ExpectationsFailedError.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional

from hamcrest import equal_to_ignoring_case, not_none
from hamcrest.core.helpers.wrap_matcher import wrap_matcher
from hamcrest.core.matcher import Matcher
from hamcrest.core.string_description import StringDescription

from .exceptions import ExpectationsFailedError
from .extraction import JsonPath
from .models import Response

logger = logging.getLogger(__name__)


def describe(matcher: Matcher) -> str:
    description = StringDescription()
    description.append_description_of(matcher)
    return str(description)


class Expectation(ABC):
    """A single check against a response."""

    @abstractmethod
    def check(self, response: Response, json_path: "LazyJsonPath") -> Optional[str]:
        """Return a failure description, or None when the response satisfies the expectation."""
        pass


class LazyJsonPath:
    """Parses the response body the first time a path is needed, and only once."""

    def __init__(self, response: Response):
        self._response = response
        self._json_path: Optional[JsonPath] = None

    def get(self, path: str) -> Any:
        if self._json_path is None:
            self._json_path = JsonPath.from_response(self._response)
        return self._json_path.get(path)


class StatusCodeExpectation(Expectation):

    def __init__(self, expected: Any):
        self.expected_text = str(expected) if isinstance(expected, int) else None
        self.matcher = wrap_matcher(expected)

    def check(self, response, json_path):
        if self.matcher.matches(response.status_code):
            return None
        expected = self.expected_text or describe(self.matcher)
        return f"Expected status code <{expected}> but was <{response.status_code}>.\n"


class StatusLineExpectation(Expectation):

    def __init__(self, expected: Any):
        self.matcher = wrap_matcher(expected)

    def check(self, response, json_path):
        if self.matcher.matches(response.status_line):
            return None
        return f'Expected status line {describe(self.matcher)} doesn\'t match actual status line "{response.status_line}".\n'


class BodyPathExpectation(Expectation):

    def __init__(self, path: str, expected: Any):
        self.path = path
        self.matcher = wrap_matcher(expected)

    def check(self, response, json_path):
        actual = json_path.get(self.path)
        if self.matcher.matches(actual):
            return None
        return (
            f"JSON path {self.path} doesn't match.\n"
            f"Expected: {describe(self.matcher)}\n"
            f"  Actual: {actual}\n"
        )


class BodyExpectation(Expectation):

    def __init__(self, expected: Any):
        self.matcher = wrap_matcher(expected)

    def check(self, response, json_path):
        if self.matcher.matches(response.text):
            return None
        return (
            "Response body doesn't match expectation.\n"
            f"Expected: {describe(self.matcher)}\n"
            f"  Actual: {response.text}\n"
        )


class HeaderExpectation(Expectation):

    def __init__(self, name: str, expected: Any):
        self.name = name
        self.matcher = wrap_matcher(expected)

    def check(self, response, json_path):
        actual = response.header(self.name)
        if self.matcher.matches(actual):
            return None
        return f'Expected header "{self.name}" was not {describe(self.matcher)}, was "{actual}".\n'


class ContentTypeExpectation(Expectation):
    """
    Content type check. A plain string without parameters is compared to the
    media type only, so "application/json" matches "application/json; charset=utf-8".
    """

    def __init__(self, expected: Any):
        self.media_type_only = isinstance(expected, str) and ";" not in expected
        self.matcher = equal_to_ignoring_case(expected) if isinstance(expected, str) else wrap_matcher(expected)

    def check(self, response, json_path):
        actual = response.content_type
        candidate = actual.split(";")[0].strip() if self.media_type_only else actual
        if self.matcher.matches(candidate):
            return None
        return f'Expected content-type {describe(self.matcher)} doesn\'t match actual content-type "{actual}".\n'


class CookieExpectation(Expectation):

    def __init__(self, name: str, expected: Any = None):
        self.name = name
        self.matcher = not_none() if expected is None else wrap_matcher(expected)

    def check(self, response, json_path):
        actual = response.cookies.get(self.name)
        if self.matcher.matches(actual):
            return None
        return f'Expected cookie "{self.name}" was not {describe(self.matcher)}, was "{actual}".\n'


class TimeExpectation(Expectation):

    def __init__(self, matcher: Matcher):
        self.matcher = wrap_matcher(matcher)

    def check(self, response, json_path):
        if self.matcher.matches(response.elapsed_ms):
            return None
        return f"Expected response time was not {describe(self.matcher)}, was {response.elapsed_ms:.0f} milliseconds.\n"


class ResponseExpectations:
    """
    Ordered collection of expectations for one response.

    In eager mode, each group of expectations is evaluated the moment it is
    registered. In deferred mode, groups are collected until
    force_validate_response() evaluates all of them together.
    """

    def __init__(self, response: Response, on_failure=None):
        self._response = response
        self._json_path = LazyJsonPath(response)
        self._pending: List[Expectation] = []
        self._eager = True
        self._on_failure = on_failure

    @property
    def eager(self) -> bool:
        return self._eager

    @property
    def pending(self) -> List[Expectation]:
        return list(self._pending)

    def register(self, expectations: Iterable[Expectation]) -> None:
        expectations = list(expectations)
        if self._eager:
            self._evaluate(expectations)
        else:
            self._pending.extend(expectations)

    def force_disable_eager_assert(self) -> None:
        self._eager = False

    def force_validate_response(self) -> None:
        """Evaluate every pending expectation and go back to eager mode."""
        pending, self._pending = self._pending, []
        self._eager = True
        self._evaluate(pending)

    def _evaluate(self, expectations: List[Expectation]) -> None:
        failures = []
        for expectation in expectations:
            failure = expectation.check(self._response, self._json_path)
            if failure is not None:
                failures.append(failure)
        logger.debug(f"Evaluated {len(expectations)} expectation(s), {len(failures)} failed")
        if failures:
            error = ExpectationsFailedError(failures)
            if self._on_failure is not None:
                self._on_failure(error)
            raise error
