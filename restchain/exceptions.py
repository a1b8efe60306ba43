"""
Custom exceptions for restchain.
"""
from typing import List


class RestChainError(Exception):
    """Base exception for errors raised by restchain itself."""

    pass


class InvalidParameterError(RestChainError, TypeError):
    """Raised when a request parameter is given a value of an unsupported type."""

    def __init__(self, name: str, value, single: bool = False):
        self.name = name
        self.value = value
        accepted = "str, int, float or bool" if single else "str, int, float, bool or a list of those"
        super().__init__(
            f"Don't know how to handle parameter '{name}' with value of type "
            f"{type(value).__name__}. Use {accepted}."
        )


class MissingApplicationError(RestChainError):
    """Raised when an in-process backend dispatches without an application."""

    pass


class PathEvaluationError(RestChainError):
    """Raised when a path cannot be evaluated against a response body."""

    def __init__(self, message: str, path: str, original_exception=None):
        self.path = path
        self.original_exception = original_exception
        super().__init__(message)


class ExpectationsFailedError(AssertionError):
    """
    Aggregated failure of one or more response expectations.

    The message starts with the number of failed expectations followed by every
    failure description in the order the expectations were declared.
    """

    def __init__(self, failures: List[str]):
        self.failures = list(failures)
        super().__init__(self.format_message(self.failures))

    @staticmethod
    def format_message(failures: List[str]) -> str:
        count = len(failures)
        noun = "expectation" if count == 1 else "expectations"
        return f"{count} {noun} failed.\n" + "\n".join(failures)
