"""
Reading values out of responses.

Paths are jsonpath-ng expressions. The leading ``$.`` is optional, so
``greeting``, ``items[0].name`` and ``$.items[*].name`` are all accepted.
"""

import logging
from functools import lru_cache
from typing import Any, Dict, Optional, Type, TypeVar

from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError
from jsonpath_ng.ext import parse as jsonpath_parse
from jsonpath_ng.jsonpath import Child, Fields, Index, Root, This

from .exceptions import PathEvaluationError
from .models import Response

logger = logging.getLogger(__name__)

T = TypeVar("T")


@lru_cache(maxsize=256)
def _compile(path: str):
    try:
        return jsonpath_parse(path)
    except (JsonPathLexerError, JsonPathParserError) as e:
        raise PathEvaluationError(f"Invalid path expression {path!r}: {e}", path, e)


def _is_singular(expression) -> bool:
    """True when an expression can select at most one value."""
    if isinstance(expression, (Root, This)):
        return True
    if isinstance(expression, Child):
        return _is_singular(expression.left) and _is_singular(expression.right)
    if isinstance(expression, Fields):
        return len(expression.fields) == 1 and expression.fields[0] != "*"
    if isinstance(expression, Index):
        indices = getattr(expression, "indices", None)
        return indices is None or len(indices) == 1
    return False


class JsonPath:
    """A parsed JSON document that paths can be evaluated against."""

    def __init__(self, document: Any):
        self.document = document

    @classmethod
    def from_response(cls, response: Response) -> "JsonPath":
        if not response.body.strip():
            return cls(None)
        try:
            return cls(response.json())
        except ValueError as e:
            raise PathEvaluationError(
                f"Cannot evaluate paths, response body is not JSON "
                f"(content-type {response.content_type or '<none>'})",
                "",
                e,
            )

    def get(self, path: str) -> Any:
        """
        Evaluate a path.

        Returns None when nothing matches, the single value for a path made only
        of field names and indexes, and a list for anything that can select
        several values.
        """
        if path in ("", "$"):
            return self.document
        expression = _compile(path)
        if self.document is None:
            return None
        values = [match.value for match in expression.find(self.document)]
        if _is_singular(expression):
            return values[0] if values else None
        return values


class ExtractableResponse:
    """Read only view over a response for pulling values out of it."""

    def __init__(self, response: Response):
        self._response = response
        self._json_path: Optional[JsonPath] = None

    def json_path(self) -> JsonPath:
        if self._json_path is None:
            self._json_path = JsonPath.from_response(self._response)
        return self._json_path

    def path(self, path: str) -> Any:
        """Get the value at a path of the JSON body."""
        value = self.json_path().get(path)
        logger.debug(f"Extracted {path!r}: {value!r}")
        return value

    def body(self) -> str:
        return self._response.text

    def as_bytes(self) -> bytes:
        return self._response.body

    def json(self) -> Any:
        return self._response.json()

    def as_model(self, model: Type[T], path: str = "") -> T:
        """
        Bind the body, or the value at a path, to a type.

        Pydantic models are validated with ``model_validate``; any other type is
        called with the mapping as keyword arguments.
        """
        data = self.path(path) if path else self.json()
        if hasattr(model, "model_validate"):
            return model.model_validate(data)
        if isinstance(data, dict):
            return model(**data)
        return model(data)

    def status_code(self) -> int:
        return self._response.status_code

    def status_line(self) -> str:
        return self._response.status_line

    def header(self, name: str) -> Optional[str]:
        return self._response.header(name)

    def headers(self) -> Dict[str, str]:
        return dict(self._response.headers)

    def content_type(self) -> str:
        return self._response.content_type

    def cookie(self, name: str) -> Optional[str]:
        return self._response.cookies.get(name)

    def cookies(self) -> Dict[str, str]:
        return dict(self._response.cookies)

    def time(self) -> float:
        """Response time in milliseconds."""
        return self._response.elapsed_ms

    def response(self) -> Response:
        return self._response

    def __repr__(self) -> str:
        return f"ExtractableResponse({self._response.status_line!r})"
