"""
Request and response models shared by every backend.

HttpRequest is what a driver receives; Response is what every driver returns,
whatever transport produced it.
"""

import json
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Dict, List, Optional, Tuple, Union


@dataclass
class HttpRequest:
    """A fully resolved request, ready to be dispatched by a driver."""
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    query_params: List[Tuple[str, str]] = field(default_factory=list)
    cookies: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None
    timeout: Optional[float] = None

    def get_header(self, name: str) -> Optional[str]:
        """Get header value, ignoring case."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None

    @property
    def content_type(self) -> Optional[str]:
        return self.get_header("Content-Type")


@dataclass(frozen=True)
class Response:
    """The result of dispatching one request."""
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    cookies: Dict[str, str] = field(default_factory=dict)
    elapsed_ms: float = 0.0
    reason: Optional[str] = None
    request: Optional[HttpRequest] = field(default=None, compare=False, repr=False)
    log_if_validation_fails: bool = field(default=False, compare=False, repr=False)

    @property
    def content_type(self) -> str:
        return self.header("Content-Type") or ""

    @property
    def status_line(self) -> str:
        reason = self.reason
        if reason is None:
            try:
                reason = HTTPStatus(self.status_code).phrase
            except ValueError:
                reason = ""
        return f"HTTP/1.1 {self.status_code} {reason}".rstrip()

    @property
    def charset(self) -> str:
        for part in self.content_type.split(";")[1:]:
            key, _, value = part.strip().partition("=")
            if key.lower() == "charset" and value:
                return value.strip('"')
        return "utf-8"

    @property
    def text(self) -> str:
        return self.body.decode(self.charset, errors="replace")

    def header(self, name: str) -> Optional[str]:
        """Get header value, ignoring case."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None

    def json(self) -> Union[Dict[str, Any], List[Any], Any]:
        """Parse the body as JSON."""
        return json.loads(self.text)

    def then(self, block=None):
        """
        Start validating this response.

        Without a block this returns a ValidatableResponse asserting eagerly.
        With a block the expectations registered by the block are collected and
        evaluated together once it returns.
        """
        if block is None:
            from .validation import ValidatableResponse
            return ValidatableResponse(self)
        from .dsl import then
        return then(self, block)

    def extract(self, block=None):
        """Extract values from this response without registering expectations."""
        return self.then().extract(block)
