"""
Request specification and sender.

A RequestSpecification collects everything about an outgoing call except the
method and the path. Its ``when()`` returns a RequestSender whose verb methods
resolve the specification into an HttpRequest and dispatch it through the
filters and the backend's driver, exactly once per call.
"""

import base64
import json
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote, urlencode, urlsplit

from .config import RestChainConfig
from .drivers import Driver
from .exceptions import InvalidParameterError
from .filters import Filter, dispatch, logging_filters, RequestLoggingFilter, ResponseLoggingFilter
from .models import HttpRequest, Response

logger = logging.getLogger(__name__)

_SCALAR_TYPES = (str, int, float, bool)
_PLACEHOLDER = re.compile(r"\{([^{}]*)\}")
_QUERY_METHODS = {"GET", "HEAD", "OPTIONS", "DELETE"}


def _check_value(name: str, value: Any) -> List[str]:
    """Validate a parameter value and return its string form(s)."""
    if isinstance(value, (list, tuple)):
        if not all(isinstance(item, _SCALAR_TYPES) for item in value):
            raise InvalidParameterError(name, value)
        return [_to_text(item) for item in value]
    if not isinstance(value, _SCALAR_TYPES):
        raise InvalidParameterError(name, value)
    return [_to_text(value)]


def _check_single(name: str, value: Any) -> str:
    """Validate a parameter that takes exactly one value."""
    if isinstance(value, (list, tuple)):
        raise InvalidParameterError(name, value, single=True)
    return _check_value(name, value)[0]


def _to_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class RequestSpecification(ABC):
    """
    Builder for the method independent parts of a request.

    Every setter returns the specification itself so calls can be chained,
    which is what makes ``given(lambda req: req.header(...).param(...))`` work.
    """

    def __init__(self, config: RestChainConfig):
        self._config = config.snapshot()
        self._headers: Dict[str, str] = dict(self._config.default_headers)
        self._params: List[Tuple[str, str]] = []
        self._query_params: List[Tuple[str, str]] = []
        self._form_params: List[Tuple[str, str]] = []
        self._path_params: Dict[str, str] = {}
        self._cookies: Dict[str, str] = {}
        self._body: Optional[bytes] = None
        self._filters: List[Filter] = []
        self._log_if_validation_fails = self._config.log_if_validation_fails

    @abstractmethod
    def _create_driver(self) -> Driver:
        """Create the driver this backend dispatches through."""
        pass

    # Target

    def base_uri(self, uri: str) -> "RequestSpecification":
        self._config.base_uri = uri
        return self

    def port(self, port: int) -> "RequestSpecification":
        if not isinstance(port, int) or isinstance(port, bool) or not 0 < port < 65536:
            raise ValueError(f"Port must be an integer between 1 and 65535, got {port!r}")
        self._config.port = port
        return self

    def base_path(self, path: str) -> "RequestSpecification":
        self._config.base_path = path
        return self

    # Headers and cookies

    def header(self, name: str, value: Any, *additional_values: Any) -> "RequestSpecification":
        """Set a header. Additional values are joined into one comma separated header."""
        values = _check_value(name, [value, *additional_values])
        self._headers = {k: v for k, v in self._headers.items() if k.lower() != name.lower()}
        self._headers[name] = ", ".join(values)
        return self

    def headers(self, headers: Optional[Dict[str, Any]] = None, **more: Any) -> "RequestSpecification":
        for name, value in {**(headers or {}), **more}.items():
            self.header(name, value)
        return self

    def content_type(self, content_type: str) -> "RequestSpecification":
        return self.header("Content-Type", content_type)

    def accept(self, media_type: str) -> "RequestSpecification":
        return self.header("Accept", media_type)

    def cookie(self, name: str, value: Any = "") -> "RequestSpecification":
        self._cookies[name] = _check_single(name, value)
        return self

    def cookies(self, cookies: Optional[Dict[str, Any]] = None, **more: Any) -> "RequestSpecification":
        for name, value in {**(cookies or {}), **more}.items():
            self.cookie(name, value)
        return self

    def auth_basic(self, username: str, password: str) -> "RequestSpecification":
        token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
        return self.header("Authorization", f"Basic {token}")

    def auth_bearer(self, token: str) -> "RequestSpecification":
        return self.header("Authorization", f"Bearer {token}")

    # Parameters

    def param(self, name: str, *values: Any) -> "RequestSpecification":
        """
        Add a parameter sent as query parameter for GET-like requests and as
        form parameter otherwise.
        """
        for value in values or ("",):
            self._params.extend((name, text) for text in _check_value(name, value))
        return self

    def params(self, params: Optional[Dict[str, Any]] = None, **more: Any) -> "RequestSpecification":
        for name, value in {**(params or {}), **more}.items():
            self.param(name, value)
        return self

    def query_param(self, name: str, *values: Any) -> "RequestSpecification":
        for value in values or ("",):
            self._query_params.extend((name, text) for text in _check_value(name, value))
        return self

    def query_params(self, params: Optional[Dict[str, Any]] = None, **more: Any) -> "RequestSpecification":
        for name, value in {**(params or {}), **more}.items():
            self.query_param(name, value)
        return self

    def form_param(self, name: str, *values: Any) -> "RequestSpecification":
        for value in values or ("",):
            self._form_params.extend((name, text) for text in _check_value(name, value))
        return self

    def form_params(self, params: Optional[Dict[str, Any]] = None, **more: Any) -> "RequestSpecification":
        for name, value in {**(params or {}), **more}.items():
            self.form_param(name, value)
        return self

    def path_param(self, name: str, value: Any) -> "RequestSpecification":
        self._path_params[name] = _check_single(name, value)
        return self

    def path_params(self, params: Optional[Dict[str, Any]] = None, **more: Any) -> "RequestSpecification":
        for name, value in {**(params or {}), **more}.items():
            self.path_param(name, value)
        return self

    # Body

    def body(self, body: Any) -> "RequestSpecification":
        """
        Set the request body.

        Strings and bytes are sent as they are. Dicts and lists are serialized to
        JSON, pydantic models through their own JSON serializer. A content type
        matching the body is set unless one has been set already.
        """
        if isinstance(body, bytes):
            self._body, default_type = body, "application/octet-stream"
        elif isinstance(body, str):
            self._body, default_type = body.encode("utf-8"), "text/plain; charset=utf-8"
        elif isinstance(body, (dict, list)):
            self._body, default_type = json.dumps(body).encode("utf-8"), "application/json"
        elif hasattr(body, "model_dump_json"):
            self._body, default_type = body.model_dump_json().encode("utf-8"), "application/json"
        else:
            raise TypeError(f"Cannot use {type(body).__name__} as a request body")
        if self._get_header("Content-Type") is None:
            self._headers["Content-Type"] = default_type
        return self

    # Filters, logging and transport settings

    def filter(self, request_filter: Filter) -> "RequestSpecification":
        self._filters.append(request_filter)
        return self

    def filters(self, *request_filters: Filter) -> "RequestSpecification":
        self._filters.extend(request_filters)
        return self

    def log_all(self) -> "RequestSpecification":
        """Log the request and the response of this specification."""
        return self.filters(*logging_filters())

    def log_request(self) -> "RequestSpecification":
        return self.filter(RequestLoggingFilter())

    def log_response(self) -> "RequestSpecification":
        return self.filter(ResponseLoggingFilter())

    def log_if_validation_fails(self) -> "RequestSpecification":
        self._log_if_validation_fails = True
        return self

    def timeout(self, seconds: float) -> "RequestSpecification":
        self._config.timeout = seconds
        return self

    def url_encoding_enabled(self, enabled: bool) -> "RequestSpecification":
        self._config.url_encoding_enabled = enabled
        return self

    def and_(self) -> "RequestSpecification":
        return self

    with_ = and_

    # Dispatch

    def when(self, block=None):
        """
        Return the sender for this specification, or with a block, dispatch the
        request the block issues and return its response.
        """
        sender = RequestSender(self)
        if block is None:
            return sender
        from .dsl import when
        return when(sender, block)

    def _get_header(self, name: str) -> Optional[str]:
        for key, value in self._headers.items():
            if key.lower() == name.lower():
                return value
        return None

    def _resolve_path(self, path: str, args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> str:
        named = dict(self._path_params)
        for name, value in kwargs.items():
            named[name] = _check_single(name, value)
        positional = [_check_single("path", value) for value in args]
        used_names = set()
        used_positions = 0

        def substitute(match):
            nonlocal used_positions
            name = match.group(1)
            if name and name in named:
                used_names.add(name)
                value = named[name]
            elif used_positions < len(positional):
                value = positional[used_positions]
                used_positions += 1
            else:
                raise ValueError(f"No value given for path parameter '{{{name}}}' in {path!r}")
            return quote(value, safe="") if self._config.url_encoding_enabled else value

        resolved = _PLACEHOLDER.sub(substitute, path)
        redundant = positional[used_positions:] + [name for name in kwargs if name not in used_names]
        if redundant:
            expected = len(_PLACEHOLDER.findall(path))
            raise ValueError(
                f"Invalid number of path parameters. Expected {expected}, was {len(args) + len(kwargs)}. "
                f"Redundant path parameters are: {', '.join(redundant)}"
            )
        return resolved

    def _resolve_url(self, path: str) -> str:
        if urlsplit(path).scheme:
            return path
        base_uri = self._config.base_uri.rstrip("/")
        port = self._config.port
        if port is not None and urlsplit(base_uri).port is None:
            base_uri = f"{base_uri}:{port}"
        base_path = self._config.base_path.strip("/")
        parts = [base_uri]
        if base_path:
            parts.append(base_path)
        if path.strip("/"):
            parts.append(path.lstrip("/"))
        return "/".join(parts)

    def _build_request(self, method: str, path: str, args: Tuple[Any, ...],
                       kwargs: Dict[str, Any]) -> HttpRequest:
        method = method.upper()
        headers = dict(self._headers)
        query = list(self._query_params)
        form = list(self._form_params)
        if method in _QUERY_METHODS or self._body is not None:
            query.extend(self._params)
        else:
            form.extend(self._params)

        body = self._body
        if form:
            if body is not None:
                raise ValueError("You can either send form parameters or a body, not both")
            body = urlencode(form).encode("utf-8")
            if self._get_header("Content-Type") is None:
                headers["Content-Type"] = "application/x-www-form-urlencoded; charset=utf-8"

        return HttpRequest(
            method=method,
            url=self._resolve_url(self._resolve_path(path, args, kwargs)),
            headers=headers,
            query_params=query,
            cookies=dict(self._cookies),
            body=body,
            timeout=self._config.timeout,
        )

    def _send(self, method: str, path: str, args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> Response:
        request = self._build_request(method, path, args, kwargs)
        logger.debug(f"Sending {request.method} {request.url}")
        response = dispatch(request, [*self._config.filters, *self._filters], self._create_driver())
        if response.request is None:
            response = replace(response, request=request)
        if self._log_if_validation_fails:
            response = replace(response, log_if_validation_fails=True)
        return response


class RequestSender:
    """Issues one request per verb call using a specification."""

    def __init__(self, specification: RequestSpecification):
        self._specification = specification

    def request(self, method: str, path: str = "", *args: Any, **kwargs: Any) -> Response:
        """Send a request with any method. Path placeholders are filled from args and kwargs."""
        return self._specification._send(method, path, args, kwargs)

    def get(self, path: str = "", *args: Any, **kwargs: Any) -> Response:
        return self.request("GET", path, *args, **kwargs)

    def post(self, path: str = "", *args: Any, **kwargs: Any) -> Response:
        return self.request("POST", path, *args, **kwargs)

    def put(self, path: str = "", *args: Any, **kwargs: Any) -> Response:
        return self.request("PUT", path, *args, **kwargs)

    def patch(self, path: str = "", *args: Any, **kwargs: Any) -> Response:
        return self.request("PATCH", path, *args, **kwargs)

    def delete(self, path: str = "", *args: Any, **kwargs: Any) -> Response:
        return self.request("DELETE", path, *args, **kwargs)

    def head(self, path: str = "", *args: Any, **kwargs: Any) -> Response:
        return self.request("HEAD", path, *args, **kwargs)

    def options(self, path: str = "", *args: Any, **kwargs: Any) -> Response:
        return self.request("OPTIONS", path, *args, **kwargs)
