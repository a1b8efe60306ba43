"""
Tests for the reactive test client backend.

Requests go through an async client into a Starlette greeting application.
"""

import httpx
import pytest
from hamcrest import equal_to, has_entry

from restchain import ExpectationsFailedError, MissingApplicationError, reactive


class TestReactiveBackend:
    """Test chains dispatched into an ASGI application."""

    def test_greeting(self, greeting_asgi_app):
        """Test a full chain against the ASGI application."""
        identifier = reactive.given(
            lambda req: req.app(greeting_asgi_app).param("name", "Johan")
        ).when(
            lambda send: send.get("/greeting")
        ).then(
            lambda res: res.status_code(200).body(
                "id", equal_to(1),
                "content", equal_to("Hello, Johan!"),
            )
        ).extract(
            lambda ex: ex.path("id")
        )

        assert identifier == 1

    def test_backend_application_counts_requests(self, greeting_asgi_app):
        """Test that consecutive chains reach the same application."""
        reactive.app(greeting_asgi_app)

        ids = [
            reactive.when(lambda send: send.get("/greeting")).extract(lambda ex: ex.path("id"))
            for _ in range(3)
        ]

        assert ids == [1, 2, 3]

    def test_existing_async_client(self, greeting_asgi_app):
        """Test dispatching through a client supplied by the caller."""
        client = httpx.AsyncClient(transport=httpx.ASGITransport(app=greeting_asgi_app), base_url="http://testserver")

        content = reactive.given(
            lambda req: req.client(client).param("name", "Erik")
        ).when(
            lambda send: send.get("/greeting")
        ).extract(
            lambda ex: ex.path("content")
        )

        assert content == "Hello, Erik!"

    def test_request_parts_reach_application(self, greeting_asgi_app):
        """Test that headers, cookies and body are delivered to the application."""
        echoed = reactive.given(
            lambda req: req.app(greeting_asgi_app).header("X-Trace", "abc").cookie("session", "s1")
            .body("hello")
        ).when(
            lambda send: send.put("/echo")
        ).then(
            lambda res: res.body("method", equal_to("PUT"), "headers", has_entry("x-trace", "abc"))
        ).extract(
            lambda ex: ex.json()
        )

        assert echoed["body"] == "hello"
        assert echoed["headers"]["cookie"] == "session=s1"
        assert echoed["headers"]["content-type"].startswith("text/plain")

    def test_failures_are_aggregated(self, greeting_asgi_app):
        """Test the aggregated failure on the reactive backend."""
        def expectations(res):
            res.body("id", equal_to(2))
            res.header("Content-Type", "text/html")

        with pytest.raises(ExpectationsFailedError) as exc_info:
            reactive.given(lambda req: req.app(greeting_asgi_app)).when(
                lambda send: send.get("/greeting")
            ).then(expectations)

        assert len(exc_info.value.failures) == 2
        assert exc_info.value.failures[0] == "JSON path id doesn't match.\nExpected: <2>\n  Actual: 1\n"

    def test_missing_application(self):
        """Test that dispatching without an application or client fails clearly."""
        with pytest.raises(MissingApplicationError):
            reactive.when(lambda send: send.get("/greeting"))
