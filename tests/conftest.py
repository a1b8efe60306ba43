"""
Pytest configuration for the restchain test suite.

Backend configuration is process wide, so it is reset after every test, the
way callers are expected to do in their own teardown.
"""

import pytest

import restchain
from restchain import mockapp, reactive
from tests.framework import GreetingWsgiApp, MockServer, create_greeting_asgi_app


@pytest.fixture(autouse=True)
def reset_backends():
    yield
    restchain.reset()
    mockapp.reset()
    reactive.reset()


@pytest.fixture
def mock_server():
    """A started mock HTTP server, shut down after the test."""
    with MockServer() as server:
        yield server


@pytest.fixture
def greeting_wsgi_app():
    return GreetingWsgiApp()


@pytest.fixture
def greeting_asgi_app():
    return create_greeting_asgi_app()


@pytest.fixture
def hello_world():
    """Answer every direct HTTP request with the canned hello world message."""
    restchain.filters(restchain.canned_response(
        status_code=200,
        content_type="application/json",
        body='{ "message" : "Hello World"}',
    ))
