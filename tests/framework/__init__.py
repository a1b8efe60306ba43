"""
Support code for the restchain test suite: a mock HTTP server and demo
applications for the in-process backends.
"""

from .apps import GreetingWsgiApp, create_greeting_asgi_app
from .mock_server import CannedResponse, MockServer

__all__ = [
    'CannedResponse',
    'MockServer',
    'GreetingWsgiApp',
    'create_greeting_asgi_app',
]
