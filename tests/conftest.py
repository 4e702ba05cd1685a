"""
Pytest configuration for http_message tests.

This file contains shared fixtures and configuration
for all tests in the project.
"""

import io

import pytest

from http_message.streams import StreamFactory
from http_message.uri import Uri


@pytest.fixture
def stream_factory() -> StreamFactory:
    """Create a stream factory for testing."""
    return StreamFactory()


@pytest.fixture
def make_uri():
    """Create Uri instances from a full set of sample components."""
    def _create_uri(**overrides) -> Uri:
        parameters = {
            "scheme": "http",
            "user": "alice",
            "password": "secret",
            "host": "example.com",
            "port": 80,
            "path": "/foo/bar",
            "query": "baz=42",
            "fragment": "qux",
        }
        parameters.update(overrides)
        return Uri(**parameters)
    return _create_uri


@pytest.fixture
def sample_headers():
    """Sample headers for testing."""
    return {
        "Content-Type": "application/json",
        "Accept-Encoding": ["gzip", "deflate"],
        "X-Request-Id": "abc123",
    }


@pytest.fixture
def sample_environ():
    """Sample CGI-style environment for testing."""
    return {
        "REQUEST_METHOD": "POST",
        "HTTPS": 1,
        "PHP_AUTH_USER": "Alice",
        "PHP_AUTH_PW": "secret",
        "SERVER_NAME": "example.com",
        "SERVER_PORT": 8443,
        "REQUEST_URI": "/foo?bar=baz",
        "HTTP_CONTENT_LENGTH": 0,
        "HTTP_ACCEPT_ENCODING": "gzip, deflate",
        "CONTENT_TYPE": "text/html",
        "COOKIE": "foo=1; bar=baz",
    }


@pytest.fixture
def wsgi_environ():
    """WSGI-style environment with a request body."""
    return {
        "REQUEST_METHOD": "put",
        "SERVER_NAME": "api.example.com",
        "SERVER_PORT": "80",
        "REQUEST_URI": "/items/7",
        "HTTP_HOST": "api.example.com",
        "CONTENT_TYPE": "application/json",
        "CONTENT_LENGTH": "13",
        "wsgi.input": io.BytesIO(b'{"name": "x"}'),
        "wsgi.url_scheme": "http",
    }
