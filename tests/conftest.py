"""
Pytest configuration and shared fixtures.
"""

import pytest
import requests

from kutimo.config import EndpointConfig
from kutimo.logger import get_logger, reset_logger


class FakeResponse:
    """Minimal stand-in for a streamed requests.Response."""

    def __init__(self, content: bytes = b"", status_code: int = 200, chunks=None):
        self.content = content
        self.status_code = status_code
        self.chunks = chunks if chunks is not None else [content]
        self.closed = False

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(
                f"{self.status_code} Error", response=self
            )

    def iter_content(self, chunk_size=1):
        for chunk in self.chunks:
            yield chunk

    def close(self):
        self.closed = True


class FakeSession:
    """Recording transport: remembers every post and replays a canned outcome."""

    def __init__(self, content: bytes = b"", status_code: int = 200, error: Exception = None, chunks=None):
        self.content = content
        self.status_code = status_code
        self.error = error
        self.chunks = chunks
        self.calls = []
        self.responses = []
        self.closed = False

    def post(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        resp = FakeResponse(self.content, self.status_code, chunks=self.chunks)
        self.responses.append(resp)
        return resp

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


@pytest.fixture(autouse=True)
def quiet_logger():
    """Keep the global logger off the console and out of logs/."""
    reset_logger()
    logger = get_logger(enable_file=False, enable_console=False)
    yield logger
    reset_logger()


@pytest.fixture
def endpoint_config() -> EndpointConfig:
    return EndpointConfig(
        endpoint="https://korekton.example.org/api",
        timeout=5,
        user="tao",
        password="s3cret",
    )


@pytest.fixture
def score_response() -> bytes:
    return b"<scoreItemResponse><score>0.5</score></scoreItemResponse>"


@pytest.fixture
def make_session():
    """Factory for FakeSession instances."""
    return FakeSession


@pytest.fixture
def expected_item42_body() -> bytes:
    return (
        b'<?xml version="1.0" encoding="UTF-8"?>\n'
        b'<scoreItemRequest xmlns="http://www.taotesting.com/xsd/korektonv1p0">\n'
        b"<itemID>item42</itemID>\n"
        b"<response>ChoiceA</response>\n"
        b"</scoreItemRequest>"
    )
