from typing import Callable, List

import httpx
import pytest


class RecordingTransport:
    """Routes every AsyncClient created by an adapter to ``handler``."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.handler = handler
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)


@pytest.fixture
def mock_http(monkeypatch):
    real_client = httpx.AsyncClient

    def install(handler: Callable[[httpx.Request], httpx.Response]) -> RecordingTransport:
        transport = RecordingTransport(handler)

        def client_factory(*args, **kwargs):
            return real_client(*args, transport=httpx.MockTransport(transport), **kwargs)

        monkeypatch.setattr(httpx, "AsyncClient", client_factory)
        return transport

    return install
