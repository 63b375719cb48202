"""Pytest configuration and fixtures"""

import json
from datetime import datetime, timezone
from typing import Callable, Dict, List

import httpx
import pytest
from fastapi.testclient import TestClient

from replay_proxy.core.config import Settings
from replay_proxy.main import create_app
from replay_proxy.models.interaction import (
    Interaction,
    InteractionMetadata,
    RecordedRequest,
    RecordedResponse,
)
from replay_proxy.models.mode import ProxyMode
from replay_proxy.storage.filesystem import FileSystemRepository


def upstream_response(status_code: int = 200, body: bytes = b"", headers: Dict[str, str] = None) -> httpx.Response:
    """Build an upstream response whose raw body can still be streamed"""
    return httpx.Response(
        status_code,
        headers=headers or {},
        stream=httpx.ByteStream(body)
    )


class FakeUpstream:
    """
    Stand-in for the real target in record mode.

    Answers every request with the configured handler and keeps the requests
    it saw, so tests can assert on what the proxy forwarded.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.handler: Callable[[httpx.Request], httpx.Response] = self.echo_users

    @staticmethod
    def echo_users(request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content) if request.content else {}
        body = json.dumps({"id": 1, **payload}).encode()
        return upstream_response(
            201 if request.method == "POST" else 200,
            body,
            {"Content-Type": "application/json", "X-Upstream": "real"}
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def fake_upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(recordings_dir=str(tmp_path / "recordings"), mode=ProxyMode.RECORD)


@pytest.fixture
def repository(tmp_path) -> FileSystemRepository:
    return FileSystemRepository(tmp_path / "recordings")


@pytest.fixture
def app(settings, fake_upstream):
    return create_app(settings, upstream_transport=fake_upstream.transport)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


def make_interaction(
    method: str = "GET",
    target: str = "api.example.com/users/1",
    request_body: bytes = None,
    status_code: int = 200,
    response_body: bytes = b'{"id": 1}',
    timestamp: datetime = None
) -> Interaction:
    """Build an interaction without going through the network"""
    return Interaction(
        timestamp=timestamp or datetime(2025, 11, 5, 10, 30, 0, tzinfo=timezone.utc),
        request=RecordedRequest(
            method=method,
            url=target,
            headers={"Content-Type": ["application/json"]},
            body=request_body
        ),
        response=RecordedResponse(
            status_code=status_code,
            headers={"Content-Type": ["application/json"]},
            body=response_body
        ),
        metadata=InteractionMetadata(target=target, duration_ms=42)
    )


@pytest.fixture
def interaction_factory() -> Callable[..., Interaction]:
    return make_interaction


@pytest.fixture
def sample_interaction() -> Interaction:
    """A single recorded POST to the users service"""
    return make_interaction(
        method="POST",
        target="api.example.com/users",
        request_body=b'{"name":"Alice"}',
        status_code=201,
        response_body=b'{"id":1,"name":"Alice"}'
    )
