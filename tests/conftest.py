"""
Pytest 설정 및 공통 Fixture
"""

import json
from typing import Any, Callable

import httpx
import pytest

from forge_sdk.builder import RenderRequestBuilder
from forge_sdk.client import ForgeClient, ForgeSyncClient

BASE_URL = "http://localhost:8080"
SAMPLE_HTML = "<h1>Test</h1>"


class RecordingTransport(httpx.MockTransport):
    """요청을 기록하는 httpx MockTransport"""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    @property
    def last_json(self) -> dict[str, Any]:
        """마지막 요청 본문 (JSON)"""
        return json.loads(self.requests[-1].content)


@pytest.fixture
def html_builder() -> RenderRequestBuilder:
    """클라이언트 없는 HTML 빌더 (컴파일 테스트용)"""
    return RenderRequestBuilder(html=SAMPLE_HTML)


@pytest.fixture
def client() -> ForgeClient:
    """기본 비동기 클라이언트 (HTTP 클라이언트 미주입)"""
    return ForgeClient(BASE_URL)


@pytest.fixture
def make_async_client() -> Callable[..., tuple[ForgeClient, RecordingTransport]]:
    """핸들러로 응답을 흉내내는 비동기 클라이언트 팩토리"""

    def _make(
        handler: Callable[[httpx.Request], httpx.Response],
        base_url: str = BASE_URL,
    ) -> tuple[ForgeClient, RecordingTransport]:
        transport = RecordingTransport(handler)
        http_client = httpx.AsyncClient(transport=transport)
        return ForgeClient(base_url, http_client=http_client), transport

    return _make


@pytest.fixture
def make_sync_client() -> Callable[..., tuple[ForgeSyncClient, RecordingTransport]]:
    """핸들러로 응답을 흉내내는 동기 클라이언트 팩토리"""

    def _make(
        handler: Callable[[httpx.Request], httpx.Response],
        base_url: str = BASE_URL,
    ) -> tuple[ForgeSyncClient, RecordingTransport]:
        transport = RecordingTransport(handler)
        http_client = httpx.Client(transport=transport)
        return ForgeSyncClient(base_url, http_client=http_client), transport

    return _make
