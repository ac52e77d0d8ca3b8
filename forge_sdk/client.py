"""
Forge API 클라이언트 (비동기/동기)

렌더링 요청 1회당 정확히 한 번의 HTTP 호출을 수행하고 결과를 분류합니다.
- 재시도 없음 (호출 측 또는 전송 계층의 책임)
- 커넥션 풀/TLS/리다이렉트는 httpx에 위임
- httpx 클라이언트를 주입하면 재사용, 없으면 요청마다 새로 생성
"""

import logging
from typing import TYPE_CHECKING, Any

import httpx

from .builder import RenderRequestBuilder, encode_payload
from .errors import ErrorClassifier

if TYPE_CHECKING:
    from .config import ForgeConfig

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120.0
RENDER_PATH = "/render"
HEALTH_PATH = "/health"
JSON_HEADERS = {"Content-Type": "application/json"}


def _request_kwargs(
    content: bytes | None, headers: dict[str, str] | None, timeout: float | None
) -> dict[str, Any]:
    kwargs: dict[str, Any] = {}
    if content is not None:
        kwargs["content"] = content
    if headers is not None:
        kwargs["headers"] = headers
    # None이면 클라이언트 기본 타임아웃 사용
    if timeout is not None:
        kwargs["timeout"] = timeout
    return kwargs


class ForgeClient:
    """비동기 Forge API 클라이언트

    사용법:
        ```python
        async with ForgeClient("http://localhost:8080") as client:
            png = await client.render_url("https://example.com").format("png").send()
        ```

    취소: 실행 중인 태스크를 cancel()하면 asyncio.CancelledError가 그대로
    전파됩니다. 전송 타임아웃은 ForgeTimeoutError로 보고됩니다.
    """

    def __init__(
        self,
        base_url: str,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Args:
            base_url: Forge 서버 주소 (끝의 "/"는 제거)
            http_client: 재사용할 httpx.AsyncClient (선택)
            timeout: 기본 요청 타임아웃 (초, 주입된 클라이언트에는 미적용)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http = http_client

    @classmethod
    def from_config(
        cls, config: "ForgeConfig", http_client: httpx.AsyncClient | None = None
    ) -> "ForgeClient":
        """ForgeConfig로 클라이언트 생성"""
        return cls(config.base_url, http_client=http_client, timeout=config.timeout)

    def _create_client(self) -> httpx.AsyncClient:
        """새로운 HTTP 클라이언트 생성 (주입된 클라이언트가 없을 때)"""
        return httpx.AsyncClient(timeout=self.timeout)

    async def _request(
        self,
        method: str,
        path: str,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        url = f"{self.base_url}{path}"
        kwargs = _request_kwargs(content, headers, timeout)
        if self._http is not None:
            return await self._http.request(method, url, **kwargs)
        async with self._create_client() as client:
            return await client.request(method, url, **kwargs)

    async def close(self) -> None:
        """주입된 HTTP 클라이언트 종료"""
        if self._http is not None:
            await self._http.aclose()

    async def __aenter__(self) -> "ForgeClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def render_html(self, html: str) -> RenderRequestBuilder:
        """HTML 문자열로 렌더링 요청 시작"""
        return RenderRequestBuilder(html=html, client=self)

    def render_url(self, url: str) -> RenderRequestBuilder:
        """URL로 렌더링 요청 시작"""
        return RenderRequestBuilder(url=url, client=self)

    async def health_check(self, timeout: float | None = None) -> bool:
        """Forge 서버 헬스 체크

        전송 오류는 예외 대신 False로 변환합니다.

        Returns:
            bool: 2xx 응답이면 True
        """
        try:
            response = await self._request("GET", HEALTH_PATH, timeout=timeout)
        except httpx.HTTPError as e:
            logger.warning(f"Forge health check failed: {e}")
            return False
        return response.is_success

    async def send(
        self, payload: dict[str, Any], timeout: float | None = None
    ) -> bytes:
        """와이어 문서를 /render로 전송

        Args:
            payload: 컴파일된 와이어 문서
            timeout: 요청 타임아웃 (초, 기본값: 클라이언트 설정)

        Returns:
            bytes: 렌더링 결과

        Raises:
            ForgeConnectionError: 응답을 받기 전 전송 실패
            ForgeTimeoutError: 전송 타임아웃
            ForgeServerError: 2xx가 아닌 응답
        """
        body = encode_payload(payload)
        logger.debug(
            f"Forge render request: format={payload.get('format')}, {len(body)} bytes"
        )
        try:
            response = await self._request(
                "POST", RENDER_PATH, content=body, headers=JSON_HEADERS, timeout=timeout
            )
        except httpx.HTTPError as e:
            raise ErrorClassifier.from_transport_error(e) from e
        return ErrorClassifier.classify_response(response)


class ForgeSyncClient:
    """동기 Forge API 클라이언트 (스크립트/CLI용)"""

    def __init__(
        self,
        base_url: str,
        http_client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http = http_client

    @classmethod
    def from_config(
        cls, config: "ForgeConfig", http_client: httpx.Client | None = None
    ) -> "ForgeSyncClient":
        return cls(config.base_url, http_client=http_client, timeout=config.timeout)

    def _create_client(self) -> httpx.Client:
        """동기 HTTP 클라이언트 생성"""
        return httpx.Client(timeout=self.timeout)

    def _request(
        self,
        method: str,
        path: str,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        url = f"{self.base_url}{path}"
        kwargs = _request_kwargs(content, headers, timeout)
        if self._http is not None:
            return self._http.request(method, url, **kwargs)
        with self._create_client() as client:
            return client.request(method, url, **kwargs)

    def close(self) -> None:
        if self._http is not None:
            self._http.close()

    def __enter__(self) -> "ForgeSyncClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def render_html(self, html: str) -> RenderRequestBuilder:
        return RenderRequestBuilder(html=html, client=self)

    def render_url(self, url: str) -> RenderRequestBuilder:
        return RenderRequestBuilder(url=url, client=self)

    def health_check(self, timeout: float | None = None) -> bool:
        """Forge 서버 헬스 체크 (동기)"""
        try:
            response = self._request("GET", HEALTH_PATH, timeout=timeout)
        except httpx.HTTPError as e:
            logger.warning(f"Forge health check failed: {e}")
            return False
        return response.is_success

    def send(self, payload: dict[str, Any], timeout: float | None = None) -> bytes:
        """와이어 문서를 /render로 전송 (동기)

        Raises:
            ForgeConnectionError: 응답을 받기 전 전송 실패
            ForgeServerError: 2xx가 아닌 응답
        """
        body = encode_payload(payload)
        logger.debug(
            f"Forge render request: format={payload.get('format')}, {len(body)} bytes"
        )
        try:
            response = self._request(
                "POST", RENDER_PATH, content=body, headers=JSON_HEADERS, timeout=timeout
            )
        except httpx.HTTPError as e:
            raise ErrorClassifier.from_transport_error(e) from e
        return ErrorClassifier.classify_response(response)
