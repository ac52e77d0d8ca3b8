"""
에러 분류 시스템 테스트
"""

import httpx
import pytest

from forge_sdk.errors import (
    ErrorClassifier,
    ErrorKind,
    ForgeConnectionError,
    ForgeContractError,
    ForgeError,
    ForgeServerError,
    ForgeTimeoutError,
)


class TestErrorHierarchy:
    """에러 계층 테스트"""

    def test_all_derive_from_base(self):
        assert issubclass(ForgeConnectionError, ForgeError)
        assert issubclass(ForgeTimeoutError, ForgeConnectionError)
        assert issubclass(ForgeServerError, ForgeError)
        assert issubclass(ForgeContractError, ForgeError)

    def test_kinds(self):
        assert ForgeConnectionError(OSError("x")).kind == ErrorKind.CONNECTION
        assert ForgeTimeoutError(OSError("x")).kind == ErrorKind.CONNECTION
        assert ForgeServerError(500, "x").kind == ErrorKind.SERVER
        assert ForgeContractError("x").kind == ErrorKind.CONTRACT

    def test_server_error_message(self):
        error = ForgeServerError(404, "not found")

        assert error.status_code == 404
        assert error.message == "not found"
        assert str(error) == "server error (404): not found"

    def test_connection_error_keeps_cause(self):
        cause = ConnectionRefusedError("refused")
        error = ForgeConnectionError(cause)

        assert error.cause is cause
        assert str(error) == "connection error: refused"


class TestFromTransportError:
    """전송 예외 분류 테스트"""

    def test_connect_error(self):
        error = ErrorClassifier.from_transport_error(httpx.ConnectError("refused"))

        assert type(error) is ForgeConnectionError

    @pytest.mark.parametrize(
        "exc_cls",
        [httpx.ConnectTimeout, httpx.ReadTimeout, httpx.WriteTimeout, httpx.PoolTimeout],
    )
    def test_timeouts(self, exc_cls):
        error = ErrorClassifier.from_transport_error(exc_cls("timed out"))

        assert isinstance(error, ForgeTimeoutError)


class TestClassifyResponse:
    """응답 분류 테스트"""

    def test_success_returns_content_unchanged(self):
        body = b"\x00\x01binary\xff"
        response = httpx.Response(201, content=body)

        assert ErrorClassifier.classify_response(response) == body

    def test_error_message_parsed(self):
        response = httpx.Response(422, json={"error": "bad margins"})

        with pytest.raises(ForgeServerError) as exc_info:
            ErrorClassifier.classify_response(response)

        assert exc_info.value.status_code == 422
        assert exc_info.value.message == "bad margins"

    def test_error_message_without_content_type(self):
        """Content-Type 없이도 JSON 본문이면 파싱"""
        response = httpx.Response(422, content=b'{"error":"bad margins"}')

        assert ErrorClassifier.extract_message(response) == "bad margins"

    @pytest.mark.parametrize(
        "content",
        [
            b"",
            b"not json",
            b"{broken",
            b"[1, 2, 3]",
            b'"just a string"',
            b'{"message": "wrong key"}',
            b'{"error": 42}',
            b'{"error": null}',
            b"[" * 200000,
        ],
    )
    def test_fallback_message(self, content: bytes):
        """파싱 실패 시 "HTTP <code>" """
        response = httpx.Response(422, content=content)

        assert ErrorClassifier.extract_message(response) == "HTTP 422"

    def test_redirect_status_is_failure(self):
        """2xx 외 상태는 모두 실패"""
        response = httpx.Response(302, headers={"Location": "/elsewhere"})

        with pytest.raises(ForgeServerError, match=r"server error \(302\): HTTP 302"):
            ErrorClassifier.classify_response(response)
