"""
에러 분류 시스템

HTTP 전송 결과를 세 가지 에러 종류로 분류합니다.

- connection: 응답을 받기 전에 전송이 실패함 (DNS, 연결 거부, 타임아웃)
- server: 응답은 받았지만 상태 코드가 실패를 나타냄
- contract: 잘못된 요청 상태 등 호출 측 프로그래밍 오류 (즉시 실패)

재시도는 하지 않습니다. 재시도 정책은 호출 측 또는 전송 계층의 책임입니다.
"""

import logging
from enum import Enum

import httpx

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """에러 종류"""

    CONNECTION = "connection"
    SERVER = "server"
    CONTRACT = "contract"


class ForgeError(Exception):
    """Forge SDK 기본 에러 (하위 클래스가 kind를 지정)"""

    kind: ErrorKind


class ForgeConnectionError(ForgeError):
    """Forge 서버와의 통신 실패 (응답 없음)"""

    kind = ErrorKind.CONNECTION

    def __init__(self, cause: Exception):
        super().__init__(f"connection error: {cause}")
        self.cause = cause


class ForgeTimeoutError(ForgeConnectionError):
    """전송 타임아웃"""


class ForgeServerError(ForgeError):
    """Forge 서버가 4xx/5xx 응답을 반환함"""

    kind = ErrorKind.SERVER

    def __init__(self, status_code: int, message: str):
        super().__init__(f"server error ({status_code}): {message}")
        self.status_code = status_code
        self.message = message


class ForgeContractError(ForgeError, ValueError):
    """SDK 사용 계약 위반 (잘못된 소스, 정의되지 않은 Enum 값 등)"""

    kind = ErrorKind.CONTRACT


class ErrorClassifier:
    """전송 결과 분류기"""

    @classmethod
    def from_transport_error(cls, error: Exception) -> ForgeConnectionError:
        """전송 계층 예외를 연결 실패로 변환

        Args:
            error: httpx 전송 예외

        Returns:
            ForgeConnectionError: 타임아웃이면 ForgeTimeoutError
        """
        if isinstance(error, httpx.TimeoutException):
            return ForgeTimeoutError(error)
        return ForgeConnectionError(error)

    @classmethod
    def extract_message(cls, response: httpx.Response) -> str:
        """실패 응답 본문에서 에러 메시지 추출

        본문이 {"error": "..."} 형태가 아니면 "HTTP <code>"를 반환합니다.

        Args:
            response: 실패 상태 코드의 응답

        Returns:
            str: 에러 메시지
        """
        fallback = f"HTTP {response.status_code}"
        try:
            body = response.json()
        except (ValueError, RecursionError):
            # 깊게 중첩된 본문은 RecursionError
            return fallback

        if isinstance(body, dict):
            message = body.get("error")
            if isinstance(message, str):
                return message
        return fallback

    @classmethod
    def classify_response(cls, response: httpx.Response) -> bytes:
        """응답을 분류하여 성공 시 본문 바이트 반환

        Args:
            response: Forge 서버 응답

        Returns:
            bytes: 렌더링 결과 (가공 없음)

        Raises:
            ForgeServerError: 2xx가 아닌 상태 코드
        """
        if response.is_success:
            logger.debug(
                f"Forge render succeeded: {response.status_code}, "
                f"{len(response.content)} bytes"
            )
            return response.content

        message = cls.extract_message(response)
        logger.debug(f"Forge render failed: {response.status_code} {message}")
        raise ForgeServerError(response.status_code, message)
