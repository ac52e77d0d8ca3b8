"""
클라이언트 설정

환경변수(.env 포함) 또는 YAML 파일 기반 설정 관리.

YAML 형식:
    ```yaml
    forge:
      base_url: http://localhost:8080
      timeout: 120
    ```
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_TIMEOUT = 120.0


class ConfigurationError(Exception):
    """설정 오류 예외"""

    pass


@dataclass
class ForgeConfig:
    """Forge 클라이언트 설정"""

    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT  # 초

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "ForgeConfig":
        """환경변수에서 설정 로드

        env_file이 있으면 먼저 로드합니다 (이미 설정된 환경변수는 덮어쓰지 않음).

        Args:
            env_file: .env 파일 경로 (선택)

        Raises:
            ConfigurationError: FORGE_TIMEOUT이 숫자가 아님
        """
        if env_file is not None:
            load_dotenv(env_file)

        timeout_str = os.getenv("FORGE_TIMEOUT", str(DEFAULT_TIMEOUT))
        try:
            timeout = float(timeout_str)
        except ValueError as e:
            raise ConfigurationError(f"잘못된 FORGE_TIMEOUT 값: {timeout_str}") from e

        return cls(
            base_url=os.getenv("FORGE_URL", DEFAULT_BASE_URL),
            timeout=timeout,
        )

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "ForgeConfig":
        """YAML 파일의 forge 섹션에서 설정 로드

        Args:
            config_path: 설정 파일 경로

        Raises:
            ConfigurationError: 파일이 없거나 형식이 잘못됨
        """
        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"설정 파일 없음: {config_path}")

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"YAML 파싱 실패: {config_path}: {e}") from e

        section = data.get("forge", {}) if isinstance(data, dict) else None
        if not isinstance(section, dict):
            raise ConfigurationError(f"forge 섹션 형식 오류: {config_path}")

        try:
            timeout = float(section.get("timeout", DEFAULT_TIMEOUT))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"잘못된 timeout 값: {section.get('timeout')}"
            ) from e

        return cls(
            base_url=str(section.get("base_url", DEFAULT_BASE_URL)),
            timeout=timeout,
        )

    def validate(self, strict: bool = True) -> list[str]:
        """설정값 검증

        Args:
            strict: True면 오류 발생 시 예외, False면 로그만

        Returns:
            list[str]: 검증 경고/오류 메시지 목록

        Raises:
            ConfigurationError: strict=True이고 오류가 있을 때
        """
        errors = []
        warnings = []

        if not self.base_url.startswith(("http://", "https://")):
            errors.append(f"잘못된 FORGE_URL 형식: {self.base_url}")

        if self.timeout <= 0:
            errors.append(f"잘못된 timeout 값: {self.timeout}")
        elif self.timeout > 600:
            warnings.append(f"timeout이 너무 김: {self.timeout}초 (10분 초과)")

        for warning in warnings:
            logger.warning(f"[Config] {warning}")

        if errors:
            for error in errors:
                logger.error(f"[Config] {error}")
            if strict:
                raise ConfigurationError(
                    f"설정 검증 실패: {len(errors)}개 오류\n" + "\n".join(errors)
                )

        return errors + warnings
