"""
forge_sdk 공통 라이브러리

Forge 렌더링 서버 클라이언트, 요청 빌더, 에러 분류, 설정 로더 제공.
"""

from .builder import RenderRequestBuilder, compile_request, encode_payload
from .client import ForgeClient, ForgeSyncClient
from .config import ConfigurationError, ForgeConfig
from .errors import (
    ErrorClassifier,
    ErrorKind,
    ForgeConnectionError,
    ForgeContractError,
    ForgeError,
    ForgeServerError,
    ForgeTimeoutError,
)
from .types import (
    Barcode,
    BarcodeAnchor,
    BarcodeType,
    DitherMethod,
    EmbeddedFile,
    EmbedRelationship,
    Flow,
    Orientation,
    OutputFormat,
    Palette,
    PdfAccessibility,
    PdfMode,
    PdfStandard,
    RenderRequest,
    WatermarkLayer,
)

__all__ = [
    # Client
    "ForgeClient",
    "ForgeSyncClient",
    # Builder
    "RenderRequestBuilder",
    "compile_request",
    "encode_payload",
    # Config
    "ConfigurationError",
    "ForgeConfig",
    # Errors
    "ErrorClassifier",
    "ErrorKind",
    "ForgeConnectionError",
    "ForgeContractError",
    "ForgeError",
    "ForgeServerError",
    "ForgeTimeoutError",
    # Types
    "Barcode",
    "BarcodeAnchor",
    "BarcodeType",
    "DitherMethod",
    "EmbeddedFile",
    "EmbedRelationship",
    "Flow",
    "Orientation",
    "OutputFormat",
    "Palette",
    "PdfAccessibility",
    "PdfMode",
    "PdfStandard",
    "RenderRequest",
    "WatermarkLayer",
]
