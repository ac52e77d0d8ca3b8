"""
Forge 렌더링 요청 빌더

체이닝 방식으로 RenderRequest를 누적하고, 서버가 이해하는 와이어 문서(JSON)로
컴파일합니다.

와이어 규칙:
- format은 항상 출력, html/url 중 요청 생성 시 지정한 하나만 출력
- 설정되지 않은 필드는 null이 아니라 키 자체를 생략
- quantize / pdf 및 하위 그룹은 멤버가 하나라도 설정된 경우에만 출력
- embedded_files / barcodes는 추가한 순서를 유지
"""

import base64
import json
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel

from .errors import ForgeContractError
from .types import (
    Barcode,
    BarcodeAnchor,
    BarcodeType,
    DitherMethod,
    EmbeddedFile,
    EmbedRelationship,
    EncryptionOptions,
    Flow,
    Orientation,
    OutputFormat,
    Palette,
    PdfAccessibility,
    PdfMode,
    PdfStandard,
    RenderRequest,
    SignatureOptions,
    WatermarkLayer,
    WatermarkOptions,
)

if TYPE_CHECKING:
    from .client import ForgeClient, ForgeSyncClient

E = TypeVar("E", bound=Enum)


def _to_enum(enum_cls: type[E], value: E | str) -> E:
    """Enum 멤버 또는 와이어 토큰을 Enum 멤버로 변환

    Raises:
        ForgeContractError: 정의되지 않은 값
    """
    try:
        return enum_cls(value)
    except ValueError as e:
        raise ForgeContractError(
            f"{enum_cls.__name__}에 없는 값입니다: {value!r}"
        ) from e


def _to_base64(data: bytes | str) -> str:
    """bytes는 base64 인코딩, str은 이미 인코딩된 것으로 보고 그대로 반환"""
    if isinstance(data, (bytes, bytearray)):
        return base64.b64encode(data).decode("ascii")
    return data


def _dump_group(group: BaseModel) -> dict[str, Any]:
    """옵션 그룹을 와이어 dict로 변환 (미설정 필드와 빈 하위 그룹 제외)"""
    # 검증 없이 대입된 값(예: int 필드의 float)은 경고 없이 그대로 전달
    dumped = group.model_dump(mode="json", exclude_none=True, warnings=False)
    return _drop_empty_groups(dumped)


def _drop_empty_groups(document: dict[str, Any]) -> dict[str, Any]:
    result = {}
    for key, value in document.items():
        if isinstance(value, dict):
            value = _drop_empty_groups(value)
            if not value:
                continue
        result[key] = value
    return result


def compile_request(request: RenderRequest) -> dict[str, Any]:
    """RenderRequest를 와이어 문서로 컴파일

    입력을 변경하지 않는 순수 함수이며, 같은 상태에서는 항상 같은 문서를 반환합니다.

    Args:
        request: 누적된 렌더링 요청

    Returns:
        와이어 문서
            {
                "format": "pdf",
                "html": "<h1>Hello</h1>",
                "paper": "a4",
                "quantize": {"colors": 16, "dither": "atkinson"},
                "pdf": {"title": "Report", "barcodes": [...]}
            }

    Raises:
        ForgeContractError: html/url이 둘 다 있거나 둘 다 없음
    """
    if (request.html is None) == (request.url is None):
        raise ForgeContractError("html과 url 중 정확히 하나가 필요합니다")

    payload: dict[str, Any] = {"format": _to_enum(OutputFormat, request.format).value}
    if request.html is not None:
        payload["html"] = request.html
    else:
        payload["url"] = request.url

    # 레이아웃 필드는 최상위에 평탄화
    payload.update(_dump_group(request.layout))

    quantize = _dump_group(request.quantize)
    if quantize:
        payload["quantize"] = quantize

    pdf = _dump_group(request.pdf)
    if pdf:
        payload["pdf"] = pdf

    return payload


def encode_payload(payload: dict[str, Any]) -> bytes:
    """와이어 문서를 정규화된 compact JSON 바이트로 직렬화"""
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode(
        "utf-8"
    )


class RenderRequestBuilder:
    """Forge 렌더링 요청 빌더

    모든 설정 메서드는 self를 반환하므로 순서와 관계없이 체이닝할 수 있습니다.
    수치 범위(colors 2-256, opacity 0.0-1.0 등)는 검증하지 않고 서버에 그대로
    전달합니다.

    사용법:
        ```python
        pdf = await (
            client.render_html("<h1>Invoice</h1>")
            .paper("a4")
            .pdf_title("Invoice #42")
            .pdf_barcode(BarcodeType.QR, "https://example.com/i/42")
            .send()
        )
        ```
    """

    def __init__(
        self,
        html: str | None = None,
        url: str | None = None,
        client: "ForgeClient | ForgeSyncClient | None" = None,
    ):
        """
        Args:
            html: 렌더링할 HTML 문자열
            url: 렌더링할 원격 URL
            client: send()에 사용할 클라이언트 (선택)

        Raises:
            ForgeContractError: html/url이 둘 다 있거나 둘 다 없음
        """
        if (html is None) == (url is None):
            raise ForgeContractError("html과 url 중 정확히 하나가 필요합니다")

        self._client = client
        self.request = RenderRequest(html=html, url=url)

    # ------------------------------------------------------------------
    # 레이아웃
    # ------------------------------------------------------------------

    def format(self, value: OutputFormat | str) -> "RenderRequestBuilder":
        self.request.format = _to_enum(OutputFormat, value)
        return self

    def width(self, px: int) -> "RenderRequestBuilder":
        self.request.layout.width = px
        return self

    def height(self, px: int) -> "RenderRequestBuilder":
        self.request.layout.height = px
        return self

    def paper(self, size: str) -> "RenderRequestBuilder":
        """용지 크기 토큰 (예: "a4", "letter")"""
        self.request.layout.paper = size
        return self

    def orientation(self, value: Orientation | str) -> "RenderRequestBuilder":
        self.request.layout.orientation = _to_enum(Orientation, value)
        return self

    def margins(self, margins: str) -> "RenderRequestBuilder":
        """여백 프리셋 이름 또는 "T,R,B,L" (mm)"""
        self.request.layout.margins = margins
        return self

    def flow(self, value: Flow | str) -> "RenderRequestBuilder":
        self.request.layout.flow = _to_enum(Flow, value)
        return self

    def density(self, dpi: float) -> "RenderRequestBuilder":
        self.request.layout.density = dpi
        return self

    def background(self, color: str) -> "RenderRequestBuilder":
        self.request.layout.background = color
        return self

    def timeout(self, seconds: int) -> "RenderRequestBuilder":
        """서버 측 페이지 로드 타임아웃 (초)"""
        self.request.layout.timeout = seconds
        return self

    # ------------------------------------------------------------------
    # 색상 양자화
    # ------------------------------------------------------------------

    def colors(self, count: int) -> "RenderRequestBuilder":
        self.request.quantize.colors = count
        return self

    def palette_preset(self, preset: Palette | str) -> "RenderRequestBuilder":
        """프리셋 팔레트 설정 (이전 팔레트 설정을 대체)"""
        self.request.quantize.palette = _to_enum(Palette, preset)
        return self

    def custom_palette(self, colors: list[str] | tuple[str, ...]) -> "RenderRequestBuilder":
        """리터럴 hex 색상 목록 설정 (이전 팔레트 설정을 대체, 값은 그대로 전달)"""
        self.request.quantize.palette = tuple(colors)
        return self

    def dither(self, method: DitherMethod | str) -> "RenderRequestBuilder":
        self.request.quantize.dither = _to_enum(DitherMethod, method)
        return self

    # ------------------------------------------------------------------
    # PDF 메타데이터 / 일반 옵션
    # ------------------------------------------------------------------

    def pdf_title(self, title: str) -> "RenderRequestBuilder":
        self.request.pdf.title = title
        return self

    def pdf_author(self, author: str) -> "RenderRequestBuilder":
        self.request.pdf.author = author
        return self

    def pdf_subject(self, subject: str) -> "RenderRequestBuilder":
        self.request.pdf.subject = subject
        return self

    def pdf_keywords(self, keywords: str) -> "RenderRequestBuilder":
        """쉼표로 구분된 키워드"""
        self.request.pdf.keywords = keywords
        return self

    def pdf_creator(self, creator: str) -> "RenderRequestBuilder":
        self.request.pdf.creator = creator
        return self

    def pdf_bookmarks(self, enabled: bool) -> "RenderRequestBuilder":
        self.request.pdf.bookmarks = enabled
        return self

    def pdf_page_numbers(self, enabled: bool) -> "RenderRequestBuilder":
        self.request.pdf.page_numbers = enabled
        return self

    def pdf_standard(self, standard: PdfStandard | str) -> "RenderRequestBuilder":
        self.request.pdf.standard = _to_enum(PdfStandard, standard)
        return self

    def pdf_mode(self, mode: PdfMode | str) -> "RenderRequestBuilder":
        self.request.pdf.mode = _to_enum(PdfMode, mode)
        return self

    def pdf_accessibility(
        self, level: PdfAccessibility | str
    ) -> "RenderRequestBuilder":
        self.request.pdf.accessibility = _to_enum(PdfAccessibility, level)
        return self

    def pdf_linearize(self, enabled: bool) -> "RenderRequestBuilder":
        """웹 최적화(빠른 보기) PDF 출력"""
        self.request.pdf.linearize = enabled
        return self

    # ------------------------------------------------------------------
    # 워터마크
    # ------------------------------------------------------------------

    def _watermark(self) -> WatermarkOptions:
        if self.request.pdf.watermark is None:
            self.request.pdf.watermark = WatermarkOptions()
        return self.request.pdf.watermark

    def pdf_watermark_text(self, text: str) -> "RenderRequestBuilder":
        self._watermark().text = text
        return self

    def pdf_watermark_image(self, data: bytes | str) -> "RenderRequestBuilder":
        """워터마크 이미지 (bytes는 base64로 인코딩, str은 base64로 간주)"""
        self._watermark().image_data = _to_base64(data)
        return self

    def pdf_watermark_opacity(self, opacity: float) -> "RenderRequestBuilder":
        self._watermark().opacity = opacity
        return self

    def pdf_watermark_rotation(self, degrees: float) -> "RenderRequestBuilder":
        self._watermark().rotation = degrees
        return self

    def pdf_watermark_color(self, color: str) -> "RenderRequestBuilder":
        self._watermark().color = color
        return self

    def pdf_watermark_font_size(self, size: float) -> "RenderRequestBuilder":
        self._watermark().font_size = size
        return self

    def pdf_watermark_scale(self, scale: float) -> "RenderRequestBuilder":
        self._watermark().scale = scale
        return self

    def pdf_watermark_layer(
        self, layer: WatermarkLayer | str
    ) -> "RenderRequestBuilder":
        self._watermark().layer = _to_enum(WatermarkLayer, layer)
        return self

    def pdf_watermark_pages(self, pages: str) -> "RenderRequestBuilder":
        """워터마크 적용 페이지 범위 (예: "1,3-5")"""
        self._watermark().pages = pages
        return self

    # ------------------------------------------------------------------
    # 첨부 파일 / 바코드 (추가 전용)
    # ------------------------------------------------------------------

    def pdf_embed_file(
        self,
        path: str,
        data: bytes | str,
        mime_type: str | None = None,
        description: str | None = None,
        relationship: EmbedRelationship | str | None = None,
    ) -> "RenderRequestBuilder":
        """PDF에 파일 첨부 (호출할 때마다 하나씩 추가)

        Args:
            path: PDF 내부 파일 경로 (예: "invoice.xml")
            data: 파일 내용 (bytes는 base64로 인코딩, str은 base64로 간주)
            mime_type: MIME 타입
            description: 설명
            relationship: 문서와의 관계 (PDF/A-3)
        """
        entry = EmbeddedFile(
            path=path,
            data=_to_base64(data),
            mime_type=mime_type,
            description=description,
            relationship=(
                _to_enum(EmbedRelationship, relationship)
                if relationship is not None
                else None
            ),
        )
        if self.request.pdf.embedded_files is None:
            self.request.pdf.embedded_files = []
        self.request.pdf.embedded_files.append(entry)
        return self

    def pdf_barcode(
        self,
        type: BarcodeType | str,
        data: str,
        x: float | None = None,
        y: float | None = None,
        width: float | None = None,
        height: float | None = None,
        anchor: BarcodeAnchor | str | None = None,
        foreground: str | None = None,
        background: str | None = None,
        draw_background: bool | None = None,
        pages: str | None = None,
    ) -> "RenderRequestBuilder":
        """PDF에 바코드 오버레이 추가 (호출할 때마다 하나씩 추가)

        Args:
            type: 바코드 심볼로지
            data: 인코딩할 데이터
            x, y: 기준 모서리로부터의 위치 (pt)
            width, height: 크기 (pt)
            anchor: 기준 모서리
            foreground, background: 색상 (예: "#000000")
            draw_background: 배경 채우기 여부
            pages: 적용 페이지 범위 (예: "1,3-5")
        """
        entry = Barcode(
            type=_to_enum(BarcodeType, type),
            data=data,
            x=x,
            y=y,
            width=width,
            height=height,
            anchor=_to_enum(BarcodeAnchor, anchor) if anchor is not None else None,
            foreground=foreground,
            background=background,
            draw_background=draw_background,
            pages=pages,
        )
        if self.request.pdf.barcodes is None:
            self.request.pdf.barcodes = []
        self.request.pdf.barcodes.append(entry)
        return self

    # ------------------------------------------------------------------
    # 서명 / 암호화
    # ------------------------------------------------------------------

    def pdf_sign(
        self,
        certificate_data: bytes | str,
        password: str,
        signer_name: str | None = None,
        reason: str | None = None,
        location: str | None = None,
        timestamp_url: str | None = None,
    ) -> "RenderRequestBuilder":
        """PDF 전자 서명 설정 (이전 서명 설정을 대체)

        Args:
            certificate_data: PKCS#12 인증서 (bytes는 base64로 인코딩)
            password: 인증서 비밀번호
            signer_name: 서명자 이름
            reason: 서명 사유
            location: 서명 위치
            timestamp_url: RFC 3161 타임스탬프 서버 URL
        """
        self.request.pdf.signature = SignatureOptions(
            certificate_data=_to_base64(certificate_data),
            password=password,
            signer_name=signer_name,
            reason=reason,
            location=location,
            timestamp_url=timestamp_url,
        )
        return self

    def _encryption(self) -> EncryptionOptions:
        if self.request.pdf.encryption is None:
            self.request.pdf.encryption = EncryptionOptions()
        return self.request.pdf.encryption

    def pdf_user_password(self, password: str) -> "RenderRequestBuilder":
        """문서를 열 때 필요한 비밀번호"""
        self._encryption().user_password = password
        return self

    def pdf_owner_password(self, password: str) -> "RenderRequestBuilder":
        """권한 변경에 필요한 비밀번호"""
        self._encryption().owner_password = password
        return self

    def pdf_permissions(self, permissions: str) -> "RenderRequestBuilder":
        """허용 권한 목록 (예: "print,copy")"""
        self._encryption().permissions = permissions
        return self

    # ------------------------------------------------------------------
    # 컴파일 / 전송
    # ------------------------------------------------------------------

    def build_payload(self) -> dict[str, Any]:
        """와이어 문서 생성 (상태를 변경하지 않으므로 반복 호출 가능)"""
        return compile_request(self.request)

    def send(self, timeout: float | None = None):
        """렌더링 요청 전송

        ForgeClient에 바인딩된 경우 await 해야 하는 코루틴을,
        ForgeSyncClient에 바인딩된 경우 렌더링 결과 바이트를 반환합니다.

        Args:
            timeout: 전송 타임아웃 (초, 기본값: 클라이언트 설정)

        Raises:
            ForgeContractError: 클라이언트 없이 생성된 빌더
        """
        if self._client is None:
            raise ForgeContractError("클라이언트 없이 생성된 빌더는 전송할 수 없습니다")
        return self._client.send(self.build_payload(), timeout=timeout)
