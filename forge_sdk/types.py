"""
공용 타입 정의

Forge 렌더링 요청에 쓰이는 Enum(와이어 토큰)과 Pydantic 요청 모델.

모든 옵션 필드는 None = "미설정"(와이어 출력에서 생략) 의미만 가지며,
명시적 null은 전송하지 않습니다.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class OutputFormat(str, Enum):
    """출력 포맷"""

    PDF = "pdf"
    PNG = "png"
    JPEG = "jpeg"
    BMP = "bmp"
    TGA = "tga"
    QOI = "qoi"
    SVG = "svg"


class Orientation(str, Enum):
    """페이지 방향"""

    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class Flow(str, Enum):
    """문서 흐름 모드"""

    AUTO = "auto"
    PAGINATE = "paginate"
    CONTINUOUS = "continuous"


class DitherMethod(str, Enum):
    """색상 양자화 디더링 알고리즘"""

    NONE = "none"
    FLOYD_STEINBERG = "floyd-steinberg"
    ATKINSON = "atkinson"
    ORDERED = "ordered"


class Palette(str, Enum):
    """내장 팔레트 프리셋"""

    AUTO = "auto"
    BLACK_WHITE = "bw"
    GRAYSCALE = "grayscale"
    EINK = "eink"


class WatermarkLayer(str, Enum):
    """워터마크 레이어 위치"""

    OVER = "over"
    UNDER = "under"


class PdfStandard(str, Enum):
    """PDF/A 표준 레벨"""

    NONE = "none"
    PDF_A_2B = "pdf/a-2b"
    PDF_A_3B = "pdf/a-3b"


class EmbedRelationship(str, Enum):
    """첨부 파일 관계 (PDF/A-3 AFRelationship)"""

    ALTERNATIVE = "alternative"
    SUPPLEMENT = "supplement"
    DATA = "data"
    SOURCE = "source"
    UNSPECIFIED = "unspecified"


class BarcodeType(str, Enum):
    """바코드 심볼로지"""

    QR = "qr"
    CODE128 = "code128"
    EAN13 = "ean13"
    UPC_A = "upca"
    CODE39 = "code39"


class BarcodeAnchor(str, Enum):
    """바코드 기준 모서리"""

    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"


class PdfMode(str, Enum):
    """PDF 렌더 모드"""

    AUTO = "auto"
    VECTOR = "vector"
    RASTER = "raster"


class PdfAccessibility(str, Enum):
    """접근성 레벨"""

    NONE = "none"
    BASIC = "basic"
    PDF_UA_1 = "pdf/ua-1"


class _Group(BaseModel):
    """옵션 그룹 공통 설정 (대입 시 재검증 없음, 미정의 키 금지)"""

    model_config = ConfigDict(extra="forbid")


class LayoutOptions(_Group):
    """레이아웃 옵션 (와이어 문서 최상위에 평탄화되어 출력)"""

    width: int | None = None
    height: int | None = None
    paper: str | None = None
    orientation: Orientation | None = None
    margins: str | None = None  # 프리셋 이름 또는 "T,R,B,L" (mm)
    flow: Flow | None = None
    density: float | None = None
    background: str | None = None
    timeout: int | None = None  # 초


class QuantizeOptions(_Group):
    """색상 양자화 옵션

    palette는 프리셋(Palette) 또는 리터럴 hex 문자열 튜플 중 하나만 가집니다.
    """

    colors: int | None = None  # 2-256 (서버가 검증)
    palette: Palette | tuple[str, ...] | None = None
    dither: DitherMethod | None = None


class WatermarkOptions(_Group):
    """워터마크 옵션"""

    text: str | None = None
    image_data: str | None = None  # base64
    opacity: float | None = None  # 0.0-1.0 (서버가 검증)
    rotation: float | None = None
    color: str | None = None
    font_size: float | None = None
    scale: float | None = None
    layer: WatermarkLayer | None = None
    pages: str | None = None  # 페이지 범위 표현식 (예: "1,3-5")


class EmbeddedFile(_Group):
    """PDF 첨부 파일"""

    path: str
    data: str  # base64
    mime_type: str | None = None
    description: str | None = None
    relationship: EmbedRelationship | None = None


class Barcode(_Group):
    """PDF 바코드 오버레이"""

    type: BarcodeType
    data: str
    x: float | None = None
    y: float | None = None
    width: float | None = None
    height: float | None = None
    anchor: BarcodeAnchor | None = None
    foreground: str | None = None
    background: str | None = None
    draw_background: bool | None = None
    pages: str | None = None


class SignatureOptions(_Group):
    """전자 서명 옵션"""

    certificate_data: str | None = None  # base64 PKCS#12
    password: str | None = None
    signer_name: str | None = None
    reason: str | None = None
    location: str | None = None
    timestamp_url: str | None = None


class EncryptionOptions(_Group):
    """암호화 옵션"""

    user_password: str | None = None
    owner_password: str | None = None
    permissions: str | None = None


class PdfOptions(_Group):
    """PDF 후처리 옵션

    하위 그룹(watermark, signature, encryption)과 리스트(embedded_files,
    barcodes)는 처음 값이 설정될 때 생성됩니다.
    """

    # 메타데이터
    title: str | None = None
    author: str | None = None
    subject: str | None = None
    keywords: str | None = None
    creator: str | None = None
    bookmarks: bool | None = None
    page_numbers: bool | None = None

    standard: PdfStandard | None = None
    watermark: WatermarkOptions | None = None
    embedded_files: list[EmbeddedFile] | None = None
    barcodes: list[Barcode] | None = None
    mode: PdfMode | None = None
    signature: SignatureOptions | None = None
    encryption: EncryptionOptions | None = None
    accessibility: PdfAccessibility | None = None
    linearize: bool | None = None


class RenderRequest(_Group):
    """단일 렌더링 요청의 누적 설정

    html과 url 중 정확히 하나만 설정되어야 합니다 (빌더가 생성 시 검증).
    """

    html: str | None = None
    url: str | None = None
    format: OutputFormat = OutputFormat.PDF
    layout: LayoutOptions = Field(default_factory=LayoutOptions)
    quantize: QuantizeOptions = Field(default_factory=QuantizeOptions)
    pdf: PdfOptions = Field(default_factory=PdfOptions)
