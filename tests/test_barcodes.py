"""
바코드 / 워터마크 페이지 범위 테스트
"""

import pytest

from forge_sdk.builder import RenderRequestBuilder
from forge_sdk.errors import ForgeContractError
from forge_sdk.types import BarcodeAnchor, BarcodeType

BARCODE_KEYS = (
    "x",
    "y",
    "width",
    "height",
    "anchor",
    "foreground",
    "background",
    "draw_background",
    "pages",
)


class TestBarcodes:
    """PDF 바코드 테스트"""

    def test_single_barcode_minimal(self, html_builder: RenderRequestBuilder):
        """최소 바코드는 type/data만 포함"""
        payload = html_builder.pdf_barcode(
            BarcodeType.QR, "https://example.com"
        ).build_payload()

        barcodes = payload["pdf"]["barcodes"]
        assert barcodes == [{"type": "qr", "data": "https://example.com"}]
        for key in BARCODE_KEYS:
            assert key not in barcodes[0]

    def test_barcode_with_all_options(self, html_builder: RenderRequestBuilder):
        """모든 옵션 지정"""
        payload = html_builder.pdf_barcode(
            BarcodeType.CODE128,
            "ABC-123",
            x=10.5,
            y=20.0,
            width=100.0,
            height=50.0,
            anchor=BarcodeAnchor.TOP_RIGHT,
            foreground="#000000",
            background="#FFFFFF",
            draw_background=True,
            pages="1,3-5",
        ).build_payload()

        bc = payload["pdf"]["barcodes"][0]
        assert bc == {
            "type": "code128",
            "data": "ABC-123",
            "x": 10.5,
            "y": 20.0,
            "width": 100.0,
            "height": 50.0,
            "anchor": "top-right",
            "foreground": "#000000",
            "background": "#FFFFFF",
            "draw_background": True,
            "pages": "1,3-5",
        }

    def test_multiple_barcodes_keep_order(self, html_builder: RenderRequestBuilder):
        """여러 바코드는 추가 순서 유지"""
        payload = (
            html_builder.pdf_barcode(BarcodeType.QR, "first")
            .pdf_barcode(BarcodeType.EAN13, "5901234123457")
            .pdf_barcode(BarcodeType.CODE39, "HELLO")
            .build_payload()
        )

        barcodes = payload["pdf"]["barcodes"]
        assert len(barcodes) == 3
        assert [bc["type"] for bc in barcodes] == ["qr", "ean13", "code39"]
        assert [bc["data"] for bc in barcodes] == ["first", "5901234123457", "HELLO"]

    @pytest.mark.parametrize(
        "anchor, expected",
        [
            (BarcodeAnchor.TOP_LEFT, "top-left"),
            (BarcodeAnchor.TOP_RIGHT, "top-right"),
            (BarcodeAnchor.BOTTOM_LEFT, "bottom-left"),
            (BarcodeAnchor.BOTTOM_RIGHT, "bottom-right"),
        ],
    )
    def test_anchor_tokens(self, anchor: BarcodeAnchor, expected: str):
        payload = (
            RenderRequestBuilder(html="<h1>Test</h1>")
            .pdf_barcode(BarcodeType.QR, "test", anchor=anchor)
            .build_payload()
        )

        assert payload["pdf"]["barcodes"][0]["anchor"] == expected

    @pytest.mark.parametrize(
        "barcode_type, expected",
        [
            (BarcodeType.QR, "qr"),
            (BarcodeType.CODE128, "code128"),
            (BarcodeType.EAN13, "ean13"),
            (BarcodeType.UPC_A, "upca"),
            (BarcodeType.CODE39, "code39"),
        ],
    )
    def test_type_tokens(self, barcode_type: BarcodeType, expected: str):
        payload = (
            RenderRequestBuilder(html="<h1>Test</h1>")
            .pdf_barcode(barcode_type, "data")
            .build_payload()
        )

        assert payload["pdf"]["barcodes"][0]["type"] == expected

    def test_draw_background_false_is_kept(self, html_builder: RenderRequestBuilder):
        """False도 설정된 값으로 출력"""
        payload = html_builder.pdf_barcode(
            BarcodeType.QR, "test", draw_background=False
        ).build_payload()

        assert payload["pdf"]["barcodes"][0]["draw_background"] is False

    def test_unknown_barcode_type(self, html_builder: RenderRequestBuilder):
        with pytest.raises(ForgeContractError):
            html_builder.pdf_barcode("datamatrix", "x")


class TestWatermarkPages:
    """워터마크 페이지 범위 테스트"""

    def test_watermark_with_pages(self, html_builder: RenderRequestBuilder):
        payload = (
            html_builder.pdf_watermark_text("DRAFT")
            .pdf_watermark_pages("1,3-5")
            .build_payload()
        )

        assert payload["pdf"]["watermark"] == {"text": "DRAFT", "pages": "1,3-5"}

    def test_pages_only_creates_watermark(self, html_builder: RenderRequestBuilder):
        """pages만 설정해도 watermark 객체 생성"""
        payload = html_builder.pdf_watermark_pages("2-4").build_payload()

        assert payload["pdf"]["watermark"] == {"pages": "2-4"}

    def test_barcode_and_watermark_coexist(self, html_builder: RenderRequestBuilder):
        payload = (
            html_builder.pdf_watermark_text("CONFIDENTIAL")
            .pdf_watermark_pages("1")
            .pdf_barcode(BarcodeType.QR, "https://example.com", pages="2-3")
            .build_payload()
        )

        pdf = payload["pdf"]
        assert pdf["watermark"] == {"text": "CONFIDENTIAL", "pages": "1"}
        assert pdf["barcodes"] == [
            {"type": "qr", "data": "https://example.com", "pages": "2-3"}
        ]
