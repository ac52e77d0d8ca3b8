"""
Forge 렌더링 CLI

사용법:
    # HTML 파일을 PDF로 렌더링
    forge-render render --html-file invoice.html -o invoice.pdf --paper a4

    # URL을 4색 e-ink PNG로 렌더링
    forge-render render --url https://example.com --format png \\
        --colors 4 --palette eink --dither atkinson -o page.png

    # 와이어 JSON만 출력 (전송 안함)
    forge-render render --html-file invoice.html --dry-run

    # 서버 헬스 체크
    forge-render health --base-url http://localhost:8080
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from .builder import RenderRequestBuilder
from .client import ForgeClient
from .config import ConfigurationError, ForgeConfig
from .errors import ForgeError
from .types import DitherMethod, Flow, Orientation, OutputFormat, Palette


def _choices(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


def build_parser() -> argparse.ArgumentParser:
    """CLI 인자 파서 생성"""
    parser = argparse.ArgumentParser(
        prog="forge-render",
        description="Forge 렌더링 서버 CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    # 연결 설정 (미지정 시 설정 파일 / FORGE_URL, FORGE_TIMEOUT 환경변수)
    parser.add_argument("--base-url", type=str, help="Forge 서버 URL")
    parser.add_argument("--timeout", type=float, help="요청 타임아웃 (초)")
    parser.add_argument("--config", type=str, help="YAML 설정 파일 경로")
    parser.add_argument(
        "--env-file", type=str, default=".env", help=".env 파일 경로 (기본: .env)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    render = subparsers.add_parser("render", help="문서 렌더링")
    source = render.add_mutually_exclusive_group(required=True)
    source.add_argument("--html-file", type=str, help="렌더링할 HTML 파일")
    source.add_argument("--url", type=str, help="렌더링할 URL")

    render.add_argument(
        "--format",
        type=str,
        default=OutputFormat.PDF.value,
        choices=_choices(OutputFormat),
        help="출력 포맷 (기본: pdf)",
    )
    render.add_argument("--output", "-o", type=str, help="출력 파일 경로")
    render.add_argument("--width", type=int, help="뷰포트 너비 (px)")
    render.add_argument("--height", type=int, help="뷰포트 높이 (px)")
    render.add_argument("--paper", type=str, help="용지 크기 (예: a4, letter)")
    render.add_argument("--orientation", type=str, choices=_choices(Orientation))
    render.add_argument("--margins", type=str, help='여백 프리셋 또는 "T,R,B,L" (mm)')
    render.add_argument("--flow", type=str, choices=_choices(Flow))
    render.add_argument("--density", type=float, help="출력 DPI")
    render.add_argument("--background", type=str, help="배경색")
    render.add_argument("--load-timeout", type=int, help="서버 측 페이지 로드 타임아웃 (초)")

    # 색상 양자화
    render.add_argument("--colors", type=int, help="색상 수 (2-256)")
    palette = render.add_mutually_exclusive_group()
    palette.add_argument("--palette", type=str, choices=_choices(Palette))
    palette.add_argument(
        "--custom-palette", type=str, help='쉼표로 구분된 hex 색상 (예: "#000000,#ffffff")'
    )
    render.add_argument("--dither", type=str, choices=_choices(DitherMethod))

    # PDF 메타데이터
    render.add_argument("--title", type=str, help="PDF 제목")
    render.add_argument("--author", type=str, help="PDF 작성자")

    render.add_argument(
        "--dry-run",
        action="store_true",
        help="와이어 JSON만 출력하고 전송하지 않음",
    )

    subparsers.add_parser("health", help="서버 헬스 체크")

    return parser


def load_config(args: argparse.Namespace) -> ForgeConfig:
    """설정 로드 (CLI 인자 > 설정 파일 > 환경변수)"""
    if args.config:
        config = ForgeConfig.from_yaml(args.config)
    else:
        env_file = args.env_file if Path(args.env_file).exists() else None
        config = ForgeConfig.from_env(env_file)

    if args.base_url:
        config.base_url = args.base_url
    if args.timeout is not None:
        config.timeout = args.timeout

    config.validate(strict=True)
    return config


def apply_options(
    builder: RenderRequestBuilder, args: argparse.Namespace
) -> RenderRequestBuilder:
    """CLI 인자를 빌더에 적용 (지정된 옵션만)"""
    builder.format(args.format)

    setters = [
        (args.width, builder.width),
        (args.height, builder.height),
        (args.paper, builder.paper),
        (args.orientation, builder.orientation),
        (args.margins, builder.margins),
        (args.flow, builder.flow),
        (args.density, builder.density),
        (args.background, builder.background),
        (args.load_timeout, builder.timeout),
        (args.colors, builder.colors),
        (args.palette, builder.palette_preset),
        (args.dither, builder.dither),
        (args.title, builder.pdf_title),
        (args.author, builder.pdf_author),
    ]
    for value, setter in setters:
        if value is not None:
            setter(value)

    if args.custom_palette:
        builder.custom_palette(
            [c.strip() for c in args.custom_palette.split(",") if c.strip()]
        )

    return builder


def _new_builder(
    args: argparse.Namespace, client: ForgeClient | None = None
) -> RenderRequestBuilder:
    if args.html_file:
        html = Path(args.html_file).read_text(encoding="utf-8")
        return RenderRequestBuilder(html=html, client=client)
    return RenderRequestBuilder(url=args.url, client=client)


async def run_render(args: argparse.Namespace, config: ForgeConfig) -> int:
    """render 명령 실행

    Returns:
        int: 종료 코드
    """
    if args.dry_run:
        payload = apply_options(_new_builder(args), args).build_payload()
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0

    output = Path(args.output or f"output.{args.format}")

    async with ForgeClient.from_config(config) as client:
        builder = apply_options(_new_builder(args, client), args)
        print(f"[Forge] 렌더링 요청: {config.base_url} ({args.format})")
        try:
            data = await builder.send()
        except ForgeError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    output.write_bytes(data)
    print(f"[Forge] 저장 완료: {output} ({len(data):,} bytes)")
    return 0


async def run_health(config: ForgeConfig) -> int:
    """health 명령 실행"""
    async with ForgeClient.from_config(config) as client:
        healthy = await client.health_check()

    if healthy:
        print(f"[Forge] 서버 정상: {config.base_url}")
        return 0
    print(f"Error: Forge 서버 응답 없음: {config.base_url}", file=sys.stderr)
    return 1


def main(argv: list[str] | None = None) -> int:
    """CLI 진입점"""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.command == "health":
        return asyncio.run(run_health(config))
    return asyncio.run(run_render(args, config))


if __name__ == "__main__":
    sys.exit(main())
