"""
사용법:
  uv run python -m photo_poet generate ./example/img/beach.jpg --tone joyful --length short
  uv run python -m photo_poet length ./example/img/beach.jpg long
  uv run python -m photo_poet tone ./example/img/beach.jpg melancholic

사진 한 장으로 시를 생성·재생성하는 CLI 진입점.
"""
import argparse
import asyncio
import logging
import sys

from photo_poet.agents.poet import (
    generate_from_image,
    regenerate_with_length,
    regenerate_with_tone,
)
from photo_poet.agents.prompt_builder import format_style_preferences
from photo_poet.config import get_settings
from photo_poet.errors import ValidationError
from photo_poet.models.directive import PoemLength
from photo_poet.models.outcome import Success
from photo_poet.utils.image_utils import read_image_file

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="photo_poet", description="Turn a photo into a poem.")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="generate a poem from an image")
    gen.add_argument("image")
    gen.add_argument("--tone", default="")
    gen.add_argument("--length", default="")
    gen.add_argument("--style", help="free-form style text (overrides --tone/--length)")

    length = sub.add_parser("length", help="regenerate with a length")
    length.add_argument("image")
    length.add_argument("length", choices=[m.value for m in PoemLength])

    tone = sub.add_parser("tone", help="regenerate with a tone")
    tone.add_argument("image")
    tone.add_argument("tone")
    return parser


async def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        image = read_image_file(args.image)
    except ValidationError as exc:
        print(f"✗ {exc}", file=sys.stderr)
        return 1

    if args.command == "generate":
        style = args.style
        if style is None and (args.tone or args.length):
            # UI와 동일: 비어 있는 항목만 기본값으로 채움
            settings = get_settings()
            style = format_style_preferences(
                args.tone or settings.default_tone,
                args.length or settings.default_length,
            )
        outcome = await generate_from_image(image, style)
    elif args.command == "length":
        outcome = await regenerate_with_length(image, args.length)
    else:
        outcome = await regenerate_with_tone(image, args.tone)

    if isinstance(outcome, Success):
        print(f"\n{outcome.poem}\n")
        return 0

    print(f"✗ 시 생성 실패 ({outcome.reason.value}): {outcome.message}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
