"""
프롬프트 생성기

StyleDirective 변형마다 고정 템플릿 하나를 두고, 보간 필드는 정확히 하나입니다.
세 작업(generate / length / tone)이 같은 함수를 거치므로 템플릿 간 불일치가 생기지 않습니다.
"""
from pathlib import Path

from photo_poet.config import Settings, get_settings
from photo_poet.models.directive import (
    FreeFormStyle,
    LengthDirective,
    StyleDirective,
    ToneDirective,
)

_TEMPLATE_DIR = Path(__file__).parent.parent / "utils/prompt_templates"


def _read_template(name: str) -> str:
    return (_TEMPLATE_DIR / name).read_text(encoding="utf-8")


def format_style_preferences(tone: str, length: str) -> str:
    """UI가 최초 생성 시 보내던 자유 형식 스타일 문자열을 만듭니다."""
    return f"Tone: {tone}. Length: {length}."


def default_style_preferences(settings: Settings | None = None) -> str:
    """style 미지정 시 적용되는 기본값 ("Tone: eloquent and insightful. Length: medium.")."""
    settings = settings or get_settings()
    return format_style_preferences(settings.default_tone, settings.default_length)


def build_prompt(directive: StyleDirective) -> str:
    if isinstance(directive, FreeFormStyle):
        return _read_template("generate.txt").format(style_preferences=directive.text)
    if isinstance(directive, LengthDirective):
        return _read_template("length.txt").format(poem_length=directive.length.value)
    if isinstance(directive, ToneDirective):
        return _read_template("tone.txt").format(tone=directive.tone)
    raise TypeError(f"unknown style directive: {type(directive).__name__}")
