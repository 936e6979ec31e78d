"""
시 생성 서비스

세 작업 모두 동일한 흐름을 거칩니다:
  1) 입력 검증 (ImagePayload + StyleDirective): 실패 시 모델 호출 없음
  2) build_prompt로 프롬프트 생성
  3) 백엔드 1회 호출 (재시도 없음)
  4) {"poem": ...} 응답 파싱

모든 예외는 작업 경계에서 Failure로 변환되며 호출자에게 전파되지 않습니다.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Callable

from pydantic import ValidationError as PydanticValidationError

from photo_poet.agents.backends import PoemBackend, get_backend
from photo_poet.agents.prompt_builder import build_prompt, default_style_preferences
from photo_poet.errors import EmptyResultError, ModelError, PoetError, ValidationError
from photo_poet.models.directive import (
    FreeFormStyle,
    LengthDirective,
    PoemLength,
    StyleDirective,
    ToneDirective,
)
from photo_poet.models.image_payload import ImagePayload
from photo_poet.models.outcome import ErrorKind, Failure, GenerationOutcome, Success

logger = logging.getLogger(__name__)

_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def _describe(exc: PydanticValidationError) -> str:
    err = exc.errors()[0]
    field = ".".join(str(loc) for loc in err["loc"]) or "input"
    return f"{field}: {err['msg']}"


def _validate_image(image: str | ImagePayload) -> ImagePayload:
    if isinstance(image, ImagePayload):
        return image
    try:
        return ImagePayload(uri=image)
    except PydanticValidationError as exc:
        raise ValidationError(_describe(exc)) from exc


def _validate_directive(directive_cls: type, **fields) -> StyleDirective:
    try:
        return directive_cls(**fields)
    except PydanticValidationError as exc:
        raise ValidationError(_describe(exc)) from exc


def _parse_poem(raw: str) -> str:
    """모델 원문에서 poem 필드를 추출합니다."""
    text = raw.strip()
    if not text:
        raise EmptyResultError("model returned an empty response")
    fenced = _CODE_FENCE_RE.match(text)
    if fenced:
        text = fenced.group(1)

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ModelError("model returned invalid JSON") from exc
    if not isinstance(payload, dict):
        raise ModelError("model response is not a JSON object")

    poem = payload.get("poem")
    if poem is None or (isinstance(poem, str) and not poem.strip()):
        raise EmptyResultError("model response has no poem")
    if not isinstance(poem, str):
        raise ModelError(f"poem field has unexpected type {type(poem).__name__}")
    # 시의 공백·줄바꿈은 그대로 유지
    return poem


async def _run(
    operation: str,
    validate: Callable[[], tuple[ImagePayload, StyleDirective]],
    backend: PoemBackend | None,
) -> GenerationOutcome:
    try:
        image, directive = validate()
        backend = backend or get_backend()
        prompt = build_prompt(directive)

        logger.info(
            "%s: dispatching to %s (directive=%s, mime=%s, bytes=%d)",
            operation,
            backend.name,
            directive.kind,
            image.mime_type,
            image.decoded_size,
        )
        raw = await backend.complete(prompt, image)
        poem = _parse_poem(raw)
    except PoetError as exc:
        logger.warning("%s failed [%s]: %s", operation, exc.kind.value, exc)
        return Failure(reason=exc.kind, message=str(exc))
    except Exception as exc:
        # SDK·네트워크·타임아웃 오류
        logger.exception("%s failed: model call raised", operation)
        return Failure(reason=ErrorKind.MODEL, message=f"{type(exc).__name__}: {exc}")

    logger.info("%s: poem generated (%d lines)", operation, len(poem.splitlines()))
    return Success(poem=poem)


async def generate_from_image(
    image: str | ImagePayload,
    style: str | None = None,
    *,
    backend: PoemBackend | None = None,
) -> GenerationOutcome:
    """사진에서 시를 생성합니다.

    Args:
        image: data URI 문자열 또는 ImagePayload
        style: 자유 형식 스타일 (예: "Tone: joyful. Length: short.").
            None이면 default_style_preferences()를 명시적으로 적용합니다.
            빈 문자열은 검증 실패로 처리합니다.
        backend: 모델 백엔드 (미지정 시 설정 기반 생성)

    Returns:
        Success(poem) 또는 Failure(reason)
    """

    def validate():
        payload = _validate_image(image)
        text = default_style_preferences() if style is None else style
        return payload, _validate_directive(FreeFormStyle, text=text)

    return await _run("generate_from_image", validate, backend)


async def regenerate_with_length(
    image: str | ImagePayload,
    length: str | PoemLength,
    *,
    backend: PoemBackend | None = None,
) -> GenerationOutcome:
    """같은 이미지로 지정 길이(short / medium / long)의 시를 새로 생성합니다."""

    def validate():
        payload = _validate_image(image)
        return payload, _validate_directive(LengthDirective, length=length)

    return await _run("regenerate_with_length", validate, backend)


async def regenerate_with_tone(
    image: str | ImagePayload,
    tone: str,
    *,
    backend: PoemBackend | None = None,
) -> GenerationOutcome:
    """같은 이미지로 지정 톤의 시를 새로 생성합니다. 빈 톤은 거부합니다."""

    def validate():
        payload = _validate_image(image)
        return payload, _validate_directive(ToneDirective, tone=tone)

    return await _run("regenerate_with_tone", validate, backend)
