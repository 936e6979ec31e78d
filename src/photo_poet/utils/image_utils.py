from __future__ import annotations

import io
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from photo_poet.config import get_settings
from photo_poet.errors import ValidationError
from photo_poet.models.image_payload import ImagePayload

# 업로드 허용 포맷 (Pillow format → mime)
ALLOWED_FORMATS = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "WEBP": "image/webp",
    "GIF": "image/gif",
}


class ImageTooLargeError(ValidationError):
    pass


class UnsupportedImageError(ValidationError):
    pass


def _sniff_mime(raw: bytes) -> str:
    """Pillow로 실제 이미지 포맷을 판별합니다 (확장자·Content-Type은 신뢰하지 않음)."""
    try:
        with Image.open(io.BytesIO(raw)) as img:
            fmt = img.format
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise UnsupportedImageError("file is not a readable image") from exc

    mime = ALLOWED_FORMATS.get(fmt or "")
    if mime is None:
        raise UnsupportedImageError(f"unsupported image format: {fmt}")
    return mime


def image_bytes_to_payload(raw: bytes, max_bytes: int | None = None) -> ImagePayload:
    """업로드된 바이트를 검증하고 data URI 페이로드로 변환합니다.

    - 빈 파일 / 용량 초과(기본 5MB) 거부
    - png / jpeg / webp / gif 외 포맷 거부
    """
    limit = max_bytes if max_bytes is not None else get_settings().max_image_bytes
    if not raw:
        raise ValidationError("image file is empty")
    if len(raw) > limit:
        raise ImageTooLargeError(
            f"image is {len(raw)} bytes; the limit is {limit} bytes"
        )
    return ImagePayload.from_bytes(raw, _sniff_mime(raw))


def read_image_file(path: str | Path, max_bytes: int | None = None) -> ImagePayload:
    """로컬 이미지 파일을 읽어 data URI 페이로드로 변환합니다."""
    path = Path(path)
    if not path.is_file():
        raise ValidationError(f"image not found: {path}")
    return image_bytes_to_payload(path.read_bytes(), max_bytes=max_bytes)


def to_anthropic_image_block(image: ImagePayload) -> dict:
    """Anthropic messages API용 이미지 블록. base64 문자열은 그대로 전달합니다."""
    return {
        "type": "image",
        "source": {
            "type": "base64",
            "media_type": image.mime_type,
            "data": image.data,
        },
    }
