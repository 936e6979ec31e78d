"""업로드 검증 헬퍼 테스트"""
import io

import pytest
from PIL import Image

from photo_poet.errors import ValidationError
from photo_poet.utils.image_utils import (
    ImageTooLargeError,
    UnsupportedImageError,
    image_bytes_to_payload,
    read_image_file,
    to_anthropic_image_block,
)


def _image_bytes(fmt: str) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (8, 8), (200, 120, 40)).save(buf, format=fmt)
    return buf.getvalue()


@pytest.mark.parametrize(
    "fmt,mime",
    [("PNG", "image/png"), ("JPEG", "image/jpeg"), ("GIF", "image/gif"), ("WEBP", "image/webp")],
)
def test_allowed_formats(fmt, mime):
    raw = _image_bytes(fmt)
    payload = image_bytes_to_payload(raw)
    assert payload.mime_type == mime
    assert payload.decoded_size == len(raw)


def test_mime_is_sniffed_not_trusted(tmp_path):
    path = tmp_path / "photo.png"
    path.write_bytes(_image_bytes("JPEG"))
    assert read_image_file(path).mime_type == "image/jpeg"


def test_rejects_oversized():
    raw = _image_bytes("PNG")
    with pytest.raises(ImageTooLargeError):
        image_bytes_to_payload(raw, max_bytes=len(raw) - 1)


def test_default_limit_is_five_megabytes():
    with pytest.raises(ImageTooLargeError):
        image_bytes_to_payload(b"\x00" * (5 * 1024 * 1024 + 1))


def test_rejects_unsupported_format():
    with pytest.raises(UnsupportedImageError):
        image_bytes_to_payload(_image_bytes("BMP"))


def test_rejects_non_image():
    with pytest.raises(UnsupportedImageError):
        image_bytes_to_payload(b"definitely not an image")


def test_rejects_empty_and_missing(tmp_path):
    with pytest.raises(ValidationError):
        image_bytes_to_payload(b"")
    with pytest.raises(ValidationError):
        read_image_file(tmp_path / "missing.png")


def test_anthropic_block_slices_uri():
    payload = image_bytes_to_payload(_image_bytes("PNG"))
    block = to_anthropic_image_block(payload)
    assert block["source"]["media_type"] == "image/png"
    assert payload.uri.endswith(block["source"]["data"])
