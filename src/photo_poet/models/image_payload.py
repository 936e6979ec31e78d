import base64
import binascii
import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

_DATA_URI_RE = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.+)$", re.DOTALL
)


class ImagePayload(BaseModel):
    """`data:<mime-type>;base64,<payload>` 형식의 이미지.

    원본 문자열을 그대로 보관하며 모델에도 그대로 전달합니다 (재인코딩 없음).
    mime 화이트리스트·용량 제한은 호출자 정책이므로 여기서는 형식만 검증합니다.
    """

    model_config = ConfigDict(frozen=True)

    uri: str = Field(description="data URI 원본 문자열")

    @field_validator("uri")
    @classmethod
    def check_data_uri(cls, value: str) -> str:
        match = _DATA_URI_RE.match(value)
        if match is None:
            raise ValueError("image must be a data URI: data:<mime-type>;base64,<data>")
        try:
            base64.b64decode(match.group("data"), validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("image payload is not valid base64") from exc
        return value

    @classmethod
    def from_bytes(cls, raw: bytes, mime_type: str) -> "ImagePayload":
        b64 = base64.b64encode(raw).decode("utf-8")
        return cls(uri=f"data:{mime_type};base64,{b64}")

    @property
    def mime_type(self) -> str:
        return self.uri[len("data:"):self.uri.index(";")]

    @property
    def data(self) -> str:
        """base64 부분만 반환합니다."""
        return self.uri.split(",", 1)[1]

    @property
    def decoded_size(self) -> int:
        return len(base64.b64decode(self.data))
