from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PoemLength(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


def _require_text(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be empty")
    return value


class FreeFormStyle(BaseModel):
    """최초 생성용 자유 형식 스타일 (예: "Tone: joyful. Length: short.")."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["style"] = "style"
    text: str

    @field_validator("text")
    @classmethod
    def check_text(cls, value: str) -> str:
        return _require_text(value)


class LengthDirective(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["length"] = "length"
    length: PoemLength


class ToneDirective(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["tone"] = "tone"
    tone: str = Field(description="원하는 톤 (예: optimistic, melancholic, humorous)")

    @field_validator("tone")
    @classmethod
    def check_tone(cls, value: str) -> str:
        return _require_text(value)


StyleDirective = Annotated[
    Union[FreeFormStyle, LengthDirective, ToneDirective],
    Field(discriminator="kind"),
]
