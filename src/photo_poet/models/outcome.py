from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class ErrorKind(str, Enum):
    VALIDATION = "validation_error"
    MODEL = "model_error"
    EMPTY_RESULT = "empty_result"


class Success(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["success"] = "success"
    poem: str = Field(min_length=1, description="생성된 시 (자유 형식, 줄바꿈 포함)")


class Failure(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["failure"] = "failure"
    reason: ErrorKind
    message: str = Field(default="", description="로그·디버깅용 내부 메시지 (사용자 노출 X)")

    @property
    def is_model_error(self) -> bool:
        # empty_result는 model_error의 하위 유형
        return self.reason in (ErrorKind.MODEL, ErrorKind.EMPTY_RESULT)


GenerationOutcome = Annotated[Union[Success, Failure], Field(discriminator="status")]
