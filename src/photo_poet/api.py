"""
HTTP 엔드포인트

  uv run uvicorn photo_poet.api:app --reload

시 생성 엔드포인트는 항상 200으로 응답하며 결과는 success 플래그로 구분합니다.
모델 실패 시 사용자에게는 일반 메시지만 노출하고 내부 사유는 로그에 남깁니다.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, File, HTTPException, Request, UploadFile
from pydantic import BaseModel, ConfigDict, Field

from photo_poet.agents.backends import LazyPoemBackend, PoemBackend
from photo_poet.agents.poet import (
    generate_from_image,
    regenerate_with_length,
    regenerate_with_tone,
)
from photo_poet.config import get_settings
from photo_poet.errors import ValidationError
from photo_poet.models.outcome import ErrorKind, GenerationOutcome, Success
from photo_poet.utils.image_utils import (
    ImageTooLargeError,
    UnsupportedImageError,
    image_bytes_to_payload,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # 프로세스당 백엔드(=HTTP 커넥션 풀) 1개, 실제 생성은 첫 요청 시
    app.state.backend = LazyPoemBackend()
    yield
    await app.state.backend.aclose()


app = FastAPI(title="Photo Poet", lifespan=lifespan)


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class GeneratePoemRequest(_CamelModel):
    image: str = Field(description="data:<mime-type>;base64,<data>")
    style_preferences: str | None = Field(default=None, alias="stylePreferences")


class RegenerateLengthRequest(_CamelModel):
    image: str
    # enum 검증은 서비스가 수행 (잘못된 값도 Failure 응답으로 반환)
    poem_length: str | None = Field(default=None, alias="poemLength")


class RegenerateToneRequest(_CamelModel):
    image: str
    tone: str = ""


class PoemResponse(BaseModel):
    success: bool
    poem: str | None = None
    reason: ErrorKind | None = None
    error: str | None = None


class ImageUploadResponse(BaseModel):
    image: str
    mime_type: str
    size: int


def _to_response(outcome: GenerationOutcome, error_message: str) -> PoemResponse:
    if isinstance(outcome, Success):
        return PoemResponse(success=True, poem=outcome.poem)
    if outcome.reason is ErrorKind.VALIDATION:
        # 입력 오류는 사용자가 고칠 수 있으므로 사유를 노출
        return PoemResponse(success=False, reason=outcome.reason, error=outcome.message)
    return PoemResponse(success=False, reason=outcome.reason, error=error_message)


def poem_backend(request: Request) -> PoemBackend | None:
    # None이면 서비스가 작업 경계 안에서 백엔드를 생성
    return getattr(request.app.state, "backend", None)


@app.get("/health")
def health():
    return {"ok": True}


@app.post("/api/images", response_model=ImageUploadResponse)
async def upload_image(file: UploadFile = File(...)):
    limit = get_settings().max_image_bytes
    # 제한 + 1 바이트까지만 읽어 초과 여부 판별
    raw = await file.read(limit + 1)
    try:
        payload = image_bytes_to_payload(raw, max_bytes=limit)
    except ImageTooLargeError as exc:
        raise HTTPException(status_code=413, detail=str(exc)) from exc
    except UnsupportedImageError as exc:
        raise HTTPException(status_code=415, detail=str(exc)) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    logger.info("Image uploaded: %s (%s, %d bytes)", file.filename, payload.mime_type, len(raw))
    return ImageUploadResponse(image=payload.uri, mime_type=payload.mime_type, size=len(raw))


@app.post("/api/poems", response_model=PoemResponse)
async def create_poem(
    req: GeneratePoemRequest,
    backend: PoemBackend | None = Depends(poem_backend),
):
    outcome = await generate_from_image(req.image, req.style_preferences, backend=backend)
    return _to_response(outcome, "Failed to generate poem.")


@app.post("/api/poems/length", response_model=PoemResponse)
async def regenerate_poem_length(
    req: RegenerateLengthRequest,
    backend: PoemBackend | None = Depends(poem_backend),
):
    outcome = await regenerate_with_length(req.image, req.poem_length, backend=backend)
    return _to_response(outcome, "Failed to regenerate poem with length.")


@app.post("/api/poems/tone", response_model=PoemResponse)
async def regenerate_poem_tone(
    req: RegenerateToneRequest,
    backend: PoemBackend | None = Depends(poem_backend),
):
    outcome = await regenerate_with_tone(req.image, req.tone, backend=backend)
    return _to_response(outcome, "Failed to regenerate poem with tone.")
