"""
모델 백엔드

각 백엔드는 프롬프트 + 이미지로 모델을 한 번 호출하고 원문 텍스트를 반환합니다.
응답 파싱과 오류 분류는 agents.poet이 담당합니다.
"""
from __future__ import annotations

import logging
from typing import Protocol

from anthropic import AsyncAnthropic
from openai import AsyncOpenAI

from photo_poet.config import Settings, get_settings
from photo_poet.errors import EmptyResultError, ModelError
from photo_poet.models.image_payload import ImagePayload
from photo_poet.utils.http_client import create_anthropic_client, create_openai_client
from photo_poet.utils.image_utils import to_anthropic_image_block

logger = logging.getLogger(__name__)


class PoemBackend(Protocol):
    name: str

    async def complete(self, prompt: str, image: ImagePayload) -> str: ...

    async def aclose(self) -> None: ...


class OpenAIPoemBackend:
    name = "openai"

    def __init__(self, client: AsyncOpenAI, model: str, max_tokens: int = 1024):
        self._client = client
        self.model = model
        self.max_tokens = max_tokens

    async def complete(self, prompt: str, image: ImagePayload) -> str:
        response = await self._client.chat.completions.create(
            model=self.model,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image_url",
                            # data URI 원본을 그대로 전달
                            "image_url": {"url": image.uri},
                        },
                        {"type": "text", "text": prompt},
                    ],
                }
            ],
            response_format={"type": "json_object"},
            max_tokens=self.max_tokens,
        )
        if not response.choices:
            raise ModelError("model returned no choices")
        content = response.choices[0].message.content
        if content is None:
            # 거절·콘텐츠 필터 응답
            raise EmptyResultError("model returned no content")
        return content

    async def aclose(self) -> None:
        await self._client.close()


class AnthropicPoemBackend:
    name = "anthropic"

    def __init__(self, client: AsyncAnthropic, model: str, max_tokens: int = 1024):
        self._client = client
        self.model = model
        self.max_tokens = max_tokens

    async def complete(self, prompt: str, image: ImagePayload) -> str:
        response = await self._client.messages.create(
            model=self.model,
            messages=[
                {
                    "role": "user",
                    "content": [
                        to_anthropic_image_block(image),
                        {"type": "text", "text": prompt},
                    ],
                }
            ],
            max_tokens=self.max_tokens,
        )
        texts = [block.text for block in response.content if block.type == "text"]
        if not texts:
            raise EmptyResultError("model returned no text content")
        return "".join(texts)

    async def aclose(self) -> None:
        await self._client.close()


def get_backend(settings: Settings | None = None) -> PoemBackend:
    """설정된 provider의 백엔드를 생성합니다. provider 간 fallback은 없습니다."""
    settings = settings or get_settings()
    if settings.poem_provider == "anthropic":
        backend: PoemBackend = AnthropicPoemBackend(
            create_anthropic_client(settings), settings.poem_model, settings.max_tokens
        )
    else:
        backend = OpenAIPoemBackend(
            create_openai_client(settings), settings.poem_model, settings.max_tokens
        )
    logger.debug("Using %s backend (model=%s)", backend.name, settings.poem_model)
    return backend


class LazyPoemBackend:
    """첫 호출 시 백엔드를 생성하고 이후 재사용합니다 (서버 프로세스당 클라이언트 1개).

    생성 실패는 complete() 안에서 발생하므로 작업 경계에서 Failure로 변환되고,
    다음 요청에서 다시 생성을 시도합니다.
    """

    def __init__(self, settings: Settings | None = None):
        self._settings = settings
        self._backend: PoemBackend | None = None

    @property
    def name(self) -> str:
        if self._backend is not None:
            return self._backend.name
        return (self._settings or get_settings()).poem_provider

    async def complete(self, prompt: str, image: ImagePayload) -> str:
        if self._backend is None:
            self._backend = get_backend(self._settings)
        return await self._backend.complete(prompt, image)

    async def aclose(self) -> None:
        if self._backend is not None:
            await self._backend.aclose()
            self._backend = None
