"""모델 백엔드 테스트 (실제 API 호출 없이 요청 구조 검증)"""
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from photo_poet.agents.backends import (
    AnthropicPoemBackend,
    LazyPoemBackend,
    OpenAIPoemBackend,
    get_backend,
)
from photo_poet.config import Settings
from photo_poet.errors import EmptyResultError, ModelError
from photo_poet.models.image_payload import ImagePayload

IMAGE = ImagePayload(uri="data:image/png;base64,AAAA")


def _openai_client(content):
    client = MagicMock()
    response = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))]
    )
    client.chat.completions.create = AsyncMock(return_value=response)
    return client


@pytest.mark.asyncio
async def test_openai_backend_sends_data_uri_verbatim():
    client = _openai_client('{"poem": "hi"}')
    backend = OpenAIPoemBackend(client, model="gpt-4o-mini", max_tokens=256)

    raw = await backend.complete("write a poem", IMAGE)

    assert raw == '{"poem": "hi"}'
    kwargs = client.chat.completions.create.await_args.kwargs
    assert kwargs["model"] == "gpt-4o-mini"
    assert kwargs["max_tokens"] == 256
    assert kwargs["response_format"] == {"type": "json_object"}
    content = kwargs["messages"][0]["content"]
    assert content[0] == {"type": "image_url", "image_url": {"url": IMAGE.uri}}
    assert content[1] == {"type": "text", "text": "write a poem"}


@pytest.mark.asyncio
async def test_openai_backend_none_content():
    """거절·콘텐츠 필터로 content가 None이면 빈 결과로 분류합니다."""
    backend = OpenAIPoemBackend(_openai_client(None), model="gpt-4o-mini")
    with pytest.raises(EmptyResultError):
        await backend.complete("p", IMAGE)


@pytest.mark.asyncio
async def test_openai_backend_no_choices():
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=SimpleNamespace(choices=[]))
    backend = OpenAIPoemBackend(client, model="gpt-4o-mini")

    with pytest.raises(ModelError):
        await backend.complete("p", IMAGE)


@pytest.mark.asyncio
async def test_anthropic_backend_image_block():
    client = MagicMock()
    client.messages.create = AsyncMock(
        return_value=SimpleNamespace(content=[SimpleNamespace(type="text", text='{"poem": "hi"}')])
    )
    backend = AnthropicPoemBackend(client, model="claude-haiku-4-5", max_tokens=512)

    raw = await backend.complete("write a poem", IMAGE)

    assert raw == '{"poem": "hi"}'
    content = client.messages.create.await_args.kwargs["messages"][0]["content"]
    assert content[0] == {
        "type": "image",
        "source": {"type": "base64", "media_type": "image/png", "data": "AAAA"},
    }
    assert content[1]["text"] == "write a poem"


@pytest.mark.asyncio
async def test_anthropic_backend_without_text():
    client = MagicMock()
    client.messages.create = AsyncMock(return_value=SimpleNamespace(content=[]))
    backend = AnthropicPoemBackend(client, model="claude-haiku-4-5")

    with pytest.raises(EmptyResultError):
        await backend.complete("p", IMAGE)


def test_get_backend_by_provider():
    with (
        patch("photo_poet.agents.backends.create_openai_client", return_value=MagicMock()),
        patch("photo_poet.agents.backends.create_anthropic_client", return_value=MagicMock()),
    ):
        openai_backend = get_backend(Settings(_env_file=None, poem_provider="openai"))
        anthropic_backend = get_backend(
            Settings(_env_file=None, poem_provider="anthropic", poem_model="claude-haiku-4-5")
        )

    assert isinstance(openai_backend, OpenAIPoemBackend)
    assert isinstance(anthropic_backend, AnthropicPoemBackend)
    assert anthropic_backend.model == "claude-haiku-4-5"


@pytest.mark.asyncio
async def test_openai_backend_aclose_closes_client():
    client = _openai_client('{"poem": "hi"}')
    client.close = AsyncMock()
    await OpenAIPoemBackend(client, model="gpt-4o-mini").aclose()
    client.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_lazy_backend_builds_once_and_closes():
    inner = MagicMock()
    inner.name = "openai"
    inner.complete = AsyncMock(return_value='{"poem": "hi"}')
    inner.aclose = AsyncMock()
    lazy = LazyPoemBackend(Settings(_env_file=None))

    with patch("photo_poet.agents.backends.get_backend", return_value=inner) as factory:
        assert lazy.name == "openai"
        await lazy.complete("p", IMAGE)
        await lazy.complete("p", IMAGE)
        await lazy.aclose()

    factory.assert_called_once()
    assert inner.complete.await_count == 2
    inner.aclose.assert_awaited_once()


@pytest.mark.asyncio
async def test_lazy_backend_construction_error_raised_from_complete():
    lazy = LazyPoemBackend(Settings(_env_file=None))
    with patch("photo_poet.agents.backends.get_backend", side_effect=RuntimeError("Missing credentials")):
        with pytest.raises(RuntimeError):
            await lazy.complete("p", IMAGE)
    # 생성 전이므로 닫을 클라이언트 없음
    await lazy.aclose()
