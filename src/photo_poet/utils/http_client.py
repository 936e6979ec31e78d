"""
공유 LLM 클라이언트 팩토리

기업 프록시 환경의 SSL 인증서 오류를 처리합니다.
SSL_VERIFY=false 또는 CA_BUNDLE_PATH 설정으로 동작을 제어합니다.
"""
import ssl

import certifi
import httpx
from anthropic import AsyncAnthropic
from openai import AsyncOpenAI

from photo_poet.config import Settings, get_settings


def _build_ssl_context(settings: Settings) -> ssl.SSLContext | bool | str:
    """환경설정에 따라 SSL 컨텍스트를 반환합니다.

    Returns:
        - ssl.SSLContext: 커스텀 CA 번들 사용 시
        - str (certifi 경로): 기본 동작
        - False: SSL 검증 완전 비활성화 (비권장, 프록시 환경 임시 우회용)
    """
    if not settings.ssl_verify:
        return False

    if settings.ca_bundle_path:
        # 기업 CA 인증서를 certifi 기본 번들과 합쳐서 사용
        ctx = ssl.create_default_context(cafile=certifi.where())
        ctx.load_verify_locations(cafile=settings.ca_bundle_path)
        return ctx

    return certifi.where()


def _build_http_client(settings: Settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        verify=_build_ssl_context(settings),
        timeout=settings.request_timeout,
    )


def create_openai_client(settings: Settings | None = None) -> AsyncOpenAI:
    """SSL 설정이 적용된 AsyncOpenAI 클라이언트를 생성합니다.

    SDK 자체 재시도는 끕니다 (실패는 재시도 없이 Failure로 보고).
    """
    settings = settings or get_settings()
    return AsyncOpenAI(
        api_key=settings.openai_api_key,
        http_client=_build_http_client(settings),
        max_retries=0,
    )


def create_anthropic_client(settings: Settings | None = None) -> AsyncAnthropic:
    """SSL 설정이 적용된 AsyncAnthropic 클라이언트를 생성합니다."""
    settings = settings or get_settings()
    return AsyncAnthropic(
        api_key=settings.anthropic_api_key,
        http_client=_build_http_client(settings),
        max_retries=0,
    )
