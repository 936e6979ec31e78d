from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # LLM APIs
    openai_api_key: str = ""
    anthropic_api_key: str = ""

    # Model Configuration
    # 요청당 하나의 provider만 사용 (provider 간 fallback 없음)
    poem_provider: Literal["openai", "anthropic"] = "openai"
    poem_model: str = "gpt-4o-mini"
    max_tokens: int = 1024
    # 모델 호출 타임아웃 (초), 유일한 대기 지점의 상한
    request_timeout: float = 60.0

    # Style defaults (호출자 측 정책: style 미지정 시 명시적으로 적용)
    default_tone: str = "eloquent and insightful"
    default_length: str = "medium"

    # Upload policy
    max_image_bytes: int = 5 * 1024 * 1024

    # SSL / Proxy Configuration
    # 기업 프록시 환경에서 SSL 검증 오류 발생 시 false로 설정
    ssl_verify: bool = True
    # 커스텀 CA 인증서 경로 (기업 CA 번들 경로, 비워두면 certifi 기본값 사용)
    ca_bundle_path: str = ""


@lru_cache
def get_settings() -> Settings:
    return Settings()
