import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

DEFAULT_UPSTREAM_URL = "https://api.anthropic.com/v1/messages"


class Settings(BaseSettings):
    anthropic_api_key: Optional[str] = Field(None, alias="ANTHROPIC_API_KEY")
    upstream_url: str = Field(DEFAULT_UPSTREAM_URL, alias="LEARNHUB_UPSTREAM_URL")
    anthropic_version: str = Field("2023-06-01", alias="LEARNHUB_ANTHROPIC_VERSION")
    default_model: str = Field("claude-3-5-sonnet-20241022", alias="LEARNHUB_MODEL")
    default_max_tokens: int = Field(4000, alias="LEARNHUB_MAX_TOKENS", ge=1)
    chat_max_tokens: int = Field(1024, alias="LEARNHUB_CHAT_MAX_TOKENS", ge=1)
    lesson_api_url: Optional[str] = Field(None, alias="LEARNHUB_LESSON_API_URL")
    lesson_api_via_proxy: bool = Field(False, alias="LEARNHUB_LESSON_API_VIA_PROXY")
    request_timeout_seconds: float = Field(60.0, alias="LEARNHUB_REQUEST_TIMEOUT_SECONDS", gt=0)
    storage_path: Optional[Path] = Field(None, alias="LEARNHUB_STORAGE_PATH")

    class Config:
        env_file = os.getenv("ENV_FILE", ".env")
        env_file_encoding = "utf-8"
        case_sensitive = True

    @property
    def resolved_lesson_api_url(self) -> str:
        return self.lesson_api_url or self.upstream_url


@lru_cache
def get_settings() -> Settings:
    try:
        return Settings()  # type: ignore[arg-type]
    except ValidationError as exc:
        raise RuntimeError(f"Invalid learnhub configuration: {exc}") from exc
