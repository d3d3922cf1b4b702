from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="BigModel Chat Relay", alias="APP_NAME")
    environment: Literal["local", "dev", "staging", "prod"] = Field(
        default="local", alias="ENVIRONMENT"
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    bigmodel_api_url: str = Field(
        default="https://open.bigmodel.cn/api/paas/v4/chat/completions",
        alias="BIGMODEL_API_URL",
    )
    default_model: str = Field(default="glm-4-plus", alias="DEFAULT_MODEL")

    chat_temperature: float = Field(default=0.7, alias="CHAT_TEMPERATURE")
    chat_max_tokens: int = Field(default=2000, alias="CHAT_MAX_TOKENS")

    probe_prompt: str = Field(
        default="Hello! Say 'API test successful' to confirm.",
        alias="PROBE_PROMPT",
    )
    probe_max_tokens: int = Field(default=50, alias="PROBE_MAX_TOKENS")

    # None disables the timeout entirely.
    upstream_timeout: float | None = Field(default=None, alias="UPSTREAM_TIMEOUT")


@lru_cache
def get_settings() -> Settings:
    return Settings()
