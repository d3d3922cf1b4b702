from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """Body of ``POST /api/chat``. Credentials travel with every request."""

    model_config = ConfigDict(populate_by_name=True)

    messages: list[ChatMessage] = Field(default_factory=list)
    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("apiKey", "credential", "api_key"),
    )
    model_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("modelName", "modelIdentifier", "model_name"),
    )
