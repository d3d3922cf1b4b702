from __future__ import annotations

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ProbeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("apiKey", "credential", "api_key"),
    )
    model_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("modelName", "modelIdentifier", "model_name"),
    )


class ProbeResponse(BaseModel):
    success: bool = True
    message: str = "Connection successful!"
    response: str | None = None


class ProbeError(BaseModel):
    error: str


class ProbeFailure(str, Enum):
    """Human-readable categories for a failed probe."""

    INVALID_CREDENTIAL = "invalid credential"
    MODEL_NOT_FOUND = "model not found"
    RATE_LIMITED = "rate limit exceeded"
    CONNECTION_FAILED = "connection failed"

    @classmethod
    def from_status(cls, status_code: int) -> "ProbeFailure":
        return {
            401: cls.INVALID_CREDENTIAL,
            404: cls.MODEL_NOT_FOUND,
            429: cls.RATE_LIMITED,
        }.get(status_code, cls.CONNECTION_FAILED)
