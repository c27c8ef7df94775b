"""Pydantic request / response DTOs for the API boundary."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from thaina_juridico.domain.entities import ChatMessage, ImportOutcome, Role


class ChatMessageIn(BaseModel):
    """One conversation turn as sent by the frontend (extra keys are ignored)."""

    role: Literal["system", "user", "assistant"]
    content: str

    def to_entity(self) -> ChatMessage:
        return ChatMessage(role=Role(self.role), content=self.content)


class ChatRequest(BaseModel):
    """Request body for ``POST /chat``."""

    model_config = ConfigDict(populate_by_name=True)

    messages: list[ChatMessageIn]
    # Anything other than "PJ" falls back to PF, so accept any JSON value here.
    mode: Any = None
    stream: bool = True
    user_id: str | None = Field(default=None, alias="userId")


class ExtractRequest(BaseModel):
    """Request body for ``POST /extract-pdf``."""

    model_config = ConfigDict(populate_by_name=True)

    document_id: str | None = Field(default=None, alias="documentId")
    file_path: str | None = Field(default=None, alias="filePath")


class ExtractResponse(BaseModel):
    """Successful response from ``POST /extract-pdf``."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    text_length: int = Field(alias="textLength")
    preview: str


class ImportRequest(BaseModel):
    """Request body for ``POST /import-vademecum``."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str | None = Field(default=None, alias="userId")


class ImportResultItem(BaseModel):
    name: str
    status: str
    chars: int | None = None
    error: str | None = None

    @classmethod
    def from_outcome(cls, outcome: ImportOutcome) -> ImportResultItem:
        return cls(
            name=outcome.name,
            status=outcome.status.value,
            chars=outcome.chars,
            error=outcome.error,
        )


class ImportResponse(BaseModel):
    """Successful response from ``POST /import-vademecum``."""

    success: bool = True
    results: list[ImportResultItem]


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    error: str
