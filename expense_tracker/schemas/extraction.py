"""Schemas for the AI expense extraction proxy."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ExtractionInput(BaseModel):
    model_config = ConfigDict(extra="allow")

    paragraph: str | None = None
    # [{"category_id": "1", "name": "Food & Dining", "is_default": true}, ...]
    categories: list[dict[str, Any]] = Field(default_factory=list)


class ExtractionRequest(BaseModel):
    """Free-text expense extraction request, forwarded as-is upstream."""

    model_config = ConfigDict(extra="allow")

    input_data: ExtractionInput = Field(default_factory=ExtractionInput)
    conversation_history: list[Any] = Field(default_factory=list)
