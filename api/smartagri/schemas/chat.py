"""Pydantic schemas for chat endpoints."""

import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from smartagri.catalog import ChatCategory, ChatRole


class ChatMessageCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    session_id: str = Field(min_length=1, max_length=100)
    message: str = Field(min_length=1)
    response: Optional[str] = None
    # Older clients send the role as "type"
    role: ChatRole = Field(validation_alias=AliasChoices("role", "type"))
    category: Optional[ChatCategory] = None
    confidence: Optional[float] = Field(default=None, ge=0, le=100)
    user_id: Optional[uuid.UUID] = None
    metadata: Optional[dict[str, Any]] = None


class ChatMessageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    session_id: str
    user_id: Optional[uuid.UUID] = None
    message: str
    response: Optional[str] = None
    role: str
    category: Optional[str] = None
    confidence: float = 0.0
    metadata: Optional[dict[str, Any]] = Field(
        default=None, validation_alias=AliasChoices("metadata_json", "metadata")
    )
    created_at: datetime


class AnalyzeRequest(BaseModel):
    message: str = Field(min_length=1, max_length=2000)
