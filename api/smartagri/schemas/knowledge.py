"""Pydantic schemas for knowledge base articles."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from smartagri.catalog import ArticleCategory


class ArticleCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: str = Field(min_length=1, max_length=300)
    category: ArticleCategory
    content: str = Field(min_length=1)
    summary: str = Field(min_length=1)
    tags: list[str] = Field(default_factory=list, max_length=20)
    author: str = Field(default="Agricultural Expert", max_length=100)
    rating: float = Field(default=0, ge=0, le=5)
    is_featured: bool = False
    language: str = Field(default="english", max_length=20)


class ArticleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    category: str
    content: str
    summary: str
    tags: list[str] = Field(default_factory=list)
    author: str
    views: int
    rating: float
    is_featured: bool
    language: str
    created_at: datetime
    updated_at: datetime
