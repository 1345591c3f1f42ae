"""Knowledge base endpoints.

GET  /api/knowledge/articles       -- filtered, paginated article list
GET  /api/knowledge/articles/{id}  -- one article (counts a view)
POST /api/knowledge/articles       -- author a new article
GET  /api/knowledge/categories     -- article counts per category
"""

import math
import uuid
from typing import Optional

import structlog
from fastapi import APIRouter, HTTPException, Query

from smartagri.dependencies import DbSession
from smartagri.errors import envelope
from smartagri.schemas.knowledge import ArticleCreate, ArticleOut
from smartagri.services import knowledge_store

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/knowledge", tags=["knowledge"])


@router.get("/articles")
async def list_articles(
    db: DbSession,
    category: Optional[str] = None,
    search: Optional[str] = Query(default=None, max_length=200),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    featured: bool = False,
) -> dict:
    articles, total = await knowledge_store.list_articles(
        db, category=category, search=search, featured=featured, page=page, limit=limit
    )
    return envelope(
        [ArticleOut.model_validate(a) for a in articles],
        pagination={
            "page": page,
            "limit": limit,
            "total": total,
            "pages": math.ceil(total / limit),
        },
    )


@router.get("/articles/{article_id}")
async def get_article(article_id: uuid.UUID, db: DbSession) -> dict:
    article = await knowledge_store.read_article(db, article_id)
    if article is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return envelope(ArticleOut.model_validate(article))


@router.post("/articles", status_code=201)
async def create_article(body: ArticleCreate, db: DbSession) -> dict:
    article = await knowledge_store.create_article(db, **body.model_dump())
    log.info("article_created", article_id=str(article.id), category=article.category)
    return envelope(ArticleOut.model_validate(article), message="Article created successfully")


@router.get("/categories")
async def list_categories(db: DbSession) -> dict:
    return envelope(await knowledge_store.category_counts(db))
