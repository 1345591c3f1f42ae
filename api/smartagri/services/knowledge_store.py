"""Knowledge base article queries."""

import uuid
from typing import Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from smartagri.models.knowledge_article import KnowledgeArticle


async def list_articles(
    db: AsyncSession,
    category: Optional[str] = None,
    search: Optional[str] = None,
    featured: bool = False,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[KnowledgeArticle], int]:
    """Return one page of articles and the total number of matches."""
    filters = []
    if category and category != "all":
        filters.append(KnowledgeArticle.category == category)
    if featured:
        filters.append(KnowledgeArticle.is_featured.is_(True))
    if search:
        pattern = f"%{search}%"
        filters.append(
            or_(
                KnowledgeArticle.title.ilike(pattern),
                KnowledgeArticle.summary.ilike(pattern),
                KnowledgeArticle.content.ilike(pattern),
            )
        )

    stmt = (
        select(KnowledgeArticle)
        .where(*filters)
        .order_by(KnowledgeArticle.views.desc(), KnowledgeArticle.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    result = await db.execute(stmt)
    articles = list(result.scalars().all())

    total = (
        await db.execute(select(func.count(KnowledgeArticle.id)).where(*filters))
    ).scalar_one()
    return articles, total


async def read_article(db: AsyncSession, article_id: uuid.UUID) -> Optional[KnowledgeArticle]:
    """Fetch an article and count the view in a single UPDATE ... RETURNING."""
    result = await db.execute(
        update(KnowledgeArticle)
        .where(KnowledgeArticle.id == article_id)
        .values(views=KnowledgeArticle.views + 1)
        .returning(KnowledgeArticle)
    )
    article = result.scalars().first()
    if article is None:
        return None
    await db.commit()
    return article


async def create_article(db: AsyncSession, **fields) -> KnowledgeArticle:
    article = KnowledgeArticle(**fields)
    db.add(article)
    await db.commit()
    await db.refresh(article)
    return article


async def category_counts(db: AsyncSession) -> list[dict]:
    result = await db.execute(
        select(KnowledgeArticle.category, func.count(KnowledgeArticle.id).label("count"))
        .group_by(KnowledgeArticle.category)
        .order_by(KnowledgeArticle.category)
    )
    return [{"category": row.category, "count": row.count} for row in result.all()]
