"""Chat transcript persistence."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from smartagri.models.chat_message import ChatMessage


async def session_history(db: AsyncSession, session_id: str, limit: int = 50) -> list[ChatMessage]:
    result = await db.execute(
        select(ChatMessage)
        .where(ChatMessage.session_id == session_id)
        .order_by(ChatMessage.created_at.asc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def save_message(db: AsyncSession, **fields) -> ChatMessage:
    message = ChatMessage(**fields)
    db.add(message)
    await db.commit()
    await db.refresh(message)
    return message
