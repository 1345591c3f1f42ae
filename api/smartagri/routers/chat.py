"""Chat endpoints.

POST /api/chat/message  -- store one conversation turn
GET  /api/chat/history  -- turns of a session, oldest first
POST /api/chat/analyze  -- keyword category/intent analysis of a message
"""

from typing import Optional

import structlog
from fastapi import APIRouter, HTTPException, Query

from smartagri.dependencies import DbSession
from smartagri.errors import envelope
from smartagri.schemas.chat import AnalyzeRequest, ChatMessageCreate, ChatMessageOut
from smartagri.services import chat_store
from smartagri.services.chat_classifier import analyze_query

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/chat", tags=["chat"])


@router.post("/message", status_code=201)
async def save_message(body: ChatMessageCreate, db: DbSession) -> dict:
    """Persist one turn.

    User turns that arrive without a category are classified here so the
    transcript carries category, confidence, intent and keywords.
    """
    category = body.category
    confidence = body.confidence or 0.0
    metadata = dict(body.metadata or {})

    if category is None and body.role == "user":
        analysis = analyze_query(body.message)
        category = analysis.category
        confidence = analysis.confidence
        metadata.setdefault("intent", analysis.intent)
        metadata.setdefault("keywords", analysis.keywords)

    message = await chat_store.save_message(
        db,
        session_id=body.session_id,
        user_id=body.user_id,
        message=body.message,
        response=body.response,
        role=body.role,
        category=category,
        confidence=confidence,
        metadata_json=metadata or None,
    )
    return envelope(ChatMessageOut.model_validate(message), message="Chat message saved successfully")


@router.get("/history")
async def get_chat_history(
    db: DbSession,
    session_id: Optional[str] = None,
    # Clients send "sessionId"; "session_id" is accepted too
    session_id_alias: Optional[str] = Query(default=None, alias="sessionId"),
    limit: int = Query(default=50, ge=1, le=500),
) -> dict:
    session_id = session_id or session_id_alias
    if not session_id:
        raise HTTPException(status_code=400, detail="session_id parameter is required")
    messages = await chat_store.session_history(db, session_id, limit)
    data = [ChatMessageOut.model_validate(m) for m in messages]
    return envelope(data, session_id=session_id, count=len(data))


@router.post("/analyze")
async def analyze_message(body: AnalyzeRequest) -> dict:
    analysis = analyze_query(body.message)
    log.info(
        "chat_query_analyzed",
        category=analysis.category,
        confidence=analysis.confidence,
        intent=analysis.intent,
    )
    return envelope(analysis)
