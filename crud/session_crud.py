from typing import Optional
from datetime import datetime, timedelta
from config.database import Database
from config.settings import SESSION_TTL_HOURS
from schemas.session import Session
import logging
import uuid

logger = logging.getLogger(__name__)


async def create_session(uid: str, role: str) -> Session:
    db = Database()
    now = datetime.utcnow()
    session = Session(
        session_id=uuid.uuid4().hex,
        uid=uid,
        role=role,
        created_at=now,
        expires_at=now + timedelta(hours=SESSION_TTL_HOURS)
    )
    await db.sessions.insert_one(session.model_dump())
    logger.info(f"Session created for user {uid}")
    return session


async def get_session(session_id: str) -> Optional[Session]:
    """Return the session if it exists and has not expired."""
    db = Database()
    session = await db.sessions.find_one({"session_id": session_id})
    if not session:
        return None
    if session["expires_at"] <= datetime.utcnow():
        await db.sessions.delete_one({"session_id": session_id})
        logger.info(f"Session {session_id} expired for user {session['uid']}")
        return None
    return Session(**session)


async def delete_session(session_id: str) -> bool:
    db = Database()
    result = await db.sessions.delete_one({"session_id": session_id})
    return result.deleted_count > 0


async def delete_user_sessions(uid: str) -> int:
    db = Database()
    result = await db.sessions.delete_many({"uid": uid})
    return result.deleted_count
