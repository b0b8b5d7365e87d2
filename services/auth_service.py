from datetime import timezone
from typing import Optional
from fastapi import Depends, Header, HTTPException
import jwt

from config.settings import JWT_SECRET, JWT_ALG
from crud import session_crud, user_crud
from schemas.session import Session
from schemas.user import User, PROVIDER_ROLES, ROLE_SUPER_ADMIN


def create_access_token(session: Session) -> str:
    payload = {
        "sub": session.uid,
        "role": session.role,
        "sid": session.session_id,
        "exp": session.expires_at.replace(tzinfo=timezone.utc),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALG)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALG])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Session expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Could not validate credentials")


def get_bearer_token(authorization: Optional[str] = Header(None)) -> str:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Not authenticated")
    return authorization.split(" ", 1)[1].strip()


async def get_current_session(token: str = Depends(get_bearer_token)) -> Session:
    payload = decode_access_token(token)
    session_id = payload.get("sid")
    if not session_id or not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid token")
    session = await session_crud.get_session(session_id)
    if not session or session.uid != payload["sub"]:
        raise HTTPException(status_code=401, detail="Session expired")
    return session


async def get_current_user(session: Session = Depends(get_current_session)) -> User:
    user = await user_crud.get_user(session.uid)
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return user


async def get_current_provider(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role not in PROVIDER_ROLES:
        raise HTTPException(status_code=403, detail="Only shop owners can do this")
    return current_user


async def get_super_admin(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != ROLE_SUPER_ADMIN:
        raise HTTPException(status_code=403, detail="Super admins only")
    return current_user
