from pydantic import BaseModel
from datetime import datetime
from schemas.user import User


class Session(BaseModel):
    session_id: str
    uid: str
    role: str
    created_at: datetime
    expires_at: datetime


class SessionInfo(BaseModel):
    """What a client needs to restore itself at launch."""
    uid: str
    email: str
    role: str
    route: str
    expires_at: datetime


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    role: str
    route: str
    user: User
