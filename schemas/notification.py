from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime


class Notification(BaseModel):
    notification_id: str
    user_id: str
    title: str
    body: str = ""
    data: Optional[Dict[str, Any]] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    read: bool = False


class NotificationFeed(BaseModel):
    items: List[Notification] = []
    unread: int = 0


class PushTokenUpdate(BaseModel):
    push_token: Optional[str] = None
