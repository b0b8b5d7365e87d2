from pydantic import BaseModel, Field, field_validator
from datetime import datetime


class MessageCreate(BaseModel):
    text: str

    @field_validator("text")
    @classmethod
    def not_blank(cls, value):
        value = value.strip()
        if not value:
            raise ValueError("Message text cannot be empty")
        return value


class Message(BaseModel):
    message_id: str
    booking_id: str
    text: str
    sender_id: str
    sender_role: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)
