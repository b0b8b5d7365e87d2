from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class ReviewCreate(BaseModel):
    rating: int = Field(ge=1, le=5)  # Rating between 1 and 5
    comment: Optional[str] = None


class Review(BaseModel):
    review_id: str
    booking_id: str
    user_id: str
    provider_id: str
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = None
    service_name: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
