from pydantic import BaseModel, Field, field_validator
from datetime import date, datetime
from typing import Optional
import random
import string

STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"

BOOKING_STATUSES = [STATUS_PENDING, STATUS_CONFIRMED, STATUS_COMPLETED, STATUS_CANCELLED]

# Older documents were written with these names
STATUS_ALIASES = {
    "accepted": STATUS_CONFIRMED,
    "rejected": STATUS_CANCELLED,
}


def normalize_status(status: Optional[str]) -> str:
    if not status:
        return STATUS_PENDING
    status = status.strip().lower()
    return STATUS_ALIASES.get(status, status)


class BookingCreate(BaseModel):
    provider_id: str
    service_name: str = Field(..., min_length=1)
    booking_date: date
    booking_time: str = Field(..., description="'hh:mm AM/PM' or 24-hour 'HH:MM'")
    special_request: Optional[str] = None

    @field_validator("special_request")
    @classmethod
    def strip_special_request(cls, value):
        if value is None:
            return value
        value = value.strip()
        return value or None


class Booking(BaseModel):
    booking_id: str
    user_id: str
    provider_id: str
    user_name: Optional[str] = None
    shop_name: Optional[str] = None
    service_name: str
    price: Optional[float] = None
    booking_date: date
    booking_time: str
    special_request: Optional[str] = None
    status: str = STATUS_PENDING
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    confirmed_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    @field_validator("status", mode="before")
    @classmethod
    def canonical_status(cls, value):
        return normalize_status(value)


class BookingStatusUpdate(BaseModel):
    status: str

    @field_validator("status")
    @classmethod
    def known_status(cls, value):
        value = normalize_status(value)
        if value not in BOOKING_STATUSES:
            raise ValueError(f"Unknown booking status: {value}")
        return value


def generate_booking_id(provider_id: str, user_id: str) -> str:
    provider_part = provider_id[2:4].upper()
    user_part = user_id[2:4].upper()
    random_part = ''.join(random.choices(string.ascii_uppercase + string.digits, k=8))
    return f"BK{provider_part}{user_part}{random_part}"
