from pydantic import BaseModel
from typing import List
from schemas.booking import Booking


class ProviderDashboard(BaseModel):
    uid: str
    shop_name: str = ""
    total_bookings: int = 0
    pending_bookings: int = 0
    confirmed_bookings: int = 0
    completed_bookings: int = 0
    cancelled_bookings: int = 0
    rating: float = 0.0
    total_reviews: int = 0
    recent_bookings: List[Booking] = []


class PlatformStats(BaseModel):
    total_users: int = 0
    total_shops: int = 0
    verified_shops: int = 0
    total_bookings: int = 0
