from schemas.dashboard import ProviderDashboard, PlatformStats
from schemas.booking import (
    Booking, normalize_status,
    STATUS_PENDING, STATUS_CONFIRMED, STATUS_COMPLETED, STATUS_CANCELLED
)
from schemas.user import User, PROVIDER_ROLES
from config.database import Database
from collections import Counter
from datetime import datetime

RECENT_BOOKINGS = 5


async def get_provider_dashboard(provider: User) -> ProviderDashboard:
    db = Database()
    bookings = await db.bookings.find({"provider_id": provider.uid}).to_list(length=None)
    counts = Counter(normalize_status(b.get("status")) for b in bookings)
    bookings.sort(key=lambda b: b.get("created_at") or datetime.min, reverse=True)

    return ProviderDashboard(
        uid=provider.uid,
        shop_name=provider.shop_name or "",
        total_bookings=len(bookings),
        pending_bookings=counts[STATUS_PENDING],
        confirmed_bookings=counts[STATUS_CONFIRMED],
        completed_bookings=counts[STATUS_COMPLETED],
        cancelled_bookings=counts[STATUS_CANCELLED],
        rating=provider.rating,
        total_reviews=provider.total_reviews,
        recent_bookings=[Booking(**b) for b in bookings[:RECENT_BOOKINGS]]
    )


async def get_platform_stats() -> PlatformStats:
    db = Database()
    return PlatformStats(
        total_users=await db.users.count_documents({}),
        total_shops=await db.users.count_documents({"role": {"$in": PROVIDER_ROLES}}),
        verified_shops=await db.users.count_documents({"role": {"$in": PROVIDER_ROLES}, "is_verified": True}),
        total_bookings=await db.bookings.count_documents({})
    )
