from typing import List, Optional
from schemas.booking import (
    Booking, BookingCreate, generate_booking_id, normalize_status,
    STATUS_PENDING, STATUS_CANCELLED, STATUS_ALIASES
)
from schemas.user import User, ROLE_SUPER_ADMIN
from config.database import Database
from crud.shop_crud import get_shop_document
from services.booking_status import (
    InvalidTransitionError, apply_action, next_status,
    ACTION_CANCEL, PROVIDER_ACTIONS, USER_ACTIONS, STATUS_TIMESTAMPS
)
from services.notification_service import NotificationService
from services.roles import is_provider
from scripts.time_parse import is_off_day, is_time_allowed, parse_time_str
from fastapi import HTTPException
from datetime import date, datetime
import logging

logger = logging.getLogger(__name__)


def _status_values(status: str) -> List[str]:
    """Stored values that read back as ``status`` (legacy aliases included)."""
    status = normalize_status(status)
    return [status] + [alias for alias, canonical in STATUS_ALIASES.items() if canonical == status]


def _find_service(shop: dict, service_name: str) -> Optional[dict]:
    wanted = service_name.strip().lower()
    for service in shop.get("services", []):
        if service.get("active", True) and service.get("name", "").strip().lower() == wanted:
            return service
    return None


async def create_booking(user: User, booking: BookingCreate) -> Booking:
    """Create a pending booking request for a shop."""
    try:
        db = Database()

        shop = await get_shop_document(booking.provider_id)
        if not shop:
            raise HTTPException(status_code=404, detail="Shop not found")
        if shop["uid"] == user.uid:
            raise HTTPException(status_code=400, detail="You cannot book your own shop")

        if booking.booking_date < date.today():
            raise HTTPException(status_code=400, detail="Please select today or a future date.")

        if is_off_day(shop.get("off_days"), booking.booking_date):
            day_name = booking.booking_date.strftime("%A")
            raise HTTPException(status_code=400, detail=f"This shop is closed on {day_name}s. Please select another date.")

        booking_time = parse_time_str(booking.booking_time)
        if booking_time is None:
            raise HTTPException(status_code=400, detail=f"Invalid time format: {booking.booking_time}")
        if not is_time_allowed(shop.get("timing"), booking_time):
            timing = shop.get("timing") or {}
            raise HTTPException(
                status_code=400,
                detail=f"This shop is only open from {timing.get('open', 'N/A')} to {timing.get('close', 'N/A')}."
            )

        price = None
        if shop.get("services"):
            service = _find_service(shop, booking.service_name)
            if not service:
                raise HTTPException(status_code=400, detail=f"Service '{booking.service_name}' is not offered by this shop")
            price = service.get("price")

        now = datetime.utcnow()
        booking_dict = {
            "booking_id": generate_booking_id(shop["uid"], user.uid),
            "user_id": user.uid,
            "provider_id": shop["uid"],
            "user_name": user.full_name or user.display_name,
            "shop_name": shop.get("shop_name") or shop.get("full_name") or "Unknown Shop",
            "service_name": booking.service_name.strip(),
            "price": price,
            "booking_date": booking.booking_date.isoformat(),
            "booking_time": booking_time.strftime("%I:%M %p"),
            "special_request": booking.special_request,
            "status": STATUS_PENDING,
            "created_at": now,
            "updated_at": now,
        }
        await db.bookings.insert_one(booking_dict)
        logger.info(f"Booking {booking_dict['booking_id']} created by {user.uid} for shop {shop['uid']}")

        created = Booking(**booking_dict)
        await NotificationService.create(db).send_booking_request_notification(created)
        return created

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error creating booking: {str(e)}", exc_info=True)
        raise


async def get_booking(booking_id: str) -> Optional[Booking]:
    db = Database()
    booking = await db.bookings.find_one({"booking_id": booking_id})
    return Booking(**booking) if booking else None


async def get_booking_for_participant(booking_id: str, user: User) -> Booking:
    """Fetch a booking the caller takes part in (super-admins see everything)."""
    booking = await get_booking(booking_id)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    if user.role != ROLE_SUPER_ADMIN and user.uid not in (booking.user_id, booking.provider_id):
        raise HTTPException(status_code=403, detail="Not authorized to view this booking")
    return booking


async def list_bookings(user: User, status: Optional[str] = None) -> List[Booking]:
    """A provider sees bookings made with their shop and the ones it made itself."""
    db = Database()
    if user.role == ROLE_SUPER_ADMIN:
        query = {}
    elif is_provider(user.role):
        query = {"$or": [{"provider_id": user.uid}, {"user_id": user.uid}]}
    else:
        query = {"user_id": user.uid}
    if status and status != "all":
        query["status"] = {"$in": _status_values(status)}

    bookings = await db.bookings.find(query).to_list(length=None)
    bookings.sort(key=lambda b: b.get("created_at") or datetime.min, reverse=True)
    return [Booking(**booking) for booking in bookings]


async def _transition(booking_id: str, user: User, action: Optional[str] = None, target: Optional[str] = None) -> Booking:
    db = Database()
    stored = await db.bookings.find_one({"booking_id": booking_id})
    if not stored:
        raise HTTPException(status_code=404, detail="Booking not found")

    current = stored.get("status")
    is_owner = user.uid == stored["user_id"]
    is_shop = user.uid == stored["provider_id"]
    if not (is_owner or is_shop):
        raise HTTPException(status_code=403, detail="Not authorized to change this booking")

    try:
        if action is not None:
            new_status = apply_action(current, action)
        else:
            new_status = next_status(current, target)
            action = ACTION_CANCEL if new_status == STATUS_CANCELLED else None
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))

    allowed = (is_shop and (action in PROVIDER_ACTIONS or action is None)) or (is_owner and action in USER_ACTIONS)
    if not allowed:
        raise HTTPException(status_code=403, detail="Not authorized to change this booking")

    now = datetime.utcnow()
    changes = {"status": new_status, "updated_at": now}
    if new_status in STATUS_TIMESTAMPS:
        changes[STATUS_TIMESTAMPS[new_status]] = now

    # only write if nobody changed the status since we read it
    update_result = await db.bookings.update_one(
        {"booking_id": booking_id, "status": current},
        {"$set": changes}
    )
    if not update_result.modified_count:
        logger.warning(f"Lost status race on booking {booking_id} ({current} -> {new_status})")
        raise HTTPException(status_code=409, detail="Booking was updated by someone else. Please refresh.")

    logger.info(f"Booking {booking_id}: {normalize_status(current)} -> {new_status} by {user.uid}")
    updated = await get_booking(booking_id)

    recipient = stored["provider_id"] if is_owner and not is_shop else stored["user_id"]
    await NotificationService.create(db).send_booking_status_notification(updated, recipient)
    return updated


async def perform_action(booking_id: str, user: User, action: str) -> Booking:
    return await _transition(booking_id, user, action=action)


async def update_booking_status(booking_id: str, user: User, status: str) -> Booking:
    return await _transition(booking_id, user, target=status)
