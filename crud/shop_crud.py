from typing import List, Optional, Tuple
from schemas.user import (
    User, Location, ShopSummary, ShopService, ShopServiceCreate, ShopTiming, PROVIDER_ROLES
)
from config.database import Database
from services.proximity import filter_shops, parse_location
from scripts.time_parse import is_open_at, is_open_24_hours, parse_time_str, OPEN_24_HOURS
from fastapi import HTTPException
from datetime import datetime, time
import calendar
import logging
import uuid

logger = logging.getLogger(__name__)

PROVIDER_QUERY = {"role": {"$in": PROVIDER_ROLES}}
WEEKDAYS = list(calendar.day_name)


def to_shop_summary(shop: dict, distance_km: Optional[float] = None, now: Optional[time] = None) -> ShopSummary:
    now = now or datetime.now().time()
    summary = ShopSummary(**{k: v for k, v in shop.items() if k in ShopSummary.model_fields and k != "location"})
    location = shop.get("location")
    if isinstance(location, dict):
        summary.location = _clean_location(location)
    summary.is_open_now = is_open_at(shop.get("timing"), now)
    summary.distance_km = distance_km
    return summary


def _clean_location(location: dict) -> Optional[Location]:
    coords = parse_location(location)
    if coords is None:
        return None
    return Location(latitude=coords[0], longitude=coords[1])


async def search_shops(
    query: Optional[str] = None,
    category: Optional[str] = None,
    origin: Optional[Tuple[float, float]] = None,
    radius_km: Optional[float] = None,
    verified_only: bool = False,
) -> List[ShopSummary]:
    """List provider profiles, nearest first when the caller's position is known."""
    try:
        db = Database()
        mongo_query = dict(PROVIDER_QUERY)
        mongo_query["is_active"] = {"$ne": False}
        if verified_only:
            mongo_query["is_verified"] = True
        shops = await db.users.find(mongo_query).to_list(length=None)
        logger.info(f"Fetched {len(shops)} shops for discovery")

        now = datetime.now().time()
        return [
            to_shop_summary(shop, distance, now)
            for shop, distance in filter_shops(shops, origin, radius_km, query, category)
        ]
    except Exception as e:
        logger.error(f"Error searching shops: {str(e)}", exc_info=True)
        raise


async def get_shop_document(uid: str) -> Optional[dict]:
    db = Database()
    return await db.users.find_one({"uid": uid, **PROVIDER_QUERY})


async def get_shop(uid: str) -> Optional[User]:
    shop = await get_shop_document(uid)
    return User(**shop) if shop else None


async def _save_shop_fields(uid: str, fields: dict) -> User:
    db = Database()
    fields["updated_at"] = datetime.utcnow()
    result = await db.users.update_one({"uid": uid, **PROVIDER_QUERY}, {"$set": fields})
    if not result.matched_count:
        raise HTTPException(status_code=404, detail="Shop not found")
    return await get_shop(uid)


async def add_service(uid: str, service: ShopServiceCreate) -> User:
    shop = await get_shop_document(uid)
    if not shop:
        raise HTTPException(status_code=404, detail="Shop not found")

    services = shop.get("services", [])
    if any(s.get("name", "").lower() == service.name.strip().lower() for s in services):
        raise HTTPException(status_code=400, detail=f"Service '{service.name}' already exists")

    new_service = ShopService(
        id=uuid.uuid4().hex[:12],
        name=service.name.strip(),
        price=service.price,
        description=service.description
    )
    services.append(new_service.model_dump())
    logger.info(f"Adding service {new_service.id} to shop {uid}")
    return await _save_shop_fields(uid, {"services": services})


async def toggle_service(uid: str, service_id: str) -> User:
    shop = await get_shop_document(uid)
    if not shop:
        raise HTTPException(status_code=404, detail="Shop not found")

    services = shop.get("services", [])
    for service in services:
        if service.get("id") == service_id:
            service["active"] = not service.get("active", True)
            break
    else:
        raise HTTPException(status_code=404, detail="Service not found")
    return await _save_shop_fields(uid, {"services": services})


async def remove_service(uid: str, service_id: str) -> User:
    shop = await get_shop_document(uid)
    if not shop:
        raise HTTPException(status_code=404, detail="Shop not found")

    services = shop.get("services", [])
    remaining = [s for s in services if s.get("id") != service_id]
    if len(remaining) == len(services):
        raise HTTPException(status_code=404, detail="Service not found")
    return await _save_shop_fields(uid, {"services": remaining})


async def update_timing(uid: str, timing: ShopTiming) -> User:
    if is_open_24_hours(timing):
        timing = ShopTiming(open=OPEN_24_HOURS, close=OPEN_24_HOURS, is_open_24_hours=True)
    elif parse_time_str(timing.open) is None or parse_time_str(timing.close) is None:
        raise HTTPException(status_code=400, detail="Please set both opening and closing times.")
    return await _save_shop_fields(uid, {"timing": timing.model_dump()})


async def update_off_days(uid: str, off_days: List[str]) -> User:
    normalized = []
    for day in off_days:
        name = day.strip().capitalize()
        if name not in WEEKDAYS:
            raise HTTPException(status_code=400, detail=f"Unknown weekday: {day}")
        if name not in normalized:
            normalized.append(name)
    return await _save_shop_fields(uid, {"off_days": normalized})


async def set_verified(uid: str, is_verified: bool) -> User:
    logger.info(f"Setting verified={is_verified} on shop {uid}")
    return await _save_shop_fields(uid, {"is_verified": is_verified})


async def add_shop_image(uid: str, url: str) -> User:
    db = Database()
    result = await db.users.update_one(
        {"uid": uid, **PROVIDER_QUERY},
        {"$addToSet": {"shop_images": url}, "$set": {"updated_at": datetime.utcnow()}}
    )
    if not result.matched_count:
        raise HTTPException(status_code=404, detail="Shop not found")
    return await get_shop(uid)


async def set_shop_video(uid: str, url: str) -> User:
    return await _save_shop_fields(uid, {"shop_video": url})
