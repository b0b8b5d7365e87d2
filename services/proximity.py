"""Great-circle distance and the shop proximity filter.

Shops are plain profile dicts as stored in the ``users`` collection. The
filter never mutates its input; it returns ``(shop, distance_km)`` pairs.
"""
import math
from typing import Any, Dict, Iterable, List, Optional, Tuple

EARTH_RADIUS_KM = 6371.0

Coordinates = Tuple[float, float]


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def parse_coordinate(value: Any, limit: float) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or abs(number) > limit:
        return None
    return number


def parse_location(location: Any) -> Optional[Coordinates]:
    """Read ``{latitude, longitude}`` (strings allowed). None if either part is unusable."""
    if not isinstance(location, dict):
        return None
    lat = parse_coordinate(location.get("latitude"), 90)
    lon = parse_coordinate(location.get("longitude"), 180)
    if lat is None or lon is None:
        return None
    return lat, lon


def matches_query(shop: Dict[str, Any], query: Optional[str]) -> bool:
    if not query:
        return True
    q = query.strip().lower()
    return any(q in (shop.get(field) or "").lower() for field in ("shop_name", "category"))


def filter_shops(
    shops: Iterable[Dict[str, Any]],
    origin: Optional[Coordinates] = None,
    radius_km: Optional[float] = None,
    query: Optional[str] = None,
    category: Optional[str] = None,
) -> List[Tuple[Dict[str, Any], Optional[float]]]:
    results = []
    for shop in shops:
        if not matches_query(shop, query):
            continue
        if category and (shop.get("category") or "").lower() != category.strip().lower():
            continue

        distance = None
        if origin is not None:
            coords = parse_location(shop.get("location"))
            if coords is not None:
                distance = haversine_km(origin[0], origin[1], coords[0], coords[1])

        if origin is not None and radius_km is not None:
            # a shop we cannot place is never inside the radius
            if distance is None or distance > radius_km:
                continue

        results.append((shop, distance))

    results.sort(key=lambda item: (item[1] is None, item[1] if item[1] is not None else 0.0))
    return results
