from typing import List, Optional
from schemas.service import Service, ServiceCreate, ServiceUpdate, generate_service_id
from config.database import Database
from datetime import datetime
import re


async def create_service(service: ServiceCreate) -> Service:
    """Add an entry to the service catalogue"""
    db = Database()
    service_dict = service.model_dump()
    service_dict["created_at"] = datetime.utcnow()
    service_dict["updated_at"] = datetime.utcnow()
    service_dict["service_id"] = generate_service_id(service.name)

    await db.services.insert_one(service_dict)
    return Service(**service_dict)


async def get_service(service_id: str) -> Optional[Service]:
    db = Database()
    service = await db.services.find_one({"service_id": service_id})
    if service:
        return Service(**service)
    return None


async def update_service(service_id: str, service_data: ServiceUpdate) -> Optional[Service]:
    db = Database()
    changes = service_data.model_dump(exclude_none=True)
    changes["updated_at"] = datetime.utcnow()

    result = await db.services.update_one(
        {"service_id": service_id},
        {"$set": changes}
    )

    if result.matched_count:
        return await get_service(service_id)
    return None


async def get_services(category: Optional[str] = None, include_inactive: bool = False) -> List[Service]:
    db = Database()
    query = {}
    if not include_inactive:
        query["is_active"] = True
    if category:
        query["category"] = {"$regex": f"^{re.escape(category)}$", "$options": "i"}
    services = await db.services.find(query).to_list(length=None)
    return [Service(**service) for service in services]
