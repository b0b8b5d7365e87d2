from fastapi import APIRouter, HTTPException, Depends
from typing import List, Optional
from schemas.service import ServiceCreate, ServiceUpdate, Service
from schemas.user import User
from crud import service_crud
from services.auth_service import get_super_admin

router = APIRouter()


@router.get("/", response_model=List[Service])
async def get_services(category: Optional[str] = None, include_inactive: bool = False):
    return await service_crud.get_services(category, include_inactive)


@router.post("/", response_model=Service)
async def create_service(service: ServiceCreate, current_user: User = Depends(get_super_admin)):
    return await service_crud.create_service(service)


@router.get("/{service_id}", response_model=Service)
async def get_service(service_id: str):
    service = await service_crud.get_service(service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")
    return service


@router.put("/{service_id}", response_model=Service)
async def update_service(service_id: str, service_data: ServiceUpdate, current_user: User = Depends(get_super_admin)):
    service = await service_crud.update_service(service_id, service_data)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")
    return service
