from fastapi import APIRouter, Depends
from schemas.dashboard import ProviderDashboard, PlatformStats
from schemas.user import User
from crud import dashboard_crud
from services.auth_service import get_current_provider, get_super_admin

router = APIRouter()


@router.get("/stats", response_model=PlatformStats)
async def get_platform_stats(current_user: User = Depends(get_super_admin)):
    return await dashboard_crud.get_platform_stats()


@router.get("/dashboard", response_model=ProviderDashboard)
async def get_provider_dashboard(current_user: User = Depends(get_current_provider)):
    return await dashboard_crud.get_provider_dashboard(current_user)
