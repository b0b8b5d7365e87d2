from fastapi import APIRouter, HTTPException, Depends, Query, UploadFile, File
from typing import List, Optional
from pydantic import BaseModel
from datetime import datetime
from schemas.user import User, ShopSummary, ShopServiceCreate, ShopTiming
from schemas.review import Review
from crud import shop_crud, review_crud
from config.settings import DEFAULT_RADIUS_KM
from services.auth_service import get_current_provider, get_super_admin
from services.media_service import upload_media
from scripts.time_parse import is_open_at

router = APIRouter()

IMAGE_TYPES = {"image/jpeg", "image/png", "image/webp"}
VIDEO_TYPES = {"video/mp4", "video/quicktime"}


class OffDaysUpdate(BaseModel):
    off_days: List[str]


class VerificationUpdate(BaseModel):
    is_verified: bool


@router.get("/", response_model=List[ShopSummary])
async def search_shops(
    q: Optional[str] = None,
    category: Optional[str] = None,
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    radius_km: Optional[float] = Query(None, gt=0),
    verified_only: bool = False
):
    if (lat is None) != (lng is None):
        raise HTTPException(status_code=400, detail="Both lat and lng are required for a location search")
    origin = (lat, lng) if lat is not None else None
    if origin is not None and radius_km is None:
        radius_km = DEFAULT_RADIUS_KM
    return await shop_crud.search_shops(q, category, origin, radius_km, verified_only)


@router.get("/{uid}", response_model=User)
async def get_shop(uid: str):
    shop = await shop_crud.get_shop(uid)
    if not shop:
        raise HTTPException(status_code=404, detail="Shop not found")
    return shop


@router.get("/{uid}/open")
async def get_open_status(uid: str):
    shop = await shop_crud.get_shop(uid)
    if not shop:
        raise HTTPException(status_code=404, detail="Shop not found")
    return {
        "uid": uid,
        "is_open_now": is_open_at(shop.timing, datetime.now().time()),
        "timing": shop.timing,
        "off_days": shop.off_days
    }


@router.get("/{uid}/reviews", response_model=List[Review])
async def get_shop_reviews(uid: str):
    return await review_crud.get_shop_reviews(uid)


@router.put("/me/timing", response_model=User)
async def update_timing(timing: ShopTiming, current_user: User = Depends(get_current_provider)):
    return await shop_crud.update_timing(current_user.uid, timing)


@router.put("/me/off-days", response_model=User)
async def update_off_days(payload: OffDaysUpdate, current_user: User = Depends(get_current_provider)):
    return await shop_crud.update_off_days(current_user.uid, payload.off_days)


@router.post("/me/services", response_model=User)
async def add_service(service: ShopServiceCreate, current_user: User = Depends(get_current_provider)):
    return await shop_crud.add_service(current_user.uid, service)


@router.patch("/me/services/{service_id}/toggle", response_model=User)
async def toggle_service(service_id: str, current_user: User = Depends(get_current_provider)):
    return await shop_crud.toggle_service(current_user.uid, service_id)


@router.delete("/me/services/{service_id}", response_model=User)
async def remove_service(service_id: str, current_user: User = Depends(get_current_provider)):
    return await shop_crud.remove_service(current_user.uid, service_id)


@router.post("/me/images", response_model=User)
async def upload_shop_image(file: UploadFile = File(...), current_user: User = Depends(get_current_provider)):
    if file.content_type not in IMAGE_TYPES:
        raise HTTPException(status_code=400, detail="Only JPEG, PNG or WebP images are accepted")
    content = await file.read()
    url = await upload_media(file.filename or "upload.jpg", content, file.content_type)
    return await shop_crud.add_shop_image(current_user.uid, url)


@router.post("/me/video", response_model=User)
async def upload_shop_video(file: UploadFile = File(...), current_user: User = Depends(get_current_provider)):
    if file.content_type not in VIDEO_TYPES:
        raise HTTPException(status_code=400, detail="Only MP4 or QuickTime videos are accepted")
    content = await file.read()
    url = await upload_media(file.filename or "upload.mp4", content, file.content_type, resource_type="video")
    return await shop_crud.set_shop_video(current_user.uid, url)


@router.put("/{uid}/verify", response_model=User)
async def verify_shop(uid: str, payload: VerificationUpdate, current_user: User = Depends(get_super_admin)):
    return await shop_crud.set_verified(uid, payload.is_verified)
