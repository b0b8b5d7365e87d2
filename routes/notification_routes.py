from fastapi import APIRouter, Depends
from schemas.notification import NotificationFeed, PushTokenUpdate
from schemas.user import User
from crud import notification_crud
from services.auth_service import get_current_user

router = APIRouter()


@router.get("/", response_model=NotificationFeed)
async def get_notifications(current_user: User = Depends(get_current_user)):
    return await notification_crud.get_feed(current_user.uid)


@router.post("/read-all")
async def mark_all_read(current_user: User = Depends(get_current_user)):
    updated = await notification_crud.mark_all_read(current_user.uid)
    return {"updated": updated, "unread": 0}


@router.put("/push-token")
async def register_push_token(payload: PushTokenUpdate, current_user: User = Depends(get_current_user)):
    await notification_crud.set_push_token(current_user.uid, payload.push_token)
    return {"push_token": payload.push_token}
