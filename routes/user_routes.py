from fastapi import APIRouter, HTTPException, Depends
from typing import List, Optional
from schemas.user import User, UserUpdate, ROLES
from crud import user_crud
from services.auth_service import get_current_user, get_super_admin

router = APIRouter()


@router.get("/me", response_model=User)
async def get_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/me", response_model=User)
async def update_me(user_data: UserUpdate, current_user: User = Depends(get_current_user)):
    changes = user_data.model_dump(exclude_none=True)
    if not changes:
        return current_user
    user = await user_crud.update_user(current_user.uid, changes)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/{uid}", response_model=User)
async def get_user(uid: str, current_user: User = Depends(get_super_admin)):
    user = await user_crud.get_user(uid)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/", response_model=List[User])
async def get_all_users(role: Optional[str] = None, current_user: User = Depends(get_super_admin)):
    if role and role not in ROLES:
        raise HTTPException(status_code=400, detail=f"Unknown role: {role}")
    return await user_crud.get_all_users(role)
