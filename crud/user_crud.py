from typing import List, Optional
from schemas.user import (
    UserCreate, User, UserLogin, generate_user_id,
    PROVIDER_ROLES, REGISTRABLE_ROLES
)
from config.database import Database
from fastapi import HTTPException
from passlib.context import CryptContext
from pymongo.errors import DuplicateKeyError
from datetime import datetime
import logging

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


async def create_user(user: UserCreate, allow_any_role: bool = False) -> User:
    db = Database()
    email = user.email.lower()

    if not allow_any_role and user.role not in REGISTRABLE_ROLES:
        raise HTTPException(status_code=400, detail=f"Cannot register with role '{user.role}'")
    if user.role in PROVIDER_ROLES and not user.shop_name:
        raise HTTPException(status_code=400, detail="Shop name is required for shop accounts")

    existing = await db.users.find_one({"email": email})
    if existing:
        raise HTTPException(status_code=400, detail="Email already registered")

    user_dict = user.model_dump(exclude={"password"})
    now = datetime.utcnow()
    user_dict.update({
        "uid": generate_user_id(user.shop_name or user.full_name or email),
        "email": email,
        "password": pwd_context.hash(user.password.get_secret_value()),
        "is_active": True,
        "is_verified": False,
        "rating": 0.0,
        "total_reviews": 0,
        "created_at": now,
        "updated_at": now,
    })

    try:
        await db.users.insert_one(user_dict)
    except DuplicateKeyError:
        # a concurrent registration won the unique index
        raise HTTPException(status_code=400, detail="Email already registered")
    logger.info(f"Registered {user.role} account {user_dict['uid']}")
    return User(**user_dict)


async def get_user(uid: str) -> Optional[User]:
    db = Database()
    user = await db.users.find_one({"uid": uid})
    if user:
        return User(**user)
    return None


async def get_user_by_email(email: str) -> Optional[User]:
    db = Database()
    user = await db.users.find_one({"email": email.lower()})
    if user:
        return User(**user)
    return None


async def update_user(uid: str, user_data: dict) -> Optional[User]:
    db = Database()
    user_data["updated_at"] = datetime.utcnow()
    update_result = await db.users.update_one(
        {"uid": uid},
        {"$set": user_data}
    )
    if update_result.modified_count:
        return await get_user(uid)
    return None


async def get_all_users(role: Optional[str] = None) -> List[User]:
    db = Database()
    query = {"role": role} if role else {}
    users = await db.users.find(query).to_list(length=None)
    return [User(**user) for user in users]


async def login_user(login_data: UserLogin) -> User:
    db = Database()
    user = await db.users.find_one({"email": login_data.email.lower()})
    if not user:
        raise HTTPException(status_code=404, detail="No account found with this email.")

    if not pwd_context.verify(login_data.password.get_secret_value(), user["password"]):
        raise HTTPException(status_code=401, detail="Incorrect password.")

    if not user.get("is_active", True):
        raise HTTPException(status_code=403, detail="This account has been disabled.")

    return User(**user)
