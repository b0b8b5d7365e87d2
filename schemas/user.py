from pydantic import BaseModel, ConfigDict, EmailStr, Field, SecretStr, field_validator
from typing import List, Optional
import re
import random
import string
from datetime import datetime
from services.proximity import parse_coordinate

ROLE_USER = "user"
ROLE_SHOPKEEPER = "shopkeeper"
ROLE_ADMIN = "admin"
ROLE_SUPER_ADMIN = "super-admin"

ROLES = [ROLE_USER, ROLE_SHOPKEEPER, ROLE_ADMIN, ROLE_SUPER_ADMIN]
PROVIDER_ROLES = [ROLE_SHOPKEEPER, ROLE_ADMIN]
# super-admin accounts are created by scripts/setup_admin.py only
REGISTRABLE_ROLES = [ROLE_USER, ROLE_SHOPKEEPER, ROLE_ADMIN]


class Location(BaseModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @field_validator("latitude", mode="before")
    @classmethod
    def parse_latitude(cls, value):
        return parse_coordinate(value, 90)

    @field_validator("longitude", mode="before")
    @classmethod
    def parse_longitude(cls, value):
        return parse_coordinate(value, 180)


class ShopTiming(BaseModel):
    open: Optional[str] = Field(None, description="e.g. '09:00 AM' or '24 Hours'")
    close: Optional[str] = Field(None, description="e.g. '09:00 PM' or '24 Hours'")
    is_open_24_hours: bool = False


class ShopService(BaseModel):
    id: str
    name: str
    price: float = Field(ge=0)
    description: Optional[str] = None
    active: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)


class ShopServiceCreate(BaseModel):
    name: str = Field(..., min_length=1)
    price: float = Field(ge=0)
    description: Optional[str] = None


class UserBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    email: EmailStr
    role: str = ROLE_USER
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    location: Optional[Location] = None

    # Shop profile fields, only filled for provider roles
    shop_name: Optional[str] = None
    owner_name: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    experience: Optional[str] = None
    timing: Optional[ShopTiming] = None
    off_days: List[str] = []
    services: List[ShopService] = []
    shop_images: List[str] = []
    shop_video: Optional[str] = None


def require_full_location(location: Optional[Location]) -> Optional[Location]:
    if location is not None and (location.latitude is None or location.longitude is None):
        raise ValueError("Location needs a valid latitude and longitude")
    return location


class UserCreate(UserBase):
    password: SecretStr

    @field_validator("location")
    @classmethod
    def full_location(cls, value):
        return require_full_location(value)

    @field_validator("password")
    @classmethod
    def password_length(cls, value: SecretStr):
        if len(value.get_secret_value()) < 6:
            raise ValueError("Password must be at least 6 characters")
        return value


class UserLogin(BaseModel):
    email: EmailStr
    password: SecretStr


class UserUpdate(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    location: Optional[Location] = None
    shop_name: Optional[str] = None
    owner_name: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    experience: Optional[str] = None

    @field_validator("location")
    @classmethod
    def full_location(cls, value):
        return require_full_location(value)


class User(UserBase):
    model_config = ConfigDict(from_attributes=True)

    uid: str
    is_active: bool = True
    is_verified: bool = False
    rating: float = 0.0
    total_reviews: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def display_name(self) -> str:
        return self.shop_name or self.full_name or self.owner_name or self.email


class ShopSummary(BaseModel):
    """A provider profile as returned by shop discovery."""
    uid: str
    shop_name: Optional[str] = None
    category: Optional[str] = None
    address: Optional[str] = None
    location: Optional[Location] = None
    timing: Optional[ShopTiming] = None
    off_days: List[str] = []
    shop_images: List[str] = []
    rating: float = 0.0
    total_reviews: int = 0
    is_verified: bool = False
    is_open_now: bool = False
    distance_km: Optional[float] = None


def generate_user_id(name: str) -> str:
    # Remove special characters and spaces from name
    clean_name = re.sub(r'[^a-zA-Z0-9]', '', name)

    # Take first 3 characters of the name (or pad with 'X' if shorter)
    name_part = clean_name[:3].upper().ljust(3, 'X')

    random_part = ''.join(random.choices(string.ascii_uppercase + string.digits, k=8))

    return f"US{name_part}{random_part}"
