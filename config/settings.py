from dotenv import load_dotenv
from typing import Optional
import logging
import os

load_dotenv()

logger = logging.getLogger(__name__)

# only for local development, long enough for HS256
DEFAULT_JWT_SECRET = "dev-secret-change-me-before-deploying-0000"
JWT_SECRET = os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET)
JWT_ALG = "HS256"
SESSION_TTL_HOURS = int(os.getenv("SESSION_TTL_HOURS", "24"))

DEFAULT_RADIUS_KM = float(os.getenv("DEFAULT_RADIUS_KM", "5"))

MEDIA_UPLOAD_URL = os.getenv("MEDIA_UPLOAD_URL", "https://api.cloudinary.com/v1_1/demo/image/upload")
MEDIA_UPLOAD_PRESET = os.getenv("MEDIA_UPLOAD_PRESET", "serviceprovider")
MEDIA_UPLOAD_TIMEOUT = float(os.getenv("MEDIA_UPLOAD_TIMEOUT", "30"))


def warn_on_default_secret(secret: Optional[str] = None) -> bool:
    if (secret or JWT_SECRET) == DEFAULT_JWT_SECRET:
        logger.warning("JWT_SECRET is not set, sessions are signed with the development default")
        return True
    return False
