from config.settings import MEDIA_UPLOAD_URL, MEDIA_UPLOAD_PRESET, MEDIA_UPLOAD_TIMEOUT
from fastapi import HTTPException
import httpx
import logging

logger = logging.getLogger(__name__)


async def upload_media(filename: str, content: bytes, content_type: str, resource_type: str = "image") -> str:
    """Send a file to the media host and return its public URL."""
    url = MEDIA_UPLOAD_URL
    if resource_type == "video":
        url = url.replace("/image/upload", "/video/upload")

    try:
        async with httpx.AsyncClient(timeout=MEDIA_UPLOAD_TIMEOUT) as client:
            response = await client.post(
                url,
                data={"upload_preset": MEDIA_UPLOAD_PRESET},
                files={"file": (filename, content, content_type)}
            )
    except httpx.HTTPError as e:
        logger.error(f"Media upload failed for {filename}: {str(e)}")
        raise HTTPException(status_code=502, detail="Media upload failed")

    if response.status_code >= 400:
        logger.error(f"Media host rejected {filename}: {response.status_code} {response.text[:200]}")
        raise HTTPException(status_code=502, detail="Media upload failed")

    secure_url = response.json().get("secure_url")
    if not secure_url:
        raise HTTPException(status_code=502, detail="Media host returned no URL")
    logger.info(f"Uploaded {filename} to {secure_url}")
    return secure_url
