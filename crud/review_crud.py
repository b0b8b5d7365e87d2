from typing import List
from schemas.review import Review, ReviewCreate
from schemas.booking import STATUS_COMPLETED
from schemas.user import User
from config.database import Database
from crud.booking_crud import get_booking
from fastapi import HTTPException
from pymongo.errors import DuplicateKeyError
from datetime import datetime
import logging
import uuid

logger = logging.getLogger(__name__)


async def add_review(booking_id: str, user: User, review: ReviewCreate) -> Review:
    db = Database()

    booking = await get_booking(booking_id)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    if booking.user_id != user.uid:
        raise HTTPException(status_code=403, detail="Only the customer can review this booking")
    if booking.status != STATUS_COMPLETED:
        raise HTTPException(status_code=400, detail="Only completed bookings can be reviewed")
    if await db.reviews.find_one({"booking_id": booking_id}):
        raise HTTPException(status_code=400, detail="This booking has already been reviewed")

    review_obj = Review(
        review_id=uuid.uuid4().hex,
        booking_id=booking_id,
        user_id=user.uid,
        provider_id=booking.provider_id,
        rating=review.rating,
        comment=review.comment.strip() if review.comment else None,
        service_name=booking.service_name,
        created_at=datetime.utcnow()
    )
    try:
        await db.reviews.insert_one(review_obj.model_dump())
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="This booking has already been reviewed")
    await recalculate_shop_rating(booking.provider_id)
    logger.info(f"Review {review_obj.review_id} added for shop {booking.provider_id}")
    return review_obj


async def recalculate_shop_rating(provider_id: str):
    db = Database()
    reviews = await db.reviews.find({"provider_id": provider_id}).to_list(length=None)
    if reviews:
        avg_rating = sum(r["rating"] for r in reviews) / len(reviews)
    else:
        avg_rating = 0.0

    await db.users.update_one(
        {"uid": provider_id},
        {
            "$set": {
                "rating": round(avg_rating, 1),
                "total_reviews": len(reviews)
            }
        }
    )


async def get_shop_reviews(provider_id: str) -> List[Review]:
    db = Database()
    reviews = await db.reviews.find({"provider_id": provider_id}).to_list(length=None)
    reviews.sort(key=lambda r: r["created_at"], reverse=True)
    return [Review(**review) for review in reviews]
