from typing import List
from schemas.message import Message, MessageCreate
from schemas.booking import Booking, STATUS_CONFIRMED, STATUS_COMPLETED
from schemas.user import User
from config.database import Database
from crud.booking_crud import get_booking_for_participant
from fastapi import HTTPException
from datetime import datetime
import logging
import uuid

logger = logging.getLogger(__name__)

READABLE_STATUSES = {STATUS_CONFIRMED, STATUS_COMPLETED}


async def _chat_booking(booking_id: str, user: User) -> Booking:
    booking = await get_booking_for_participant(booking_id, user)
    if user.uid not in (booking.user_id, booking.provider_id):
        raise HTTPException(status_code=403, detail="Only the customer and the shop can use this chat")
    return booking


async def list_messages(booking_id: str, user: User) -> List[Message]:
    booking = await _chat_booking(booking_id, user)
    if booking.status not in READABLE_STATUSES:
        raise HTTPException(status_code=403, detail="Chat opens once the shop accepts the booking")

    db = Database()
    messages = await db.messages.find({"booking_id": booking_id}).to_list(length=None)
    messages.sort(key=lambda m: m["timestamp"])
    return [Message(**message) for message in messages]


async def add_message(booking_id: str, user: User, message: MessageCreate) -> Message:
    booking = await _chat_booking(booking_id, user)
    if booking.status != STATUS_CONFIRMED:
        raise HTTPException(status_code=403, detail="Messages can only be sent while the booking is confirmed")

    db = Database()
    message_dict = {
        "message_id": uuid.uuid4().hex,
        "booking_id": booking_id,
        "text": message.text,
        "sender_id": user.uid,
        "sender_role": "shopkeeper" if user.uid == booking.provider_id else "user",
        "timestamp": datetime.utcnow(),
    }
    await db.messages.insert_one(message_dict)
    logger.info(f"Message {message_dict['message_id']} added to booking {booking_id}")
    return Message(**message_dict)
