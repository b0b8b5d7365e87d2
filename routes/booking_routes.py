from fastapi import APIRouter, Depends
from typing import List, Literal, Optional
from schemas.booking import Booking, BookingCreate, BookingStatusUpdate
from schemas.message import Message, MessageCreate
from schemas.review import Review, ReviewCreate
from schemas.user import User
from crud import booking_crud, message_crud, review_crud
from services.auth_service import get_current_user

router = APIRouter()

BookingAction = Literal["accept", "reject", "cancel", "complete"]


@router.post("/", response_model=Booking)
async def create_booking(booking: BookingCreate, current_user: User = Depends(get_current_user)):
    return await booking_crud.create_booking(current_user, booking)


@router.get("/", response_model=List[Booking])
async def list_bookings(status: Optional[str] = None, current_user: User = Depends(get_current_user)):
    return await booking_crud.list_bookings(current_user, status)


@router.get("/{booking_id}", response_model=Booking)
async def get_booking(booking_id: str, current_user: User = Depends(get_current_user)):
    return await booking_crud.get_booking_for_participant(booking_id, current_user)


@router.patch("/{booking_id}/status", response_model=Booking)
async def update_booking_status(
    booking_id: str,
    payload: BookingStatusUpdate,
    current_user: User = Depends(get_current_user)
):
    return await booking_crud.update_booking_status(booking_id, current_user, payload.status)


@router.get("/{booking_id}/messages", response_model=List[Message])
async def list_messages(booking_id: str, current_user: User = Depends(get_current_user)):
    return await message_crud.list_messages(booking_id, current_user)


@router.post("/{booking_id}/messages", response_model=Message)
async def send_message(booking_id: str, message: MessageCreate, current_user: User = Depends(get_current_user)):
    return await message_crud.add_message(booking_id, current_user, message)


@router.post("/{booking_id}/review", response_model=Review)
async def review_booking(booking_id: str, review: ReviewCreate, current_user: User = Depends(get_current_user)):
    return await review_crud.add_review(booking_id, current_user, review)


@router.post("/{booking_id}/{action}", response_model=Booking)
async def perform_action(booking_id: str, action: BookingAction, current_user: User = Depends(get_current_user)):
    """accept / reject / complete are for the shop, cancel for either side while pending."""
    return await booking_crud.perform_action(booking_id, current_user, action)
