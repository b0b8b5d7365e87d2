from config.database import Database
from services.twilio_service import TwilioService
from schemas.booking import Booking
from datetime import datetime
from functools import lru_cache
from typing import Any, Dict, Optional
import logging
import uuid

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_sms_service() -> Optional[TwilioService]:
    """One Twilio client per process, or None when credentials are missing."""
    try:
        return TwilioService()
    except ValueError:
        logger.info("Twilio credentials not set, SMS delivery disabled")
        return None


class NotificationService:
    def __init__(self, db: Database, sms: Optional[TwilioService] = None):
        self.db = db
        self.sms = sms

    @classmethod
    def create(cls, db: Database) -> 'NotificationService':
        """SMS is optional: without Twilio credentials only the in-app feed is written."""
        return cls(db, get_sms_service())

    async def notify(self, user_id: str, title: str, body: str, data: Optional[Dict[str, Any]] = None) -> dict:
        notification = {
            "notification_id": uuid.uuid4().hex,
            "user_id": user_id,
            "title": title,
            "body": body,
            "data": data,
            "created_at": datetime.utcnow(),
            "read": False
        }
        await self.db.notifications.insert_one(notification)
        return notification

    async def send_booking_request_notification(self, booking: Booking):
        """Tell the shop a new request is waiting."""
        body = f"{booking.user_name or 'A customer'} requested {booking.service_name} on {booking.booking_date.isoformat()} at {booking.booking_time}."
        await self._deliver(booking.provider_id, "New booking request", body, booking)

    async def send_booking_status_notification(self, booking: Booking, recipient_id: str):
        await self._deliver(
            recipient_id,
            "Booking update",
            self._get_status_message(booking.status, booking.service_name),
            booking
        )

    async def _deliver(self, user_id: str, title: str, body: str, booking: Booking):
        try:
            await self.notify(
                user_id,
                title,
                body,
                {"booking_id": booking.booking_id, "status": booking.status}
            )
            if self.sms:
                user = await self.db.users.find_one({"uid": user_id})
                if user and user.get("phone"):
                    await self.sms.send_sms(user["phone"], body)
        except Exception as e:
            # a failed notification never fails the booking write
            logger.error(f"Error notifying {user_id} about booking {booking.booking_id}: {str(e)}", exc_info=True)

    def _get_status_message(self, status: str, service_name: str) -> str:
        """Get appropriate message based on booking status"""
        messages = {
            "confirmed": f"Your booking for {service_name} has been confirmed!",
            "cancelled": f"Your booking for {service_name} has been cancelled.",
            "completed": f"Your booking for {service_name} has been completed. Tell us how it went!",
            "pending": f"Your booking for {service_name} is pending confirmation."
        }
        return messages.get(status, f"Your booking status has been updated to {status}.")
