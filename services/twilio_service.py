from twilio.rest import Client
from twilio.base.exceptions import TwilioRestException
from dotenv import load_dotenv
import asyncio
import logging
import os
import re

load_dotenv(override=True)

logger = logging.getLogger(__name__)

DEFAULT_COUNTRY_CODE = "91"


class TwilioService:
    """Text-message delivery for booking updates.

    The sender is ``TWILIO_WHATSAPP_NUMBER``; a value prefixed with
    ``whatsapp:`` sends over WhatsApp, a bare number sends a plain SMS.
    """

    def __init__(self):
        self.account_sid = os.getenv('TWILIO_ACCOUNT_SID')
        self.auth_token = os.getenv('TWILIO_AUTH_TOKEN')
        self.sender = os.getenv('TWILIO_WHATSAPP_NUMBER')

        if not all([self.account_sid, self.auth_token, self.sender]):
            raise ValueError("Missing Twilio credentials")

        self.client = Client(self.account_sid, self.auth_token)

    def format_recipient(self, phone_number: str) -> str:
        digits = re.sub(r'\D', '', phone_number)
        if digits.startswith('0'):
            # local number, assume the default country
            digits = DEFAULT_COUNTRY_CODE + digits[1:]
        recipient = '+' + digits
        if self.sender.startswith('whatsapp:'):
            recipient = f'whatsapp:{recipient}'
        return recipient

    async def send_sms(self, to_number: str, message: str) -> bool:
        recipient = self.format_recipient(to_number)
        try:
            # the Twilio client is blocking
            await asyncio.to_thread(
                self.client.messages.create,
                body=message,
                from_=self.sender,
                to=recipient
            )
        except TwilioRestException as e:
            logger.warning(f"Twilio rejected message to {recipient}: {e.msg}")
            return False
        logger.info(f"Sent booking update to {recipient}")
        return True
