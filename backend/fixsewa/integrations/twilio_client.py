"""Twilio integration for customer SMS alerts."""

import asyncio
import logging
from twilio.rest import Client
from requests.exceptions import RequestException
from twilio.base.exceptions import TwilioException, TwilioRestException
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from fixsewa.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


class SmsDeliveryError(Exception):
    """Twilio rejected or failed to accept the message."""


class TwilioClient:
    """Client for Twilio SMS."""

    def __init__(self):
        self.client = Client(
            settings.TWILIO_ACCOUNT_SID,
            settings.TWILIO_AUTH_TOKEN
        ) if settings.TWILIO_ACCOUNT_SID else None
        self.from_number = settings.TWILIO_PHONE_NUMBER

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(SmsDeliveryError),
        reraise=True,
    )
    async def send_sms(self, to: str, message: str) -> dict:
        """
        Send an SMS message.
        Returns dict with 'sid' and 'status'.
        """
        if not self.client:
            # Dev mode - just log
            logger.info("[DEV] SMS to %s: %s", to, message)
            return {"sid": "dev_mode", "status": "sent"}

        try:
            # Twilio SDK is synchronous, run in executor
            loop = asyncio.get_running_loop()
            result = await loop.run_in_executor(
                None,
                lambda: self.client.messages.create(
                    body=message,
                    from_=self.from_number,
                    to=to,
                )
            )

            return {
                "sid": result.sid,
                "status": result.status,
            }

        except TwilioRestException as e:
            raise SmsDeliveryError(f"Twilio SMS error: {e.msg}")
        except TwilioException as e:
            raise SmsDeliveryError(f"Twilio client error: {e}")
        except RequestException as e:
            # Transport failures surface from twilio's requests session unwrapped
            raise SmsDeliveryError(f"Could not reach Twilio: {e}")
