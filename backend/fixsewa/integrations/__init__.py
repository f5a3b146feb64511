"""External service integrations."""

from fixsewa.integrations.twilio_client import TwilioClient, SmsDeliveryError

__all__ = [
    "TwilioClient",
    "SmsDeliveryError",
]
