"""
Twilio SMS transport
Sends plain text messages through the Twilio Messages REST API
"""

import logging
from typing import Optional

import httpx

from .config import (
    TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN, TWILIO_PHONE_NUMBER, SMS_TIMEOUT_SECONDS
)
from .errors import ConfigError, TransportError

logger = logging.getLogger(__name__)

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"


class TwilioSMS:
    def __init__(
        self,
        account_sid: Optional[str],
        auth_token: Optional[str],
        from_number: Optional[str],
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.timeout = timeout
        self._client = client

    @property
    def configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)

    def send(self, to: str, body: str) -> str:
        """
        Send SMS via Twilio

        Args:
            to: Recipient phone number in E.164 format
            body: Message content

        Returns:
            Twilio message SID

        Raises:
            ConfigError: credentials are not configured
            TransportError: Twilio rejected the message, or the request failed or timed out
        """
        if not self.configured:
            logger.error("Twilio credentials not configured")
            raise ConfigError()

        url = f"{TWILIO_API_BASE}/Accounts/{self.account_sid}/Messages.json"
        data = {"From": self.from_number, "To": to, "Body": body}

        try:
            if self._client is not None:
                response = self._client.post(
                    url, auth=(self.account_sid, self.auth_token), data=data, timeout=self.timeout
                )
            else:
                with httpx.Client() as client:
                    response = client.post(
                        url, auth=(self.account_sid, self.auth_token), data=data, timeout=self.timeout
                    )
        except httpx.TimeoutException as e:
            logger.error(f"Twilio request timed out after {self.timeout}s: {e}")
            raise TransportError() from e
        except httpx.HTTPError as e:
            logger.error(f"Twilio API error: {e}")
            raise TransportError() from e

        if response.status_code not in (200, 201):
            try:
                error_data = response.json()
            except ValueError:
                error_data = {}
            error_message = error_data.get("message", response.text)
            error_code = error_data.get("code")
            logger.error(f"Twilio API error [{error_code}]: {error_message}")
            raise TransportError()

        message_sid = response.json().get("sid")
        logger.info(f"SMS sent successfully (SID: {message_sid})")
        return message_sid


def get_sms_transport() -> TwilioSMS:
    return TwilioSMS(
        account_sid=TWILIO_ACCOUNT_SID,
        auth_token=TWILIO_AUTH_TOKEN,
        from_number=TWILIO_PHONE_NUMBER,
        timeout=SMS_TIMEOUT_SECONDS,
    )
