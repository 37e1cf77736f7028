"""
vendorhub/services/otp_service.py

Purpose: One-time code delivery and checking via Twilio Verify

- Sends a verification code to a phone number over a channel (sms, call, ...)
- Checks a submitted code and returns the provider's verdict
- Provider failures raise OTPProviderError; rejected codes are verdicts, not errors
"""

from typing import Optional, Protocol

import httpx

from vendorhub.core.config import Settings, settings as default_settings
from vendorhub.core.exceptions import OTPProviderError
from vendorhub.core.logging import get_logger, mask_phone

logger = get_logger(__name__)


class OTPProvider(Protocol):
    """Narrow interface the verification flow depends on."""

    async def send_code(self, phone_number: str, channel: Optional[str] = None) -> str:
        ...

    async def check_code(self, phone_number: str, code: str) -> str:
        ...


class TwilioVerifyService:
    """Service for sending and checking OTP codes via the Twilio Verify API"""

    def __init__(self, config: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        config = config or default_settings
        self.account_sid = config.TWILIO_ACCOUNT_SID
        self.auth_token = config.TWILIO_AUTH_TOKEN
        self.verify_sid = config.TWILIO_VERIFY_SID
        self.default_channel = config.OTP_CHANNEL
        self.timeout = config.OTP_PROVIDER_TIMEOUT
        self.base_url = f"{config.TWILIO_VERIFY_BASE_URL}/Services/{self.verify_sid}"
        self._transport = transport

    async def _post(self, path: str, data: dict) -> httpx.Response:
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                return await client.post(
                    f"{self.base_url}/{path}",
                    data=data,
                    auth=(self.account_sid or "", self.auth_token or ""),
                    timeout=self.timeout
                )
        except httpx.TimeoutException as e:
            logger.error("Twilio Verify API timeout")
            raise OTPProviderError("OTP provider timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"Twilio Verify API unreachable: {e}")
            raise OTPProviderError("OTP provider unreachable") from e

    async def send_code(self, phone_number: str, channel: Optional[str] = None) -> str:
        """
        Asks Twilio to deliver a fresh code to the phone number.

        Args:
            phone_number: Recipient phone (+15550001)
            channel: Delivery channel, defaults to OTP_CHANNEL

        Returns:
            Provider status of the verification (normally "pending")
        """
        channel = channel or self.default_channel
        logger.info(f"📤 Sending {channel} code to {mask_phone(phone_number)}")

        response = await self._post("Verifications", {"To": phone_number, "Channel": channel})

        if response.status_code not in (200, 201):
            logger.error(f"❌ Twilio Verify error: {response.status_code} - {response.text}")
            raise OTPProviderError(
                f"Twilio Verify API error: {response.status_code}",
                details={"provider_status": response.status_code}
            )

        status = response.json().get("status", "pending")
        logger.info(f"✅ Code dispatched: status={status}")
        return status

    async def check_code(self, phone_number: str, code: str) -> str:
        """
        Asks Twilio whether the code matches the pending verification.

        Returns:
            Provider verdict ("approved", "pending", "canceled", ...)
        """
        response = await self._post("VerificationCheck", {"To": phone_number, "Code": code})

        # No pending verification (expired, already approved, never sent)
        if response.status_code == 404:
            logger.warning(f"No pending verification for {mask_phone(phone_number)}")
            return "not_found"

        if response.status_code not in (200, 201):
            logger.error(f"❌ Twilio Verify error: {response.status_code} - {response.text}")
            raise OTPProviderError(
                f"Twilio Verify API error: {response.status_code}",
                details={"provider_status": response.status_code}
            )

        verdict = response.json().get("status", "unknown")
        logger.info(f"Code check for {mask_phone(phone_number)}: {verdict}")
        return verdict

    def is_configured(self) -> bool:
        """Check if Twilio Verify is properly configured"""
        return bool(
            self.account_sid
            and self.auth_token
            and self.verify_sid
        )
