"""
vendorhub/services/verification_service.py

Purpose: Phone number verification state machine

    unregistered (no row) -> pending -> verified (terminal)

- Signup creates or reuses a pending row and dispatches a code
- Signup confirmation promotes pending -> verified exactly once
- Login requires a verified row; login confirmation issues a session token
- Every transition is a conditional write keyed on phoneNumber (+ status)
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict

from pymongo.errors import DuplicateKeyError

from vendorhub.core.exceptions import (
    AlreadyVerifiedError,
    NotPendingError,
    NotRegisteredError,
    VerificationRejectedError,
)
from vendorhub.core.logging import get_logger, LogContext, mask_phone
from vendorhub.models.user import (
    VerificationStatus,
    build_profile,
    is_verified,
    pending_user_insert_fields,
)
from vendorhub.services.otp_service import OTPProvider
from vendorhub.services.token_service import SessionTokenIssuer
from vendorhub.utils.constants import OTP_APPROVED

logger = get_logger(__name__)


class SignupOutcome(str, Enum):
    CODE_SENT = "code_sent"
    CODE_RESENT = "code_resent"


class VerificationService:
    """
    Drives a phone number through signup and login verification.

    Args:
        users: users collection
        otp_provider: sends and checks one-time codes
        token_issuer: signs session tokens after a successful login
    """

    def __init__(self, users, otp_provider: OTPProvider, token_issuer: SessionTokenIssuer):
        self.users = users
        self.otp_provider = otp_provider
        self.token_issuer = token_issuer

    async def begin_signup(self, phone_number: str, profile: Dict[str, Any]) -> SignupOutcome:
        """
        Starts (or restarts) signup for a phone number.

        Raises:
            AlreadyVerifiedError: The number already completed signup
        """
        with LogContext(phone_number=mask_phone(phone_number)):
            existing = await self.users.find_one({"phoneNumber": phone_number})

            if existing:
                if is_verified(existing):
                    logger.info("Signup attempted for an already verified number")
                    raise AlreadyVerifiedError()

                await self.otp_provider.send_code(phone_number)
                logger.info("Signup code re-sent to pending user")
                return SignupOutcome.CODE_RESENT

            await self.otp_provider.send_code(phone_number)

            try:
                # status is part of the filter, so an insert lands as pending and
                # a verified row can never be matched and overwritten
                await self.users.update_one(
                    {"phoneNumber": phone_number, "status": VerificationStatus.PENDING.value},
                    {
                        "$set": build_profile(profile),
                        "$setOnInsert": pending_user_insert_fields(),
                    },
                    upsert=True
                )
            except DuplicateKeyError:
                # Lost a race against a concurrent signup or confirmation
                current = await self.users.find_one({"phoneNumber": phone_number})
                if is_verified(current):
                    raise AlreadyVerifiedError()
                logger.info("Concurrent signup already created the pending user")
                return SignupOutcome.CODE_RESENT

            logger.info("Pending user stored, signup code sent")
            return SignupOutcome.CODE_SENT

    async def confirm_signup(self, phone_number: str, code: str) -> None:
        """
        Checks the signup code and marks the user verified.

        Raises:
            VerificationRejectedError: Provider did not approve the code
            NotPendingError: No pending user (never signed up, or already verified)
        """
        with LogContext(phone_number=mask_phone(phone_number)):
            verdict = await self.otp_provider.check_code(phone_number, code)
            if verdict != OTP_APPROVED:
                logger.info(f"Signup code rejected: {verdict}")
                raise VerificationRejectedError(verdict)

            result = await self.users.update_one(
                {"phoneNumber": phone_number, "status": VerificationStatus.PENDING.value},
                {
                    "$set": {
                        "status": VerificationStatus.VERIFIED.value,
                        "verifiedAt": datetime.utcnow(),
                    }
                }
            )

            if result.matched_count == 0:
                logger.warning("Signup confirmation found no pending user")
                raise NotPendingError()

            logger.info("User verified")

    async def begin_login(self, phone_number: str) -> None:
        """
        Sends a login code to a verified user.

        Raises:
            NotRegisteredError: No verified user for this number
        """
        with LogContext(phone_number=mask_phone(phone_number)):
            user = await self._find_verified(phone_number)
            if not user:
                raise NotRegisteredError()

            await self.otp_provider.send_code(phone_number)
            logger.info("Login code sent")

    async def confirm_login(self, phone_number: str, code: str) -> str:
        """
        Checks the login code and returns a session token.

        Raises:
            VerificationRejectedError: Provider did not approve the code
            NotRegisteredError: User is not (or no longer) verified
        """
        with LogContext(phone_number=mask_phone(phone_number)):
            verdict = await self.otp_provider.check_code(phone_number, code)
            if verdict != OTP_APPROVED:
                logger.info(f"Login code rejected: {verdict}")
                raise VerificationRejectedError(verdict)

            user = await self._find_verified(phone_number)
            if not user:
                raise NotRegisteredError()

            logger.info("Login successful, issuing session token")
            return self.token_issuer.issue(phone_number)

    async def _find_verified(self, phone_number: str):
        return await self.users.find_one(
            {"phoneNumber": phone_number, "status": VerificationStatus.VERIFIED.value}
        )
