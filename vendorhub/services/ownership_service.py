"""
vendorhub/services/ownership_service.py

Purpose: Caller resolution and ownership checks

- Maps a token's phone number to a verified user on every request
- Confirms a record belongs to the caller
- Guards profile reads so a caller only sees their own user row
"""

from typing import Any, Dict

from vendorhub.core.exceptions import CallerNotVerifiedError, ForbiddenError, NotOwnerError
from vendorhub.core.logging import get_logger, mask_phone
from vendorhub.models.catalog import OWNER_FIELD
from vendorhub.models.user import VerificationStatus
from vendorhub.utils.validation_utils import parse_object_id

logger = get_logger(__name__)


class OwnershipGuard:
    """
    Resolves callers and scopes access to their own data.

    Nothing is cached: losing verified status revokes access on the next
    request without touching issued tokens.
    """

    def __init__(self, users):
        self.users = users

    async def resolve_caller(self, phone_number: str) -> Dict[str, Any]:
        """
        Returns the verified user behind a phone number.

        Raises:
            CallerNotVerifiedError: No verified user for the number
        """
        user = await self.users.find_one(
            {"phoneNumber": phone_number, "status": VerificationStatus.VERIFIED.value}
        )
        if not user:
            logger.info(f"Caller {mask_phone(phone_number)} is not a verified user")
            raise CallerNotVerifiedError()
        return user

    @staticmethod
    def authorize_owned(user_id, record: Dict[str, Any]) -> Dict[str, Any]:
        """
        Raises NotOwnerError unless the record belongs to user_id.
        """
        if not record or record.get(OWNER_FIELD) != user_id:
            raise NotOwnerError()
        return record

    async def fetch_own_user_profile(self, requested_id: str, caller: Dict[str, Any]) -> Dict[str, Any]:
        """
        Returns the caller's own user row.

        Both the requested id and the stored phone number must match the
        caller, otherwise ForbiddenError.
        """
        object_id = parse_object_id(requested_id)
        if object_id is None or object_id != caller.get("_id"):
            raise ForbiddenError()

        user = await self.users.find_one(
            {"_id": object_id, "phoneNumber": caller.get("phoneNumber")}
        )
        if not user:
            raise ForbiddenError()
        return user
