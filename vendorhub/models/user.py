"""
vendorhub/models/user.py

Purpose: User document model

- Phone number (unique identity)
- Vendor profile fields supplied at signup
- Verification status (pending -> verified, never back)
"""

from enum import Enum
from datetime import datetime
from typing import Any, Dict, Optional


class VerificationStatus(str, Enum):
    """
    Stored verification status of a user row.
    A phone number without a row is "unregistered" and has no status.
    """

    PENDING = "pending"
    VERIFIED = "verified"


# Profile fields accepted at signup and copied verbatim onto the user row
PROFILE_FIELDS = ("username", "businessName", "name", "email")


def build_profile(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Keeps only known profile fields; missing ones are stored as None."""
    return {key: fields.get(key) for key in PROFILE_FIELDS}


def is_verified(user: Optional[Dict[str, Any]]) -> bool:
    return bool(user) and user.get("status") == VerificationStatus.VERIFIED.value


def pending_user_insert_fields(now: Optional[datetime] = None) -> Dict[str, Any]:
    """Fields written only when the signup upsert creates the row."""
    return {"createdAt": now or datetime.utcnow()}
