"""
vendorhub/utils/validation_utils.py

Purpose: Input validation

- Phone number normalization (E.164-ish)
- ObjectId parsing for path parameters and attachment handles
- Media kind classification from declared content types
"""

import re
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId


PHONE_PATTERN = re.compile(r"^\+[1-9]\d{6,14}$")


def normalize_phone_number(phone_number: str) -> str:
    """
    Strips formatting characters and ensures a leading "+".

    Example: "+1 (555) 000-1" -> "+15550001", "15550001" -> "+15550001"
    """
    if phone_number is None:
        return ""
    digits = re.sub(r"[\s\-().]", "", phone_number.strip())
    if digits and not digits.startswith("+"):
        digits = f"+{digits}"
    return digits


def validate_phone_number(phone_number: str) -> bool:
    """
    Checks a normalized phone number looks like an international number.

    Args:
        phone_number: Normalized phone number

    Returns:
        True if valid, False otherwise
    """
    if not phone_number:
        return False
    return bool(PHONE_PATTERN.match(phone_number))


def parse_object_id(value) -> Optional[ObjectId]:
    """
    Converts a string to an ObjectId.

    Returns:
        ObjectId, or None if the value is not a valid id
    """
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str):
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def classify_media(content_type: Optional[str]) -> Optional[str]:
    """
    Maps a declared content type to a media kind.

    Returns:
        "image", "video", or None for anything else
    """
    if not content_type:
        return None
    content_type = content_type.lower()
    if content_type.startswith("image/"):
        return "image"
    if content_type.startswith("video/"):
        return "video"
    return None
