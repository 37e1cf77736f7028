"""
vendorhub/schemas/auth.py

Purpose: Request schemas for the signup/login verification endpoints

- Normalizes phone numbers before they reach the state machine
- Profile fields are optional; only phoneNumber is required
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional

from vendorhub.utils.validation_utils import normalize_phone_number, validate_phone_number


class PhoneNumberRequest(BaseModel):
    phoneNumber: str = Field(..., description="Phone number in international format")

    @field_validator("phoneNumber")
    @classmethod
    def check_phone_number(cls, v: str) -> str:
        v = normalize_phone_number(v)
        if not validate_phone_number(v):
            raise ValueError("phoneNumber must be an international phone number, e.g. +15550001")
        return v


class SignupRequest(PhoneNumberRequest):
    username: Optional[str] = None
    businessName: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "phoneNumber": "+15550001",
                "username": "alice",
                "businessName": "Alice Events",
                "name": "Alice",
                "email": "alice@example.com"
            }
        }
    }


class LoginRequest(PhoneNumberRequest):
    pass


class VerifyCodeRequest(PhoneNumberRequest):
    otpCode: str = Field(..., min_length=1, description="Code received over SMS")
