"""
vendorhub/api/auth.py

Purpose: Unauthenticated verification endpoints

- POST /signup, /verify-signup: create and verify a vendor account
- POST /login, /verify-login: prove control of the number, get a session token
"""

from fastapi import APIRouter, Depends

from vendorhub.api.deps import get_verification_service
from vendorhub.core.logging import get_logger
from vendorhub.schemas.auth import LoginRequest, SignupRequest, VerifyCodeRequest
from vendorhub.schemas.response import StatusResponse
from vendorhub.services.verification_service import SignupOutcome, VerificationService
from vendorhub.utils.constants import (
    LOGIN_CODE_SENT,
    LOGIN_SUCCESSFUL,
    SIGNUP_CODE_RESENT,
    SIGNUP_CODE_SENT,
    SIGNUP_SUCCESSFUL,
)

logger = get_logger(__name__)
router = APIRouter()


@router.post("/signup", response_model=StatusResponse, response_model_exclude_none=True)
async def signup(
    payload: SignupRequest,
    verification: VerificationService = Depends(get_verification_service),
):
    """
    Sends a signup code. Re-sends it if the number is still pending.
    """
    outcome = await verification.begin_signup(
        payload.phoneNumber,
        payload.model_dump(exclude={"phoneNumber"})
    )
    status = SIGNUP_CODE_RESENT if outcome == SignupOutcome.CODE_RESENT else SIGNUP_CODE_SENT
    return StatusResponse(status=status)


@router.post("/verify-signup", response_model=StatusResponse, response_model_exclude_none=True)
async def verify_signup(
    payload: VerifyCodeRequest,
    verification: VerificationService = Depends(get_verification_service),
):
    await verification.confirm_signup(payload.phoneNumber, payload.otpCode)
    return StatusResponse(status=SIGNUP_SUCCESSFUL)


@router.post("/login", response_model=StatusResponse, response_model_exclude_none=True)
async def login(
    payload: LoginRequest,
    verification: VerificationService = Depends(get_verification_service),
):
    await verification.begin_login(payload.phoneNumber)
    return StatusResponse(status=LOGIN_CODE_SENT)


@router.post("/verify-login", response_model=StatusResponse, response_model_exclude_none=True)
async def verify_login(
    payload: VerifyCodeRequest,
    verification: VerificationService = Depends(get_verification_service),
):
    """
    Checks the login code and returns a 9-hour bearer token.
    """
    token = await verification.confirm_login(payload.phoneNumber, payload.otpCode)
    return StatusResponse(status=LOGIN_SUCCESSFUL, token=token)
