"""
vendorhub/api/deps.py

Purpose: Dependency wiring for the routers

- Hands the database, GridFS bucket, OTP provider and token issuer to the
  services (tests replace these through app.dependency_overrides)
- Bearer token -> phone number -> verified caller, on every request
"""

from functools import lru_cache
from typing import Any, Dict, Optional

from fastapi import Depends, Header

from vendorhub.core.config import settings
from vendorhub.db import mongo
from vendorhub.db.mongo import USERS_COLLECTION
from vendorhub.models.catalog import CatalogKind
from vendorhub.services.attachment_service import AttachmentService
from vendorhub.services.catalog_service import CatalogService
from vendorhub.services.otp_service import TwilioVerifyService
from vendorhub.services.ownership_service import OwnershipGuard
from vendorhub.services.token_service import SessionTokenIssuer, extract_bearer_token
from vendorhub.services.verification_service import VerificationService


def get_db():
    return mongo.get_database()


def get_bucket():
    return mongo.get_gridfs_bucket()


@lru_cache
def get_otp_provider():
    return TwilioVerifyService(settings)


@lru_cache
def get_token_issuer() -> SessionTokenIssuer:
    return SessionTokenIssuer.from_settings(settings)


def get_verification_service(
    db=Depends(get_db),
    otp_provider=Depends(get_otp_provider),
    token_issuer: SessionTokenIssuer = Depends(get_token_issuer),
) -> VerificationService:
    return VerificationService(db[USERS_COLLECTION], otp_provider, token_issuer)


def get_ownership_guard(db=Depends(get_db)) -> OwnershipGuard:
    return OwnershipGuard(db[USERS_COLLECTION])


def get_attachment_service(bucket=Depends(get_bucket)) -> AttachmentService:
    return AttachmentService(bucket)


async def get_caller_phone_number(
    authorization: Optional[str] = Header(default=None),
    token_issuer: SessionTokenIssuer = Depends(get_token_issuer),
) -> str:
    """Validates the bearer token and returns its phone number."""
    return token_issuer.verify(extract_bearer_token(authorization))


async def get_current_user(
    phone_number: str = Depends(get_caller_phone_number),
    guard: OwnershipGuard = Depends(get_ownership_guard),
) -> Dict[str, Any]:
    """Resolves the verified user behind the token."""
    return await guard.resolve_caller(phone_number)


def catalog_service_for(kind: CatalogKind):
    """Builds a dependency yielding the CatalogService for one kind."""

    def get_catalog_service(db=Depends(get_db)) -> CatalogService:
        return CatalogService(db[kind.collection], kind)

    get_catalog_service.__name__ = f"get_{kind.name}_service"
    return get_catalog_service
