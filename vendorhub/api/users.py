"""
vendorhub/api/users.py

Purpose: Profile endpoint

- GET /user/{id}: a caller may only read their own user row
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from vendorhub.api.deps import get_current_user, get_ownership_guard
from vendorhub.schemas.catalog import serialize_document
from vendorhub.services.ownership_service import OwnershipGuard

router = APIRouter()


@router.get("/user/{user_id}")
async def get_user(
    user_id: str,
    caller: Dict[str, Any] = Depends(get_current_user),
    guard: OwnershipGuard = Depends(get_ownership_guard),
):
    user = await guard.fetch_own_user_profile(user_id, caller)
    return serialize_document(user)
