from pydantic import BaseModel
from typing import Optional, Any


class ErrorResponse(BaseModel):
    """
    Standard error response structure.
    """
    error: str
    code: str
    details: Optional[Any] = None


class StatusResponse(BaseModel):
    """
    Response for the verification endpoints.
    """
    status: str
    token: Optional[str] = None
