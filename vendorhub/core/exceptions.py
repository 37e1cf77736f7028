from typing import Optional, Any


class VendorHubError(Exception):
    """
    Base exception for the VendorHub application.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------

class AuthenticationError(VendorHubError):
    """
    Raised when authentication fails.
    """
    def __init__(self, message: str = "Authentication failed", code: str = "AUTHENTICATION_FAILED",
                 status_code: int = 401, details: Optional[Any] = None):
        super().__init__(message, code=code, status_code=status_code, details=details)


class TokenMissingError(AuthenticationError):
    """
    Raised when an authenticated endpoint receives no bearer token.
    """
    def __init__(self, message: str = "Token required"):
        super().__init__(message, code="TOKEN_REQUIRED", status_code=401)


class TokenInvalidError(AuthenticationError):
    """
    Raised when a bearer token fails signature, format or expiry checks.
    """
    def __init__(self, message: str = "Token is invalid"):
        super().__init__(message, code="TOKEN_INVALID", status_code=403)


class NotVerifiedError(VendorHubError):
    """
    Raised when a phone number has no verified user behind it.
    """
    def __init__(self, message: str = "User not registered or not verified"):
        super().__init__(message, code="NOT_VERIFIED", status_code=400)


class CallerNotVerifiedError(NotVerifiedError):
    """Authenticated caller whose phone number no longer maps to a verified user."""


class NotRegisteredError(NotVerifiedError):
    """Login attempted for a phone number that never completed signup."""


class ForbiddenError(VendorHubError):
    """
    Raised when an authenticated caller asks for something that is not theirs.
    """
    def __init__(self, message: str = "Not authorized to access this information"):
        super().__init__(message, code="FORBIDDEN", status_code=403)


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------

class ResourceNotFoundError(VendorHubError):
    """
    Raised when a requested resource is not found.
    """
    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)


class NotOwnerError(ResourceNotFoundError):
    """
    Raised when a record exists but belongs to someone else.
    Rendered exactly like a missing record.
    """


class UpdateFailedError(VendorHubError):
    """
    Raised when a write reports zero modified documents.
    """
    def __init__(self, message: str = "Update failed"):
        super().__init__(message, code="UPDATE_FAILED", status_code=500)


class StorageError(VendorHubError):
    """
    Raised when the database or blob store rejects a write.
    """
    def __init__(self, message: str = "Storage failure", details: Optional[Any] = None):
        super().__init__(message, code="STORAGE_FAILURE", status_code=500, details=details)


class PayloadTooLargeError(VendorHubError):
    """
    Raised when an uploaded file exceeds the per-file ceiling.
    """
    def __init__(self, message: str = "File too large", details: Optional[Any] = None):
        super().__init__(message, code="PAYLOAD_TOO_LARGE", status_code=413, details=details)


# ---------------------------------------------------------------------------
# Verification state machine
# ---------------------------------------------------------------------------

class AlreadyVerifiedError(VendorHubError):
    """
    Raised when signup is attempted for a phone number that is already verified.
    """
    def __init__(self, message: str = "You have already signed up and are verified."):
        super().__init__(message, code="ALREADY_VERIFIED", status_code=400)


class NotPendingError(VendorHubError):
    """
    Raised when a signup confirmation finds no pending user to promote.
    """
    def __init__(self, message: str = "User not registered or already verified"):
        super().__init__(message, code="NOT_PENDING", status_code=400)


class VerificationRejectedError(VendorHubError):
    """
    Raised when the OTP provider does not approve a code.
    """
    def __init__(self, verdict: str):
        self.verdict = verdict
        super().__init__(
            "Verification code rejected",
            code="VERIFICATION_REJECTED",
            status_code=400,
            details={"status": verdict},
        )


class ValidationError(VendorHubError):
    """
    Raised when input validation fails.
    """
    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=422, details=details)


class OTPProviderError(VendorHubError):
    """
    Raised when the OTP provider cannot be reached or answers with an error.
    Surfaced as a generic internal error.
    """
    def __init__(self, message: str = "OTP provider error", details: Optional[Any] = None):
        super().__init__(message, code="OTP_PROVIDER_ERROR", status_code=500, details=details)
