"""
vendorhub/services/token_service.py

Purpose: Session token issuing and verification

- Signs bearer tokens bound to a phone number with a fixed lifetime
- Verifies signature, shape and expiry of incoming tokens
- Pure: no database access, no side effects beyond signing
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt

from vendorhub.core.config import Settings
from vendorhub.core.exceptions import TokenInvalidError, TokenMissingError
from vendorhub.core.logging import get_logger

logger = get_logger(__name__)

PHONE_CLAIM = "phoneNumber"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionTokenIssuer:
    """
    Issues and verifies session tokens.

    Tokens carry the phone number, issue time and expiry. Only the phone
    number is trusted on the way back in; whether it still belongs to a
    verified user is decided per request by the ownership guard.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=9),
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.ttl = ttl
        self._clock = clock

    @classmethod
    def from_settings(cls, config: Settings) -> "SessionTokenIssuer":
        return cls(
            secret_key=config.JWT_SECRET_KEY,
            algorithm=config.JWT_ALGORITHM,
            ttl=timedelta(hours=config.TOKEN_TTL_HOURS),
        )

    def issue(self, phone_number: str) -> str:
        issued_at = self._clock()
        payload = {
            PHONE_CLAIM: phone_number,
            "iat": issued_at,
            "exp": issued_at + self.ttl,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: Optional[str]) -> str:
        """
        Returns the phone number embedded in a valid token.

        Raises:
            TokenMissingError: No token was presented
            TokenInvalidError: Bad signature, malformed or expired token
        """
        if not token:
            raise TokenMissingError()

        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            logger.info("Rejected expired session token")
            raise TokenInvalidError() from e
        except jwt.PyJWTError as e:
            logger.warning(f"Rejected session token: {e}")
            raise TokenInvalidError() from e

        phone_number = payload.get(PHONE_CLAIM)
        if not isinstance(phone_number, str) or not phone_number:
            raise TokenInvalidError()

        return phone_number


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Pulls the token out of an "Authorization: Bearer <token>" header.

    Returns:
        The token, or None when the header is absent or has no token part
    """
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) < 2:
        return None
    return parts[1]
