"""Bearer token validation and JWT issuance for API users."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from jwt import ExpiredSignatureError
from jwt import InvalidTokenError as PyJWTInvalidTokenError
import structlog


logger = structlog.get_logger(__name__)

TOKEN_ISSUER = "tubely-access"


def _utcnow() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(tz=timezone.utc)


class AuthError(Exception):
    """Base class for auth failures."""


class UnauthorizedError(AuthError):
    """Raised when a request carries no usable credentials."""


class InvalidTokenError(UnauthorizedError):
    """Raised when token cannot be decoded."""


class TokenExpiredError(UnauthorizedError):
    """Raised when token is expired."""


@dataclass(slots=True)
class TokenService:
    """Issue and validate HS256 access tokens whose subject is the user id."""

    signing_key: str
    token_ttl: timedelta = timedelta(hours=1)
    issuer: str = TOKEN_ISSUER

    def __post_init__(self) -> None:
        if not self.signing_key:
            raise RuntimeError("JWT signing key is not configured")

    def issue_token(self, user_id: str, *, issued_at: datetime | None = None) -> str:
        """Mint an access token for ``user_id``.

        The service exposes no login route; tokens are minted by the account
        system that shares ``signing_key``, and by tests.
        """
        now = issued_at or _utcnow()
        payload: dict[str, Any] = {
            "iss": self.issuer,
            "sub": user_id,
            "iat": int(now.timestamp()),
            "exp": int((now + self.token_ttl).timestamp()),
        }
        return jwt.encode(payload, self.signing_key, algorithm="HS256")

    def validate(self, token: str) -> str:
        """Decode ``token`` and return the user id it was issued for."""
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self.signing_key,
                algorithms=["HS256"],
                issuer=self.issuer,
                options={"require": ["exp", "iat", "sub", "iss"]},
            )
        except ExpiredSignatureError as exc:
            logger.info("auth.token.expired")
            raise TokenExpiredError("Token expired") from exc
        except PyJWTInvalidTokenError as exc:
            logger.warning("auth.token.invalid", reason=str(exc))
            raise InvalidTokenError("Invalid token") from exc

        user_id = payload.get("sub")
        if not isinstance(user_id, str) or not user_id:
            raise InvalidTokenError("Token subject is missing")
        return user_id


__all__ = [
    "AuthError",
    "InvalidTokenError",
    "TOKEN_ISSUER",
    "TokenExpiredError",
    "TokenService",
    "UnauthorizedError",
]
