from datetime import datetime, timedelta, timezone

import jwt
import pytest

from src.app.auth.auth_service import (
    InvalidTokenError,
    TokenExpiredError,
    TokenService,
    UnauthorizedError,
)


def test_issue_and_validate_round_trip():
    service = TokenService(signing_key="secret")

    token = service.issue_token("user-42")

    assert service.validate(token) == "user-42"
    claims = jwt.decode(token, "secret", algorithms=["HS256"], issuer="tubely-access")
    assert claims["sub"] == "user-42"


def test_expired_token_is_rejected():
    service = TokenService(signing_key="secret", token_ttl=timedelta(minutes=5))
    issued = datetime.now(tz=timezone.utc) - timedelta(hours=1)

    token = service.issue_token("user-42", issued_at=issued)

    with pytest.raises(TokenExpiredError):
        service.validate(token)


def test_wrong_key_or_issuer_is_invalid():
    foreign_key = TokenService(signing_key="other").issue_token("user-42")
    foreign_issuer = TokenService(signing_key="secret", issuer="someone-else").issue_token("user-42")
    service = TokenService(signing_key="secret")

    with pytest.raises(InvalidTokenError):
        service.validate(foreign_key)
    with pytest.raises(InvalidTokenError):
        service.validate(foreign_issuer)
    with pytest.raises(InvalidTokenError):
        service.validate("garbage")


def test_token_errors_are_unauthorized():
    assert issubclass(InvalidTokenError, UnauthorizedError)
    assert issubclass(TokenExpiredError, UnauthorizedError)


def test_empty_signing_key_is_rejected():
    with pytest.raises(RuntimeError):
        TokenService(signing_key="")
