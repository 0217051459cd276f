from __future__ import annotations

import jwt
import pytest

from blogger.infrastructure.auth import JwtTokenService
from blogger.shared.errors import AuthenticationError

SECRET = "test-secret-0123456789abcdef0123456789"


@pytest.fixture()
def tokens() -> JwtTokenService:
    return JwtTokenService(SECRET)


def test_issue_then_verify_returns_identity(tokens: JwtTokenService) -> None:
    identity = tokens.verify(tokens.issue(7, "alice"))

    assert identity.user_id == 7
    assert identity.username == "alice"
    assert identity.issued_at is not None


def test_payload_carries_username_id_and_iat(tokens: JwtTokenService) -> None:
    claims = jwt.decode(tokens.issue(7, "alice"), SECRET, algorithms=["HS256"])

    assert set(claims) == {"username", "id", "iat"}


@pytest.mark.parametrize("token", [None, ""])
def test_missing_token_is_unauthorized(tokens: JwtTokenService, token: str | None) -> None:
    with pytest.raises(AuthenticationError) as exc_info:
        tokens.verify(token)

    assert exc_info.value.context == {"reason": "missing_token"}


def test_token_signed_with_other_secret_is_rejected(tokens: JwtTokenService) -> None:
    forged = JwtTokenService("another-secret-0123456789abcdef012345").issue(7, "alice")

    with pytest.raises(AuthenticationError):
        tokens.verify(forged)


def test_garbage_token_is_rejected(tokens: JwtTokenService) -> None:
    with pytest.raises(AuthenticationError):
        tokens.verify("not-a-jwt")


def test_non_integer_id_is_rejected(tokens: JwtTokenService) -> None:
    token = jwt.encode({"id": "7", "username": "alice", "iat": 0}, SECRET, algorithm="HS256")

    with pytest.raises(AuthenticationError):
        tokens.verify(token)


def test_missing_username_claim_is_rejected(tokens: JwtTokenService) -> None:
    token = jwt.encode({"id": 7}, SECRET, algorithm="HS256")

    with pytest.raises(AuthenticationError):
        tokens.verify(token)


def test_empty_secret_is_refused() -> None:
    with pytest.raises(ValueError):
        JwtTokenService("")
