# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Stateless session tokens signed with the server secret."""

from __future__ import annotations

from datetime import UTC, datetime

import jwt

from blogger.domain.users.entities import Identity
from blogger.domain.users.repositories import TokenService
from blogger.shared.errors import AuthenticationError
from blogger.shared.logging import logger


class JwtTokenService(TokenService):
    """HS256 JWT carrying ``{username, id, iat}``.

    No expiry is set or enforced; a token stays valid for as long as the
    secret does. Logout is the client discarding its cookie.
    """

    def __init__(self, secret: str, *, algorithm: str = "HS256") -> None:
        if not secret:
            raise ValueError("token secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm

    def issue(self, user_id: int, username: str) -> str:
        issued_at = int(datetime.now(UTC).timestamp())
        payload = {"username": username, "id": user_id, "iat": issued_at}
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str | None) -> Identity:
        if not token:
            raise AuthenticationError("missing_token")
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["id", "username"]},
            )
        except jwt.InvalidTokenError as exc:
            logger.warning(f"auth.token: rejected ({type(exc).__name__})")
            raise AuthenticationError("invalid_token") from exc

        user_id = claims.get("id")
        username = claims.get("username")
        # bool is an int subclass; ids must be real ints, never strings that look alike
        if type(user_id) is not int or not isinstance(username, str):
            logger.warning("auth.token: rejected (malformed claims)")
            raise AuthenticationError("invalid_token")

        iat = claims.get("iat")
        issued_at = datetime.fromtimestamp(iat, UTC) if isinstance(iat, int) else None
        return Identity(user_id=user_id, username=username, issued_at=issued_at)


__all__ = ["JwtTokenService"]
