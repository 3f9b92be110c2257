# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed access tokens.

Tokens are HS256 JWTs carrying the user id in the ``id`` claim together with
``iat`` and ``exp``. Revocation is not tracked; a token stays valid until it
expires.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import jwt as pyjwt

from apistarter.domain.users.repositories import TokenIssuer
from apistarter.shared.errors import ApiError

ALGORITHM = "HS256"


class JwtTokenIssuer(TokenIssuer):
    def __init__(
        self,
        secret: str,
        expires_in_seconds: int,
        *,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._secret = secret
        self._ttl = timedelta(seconds=expires_in_seconds)
        self._clock = clock

    def issue(self, user_id: int) -> str:
        now = self._clock()
        payload = {"id": user_id, "iat": now, "exp": now + self._ttl}
        return pyjwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def decode(self, token: str) -> int:
        """Return the user id embedded in ``token``.

        Raises:
            ApiError: 401 when the token is expired, tampered with or malformed.
        """
        try:
            payload = pyjwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp", "iat"]},
            )
        except pyjwt.PyJWTError as exc:
            raise ApiError.unauthorized("Invalid token") from exc

        user_id = payload.get("id")
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise ApiError.unauthorized("Invalid token")
        return user_id
