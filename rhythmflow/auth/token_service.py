"""
Stateless session tokens.

Tokens are signed with itsdangerous (HMAC) so they can't be forged or
tampered with, and carry a timestamp so they expire after a fixed
lifetime. Nothing is stored server-side; a token stays valid until it
expires.
"""

import time
from datetime import timedelta
from typing import Callable

from itsdangerous import BadData, SignatureExpired, TimestampSigner, URLSafeTimedSerializer
from pydantic import ValidationError as PydanticValidationError

from ..models.account import SessionClaims
from ..utils.exceptions import ConfigError, InvalidTokenError, TokenExpiredError

TOKEN_LIFETIME = timedelta(hours=2)
TOKEN_SALT = "rhythmflow-session"

Clock = Callable[[], float]


class _ClockedSigner(TimestampSigner):
    """TimestampSigner that reads time from an injected clock"""

    def __init__(self, *args, clock: Clock = time.time, **kwargs):
        super().__init__(*args, **kwargs)
        self._clock = clock

    def get_timestamp(self) -> int:
        return int(self._clock())


class TokenService:
    def __init__(self, secret: str, lifetime: timedelta = TOKEN_LIFETIME, clock: Clock = time.time):
        if not secret:
            raise ConfigError("A token signing secret is required")
        self.lifetime = lifetime
        self._clock = clock
        self._serializer = URLSafeTimedSerializer(
            secret_key=secret,
            salt=TOKEN_SALT,
            signer=_ClockedSigner,
            signer_kwargs={"clock": clock},
        )

    def issue(self, subject: str) -> str:
        claims = SessionClaims(sub=subject, iat=int(self._clock()))
        return self._serializer.dumps(claims.model_dump())

    def verify(self, token: str) -> str:
        """Return the token's subject identifier"""
        max_age = int(self.lifetime.total_seconds())
        try:
            payload = self._serializer.loads(token, max_age=max_age)
        except SignatureExpired as e:
            # itsdangerous also reports a negative age as expired; a token
            # signed in the future was not issued by this clock
            if e.date_signed is not None and e.date_signed.timestamp() > self._clock():
                raise InvalidTokenError()
            raise TokenExpiredError()
        except BadData:
            raise InvalidTokenError()
        try:
            claims = SessionClaims.model_validate(payload)
        except PydanticValidationError:
            raise InvalidTokenError()
        return claims.sub
