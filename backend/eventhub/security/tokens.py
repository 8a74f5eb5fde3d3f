"""Bearer token issuance and validation (HS256 JWT).

Two read paths:

- ``validate`` answers yes/no and never raises; used where an invalid token
  just means "anonymous" (throttle keys, optional authentication).
- ``extract_subject`` raises a distinct ``Unauthenticated`` subclass for
  malformed, expired and badly signed tokens; used on protected routes.
"""
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from eventhub.config import settings
from eventhub.exceptions import Unauthenticated

logger = logging.getLogger(__name__)


class TokenMalformed(Unauthenticated):
    pass


class TokenExpired(Unauthenticated):
    pass


class TokenSignatureInvalid(Unauthenticated):
    pass


class TokenIssuer:
    def __init__(self, secret: str, algorithm: str = "HS256", expires_in: Optional[timedelta] = None):
        self.secret = secret
        self.algorithm = algorithm
        self.expires_in = expires_in if expires_in is not None else timedelta(seconds=settings.JWT_EXPIRATION_SECONDS)

    def issue(self, subject: str) -> str:
        """Sign a token for ``subject``; the ``jti`` nonce keeps back-to-back tokens distinct."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": subject,
            "iat": now,
            "exp": now + self.expires_in,
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def _decode(self, token: Optional[str]) -> dict:
        if token is None or not token.strip():
            raise TokenMalformed("Token is empty")
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "iat", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpired("Token has expired")
        except jwt.InvalidSignatureError:
            raise TokenSignatureInvalid("Invalid token signature")
        except jwt.InvalidTokenError:
            raise TokenMalformed("Invalid token")

    def extract_subject(self, token: Optional[str]) -> str:
        return self._decode(token)["sub"]

    def validate(self, token: Optional[str]) -> bool:
        try:
            self._decode(token)
        except Unauthenticated as e:
            logger.debug("Rejected bearer token: %s", e.message)
            return False
        return True


token_issuer = TokenIssuer(
    secret=settings.JWT_SECRET,
    algorithm=settings.JWT_ALGORITHM,
    expires_in=timedelta(seconds=settings.JWT_EXPIRATION_SECONDS),
)
