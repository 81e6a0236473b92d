"""JWT token issuing and verification.

Learn: JWT (JSON Web Token) provides stateless authentication. The token
carries the user id in "sub" and expires 30 days after issuance.
There is no revocation list — short of rotating the signing key, a token
stays valid until "exp".

The signer is built once from Settings when the app is created and lives
on app.state, so the key is injected configuration, not a module global.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from debtbook.config import Settings
from debtbook.errors import InvalidToken


class TokenService:
    """Issues and verifies identity tokens bound to a user id."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(days=30),
    ):
        if not secret:
            raise ValueError("Token signing key must not be empty")
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret=settings.signing_key,
            algorithm=settings.jwt_algorithm,
            ttl=timedelta(days=settings.token_expire_days),
        )

    def issue(self, user_id: str, now: Optional[datetime] = None) -> str:
        """Create a signed token for user_id, valid for self.ttl."""
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self.ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        """Verify a token and return the user id it was issued for.

        Raises InvalidToken on a bad signature, malformed token,
        missing subject, or an elapsed validity window.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise InvalidToken("Token has expired")
        except jwt.InvalidTokenError as e:
            raise InvalidToken(f"Invalid token: {e}")

        return payload["sub"]
