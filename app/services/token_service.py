"""Session token service (signed JWT)."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from jose import JWTError, jwt

from app.exceptions import AuthError, ConfigurationError
from app.models.auth import IssuedToken, TokenPayload

logger = logging.getLogger("homelab")

JWT_ALGORITHM = "HS256"
INVALID_TOKEN_MESSAGE = "Invalid or expired token"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """
    Issues and verifies signed, time-limited session tokens.

    Tokens are self-contained: there is no server-side session store and no
    revocation list. Expiration is the only way a token stops being valid.
    Rotating ``secret_key`` invalidates every outstanding token.
    """

    def __init__(
        self,
        secret_key: Optional[str],
        expiry_hours: int = 24,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize token service.

        Args:
            secret_key: HMAC signing secret, loaded once at startup
            expiry_hours: Token lifetime
            clock: Returns the current aware UTC time

        Raises:
            ConfigurationError: If the secret is missing or empty
        """
        if not secret_key:
            raise ConfigurationError(
                "Signing secret is not configured. Set HOMELAB_SECRET_KEY or auth.secret_key in config.yaml."
            )
        if expiry_hours <= 0:
            raise ConfigurationError("auth.token_expiry_hours must be positive")

        self._secret_key = secret_key
        self.ttl = timedelta(hours=expiry_hours)
        self._clock = clock or _utcnow

    def issue(self, user_id: int) -> IssuedToken:
        """Sign a token for the given user id."""
        now = self._clock()
        expires_at = now + self.ttl
        claims = {
            "sub": str(user_id),
            "userId": user_id,
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(claims, self._secret_key, algorithm=JWT_ALGORITHM)
        return IssuedToken(token=token, expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc))

    def verify(self, token: str) -> TokenPayload:
        """
        Verify signature and expiration of a token.

        Raises:
            AuthError: If the signature is invalid, the payload is malformed
                or the token has expired
        """
        try:
            # Expiry is checked against our own clock below
            claims = jwt.decode(
                token,
                self._secret_key,
                algorithms=[JWT_ALGORITHM],
                options={"verify_exp": False},
            )
        except JWTError as e:
            logger.debug(f"Token rejected: {e}")
            raise AuthError(INVALID_TOKEN_MESSAGE)

        user_id = claims.get("userId")
        exp = claims.get("exp")
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise AuthError(INVALID_TOKEN_MESSAGE)
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            raise AuthError(INVALID_TOKEN_MESSAGE)

        if exp <= self._clock().timestamp():
            logger.debug(f"Token for user {user_id} expired")
            raise AuthError(INVALID_TOKEN_MESSAGE)

        return TokenPayload(user_id=user_id, expires_at=datetime.fromtimestamp(exp, tz=timezone.utc))
