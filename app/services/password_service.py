"""Password hashing service (argon2id)."""

import logging

import argon2
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from app.exceptions import ValidationError
from app.models.config import AuthSettings

logger = logging.getLogger("homelab")


class PasswordHasher:
    """Hash and verify passwords with a memory-hard algorithm."""

    def __init__(
        self,
        max_length: int = 1024,
        time_cost: int = 3,
        memory_cost: int = 65536,
        parallelism: int = 4,
    ):
        """
        Initialize password hasher.

        Args:
            max_length: Maximum accepted password length in UTF-8 bytes
            time_cost: argon2 iterations
            memory_cost: argon2 memory usage in KiB
            parallelism: argon2 lanes
        """
        self.max_length = max_length
        self._hasher = argon2.PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
            type=argon2.Type.ID,
        )

    @classmethod
    def from_settings(cls, settings: AuthSettings) -> "PasswordHasher":
        return cls(
            max_length=settings.password_max_length,
            time_cost=settings.time_cost,
            memory_cost=settings.memory_cost,
            parallelism=settings.parallelism,
        )

    def _too_long(self, plaintext: str) -> bool:
        return len(plaintext.encode("utf-8")) > self.max_length

    def hash(self, plaintext: str) -> str:
        """
        Hash a password.

        The returned string encodes algorithm, parameters, salt and digest.

        Raises:
            ValidationError: If the password exceeds the configured length
        """
        if self._too_long(plaintext):
            raise ValidationError(f"Password cannot exceed {self.max_length} bytes")
        return self._hasher.hash(plaintext)

    def verify(self, plaintext: str, digest: str) -> bool:
        """
        Verify a password against a stored digest.

        Never raises: a mismatch, an oversized password or a malformed digest
        all return False.
        """
        if not digest or self._too_long(plaintext):
            return False
        try:
            return self._hasher.verify(digest, plaintext)
        except VerifyMismatchError:
            return False
        except (InvalidHashError, UnicodeEncodeError):
            logger.warning("Stored password hash is malformed, treating as verification failure")
            return False
        except VerificationError as e:
            logger.warning(f"Password verification failed: {e}")
            return False

    def needs_rehash(self, digest: str) -> bool:
        """Check whether a digest was produced with outdated parameters."""
        try:
            return self._hasher.check_needs_rehash(digest)
        except (InvalidHashError, UnicodeEncodeError):
            return False
