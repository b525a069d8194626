"""User service: authentication, profile updates and bootstrap."""

import logging
import re
import secrets
from typing import Optional

from app.exceptions import AuthError, NotFoundError, ValidationError
from app.models.auth import IssuedToken, TokenPayload, UserView
from app.models.config import AuthSettings
from app.services.password_service import PasswordHasher
from app.services.token_service import TokenService
from app.services.user_store import UserStore

logger = logging.getLogger("homelab")

INVALID_CREDENTIALS_MESSAGE = "Invalid username or password"
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 128


def validate_username(username: str) -> str:
    """
    Validate and trim a username.

    Raises:
        ValidationError: If the username is too short, too long or contains
            characters other than letters, digits, underscores and hyphens
    """
    trimmed = username.strip()
    if len(trimmed) < USERNAME_MIN_LENGTH:
        raise ValidationError(f"Username must be at least {USERNAME_MIN_LENGTH} characters long")
    if len(trimmed) > USERNAME_MAX_LENGTH:
        raise ValidationError(f"Username cannot exceed {USERNAME_MAX_LENGTH} characters")
    if not USERNAME_PATTERN.match(trimmed):
        raise ValidationError("Username can only contain letters, numbers, underscores, and hyphens")
    return trimmed


def validate_new_password(password: str) -> str:
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
    if len(password) > PASSWORD_MAX_LENGTH:
        raise ValidationError(f"Password cannot exceed {PASSWORD_MAX_LENGTH} characters")
    return password


class UserService:
    """Orchestrates the credential store, password hasher and token service."""

    def __init__(
        self,
        store: UserStore,
        hasher: PasswordHasher,
        tokens: TokenService,
        settings: Optional[AuthSettings] = None,
    ):
        self.store = store
        self.hasher = hasher
        self.tokens = tokens
        self.settings = settings or AuthSettings()
        self._dummy_hash: Optional[str] = None

    def _burn_verify(self, password: str) -> None:
        # Same hashing work for unknown usernames as for known ones
        if self._dummy_hash is None:
            self._dummy_hash = self.hasher.hash(secrets.token_urlsafe(16))
        self.hasher.verify(password, self._dummy_hash)

    def authenticate(self, username: str, password: str) -> int:
        """
        Check credentials and return the user id.

        Unknown usernames and wrong passwords fail identically so callers
        cannot tell which one happened.

        Raises:
            AuthError: On any credential mismatch
        """
        user = self.store.find_by_username(username)
        if user is None:
            self._burn_verify(password)
            logger.warning(f"Failed login attempt for username '{username}'")
            raise AuthError(INVALID_CREDENTIALS_MESSAGE)

        if not self.hasher.verify(password, user.password_hash):
            logger.warning(f"Failed login attempt for username '{username}'")
            raise AuthError(INVALID_CREDENTIALS_MESSAGE)

        if self.hasher.needs_rehash(user.password_hash):
            self.store.update(user.id, password_hash=self.hasher.hash(password))
            logger.info(f"Upgraded password hash parameters for user {user.id}")

        logger.info(f"User '{username}' authenticated")
        return user.id

    def get_user(self, user_id: int) -> UserView:
        user = self.store.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user.to_view()

    def update_profile(
        self,
        user_id: int,
        current_password: str,
        new_username: Optional[str] = None,
        new_password: Optional[str] = None,
    ) -> UserView:
        """
        Change username and/or password after re-checking the current password.

        Args:
            user_id: Authenticated user id
            current_password: Proof of the current password, always required
            new_username: Desired username, or None to keep it
            new_password: Desired password, or None to keep it

        Returns:
            Updated user view

        Raises:
            NotFoundError: If the user no longer exists
            AuthError: If the current password does not match
            ValidationError: If the new username or password is malformed
            ConflictError: If the new username belongs to another user
        """
        user = self.store.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")

        if not self.hasher.verify(current_password, user.password_hash):
            raise AuthError("Current password is incorrect")

        username = None
        if new_username is not None:
            candidate = validate_username(new_username)
            if candidate != user.username:
                username = candidate

        password_hash = None
        if new_password is not None:
            password_hash = self.hasher.hash(validate_new_password(new_password))

        if username is None and password_hash is None:
            return user.to_view()

        # The store enforces username uniqueness inside the same transaction
        updated = self.store.update(
            user_id,
            username=username,
            password_hash=password_hash,
            must_change_password=False if password_hash else None,
        )

        changed = [name for name, value in (("username", username), ("password", password_hash)) if value]
        logger.info(f"Profile updated for user {user_id}: {', '.join(changed)}")
        return updated.to_view()

    def create_default_user(self) -> UserView:
        """
        Bootstrap the admin account on first start.

        Uses the configured default password, or generates one and logs it
        once. Does nothing when a user already exists.
        """
        existing = self.store.first_user()
        if existing is not None:
            return existing.to_view()

        password = self.settings.default_password
        generated = not password
        if generated:
            password = secrets.token_urlsafe(12)

        password_hash = self.hasher.hash(password)
        user = self.store.ensure_default_user(self.settings.default_username, password_hash)
        if user.password_hash != password_hash:
            # Another process created the user first
            return user.to_view()
        if generated:
            logger.warning(
                f"Generated initial password for '{user.username}': {password} (change it after first login)"
            )
        else:
            logger.warning(f"Default user '{user.username}' uses the configured seed password, change it after login")
        return user.to_view()

    def create_token(self, user_id: int) -> IssuedToken:
        return self.tokens.issue(user_id)

    def verify_token(self, token: str) -> TokenPayload:
        """
        Verify a token and confirm its user still exists.

        Raises:
            AuthError: If the token is invalid, expired or orphaned
        """
        payload = self.tokens.verify(token)
        if self.store.find_by_id(payload.user_id) is None:
            raise AuthError("Invalid or expired token")
        return payload
