"""Authentication data models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """Internal user record, including the password hash."""

    id: int
    username: str
    password_hash: str
    created_at: datetime
    updated_at: datetime
    must_change_password: bool = False

    def to_view(self) -> "UserView":
        return UserView(
            id=self.id,
            username=self.username,
            created_at=self.created_at,
            must_change_password=self.must_change_password,
        )


class UserView(BaseModel):
    """User as returned to API clients. Never carries the password hash."""

    id: int
    username: str
    created_at: datetime
    must_change_password: bool = False


class IssuedToken(BaseModel):
    """Freshly signed session token."""

    token: str
    expires_at: datetime


class TokenPayload(BaseModel):
    """Verified contents of a session token."""

    user_id: int
    expires_at: datetime


class LoginRequest(BaseModel):
    """Login request model."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Login response model."""

    token: str
    expires_at: datetime
    user: UserView


class ProfileUpdateRequest(BaseModel):
    """Profile update request. Accepts camelCase or snake_case field names."""

    model_config = ConfigDict(populate_by_name=True)

    username: Optional[str] = None
    current_password: str = Field(..., min_length=1, alias="currentPassword")
    new_password: Optional[str] = Field(None, alias="newPassword")


class ProfileResponse(BaseModel):
    """Profile update response model."""

    message: str
    user: UserView


class SessionInfo(BaseModel):
    """Session information."""

    valid: bool
    user: UserView
    expires_at: datetime
