"""Authentication API endpoints."""

import logging

from fastapi import APIRouter, Depends

from app.api.dependencies import get_client_key, get_rate_limiter, get_user_service, require_auth
from app.models.auth import (
    LoginRequest,
    LoginResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    SessionInfo,
    TokenPayload,
    UserView,
)
from app.services.rate_limiter import LoginRateLimiter
from app.services.user_service import UserService

logger = logging.getLogger("homelab")

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/login", response_model=LoginResponse)
def login(
    login_request: LoginRequest,
    client_key: str = Depends(get_client_key),
    user_service: UserService = Depends(get_user_service),
    rate_limiter: LoginRateLimiter = Depends(get_rate_limiter),
):
    """
    Authenticate with username and password and receive a session token.

    Use the returned token as Bearer token in the Authorization header.
    """
    rate_limiter.attempt(client_key)
    user_id = user_service.authenticate(login_request.username.strip(), login_request.password)
    rate_limiter.reset(client_key)

    issued = user_service.create_token(user_id)
    return LoginResponse(
        token=issued.token,
        expires_at=issued.expires_at,
        user=user_service.get_user(user_id),
    )


@router.get("/me", response_model=UserView)
def get_me(
    payload: TokenPayload = Depends(require_auth),
    user_service: UserService = Depends(get_user_service),
):
    """Get the currently authenticated user."""
    return user_service.get_user(payload.user_id)


@router.post("/verify", response_model=SessionInfo)
def verify_session(
    payload: TokenPayload = Depends(require_auth),
    user_service: UserService = Depends(get_user_service),
):
    """Check that the presented token is still valid."""
    return SessionInfo(
        valid=True,
        user=user_service.get_user(payload.user_id),
        expires_at=payload.expires_at,
    )


@router.api_route("/profile", methods=["POST", "PUT"], response_model=ProfileResponse)
def update_profile(
    request: ProfileUpdateRequest,
    payload: TokenPayload = Depends(require_auth),
    user_service: UserService = Depends(get_user_service),
):
    """
    Change username and/or password. Requires the current password.

    Existing tokens stay valid until they expire.
    """
    user = user_service.update_profile(
        payload.user_id,
        current_password=request.current_password,
        new_username=request.username,
        new_password=request.new_password,
    )
    return ProfileResponse(message="Profile updated successfully", user=user)
