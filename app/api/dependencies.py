"""FastAPI dependencies."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.exceptions import AuthError
from app.models.auth import TokenPayload
from app.models.config import AppConfig
from app.services.config_service import load_config
from app.services.database import Database
from app.services.device_service import DeviceService
from app.services.password_service import PasswordHasher
from app.services.rate_limiter import LoginRateLimiter
from app.services.token_service import TokenService
from app.services.user_service import UserService
from app.services.user_store import UserStore
from app.services.wol_service import WakeOnLanService

logger = logging.getLogger("homelab")

bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_config() -> AppConfig:
    """
    Get application configuration.

    Returns:
        Application configuration, loaded once per process
    """
    return load_config()


@lru_cache
def get_database() -> Database:
    return Database(Path(get_config().paths.database))


@lru_cache
def get_token_service() -> TokenService:
    """
    Get token service instance.

    Raises:
        ConfigurationError: If no signing secret is configured
    """
    settings = get_config().auth
    return TokenService(settings.secret_key, expiry_hours=settings.token_expiry_hours)


@lru_cache
def get_user_service() -> UserService:
    """
    Get user service instance.

    Returns:
        User service wired to the shared database and token service
    """
    settings = get_config().auth
    return UserService(
        store=UserStore(get_database()),
        hasher=PasswordHasher.from_settings(settings),
        tokens=get_token_service(),
        settings=settings,
    )


@lru_cache
def get_wol_service() -> WakeOnLanService:
    return WakeOnLanService(get_config().wol)


@lru_cache
def get_device_service() -> DeviceService:
    return DeviceService(get_database())


@lru_cache
def get_rate_limiter() -> LoginRateLimiter:
    return LoginRateLimiter(get_config().rate_limit)


def reset_services() -> None:
    """Drop cached configuration and service singletons."""
    for factory in (
        get_config,
        get_database,
        get_token_service,
        get_user_service,
        get_wol_service,
        get_device_service,
        get_rate_limiter,
    ):
        factory.cache_clear()


def require_auth(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    user_service: UserService = Depends(get_user_service),
) -> TokenPayload:
    """
    Require a valid bearer token.

    Returns:
        Verified token payload

    Raises:
        AuthError: If the header is missing or the token is invalid
    """
    if credentials is None or not credentials.credentials:
        raise AuthError("Authentication required")
    return user_service.verify_token(credentials.credentials)


def get_client_key(request: Request) -> str:
    """Rate limiting key for the requesting client."""
    ip_address = request.client.host if request.client else None
    return LoginRateLimiter.client_key(ip_address, request.headers.get("User-Agent"))
