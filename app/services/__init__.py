"""Service layer for business logic."""

from .database import Database
from .device_service import DeviceService
from .password_service import PasswordHasher
from .rate_limiter import LoginRateLimiter
from .token_service import TokenService
from .user_service import UserService
from .user_store import UserStore
from .wol_service import WakeOnLanService

__all__ = [
    "Database",
    "UserStore",
    "PasswordHasher",
    "TokenService",
    "UserService",
    "WakeOnLanService",
    "DeviceService",
    "LoginRateLimiter",
]
