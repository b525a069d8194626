"""Data models for the HomeLab Dashboard API."""

from .auth import TokenPayload, User, UserView
from .config import AppConfig
from .device import Device, WakeResult

__all__ = [
    "User",
    "UserView",
    "TokenPayload",
    "Device",
    "WakeResult",
    "AppConfig",
]
