"""Domain exceptions and their HTTP status mapping."""

from typing import Optional


class DashboardError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DashboardError):
    """Malformed input (bad MAC, oversized password, invalid username)."""

    status_code = 400
    default_message = "Request validation failed"


class AuthError(DashboardError):
    """Bad credentials or a missing, invalid or expired token."""

    status_code = 401
    default_message = "Authentication required"


class NotFoundError(DashboardError):
    status_code = 404
    default_message = "Not Found"


class ConflictError(DashboardError):
    status_code = 409
    default_message = "Resource already exists"


class RateLimitError(DashboardError):
    status_code = 429
    default_message = "Too many login attempts, please try again later"


class NetworkError(DashboardError):
    """Transport-level failure while sending a Wake-on-LAN packet."""

    status_code = 502
    default_message = "Failed to send Wake-on-LAN packet"


class ConfigurationError(Exception):
    """Invalid or missing configuration detected at startup."""
