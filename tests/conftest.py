"""Pytest configuration and shared fixtures."""

import socket
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from app.models.config import AuthSettings, RateLimitSettings, WakeOnLanSettings
from app.services.database import Database
from app.services.device_service import DeviceService
from app.services.password_service import PasswordHasher
from app.services.rate_limiter import LoginRateLimiter
from app.services.token_service import TokenService
from app.services.user_service import UserService
from app.services.user_store import UserStore
from app.services.wol_service import WakeOnLanService

TEST_SECRET = "test-signing-secret"
DEFAULT_USERNAME = "admin"
DEFAULT_PASSWORD = "password"
MAGIC_PACKET_SIZE = 102


@pytest.fixture
def auth_settings():
    """Auth settings with cheap argon2 parameters for fast tests."""
    return AuthSettings(
        secret_key=TEST_SECRET,
        default_username=DEFAULT_USERNAME,
        default_password=DEFAULT_PASSWORD,
        time_cost=1,
        memory_cost=1024,
        parallelism=1,
    )


@pytest.fixture
def database(tmp_path):
    """Create a fresh SQLite database for each test."""
    return Database(tmp_path / "homelab.db")


@pytest.fixture
def user_store(database):
    return UserStore(database)


@pytest.fixture
def hasher(auth_settings):
    return PasswordHasher.from_settings(auth_settings)


@pytest.fixture
def token_service(auth_settings):
    return TokenService(auth_settings.secret_key, expiry_hours=auth_settings.token_expiry_hours)


@pytest.fixture
def user_service(user_store, hasher, token_service, auth_settings):
    return UserService(user_store, hasher, token_service, auth_settings)


@pytest.fixture
def default_user(user_service):
    """Bootstrap the default admin account."""
    return user_service.create_default_user()


@pytest.fixture
def wol_settings():
    return WakeOnLanSettings(broadcast_address="192.168.1.255", port=9, timeout_seconds=1.0)


@pytest.fixture
def wol_service(wol_settings):
    return WakeOnLanService(wol_settings)


@pytest.fixture
def device_service(database):
    return DeviceService(database)


@pytest.fixture
def rate_limiter():
    return LoginRateLimiter(RateLimitSettings(window_seconds=600, max_attempts=3))


@pytest.fixture
def mock_socket():
    """
    Patch the UDP socket used for Wake-on-LAN.

    Yields the socket object the service sends through.
    """
    # Patch only the module reference inside wol_service so the event loop's
    # own sockets (used by TestClient) keep working.
    with patch("app.services.wol_service.socket") as socket_mod:
        for name in ("AF_INET", "SOCK_DGRAM", "SOL_SOCKET", "SO_BROADCAST", "timeout"):
            setattr(socket_mod, name, getattr(socket, name))
        sock = socket_mod.socket.return_value.__enter__.return_value
        sock.sendto.return_value = MAGIC_PACKET_SIZE
        yield sock


@pytest.fixture
def client(user_service, wol_service, device_service, rate_limiter, default_user):
    """Create FastAPI test client backed by the test services."""
    from app.api.dependencies import (
        get_device_service,
        get_rate_limiter,
        get_user_service,
        get_wol_service,
        reset_services,
    )
    from main import app

    reset_services()

    app.dependency_overrides[get_user_service] = lambda: user_service
    app.dependency_overrides[get_wol_service] = lambda: wol_service
    app.dependency_overrides[get_device_service] = lambda: device_service
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter

    client = TestClient(app)
    yield client

    # Clean up
    app.dependency_overrides.clear()
    reset_services()


@pytest.fixture
def auth_token(user_service, default_user):
    """Get a valid auth token for the default user."""
    return user_service.create_token(default_user.id).token


@pytest.fixture
def auth_headers(auth_token):
    """Get auth headers for API requests."""
    return {"Authorization": f"Bearer {auth_token}"}
