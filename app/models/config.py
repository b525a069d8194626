"""Application configuration models."""

from typing import Optional

from pydantic import BaseModel, Field


class AppSettings(BaseModel):
    """Application settings."""

    title: str = "HomeLab Dashboard"
    version: str = "1.0.0"
    environment: str = "production"  # "production" | "development"
    host: str = "0.0.0.0"
    port: int = 5000

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


class PathSettings(BaseModel):
    """Path settings."""

    database: str = "./data/homelab.db"
    logs: str = "./logs"


class AuthSettings(BaseModel):
    """Authentication settings."""

    secret_key: Optional[str] = None  # required, usually from HOMELAB_SECRET_KEY
    token_expiry_hours: int = 24
    default_username: str = "admin"
    default_password: Optional[str] = None  # generated on first run if unset
    password_max_length: int = 1024
    # argon2id cost parameters
    time_cost: int = 3
    memory_cost: int = 65536
    parallelism: int = 4


class RateLimitSettings(BaseModel):
    """Login rate limiting settings."""

    window_seconds: int = 600
    max_attempts: int = 10


class WakeOnLanSettings(BaseModel):
    """Wake-on-LAN dispatch settings."""

    broadcast_address: str = "255.255.255.255"
    port: int = 9
    timeout_seconds: float = 3.0


class CorsSettings(BaseModel):
    """CORS settings."""

    origins: list[str] = Field(default_factory=lambda: ["http://localhost:5173"])


class LoggingSettings(BaseModel):
    """Logging settings."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str = "./logs/homelab.log"


class AppConfig(BaseModel):
    """Main application configuration."""

    app: AppSettings = AppSettings()
    paths: PathSettings = PathSettings()
    auth: AuthSettings = AuthSettings()
    rate_limit: RateLimitSettings = RateLimitSettings()
    wol: WakeOnLanSettings = WakeOnLanSettings()
    cors: CorsSettings = CorsSettings()
    logging: LoggingSettings = LoggingSettings()
