import os
import sys
from typing import Optional
from pydantic_settings import BaseSettings

DEFAULT_JWT_SECRET = "dev-secret-change-in-production"


def _get_data_dir() -> str:
    """Return the local data directory for the chamber backend (platform-aware)."""
    if sys.platform == "win32":
        base = os.environ.get("APPDATA", os.path.expanduser("~"))
    elif sys.platform == "darwin":
        base = os.path.join(os.path.expanduser("~"), "Library", "Application Support")
    else:
        base = os.environ.get("XDG_DATA_HOME", os.path.join(os.path.expanduser("~"), ".local", "share"))
    return os.path.join(base, "ChamberCMS")


class Settings(BaseSettings):
    PROJECT_NAME: str = "Chamber of Commerce CMS"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Local data directory (database file + uploads)
    DATA_DIR: str = _get_data_dir()

    # Database
    DATABASE_URL: str = f"sqlite:///{os.path.join(_get_data_dir(), 'chamber.db')}"
    DB_POOL_SIZE: int = 10
    DB_CONNECT_TIMEOUT: int = 5

    # Auth
    JWT_SECRET: str = DEFAULT_JWT_SECRET
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 24
    BCRYPT_ROUNDS: int = 10
    RESET_TOKEN_EXPIRE_MINUTES: int = 60
    BOOTSTRAP_ADMIN_EMAIL: str = "admin@admin.com"
    BOOTSTRAP_ADMIN_PASSWORD: str = "admin123"

    # Rate limit for register / login / password reset
    AUTH_RATE_LIMIT_MAX: int = 20
    AUTH_RATE_LIMIT_WINDOW: int = 15 * 60

    # Web
    FRONTEND_URL: str = "http://localhost:3000"
    CLIENT_URL: str = "http://localhost:3000"

    # Uploads
    UPLOAD_DIR: str = os.path.join(_get_data_dir(), "uploads")
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024
    IMAGE_MAX_WIDTH: int = 1920
    IMAGE_MAX_HEIGHT: int = 1080
    IMAGE_QUALITY: int = 90

    # Outbound email, tried in order: Brevo, SendGrid, SMTP
    BREVO_API_KEY: Optional[str] = None
    SENDGRID_API_KEY: Optional[str] = None
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    EMAIL_FROM: str = "noreply@chamber.local"
    EMAIL_FROM_NAME: str = "Chamber of Commerce"
    EMAIL_TIMEOUT: int = 10
    # Return the reset link in the response when every provider failed (local development only)
    EXPOSE_RESET_URL_ON_EMAIL_FAILURE: bool = False

    # Redis URL shared by several instances for Socket.IO fan-out
    SOCKETIO_MESSAGE_QUEUE: Optional[str] = None

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def cors_origins(self) -> list:
        return [o.strip() for o in self.FRONTEND_URL.split(",") if o.strip()]


settings = Settings()
