from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv


# Load backend/.env if it exists so local environment variables (e.g. DATABASE_URL)
# are available without needing to export them manually.
BASE_DIR = Path(__file__).resolve().parents[2]
env_path = BASE_DIR / ".env"
if env_path.exists():
    load_dotenv(env_path)


def _int_env(key: str, default: int) -> int:
    try:
        return int(os.getenv(key, str(default)))
    except ValueError:
        return default


class Settings:
    PROJECT_NAME = "Contact Form API"
    API_PREFIX = "/api"

    def __init__(self) -> None:
        self.PORT = _int_env("PORT", 5000)
        self.DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./freesip.db")
        self.FRONTEND_URL = os.getenv("FRONTEND_URL", "").strip()
        self.ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

        # Empty means the admin listing is open.
        self.ADMIN_API_KEY = os.getenv("ADMIN_API_KEY", "")

    STATIC_ORIGINS = (
        "http://localhost:3000",
        "http://127.0.0.1:5500",
        "http://localhost:5500",
        "https://freesip-test.netlify.app",
        "https://my-backend-5zho.onrender.com",
    )
    CORS_METHODS = ("GET", "POST", "PUT", "DELETE", "OPTIONS")
    CORS_HEADERS = ("Content-Type", "Authorization", "Accept", "Origin", "X-Requested-With")

    # 100 requests per IP per 15 minutes across /api/.
    API_RATE_LIMIT = 100
    API_RATE_WINDOW_SECONDS = 15 * 60

    # 5 contact submissions per IP per hour.
    CONTACT_RATE_LIMIT = 5
    CONTACT_RATE_WINDOW_SECONDS = 60 * 60

    DUPLICATE_WINDOW_SECONDS = 5 * 60

    @property
    def CORS_ORIGINS(self) -> list[str]:
        origins = list(self.STATIC_ORIGINS)
        if self.FRONTEND_URL and self.FRONTEND_URL not in origins:
            origins.append(self.FRONTEND_URL)
        return origins


settings = Settings()
