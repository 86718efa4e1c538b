"""
Environment-driven settings for the bank portal.

Values come from the process environment, with a .env file (searched upward
from the working directory) loaded first without overriding anything that is
already set.
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List

from dotenv import find_dotenv, load_dotenv

load_dotenv(find_dotenv(usecwd=True), override=False)

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://localhost:5173"


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    database_url: str
    port: int = 5000
    app_env: str = "development"
    cors_origins: List[str] = field(default_factory=list)
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = 24 * 60
    admin_phone: str = "8888888888"
    admin_password: str = "admin@123"
    db_echo: bool = False


def load_settings() -> Settings:
    """
    Build a Settings object from the current environment.
    """
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        raise RuntimeError("DATABASE_URL not set in environment or .env")

    origins = os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return Settings(
        database_url=database_url,
        port=int(os.getenv("PORT", "5000")),
        app_env=os.getenv("APP_ENV", "development"),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        jwt_secret=os.getenv("JWT_SECRET", "change-me"),
        jwt_expires_minutes=int(os.getenv("JWT_EXPIRES_MINUTES", str(24 * 60))),
        admin_phone=os.getenv("ADMIN_PHONE", "8888888888"),
        admin_password=os.getenv("ADMIN_PASSWORD", "admin@123"),
        db_echo=_as_bool(os.getenv("DB_ECHO", "false")),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
