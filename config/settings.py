"""
Application settings loaded from environment variables.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Security Secrets ──────────────────────────────────────────────────
    jwt_secret: str = Field(..., min_length=1)          # HMAC secret for auth tokens
    jwt_algorithm: str = "HS256"
    jwt_expiry_seconds: int = Field(3600, gt=0)          # 1 hour
    bcrypt_rounds: int = Field(12, ge=4, le=31)

    # ── Accounts ─────────────────────────────────────────────────────────
    require_username: bool = False      # usernames are optional, unique when present

    # ── Database ─────────────────────────────────────────────────────────
    database_url: str = Field(..., min_length=1)
    db_pool_size: int = 10
    db_max_overflow: int = 20

    # ── Server ───────────────────────────────────────────────────────────
    port: int = 5000
    host: str = "0.0.0.0"
    debug: bool = False
    cors_origins: list = ["*"]
    request_timeout_seconds: Optional[float] = 30.0

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once per process; raises if a required value is missing."""
    return Settings()
