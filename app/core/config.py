# app/core/config.py

import json
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # The environment mode: 'local' or 'prod'
    ENV: str = "local"
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str = "sqlite:///./merchant_console.db"

    # Identity gate
    JWT_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"
    DEV_BYPASS_AUTH: bool = False
    DEV_BYPASS_UID: str = "dev_uid"

    # Object store
    AWS_ACCESS_KEY_ID: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[str] = None
    AWS_S3_BUCKET_NAME: str = "merchant-console-uploads"
    AWS_S3_REGION: str = "us-east-1"
    AWS_S3_ENDPOINT_URL: Optional[str] = None
    AWS_S3_PUBLIC_BASE_URL: Optional[str] = None

    # CORS - stored as string, parsed via get_cors_origins()
    CORS_ORIGINS: Optional[str] = None

    # When the flash sale cutoff cannot be evaluated, allow catalogue creation
    # to proceed (True) or refuse it with a 500 (False).
    FLASH_SALE_CUTOFF_FAIL_OPEN: bool = True

    # Best-effort deletion of objects uploaded by a request whose final write failed.
    CLEANUP_ORPHANED_UPLOADS: bool = False

    def get_cors_origins(self) -> List[str]:
        """Parse CORS_ORIGINS from comma-separated string or JSON array"""
        if not self.CORS_ORIGINS:
            return []
        v = self.CORS_ORIGINS.strip()
        if not v:
            return []
        if v.startswith("["):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pass
        return [origin.strip() for origin in v.split(",") if origin.strip()]

    @property
    def dev_bypass_enabled(self) -> bool:
        return self.ENV != "prod" and self.DEV_BYPASS_AUTH


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
