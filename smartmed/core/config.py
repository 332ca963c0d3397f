from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_env: str = "local"
    api_v1_prefix: str = "/api/v1"

    # Database
    database_url: str

    # Redis (page cache for dashboard views)
    redis_url: str | None = None
    page_cache_ttl_seconds: int = 60

    # Identity provider (Supabase-style JWT sessions)
    auth_jwt_secret: str = "changeme"  # override in .env
    auth_jwt_audience: str = "authenticated"
    auth_cookie_name: str = "sb-access-token"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Pydantic v2 style config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Cached settings instance so the .env is parsed once.
    """
    return Settings()
