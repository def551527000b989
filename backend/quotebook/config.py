from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="APP_",
        extra="ignore",
        case_sensitive=False,
    )

    # Application
    debug: bool = False
    log_level: str = "INFO"

    # API
    api_prefix: str = "/api/v1"
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:8000",
    ]

    cors_origin_regex: str | None = None
    trusted_hosts: list[str] = ["*"]
    root_path: str = ""

    # Supabase (leave unset to run in local-only mode)
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    quotes_table: str = "quotes"

    # Device storage
    local_storage_dir: str = ".quotebook"
    device_id_header: str = "X-Device-Id"

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)


settings = Settings()
