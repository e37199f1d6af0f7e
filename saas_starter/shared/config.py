from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _log_level(name: str) -> str:
    value = (_env(name) or "").strip().upper()
    if isinstance(logging.getLevelName(value), int):
        return value
    return "INFO"


def _csv(name: str) -> tuple[str, ...]:
    value = _env(name)
    if not value:
        return ()
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    app_env: str
    log_level: str
    server_url: str
    session_secrets: tuple[str, ...]
    postgres_dsn: str
    supabase_url: str
    supabase_anon_key: str
    supabase_service_role_key: str
    supabase_timeout_seconds: float
    stripe_secret_key: str
    stripe_endpoint_secret: str
    stripe_api_version: str
    default_currency: str

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


def get_settings() -> Settings:
    return Settings(
        app_env=_env("APP_ENV", "development"),
        log_level=_log_level("LOG_LEVEL"),
        server_url=_env("SERVER_URL", "http://localhost:8000").rstrip("/"),
        session_secrets=_csv("SESSION_SECRET"),
        postgres_dsn=_env("POSTGRES_DSN", ""),
        supabase_url=_env("SUPABASE_URL", "").rstrip("/"),
        supabase_anon_key=_env("SUPABASE_ANON_KEY", ""),
        supabase_service_role_key=_env("SUPABASE_SERVICE_ROLE_KEY", ""),
        supabase_timeout_seconds=float(_env("SUPABASE_TIMEOUT_SECONDS", "10")),
        stripe_secret_key=_env("STRIPE_SECRET_KEY", ""),
        stripe_endpoint_secret=_env("STRIPE_ENDPOINT_SECRET", ""),
        stripe_api_version=_env("STRIPE_API_VERSION", "2022-11-15"),
        default_currency=_env("DEFAULT_CURRENCY", "usd").lower(),
    )
