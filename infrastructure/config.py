from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from domain.errors import ConfigError


@dataclass(frozen=True)
class Settings:
    """Runtime configuration, read from the environment (and `.env`)."""

    telegram_bot_token: str
    api_url: str
    db_path: str = "kalimeros.db"
    database_url: Optional[str] = None
    email_domain: str = "kbot.com"
    token_cache_ttl_seconds: float = 3600.0
    token_cache_max_size: int = 1000
    http_timeout_seconds: float = 30.0
    bot_workers: int = 4
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        if environ is None:
            load_dotenv()
            environ = os.environ

        token = environ.get("TELEGRAM_BOT_TOKEN")
        if not token:
            raise ConfigError("TELEGRAM_BOT_TOKEN environment variable is not set.")
        api_url = environ.get("KALIMEROS_API_URL")
        if not api_url:
            raise ConfigError("KALIMEROS_API_URL environment variable is not set.")

        try:
            return cls(
                telegram_bot_token=token,
                api_url=api_url,
                db_path=environ.get("DB_PATH", "kalimeros.db"),
                database_url=environ.get("DATABASE_URL") or None,
                email_domain=environ.get("EMAIL_DOMAIN", "kbot.com"),
                token_cache_ttl_seconds=float(environ.get("TOKEN_CACHE_TTL_SECONDS", "3600")),
                token_cache_max_size=int(environ.get("TOKEN_CACHE_MAX_SIZE", "1000")),
                http_timeout_seconds=float(environ.get("HTTP_TIMEOUT_SECONDS", "30")),
                bot_workers=int(environ.get("BOT_WORKERS", "4")),
                log_level=environ.get("LOG_LEVEL", "INFO"),
            )
        except ValueError as exc:
            raise ConfigError(f"Invalid numeric setting: {exc}") from exc
