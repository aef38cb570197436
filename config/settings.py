from __future__ import annotations

import os
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv


load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    """Application settings loaded from environment variables.

    Keep all credentials and config centralized here.
    """

    def __init__(self) -> None:
        self.app_env: str = os.getenv("APP_ENV", "development")
        self.google_api_key: Optional[str] = os.getenv("GOOGLE_API_KEY") or None
        self.gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
        self.temperature: float = float(os.getenv("MODEL_TEMPERATURE", "0.3"))
        self.top_p: float = float(os.getenv("MODEL_TOP_P", "0.9"))
        self.max_output_tokens: int = int(os.getenv("MODEL_MAX_OUTPUT_TOKENS", "80"))
        self.responder_timeout: float = float(os.getenv("RESPONDER_TIMEOUT_SECONDS", "15"))
        self.responder_max_retries: int = int(os.getenv("RESPONDER_MAX_RETRIES", "1"))
        self.session_secret: str = os.getenv("SESSION_SECRET", "london-adventure-secret")
        self.session_ttl_seconds: int = int(os.getenv("SESSION_TTL_SECONDS", "86400"))
        self.session_cookie_secure: bool = _env_flag("SESSION_COOKIE_SECURE")
        self.cors_origins: List[str] = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
