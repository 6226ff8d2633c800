# cvbuilder/core/config.py
from __future__ import annotations
from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # API
    api_title: str = "CV Builder API"
    api_version: str = "0.1.0"
    log_level: str = "INFO"                   # env: LOG_LEVEL

    # AI provider
    # IMPORTANT: maps to env var GEMINI_API_KEY; no default on purpose
    gemini_api_key: Optional[str] = None
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    extraction_model: str = "gemini-1.5-flash"     # env: EXTRACTION_MODEL
    generation_model: str = "gemini-1.5-flash"     # env: GENERATION_MODEL
    extraction_temperature: float = 0.1
    extraction_max_tokens: int = 4096
    generation_temperature: float = 0.7
    generation_max_tokens: int = 8192
    request_timeout_seconds: float = 60.0     # env: REQUEST_TIMEOUT_SECONDS

    # Uploads
    max_file_bytes: int = 10 * 1024 * 1024    # 10 MiB per file
    extraction_concurrency: int = 1           # 1 = one file at a time
    min_decoded_text_chars: int = 50
    job_ad_field: str = "job_ad_text"

    # Regional defaults used by the generation prompt
    target_region: str = "Papua New Guinea"
    default_province: str = "National Capital District"
    phone_placeholder: str = "+675 7XXX XXXX"
    applicant_placeholder: str = "Papua New Guinea Applicant"
    email_placeholder: str = "applicant@email.com"
    secondary_language: str = "Tok Pisin"

    # Observability
    sentry_dsn: Optional[str] = None          # env: SENTRY_DSN
    posthog_key: Optional[str] = None         # env: POSTHOG_KEY
    posthog_host: str = "https://app.posthog.com"  # env: POSTHOG_HOST

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def has_provider_key(self) -> bool:
        return bool(self.gemini_api_key and self.gemini_api_key.strip())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Loaded once per process; routes receive it through Depends(get_settings)
    return Settings()
