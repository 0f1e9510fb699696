"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Parse Server connection fields (PARSE_SERVER_URL,
PARSE_APP_ID, PARSE_MASTER_KEY) are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except the Parse Server
    connection, validated in validate_required.
    """

    # App
    app_name: str = "site-cloud-code"
    app_version: str = "1.0.0"
    debug: bool = False

    # Parse Server (document store + schema administration)
    parse_server_url: str = ""
    parse_app_id: str = ""
    parse_master_key: SecretStr = SecretStr("")
    parse_request_timeout_seconds: float = 30.0
    # Parse caps a single find at 1000 rows; find_all pages with this size.
    parse_page_size: int = 1000

    # Webhooks: when set, Parse must send X-Parse-Webhook-Key with this value.
    parse_webhook_key: SecretStr | None = None
    webhook_key_header: str = "X-Parse-Webhook-Key"

    # Fire-and-forget writes (ACL fan-out, media destroys, CLP propagation)
    background_workers: int = 8
    background_queue_size: int = 10_000

    # onContentModify cloud function
    content_hook_timeout_seconds: float = 10.0

    # inviteUser cloud function: the register link points at SITE_URL.
    site_url: str = ""
    # Mailgun delivery; without an API key invites are only logged.
    mailgun_api_key: SecretStr | None = None
    mailgun_domain: str = ""
    mailgun_api_url: str = "https://api.mailgun.net/v3"
    from_address: str = ""
    email_timeout_seconds: float = 10.0

    # OpenTelemetry
    telemetry_enabled: bool = True
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate the Parse Server connection, worker pool sizes and mail settings."""
        if not self.parse_server_url:
            raise ValueError(
                "PARSE_SERVER_URL is required (e.g. http://localhost:1337/parse). "
                "Set in environment or .env file."
            )
        if not self.parse_app_id:
            raise ValueError("PARSE_APP_ID is required. Set in environment or .env file.")
        if not self.parse_master_key.get_secret_value():
            raise ValueError(
                "PARSE_MASTER_KEY is required: the engine re-checks rights itself "
                "and talks to Parse with elevated privileges."
            )
        if self.background_workers < 1:
            raise ValueError("background_workers must be at least 1")
        if not 1 <= self.parse_page_size <= 1000:
            raise ValueError("parse_page_size must be between 1 and 1000")
        if self.mailgun_api_key is not None and not (self.mailgun_domain and self.from_address):
            raise ValueError("MAILGUN_API_KEY needs MAILGUN_DOMAIN and FROM_ADDRESS")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
