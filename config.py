"""
Application configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file).
Sub-configs are composed onto AppSettings so a single object can be passed
around (and stored on app.state) at startup.
"""

from __future__ import annotations

from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    mongodb_uri: str
    db_name: str = "cc-core"
    users_collection: str = "users"
    otps_collection: str = "otps"

    # Transient store failures are retried; condition failures never are
    store_max_retries: int = 2
    store_retry_base_delay: float = 0.05


class OtpSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    otp_ttl_seconds: int = 600
    otp_max_attempts: int = 5

    # When false, a failed delivery is logged and the OTP is still issued
    otp_require_delivery: bool = True


class SmsSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    msg91_auth_key: str = ""
    msg91_template_id: str = ""
    msg91_api_url: str = "https://control.msg91.com/api/v5/otp"

    @property
    def is_configured(self) -> bool:
        return bool(self.msg91_auth_key and self.msg91_template_id)


class EmailSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    zepto_api_token: str = ""
    zepto_from_email: str = "noreply@cc-core.app"
    zepto_from_name: str = "CC"

    @property
    def is_configured(self) -> bool:
        return bool(self.zepto_api_token)


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production


class SentrySettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    sentry_dsn: str = ""
    sentry_send_pii: bool = False
    sentry_traces_sample_rate: float = 0.1


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    env: str = "development"
    app_name: str = "cc-core"

    # Any origin may call the API; no cookies are involved
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = False

    # OpenAPI docs URL (None disables the docs UI in production)
    docs_url: Optional[str] = "/docs"

    # Outbound HTTP (SMS / email gateways)
    http_timeout_seconds: float = 5.0

    db: Optional[DatabaseSettings] = None
    otp: Optional[OtpSettings] = None
    sms: Optional[SmsSettings] = None
    email: Optional[EmailSettings] = None
    logging: Optional[LoggingSettings] = None
    sentry: Optional[SentrySettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "AppSettings":
        if self.db is None:
            self.db = DatabaseSettings()
        if self.otp is None:
            self.otp = OtpSettings()
        if self.sms is None:
            self.sms = SmsSettings()
        if self.email is None:
            self.email = EmailSettings()
        if self.logging is None:
            self.logging = LoggingSettings()
        if self.sentry is None:
            self.sentry = SentrySettings()
        return self
