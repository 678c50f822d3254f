"""Unit tests for AppSettings and sub-configs."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from config import (
    AppSettings,
    DatabaseSettings,
    EmailSettings,
    OtpSettings,
    SmsSettings,
)


@pytest.fixture
def with_mongo(monkeypatch):
    """Set the required MONGODB_URI so AppSettings can be instantiated."""
    monkeypatch.setenv("MONGODB_URI", "mongodb://localhost:27017/")
    return monkeypatch


class TestDatabaseSettings:
    def test_loads_mongodb_uri(self, with_mongo):
        assert DatabaseSettings().mongodb_uri == "mongodb://localhost:27017/"

    def test_defaults(self, with_mongo):
        for var in ("DB_NAME", "USERS_COLLECTION", "OTPS_COLLECTION", "STORE_MAX_RETRIES"):
            with_mongo.delenv(var, raising=False)
        s = DatabaseSettings()
        assert s.db_name == "cc-core"
        assert s.users_collection == "users"
        assert s.otps_collection == "otps"
        assert s.store_max_retries == 2

    def test_missing_mongodb_uri_raises(self, monkeypatch):
        monkeypatch.delenv("MONGODB_URI", raising=False)
        with pytest.raises(PydanticValidationError):
            DatabaseSettings()


class TestOtpSettings:
    def test_defaults(self, monkeypatch):
        for var in ("OTP_TTL_SECONDS", "OTP_MAX_ATTEMPTS", "OTP_REQUIRE_DELIVERY"):
            monkeypatch.delenv(var, raising=False)
        s = OtpSettings()
        assert s.otp_ttl_seconds == 600
        assert s.otp_max_attempts == 5
        assert s.otp_require_delivery is True

    def test_require_delivery_from_env(self, monkeypatch):
        monkeypatch.setenv("OTP_REQUIRE_DELIVERY", "false")
        assert OtpSettings().otp_require_delivery is False


@pytest.mark.parametrize(
    "auth_key, template_id, expected",
    [("key", "tpl", True), ("key", "", False), ("", "", False)],
    ids=["configured", "missing_template", "missing_both"],
)
def test_sms_is_configured(monkeypatch, auth_key, template_id, expected):
    monkeypatch.setenv("MSG91_AUTH_KEY", auth_key)
    monkeypatch.setenv("MSG91_TEMPLATE_ID", template_id)
    assert SmsSettings().is_configured is expected


def test_email_is_configured(monkeypatch):
    monkeypatch.delenv("ZEPTO_API_TOKEN", raising=False)
    assert EmailSettings().is_configured is False
    monkeypatch.setenv("ZEPTO_API_TOKEN", "tok")
    assert EmailSettings().is_configured is True


class TestAppSettings:
    def test_sub_configs_populated(self, with_mongo):
        s = AppSettings()
        for attr in ("db", "otp", "sms", "email", "logging", "sentry"):
            assert getattr(s, attr) is not None, f"sub-config '{attr}' is None"

    def test_cors_defaults(self, with_mongo):
        s = AppSettings()
        assert s.cors_origins == ["*"]
        assert s.cors_allow_credentials is False
