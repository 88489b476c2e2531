"""
Tests for settings parsing and validation
"""
import pytest
from pydantic import ValidationError

from app.core.config import Settings

BASE = {"DATABASE_URL": "sqlite:///./test.db", "JWT_SECRET_KEY": "x" * 40}


def make_settings(**overrides):
    values = dict(BASE)
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_defaults():
    settings = make_settings()
    assert settings.APP_ENV == "local"
    assert settings.ACCRUAL_LEAVE_TYPE == "Vacation"
    assert settings.ACCRUAL_AMOUNT == 8.0
    assert settings.LEAVE_HOURS_PER_DAY == 8.0
    assert settings.COMPLIANCE_EXPIRING_SOON_DAYS == 30


def test_reminder_days_are_parsed_deduplicated_and_sorted():
    settings = make_settings(COMPLIANCE_REMINDER_DAYS="7, 30,14,,7")
    assert settings.get_reminder_days() == [30, 14, 7]


def test_negative_reminder_day_rejected():
    settings = make_settings(COMPLIANCE_REMINDER_DAYS="30,-1")
    with pytest.raises(ValueError):
        settings.get_reminder_days()


def test_invalid_app_env_rejected():
    with pytest.raises(ValidationError):
        make_settings(APP_ENV="qa")


def test_log_level_is_uppercased():
    assert make_settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"


def test_expiring_soon_window_must_be_positive():
    with pytest.raises(ValidationError):
        make_settings(COMPLIANCE_EXPIRING_SOON_DAYS=0)


def test_production_requires_long_secret():
    settings = make_settings(APP_ENV="prod", JWT_SECRET_KEY="short", ALLOWED_ORIGINS="https://hr.example.org")
    with pytest.raises(ValueError, match="JWT_SECRET_KEY"):
        settings.validate_production()


def test_production_rejects_wildcard_origins():
    settings = make_settings(APP_ENV="prod", ALLOWED_ORIGINS="*")
    with pytest.raises(ValueError, match="ALLOWED_ORIGINS"):
        settings.validate_production()


def test_allowed_origins_list():
    settings = make_settings(ALLOWED_ORIGINS="https://a.example.org, https://b.example.org")
    assert settings.get_allowed_origins_list() == ["https://a.example.org", "https://b.example.org"]
