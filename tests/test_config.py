import pytest

from opadmin.config import REQUIRED_VARS, Settings
from opadmin.errors import ConfigError

BASE_ENV = {
    "OPADMIN_DATABASE_URL": "sqlite+aiosqlite:///data/opadmin.db",
    "OPADMIN_SECRET_KEY": "s3cret",
    "OPADMIN_SMTP_HOST": "smtp.example.com",
    "OPADMIN_SMTP_PORT": "465",
    "OPADMIN_SMTP_USER": "ops@example.com",
    "OPADMIN_SMTP_PASSWORD": "mailpw",
}


def test_defaults_from_minimal_env():
    s = Settings.from_env(BASE_ENV)
    assert s.database_url == BASE_ENV["OPADMIN_DATABASE_URL"]
    assert s.port == 5000
    assert s.session_ttl_hours == 15
    assert s.session_max_age == 15 * 3600
    assert s.hash_time_cost == 3
    assert s.cookie_secure is False
    assert s.cookie_samesite == "lax"
    assert s.smtp.sender == "ops@example.com"
    assert s.smtp.implicit_tls is True
    assert s.cors_origins == ("http://localhost:3000",)


@pytest.mark.parametrize("missing", REQUIRED_VARS)
def test_missing_required_variable_fails_loudly(missing):
    env = {k: v for k, v in BASE_ENV.items() if k != missing}
    with pytest.raises(ConfigError) as ei:
        Settings.from_env(env)
    assert missing in str(ei.value)


def test_blank_secret_counts_as_missing():
    with pytest.raises(ConfigError, match="OPADMIN_SECRET_KEY"):
        Settings.from_env({**BASE_ENV, "OPADMIN_SECRET_KEY": "  "})


def test_cross_site_cookie_settings():
    s = Settings.from_env({**BASE_ENV, "OPADMIN_COOKIE_SAMESITE": "None", "OPADMIN_COOKIE_SECURE": "true"})
    assert s.cookie_samesite == "none"
    assert s.cookie_secure is True


def test_samesite_none_requires_secure():
    with pytest.raises(ConfigError):
        Settings.from_env({**BASE_ENV, "OPADMIN_COOKIE_SAMESITE": "none"})


def test_invalid_samesite_rejected():
    with pytest.raises(ConfigError):
        Settings.from_env({**BASE_ENV, "OPADMIN_COOKIE_SAMESITE": "sometimes"})


def test_overrides():
    s = Settings.from_env(
        {
            **BASE_ENV,
            "OPADMIN_SMTP_PORT": "587",
            "OPADMIN_MAIL_FROM": "no-reply@example.com",
            "OPADMIN_SESSION_TTL_HOURS": "1.5",
            "OPADMIN_HASH_TIME_COST": "4",
            "OPADMIN_CORS_ORIGINS": "https://a.example.com, https://b.example.com",
            "OPADMIN_PORT": "8080",
        }
    )
    assert s.smtp.port == 587
    assert s.smtp.implicit_tls is False
    assert s.smtp.sender == "no-reply@example.com"
    assert s.session_max_age == 5400
    assert s.hash_time_cost == 4
    assert s.cors_origins == ("https://a.example.com", "https://b.example.com")
    assert s.port == 8080


@pytest.mark.parametrize(
    "key,value",
    [
        ("OPADMIN_SMTP_PORT", "smtp"),
        ("OPADMIN_SMTP_PORT", "0"),
        ("OPADMIN_SESSION_TTL_HOURS", "-1"),
        ("OPADMIN_SESSION_TTL_HOURS", "nan"),
        ("OPADMIN_SESSION_TTL_HOURS", "inf"),
        ("OPADMIN_HASH_TIME_COST", "0"),
        ("OPADMIN_HASH_TIME_COST", "-3"),
        ("OPADMIN_HASH_TIME_COST", "fast"),
        ("OPADMIN_PORT", "x"),
    ],
)
def test_bad_numbers_rejected(key, value):
    with pytest.raises(ConfigError, match=key):
        Settings.from_env({**BASE_ENV, key: value})


def test_app_factory_refuses_to_start_without_configuration(monkeypatch):
    from opadmin.app import app_from_env

    for k in REQUIRED_VARS:
        monkeypatch.delenv(k, raising=False)
    with pytest.raises(ConfigError):
        app_from_env()
