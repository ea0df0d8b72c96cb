from datetime import timedelta

import pytest

from storefront.config import (
    AuthSettings,
    ConfigurationError,
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    get_config,
)


@pytest.mark.parametrize(
    "name, expected",
    [("prod", ProductionConfig), ("production", ProductionConfig), ("testing", TestingConfig), ("dev", DevelopmentConfig)],
)
def test_get_config_by_name(name, expected):
    assert get_config(name) is expected


def test_get_config_falls_back_to_app_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    assert get_config(None) is ProductionConfig


def _settings(**overrides):
    values = dict(
        access_secret="access-secret-0123456789abcdef0123456789",
        access_ttl=timedelta(minutes=5),
        refresh_secret="refresh-secret-0123456789abcdef012345678",
        refresh_ttl=timedelta(days=1),
    )
    values.update(overrides)
    return AuthSettings(**values)


def test_settings_from_flask_config():
    settings = AuthSettings.from_config(
        {key: getattr(TestingConfig, key) for key in dir(TestingConfig) if key.isupper()}
    )
    assert settings.access_secret == TestingConfig.ACCESS_TOKEN_SECRET
    assert settings.refresh_ttl == TestingConfig.REFRESH_TOKEN_EXPIRES
    assert not settings.is_production


def test_production_flag():
    assert _settings(environment="production").is_production
    assert _settings(environment="prod").is_production
    assert not _settings(environment="development").is_production


@pytest.mark.parametrize(
    "overrides",
    [
        {"access_secret": ""},
        {"refresh_secret": "access-secret-0123456789abcdef0123456789"},
        {"access_ttl": timedelta(0)},
        {"refresh_ttl": timedelta(seconds=-1)},
    ],
)
def test_settings_are_validated(overrides):
    with pytest.raises(ConfigurationError):
        _settings(**overrides)
