import pytest
from pydantic import ValidationError

from alert_relay.core.settings import Settings, get_settings
from alert_relay.relay import RelayConfig


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("GITHUB_WEBHOOK_SECRET", "from-env")
    monkeypatch.setenv("SLACK_WEBHOOK_URL", " https://hooks.slack.com/services/T1/B1/x ")
    monkeypatch.setenv("SLACK_TIMEOUT_SECONDS", "2.5")

    settings = Settings()

    assert settings.GITHUB_WEBHOOK_SECRET == "from-env"
    assert settings.SLACK_WEBHOOK_URL == "https://hooks.slack.com/services/T1/B1/x"
    assert settings.SLACK_TIMEOUT_SECONDS == 2.5


def test_blank_values_are_treated_as_unset(monkeypatch) -> None:
    monkeypatch.setenv("GITHUB_WEBHOOK_SECRET", "   ")
    monkeypatch.setenv("SLACK_WEBHOOK_URL", "")

    settings = Settings()

    assert settings.GITHUB_WEBHOOK_SECRET is None
    assert settings.SLACK_WEBHOOK_URL is None


def test_production_requires_secret_and_url(monkeypatch) -> None:
    monkeypatch.setenv("RELAY_ENV", "production")
    monkeypatch.delenv("GITHUB_WEBHOOK_SECRET", raising=False)

    with pytest.raises(ValidationError):
        Settings()


def test_timeout_must_be_positive(monkeypatch) -> None:
    monkeypatch.setenv("SLACK_TIMEOUT_SECONDS", "0")

    with pytest.raises(ValidationError):
        Settings()


def test_get_settings_is_cached() -> None:
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()


def test_relay_config_from_settings(monkeypatch) -> None:
    monkeypatch.setenv("MAX_BODY_BYTES", "1024")
    config = RelayConfig.from_settings(
        Settings(GITHUB_WEBHOOK_SECRET="s", SLACK_WEBHOOK_URL="https://hooks.slack.com/services/a")
    )
    assert config == RelayConfig(
        webhook_secret="s",
        slack_webhook_url="https://hooks.slack.com/services/a",
        slack_timeout_seconds=5.0,
        max_body_bytes=1024,
    )
