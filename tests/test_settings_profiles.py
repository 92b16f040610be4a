from __future__ import annotations

from task_tracker.core.config import Settings


def test_environment_profiles_apply_defaults() -> None:
    dev = Settings(environment="development")
    assert dev.environment == "development"
    assert dev.log_level == "DEBUG"
    assert dev.reload is True
    assert dev.cache_enabled is True

    test_profile = Settings(environment="test")
    assert test_profile.environment == "test"
    assert test_profile.log_level == "WARNING"
    assert test_profile.reload is False
    assert test_profile.cache_enabled is False

    ci_profile = Settings(environment="ci")
    assert ci_profile.environment == "ci"
    assert ci_profile.log_level == "INFO"
    assert ci_profile.reload is False
    assert ci_profile.cache_enabled is True


def test_environment_aliases_are_normalised() -> None:
    alias = Settings(environment="DEV")
    assert alias.environment == "development"


def test_environment_profile_respects_explicit_overrides(monkeypatch) -> None:
    monkeypatch.setenv("TASK_TRACKER_LOG_LEVEL", "error")
    overridden = Settings(environment="test")
    assert overridden.log_level == "ERROR"

    monkeypatch.delenv("TASK_TRACKER_LOG_LEVEL", raising=False)
    monkeypatch.setenv("TASK_TRACKER_CACHE_ENABLED", "true")
    cache_enabled = Settings(environment="test")
    assert cache_enabled.cache_enabled is True


def test_comma_separated_cors_origins(monkeypatch) -> None:
    monkeypatch.setenv("TASK_TRACKER_CORS_ALLOW_ORIGINS", "https://a.example.com, https://b.example.com")
    settings = Settings(environment="test")
    assert settings.cors_allow_origins == ["https://a.example.com", "https://b.example.com"]


def test_cache_ttl_defaults_and_clamps() -> None:
    assert Settings(environment="test").cache_default_ttl_seconds == 60
    assert Settings(environment="test", cache_default_ttl_seconds=-5).cache_default_ttl_seconds == 0
