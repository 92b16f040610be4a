from __future__ import annotations

from datetime import timedelta

from jose import jwt

from task_tracker.core.config import Settings
from task_tracker.core.identity import Identity, resolve_identity
from task_tracker.core.security import create_access_token
from task_tracker.models import UserRole

CLAIMS = {"email": "alice@example.com", "name": "Alice", "role": "USER"}


def _settings() -> Settings:
    return Settings(environment="test", jwt_secret_key="identity-secret")


def test_valid_access_token_resolves_identity() -> None:
    settings = _settings()
    token = create_access_token(subject="abc123", claims=CLAIMS, settings=settings)

    identity = resolve_identity(token.token, settings)

    assert identity == Identity(user_id="abc123", email="alice@example.com", name="Alice", role=UserRole.USER)


def test_missing_and_malformed_tokens_resolve_to_none() -> None:
    settings = _settings()
    assert resolve_identity(None, settings) is None
    assert resolve_identity("", settings) is None
    assert resolve_identity("not-a-jwt", settings) is None


def test_expired_token_resolves_to_none() -> None:
    settings = _settings()
    token = create_access_token(
        subject="abc123",
        claims=CLAIMS,
        settings=settings,
        expires_delta=timedelta(seconds=-5),
    )
    assert resolve_identity(token.token, settings) is None


def test_token_signed_with_other_secret_is_rejected() -> None:
    settings = _settings()
    other = Settings(environment="test", jwt_secret_key="someone-else")
    token = create_access_token(subject="abc123", claims=CLAIMS, settings=other)
    assert resolve_identity(token.token, settings) is None


def test_token_without_identity_claims_is_rejected() -> None:
    settings = _settings()
    token = jwt.encode({"sub": "abc123", "type": "access"}, settings.jwt_secret_key, algorithm="HS256")
    assert resolve_identity(token, settings) is None


def test_non_access_token_type_is_rejected() -> None:
    settings = _settings()
    token = create_access_token(subject="abc123", claims=CLAIMS, settings=settings)
    payload = jwt.get_unverified_claims(token.token)
    payload["type"] = "refresh"
    forged = jwt.encode(payload, settings.jwt_secret_key, algorithm="HS256")
    assert resolve_identity(forged, settings) is None
