"""Resolve the calling user's identity from a bearer token."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pydantic import ValidationError

from ..models import UserRole
from ..schemas.auth import TokenPayload
from .config import Settings
from .security import JWTError, TokenType, decode_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Identity:
    """The resolved caller of an operation."""

    user_id: str
    email: str
    name: str
    role: UserRole


def resolve_identity(token: str | None, settings: Settings) -> Identity | None:
    """Return the identity carried by ``token`` or ``None``.

    Missing, expired, malformed, and non-access tokens all resolve to ``None``;
    callers decide whether absence is an authorization failure.
    """

    if not token:
        return None
    try:
        payload = decode_token(
            token=token,
            secret=settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )
        claims = TokenPayload.model_validate(payload)
    except (JWTError, ValidationError):
        logger.debug("Rejected bearer token during identity resolution.")
        return None

    if claims.type is not TokenType.ACCESS:
        return None

    return Identity(user_id=claims.sub, email=claims.email, name=claims.name, role=claims.role)


__all__ = ["Identity", "resolve_identity"]
