from __future__ import annotations

from fastapi import Depends, Header

from api.dependencies import get_settings
from api.errors import ApiError
from shared.security import AccessTokenVerifier, parse_role
from waste_core.core.session import SessionContext

_verifier = AccessTokenVerifier(secret=get_settings().AUTH_JWT_SECRET)


def get_token_verifier() -> AccessTokenVerifier:
    return _verifier


def validate_bearer_token(authorization: str | None, verifier: AccessTokenVerifier) -> SessionContext:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise ApiError("UNAUTHORIZED", "Missing bearer token", 401)
    token = authorization.split(" ", 1)[1]
    try:
        claims = verifier.verify(token)
    except ValueError as exc:
        raise ApiError("UNAUTHORIZED", str(exc), 401) from exc
    role = parse_role(claims.role)
    if role is None:
        raise ApiError("UNAUTHORIZED", "Unknown role in token", 401)
    return SessionContext(
        user_id=claims.sub,
        role=role,
        full_name=claims.full_name,
        email=claims.email,
    )


async def require_session(
    authorization: str | None = Header(default=None),
    verifier: AccessTokenVerifier = Depends(get_token_verifier),
) -> SessionContext:
    return validate_bearer_token(authorization, verifier)

