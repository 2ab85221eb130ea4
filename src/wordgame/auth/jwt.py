"""
HS256 access tokens for the mobile client.

The token carries the user id (``sub``), email and role. Route guards still
load the user row, so a role change takes effect on the next request.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from wordgame.config import get_settings

ACCESS_TOKEN_TYPE = "access"


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    email: str
    role: str


def create_access_token(user_id: int, email: str, role: str) -> str:
    """
    Sign an access token valid for ``jwt_access_token_expire_minutes``.

    Args:
        user_id: The user's database ID.
        email: The user's email address.
        role: student, teacher or admin.
    """
    settings = get_settings()
    issued = datetime.now(timezone.utc)
    claims: dict[str, Any] = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "type": ACCESS_TOKEN_TYPE,
        "iss": settings.jwt_issuer,
        "iat": issued,
        "exp": issued + timedelta(minutes=settings.jwt_access_token_expire_minutes),
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str, expected_type: str = ACCESS_TOKEN_TYPE) -> dict[str, Any]:
    """
    Check signature, issuer, expiry and token type; return the raw payload.

    Raises:
        jwt.InvalidTokenError: With a client-presentable message.
    """
    settings = get_settings()
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            issuer=settings.jwt_issuer,
            options={"require": ["sub", "exp", "iss"]},
        )
    except jwt.ExpiredSignatureError:
        msg = "Token has expired"
        raise jwt.InvalidTokenError(msg) from None

    token_type = payload.get("type")
    if token_type != expected_type:
        msg = f"Expected token type '{expected_type}', got '{token_type}'"
        raise jwt.InvalidTokenError(msg)
    return payload


def decode_access_token(token: str) -> TokenClaims:
    """Verified claims of an access token.

    Raises:
        jwt.InvalidTokenError: Invalid token or a non-numeric subject.
    """
    payload = verify_token(token, ACCESS_TOKEN_TYPE)
    try:
        user_id = int(payload["sub"])
    except ValueError:
        msg = "Malformed token subject"
        raise jwt.InvalidTokenError(msg) from None
    return TokenClaims(user_id=user_id, email=payload.get("email", ""), role=payload.get("role", ""))
