"""Bearer tokens for memorial owners.

The auth provider signs HS256 tokens with the shared SECRET_KEY; the sub
claim is the user id that owns memorials, orders and uploads. Only
verification runs in request paths. create_access_token mints the same
shape for the dev seed script and tests.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt

from app.core.config import get_settings

_REQUIRED_CLAIMS = {"require_exp": True, "require_sub": True}


def create_access_token(
    claims: dict[str, Any], expires_delta: timedelta | None = None
) -> str:
    """Sign claims (must include sub) with an exp defaulting to ACCESS_TOKEN_EXPIRE_MINUTES."""
    settings = get_settings()
    ttl = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    payload = {**claims, "exp": datetime.now(UTC) + ttl}
    return jwt.encode(
        payload, settings.secret_key.get_secret_value(), algorithm=settings.algorithm
    )


def verify_token(token: str) -> dict[str, Any]:
    """Decode a bearer token and return its claims.

    Raises:
        ValueError: Bad signature, expired, or missing exp or a non-empty sub.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options=_REQUIRED_CLAIMS,
        )
    except ExpiredSignatureError as e:
        raise ValueError("Token expired") from e
    except JWTError as e:
        raise ValueError(f"Invalid token: {e}") from e
    if not isinstance(payload.get("sub"), str) or not payload["sub"]:
        raise ValueError("Token missing required claim: sub")
    return payload
