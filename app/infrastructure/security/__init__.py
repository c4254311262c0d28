"""Security: bearer token verification (HS256 JWTs shared with the auth provider)."""

from app.infrastructure.security.jwt import create_access_token, verify_token

__all__ = [
    "create_access_token",
    "verify_token",
]
