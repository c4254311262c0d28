"""Cache key builders for the profile list cache."""

from app.core.constants import CACHE_KEY_SEP, CACHE_PREFIX_PROFILES


def profiles_by_user_key(user_id: str) -> str:
    """Key for the active profiles of a user, e.g. ``profiles:user:<id>``.

    Raises:
        ValueError: If user_id contains the separator (keys would collide).
    """
    if CACHE_KEY_SEP in user_id:
        raise ValueError(f"user_id must not contain {CACHE_KEY_SEP!r}")
    return CACHE_KEY_SEP.join((CACHE_PREFIX_PROFILES, "user", user_id))
