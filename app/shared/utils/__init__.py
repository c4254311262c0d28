"""Shared utilities: datetime, generators, sanitization."""

from app.shared.utils.datetime import ensure_utc, epoch_ms, utc_now
from app.shared.utils.generators import generate_cuid, generate_short_token
from app.shared.utils.sanitization import InputSanitizer, sanitize_text

__all__ = [
    "generate_cuid",
    "generate_short_token",
    "utc_now",
    "ensure_utc",
    "epoch_ms",
    "InputSanitizer",
    "sanitize_text",
]
