"""Domain value objects for the memorial service.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
import unicodedata
from dataclasses import dataclass
from typing import ClassVar

from app.core.constants import FAMILY_SLUG_PREFIX, SLUG_BASE_MAX_LENGTH
from app.domain.enums import ProfileVariant


@dataclass(frozen=True)
class Slug:
    """Unique, URL-safe memorial identifier: display name plus a numeric suffix.

    Built with Slug.for_profile(); direct construction validates format only.
    """

    value: str

    PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"^[a-z0-9_]+(-[a-z0-9_]+)*$")
    _STRIP_RE: ClassVar[re.Pattern[str]] = re.compile(r"[^\w\s-]", re.ASCII)
    _SPACE_RE: ClassVar[re.Pattern[str]] = re.compile(r"\s+")

    def __post_init__(self) -> None:
        if not self.value or not self.PATTERN.match(self.value):
            raise ValueError(f"Invalid slug: {self.value!r}")

    def __str__(self) -> str:
        return self.value

    @classmethod
    def base_from_name(cls, name: str) -> str:
        """Lowercase, accent-free, hyphenated base (max SLUG_BASE_MAX_LENGTH chars)."""
        ascii_name = (
            unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
        )
        base = cls._STRIP_RE.sub("", ascii_name.strip().lower())
        base = cls._SPACE_RE.sub("-", base)
        base = re.sub(r"-{2,}", "-", base)[:SLUG_BASE_MAX_LENGTH]
        return base.strip("-")

    @classmethod
    def for_profile(cls, name: str, variant: ProfileVariant, suffix: int) -> "Slug":
        """Build the slug for a new profile.

        Args:
            name: Display name (person or family name).
            variant: Family slugs get the FAMILY_SLUG_PREFIX.
            suffix: Disambiguating number (epoch milliseconds at creation).
        """
        parts = []
        if variant == ProfileVariant.FAMILY:
            parts.append(FAMILY_SLUG_PREFIX)
        base = cls.base_from_name(name)
        if base:
            parts.append(base)
        parts.append(str(suffix))
        return cls("-".join(parts))
