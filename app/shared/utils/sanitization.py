"""Input sanitization utilities for XSS prevention and storage-safe names."""

import re
from typing import ClassVar

import nh3


class InputSanitizer:
    """
    Sanitize user inputs before they are stored or used in object keys.

    Free text (memory messages, descriptions) is shown on public memorial
    pages, so all HTML is stripped.
    """

    ALLOWED_TAGS: ClassVar[list[str]] = []
    ALLOWED_ATTRIBUTES: ClassVar[dict[str, list[str]]] = {}
    FILENAME_UNSAFE_PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"[^a-zA-Z0-9.-]")

    @classmethod
    def sanitize_html(cls, value: str) -> str:
        """Remove all HTML tags and sanitize with nh3 (strict by default).

        Args:
            value: Raw string that may contain HTML.

        Returns:
            Sanitized string safe for HTML display.
        """
        if not value:
            return value
        # nh3: tags = set of allowed tag names; attributes = dict[tag, set[attr]]
        attrs = {k: set(v) for k, v in cls.ALLOWED_ATTRIBUTES.items()}
        return nh3.clean(
            value,
            tags=set(cls.ALLOWED_TAGS),
            attributes=attrs,
        )

    @classmethod
    def sanitize_text(cls, value: str | None) -> str:
        """Strip HTML and surrounding whitespace from free text. None becomes ''."""
        if not value:
            return ""
        return cls.sanitize_html(value).strip()

    @classmethod
    def sanitize_filename(cls, value: str) -> str:
        """Make a client filename safe for an object key.

        Every character outside [a-zA-Z0-9.-] becomes '_', then the result is
        lower-cased. Path separators never survive.

        Raises:
            ValueError: If value is empty.
        """
        if not value or not value.strip():
            raise ValueError("Filename is required")
        name = value.strip().replace("\\", "/").rsplit("/", 1)[-1]
        return cls.FILENAME_UNSAFE_PATTERN.sub("_", name).lower()


def sanitize_text(value: str | None) -> str:
    """Sanitize free text for display (module-level shortcut)."""
    return InputSanitizer.sanitize_text(value)
