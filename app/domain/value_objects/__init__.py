"""Domain value objects and shared value types."""

from app.domain.value_objects.core import Slug

__all__ = [
    "Slug",
]
