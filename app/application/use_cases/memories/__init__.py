"""Memory wall use cases."""

from app.application.use_cases.memories.memory_operations import MemoryService

__all__ = ["MemoryService"]
