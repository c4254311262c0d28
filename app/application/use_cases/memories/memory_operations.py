"""Memory wall operations: public submission, owner moderation and deletion."""

from __future__ import annotations

import logging
from app.application.dtos.memory import MemoryDeleteAck, MemorySubmit
from app.application.interfaces.repositories import (
    IMediaCleanupTaskRepository,
    IMemoryRepository,
    IProfileRepository,
)
from app.application.services.media_ownership import MediaOwnership
from app.application.services.media_reference_collector import MediaReferenceCollector
from app.core.constants import (
    MAX_TEXT_LENGTH,
    MIN_MEMORY_AUTHOR_LENGTH,
    MIN_MEMORY_MESSAGE_LENGTH,
)
from app.domain.entities.memorial import MemoryEntity, ProfileEntity
from app.domain.enums import CleanupReason
from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.shared.utils.sanitization import sanitize_text

logger = logging.getLogger(__name__)

MAX_AUTHOR_LENGTH = 100


class MemoryService:
    """Memories are submitted unauthorized; only the profile owner can publish or delete them."""

    def __init__(
        self,
        memory_repo: IMemoryRepository,
        profile_repo: IProfileRepository,
        cleanup_repo: IMediaCleanupTaskRepository,
        ownership: MediaOwnership,
        *,
        cleanup_max_attempts: int = 5,
    ) -> None:
        self.memory_repo = memory_repo
        self.profile_repo = profile_repo
        self.cleanup_repo = cleanup_repo
        self.ownership = ownership
        self.cleanup_max_attempts = cleanup_max_attempts

    async def _public_profile(self, profile_id: str) -> ProfileEntity:
        profile = await self.profile_repo.get_entity(profile_id)
        if profile is None or not profile.is_publicly_visible():
            raise ResourceNotFoundException("memorial_profile", profile_id)
        return profile

    async def _owned_memory(self, memory_id: str, user_id: str) -> MemoryEntity:
        memory = await self.memory_repo.get_memory(memory_id)
        if memory is None:
            raise ResourceNotFoundException("memory", memory_id)
        profile = await self.profile_repo.get_entity(memory.profile_id)
        if profile is None or not profile.is_owned_by(user_id):
            raise ResourceNotFoundException("memory", memory_id)
        return memory

    def _clean_submission(self, data: MemorySubmit) -> tuple[str, str, str | None]:
        author = sanitize_text(data.author_name)
        if len(author) < MIN_MEMORY_AUTHOR_LENGTH:
            raise ValidationException(
                f"Name must have at least {MIN_MEMORY_AUTHOR_LENGTH} characters",
                field="author_name",
            )
        if len(author) > MAX_AUTHOR_LENGTH:
            raise ValidationException(
                f"Name cannot exceed {MAX_AUTHOR_LENGTH} characters", field="author_name"
            )
        message = sanitize_text(data.message)
        if len(message) < MIN_MEMORY_MESSAGE_LENGTH:
            raise ValidationException(
                f"Message must have at least {MIN_MEMORY_MESSAGE_LENGTH} characters",
                field="message",
            )
        if len(message) > MAX_TEXT_LENGTH:
            raise ValidationException(
                f"Message cannot exceed {MAX_TEXT_LENGTH} characters", field="message"
            )
        photo_url = (data.photo_url or "").strip() or None
        if photo_url is not None:
            self.ownership.require_memory_photo(photo_url, data.uploader_id)
        return author, message, photo_url

    async def submit_memory(self, data: MemorySubmit) -> MemoryEntity:
        """Anyone may submit; the memory stays hidden until the owner authorizes it."""
        profile = await self._public_profile(data.profile_id)
        author, message, photo_url = self._clean_submission(data)
        memory = await self.memory_repo.create_memory(
            profile.id, profile.variant, author, message, photo_url
        )
        logger.info("Memory submitted: profile=%s memory=%s", profile.id, memory.id)
        return memory

    async def set_authorized(
        self, memory_id: str, user_id: str, is_authorized: bool
    ) -> MemoryEntity:
        await self._owned_memory(memory_id, user_id)
        updated = await self.memory_repo.set_authorized(memory_id, is_authorized)
        if updated is None:
            raise ResourceNotFoundException("memory", memory_id)
        return updated

    async def delete_memory(self, memory_id: str, user_id: str) -> MemoryDeleteAck:
        """Delete a memory and queue its photo for removal from the object store."""
        memory = await self._owned_memory(memory_id, user_id)
        await self.memory_repo.delete_memory(memory_id)
        cleanup_task_id = None
        urls = self.ownership.deletable_memory_photos(
            MediaReferenceCollector.collect_memory(memory)
        )
        if urls:
            # Another memory may carry the same photo.
            urls -= await self.memory_repo.photo_urls_in_use(urls, exclude_memory_id=memory_id)
        if urls:
            task = await self.cleanup_repo.enqueue(
                CleanupReason.MEMORY_DELETED, memory_id, sorted(urls), self.cleanup_max_attempts
            )
            cleanup_task_id = task.id
        logger.info("Memory deleted: memory=%s", memory_id)
        return MemoryDeleteAck(memory_id=memory_id, cleanup_task_id=cleanup_task_id)

    async def list_public_memories(self, profile_id: str) -> list[MemoryEntity]:
        """Authorized memories of a published, active profile."""
        await self._public_profile(profile_id)
        return await self.memory_repo.list_for_profile(profile_id, authorized_only=True)
