"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories, object store, cache).
"""

from app.application.interfaces import (
    IBatchDeleter,
    ICacheService,
    IFamilyMemberRepository,
    ILifecycleHistoryRepository,
    IMediaCleanupTaskRepository,
    IMemoryRepository,
    IObjectStore,
    IOrderRepository,
    IProfileRepository,
)
from app.application.services.lifecycle_guard import LifecycleGuard
from app.application.services.media_cleanup_service import MediaCleanupService
from app.application.services.upload_authorizer import UploadAuthorizer
from app.application.use_cases import FamilyMemberService, MemoryService, ProfileService

__all__ = [
    "FamilyMemberService",
    "IBatchDeleter",
    "ICacheService",
    "IFamilyMemberRepository",
    "ILifecycleHistoryRepository",
    "IMediaCleanupTaskRepository",
    "IMemoryRepository",
    "IObjectStore",
    "IOrderRepository",
    "IProfileRepository",
    "LifecycleGuard",
    "MediaCleanupService",
    "MemoryService",
    "ProfileService",
    "UploadAuthorizer",
]
