"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure.
"""

from app.application.interfaces.repositories import (
    IFamilyMemberRepository,
    ILifecycleHistoryRepository,
    IMediaCleanupTaskRepository,
    IMemoryRepository,
    IOrderRepository,
    IProfileRepository,
)
from app.application.interfaces.services import (
    IBatchDeleter,
    ICacheService,
    IObjectStore,
)

__all__ = [
    "IBatchDeleter",
    "ICacheService",
    "IFamilyMemberRepository",
    "ILifecycleHistoryRepository",
    "IMediaCleanupTaskRepository",
    "IMemoryRepository",
    "IObjectStore",
    "IOrderRepository",
    "IProfileRepository",
]
