"""Lifecycle domain entities: order (eligibility source) and history entry (ledger)."""

from dataclasses import dataclass
from datetime import datetime

from app.domain.enums import HistoryAction, OrderStatus, ProfileVariant


@dataclass(frozen=True)
class OrderEntity:
    """Package order as seen by the lifecycle rules (read-only here)."""

    id: str
    user_id: str
    status: OrderStatus
    variant: ProfileVariant
    paid_at: datetime | None = None

    @property
    def is_completed(self) -> bool:
        return self.status == OrderStatus.COMPLETED


@dataclass(frozen=True)
class LifecycleHistoryEntry:
    """Immutable ledger entry. A 'deleted' entry bans the user from creating again."""

    id: str
    user_id: str
    profile_id: str
    action: HistoryAction
    created_at: datetime | None = None

    @property
    def is_deletion(self) -> bool:
        return self.action == HistoryAction.DELETED
