"""Customer order repository (read-only)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.entities.lifecycle import OrderEntity
from app.domain.enums import OrderStatus, ProfileVariant
from app.infrastructure.persistence.models.customer_order import CustomerOrder


class OrderRepository:
    """Reads package orders for eligibility checks. Implements IOrderRepository."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_completed_order(
        self, user_id: str, variant: ProfileVariant | None = None
    ) -> OrderEntity | None:
        """Return the most recent completed order of user (optionally of variant)."""
        stmt = select(CustomerOrder).where(
            CustomerOrder.user_id == user_id,
            CustomerOrder.status == OrderStatus.COMPLETED.value,
        )
        if variant is not None:
            stmt = stmt.where(CustomerOrder.variant == variant.value)
        result = await self.db.execute(
            stmt.order_by(CustomerOrder.created_at.desc()).limit(1)
        )
        o = result.scalar_one_or_none()
        if o is None:
            return None
        return OrderEntity(
            id=o.id,
            user_id=o.user_id,
            status=OrderStatus(o.status),
            variant=ProfileVariant(o.variant),
            paid_at=o.paid_at,
        )
