"""Seed a completed order for a dev user and print a bearer token for it.

Orders normally come from the checkout system; this gives a local user the
completed order that memorial creation and upload grants require.

Usage:
    uv run python -m scripts.seed_dev_order <user_id> [individual|family]

Requires: DATABASE_URL (Postgres, migrated with `alembic upgrade head`) and SECRET_KEY.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

from app.domain.enums import OrderStatus, ProfileVariant


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def _load_env() -> None:
    """Load .env from project root so get_settings() sees DATABASE_* when run as script."""
    load_dotenv(_project_root() / ".env", override=True)


async def main() -> None:
    if len(sys.argv) < 2:
        print(__doc__, file=sys.stderr)
        sys.exit(2)
    user_id = sys.argv[1]
    try:
        variant = ProfileVariant(sys.argv[2] if len(sys.argv) > 2 else "individual")
    except ValueError:
        print(f"Variant must be one of {ProfileVariant.values()}", file=sys.stderr)
        sys.exit(2)

    _load_env()
    from app.infrastructure.persistence.database import dispose_engine, get_session_factory
    from app.infrastructure.persistence.models import CustomerOrder
    from app.infrastructure.security.jwt import create_access_token
    from app.shared.utils.datetime import utc_now

    session_factory = get_session_factory()
    async with session_factory() as session:
        async with session.begin():
            order = CustomerOrder(
                user_id=user_id,
                status=OrderStatus.COMPLETED.value,
                variant=variant.value,
                paid_at=utc_now(),
            )
            session.add(order)
            await session.flush()
            order_id = order.id
    await dispose_engine()

    print(f"Order {order_id} ({variant.value}) completed for user {user_id}")
    print(f"Bearer token: {create_access_token({'sub': user_id})}")


if __name__ == "__main__":
    asyncio.run(main())
