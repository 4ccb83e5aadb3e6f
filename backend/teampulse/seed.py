"""Seed the default WFH rewards.

Run with ``python -m teampulse.seed``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from teampulse.db import dispose_engine, get_session_factory
from teampulse.models.reward import UNLIMITED_QUANTITY, Reward
from teampulse.schemas.reward import SeedRewardsResponse

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

WFH_REWARDS = [
    {
        "name": "WFH Day +1",
        "description": "One extra work-from-home day this month",
        "points_cost": 50,
    },
    {
        "name": "WFH Week +5",
        "description": "Five extra work-from-home days this month",
        "points_cost": 200,
    },
]


async def seed_wfh_rewards(session: AsyncSession) -> SeedRewardsResponse:
    """Create the default WFH rewards, skipping any whose name already exists."""
    result = await session.execute(
        select(Reward.name).where(col(Reward.name).in_([r["name"] for r in WFH_REWARDS]))
    )
    existing = set(result.scalars().all())

    created: list[str] = []
    skipped: list[str] = []
    for item in WFH_REWARDS:
        name = str(item["name"])
        if name in existing:
            skipped.append(name)
            continue
        session.add(
            Reward(
                name=name,
                description=str(item["description"]),
                points_cost=int(item["points_cost"]),
                quantity=UNLIMITED_QUANTITY,
                is_active=True,
            )
        )
        created.append(name)

    await session.commit()
    logger.info("Seeded WFH rewards: created=%s skipped=%s", created, skipped)
    return SeedRewardsResponse(created=created, skipped=skipped)


async def _main() -> None:
    logging.basicConfig(level=logging.INFO)
    factory = get_session_factory()
    async with factory() as session:
        await seed_wfh_rewards(session)
    await dispose_engine()


if __name__ == "__main__":
    asyncio.run(_main())
