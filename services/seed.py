from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models.catalog import CostType
from utils.id_generator import generate_id, COST_TYPE_PREFIX
from utils.logger import logger


async def seed_cost_types(db: AsyncSession, names: Iterable[str]) -> int:
    """Insert the default cost types that are missing; returns how many were added."""
    result = await db.execute(select(CostType.name))
    existing = set(result.scalars().all())

    added = 0
    for name in names:
        if name not in existing:
            db.add(CostType(id=generate_id(COST_TYPE_PREFIX), name=name))
            added += 1

    await db.commit()
    if added:
        logger.info(f"Seeded {added} default cost type(s)")
    return added
