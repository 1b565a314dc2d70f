"""
Default portal settings and their idempotent installation.
"""
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.config import settings
from crea.core.logging_config import logger
from crea.models.setting import Setting, DEFAULT_SETTING_CATEGORY
from crea.services.membership_service import ORDINARY_PRICE_KEY, LIFETIME_PRICE_KEY

DEFAULT_SETTINGS = [
    {
        "key": ORDINARY_PRICE_KEY,
        "value": settings.MEMBERSHIP_ORDINARY_PRICE,
        "description": "Ordinary membership price (INR per year)",
        "category": DEFAULT_SETTING_CATEGORY,
    },
    {
        "key": LIFETIME_PRICE_KEY,
        "value": settings.MEMBERSHIP_LIFETIME_PRICE,
        "description": "Lifetime membership price (INR)",
        "category": DEFAULT_SETTING_CATEGORY,
    },
]


async def ensure_default_settings(db: AsyncSession) -> List[str]:
    """Insert the defaults that are missing; returns the keys that were created"""
    result = await db.execute(select(Setting.key).where(Setting.key.in_([d["key"] for d in DEFAULT_SETTINGS])))
    existing = set(result.scalars().all())

    created = []
    for default in DEFAULT_SETTINGS:
        if default["key"] in existing:
            continue
        db.add(Setting(**default))
        created.append(default["key"])

    if created:
        await db.commit()
        logger.info(f"[Settings] Initialized defaults: {', '.join(created)}")
    return created
