"""
Maintenance jobs meant for cron.

    python -m crea.db.maintenance delete-completed-events
    python -m crea.db.maintenance expire-memberships
"""
import argparse
import asyncio
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.database import AsyncSessionLocal, init_db, close_db
from crea.core.logging_config import logger
from crea.models.event import Event
from crea.models.membership import Membership, MembershipPlan, MembershipStatus
from crea.services.storage_service import storage_service


async def delete_completed_events(db: AsyncSession, now: Optional[datetime] = None) -> int:
    """Delete events dated before today, together with their photos"""
    today = (now or datetime.utcnow()).replace(hour=0, minute=0, second=0, microsecond=0)
    result = await db.execute(select(Event).where(Event.date < today))
    completed = list(result.scalars().all())

    for event in completed:
        logger.info(f"[Maintenance] Deleting event '{event.title}' ({event.date.date()})")
        storage_service.delete_many(event.photos or [])
        await db.delete(event)

    await db.commit()
    return len(completed)


async def expire_memberships(db: AsyncSession, now: Optional[datetime] = None) -> int:
    """Mark active ordinary memberships past valid_until as expired"""
    now = now or datetime.utcnow()
    result = await db.execute(
        select(Membership).where(
            Membership.status == MembershipStatus.ACTIVE,
            Membership.type == MembershipPlan.ORDINARY,
            Membership.valid_until.is_not(None),
            Membership.valid_until < now,
        )
    )
    lapsed = list(result.scalars().all())

    for membership in lapsed:
        membership.status = MembershipStatus.EXPIRED
        logger.info(f"[Maintenance] Membership {membership.membership_id} expired")

    await db.commit()
    return len(lapsed)


JOBS = {
    "delete-completed-events": delete_completed_events,
    "expire-memberships": expire_memberships,
}


async def run(job_name: str) -> int:
    await init_db()
    try:
        async with AsyncSessionLocal() as db:
            count = await JOBS[job_name](db)
    finally:
        await close_db()
    print(f"{job_name}: {count} record(s) updated")
    return count


def main(argv=None):
    parser = argparse.ArgumentParser(description="CREA portal maintenance jobs")
    parser.add_argument("job", choices=sorted(JOBS))
    args = parser.parse_args(argv)
    asyncio.run(run(args.job))


if __name__ == "__main__":
    main()
