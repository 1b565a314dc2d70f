"""
Database Seed Data Module

Admin account, default settings and demo content for a fresh portal.
Every step is idempotent, so seeding twice changes nothing.

Run with: python -m crea.db.seed_data
"""
import asyncio
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.config import settings
from crea.core.database import AsyncSessionLocal, init_db
from crea.core.logging_config import logger
from crea.core.security import get_password_hash
from crea.models.body_member import BodyMember, Division
from crea.models.event import Event
from crea.models.external_link import ExternalLink, ExternalLinkCategory
from crea.models.forum import ForumTopic
from crea.models.user import User, UserRole
from crea.services.settings_service import ensure_default_settings


# ==================== Sample Data Constants ====================

SAMPLE_BODY_MEMBERS = [
    {"name": "Shri R. K. Deshmukh", "designation": "President", "division": Division.MUMBAI},
    {"name": "Shri A. P. Kulkarni", "designation": "General Secretary", "division": Division.MUMBAI},
    {"name": "Shri S. B. Patil", "designation": "Divisional Secretary", "division": Division.PUNE},
    {"name": "Shri M. V. Joshi", "designation": "Divisional Secretary", "division": Division.NAGPUR},
    {"name": "Shri D. N. Pawar", "designation": "Divisional Secretary", "division": Division.SOLAPUR},
    {"name": "Shri V. G. Chaudhari", "designation": "Divisional Secretary", "division": Division.BSL},
]

SAMPLE_EXTERNAL_LINKS = [
    {"title": "Indian Railways", "url": "https://indianrailways.gov.in", "category": ExternalLinkCategory.GOVERNMENT, "order": 1},
    {"title": "Central Railway", "url": "https://cr.indianrailways.gov.in", "category": ExternalLinkCategory.GOVERNMENT, "order": 2},
    {"title": "RDSO", "url": "https://rdso.indianrailways.gov.in", "category": ExternalLinkCategory.GOVERNMENT, "order": 3},
    {"title": "IREPS", "url": "https://www.ireps.gov.in", "category": ExternalLinkCategory.INDUSTRY, "order": 1},
    {"title": "Institution of Permanent Way Engineers", "url": "https://ipwe.in", "category": ExternalLinkCategory.ORGANIZATION, "order": 1},
]

SAMPLE_EVENTS = [
    {
        "title": "Annual General Body Meeting",
        "description": "Annual meeting of all CREA members to review the year's work and elect office bearers.",
        "location": "CSMT, Mumbai",
        "days_ahead": 30,
    },
    {
        "title": "Technical Seminar on Track Maintenance",
        "description": "Seminar on mechanised track maintenance practices for section engineers.",
        "location": "Pune",
        "days_ahead": 45,
    },
]

SAMPLE_FORUM_TOPIC = "Welcome to the CREA discussion forum"


# ==================== Seed Functions ====================

async def _is_empty(db: AsyncSession, model) -> bool:
    result = await db.execute(select(func.count(model.id)))
    return (result.scalar() or 0) == 0


async def seed_admin(db: AsyncSession) -> Optional[User]:
    """Create the admin from ADMIN_EMAIL / ADMIN_PASSWORD, or promote an existing account"""
    if not (settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD):
        logger.warning("[Seed] ADMIN_EMAIL / ADMIN_PASSWORD not set - skipping admin account")
        return None

    email = settings.ADMIN_EMAIL.strip().lower()
    result = await db.execute(select(User).where(User.email == email))
    admin = result.scalar_one_or_none()

    if admin is None:
        admin = User(
            name=settings.ADMIN_NAME,
            email=email,
            hashed_password=get_password_hash(settings.ADMIN_PASSWORD),
            role=UserRole.ADMIN,
        )
        db.add(admin)
        logger.info(f"[Seed] Created admin {email}")
    elif admin.role != UserRole.ADMIN:
        admin.role = UserRole.ADMIN
        logger.info(f"[Seed] Promoted {email} to admin")
    else:
        return admin

    await db.commit()
    await db.refresh(admin)
    return admin


async def seed_body_members(db: AsyncSession) -> int:
    if not await _is_empty(db, BodyMember):
        return 0
    for member in SAMPLE_BODY_MEMBERS:
        db.add(BodyMember(photo_url="/images/avatar-placeholder.png", **member))
    await db.flush()
    print(f"Created {len(SAMPLE_BODY_MEMBERS)} body members")
    return len(SAMPLE_BODY_MEMBERS)


async def seed_external_links(db: AsyncSession) -> int:
    if not await _is_empty(db, ExternalLink):
        return 0
    for link in SAMPLE_EXTERNAL_LINKS:
        db.add(ExternalLink(**link))
    await db.flush()
    print(f"Created {len(SAMPLE_EXTERNAL_LINKS)} external links")
    return len(SAMPLE_EXTERNAL_LINKS)


async def seed_events(db: AsyncSession) -> int:
    if not await _is_empty(db, Event):
        return 0
    today = datetime.utcnow().replace(hour=10, minute=0, second=0, microsecond=0)
    for sample in SAMPLE_EVENTS:
        db.add(Event(
            title=sample["title"],
            description=sample["description"],
            location=sample["location"],
            date=today + timedelta(days=sample["days_ahead"]),
        ))
    await db.flush()
    print(f"Created {len(SAMPLE_EVENTS)} events")
    return len(SAMPLE_EVENTS)


async def seed_forum(db: AsyncSession, admin: Optional[User]) -> int:
    if not await _is_empty(db, ForumTopic):
        return 0
    db.add(ForumTopic(
        title=SAMPLE_FORUM_TOPIC,
        author=admin.name if admin else settings.ADMIN_NAME,
        author_id=admin.id if admin else None,
    ))
    await db.flush()
    print("Created forum welcome topic")
    return 1


async def seed_all():
    """Seed everything that is missing"""
    print("=" * 50)
    print("Seeding CREA portal...")
    print("=" * 50)

    await init_db()

    async with AsyncSessionLocal() as db:
        try:
            admin = await seed_admin(db)
            created = await ensure_default_settings(db)
            print(f"Default settings created: {len(created)}")

            await seed_body_members(db)
            await seed_external_links(db)
            await seed_events(db)
            await seed_forum(db, admin)

            await db.commit()
            print("=" * 50)
            print("Database seeding completed successfully!")
            print("=" * 50)

        except Exception as e:
            await db.rollback()
            print(f"Error seeding database: {e}")
            raise


def main():
    asyncio.run(seed_all())


if __name__ == "__main__":
    main()
