"""
Unit Tests for the maintenance jobs
"""
import pytest
from datetime import datetime, timedelta
from sqlalchemy import select

from crea.db.maintenance import delete_completed_events, expire_memberships
from crea.models.event import Event
from crea.models.membership import Membership, MembershipPlan, MembershipStatus


def membership(membership_id, email, plan, valid_until, status=MembershipStatus.ACTIVE):
    return Membership(
        membership_id=membership_id, name='M', designation='SSE', division='Pune',
        department='Engineering', place='Pune', unit='Track', mobile='9876543210',
        email=email, type=plan, status=status, valid_until=valid_until,
    )


class TestDeleteCompletedEvents:

    @pytest.mark.asyncio
    async def test_only_past_events_removed(self, db_session):
        now = datetime(2025, 6, 15, 12, 0)
        db_session.add(Event(title='Past', description='d', date=now - timedelta(days=2)))
        db_session.add(Event(title='Earlier today', description='d', date=now.replace(hour=8)))
        db_session.add(Event(title='Future', description='d', date=now + timedelta(days=2)))
        await db_session.commit()

        deleted = await delete_completed_events(db_session, now=now)

        titles = (await db_session.execute(select(Event.title))).scalars().all()
        assert deleted == 1
        assert sorted(titles) == ['Earlier today', 'Future']


class TestExpireMemberships:

    @pytest.mark.asyncio
    async def test_lapsed_ordinary_memberships_expire(self, db_session):
        now = datetime(2025, 6, 15)
        db_session.add(membership('CREA20240001', 'a@example.com', MembershipPlan.ORDINARY, now - timedelta(days=1)))
        db_session.add(membership('CREA20240002', 'b@example.com', MembershipPlan.ORDINARY, now + timedelta(days=30)))
        db_session.add(membership('CREA20240003', 'c@example.com', MembershipPlan.LIFETIME, now - timedelta(days=1)))
        await db_session.commit()

        expired = await expire_memberships(db_session, now=now)

        rows = (await db_session.execute(select(Membership))).scalars().all()
        statuses = {m.membership_id: m.status for m in rows}
        assert expired == 1
        assert statuses == {
            'CREA20240001': MembershipStatus.EXPIRED,
            'CREA20240002': MembershipStatus.ACTIVE,
            'CREA20240003': MembershipStatus.ACTIVE,
        }
