"""
Unit Tests for membership identifiers, validity and activation
"""
import pytest
from datetime import datetime, timedelta
from sqlalchemy import select

from crea.core.exceptions import ValidationError
from crea.models.membership import (
    Membership, MembershipPlan, MembershipStatus, PaymentStatus, LIFETIME_VALID_UNTIL,
)
from crea.models.notification import Notification, NotificationType
from crea.models.setting import Setting
from crea.models.user import User, MembershipType
from crea.services import membership_service
from crea.services.membership_service import (
    add_years,
    next_membership_id,
    next_member_id,
    membership_price,
    set_validity,
    renew,
    ORDINARY_PRICE_KEY,
)


def make_membership(email='applicant@example.com', plan=MembershipPlan.ORDINARY, membership_id='CREA20250001', **extra):
    values = dict(
        membership_id=membership_id,
        name='Ravi Kumar',
        designation='SSE',
        division='Pune',
        department='Engineering',
        place='Pune',
        unit='Track',
        mobile='9876543210',
        email=email,
        type=plan,
        payment_amount=500,
        personal_details={},
        professional_details={},
        documents=[],
        renewal_history=[],
    )
    values.update(extra)
    return Membership(**values)


class TestAddYears:

    def test_same_day_next_year(self):
        assert add_years(datetime(2024, 3, 15, 10, 0), 1) == datetime(2025, 3, 15, 10, 0)

    def test_leap_day_falls_back(self):
        assert add_years(datetime(2024, 2, 29), 1) == datetime(2025, 2, 28)


class TestIdentifiers:

    @pytest.mark.asyncio
    async def test_first_membership_id_of_year(self, db_session):
        assert await next_membership_id(db_session, datetime(2025, 6, 1)) == 'CREA20250001'

    @pytest.mark.asyncio
    async def test_membership_id_continues_from_highest(self, db_session):
        db_session.add(make_membership(email='a@example.com', membership_id='CREA20250007'))
        db_session.add(make_membership(email='b@example.com', membership_id='CREA20240099'))
        await db_session.commit()

        assert await next_membership_id(db_session, datetime(2025, 6, 1)) == 'CREA20250008'

    @pytest.mark.asyncio
    async def test_member_ids_numbered_per_prefix(self, db_session):
        db_session.add(User(name='A', email='a@example.com', member_id='ORD-0003'))
        db_session.add(User(name='B', email='b@example.com', member_id='LIF-0010'))
        await db_session.commit()

        assert await next_member_id(db_session, MembershipType.ORDINARY) == 'ORD-0004'
        assert await next_member_id(db_session, MembershipType.LIFETIME) == 'LIF-0011'

    @pytest.mark.asyncio
    async def test_member_id_requires_membership_type(self, db_session):
        with pytest.raises(ValidationError):
            await next_member_id(db_session, MembershipType.NONE)


class TestPricing:

    @pytest.mark.asyncio
    async def test_defaults_without_settings(self, db_session):
        assert await membership_price(db_session, MembershipPlan.ORDINARY) == 500
        assert await membership_price(db_session, MembershipPlan.LIFETIME) == 10000

    @pytest.mark.asyncio
    async def test_setting_overrides_default(self, db_session):
        db_session.add(Setting(key=ORDINARY_PRICE_KEY, value=750))
        await db_session.commit()

        assert await membership_price(db_session, MembershipPlan.ORDINARY) == 750

    @pytest.mark.asyncio
    async def test_non_numeric_setting_rejected(self, db_session):
        db_session.add(Setting(key=ORDINARY_PRICE_KEY, value='free'))
        await db_session.commit()

        with pytest.raises(ValidationError):
            await membership_price(db_session, MembershipPlan.ORDINARY)


class TestValidity:

    def test_ordinary_valid_one_year(self):
        membership = make_membership()
        now = datetime(2025, 1, 10)
        set_validity(membership, now)

        assert membership.valid_from == now
        assert membership.valid_until == datetime(2026, 1, 10)

    def test_lifetime_valid_until_sentinel(self):
        membership = make_membership(plan=MembershipPlan.LIFETIME)
        set_validity(membership, datetime(2025, 1, 10))

        assert membership.valid_until == LIFETIME_VALID_UNTIL

    def test_renew_extends_from_future_expiry(self):
        membership = make_membership(valid_until=datetime(2025, 12, 31))
        renew(membership, 'pay_1', 500, now=datetime(2025, 6, 1))

        assert membership.valid_until == datetime(2026, 12, 31)
        assert membership.status == MembershipStatus.ACTIVE
        assert membership.renewal_history[-1]['type'] == 'renewal'

    def test_renew_lapsed_starts_from_now(self):
        membership = make_membership(valid_until=datetime(2024, 1, 1), status=MembershipStatus.EXPIRED)
        renew(membership, now=datetime(2025, 6, 1))

        assert membership.valid_until == datetime(2026, 6, 1)

    def test_has_expired(self):
        membership = make_membership(valid_until=datetime.utcnow() - timedelta(days=1))
        assert membership.is_expired is True


class TestActivation:

    @pytest.mark.asyncio
    async def test_activate_grants_member_id(self, db_session, test_user, outbox, upload_root):
        membership = make_membership(email=test_user.email)
        db_session.add(membership)
        await db_session.commit()

        membership, member_id = await membership_service.activate(db_session, membership, 'pay_123')

        assert membership.status == MembershipStatus.ACTIVE
        assert membership.payment_status == PaymentStatus.COMPLETED
        assert membership.payment_reference == 'pay_123'
        assert membership.valid_until > membership.valid_from
        assert membership.renewal_history[-1]['type'] == 'new'
        assert member_id == 'ORD-0001'

        await db_session.refresh(test_user)
        assert test_user.member_id == 'ORD-0001'
        assert test_user.is_member is True
        assert test_user.membership_type == MembershipType.ORDINARY

        result = await db_session.execute(select(Notification).where(Notification.user_id == test_user.id))
        assert result.scalars().one().type == NotificationType.MEMBERSHIP

        assert outbox[-1]['to'] == test_user.email
        assert (upload_root / 'receipts' / f'membership-receipt-{membership.membership_id}.pdf').exists()

    @pytest.mark.asyncio
    async def test_activate_is_idempotent(self, db_session, test_user):
        membership = make_membership(email=test_user.email)
        db_session.add(membership)
        await db_session.commit()

        _, first_id = await membership_service.activate(db_session, membership, 'pay_1')
        history = list(membership.renewal_history)
        _, second_id = await membership_service.activate(db_session, membership, 'pay_1')

        assert first_id == second_id
        assert membership.renewal_history == history

    @pytest.mark.asyncio
    async def test_activate_without_account(self, db_session):
        membership = make_membership(email='nobody@example.com')
        db_session.add(membership)
        await db_session.commit()

        membership, member_id = await membership_service.activate(db_session, membership, 'pay_9')

        assert membership.status == MembershipStatus.ACTIVE
        assert member_id is None

    @pytest.mark.asyncio
    async def test_upgrade_to_lifetime(self, db_session, test_user):
        membership = make_membership(email=test_user.email)
        db_session.add(membership)
        await db_session.commit()
        await membership_service.activate(db_session, membership, 'pay_1')
        membership.upgrade_amount = 9500

        membership, member_id = await membership_service.apply_upgrade(db_session, membership, 'pay_2')

        assert membership.type == MembershipPlan.LIFETIME
        assert membership.valid_until == LIFETIME_VALID_UNTIL
        assert membership.renewal_history[-1]['type'] == 'upgrade'
        assert member_id == 'LIF-0001'

    @pytest.mark.asyncio
    async def test_failed_payment_keeps_pending(self, db_session):
        membership = make_membership()
        db_session.add(membership)
        await db_session.commit()

        await membership_service.mark_payment_failed(db_session, membership)

        assert membership.payment_status == PaymentStatus.FAILED
        assert membership.status == MembershipStatus.PENDING

    @pytest.mark.asyncio
    async def test_paid_membership_is_not_revived(self, db_session, outbox):
        membership = make_membership(email='gone@example.com')
        db_session.add(membership)
        await db_session.commit()
        await membership_service.activate(db_session, membership, 'pay_1')
        membership.status = MembershipStatus.EXPIRED
        await db_session.commit()

        with pytest.raises(ValidationError):
            await membership_service.activate(db_session, membership, 'pay_1')

        assert membership.status == MembershipStatus.EXPIRED
        assert len(membership.renewal_history) == 1
        assert len(outbox) == 1


class TestOrders:

    @pytest.mark.asyncio
    async def test_superseded_order_uses_its_own_terms(self, db_session):
        membership = make_membership(email='terms@example.com')
        db_session.add(membership)
        await db_session.flush()
        first = membership_service.record_order(db_session, membership, 'order_a', 500)
        membership.type = MembershipPlan.LIFETIME
        membership_service.record_order(db_session, membership, 'order_b', 10000)
        await db_session.commit()
        assert membership.razorpay_order_id == 'order_b'

        found, order = await membership_service.find_by_order(db_session, 'order_a')
        assert found.id == membership.id
        assert order.order_id == first.order_id

        membership, _ = await membership_service.settle_order(db_session, found, order, 'pay_a')

        assert membership.status == MembershipStatus.ACTIVE
        assert membership.type == MembershipPlan.ORDINARY
        assert membership.payment_amount == 500
        assert membership.razorpay_order_id == 'order_a'
        assert order.status == PaymentStatus.COMPLETED
        assert order.payment_id == 'pay_a'

    @pytest.mark.asyncio
    async def test_settled_order_replay_refused_once_inactive(self, db_session):
        membership = make_membership(email='replay@example.com')
        db_session.add(membership)
        await db_session.flush()
        order = membership_service.record_order(db_session, membership, 'order_r', 500)
        await db_session.commit()
        await membership_service.settle_order(db_session, membership, order, 'pay_r')

        again, _ = await membership_service.settle_order(db_session, membership, order, 'pay_r')
        assert again.status == MembershipStatus.ACTIVE

        membership.status = MembershipStatus.REJECTED
        await db_session.commit()
        with pytest.raises(ValidationError):
            await membership_service.settle_order(db_session, membership, order, 'pay_r')
        assert len(membership.renewal_history) == 1

    @pytest.mark.asyncio
    async def test_unknown_order(self, db_session):
        assert await membership_service.find_by_order(db_session, 'order_none') == (None, None)
