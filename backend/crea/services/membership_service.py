"""
Membership Service
==================
Identifiers, pricing, validity and the payment-driven lifecycle.

Lifecycle:
    pending --(verified payment / webhook / admin offline confirmation)--> active
    pending --(admin)--> rejected
    active  --(validity lapsed, maintenance job or admin)--> expired
    active/expired --(renewal)--> active

A membership never becomes active because a client said so; activation runs
only after the Razorpay signature has been checked. Each issued order is
settled at most once, so an old signature cannot revive an expired or
rejected membership.
"""
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.config import settings
from crea.core.exceptions import ValidationError
from crea.core.logging_config import logger
from crea.models.membership import (
    Membership, MembershipOrder, MembershipPlan, MembershipStatus, OrderPurpose, PaymentStatus,
    LIFETIME_VALID_UNTIL,
)
from crea.models.notification import NotificationType
from crea.models.setting import Setting
from crea.models.user import User, MembershipType, MEMBER_ID_PREFIXES
from crea.services.email_service import email_service
from crea.services.notification_service import notify_user
from crea.services.receipt_service import receipt_service

ORDINARY_PRICE_KEY = "membership_ordinary_price"
LIFETIME_PRICE_KEY = "membership_lifetime_price"

PLAN_TO_MEMBERSHIP_TYPE = {
    MembershipPlan.ORDINARY: MembershipType.ORDINARY,
    MembershipPlan.LIFETIME: MembershipType.LIFETIME,
}


def add_years(value: datetime, years: int) -> datetime:
    """Same calendar day `years` later (29 Feb falls back to 28 Feb)"""
    try:
        return value.replace(year=value.year + years)
    except ValueError:
        return value.replace(year=value.year + years, day=28)


# ==================== Identifiers ====================

async def next_membership_id(db: AsyncSession, now: Optional[datetime] = None) -> str:
    """CREA{year}{seq:04d}, seq continuing from the highest id issued this year"""
    prefix = f"CREA{(now or datetime.utcnow()).year}"
    result = await db.execute(
        select(func.max(Membership.membership_id)).where(Membership.membership_id.like(f"{prefix}%"))
    )
    last = result.scalar()
    seq = int(last[len(prefix):]) + 1 if last and last[len(prefix):].isdigit() else 1
    return f"{prefix}{seq:04d}"


async def next_member_id(db: AsyncSession, membership_type: MembershipType) -> str:
    """ORD-0001 / LIF-0001, numbered per prefix"""
    prefix = MEMBER_ID_PREFIXES.get(membership_type)
    if prefix is None:
        raise ValidationError("User has no membership type", field="membershipType")

    result = await db.execute(select(User.member_id).where(User.member_id.like(f"{prefix}-%")))
    numbers = [
        int(member_id.split("-", 1)[1])
        for member_id in result.scalars().all()
        if member_id.split("-", 1)[1].isdigit()
    ]
    return f"{prefix}-{max(numbers, default=0) + 1:04d}"


# ==================== Pricing ====================

async def get_setting_value(db: AsyncSession, key: str, default: Any = None) -> Any:
    result = await db.execute(select(Setting.value).where(Setting.key == key))
    value = result.scalar_one_or_none()
    return default if value is None else value


async def membership_price(db: AsyncSession, plan: MembershipPlan) -> int:
    """Price in rupees, from the settings table with config defaults"""
    if plan == MembershipPlan.LIFETIME:
        value = await get_setting_value(db, LIFETIME_PRICE_KEY, settings.MEMBERSHIP_LIFETIME_PRICE)
    else:
        value = await get_setting_value(db, ORDINARY_PRICE_KEY, settings.MEMBERSHIP_ORDINARY_PRICE)
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(f"[Membership] Bad price setting for {plan.value}: {value!r}")
        raise ValidationError("Membership price is not configured correctly")


# ==================== Validity ====================

def set_validity(membership: Membership, now: Optional[datetime] = None) -> None:
    now = now or datetime.utcnow()
    membership.valid_from = now
    if membership.type == MembershipPlan.LIFETIME:
        membership.valid_until = LIFETIME_VALID_UNTIL
    else:
        membership.valid_until = add_years(now, 1)


def _history_entry(kind: str, payment_reference: Optional[str], amount: Optional[int], now: datetime) -> Dict[str, Any]:
    return {
        "renewal_date": now.isoformat(),
        "payment_reference": payment_reference,
        "amount": amount,
        "type": kind,
    }


def renew(
    membership: Membership,
    payment_reference: Optional[str] = None,
    amount: Optional[int] = None,
    now: Optional[datetime] = None,
) -> Membership:
    """Extend an ordinary membership by a year from max(now, valid_until)"""
    now = now or datetime.utcnow()
    if membership.type == MembershipPlan.ORDINARY:
        start = membership.valid_until if membership.valid_until and membership.valid_until > now else now
        membership.valid_until = add_years(start, 1)
        if membership.valid_from is None:
            membership.valid_from = now
    membership.renewal_history = [
        *(membership.renewal_history or []),
        _history_entry("renewal", payment_reference, amount, now),
    ]
    membership.status = MembershipStatus.ACTIVE
    return membership


# ==================== Lookups ====================

async def get_by_email(db: AsyncSession, email: str) -> Optional[Membership]:
    result = await db.execute(select(Membership).where(Membership.email == email.lower()))
    return result.scalar_one_or_none()


def record_order(
    db: AsyncSession,
    membership: Membership,
    order_id: str,
    amount: int,
    purpose: OrderPurpose = OrderPurpose.MEMBERSHIP,
) -> MembershipOrder:
    """Remember an issued order with the plan and amount it was created for"""
    order = MembershipOrder(
        order_id=order_id,
        membership_id=membership.id,
        purpose=purpose,
        plan=MembershipPlan.LIFETIME if purpose == OrderPurpose.UPGRADE else membership.type,
        amount=amount,
    )
    db.add(order)
    if purpose == OrderPurpose.UPGRADE:
        membership.upgrade_order_id = order_id
        membership.upgrade_amount = amount
    else:
        membership.razorpay_order_id = order_id
        membership.payment_amount = amount
    return order


async def find_by_order(db: AsyncSession, order_id: str) -> Tuple[Optional[Membership], Optional[MembershipOrder]]:
    """Membership owning a Razorpay order (current or superseded), and the order"""
    result = await db.execute(select(MembershipOrder).where(MembershipOrder.order_id == order_id))
    order = result.scalar_one_or_none()
    if order is None:
        return None, None
    return await db.get(Membership, str(order.membership_id)), order


async def _linked_user(db: AsyncSession, membership: Membership) -> Optional[User]:
    if membership.user_id:
        user = await db.get(User, str(membership.user_id))
        if user is not None:
            return user
    result = await db.execute(select(User).where(User.email == membership.email))
    return result.scalar_one_or_none()


async def _grant_member_id(db: AsyncSession, membership: Membership) -> Optional[User]:
    """Give the linked account a member id matching the plan"""
    user = await _linked_user(db, membership)
    if user is None:
        return None

    membership_type = PLAN_TO_MEMBERSHIP_TYPE[membership.type]
    prefix = MEMBER_ID_PREFIXES[membership_type]
    if not (user.member_id and user.member_id.startswith(f"{prefix}-")):
        user.member_id = await next_member_id(db, membership_type)
    user.membership_type = membership_type
    user.is_member = True
    membership.user_id = user.id
    return user


# ==================== Lifecycle ====================

async def activate(
    db: AsyncSession,
    membership: Membership,
    payment_reference: Optional[str],
    now: Optional[datetime] = None,
    order: Optional[MembershipOrder] = None,
) -> Tuple[Membership, Optional[str]]:
    """
    Mark the payment completed and the membership active.

    When `order` is given its plan and amount apply, so paying a superseded
    order activates on the terms that order was issued for. A membership
    whose payment is already completed is never re-activated: an active one
    is returned unchanged, any other state raises ValidationError. Returns
    the membership and the linked user's member id (if an account exists).
    """
    now = now or datetime.utcnow()
    if membership.payment_status == PaymentStatus.COMPLETED:
        return await _already_paid(db, membership, order, payment_reference, now)

    if order is not None:
        membership.razorpay_order_id = order.order_id
        membership.type = order.plan
        membership.payment_amount = order.amount
        _mark_order_paid(order, payment_reference, now)

    membership.payment_status = PaymentStatus.COMPLETED
    membership.payment_reference = payment_reference or membership.payment_reference
    membership.payment_date = now
    membership.status = MembershipStatus.ACTIVE
    set_validity(membership, now)
    membership.renewal_history = [
        *(membership.renewal_history or []),
        _history_entry("new", membership.payment_reference, membership.payment_amount, now),
    ]

    user = await _grant_member_id(db, membership)
    if user is not None:
        await notify_user(
            db,
            user.id,
            NotificationType.MEMBERSHIP,
            "Membership Activated",
            f"Your {membership.type.value} membership {membership.membership_id} is now active.",
            link="/membership",
            metadata={"membershipId": membership.membership_id},
        )

    await db.commit()
    await db.refresh(membership)
    member_id = user.member_id if user else None

    logger.log_payment_event(
        "membership_activated",
        membership.razorpay_order_id,
        membership_id=membership.membership_id,
        member_id=member_id,
    )
    await _send_welcome(membership, member_id)
    return membership, member_id


async def apply_upgrade(
    db: AsyncSession,
    membership: Membership,
    payment_reference: Optional[str],
    now: Optional[datetime] = None,
    order: Optional[MembershipOrder] = None,
) -> Tuple[Membership, Optional[str]]:
    """Switch a paid upgrade order to lifetime"""
    now = now or datetime.utcnow()
    if membership.type == MembershipPlan.LIFETIME:
        return await _already_paid(db, membership, order, payment_reference, now)

    if order is not None:
        membership.upgrade_order_id = order.order_id
        membership.upgrade_amount = order.amount
        _mark_order_paid(order, payment_reference, now)

    membership.type = MembershipPlan.LIFETIME
    membership.valid_until = LIFETIME_VALID_UNTIL
    membership.status = MembershipStatus.ACTIVE
    membership.payment_reference = payment_reference or membership.payment_reference
    membership.payment_date = now
    membership.renewal_history = [
        *(membership.renewal_history or []),
        _history_entry("upgrade", payment_reference, membership.upgrade_amount, now),
    ]

    user = await _grant_member_id(db, membership)
    if user is not None:
        await notify_user(
            db,
            user.id,
            NotificationType.MEMBERSHIP,
            "Membership Upgraded",
            f"Your membership {membership.membership_id} is now a lifetime membership.",
            link="/membership",
            metadata={"membershipId": membership.membership_id},
        )

    await db.commit()
    await db.refresh(membership)
    member_id = user.member_id if user else None

    logger.log_payment_event("membership_upgraded", membership.upgrade_order_id, membership_id=membership.membership_id)
    await _send_welcome(membership, member_id)
    return membership, member_id


async def settle_order(
    db: AsyncSession,
    membership: Membership,
    order: MembershipOrder,
    payment_id: Optional[str],
) -> Tuple[Membership, Optional[str]]:
    """Apply a verified payment for `order`; replays of a settled order change nothing"""
    if order.status == PaymentStatus.COMPLETED:
        if membership.status != MembershipStatus.ACTIVE:
            logger.log_payment_event("order_replayed", order.order_id, success=False, membership_id=membership.membership_id)
            raise ValidationError("Payment already applied to this membership")
        user = await _linked_user(db, membership)
        return membership, user.member_id if user else None

    if order.is_upgrade:
        return await apply_upgrade(db, membership, payment_id, order=order)
    return await activate(db, membership, payment_id, order=order)


async def mark_payment_failed(
    db: AsyncSession,
    membership: Membership,
    order: Optional[MembershipOrder] = None,
) -> Membership:
    """Record a failed payment; the membership stays pending"""
    if order is not None and order.status != PaymentStatus.COMPLETED:
        order.status = PaymentStatus.FAILED
    if membership.payment_status != PaymentStatus.COMPLETED:
        membership.payment_status = PaymentStatus.FAILED
    await db.commit()
    await db.refresh(membership)
    logger.log_payment_event(
        "membership_payment_failed", order.order_id if order else membership.razorpay_order_id, success=False
    )
    return membership


def _mark_order_paid(order: MembershipOrder, payment_id: Optional[str], now: datetime) -> None:
    order.status = PaymentStatus.COMPLETED
    order.payment_id = payment_id
    order.paid_at = now


async def _already_paid(
    db: AsyncSession,
    membership: Membership,
    order: Optional[MembershipOrder],
    payment_reference: Optional[str],
    now: datetime,
) -> Tuple[Membership, Optional[str]]:
    """
    The membership's payment has been applied before.

    An active membership comes back unchanged; a second order paid for it
    (another open checkout) is recorded but grants nothing. An expired or
    rejected one is not revived by an old payment.
    """
    if membership.status != MembershipStatus.ACTIVE:
        raise ValidationError("Payment already applied to this membership")

    if order is not None and order.status != PaymentStatus.COMPLETED:
        _mark_order_paid(order, payment_reference, now)
        await db.commit()
        logger.log_payment_event(
            "duplicate_payment", order.order_id, success=False, membership_id=membership.membership_id
        )

    user = await _linked_user(db, membership)
    return membership, user.member_id if user else None


async def _send_welcome(membership: Membership, member_id: Optional[str]) -> None:
    """Receipt and welcome email; failures here never undo an activation"""
    receipt = None
    try:
        _, receipt = await receipt_service.write_membership_receipt(membership)
    except OSError as e:
        logger.log_error_with_context(e, "membership receipt", membership_id=membership.membership_id)

    valid_until = membership.valid_until.strftime("%d %b %Y") if membership.valid_until else None
    await email_service.send_membership_welcome_email(
        membership.email,
        membership.name,
        member_id,
        membership.membership_id,
        membership.type.value,
        valid_until,
        receipt=receipt,
    )
