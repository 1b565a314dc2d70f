"""
Donation payment lifecycle: pending -> completed | failed.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.logging_config import logger
from crea.models.donation import Donation
from crea.models.membership import PaymentStatus
from crea.services.email_service import email_service
from crea.services.receipt_service import receipt_service


async def find_by_order(db: AsyncSession, order_id: str) -> Optional[Donation]:
    result = await db.execute(select(Donation).where(Donation.razorpay_order_id == order_id))
    return result.scalar_one_or_none()


async def complete(
    db: AsyncSession,
    donation: Donation,
    payment_id: Optional[str],
    signature: Optional[str] = None,
) -> Donation:
    """Mark paid, write the receipt and thank the donor. Idempotent."""
    if donation.payment_status == PaymentStatus.COMPLETED:
        return donation

    donation.payment_status = PaymentStatus.COMPLETED
    donation.razorpay_payment_id = payment_id
    donation.razorpay_signature = signature
    donation.payment_reference = payment_id
    donation.payment_date = datetime.utcnow()
    await db.commit()
    await db.refresh(donation)

    logger.log_payment_event("donation_completed", donation.razorpay_order_id, amount=donation.amount)

    receipt = None
    try:
        _, receipt = await receipt_service.write_donation_receipt(donation)
    except OSError as e:
        logger.log_error_with_context(e, "donation receipt", donation_id=str(donation.id))

    await email_service.send_donation_thank_you_email(
        donation.email,
        donation.full_name,
        donation.amount,
        str(donation.id),
        receipt=receipt,
    )
    return donation


async def mark_failed(db: AsyncSession, donation: Donation) -> Donation:
    if donation.payment_status != PaymentStatus.COMPLETED:
        donation.payment_status = PaymentStatus.FAILED
        await db.commit()
        await db.refresh(donation)
    logger.log_payment_event("donation_failed", donation.razorpay_order_id, success=False)
    return donation
