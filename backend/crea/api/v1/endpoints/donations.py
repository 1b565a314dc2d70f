"""
Donations: Razorpay checkout for donors, management for admins.

Every response uses the {success, message?, data} envelope.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import FileResponse
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.config import settings
from crea.core.database import get_db
from crea.core.exceptions import PaymentSignatureError
from crea.core.logging_config import logger
from crea.core.rate_limiter import payment_rate_limit
from crea.models.donation import Donation, DonationPurpose
from crea.models.membership import PaymentStatus
from crea.models.user import User
from crea.modules.auth.dependencies import get_current_admin
from crea.schemas.common import DataResponse
from crea.schemas.donation import DonationCreate, DonationUpdate, DonationResponse, DonationOrderData
from crea.schemas.membership import VerifyPaymentRequest
from crea.services import donation_service
from crea.services.crud import CRUDService
from crea.services.payment_service import payment_service
from crea.services.receipt_service import receipt_service

router = APIRouter()

donations = CRUDService(Donation, "Donation")


@router.post("/create-order", response_model=DataResponse, status_code=status.HTTP_201_CREATED)
@payment_rate_limit()
async def create_donation_order(
    request: Request,
    data: DonationCreate,
    db: AsyncSession = Depends(get_db)
):
    """Record a pending donation and open a Razorpay order for it"""
    donation = Donation(**data.model_dump(), payment_status=PaymentStatus.PENDING)
    db.add(donation)
    await db.flush()

    order = await payment_service.create_order(
        donation.amount,
        receipt=f"don_{str(donation.id)[:8]}",
        notes={"donation_id": str(donation.id), "email": donation.email, "purpose": donation.purpose.value},
    )
    donation.razorpay_order_id = order["id"]
    await db.commit()

    return DataResponse(
        message="Order created",
        data=DonationOrderData(
            order_id=order["id"],
            donation_id=str(donation.id),
            amount=donation.amount,
            currency=settings.PAYMENT_CURRENCY,
            key_id=payment_service.key_id,
        ),
    )


@router.post("/verify-payment", response_model=DataResponse)
async def verify_donation_payment(
    data: VerifyPaymentRequest,
    db: AsyncSession = Depends(get_db)
):
    donation = await donation_service.find_by_order(db, data.razorpay_order_id)
    if donation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Donation not found for this order")

    valid = payment_service.verify_payment_signature(
        data.razorpay_order_id, data.razorpay_payment_id, data.razorpay_signature
    )
    if not valid:
        await donation_service.mark_failed(db, donation)
        raise PaymentSignatureError(data.razorpay_order_id)

    donation = await donation_service.complete(
        db, donation, data.razorpay_payment_id, data.razorpay_signature
    )
    return DataResponse(
        message="Thank you! Your donation has been received.",
        data=DonationResponse.model_validate(donation),
    )


@router.get("/receipt/{donation_id}")
async def download_donation_receipt(donation_id: str, db: AsyncSession = Depends(get_db)):
    donation = await donations.get_or_none(db, donation_id)
    if donation is None or donation.payment_status != PaymentStatus.COMPLETED:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Receipt not found")

    path = await receipt_service.donation_receipt_path(donation)
    return FileResponse(
        path,
        media_type="application/pdf",
        filename=receipt_service.donation_receipt_name(str(donation.id)),
    )


@router.get("/stats", response_model=DataResponse)
async def donation_stats(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Total amount and number of completed donations"""
    result = await db.execute(
        select(func.coalesce(func.sum(Donation.amount), 0), func.count())
        .where(Donation.payment_status == PaymentStatus.COMPLETED)
    )
    total_amount, count = result.one()
    return DataResponse(data={"totalAmount": int(total_amount), "count": count})


@router.get("", response_model=DataResponse)
async def list_donations(
    payment_status: Optional[PaymentStatus] = Query(None, alias="paymentStatus"),
    purpose: Optional[DonationPurpose] = None,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    criteria = []
    if payment_status:
        criteria.append(Donation.payment_status == payment_status)
    if purpose:
        criteria.append(Donation.purpose == purpose)
    items = await donations.list(db, *criteria)
    return DataResponse(data=[DonationResponse.model_validate(d) for d in items])


@router.get("/{donation_id}", response_model=DataResponse)
async def get_donation(
    donation_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return DataResponse(data=DonationResponse.model_validate(await donations.get(db, donation_id)))


@router.put("/{donation_id}", response_model=DataResponse)
async def update_donation(
    donation_id: str,
    data: DonationUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    donation = await donations.update(db, donation_id, changes)
    logger.info(f"[Donations] {admin.email} updated donation {donation.id}")
    return DataResponse(message="Donation updated", data=DonationResponse.model_validate(donation))


@router.delete("/{donation_id}", response_model=DataResponse)
async def delete_donation(
    donation_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    await donations.delete(db, donation_id)
    return DataResponse(message="Donation deleted")
