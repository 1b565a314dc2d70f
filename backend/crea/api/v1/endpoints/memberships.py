"""
MEMBERSHIP APPLICATIONS AND PAYMENTS
====================================

Flow:
1. Applicant submits the wizard → /memberships/create-order → pending
   membership + Razorpay order_id
2. Client opens Razorpay checkout with order_id
3. Checkout completes → /memberships/verify-payment → signature checked,
   membership activated, member id granted, receipt + welcome email
4. /memberships/webhook → backup activation for checkouts whose callback
   never reached us

Admins can also confirm an offline payment through /memberships/{id}/status.
"""
import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Header, HTTPException, Query, Request, UploadFile, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.config import settings
from crea.core.database import get_db
from crea.core.exceptions import DuplicateResourceError, PaymentSignatureError, ValidationError
from crea.core.logging_config import logger
from crea.core.rate_limiter import payment_rate_limit
from crea.models.membership import Membership, MembershipPlan, MembershipStatus, OrderPurpose, PaymentStatus
from crea.models.user import User
from crea.modules.auth.dependencies import (
    get_current_user, get_current_admin, get_optional_current_user, ensure_owner_or_admin,
)
from crea.schemas.membership import (
    MembershipApplication,
    MembershipOrderResponse,
    VerifyPaymentRequest,
    UpgradeRequest,
    UpgradeOrderResponse,
    MembershipResponse,
    PaymentVerifiedResponse,
    MembershipSubmitResponse,
    MembershipStatusUpdate,
    MembershipRenewRequest,
    CountBucket,
    MembershipStats,
    BulkUploadResult,
)
from crea.services import donation_service, membership_service
from crea.services.crud import CRUDService
from crea.services.member_import import import_members, read_sheet
from crea.services.payment_service import payment_service
from crea.services.receipt_service import receipt_service
from crea.services.storage_service import storage_service

router = APIRouter()

memberships = CRUDService(Membership, "Membership")

DOCUMENTS_SUBDIR = "memberships"

APPLICANT_FIELDS = ("name", "designation", "division", "department", "place", "unit", "mobile")


async def _user_for_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def _get_membership(db: AsyncSession, key: str) -> Membership:
    """Look up by record id or by CREA membership id"""
    membership = await memberships.get_or_none(db, key)
    if membership is None:
        result = await db.execute(select(Membership).where(Membership.membership_id == key))
        membership = result.scalar_one_or_none()
    if membership is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Membership not found")
    return membership


# ==================== Payment flow (public) ====================

@router.post("/create-order", response_model=MembershipOrderResponse)
@payment_rate_limit()
async def create_membership_order(
    request: Request,
    data: MembershipApplication,
    current_user: Optional[User] = Depends(get_optional_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Create (or reuse) a pending membership and its Razorpay order.

    A pending application for the same email is reused so an abandoned
    checkout can be restarted.
    """
    membership = await membership_service.get_by_email(db, data.email)
    if membership is not None and membership.status == MembershipStatus.ACTIVE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="An active membership already exists for this email"
        )

    amount = await membership_service.membership_price(db, data.type)
    fields = data.model_dump(include=set(APPLICANT_FIELDS) | {"email", "type", "payment_method"})
    fields["personal_details"] = data.personal_details.model_dump(exclude_none=True)
    fields["professional_details"] = data.professional_details.model_dump(exclude_none=True)

    if membership is None:
        membership = Membership(
            membership_id=await membership_service.next_membership_id(db),
            documents=[],
            renewal_history=[],
            **fields,
        )
        db.add(membership)
    else:
        for field, value in fields.items():
            setattr(membership, field, value)
        membership.status = MembershipStatus.PENDING
        membership.payment_status = PaymentStatus.PENDING

    owner = current_user or await _user_for_email(db, data.email)
    if owner is not None:
        membership.user_id = owner.id
    await db.flush()

    order = await payment_service.create_order(
        amount,
        receipt=f"crea_{membership.membership_id}",
        notes={"membership_id": membership.membership_id, "email": membership.email, "type": membership.type.value},
    )
    membership_service.record_order(db, membership, order["id"], amount)
    await db.commit()

    return MembershipOrderResponse(
        order_id=order["id"],
        membership_id=membership.membership_id,
        amount=amount,
        currency=settings.PAYMENT_CURRENCY,
        key_id=payment_service.key_id,
    )


@router.post("/verify-payment", response_model=PaymentVerifiedResponse)
async def verify_membership_payment(
    data: VerifyPaymentRequest,
    db: AsyncSession = Depends(get_db)
):
    """Check the checkout signature and activate (or upgrade) the membership"""
    membership, order = await membership_service.find_by_order(db, data.razorpay_order_id)
    if membership is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Membership not found for this order"
        )

    valid = payment_service.verify_payment_signature(
        data.razorpay_order_id, data.razorpay_payment_id, data.razorpay_signature
    )
    if not valid:
        logger.log_payment_event("signature_invalid", data.razorpay_order_id, success=False)
        if not order.is_upgrade:
            await membership_service.mark_payment_failed(db, membership, order)
        raise PaymentSignatureError(data.razorpay_order_id)

    membership, member_id = await membership_service.settle_order(db, membership, order, data.razorpay_payment_id)
    if order.is_upgrade:
        message = "Membership upgraded to lifetime"
    else:
        message = "Payment verified. Membership activated."

    return PaymentVerifiedResponse(
        message=message,
        membership=MembershipResponse.model_validate(membership),
        member_id=member_id,
    )


@router.post("/webhook")
async def razorpay_webhook(
    request: Request,
    db: AsyncSession = Depends(get_db),
    x_razorpay_signature: Optional[str] = Header(None, alias="X-Razorpay-Signature")
):
    """
    Razorpay webhook endpoint for payment events.

    Handles payment.captured, order.paid and payment.failed for membership
    (new and upgrade) and donation orders.
    """
    if not settings.RAZORPAY_WEBHOOK_SECRET:
        logger.warning("[Webhook] Webhook secret not configured")
        return {"status": "skipped", "reason": "webhook not configured"}

    body = await request.body()
    if not payment_service.verify_webhook_signature(body, x_razorpay_signature):
        logger.warning("[Webhook] Invalid webhook signature")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid webhook signature"
        )

    try:
        payload = json.loads(body)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid webhook payload")

    event = payload.get("event")
    entities = payload.get("payload", {})
    payment = entities.get("payment", {}).get("entity", {})
    order_id = payment.get("order_id") or entities.get("order", {}).get("entity", {}).get("id")
    payment_id = payment.get("id")

    logger.log_payment_event(f"webhook_{event}", order_id)

    if not order_id or event not in ("payment.captured", "order.paid", "payment.failed"):
        return {"status": "ignored"}

    membership, order = await membership_service.find_by_order(db, order_id)
    if membership is not None:
        if event == "payment.failed":
            if not order.is_upgrade:
                await membership_service.mark_payment_failed(db, membership, order)
            return {"status": "ok"}
        if order.status == PaymentStatus.COMPLETED:
            return {"status": "ok"}
        try:
            await membership_service.settle_order(db, membership, order, payment_id)
        except ValidationError as e:
            # Razorpay retries any non-2xx response
            logger.warning(f"[Webhook] Order {order_id} not applied: {e.message}")
            return {"status": "ignored"}
        return {"status": "ok"}

    donation = await donation_service.find_by_order(db, order_id)
    if donation is not None:
        if event == "payment.failed":
            await donation_service.mark_failed(db, donation)
        else:
            await donation_service.complete(db, donation, payment_id)
        return {"status": "ok"}

    logger.warning(f"[Webhook] No membership or donation for order {order_id}")
    return {"status": "ignored"}


@router.post("/upgrade", response_model=UpgradeOrderResponse)
@payment_rate_limit()
async def upgrade_membership(
    request: Request,
    data: UpgradeRequest,
    db: AsyncSession = Depends(get_db)
):
    """Create an order upgrading an active ordinary membership to lifetime"""
    membership = await membership_service.get_by_email(db, data.email)
    if membership is None or membership.status != MembershipStatus.ACTIVE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No active membership found for this email"
        )
    if membership.type != MembershipPlan.ORDINARY:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only ordinary memberships can be upgraded"
        )

    amount = data.payment_amount
    if amount is None:
        lifetime = await membership_service.membership_price(db, MembershipPlan.LIFETIME)
        ordinary = await membership_service.membership_price(db, MembershipPlan.ORDINARY)
        amount = max(lifetime - ordinary, 1)

    order = await payment_service.create_order(
        amount,
        receipt=f"upg_{membership.membership_id}",
        notes={"membership_id": membership.membership_id, "email": membership.email, "upgrade": "lifetime"},
    )
    membership_service.record_order(db, membership, order["id"], amount, OrderPurpose.UPGRADE)
    await db.commit()

    user = await _user_for_email(db, membership.email)
    return UpgradeOrderResponse(
        order_id=order["id"],
        current_member_id=(user.member_id if user and user.member_id else membership.membership_id),
        amount=amount,
        currency=settings.PAYMENT_CURRENCY,
        key_id=payment_service.key_id,
    )


@router.get("/receipt/{membership_id}")
async def download_membership_receipt(membership_id: str, db: AsyncSession = Depends(get_db)):
    """Download the PDF receipt of a paid membership"""
    result = await db.execute(select(Membership).where(Membership.membership_id == membership_id))
    membership = result.scalar_one_or_none()
    if membership is None or membership.payment_status != PaymentStatus.COMPLETED:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Receipt not found")

    path = await receipt_service.membership_receipt_path(membership)
    return FileResponse(
        path,
        media_type="application/pdf",
        filename=receipt_service.membership_receipt_name(membership.membership_id),
    )


# ==================== Members ====================

def _nested_form(form, prefix: str) -> Dict[str, Any]:
    """Collect personalDetails[key]=value style fields into a dict"""
    start = f"{prefix}["
    return {
        key[len(start):-1]: value
        for key, value in form.multi_items()
        if key.startswith(start) and key.endswith("]") and isinstance(value, str) and value != ""
    }


@router.post("", response_model=MembershipSubmitResponse, status_code=status.HTTP_201_CREATED)
async def submit_membership(
    request: Request,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Submit the membership wizard as multipart form data.

    Nested fields arrive as personalDetails[...], professionalDetails[...]
    and documents[i]. The membership stays pending until paid.
    """
    form = await request.form()
    payload = {
        key: value for key, value in form.multi_items()
        if isinstance(value, str) and "[" not in key and value != ""
    }
    payload["personalDetails"] = _nested_form(form, "personalDetails")
    payload["professionalDetails"] = _nested_form(form, "professionalDetails")

    try:
        data = MembershipApplication.model_validate(payload)
    except PydanticValidationError as e:
        raise RequestValidationError(e.errors())

    if await membership_service.get_by_email(db, data.email):
        raise DuplicateResourceError("Email already registered for membership", field="email")

    documents = []
    for key, value in form.multi_items():
        if key.startswith("documents[") and not isinstance(value, str) and value.filename:
            stored = await storage_service.save_upload(value, DOCUMENTS_SUBDIR, kind="document")
            documents.append({
                "type": stored.mime_type,
                "name": stored.file_name,
                "url": stored.url,
                "uploaded_at": datetime.utcnow().isoformat(),
            })

    membership = await memberships.create(db, {
        **data.model_dump(include=set(APPLICANT_FIELDS) | {"email", "type", "payment_method"}),
        "membership_id": await membership_service.next_membership_id(db),
        "user_id": current_user.id,
        "personal_details": data.personal_details.model_dump(exclude_none=True),
        "professional_details": data.professional_details.model_dump(exclude_none=True),
        "documents": documents,
        "renewal_history": [],
        "payment_amount": await membership_service.membership_price(db, data.type),
    })

    logger.info(f"[Membership] {current_user.email} submitted {membership.membership_id}")
    return MembershipSubmitResponse(
        membership_id=membership.membership_id,
        payment_status=membership.payment_status,
    )


@router.get("/me", response_model=MembershipResponse)
async def get_my_membership(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(
        select(Membership)
        .where(or_(Membership.user_id == current_user.id, Membership.email == current_user.email))
        .order_by(Membership.created_at.desc())
    )
    membership = result.scalars().first()
    if membership is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Membership not found")
    return membership


@router.get("/stats", response_model=MembershipStats)
async def get_membership_stats(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Counts by status, department and type"""

    async def group_count(column) -> List[CountBucket]:
        result = await db.execute(select(column, func.count()).group_by(column))
        return [
            CountBucket(id=(key.value if hasattr(key, "value") else key), count=count)
            for key, count in result.all()
        ]

    total = (await db.execute(select(func.count()).select_from(Membership))).scalar() or 0
    return MembershipStats(
        by_status=await group_count(Membership.status),
        by_department=await group_count(Membership.department),
        by_type=await group_count(Membership.type),
        total=total,
    )


@router.post("/bulk-upload", response_model=BulkUploadResult)
async def bulk_upload_members(
    file: UploadFile = File(...),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Create or update member accounts from a csv/xls/xlsx sheet"""
    content = await storage_service.read_validated(
        file, kind="spreadsheet", max_size=settings.max_bulk_upload_bytes
    )
    df = read_sheet(content, file.filename)
    result = await import_members(db, df)
    logger.info(f"[Membership] {admin.email} bulk uploaded {len(df)} rows")
    return result


@router.get("", response_model=List[MembershipResponse])
async def list_memberships(
    status_filter: Optional[MembershipStatus] = Query(None, alias="status"),
    department: Optional[str] = None,
    membership_type: Optional[MembershipPlan] = Query(None, alias="type"),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    criteria = []
    if status_filter:
        criteria.append(Membership.status == status_filter)
    if department:
        criteria.append(Membership.department == department)
    if membership_type:
        criteria.append(Membership.type == membership_type)
    return await memberships.list(db, *criteria)


@router.get("/{membership_key}", response_model=MembershipResponse)
async def get_membership(
    membership_key: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    membership = await _get_membership(db, membership_key)
    if not current_user.is_admin and membership.email != current_user.email:
        ensure_owner_or_admin(current_user, membership.user_id, "Not allowed to view this membership")
    return membership


@router.put("/{membership_key}/status", response_model=MembershipResponse)
async def update_membership_status(
    membership_key: str,
    data: MembershipStatusUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Reject, expire or reopen a membership, or confirm an offline payment.

    paymentStatus=completed activates the membership; status=active on its
    own is refused while the payment is outstanding.
    """
    membership = await _get_membership(db, membership_key)

    if data.payment_status == PaymentStatus.COMPLETED:
        membership, _ = await membership_service.activate(db, membership, data.payment_reference)
        logger.info(f"[Membership] {admin.email} confirmed offline payment for {membership.membership_id}")
        return membership

    if data.status == MembershipStatus.ACTIVE and membership.payment_status != PaymentStatus.COMPLETED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Membership can only be activated after payment"
        )

    changes = {}
    if data.status:
        changes["status"] = data.status
    if data.payment_status:
        changes["payment_status"] = data.payment_status
    if data.payment_reference:
        changes["payment_reference"] = data.payment_reference
    return await memberships.apply(db, membership, changes)


@router.put("/{membership_key}/renew", response_model=MembershipResponse)
async def renew_membership(
    membership_key: str,
    data: MembershipRenewRequest,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    membership = await _get_membership(db, membership_key)
    if membership.payment_status != PaymentStatus.COMPLETED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only paid memberships can be renewed"
        )

    membership_service.renew(membership, data.payment_reference, data.amount)
    await db.commit()
    await db.refresh(membership)

    logger.info(f"[Membership] {admin.email} renewed {membership.membership_id} until {membership.valid_until}")
    return membership
