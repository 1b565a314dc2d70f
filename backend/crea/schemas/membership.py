from pydantic import AliasChoices, EmailStr, Field, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime

from crea.models.membership import (
    MembershipPlan, MembershipPaymentMethod, MembershipStatus, PaymentStatus
)
from crea.schemas.common import CreaSchema


class PersonalDetails(CreaSchema):
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = Field(None, pattern=r'^\d{6}$')


class ProfessionalDetails(CreaSchema):
    employee_id: Optional[str] = None
    joining_date: Optional[str] = None
    experience: Optional[str] = None
    specialization: Optional[str] = None


class MembershipApplication(CreaSchema):
    """Applicant data collected by the membership wizard"""
    name: str = Field(..., min_length=1, max_length=255)
    designation: str = Field(..., min_length=1)
    division: str = Field(..., min_length=1)
    department: str = Field(..., min_length=1)
    place: str = Field(..., min_length=1)
    unit: str = Field(..., min_length=1)
    mobile: str = Field(..., pattern=r'^[6-9]\d{9}$', description="10-digit Indian mobile number")
    email: EmailStr
    type: MembershipPlan = MembershipPlan.ORDINARY
    payment_method: Optional[MembershipPaymentMethod] = None
    personal_details: PersonalDetails = PersonalDetails()
    professional_details: ProfessionalDetails = ProfessionalDetails()

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class MembershipOrderResponse(CreaSchema):
    order_id: str
    membership_id: str
    amount: int  # rupees
    currency: str
    key_id: str


class VerifyPaymentRequest(CreaSchema):
    """Fields posted back by Razorpay checkout (snake_case, as Razorpay sends them)"""
    razorpay_order_id: str = Field(..., alias="razorpay_order_id")
    razorpay_payment_id: str = Field(..., alias="razorpay_payment_id")
    razorpay_signature: str = Field(..., alias="razorpay_signature")


class UpgradeRequest(CreaSchema):
    email: EmailStr
    payment_amount: Optional[int] = Field(None, ge=1)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class UpgradeOrderResponse(CreaSchema):
    order_id: str
    current_member_id: str
    is_upgrade: bool = True
    amount: int
    currency: str
    key_id: str


class MembershipResponse(CreaSchema):
    id: str
    membership_id: str
    user_id: Optional[str] = None
    name: str
    designation: str
    division: str
    department: str
    place: str
    unit: str
    mobile: str
    email: str
    type: MembershipPlan
    payment_method: Optional[MembershipPaymentMethod] = None
    payment_status: PaymentStatus
    payment_amount: Optional[int] = None
    payment_date: Optional[datetime] = None
    payment_reference: Optional[str] = None
    status: MembershipStatus
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    personal_details: Dict[str, Any] = {}
    professional_details: Dict[str, Any] = {}
    documents: List[Dict[str, Any]] = []
    renewal_history: List[Dict[str, Any]] = []
    is_expired: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None


class PaymentVerifiedResponse(CreaSchema):
    success: bool = True
    message: str
    membership: MembershipResponse
    member_id: Optional[str] = None


class MembershipSubmitResponse(CreaSchema):
    success: bool = True
    membership_id: str
    payment_status: PaymentStatus


class MembershipStatusUpdate(CreaSchema):
    status: Optional[MembershipStatus] = None
    payment_status: Optional[PaymentStatus] = None
    payment_reference: Optional[str] = None


class MembershipRenewRequest(CreaSchema):
    payment_reference: Optional[str] = None
    # The portal sends paymentAmount
    amount: Optional[int] = Field(None, ge=0, validation_alias=AliasChoices("amount", "paymentAmount"))
    payment_method: Optional[MembershipPaymentMethod] = None


class CountBucket(CreaSchema):
    id: Optional[str] = None
    count: int


class MembershipStats(CreaSchema):
    by_status: List[CountBucket]
    by_department: List[CountBucket]
    by_type: List[CountBucket]
    total: int


class BulkUploadResult(CreaSchema):
    success: bool = True
    created: int = 0
    updated: int = 0
    skipped: int = 0
    errors: List[Dict[str, Any]] = []
