from pydantic import EmailStr, Field, field_validator, model_validator
from typing import Optional
from datetime import datetime

from crea.models.donation import DonationPurpose, DonationPaymentMethod
from crea.models.membership import PaymentStatus
from crea.schemas.common import CreaSchema


class DonationCreate(CreaSchema):
    full_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    mobile: str = Field(..., pattern=r'^[6-9]\d{9}$')
    is_employee: bool = False
    employee_id: Optional[str] = None
    designation: Optional[str] = None
    division: Optional[str] = None
    department: Optional[str] = None
    amount: int = Field(..., ge=1, description="Amount in rupees")
    purpose: DonationPurpose = DonationPurpose.GENERAL
    is_anonymous: bool = False
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = Field(None, pattern=r'^\d{6}$')
    message: Optional[str] = Field(None, max_length=2000)
    payment_method: Optional[DonationPaymentMethod] = None
    upi_id: Optional[str] = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    @model_validator(mode="after")
    def employee_needs_id(self):
        if self.is_employee and not (self.employee_id and self.employee_id.strip()):
            raise ValueError("Employee ID is required for railway employees")
        return self


class DonationUpdate(CreaSchema):
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    mobile: Optional[str] = Field(None, pattern=r'^[6-9]\d{9}$')
    purpose: Optional[DonationPurpose] = None
    is_anonymous: Optional[bool] = None
    message: Optional[str] = None
    payment_status: Optional[PaymentStatus] = None
    payment_reference: Optional[str] = None


class DonationResponse(CreaSchema):
    id: str
    full_name: str
    email: str
    mobile: str
    is_employee: bool
    employee_id: Optional[str] = None
    designation: Optional[str] = None
    division: Optional[str] = None
    department: Optional[str] = None
    amount: int
    purpose: DonationPurpose
    is_anonymous: bool
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    message: Optional[str] = None
    payment_status: PaymentStatus
    payment_reference: Optional[str] = None
    payment_date: Optional[datetime] = None
    payment_method: Optional[DonationPaymentMethod] = None
    razorpay_order_id: Optional[str] = None
    created_at: datetime


class DonationOrderData(CreaSchema):
    order_id: str
    donation_id: str
    amount: int
    currency: str
    key_id: str
