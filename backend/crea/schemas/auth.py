from pydantic import EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime

from crea.models.user import UserRole, MembershipType
from crea.schemas.common import CreaSchema


class UserRegister(CreaSchema):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6)
    designation: Optional[str] = None
    division: Optional[str] = None
    department: Optional[str] = None
    mobile: Optional[str] = Field(None, pattern=r'^[6-9]\d{9}$', description="10-digit Indian mobile number")
    date_of_birth: Optional[datetime] = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class UserLogin(CreaSchema):
    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class OTPRequest(CreaSchema):
    email: EmailStr
    name: Optional[str] = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class OTPVerify(CreaSchema):
    email: EmailStr
    code: str = Field(..., min_length=4, max_length=12)
    name: Optional[str] = None
    password: Optional[str] = Field(None, min_length=6)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class RefreshTokenRequest(CreaSchema):
    refresh_token: str


class UserResponse(CreaSchema):
    id: str
    name: str
    email: str
    role: UserRole
    designation: Optional[str] = None
    division: Optional[str] = None
    department: Optional[str] = None
    mobile: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    member_id: Optional[str] = None
    membership_type: MembershipType = MembershipType.NONE
    is_member: bool = False
    created_at: Optional[datetime] = None


class AuthResponse(UserResponse):
    """User fields plus the issued access token"""
    token: str
    refresh_token: Optional[str] = None


class AccessTokenResponse(CreaSchema):
    token: str


class ProfileUpdate(CreaSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    designation: Optional[str] = None
    division: Optional[str] = None
    department: Optional[str] = None
    mobile: Optional[str] = Field(None, pattern=r'^[6-9]\d{9}$')
    date_of_birth: Optional[datetime] = None
    password: Optional[str] = Field(None, min_length=6)


class AdminUserUpdate(CreaSchema):
    """Fields an admin may change on another account"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    designation: Optional[str] = None
    division: Optional[str] = None
    department: Optional[str] = None
    membership_type: Optional[MembershipType] = None
    role: Optional[UserRole] = None
