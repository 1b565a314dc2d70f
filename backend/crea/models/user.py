from sqlalchemy import Column, String, Boolean, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from crea.core.database import Base
from crea.core.types import GUID, generate_uuid


class UserRole(str, enum.Enum):
    """User roles"""
    MEMBER = "member"
    ADMIN = "admin"


class MembershipType(str, enum.Enum):
    """Membership held by a portal account"""
    ORDINARY = "Ordinary"
    LIFETIME = "Lifetime"
    NONE = "None"


# Member id prefixes (ORD-0001, LIF-0001)
MEMBER_ID_PREFIXES = {
    MembershipType.ORDINARY: "ORD",
    MembershipType.LIFETIME: "LIF",
}


class User(Base):
    """Portal account"""
    __tablename__ = "users"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=True)

    # Railway profile
    designation = Column(String(255), nullable=True)
    division = Column(String(100), nullable=True, index=True)
    department = Column(String(255), nullable=True)
    mobile = Column(String(20), nullable=True)
    date_of_birth = Column(DateTime, nullable=True)

    # Association membership
    member_id = Column(String(20), unique=True, nullable=True)
    membership_type = Column(SQLEnum(MembershipType), default=MembershipType.NONE, nullable=False)
    is_member = Column(Boolean, default=False, nullable=False)

    role = Column(SQLEnum(UserRole), default=UserRole.MEMBER, nullable=False)

    # Refresh token (stored as a digest)
    refresh_token_hash = Column(String(64), nullable=True)
    refresh_token_expires_at = Column(DateTime, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_login = Column(DateTime, nullable=True)

    # Relationships
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self):
        return f"<User {self.email}>"
