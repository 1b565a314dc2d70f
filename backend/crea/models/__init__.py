# Re-export all models for convenient imports
from crea.models.user import User, UserRole, MembershipType, MEMBER_ID_PREFIXES
from crea.models.otp import OTP
from crea.models.event import Event
from crea.models.document import Circular, Manual, CourtCase, ManualCategory, CourtCaseStatus
from crea.models.forum import ForumTopic, ForumPost
from crea.models.membership import (
    Membership, MembershipOrder, OrderPurpose, MembershipPlan, MembershipPaymentMethod, MembershipStatus, PaymentStatus,
    LIFETIME_VALID_UNTIL,
)
from crea.models.donation import Donation, DonationPurpose, DonationPaymentMethod
from crea.models.notification import Notification, NotificationType
from crea.models.setting import Setting, DEFAULT_SETTING_CATEGORY
from crea.models.external_link import ExternalLink, ExternalLinkCategory
from crea.models.body_member import BodyMember, Division
from crea.models.mutual_transfer import MutualTransfer
from crea.models.suggestion import Suggestion
from crea.models.advertisement import Advertisement, AdvertisementType, AdvertisementPriority
from crea.models.achievement import Achievement, AchievementType
from crea.models.breaking_news import BreakingNews

__all__ = [
    # Accounts
    "User",
    "UserRole",
    "MembershipType",
    "MEMBER_ID_PREFIXES",
    "OTP",
    # Content
    "Event",
    "Circular",
    "Manual",
    "CourtCase",
    "ManualCategory",
    "CourtCaseStatus",
    "ForumTopic",
    "ForumPost",
    "ExternalLink",
    "ExternalLinkCategory",
    "BodyMember",
    "Division",
    "MutualTransfer",
    "Suggestion",
    "Advertisement",
    "AdvertisementType",
    "AdvertisementPriority",
    "Achievement",
    "AchievementType",
    "BreakingNews",
    # Membership & payments
    "Membership",
    "MembershipOrder",
    "OrderPurpose",
    "MembershipPlan",
    "MembershipPaymentMethod",
    "MembershipStatus",
    "PaymentStatus",
    "LIFETIME_VALID_UNTIL",
    "Donation",
    "DonationPurpose",
    "DonationPaymentMethod",
    # Notifications & settings
    "Notification",
    "NotificationType",
    "Setting",
    "DEFAULT_SETTING_CATEGORY",
]
