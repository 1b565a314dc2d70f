"""
Custom Exceptions for the CREA portal
=====================================

Services raise these instead of generic Exception so the API layer can turn
them into consistent JSON errors. Every error body carries a ``message``.

Usage:
    from crea.core.exceptions import ResourceNotFoundError

    if not event:
        raise ResourceNotFoundError("Event", event_id)
"""

from typing import Optional, Any, Dict


class CreaError(Exception):
    """Base exception for all portal errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(CreaError):
    """User authentication failed"""

    status_code = 401

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="AUTH_FAILED")


class AuthorizationError(CreaError):
    """User not authorized for this action"""

    status_code = 403

    def __init__(self, message: str = "Not allowed"):
        super().__init__(message, code="NOT_AUTHORIZED")


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(CreaError):
    """Record lookup by id (or key) found nothing"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: Optional[str] = None):
        super().__init__(
            f"{resource_type} not found",
            code=f"{resource_type.upper().replace(' ', '_')}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(CreaError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class DuplicateResourceError(ValidationError):
    """Unique field already taken"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, field=field)
        self.code = "DUPLICATE_RESOURCE"


class InvalidFileTypeError(ValidationError):
    """File type not allowed"""

    def __init__(self, file_type: str, allowed_types: list):
        super().__init__(
            f"File type '{file_type}' not allowed. Allowed: {', '.join(allowed_types)}"
        )
        self.code = "INVALID_FILE_TYPE"
        self.details = {"file_type": file_type, "allowed_types": allowed_types}


class FileTooLargeError(ValidationError):
    """Upload exceeds the configured size"""

    def __init__(self, size: int, max_size: int):
        super().__init__(f"File too large. Maximum size is {max_size // 1024 // 1024}MB")
        self.code = "FILE_TOO_LARGE"
        self.details = {"size": size, "max_size": max_size}


class OTPError(ValidationError):
    """One-time code rejected (unknown or expired)"""

    def __init__(self, message: str = "Invalid code"):
        super().__init__(message, field="code")
        self.code = "OTP_INVALID"


# ============================================
# Payment Errors
# ============================================

class PaymentError(CreaError):
    """Payment operation failed"""

    status_code = 400

    def __init__(self, message: str, order_id: Optional[str] = None):
        super().__init__(message, code="PAYMENT_ERROR")
        if order_id:
            self.details["order_id"] = order_id


class PaymentSignatureError(PaymentError):
    """Razorpay signature did not match"""

    def __init__(self, order_id: Optional[str] = None):
        super().__init__("Payment verification failed. Invalid signature.", order_id)
        self.code = "INVALID_SIGNATURE"


class PaymentNotConfiguredError(PaymentError):
    """Gateway keys are missing"""

    status_code = 503

    def __init__(self):
        super().__init__("Payment service not configured. Please contact support.")
        self.code = "PAYMENT_NOT_CONFIGURED"


class PaymentGatewayError(PaymentError):
    """Gateway call (order creation) failed"""

    status_code = 502

    def __init__(self, message: str = "Failed to create payment order. Please try again."):
        super().__init__(message)
        self.code = "PAYMENT_GATEWAY_ERROR"


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: CreaError) -> Dict[str, Any]:
    """Convert exception to API error response format"""
    return {
        "success": False,
        "message": error.message,
        "error": error.to_dict()
    }
