"""
Unit Tests for the portal exception hierarchy
"""
from crea.core.exceptions import (
    CreaError,
    AuthenticationError,
    AuthorizationError,
    DuplicateResourceError,
    ResourceNotFoundError,
    ValidationError,
    OTPError,
    FileTooLargeError,
    InvalidFileTypeError,
    PaymentSignatureError,
    PaymentNotConfiguredError,
    error_response,
)


class TestExceptionStatusCodes:

    def test_not_found(self):
        error = ResourceNotFoundError("Event", "abc")
        assert error.status_code == 404
        assert error.message == "Event not found"

    def test_validation_errors_are_400(self):
        assert ValidationError("bad").status_code == 400
        assert OTPError().status_code == 400
        assert FileTooLargeError(20, 10).status_code == 400
        assert InvalidFileTypeError("text/x-shellscript", [".pdf"]).status_code == 400

    def test_payment_errors(self):
        assert PaymentSignatureError("order_1").status_code == 400
        assert PaymentNotConfiguredError().status_code == 503

    def test_explicit_status_override(self):
        assert CreaError("teapot", status_code=418).status_code == 418


class TestErrorResponse:

    def test_error_envelope(self):
        body = error_response(ValidationError("Amount must be positive", field="amount"))

        assert body["success"] is False
        assert body["message"] == "Amount must be positive"
        assert body["error"]["code"] == "VALIDATION_ERROR"

    def test_duplicate_resource_code(self):
        body = error_response(DuplicateResourceError("User already exists", field="email"))

        assert body["error"]["code"] == "DUPLICATE_RESOURCE"
        assert body["error"]["details"] == {"field": "email"}


class TestAuthErrors:

    def test_status_codes(self):
        assert AuthenticationError().status_code == 401
        assert AuthorizationError().status_code == 403
