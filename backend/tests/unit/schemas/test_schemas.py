"""
Unit Tests for request/response schemas
"""
import pytest
from datetime import datetime, timezone, timedelta
from pydantic import ValidationError

from crea.models.membership import MembershipPlan
from crea.schemas.auth import UserRegister
from crea.schemas.content import AdvertisementCreate
from crea.schemas.donation import DonationCreate
from crea.schemas.membership import MembershipApplication, VerifyPaymentRequest


APPLICATION = {
    'name': 'Asha Patil',
    'designation': 'SSE',
    'division': 'Pune',
    'department': 'Engineering',
    'place': 'Pune',
    'unit': 'Track',
    'mobile': '9876543210',
    'email': 'Asha@Example.com',
}


class TestCamelCaseAliases:

    def test_accepts_camel_case_input(self):
        app = MembershipApplication(**APPLICATION, personalDetails={'dateOfBirth': '1990-01-01'})
        assert app.personal_details.date_of_birth == '1990-01-01'

    def test_accepts_snake_case_input(self):
        app = MembershipApplication(**APPLICATION, personal_details={'date_of_birth': '1990-01-01'})
        assert app.personal_details.date_of_birth == '1990-01-01'

    def test_dumps_camel_case(self):
        app = MembershipApplication(**APPLICATION)
        data = app.model_dump(by_alias=True)
        assert 'personalDetails' in data
        assert 'paymentMethod' in data
        assert data['type'] == MembershipPlan.ORDINARY

    def test_email_lowercased(self):
        assert MembershipApplication(**APPLICATION).email == 'asha@example.com'

    def test_razorpay_fields_keep_snake_case(self):
        req = VerifyPaymentRequest(
            razorpay_order_id='order_1', razorpay_payment_id='pay_1', razorpay_signature='sig'
        )
        assert req.model_dump(by_alias=True)['razorpay_order_id'] == 'order_1'


class TestMobileNumbers:

    @pytest.mark.parametrize('mobile', ['9876543210', '6000000000'])
    def test_valid(self, mobile):
        assert MembershipApplication(**{**APPLICATION, 'mobile': mobile}).mobile == mobile

    @pytest.mark.parametrize('mobile', ['1234567890', '98765', '98765432101', '+919876543210'])
    def test_invalid(self, mobile):
        with pytest.raises(ValidationError):
            MembershipApplication(**{**APPLICATION, 'mobile': mobile})


class TestDonationCreate:

    def donation(self, **overrides):
        data = {'fullName': 'Donor', 'email': 'donor@example.com', 'mobile': '9876543210', 'amount': 500}
        data.update(overrides)
        return DonationCreate(**data)

    def test_employee_requires_id(self):
        with pytest.raises(ValidationError) as exc:
            self.donation(isEmployee=True)
        assert 'Employee ID is required' in str(exc.value)

        assert self.donation(isEmployee=True, employeeId='EMP42').employee_id == 'EMP42'

    def test_amount_positive(self):
        with pytest.raises(ValidationError):
            self.donation(amount=0)


class TestAdvertisementWindow:

    def test_end_before_start_rejected(self):
        with pytest.raises(ValidationError):
            AdvertisementCreate(
                title='Ad',
                startDate=datetime(2025, 5, 10),
                endDate=datetime(2025, 5, 1),
            )

    def test_open_window_allowed(self):
        ad = AdvertisementCreate(title='Ad', startDate=datetime(2025, 5, 10))
        assert ad.end_date is None


class TestDatetimeNormalization:

    def test_aware_datetime_becomes_naive_utc(self):
        ist = timezone(timedelta(hours=5, minutes=30))
        user = UserRegister(
            name='A', email='a@example.com', password='secret1',
            dateOfBirth=datetime(1990, 1, 1, 5, 30, tzinfo=ist),
        )
        assert user.date_of_birth == datetime(1990, 1, 1, 0, 0)
        assert user.date_of_birth.tzinfo is None

    def test_iso_string_with_offset(self):
        ad = AdvertisementCreate(title='Ad', startDate='2025-05-10T10:00:00Z')
        assert ad.start_date == datetime(2025, 5, 10, 10, 0)
