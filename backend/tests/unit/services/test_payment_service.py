"""
Unit Tests for the Razorpay wrapper
"""
import hashlib
import hmac
import pytest
from razorpay.errors import BadRequestError

from crea.core.config import settings
from crea.core.exceptions import PaymentGatewayError, PaymentNotConfiguredError
from crea.services.payment_service import RazorpayService


class FakeOrders:

    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def create(self, data):
        self.calls.append(data)
        if self.error:
            raise self.error
        return {'id': 'order_fake001', **data}


class FakeClient:

    def __init__(self, error=None):
        self.order = FakeOrders(error)


class TestCreateOrder:

    @pytest.mark.asyncio
    async def test_amount_converted_to_paise(self):
        service = RazorpayService()
        service._client = FakeClient()

        order = await service.create_order(500, receipt='crea_' + 'x' * 60, notes={'membership_id': 'CREA20250001'})

        sent = service._client.order.calls[0]
        assert order['id'] == 'order_fake001'
        assert sent['amount'] == 50000
        assert sent['currency'] == 'INR'
        assert len(sent['receipt']) == 40

    @pytest.mark.asyncio
    async def test_gateway_error_mapped(self):
        service = RazorpayService()
        service._client = FakeClient(error=BadRequestError('bad amount'))

        with pytest.raises(PaymentGatewayError):
            await service.create_order(500, receipt='crea_1')

    def test_unconfigured_client(self, monkeypatch):
        monkeypatch.setattr(settings, 'RAZORPAY_KEY_ID', '')
        service = RazorpayService()

        with pytest.raises(PaymentNotConfiguredError):
            service.client


class TestSignatures:

    def test_valid_payment_signature(self, sign_payment):
        service = RazorpayService()
        signature = sign_payment('order_1', 'pay_1')

        assert service.verify_payment_signature('order_1', 'pay_1', signature) is True

    def test_tampered_payment_signature(self, sign_payment):
        service = RazorpayService()
        signature = sign_payment('order_1', 'pay_1')

        assert service.verify_payment_signature('order_1', 'pay_2', signature) is False
        assert service.verify_payment_signature('order_1', 'pay_1', '') is False

    def test_payment_signature_needs_secret(self, monkeypatch):
        monkeypatch.setattr(settings, 'RAZORPAY_KEY_SECRET', '')

        with pytest.raises(PaymentNotConfiguredError):
            RazorpayService().verify_payment_signature('order_1', 'pay_1', 'sig')

    def test_webhook_signature(self):
        body = b'{"event":"payment.captured"}'
        signature = hmac.new(settings.RAZORPAY_WEBHOOK_SECRET.encode(), body, hashlib.sha256).hexdigest()
        service = RazorpayService()

        assert service.verify_webhook_signature(body, signature) is True
        assert service.verify_webhook_signature(body + b' ', signature) is False
        assert service.verify_webhook_signature(body, None) is False
