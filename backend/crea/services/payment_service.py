"""
RAZORPAY PAYMENT SERVICE
========================
Order creation and signature checks shared by memberships and donations.

Flow:
1. Client asks for an order → create_order() → Razorpay order_id
2. Client opens Razorpay checkout with order_id
3. Checkout returns order_id, payment_id, signature
4. Server checks HMAC-SHA256(order_id|payment_id, key_secret) == signature
5. Webhook backs up step 4: HMAC-SHA256(raw body, webhook_secret)
"""

import asyncio
import hashlib
import hmac
from typing import Any, Dict, Optional

import razorpay
from razorpay.errors import BadRequestError, GatewayError, ServerError

from crea.core.config import settings
from crea.core.exceptions import PaymentNotConfiguredError, PaymentGatewayError
from crea.core.logging_config import logger


class RazorpayService:
    """Thin async wrapper around the Razorpay SDK"""

    def __init__(self):
        self._client: Optional[razorpay.Client] = None

    @property
    def is_configured(self) -> bool:
        return settings.razorpay_configured

    @property
    def key_id(self) -> str:
        return settings.RAZORPAY_KEY_ID

    @property
    def client(self) -> razorpay.Client:
        if not self.is_configured:
            raise PaymentNotConfiguredError()
        if self._client is None:
            self._client = razorpay.Client(
                auth=(settings.RAZORPAY_KEY_ID, settings.RAZORPAY_KEY_SECRET)
            )
        return self._client

    async def create_order(
        self,
        amount_rupees: int,
        receipt: str,
        notes: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Create a Razorpay order.

        Amounts are kept in rupees throughout the portal and converted to
        paise only here. Receipt must be max 40 chars.
        """
        client = self.client
        order_data = {
            "amount": int(amount_rupees) * 100,
            "currency": settings.PAYMENT_CURRENCY,
            "receipt": receipt[:40],
            "notes": {k: str(v) for k, v in (notes or {}).items()},
        }

        # The SDK is synchronous (requests)
        loop = asyncio.get_running_loop()
        try:
            order = await loop.run_in_executor(None, lambda: client.order.create(data=order_data))
        except (BadRequestError, GatewayError, ServerError) as e:
            logger.log_payment_event("order_create_failed", None, success=False, error=str(e))
            raise PaymentGatewayError()

        logger.log_payment_event("order_created", order["id"], amount=order_data["amount"], receipt=receipt)
        return order

    @staticmethod
    def _signature(secret: str, message: bytes) -> str:
        return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()

    def verify_payment_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        """Check the checkout signature for order_id|payment_id"""
        if not settings.RAZORPAY_KEY_SECRET:
            raise PaymentNotConfiguredError()
        if not (order_id and payment_id and signature):
            return False
        expected = self._signature(settings.RAZORPAY_KEY_SECRET, f"{order_id}|{payment_id}".encode())
        return hmac.compare_digest(expected, signature)

    def verify_webhook_signature(self, body: bytes, signature: Optional[str]) -> bool:
        """Check X-Razorpay-Signature against the raw request body"""
        if not settings.RAZORPAY_WEBHOOK_SECRET or not signature:
            return False
        expected = self._signature(settings.RAZORPAY_WEBHOOK_SECRET, body)
        return hmac.compare_digest(expected, signature)


payment_service = RazorpayService()
