"""
Razorpay gateway client: order creation, payment lookup and callback
signature verification.

One instance is built at startup from settings and injected where needed.
"""
import hashlib
import hmac
import logging
from typing import Any, Dict, Optional

import httpx

from ..config import Settings
from ..exceptions import GatewayError

logger = logging.getLogger(__name__)

CAPTURED = "captured"


def compute_signature(secret: str, order_id: str, payment_id: str) -> str:
    """HMAC-SHA256 hex digest of ``"{order_id}|{payment_id}"`` keyed by ``secret``."""
    message = f"{order_id}|{payment_id}"
    return hmac.new(secret.encode(), message.encode(), hashlib.sha256).hexdigest()


class RazorpayService:
    """Service for Razorpay REST API interactions."""

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        base_url: str = "https://api.razorpay.com/v1",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.key_id = key_id
        self.key_secret = key_secret
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

        if not key_id or not key_secret:
            logger.warning("Razorpay credentials not configured - payment calls will fail")

    @classmethod
    def from_settings(cls, settings: Settings) -> "RazorpayService":
        return cls(
            key_id=settings.razorpay_key_id,
            key_secret=settings.razorpay_key_secret,
            base_url=settings.razorpay_api_url,
            timeout=settings.razorpay_timeout_seconds,
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            auth=(self.key_id, self.key_secret),
            timeout=self.timeout,
            transport=self._transport,
        )

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            async with self._client() as client:
                response = await client.request(method, path, **kwargs)
        except httpx.TimeoutException:
            logger.error(f"Razorpay timeout on {method} {path}")
            raise GatewayError("Payment gateway timeout")
        except httpx.HTTPError as e:
            logger.error(f"Razorpay request error on {method} {path}: {e}")
            raise GatewayError("Payment gateway unreachable")

        if response.status_code not in (200, 201):
            logger.error(f"Razorpay {method} {path} failed: {response.status_code} - {response.text}")
            raise GatewayError("Payment gateway rejected the request", status=response.status_code)

        return response.json()

    async def create_order(self, amount: int, currency: str, receipt: str) -> Dict[str, Any]:
        """
        Create a gateway order.

        Args:
            amount: Amount in the currency's smallest unit
            currency: ISO currency code
            receipt: Merchant receipt token

        Returns:
            The order as returned by Razorpay (``id``, ``amount``, ``currency``,
            ``receipt``, ``status``, ...)
        """
        order = await self._request(
            "POST",
            "/orders",
            json={"amount": amount, "currency": currency, "receipt": receipt},
        )
        logger.info(f"Razorpay order created: {order.get('id')} ({amount} {currency})")
        return order

    async def fetch_payment(self, payment_id: str) -> Dict[str, Any]:
        """Fetch the authoritative payment state (``status`` is e.g. ``captured``)."""
        return await self._request("GET", f"/payments/{payment_id}")

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        """
        Check a checkout callback signature.

        The comparison is exact: any difference in case or whitespace fails.
        """
        expected = compute_signature(self.key_secret, order_id, payment_id)
        return hmac.compare_digest(expected.encode(), signature.encode())
