"""
Transactional email over an HTTP mail API, plus the message templates the
campaign and payment flows send.

Sending is best-effort: failures are logged and reported as ``False``,
never raised.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

import httpx

from ..config import Settings
from ..schemas.campaign import CampaignResponse
from ..schemas.payment import PaymentResponse

logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending plain-text transactional email."""

    def __init__(
        self,
        api_url: str,
        api_key: str,
        from_address: str,
        support_address: str = "",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self.from_address = from_address
        self.support_address = support_address
        self.timeout = timeout
        self._transport = transport

        if not api_key:
            logger.warning("Mail API key not configured. Email sending disabled.")

    @classmethod
    def from_settings(cls, settings: Settings) -> "EmailService":
        return cls(
            api_url=settings.mail_api_url,
            api_key=settings.mail_api_key,
            from_address=settings.mail_from,
            support_address=settings.support_email,
        )

    async def send_mail(self, to: str, subject: str, body: str) -> bool:
        """
        Send one email.

        Returns:
            True if the mail API accepted the message
        """
        if not self.api_key:
            logger.info(f"Email to {to} skipped (mail API not configured): {subject}")
            return False

        payload = {
            "from": self.from_address,
            "to": [to],
            "subject": subject,
            "text": body,
        }
        try:
            async with httpx.AsyncClient(
                base_url=self.api_url,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.post("/emails", json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Email to {to} failed: {e}")
            return False

        if response.status_code not in (200, 201, 202):
            logger.error(f"Email to {to} rejected: {response.status_code} - {response.text}")
            return False

        logger.info(f"Email sent to {to}: {subject}")
        return True

    # Templates

    async def send_campaign_created(self, to: str, campaign: CampaignResponse) -> bool:
        lines = "\n".join(
            f"  - {a.content_key}: {a.quantity} x {a.unit_price} = {a.total_cost}"
            for a in campaign.actions
        )
        body = (
            f"Hello {campaign.client_name.first_name},\n\n"
            f"Your campaign for \"{campaign.service_heading}\" has been received.\n\n"
            f"Link: {campaign.link}\n"
            f"Actions:\n{lines}\n\n"
            f"Total: {campaign.total_amount}\n\n"
            f"Campaign ID: {campaign.campaign_id}\n"
        )
        return await self.send_mail(to, f"Campaign received: {campaign.service_heading}", body)

    async def send_campaign_completed(self, to: str, first_name: str, service_heading: str) -> bool:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
        body = (
            f"Hello {first_name},\n\n"
            f"Your campaign for \"{service_heading}\" was completed on {timestamp}.\n\n"
            "Thank you for partnering with us. If you have any feedback or need further "
            f"assistance, reply to this email or contact {self.support_address}.\n"
        )
        return await self.send_mail(to, f"Your {service_heading} Campaign Is Complete", body)

    async def send_payment_confirmation(self, to: str, payment: PaymentResponse) -> bool:
        amount = f"{payment.amount / 100:.2f} {payment.currency}"
        body = (
            f"Hello {payment.client_name.first_name},\n\n"
            f"We received your payment of {amount} for \"{payment.service_heading}\".\n\n"
            f"Order ID: {payment.order_id}\n"
            f"Payment ID: {payment.payment_id}\n"
            f"Receipt: {payment.receipt}\n"
        )
        return await self.send_mail(to, "Payment received", body)
