"""
Payment workflow: gateway orders and callback verification.

A payment moves ``created -> approved`` or ``created -> failed`` and never
leaves a terminal state. Every transition is a conditional UPDATE guarded
by ``status = 'created'``, so concurrent verifications of the same order
apply at most one transition and only the winner triggers side effects.
"""
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional, Tuple

from sqlalchemy import desc
from sqlalchemy.orm import Session

from ..exceptions import NotFoundError, ValidationError
from ..models import Campaign, CampaignStatus, Client, Payment, PaymentStatus, Service
from .razorpay_service import CAPTURED, RazorpayService

logger = logging.getLogger(__name__)


@dataclass
class VerificationResult:
    """Outcome of a callback verification."""
    success: bool
    message: str
    payment: Optional[Payment] = None
    campaign: Optional[Campaign] = None
    # True only for the request that moved the payment to approved
    newly_approved: bool = False


def to_minor_units(amount) -> int:
    """Major-unit amount (e.g. 10.50) to the gateway's integer minor units (1050)."""
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


async def create_order(
    db: Session,
    gateway: RazorpayService,
    client_id: str,
    service_id: str,
    amount: Decimal,
    currency: str = "USD",
    receipt: Optional[str] = None,
    campaign_id: Optional[str] = None,
) -> Tuple[Dict[str, Any], Payment]:
    """
    Create a gateway order and persist its Payment row.

    Raises:
        NotFoundError: Client, service or (when given) campaign missing
        ValidationError: The campaign belongs to another client or service
        GatewayError: The gateway call failed; nothing is persisted
    """
    client = db.query(Client).filter(Client.id == client_id).first()
    if client is None:
        raise NotFoundError(f"Client not found: {client_id}")

    service = db.query(Service).filter(Service.id == service_id).first()
    if service is None:
        raise NotFoundError(f"Service not found: {service_id}")

    if campaign_id:
        campaign = db.query(Campaign).filter(Campaign.id == campaign_id).first()
        if campaign is None:
            raise NotFoundError(f"Campaign not found: {campaign_id}")
        if campaign.client_id != client.id or campaign.service_id != service.id:
            raise ValidationError(f"Campaign {campaign_id} does not belong to this client and service")

    order = await gateway.create_order(
        amount=to_minor_units(amount),
        currency=currency.upper(),
        receipt=receipt or secrets.token_hex(10),
    )

    payment = Payment(
        order_id=order["id"],
        amount=order["amount"],
        currency=order["currency"],
        receipt=order["receipt"],
        client_id=client.id,
        client_first_name=client.first_name,
        client_last_name=client.last_name,
        service_id=service.id,
        service_heading=service.heading,
        campaign_id=campaign_id,
        status=PaymentStatus.CREATED.value,
    )
    db.add(payment)
    db.commit()
    db.refresh(payment)

    logger.info(f"Payment record created for order {payment.order_id} (client {client_id})")
    return order, payment


def _transition(db: Session, order_id: str, values: Dict[str, Any]) -> bool:
    """Apply ``values`` only if the payment is still ``created``."""
    updated = (
        db.query(Payment)
        .filter(Payment.order_id == order_id, Payment.status == PaymentStatus.CREATED.value)
        .update(values, synchronize_session=False)
    )
    return updated == 1


def find_linked_campaign(db: Session, payment: Payment) -> Optional[Campaign]:
    """
    Campaign a payment pays for.

    Only campaigns of the payment's own client and service are considered.
    Uses the campaign id recorded on the order when there is one. Otherwise
    falls back to the newest pending campaign of that client and service,
    which may pick the wrong campaign when a client has several.
    """
    query = db.query(Campaign).filter(
        Campaign.client_id == payment.client_id,
        Campaign.service_id == payment.service_id,
    )
    if payment.campaign_id:
        return query.filter(Campaign.id == payment.campaign_id).first()

    return (
        query
        .filter(Campaign.status == CampaignStatus.PENDING.value)
        .order_by(desc(Campaign.created_at))
        .first()
    )


def _reload(db: Session, order_id: str) -> Payment:
    db.expire_all()
    return db.query(Payment).filter(Payment.order_id == order_id).first()


def _report_stored(db: Session, payment: Payment, payment_id: str) -> VerificationResult:
    """Result for a payment that is already terminal. No side effects."""
    if payment.status == PaymentStatus.APPROVED.value and payment.payment_id == payment_id:
        return VerificationResult(
            success=True,
            message="Payment already approved",
            payment=payment,
            campaign=find_linked_campaign(db, payment) if payment.campaign_id else None,
        )
    if payment.status == PaymentStatus.APPROVED.value:
        return VerificationResult(False, "Payment already approved for a different payment id", payment)
    return VerificationResult(False, f"Payment already {payment.status}", payment)


async def verify_payment(
    db: Session,
    gateway: RazorpayService,
    order_id: str,
    payment_id: str,
    signature: str,
) -> VerificationResult:
    """
    Verify a checkout callback and apply its outcome.

    1. The signature must match HMAC-SHA256(secret, "order_id|payment_id");
       otherwise the payment fails and nothing else in the request is used.
    2. The gateway's own payment status must be ``captured``; otherwise the
       status is stored verbatim in ``gateway_status`` and the payment fails.
    3. On success the payment is approved and its campaign completed in one
       commit. A missing campaign is logged and does not fail the payment.

    Raises:
        NotFoundError: No payment exists for ``order_id``
        GatewayError: The payment status could not be fetched
    """
    payment = db.query(Payment).filter(Payment.order_id == order_id).first()
    if payment is None:
        raise NotFoundError(f"Payment not found for order {order_id}")

    if not gateway.verify_signature(order_id, payment_id, signature):
        logger.warning(f"Invalid payment signature for order {order_id}")
        if _transition(db, order_id, {"status": PaymentStatus.FAILED.value}):
            db.commit()
        return VerificationResult(False, "Invalid signature", _reload(db, order_id))

    if payment.is_terminal:
        return _report_stored(db, payment, payment_id)

    gateway_payment = await gateway.fetch_payment(payment_id)
    gateway_status = gateway_payment.get("status")

    if gateway_status != CAPTURED:
        logger.warning(f"Payment {payment_id} for order {order_id} is {gateway_status}, not captured")
        applied = _transition(db, order_id, {
            "status": PaymentStatus.FAILED.value,
            "gateway_status": gateway_status,
            "payment_id": payment_id,
        })
        if not applied:
            db.rollback()
            return _report_stored(db, _reload(db, order_id), payment_id)
        db.commit()
        return VerificationResult(False, f"Payment status: {gateway_status}", _reload(db, order_id))

    applied = _transition(db, order_id, {
        "status": PaymentStatus.APPROVED.value,
        "gateway_status": gateway_status,
        "payment_id": payment_id,
        "signature": signature,
        "approved_at": datetime.utcnow(),
    })
    if not applied:
        # Another request settled this order first
        db.rollback()
        return _report_stored(db, _reload(db, order_id), payment_id)

    payment = _reload(db, order_id)
    campaign = find_linked_campaign(db, payment)
    if campaign is None:
        logger.warning(
            f"Payment approved but no campaign found for client={payment.client_id} "
            f"service={payment.service_id}"
        )
    elif campaign.status != CampaignStatus.COMPLETED.value:
        campaign.status = CampaignStatus.COMPLETED.value

    db.commit()
    if campaign is not None:
        db.refresh(campaign)
    db.refresh(payment)

    logger.info(f"Payment approved for order {order_id}")
    return VerificationResult(
        success=True,
        message="Payment approved successfully",
        payment=payment,
        campaign=campaign,
        newly_approved=True,
    )
