"""
Invoice generation for paid campaigns.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session

from ..exceptions import NotFoundError, ValidationError
from ..models import Client, Invoice, InvoiceSequence, Payment, PaymentStatus
from .campaign_service import get_campaign
from .pricing_service import to_money
from .razorpay_service import RazorpayService

logger = logging.getLogger(__name__)


def next_invoice_number(db: Session, sequence_name: str) -> str:
    """Allocate the next ``INV00001``-style number from a named counter."""
    counter = (
        db.query(InvoiceSequence)
        .filter(InvoiceSequence.name == sequence_name)
        .with_for_update()
        .first()
    )
    if counter is None:
        counter = InvoiceSequence(name=sequence_name, value=0)
        db.add(counter)
    counter.value += 1
    db.flush()
    return f"INV{counter.value:05d}"


def generate_invoice(
    db: Session,
    gateway: RazorpayService,
    campaign_id: str,
    order_id: str,
    payment_id: str,
    signature: str,
    sequence_name: str,
    note: str,
) -> Invoice:
    """
    Snapshot a paid campaign into a new invoice.

    Raises:
        ValidationError: The payment signature does not verify
        NotFoundError: Payment not approved, or campaign/client missing
    """
    if not gateway.verify_signature(order_id, payment_id, signature):
        raise ValidationError("Invalid payment signature")

    payment = db.query(Payment).filter(Payment.order_id == order_id).first()
    if payment is None or payment.status != PaymentStatus.APPROVED.value:
        raise NotFoundError("Payment not approved or not found")

    campaign = get_campaign(db, campaign_id)
    if campaign is None:
        raise NotFoundError("Campaign not found")

    client = db.query(Client).filter(Client.id == campaign.client_id).first()
    if client is None:
        raise NotFoundError("Client not found")

    items = [
        {
            "contentKey": action.content_key,
            "unitPrice": str(action.unit_price),
            "quantity": action.quantity,
            "totalCost": str(action.total_cost),
        }
        for action in campaign.actions
    ]
    subtotal = to_money(sum((Decimal(item["totalCost"]) for item in items), Decimal("0")))
    today = date.today().isoformat()

    invoice = Invoice(
        invoice_number=next_invoice_number(db, sequence_name),
        campaign_id=campaign.id,
        client_id=client.id,
        order_id=payment.order_id,
        payment_id=payment.payment_id,
        invoice_date=today,
        due_date=today,
        bill_to_name=client.full_name,
        bill_to_email=client.email,
        subtotal=subtotal,
        total=subtotal,
        amount_paid=payment.amount,
        currency=payment.currency,
        note=note,
    )
    invoice.store_items(items)

    db.add(invoice)
    db.commit()
    db.refresh(invoice)

    logger.info(f"Invoice {invoice.invoice_number} generated for campaign {campaign_id}")
    return invoice


def list_campaign_invoices(db: Session, campaign_id: str) -> List[Invoice]:
    invoices = (
        db.query(Invoice)
        .filter(Invoice.campaign_id == campaign_id)
        .order_by(Invoice.created_at)
        .all()
    )
    if not invoices:
        raise NotFoundError("No invoices found for this campaign")
    return invoices


def get_invoice(db: Session, invoice_id: str) -> Invoice:
    invoice = db.query(Invoice).filter(Invoice.id == invoice_id).first()
    if invoice is None:
        raise NotFoundError("Invoice not found")
    return invoice
