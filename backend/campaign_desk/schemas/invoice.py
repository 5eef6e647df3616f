"""
Invoice schemas.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .common import CamelModel, Money


class GenerateInvoiceRequest(BaseModel):
    """Campaign id plus the gateway callback fields proving payment."""
    campaign_id: str = Field(..., min_length=1, alias="campaignId")
    razorpay_order_id: str = Field(..., min_length=1)
    razorpay_payment_id: str = Field(..., min_length=1)
    razorpay_signature: str = Field(..., min_length=1)

    class Config:
        populate_by_name = True


class InvoiceIdRequest(CamelModel):
    invoice_id: str = Field(..., min_length=1)


class InvoiceItem(CamelModel):
    content_key: str
    unit_price: Money
    quantity: int
    total_cost: Money


class BillTo(CamelModel):
    full_name: str
    email: str


class PaymentInfo(CamelModel):
    order_id: str
    payment_id: Optional[str] = None
    amount: int
    currency: str


class InvoiceResponse(CamelModel):
    """Schema for Invoice API response."""
    invoice_id: str
    invoice_number: str
    campaign_id: str
    invoice_date: str
    due_date: str
    bill_to: BillTo
    items: List[InvoiceItem]
    subtotal: Money
    total: Money
    note: Optional[str] = None
    payment_info: PaymentInfo
    issued_by: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, invoice, issued_by: Optional[str] = None) -> "InvoiceResponse":
        return cls(
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            campaign_id=invoice.campaign_id,
            invoice_date=invoice.invoice_date,
            due_date=invoice.due_date,
            bill_to=BillTo(full_name=invoice.bill_to_name, email=invoice.bill_to_email),
            items=[InvoiceItem.model_validate(item) for item in invoice.get_items()],
            subtotal=invoice.subtotal,
            total=invoice.total,
            note=invoice.note,
            payment_info=PaymentInfo(
                order_id=invoice.order_id,
                payment_id=invoice.payment_id,
                amount=invoice.amount_paid,
                currency=invoice.currency,
            ),
            issued_by=issued_by,
            created_at=invoice.created_at,
        )
