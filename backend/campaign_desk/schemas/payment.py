"""
Payment schemas for API validation.
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from .campaign import CampaignResponse, ClientName
from .common import CamelModel


class CreateOrderRequest(CamelModel):
    """Order request. ``amount`` is in major units (e.g. dollars)."""
    amount: Decimal = Field(..., gt=0)
    currency: str = Field("USD", min_length=3, max_length=3)
    receipt: Optional[str] = Field(None, max_length=40)
    client_id: str = Field(..., min_length=1)
    service_id: str = Field(..., min_length=1)
    campaign_id: Optional[str] = None


class VerifyPaymentRequest(BaseModel):
    """Gateway callback fields, named as the gateway sends them."""
    razorpay_order_id: str = Field(..., min_length=1)
    razorpay_payment_id: str = Field(..., min_length=1)
    razorpay_signature: str = Field(..., min_length=1)


class PaymentResponse(CamelModel):
    """Schema for Payment API response."""
    order_id: str
    payment_id: Optional[str] = None
    amount: int
    currency: str
    receipt: str
    client_id: str
    client_name: ClientName
    service_id: str
    service_heading: Optional[str] = None
    campaign_id: Optional[str] = None
    status: str
    gateway_status: Optional[str] = None
    created_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, payment) -> "PaymentResponse":
        return cls(
            order_id=payment.order_id,
            payment_id=payment.payment_id,
            amount=payment.amount,
            currency=payment.currency,
            receipt=payment.receipt,
            client_id=payment.client_id,
            client_name=ClientName(
                first_name=payment.client_first_name or "",
                last_name=payment.client_last_name or "",
            ),
            service_id=payment.service_id,
            service_heading=payment.service_heading,
            campaign_id=payment.campaign_id,
            status=payment.status,
            gateway_status=payment.gateway_status,
            created_at=payment.created_at,
            approved_at=payment.approved_at,
        )


class CreateOrderResponse(CamelModel):
    success: bool = True
    order: Dict[str, Any]
    payment_record: PaymentResponse


class VerifyPaymentResponse(CamelModel):
    success: bool
    message: str
    payment: Optional[PaymentResponse] = None
    campaign: Optional[CampaignResponse] = None
