"""
Pydantic schemas for request/response validation.
"""
from .campaign import CampaignCreate, CampaignUpdate, CampaignResponse
from .service import ServiceCreate, ServiceUpdate, ServiceResponse
from .payment import CreateOrderRequest, VerifyPaymentRequest, PaymentResponse
from .invoice import GenerateInvoiceRequest, InvoiceResponse

__all__ = [
    "CampaignCreate", "CampaignUpdate", "CampaignResponse",
    "ServiceCreate", "ServiceUpdate", "ServiceResponse",
    "CreateOrderRequest", "VerifyPaymentRequest", "PaymentResponse",
    "GenerateInvoiceRequest", "InvoiceResponse",
]
