"""
SQLAlchemy models for the Campaign Desk application.
"""
from .client import Client, Admin
from .service import Service, ServiceContent
from .campaign import Campaign, CampaignAction, CampaignStatus
from .payment import Payment, PaymentStatus
from .invoice import Invoice, InvoiceSequence

__all__ = [
    "Client",
    "Admin",
    "Service",
    "ServiceContent",
    "Campaign",
    "CampaignAction",
    "CampaignStatus",
    "Payment",
    "PaymentStatus",
    "Invoice",
    "InvoiceSequence",
]
