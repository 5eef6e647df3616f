"""
Payment model - one row per gateway order.
"""
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, Integer, DateTime

from ..database import Base


class PaymentStatus(str, Enum):
    """Payment status. Anything other than CREATED is terminal."""
    CREATED = "created"
    APPROVED = "approved"
    FAILED = "failed"


class Payment(Base):
    """Payment intent keyed by the gateway's order id."""

    __tablename__ = "payments"

    # Gateway order id, so there is exactly one row per order
    order_id = Column(String(64), primary_key=True)

    # Filled in from the gateway callback
    payment_id = Column(String(64), nullable=True, index=True)
    signature = Column(String(128), nullable=True)

    # Amount in the currency's smallest unit
    amount = Column(Integer, nullable=False)
    currency = Column(String(10), nullable=False)
    receipt = Column(String(64), nullable=False)

    # Client snapshot
    client_id = Column(String(36), nullable=False, index=True)
    client_first_name = Column(String(100), nullable=True)
    client_last_name = Column(String(100), nullable=True)

    # Service snapshot
    service_id = Column(String(36), nullable=False, index=True)
    service_heading = Column(String(255), nullable=True)

    # Campaign this order pays for, when the caller supplied it
    campaign_id = Column(String(36), nullable=True, index=True)

    status = Column(String(20), nullable=False, default=PaymentStatus.CREATED.value)
    gateway_status = Column(String(32), nullable=True)  # Verbatim gateway status on a non-captured result

    created_at = Column(DateTime, default=datetime.utcnow)
    approved_at = Column(DateTime, nullable=True)

    @property
    def is_terminal(self) -> bool:
        return self.status != PaymentStatus.CREATED.value

    def __repr__(self):
        return f"<Payment {self.order_id} ({self.status})>"
