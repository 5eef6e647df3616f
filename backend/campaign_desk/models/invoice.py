"""
Invoice models - immutable billing snapshots of paid campaigns.
"""
import json
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, Text, Numeric

from ..database import Base


class Invoice(Base):
    """Point-in-time snapshot of a paid campaign's billing data."""

    __tablename__ = "invoices"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    invoice_number = Column(String(20), unique=True, nullable=False)  # e.g. INV00001

    # References
    campaign_id = Column(String(36), nullable=False, index=True)
    client_id = Column(String(36), nullable=False)
    order_id = Column(String(64), nullable=False)
    payment_id = Column(String(64), nullable=True)

    # Dates as YYYY-MM-DD
    invoice_date = Column(String(10), nullable=False)
    due_date = Column(String(10), nullable=False)

    # Bill-to
    bill_to_name = Column(String(255), nullable=False)
    bill_to_email = Column(String(255), nullable=False)

    # Line items (JSON list of {contentKey, unitPrice, quantity, totalCost})
    items = Column(Text, nullable=False, default="[]")

    subtotal = Column(Numeric(12, 2), nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False, default=0)

    # Payment info
    amount_paid = Column(Integer, nullable=False)  # Smallest currency unit
    currency = Column(String(10), nullable=False)

    note = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    def get_items(self) -> list:
        """Get line items from JSON."""
        if self.items:
            try:
                return json.loads(self.items)
            except (json.JSONDecodeError, TypeError):
                return []
        return []

    def store_items(self, items: list):
        """Store line items as JSON."""
        self.items = json.dumps(items)

    def __repr__(self):
        return f"<Invoice {self.invoice_number}>"


class InvoiceSequence(Base):
    """Named counter used to allocate invoice numbers."""

    __tablename__ = "invoice_sequences"

    name = Column(String(100), primary_key=True)
    value = Column(Integer, nullable=False, default=0)
