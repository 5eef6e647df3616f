"""
Campaign model - a client's paid request for priced actions against a service.
"""
import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Integer, Numeric
from sqlalchemy.orm import relationship

from ..database import Base


class CampaignStatus(str, Enum):
    """Lifecycle status for campaigns."""
    PENDING = "pending"      # Created, awaiting payment or completion
    COMPLETED = "completed"  # Paid/approved or completed by an admin


class Campaign(Base):
    """Campaign with denormalized client and service snapshots."""

    __tablename__ = "campaigns"

    # Primary key
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Client relationship, name captured at creation and never refreshed
    client_id = Column(String(36), ForeignKey("clients.id"), nullable=False, index=True)
    client = relationship("Client", back_populates="campaigns")
    client_first_name = Column(String(100), nullable=False)
    client_last_name = Column(String(100), nullable=False)

    # Service reference, heading captured at creation; survives service deletion
    service_id = Column(String(36), nullable=False, index=True)
    service_heading = Column(String(255), nullable=False)

    # Target link
    link = Column(Text, nullable=False)

    # Priced action lines, rewritten by the pricing step on every save
    actions = relationship(
        "CampaignAction",
        back_populates="campaign",
        order_by="CampaignAction.position",
        cascade="all, delete-orphan",
    )
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)

    status = Column(String(20), nullable=False, default=CampaignStatus.PENDING.value, index=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Campaign {self.id} ({self.status})>"


class CampaignAction(Base):
    """One priced line item within a campaign."""

    __tablename__ = "campaign_actions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    campaign_id = Column(String(36), ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False)
    campaign = relationship("Campaign", back_populates="actions")

    content_id = Column(String(36), nullable=False)
    content_key = Column(String(255), nullable=False)  # Snapshot of the content key
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)  # Snapshot of the content price
    total_cost = Column(Numeric(12, 2), nullable=False)

    position = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<CampaignAction {self.content_key} x{self.quantity}>"
