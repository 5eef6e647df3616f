"""
Service catalog models - services and their individually priced content items.
"""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from ..database import Base


class Service(Base):
    """Catalog entry a campaign is placed against."""

    __tablename__ = "services"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    heading = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)

    contents = relationship(
        "ServiceContent",
        back_populates="service",
        order_by="ServiceContent.position",
        cascade="all, delete-orphan",
    )

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def find_content(self, content_id: str):
        """Return the content item with this content id, or None."""
        for content in self.contents:
            if content.content_id == content_id:
                return content
        return None

    def __repr__(self):
        return f"<Service {self.heading}>"


class ServiceContent(Base):
    """A priced line item of a service, e.g. "100 Likes" at "5.00"."""

    __tablename__ = "service_contents"

    id = Column(Integer, primary_key=True, autoincrement=True)

    service_id = Column(String(36), ForeignKey("services.id", ondelete="CASCADE"), nullable=False)
    service = relationship("Service", back_populates="contents")

    # Stable identity used by campaign actions
    content_id = Column(String(36), nullable=False, default=lambda: str(uuid.uuid4()))
    key = Column(String(255), nullable=False)
    value = Column(String(50), nullable=False)  # Price as a string-formatted number

    # Display order only
    position = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint('service_id', 'content_id', name='uq_service_content_id'),
    )

    def __repr__(self):
        return f"<ServiceContent {self.key}={self.value}>"
