"""SQLAlchemy ORM models for notifications."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

# Import Base from lead models to reuse the same declarative base
from leadflow.adapters.outbound.lead.models import Base


class NotificationModel(Base):
    """SQLAlchemy model for notifications table."""

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    user_id = Column(Integer, nullable=True, index=True)
    recipient_role = Column(String, nullable=True, index=True)
    lead_id = Column(Integer, nullable=True)
    client_id = Column(Integer, nullable=True)
    created_by = Column(Integer, nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
