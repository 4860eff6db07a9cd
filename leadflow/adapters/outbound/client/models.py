"""SQLAlchemy ORM models for clients."""

from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, Date, DateTime, Float, Integer, String

# Import Base from lead models to reuse the same declarative base
from leadflow.adapters.outbound.lead.models import Base


class ClientModel(Base):
    """SQLAlchemy model for clients table."""

    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Not a foreign key: the client outlives a deleted lead
    lead_id = Column(Integer, nullable=True, unique=True, index=True)
    name = Column(String, nullable=False)
    phone_number = Column(String, nullable=False)
    phone_country_code = Column(String, nullable=False, default="+91")
    secondary_phone_number = Column(String, nullable=True)
    secondary_phone_country_code = Column(String, nullable=True)
    whatsapp_number = Column(String, nullable=True)
    whatsapp_country_code = Column(String, nullable=True)
    email = Column(String, nullable=True)
    age = Column(Integer, nullable=True)
    occupation = Column(String, nullable=True)
    qualification = Column(String, nullable=True)
    year_of_experience = Column(Integer, nullable=True)
    target_country = Column(String, nullable=True)
    residing_country = Column(String, nullable=True)
    program = Column(String, nullable=True)
    ielts_score = Column(Float, nullable=True)
    source = Column(String, nullable=True)
    assessment_authority = Column(String, nullable=False)
    occupation_mapped = Column(String, nullable=False)
    registration_fee_paid = Column(Boolean, nullable=False, default=False)
    fee_status = Column(String, nullable=True, index=True)
    amount_paid = Column(Float, nullable=False, default=0.0)
    payment_due_date = Column(Date, nullable=True)
    assigned_staff_id = Column(Integer, nullable=True, index=True)
    processing_staff_id = Column(Integer, nullable=True, index=True)
    processing_status = Column(String, nullable=True)  # display copy of the last action
    completed_actions = Column(JSON, nullable=False, default=list)
    created_by = Column(Integer, nullable=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
