"""SQLAlchemy ORM models for leads."""

from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class LeadModel(Base):
    """SQLAlchemy model for leads table."""

    __tablename__ = "leads"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    phone_number = Column(String, nullable=False, index=True)
    phone_country_code = Column(String, nullable=False, default="+91")
    secondary_phone_number = Column(String, nullable=True)
    secondary_phone_country_code = Column(String, nullable=True)
    whatsapp_number = Column(String, nullable=True)
    whatsapp_country_code = Column(String, nullable=True)
    email = Column(String, nullable=True, index=True)
    age = Column(Integer, nullable=True)
    occupation = Column(String, nullable=True)
    qualification = Column(String, nullable=True)
    year_of_experience = Column(Integer, nullable=True)
    target_country = Column(String, nullable=True)
    residing_country = Column(String, nullable=True)
    program = Column(String, nullable=True)
    ielts_score = Column(Float, nullable=True)
    source = Column(String, nullable=True)
    status = Column(String, nullable=False, default="Unassigned", index=True)
    priority = Column(String, nullable=True)
    assigned_staff_id = Column(Integer, nullable=True, index=True)
    follow_up_date = Column(Date, nullable=True)
    follow_up_status = Column(String, nullable=False, default="Pending")
    comment = Column(Text, nullable=True)
    created_by = Column(Integer, nullable=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )


class LeadCommentModel(Base):
    """SQLAlchemy model for lead_comments table."""

    __tablename__ = "lead_comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    lead_id = Column(Integer, ForeignKey("leads.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(Integer, nullable=False)
    text = Column(Text, nullable=False)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
