"""Lead DTOs."""

from datetime import date
from typing import Optional

from pydantic import Field

from leadflow.application.dtos.base import DTO, PatchDTO
from leadflow.domain.value_objects.lead_status import FollowUpStatus, LeadPriority, LeadStatus


class LeadCreate(DTO):
    """Fields for a new lead."""

    name: str = Field(min_length=1)
    phone_number: str = Field(min_length=1)
    phone_country_code: Optional[str] = None
    secondary_phone_number: Optional[str] = None
    secondary_phone_country_code: Optional[str] = None
    whatsapp_number: Optional[str] = None
    whatsapp_country_code: Optional[str] = None
    email: Optional[str] = None
    age: Optional[int] = Field(default=None, ge=0)
    occupation: Optional[str] = None
    qualification: Optional[str] = None
    year_of_experience: Optional[int] = Field(default=None, ge=0)
    target_country: Optional[str] = None
    residing_country: Optional[str] = None
    program: Optional[str] = None
    ielts_score: Optional[float] = Field(default=None, ge=0, le=9)
    source: Optional[str] = None
    status: Optional[LeadStatus] = None
    priority: Optional[LeadPriority] = None
    assigned_staff_id: Optional[int] = None
    follow_up_date: Optional[date] = None
    follow_up_status: Optional[FollowUpStatus] = None
    comment: Optional[str] = None


class LeadPatch(PatchDTO):
    """Partial update of a lead."""

    name: Optional[str] = Field(default=None, min_length=1)
    phone_number: Optional[str] = Field(default=None, min_length=1)
    phone_country_code: Optional[str] = None
    secondary_phone_number: Optional[str] = None
    secondary_phone_country_code: Optional[str] = None
    whatsapp_number: Optional[str] = None
    whatsapp_country_code: Optional[str] = None
    email: Optional[str] = None
    age: Optional[int] = Field(default=None, ge=0)
    occupation: Optional[str] = None
    qualification: Optional[str] = None
    year_of_experience: Optional[int] = Field(default=None, ge=0)
    target_country: Optional[str] = None
    residing_country: Optional[str] = None
    program: Optional[str] = None
    ielts_score: Optional[float] = Field(default=None, ge=0, le=9)
    source: Optional[str] = None
    status: Optional[LeadStatus] = None
    priority: Optional[LeadPriority] = None
    assigned_staff_id: Optional[int] = None
    follow_up_date: Optional[date] = None
    follow_up_status: Optional[FollowUpStatus] = None
    comment: Optional[str] = None


class BulkAssignResult(DTO):
    """Outcome of a bulk assignment."""

    updated_lead_ids: list[int] = []
    unchanged_lead_ids: list[int] = []
    not_found_lead_ids: list[int] = []
    rejected_lead_ids: list[int] = []

    @property
    def updated_count(self) -> int:
        """Number of reassigned leads."""
        return len(self.updated_lead_ids)
