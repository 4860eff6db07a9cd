"""HTTP adapter schemas."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from leadflow.domain.entities.client import Client
from leadflow.domain.policies.role_policy import PAYMENT_FIELDS
from leadflow.domain.value_objects.lead_status import FollowUpStatus, LeadPriority, LeadStatus
from leadflow.domain.value_objects.processing import FeeStatus, MilestoneAction


class LeadResponse(BaseModel):
    """Lead as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    phone_number: str
    phone_country_code: str
    secondary_phone_number: Optional[str] = None
    secondary_phone_country_code: Optional[str] = None
    whatsapp_number: Optional[str] = None
    whatsapp_country_code: Optional[str] = None
    email: Optional[str] = None
    age: Optional[int] = None
    occupation: Optional[str] = None
    qualification: Optional[str] = None
    year_of_experience: Optional[int] = None
    target_country: Optional[str] = None
    residing_country: Optional[str] = None
    program: Optional[str] = None
    ielts_score: Optional[float] = None
    source: Optional[str] = None
    status: LeadStatus
    priority: Optional[LeadPriority] = None
    assigned_staff_id: Optional[int] = None
    follow_up_date: Optional[date] = None
    follow_up_status: FollowUpStatus
    comment: Optional[str] = None
    created_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class CompletedActionResponse(BaseModel):
    """One entry of a client's processing history."""

    model_config = ConfigDict(from_attributes=True)

    action: MilestoneAction
    label: str
    completed_at: datetime
    completed_by: int
    completed_by_name: Optional[str] = None


class ClientResponse(BaseModel):
    """Client as returned by the API; payment fields may be redacted."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    lead_id: Optional[int] = None
    name: str
    phone_number: str
    phone_country_code: str
    secondary_phone_number: Optional[str] = None
    secondary_phone_country_code: Optional[str] = None
    whatsapp_number: Optional[str] = None
    whatsapp_country_code: Optional[str] = None
    email: Optional[str] = None
    age: Optional[int] = None
    occupation: Optional[str] = None
    qualification: Optional[str] = None
    year_of_experience: Optional[int] = None
    target_country: Optional[str] = None
    residing_country: Optional[str] = None
    program: Optional[str] = None
    ielts_score: Optional[float] = None
    source: Optional[str] = None
    assessment_authority: str
    occupation_mapped: str
    registration_fee_paid: Optional[bool] = None
    fee_status: Optional[FeeStatus] = None
    amount_paid: Optional[float] = None
    payment_due_date: Optional[date] = None
    assigned_staff_id: Optional[int] = None
    processing_staff_id: Optional[int] = None
    processing_status: Optional[MilestoneAction] = None
    completed_actions: list[CompletedActionResponse] = []
    created_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_client(cls, client: Client, show_payment: bool) -> "ClientResponse":
        """
        Build a response, hiding payment fields unless allowed.

        Args:
            client: Client entity
            show_payment: Whether the requester may see payment fields

        Returns:
            ClientResponse instance
        """
        response = cls.model_validate(client)
        if show_payment:
            return response
        return response.model_copy(update={name: None for name in PAYMENT_FIELDS})


class LeadCommentRequest(BaseModel):
    """Comment payload."""

    text: str


class LeadCommentResponse(BaseModel):
    """Lead comment as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    lead_id: int
    author_id: int
    text: str
    created_at: datetime


class BulkAssignRequest(BaseModel):
    """Bulk assignment payload."""

    lead_ids: list[int] = Field(min_length=1)
    staff_id: int


class BulkAssignResponse(BaseModel):
    """Bulk assignment outcome."""

    updated_count: int
    updated_lead_ids: list[int]
    unchanged_lead_ids: list[int]
    not_found_lead_ids: list[int]
    rejected_lead_ids: list[int]


class NormalizeAssignmentsResponse(BaseModel):
    """Normalization pass outcome."""

    repaired: int


class MilestoneRequest(BaseModel):
    """Milestone payload."""

    action: str

    model_config = ConfigDict(json_schema_extra={"example": {"action": "pending_payment_done"}})
