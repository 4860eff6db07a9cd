"""Lead entity."""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional

from leadflow.domain.value_objects.lead_status import FollowUpStatus, LeadPriority, LeadStatus

# Contact and profile fields copied onto the client when a lead converts
CARRIED_OVER_FIELDS = (
    "name",
    "phone_number",
    "phone_country_code",
    "secondary_phone_number",
    "secondary_phone_country_code",
    "whatsapp_number",
    "whatsapp_country_code",
    "email",
    "age",
    "occupation",
    "qualification",
    "year_of_experience",
    "target_country",
    "residing_country",
    "program",
    "ielts_score",
    "source",
)


@dataclass
class Lead:
    """Sales prospect prior to registration completion."""

    name: str
    phone_number: str
    id: Optional[int] = None
    phone_country_code: str = "+91"
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
    # Workflow fields
    status: LeadStatus = LeadStatus.UNASSIGNED
    priority: Optional[LeadPriority] = None
    assigned_staff_id: Optional[int] = None
    follow_up_date: Optional[date] = None
    follow_up_status: FollowUpStatus = FollowUpStatus.PENDING
    comment: Optional[str] = None
    created_by: Optional[int] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def touch(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = datetime.now(timezone.utc)

    def is_converted(self) -> bool:
        """Check if the lead reached its terminal status."""
        return self.status.is_terminal

    def is_owned_by(self, user_id: int) -> bool:
        """
        Check if a user is the assigned owner of this lead.

        Args:
            user_id: User identifier

        Returns:
            True if the lead is assigned to the user
        """
        return self.assigned_staff_id is not None and self.assigned_staff_id == user_id

    def normalize_assignment(self) -> bool:
        """
        Bring status in line with the assignment.

        An unassigned lead is always Unassigned; an assigned lead is never
        Unassigned. Converted leads are archival and left untouched.

        Returns:
            True if the status was changed
        """
        if self.is_converted():
            return False
        if self.assigned_staff_id is None and self.status is not LeadStatus.UNASSIGNED:
            self.status = LeadStatus.UNASSIGNED
            return True
        if self.assigned_staff_id is not None and self.status is LeadStatus.UNASSIGNED:
            self.status = LeadStatus.ASSIGNED
            return True
        return False

    def mark_registration_completed(self) -> None:
        """Move the lead to its terminal status."""
        self.status = LeadStatus.REGISTRATION_COMPLETED
        self.touch()
