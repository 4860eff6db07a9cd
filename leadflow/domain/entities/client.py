"""Client entity and its completed action history."""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional

from leadflow.domain.entities.lead import CARRIED_OVER_FIELDS, Lead
from leadflow.domain.value_objects.processing import FeeStatus, MilestoneAction


@dataclass(frozen=True)
class CompletedAction:
    """One entry of a client's processing history."""

    action: MilestoneAction
    label: str
    completed_at: datetime
    completed_by: int
    completed_by_name: Optional[str] = None

    @classmethod
    def now(
        cls, action: MilestoneAction, completed_by: int, completed_by_name: Optional[str]
    ) -> "CompletedAction":
        """Create an entry stamped with the current time."""
        return cls(
            action=action,
            label=action.label,
            completed_at=datetime.now(timezone.utc),
            completed_by=completed_by,
            completed_by_name=completed_by_name,
        )


@dataclass
class Client:
    """Converted lead tracked through fee collection and processing."""

    name: str
    phone_number: str
    assessment_authority: str
    occupation_mapped: str
    registration_fee_paid: bool
    id: Optional[int] = None
    lead_id: Optional[int] = None  # historical pointer, survives lead deletion
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
    # Fee fields
    fee_status: Optional[FeeStatus] = None
    amount_paid: float = 0.0
    payment_due_date: Optional[date] = None
    # Processing fields
    assigned_staff_id: Optional[int] = None  # Stage 1 operator
    processing_staff_id: Optional[int] = None  # Stage 2 operator
    completed_actions: list[CompletedAction] = field(default_factory=list)
    created_by: Optional[int] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_lead(
        cls,
        lead: Lead,
        assessment_authority: str,
        occupation_mapped: str,
        registration_fee_paid: bool,
        created_by: Optional[int] = None,
    ) -> "Client":
        """
        Build a client carrying over every contact and profile field of a lead.

        Args:
            lead: Source lead
            assessment_authority: Registration field
            occupation_mapped: Registration field
            registration_fee_paid: Registration field
            created_by: User performing the conversion

        Returns:
            New, unsaved client
        """
        carried = {name: getattr(lead, name) for name in CARRIED_OVER_FIELDS}
        return cls(
            **carried,
            assessment_authority=assessment_authority,
            occupation_mapped=occupation_mapped,
            registration_fee_paid=registration_fee_paid,
            lead_id=lead.id,
            assigned_staff_id=lead.assigned_staff_id,
            created_by=created_by,
        )

    @property
    def processing_status(self) -> Optional[MilestoneAction]:
        """
        Most recently completed action, for display only.

        This is a projection of completed_actions and is not authoritative;
        use has_completed() to decide whether an action is done.
        """
        if not self.completed_actions:
            return None
        return self.completed_actions[-1].action

    def touch(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = datetime.now(timezone.utc)

    def has_completed(self, action: MilestoneAction) -> bool:
        """Check the history for an action."""
        return any(entry.action == action for entry in self.completed_actions)

    def is_handed_off(self) -> bool:
        """Check if a Stage 2 operator has been assigned."""
        return self.processing_staff_id is not None

    def record_action(self, entry: CompletedAction) -> bool:
        """
        Append an action to the history unless it is already there.

        Args:
            entry: Completed action

        Returns:
            True if the entry was appended
        """
        if self.has_completed(entry.action):
            return False
        self.completed_actions.append(entry)
        self.touch()
        return True
