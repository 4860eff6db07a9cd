"""Lead workflow value objects."""

from enum import Enum


class LeadStatus(str, Enum):
    """Workflow status of a lead."""

    UNASSIGNED = "Unassigned"
    ASSIGNED = "Assigned"
    FOLLOW_UP = "Follow-up"
    PROSPECT = "Prospect"
    PENDING_LEAD = "Pending Lead"
    NOT_ELIGIBLE = "Not Eligible"
    NOT_INTERESTED = "Not Interested"
    REGISTRATION_COMPLETED = "Registration Completed"  # terminal

    @property
    def is_terminal(self) -> bool:
        """Check if the lead has been converted into a client."""
        return self is LeadStatus.REGISTRATION_COMPLETED


class LeadPriority(str, Enum):
    """Sales priority of a lead."""

    HOT = "hot"
    WARM = "warm"
    COLD = "cold"
    NOT_INTERESTED = "not interested"
    NOT_ELIGIBLE = "not eligible"


class FollowUpStatus(str, Enum):
    """Status of the scheduled follow-up."""

    PENDING = "Pending"
    COMPLETED = "Completed"
    SKIPPED = "Skipped"
