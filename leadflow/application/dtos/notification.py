"""Notification DTOs."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import Field, model_validator

from leadflow.application.dtos.base import DTO
from leadflow.domain.value_objects.role import Role


class NotificationType(str, Enum):
    """Kind of event a notification reports."""

    LEAD_ASSIGNED = "lead_assigned"
    CLIENT_REGISTERED = "client_registered"
    CLIENT_HANDED_OFF = "client_handed_off"


class Notification(DTO):
    """Notification for a user or for every holder of a role."""

    type: NotificationType
    message: str
    user_id: Optional[int] = None
    recipient_role: Optional[Role] = None
    lead_id: Optional[int] = None
    client_id: Optional[int] = None
    created_by: Optional[int] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @model_validator(mode="after")
    def _require_recipient(self) -> "Notification":
        """A notification is addressed to a user, a role, or both."""
        if self.user_id is None and self.recipient_role is None:
            raise ValueError("Notification needs a user_id or a recipient_role")
        return self
