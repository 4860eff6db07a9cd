"""Client processing value objects."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class FeeStatus(str, Enum):
    """Payment state of a client."""

    PAYMENT_PENDING = "Payment Pending"
    FIRST_INSTALLMENT_COMPLETED = "1st Installment Completed"
    PTE_FEE_PAID = "PTE Fee Paid"


class MilestoneAction(str, Enum):
    """Processing actions recorded in a client's history."""

    ASSIGNED_TO_STAGE2 = "assigned_to_stage2"  # written by handoff only
    HANDED_OVER_DOWNSTREAM = "handed_over_downstream"
    PENDING_PAYMENT_DONE = "pending_payment_done"
    SERVICE_AGREEMENT_SUBMITTED = "service_agreement_submitted"

    @property
    def label(self) -> str:
        """Human readable label."""
        return _LABELS[self]

    @property
    def is_stage2_milestone(self) -> bool:
        """Check if Stage 2 operators may record this action directly."""
        return self is not MilestoneAction.ASSIGNED_TO_STAGE2


_LABELS = {
    MilestoneAction.ASSIGNED_TO_STAGE2: "Assigned to Stage 2",
    MilestoneAction.HANDED_OVER_DOWNSTREAM: "Handed Over to Downstream Office",
    MilestoneAction.PENDING_PAYMENT_DONE: "Confirm Pending Payment Done",
    MilestoneAction.SERVICE_AGREEMENT_SUBMITTED: "Service Agreement Submitted",
}


@dataclass(frozen=True)
class ProcessingSlots:
    """Users occupying the two processing operator slots."""

    stage1_operator_id: Optional[int] = None
    stage2_operator_id: Optional[int] = None

    def is_stage1_operator(self, user_id: int) -> bool:
        """Check if the user holds the Stage 1 slot."""
        return self.stage1_operator_id is not None and self.stage1_operator_id == user_id

    def is_stage2_operator(self, user_id: int) -> bool:
        """Check if the user holds the Stage 2 slot."""
        return self.stage2_operator_id is not None and self.stage2_operator_id == user_id
