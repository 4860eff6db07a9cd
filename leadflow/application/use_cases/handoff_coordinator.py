"""Stage 2 milestone use case."""

from typing import Optional

from leadflow.application.dtos.requester import Requester
from leadflow.application.ports.client_repository import ClientRepository
from leadflow.domain.entities.client import Client, CompletedAction
from leadflow.domain.errors import Forbidden, ValidationError
from leadflow.domain.policies.role_policy import FieldGroup, can_write
from leadflow.domain.value_objects.processing import FeeStatus, MilestoneAction, ProcessingSlots
from leadflow.infrastructure.logging.logger import log_milestone


class HandoffCoordinator:
    """Use case for recording Stage 2 processing milestones.

    Milestones are independent flags: any subset, in any order. Recording one
    that is already in the history is a silent no-op.
    """

    def __init__(self, client_repository: ClientRepository, slots: ProcessingSlots) -> None:
        """
        Initialize handoff coordinator.

        Args:
            client_repository: Repository holding clients
            slots: Processing operator slots
        """
        self._client_repository = client_repository
        self._slots = slots

    async def record_milestone(self, client_id: int, action_key: str, requester: Requester) -> Client:
        """
        Record a milestone in a client's history.

        Args:
            client_id: Client identifier
            action_key: Milestone key, e.g. 'pending_payment_done'
            requester: Stage 2 operator or admin

        Returns:
            Client after the operation (unchanged if already recorded)

        Raises:
            ValidationError: If the key is not a Stage 2 milestone
            NotFound: If the client does not exist
            Forbidden: If the requester is not the Stage 2 operator or an admin
        """
        action = _parse_action(action_key)
        recorded = False

        def mutate(client: Client) -> Optional[Client]:
            nonlocal recorded
            is_stage2 = client.processing_staff_id == requester.id or self._slots.is_stage2_operator(
                requester.id
            )
            if not can_write(requester.role, FieldGroup.MILESTONE, is_stage2):
                raise Forbidden("Only the Stage 2 operator or an admin can record milestones")

            entry = CompletedAction.now(
                action, completed_by=requester.id, completed_by_name=requester.display_name
            )
            if not client.record_action(entry):
                return None
            if action is MilestoneAction.PENDING_PAYMENT_DONE:
                client.fee_status = FeeStatus.FIRST_INSTALLMENT_COMPLETED
            recorded = True
            return client

        client = await self._client_repository.update(client_id, mutate)
        log_milestone(
            client_id=client_id,
            action=action.value,
            recorded=recorded,
            requester_id=requester.id,
            history_length=len(client.completed_actions),
        )
        return client


def _parse_action(action_key: str) -> MilestoneAction:
    try:
        action = MilestoneAction(action_key)
    except ValueError:
        action = None
    if action is None or not action.is_stage2_milestone:
        allowed = ", ".join(a.value for a in MilestoneAction if a.is_stage2_milestone)
        raise ValidationError(f"Unknown milestone {action_key!r}; expected one of: {allowed}")
    return action
