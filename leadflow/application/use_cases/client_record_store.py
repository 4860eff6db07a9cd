"""Client record store use case (Stage 1)."""

from datetime import date, timedelta
from typing import Any, Optional

from leadflow.application.dtos.client import ClientPatch
from leadflow.application.dtos.filters import RecordFilter
from leadflow.application.dtos.notification import Notification, NotificationType
from leadflow.application.dtos.requester import Requester
from leadflow.application.ports.client_repository import ClientRepository
from leadflow.application.ports.notification_emitter import NotificationEmitter
from leadflow.application.use_cases.notify import notify_best_effort
from leadflow.domain.entities.client import Client, CompletedAction
from leadflow.domain.errors import Forbidden, NotFound, ValidationError
from leadflow.domain.policies.role_policy import (
    FieldGroup,
    can_delete_client,
    can_read_records,
    can_view_payment_data,
    can_write,
    client_field_group,
    ensure_can_write,
)
from leadflow.domain.value_objects.processing import FeeStatus, MilestoneAction, ProcessingSlots
from leadflow.infrastructure.logging.logger import log_event


class ClientRecordStore:
    """Use case for reading and updating clients, and handing them to Stage 2."""

    def __init__(
        self,
        client_repository: ClientRepository,
        notification_emitter: NotificationEmitter,
        slots: ProcessingSlots,
        payment_due_days: int = 10,
    ) -> None:
        """
        Initialize client record store.

        Args:
            client_repository: Repository holding clients
            notification_emitter: Emitter for handoff notifications
            slots: Processing operator slots
            payment_due_days: Days until a pending payment is due
        """
        self._client_repository = client_repository
        self._notification_emitter = notification_emitter
        self._slots = slots
        self._payment_due_days = payment_due_days

    def is_stage1_operator(self, client: Client, user_id: int) -> bool:
        """Check if a user operates Stage 1 for a client."""
        return client.assigned_staff_id == user_id or self._slots.is_stage1_operator(user_id)

    def is_stage2_operator(self, client: Client, user_id: int) -> bool:
        """Check if a user operates Stage 2 for a client."""
        return client.processing_staff_id == user_id or self._slots.is_stage2_operator(user_id)

    def can_view_payment_data(self, client: Client, requester: Requester) -> bool:
        """
        Decide whether payment fields of a client are shown to a requester.

        Args:
            client: Client being read
            requester: Authenticated user

        Returns:
            True if payment fields may be shown
        """
        is_operator = self.is_stage1_operator(client, requester.id) or self.is_stage2_operator(
            client, requester.id
        )
        return can_view_payment_data(requester.role, is_operator)

    async def get(self, client_id: int, requester: Requester) -> Client:
        """
        Get a client.

        Args:
            client_id: Client identifier
            requester: Authenticated user

        Returns:
            Client entity

        Raises:
            NotFound: If the client does not exist
        """
        if not can_read_records(requester.role):
            raise Forbidden(f"Role {requester.role.value} cannot read clients")
        client = await self._client_repository.get(client_id)
        if client is None:
            raise NotFound(f"Client {client_id} not found")
        return client

    async def list(self, record_filter: RecordFilter, requester: Requester) -> list[Client]:
        """
        List clients. Every staff role sees every client.

        Args:
            record_filter: Filter criteria (status matches fee status)
            requester: Authenticated user

        Returns:
            Matching clients
        """
        if not can_read_records(requester.role):
            raise Forbidden(f"Role {requester.role.value} cannot read clients")
        return await self._client_repository.list(record_filter)

    async def update(self, client_id: int, patch: ClientPatch, requester: Requester) -> Client:
        """
        Apply a patch to a client, all or nothing.

        Fee fields belong to the Stage 1 operator until the handoff; profile
        corrections are open to either operator.

        Args:
            client_id: Client identifier
            patch: Fields to change
            requester: Authenticated user

        Returns:
            Updated client

        Raises:
            NotFound: If the client does not exist
            Forbidden: If any field of the patch is not writable by the requester
        """
        changes = patch.changes()
        for name in ("name", "phone_number", "assessment_authority", "occupation_mapped"):
            if name in changes and changes[name] is None:
                raise ValidationError(f"{name} cannot be cleared")
        if "registration_fee_paid" in changes and changes["registration_fee_paid"] is None:
            raise ValidationError("registration_fee_paid cannot be cleared")
        if "amount_paid" in changes and changes["amount_paid"] is None:
            changes["amount_paid"] = 0.0

        def mutate(client: Client) -> Optional[Client]:
            stage1 = self.is_stage1_operator(client, requester.id)
            stage2 = self.is_stage2_operator(client, requester.id)
            ensure_can_write(
                requester.role,
                (
                    (name, group, _owns_group(group, client, stage1, stage2))
                    for name, group in ((name, client_field_group(name)) for name in changes)
                ),
            )
            if not changes:
                return None
            _apply_client_changes(client, changes, self._payment_due_days)
            client.touch()
            return client

        updated = await self._client_repository.update(client_id, mutate)
        if changes:
            log_event(
                component="clients",
                event="client_updated",
                client_id=client_id,
                requester_id=requester.id,
                fields=sorted(changes),
                fee_status=updated.fee_status.value if updated.fee_status else None,
            )
        return updated

    async def handoff_to_stage2(self, client_id: int, requester: Requester) -> Client:
        """
        Hand a client over to the Stage 2 operator.

        Repeating the handoff is a no-op that returns the client unchanged.

        Args:
            client_id: Client identifier
            requester: Stage 1 operator or admin

        Returns:
            Client after the handoff

        Raises:
            ValidationError: If no Stage 2 operator is configured
            Forbidden: If the requester is not the Stage 1 operator or an admin
        """
        stage2_operator_id = self._slots.stage2_operator_id
        if stage2_operator_id is None:
            raise ValidationError("No Stage 2 operator is configured")

        handed_off = False

        def mutate(client: Client) -> Optional[Client]:
            nonlocal handed_off
            is_stage1 = self.is_stage1_operator(client, requester.id)
            if not requester.role.is_admin and self.is_stage2_operator(client, requester.id) and not is_stage1:
                raise Forbidden("The Stage 2 operator cannot assign processing to themselves")
            if not can_write(requester.role, FieldGroup.PROCESSING_HANDOFF, is_stage1):
                raise Forbidden("Only the Stage 1 operator or an admin can hand a client over")
            if client.is_handed_off():
                return None

            client.processing_staff_id = stage2_operator_id
            client.record_action(
                CompletedAction.now(
                    MilestoneAction.ASSIGNED_TO_STAGE2,
                    completed_by=requester.id,
                    completed_by_name=requester.display_name,
                )
            )
            handed_off = True
            return client

        client = await self._client_repository.update(client_id, mutate)
        log_event(
            component="handoff",
            event="handed_off" if handed_off else "already_handed_off",
            client_id=client_id,
            requester_id=requester.id,
            processing_staff_id=client.processing_staff_id,
        )
        if handed_off:
            await notify_best_effort(
                self._notification_emitter,
                Notification(
                    type=NotificationType.CLIENT_HANDED_OFF,
                    user_id=stage2_operator_id,
                    client_id=client.id,
                    lead_id=client.lead_id,
                    message=f'Client "{client.name}" has been assigned to you for processing',
                    created_by=requester.id,
                ),
            )
        return client

    async def delete(self, client_id: int, requester: Requester) -> None:
        """
        Delete a client.

        Args:
            client_id: Client identifier
            requester: Authenticated user (admin only)

        Raises:
            Forbidden: If the requester is not an admin
            NotFound: If the client does not exist
        """
        if not can_delete_client(requester.role):
            raise Forbidden("Only admin can delete clients")
        if not await self._client_repository.delete(client_id):
            raise NotFound(f"Client {client_id} not found")
        log_event(component="clients", event="client_deleted", client_id=client_id, requester_id=requester.id)


def _owns_group(group: FieldGroup, client: Client, is_stage1: bool, is_stage2: bool) -> bool:
    if group is FieldGroup.FEE:
        return is_stage1 and not client.is_handed_off()
    return is_stage1 or is_stage2


def _apply_client_changes(client: Client, changes: dict[str, Any], payment_due_days: int) -> None:
    """Apply patch values and the payment due date rule."""
    for name, value in changes.items():
        setattr(client, name, value)

    if "fee_status" not in changes:
        return
    if client.fee_status is FeeStatus.PAYMENT_PENDING:
        if client.payment_due_date is None:
            client.payment_due_date = date.today() + timedelta(days=payment_due_days)
    else:
        client.payment_due_date = None
