"""Lead-to-client conversion use case."""

from leadflow.application.dtos.client import RegistrationDetails
from leadflow.application.dtos.notification import Notification, NotificationType
from leadflow.application.dtos.requester import Requester
from leadflow.application.ports.conversion_repository import ConversionRepository
from leadflow.application.ports.notification_emitter import NotificationEmitter
from leadflow.application.use_cases.notify import notify_best_effort
from leadflow.domain.entities.client import Client
from leadflow.domain.entities.lead import Lead
from leadflow.domain.errors import AlreadyConverted, ConsistencyFault, Forbidden, ValidationError
from leadflow.domain.policies.role_policy import FieldGroup, can_write
from leadflow.domain.value_objects.processing import ProcessingSlots
from leadflow.domain.value_objects.role import Role
from leadflow.infrastructure.logging.logger import log_consistency_fault, log_conversion


class ConversionService:
    """Use case for completing a lead's registration."""

    def __init__(
        self,
        conversion_repository: ConversionRepository,
        notification_emitter: NotificationEmitter,
        slots: ProcessingSlots,
        max_attempts: int = 2,
    ) -> None:
        """
        Initialize conversion service.

        Args:
            conversion_repository: Transactional lead/client store
            notification_emitter: Emitter for the processing team notification
            slots: Processing operator slots
            max_attempts: Whole-transaction attempts before a consistency fault escalates
        """
        self._conversion_repository = conversion_repository
        self._notification_emitter = notification_emitter
        self._slots = slots
        self._max_attempts = max(1, max_attempts)

    async def complete_registration(
        self, lead_id: int, details: RegistrationDetails, requester: Requester
    ) -> Client:
        """
        Convert a lead into a client.

        The client insert and the lead's move to Registration Completed happen
        in one transaction. Notification happens afterwards and never undoes it.

        Args:
            lead_id: Lead identifier
            details: assessment_authority, occupation_mapped, registration_fee_paid
            requester: Authenticated user

        Returns:
            Created client

        Raises:
            ValidationError: If a registration field is missing
            NotFound: If the lead does not exist
            Forbidden: If the requester is neither admin nor the lead owner
            AlreadyConverted: If the lead was converted before
            ConsistencyFault: If every attempt failed midway
        """
        missing = details.missing_fields()
        if missing:
            raise ValidationError(f"Missing registration fields: {', '.join(missing)}")

        def build_client(lead: Lead) -> Client:
            if lead.is_converted():
                raise AlreadyConverted(f"Lead {lead.id} has already been converted")
            if not can_write(requester.role, FieldGroup.WORKFLOW, lead.is_owned_by(requester.id)):
                raise Forbidden("You can only convert leads assigned to you")
            return Client.from_lead(
                lead,
                assessment_authority=details.assessment_authority.strip(),
                occupation_mapped=details.occupation_mapped.strip(),
                registration_fee_paid=details.registration_fee_paid,
                created_by=requester.id,
            )

        attempt = 1
        while True:
            try:
                _, client = await self._conversion_repository.convert(lead_id, build_client)
                break
            except ConsistencyFault as fault:
                final = attempt >= self._max_attempts
                log_consistency_fault(
                    lead_id=lead_id,
                    attempt=attempt,
                    error=str(fault),
                    final=final,
                    requester_id=requester.id,
                )
                if final:
                    raise
                attempt += 1

        log_conversion(
            lead_id=lead_id,
            client_id=client.id,
            requester_id=requester.id,
            assigned_staff_id=client.assigned_staff_id,
            attempts=attempt,
        )
        await self._notify_processing_team(client, requester)
        return client

    async def _notify_processing_team(self, client: Client, requester: Requester) -> None:
        message = f"New Registration: {client.name} (Converted by {requester.display_name})"
        await notify_best_effort(
            self._notification_emitter,
            Notification(
                type=NotificationType.CLIENT_REGISTERED,
                recipient_role=Role.PROCESSING,
                client_id=client.id,
                lead_id=client.lead_id,
                message=message,
                created_by=requester.id,
            ),
        )
        stage1 = self._slots.stage1_operator_id
        if stage1 is not None and stage1 != requester.id:
            await notify_best_effort(
                self._notification_emitter,
                Notification(
                    type=NotificationType.CLIENT_REGISTERED,
                    user_id=stage1,
                    client_id=client.id,
                    lead_id=client.lead_id,
                    message=message,
                    created_by=requester.id,
                ),
            )
