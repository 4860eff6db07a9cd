"""Dependency injection container."""

from typing import Optional

from leadflow.application.ports.client_repository import ClientRepository
from leadflow.application.ports.conversion_repository import ConversionRepository
from leadflow.application.ports.lead_comment_repository import LeadCommentRepository
from leadflow.application.ports.lead_repository import LeadRepository
from leadflow.application.ports.notification_emitter import NotificationEmitter
from leadflow.application.use_cases.client_record_store import ClientRecordStore
from leadflow.application.use_cases.conversion_service import ConversionService
from leadflow.application.use_cases.handoff_coordinator import HandoffCoordinator
from leadflow.application.use_cases.lead_record_store import LeadRecordStore
from leadflow.domain.value_objects.processing import ProcessingSlots
from leadflow.infrastructure.config.settings import settings
from leadflow.infrastructure.wiring.dependencies import (
    create_client_repository,
    create_conversion_repository,
    create_in_memory_store,
    create_lead_comment_repository,
    create_lead_repository,
    create_notification_emitter,
    create_processing_slots,
)


class Container:
    """Dependency injection container."""

    def __init__(
        self,
        lead_repository: LeadRepository,
        lead_comment_repository: LeadCommentRepository,
        client_repository: ClientRepository,
        conversion_repository: ConversionRepository,
        notification_emitter: NotificationEmitter,
        slots: ProcessingSlots,
        payment_due_days: int = 10,
        conversion_max_attempts: int = 2,
        default_country_code: str = "+91",
    ) -> None:
        """
        Initialize container with dependencies.

        Args:
            lead_repository: Repository holding leads
            lead_comment_repository: Repository holding lead comment threads
            client_repository: Repository holding clients
            conversion_repository: Transactional lead/client store
            notification_emitter: Notification emitter shared by the use cases
            slots: Processing operator slots
            payment_due_days: Days until a pending payment is due
            conversion_max_attempts: Conversion attempts before escalation
            default_country_code: Country code for new leads without one
        """
        self._notification_emitter = notification_emitter
        self._lead_record_store = LeadRecordStore(
            lead_repository,
            lead_comment_repository,
            notification_emitter,
            default_country_code=default_country_code,
        )
        self._conversion_service = ConversionService(
            conversion_repository, notification_emitter, slots, max_attempts=conversion_max_attempts
        )
        self._client_record_store = ClientRecordStore(
            client_repository, notification_emitter, slots, payment_due_days=payment_due_days
        )
        self._handoff_coordinator = HandoffCoordinator(client_repository, slots)

    @property
    def lead_record_store(self) -> LeadRecordStore:
        """Get lead record store."""
        return self._lead_record_store

    @property
    def conversion_service(self) -> ConversionService:
        """Get conversion service."""
        return self._conversion_service

    @property
    def client_record_store(self) -> ClientRecordStore:
        """Get client record store."""
        return self._client_record_store

    @property
    def handoff_coordinator(self) -> HandoffCoordinator:
        """Get handoff coordinator."""
        return self._handoff_coordinator

    @property
    def notification_emitter(self) -> NotificationEmitter:
        """Get notification emitter."""
        return self._notification_emitter


def create_container() -> Container:
    """
    Build a container from settings.

    Returns:
        Container wired for the configured backends
    """
    store = create_in_memory_store()
    return Container(
        lead_repository=create_lead_repository(store),
        lead_comment_repository=create_lead_comment_repository(store),
        client_repository=create_client_repository(store),
        conversion_repository=create_conversion_repository(store),
        notification_emitter=create_notification_emitter(),
        slots=create_processing_slots(),
        payment_due_days=settings.payment_due_days,
        conversion_max_attempts=settings.conversion_max_attempts,
        default_country_code=settings.default_country_code,
    )


_container: Optional[Container] = None


def get_container() -> Container:
    """
    Get the process-wide container, creating it on first use.

    Returns:
        Container instance
    """
    global _container
    if _container is None:
        _container = create_container()
    return _container


async def close_container() -> None:
    """Release the process-wide container's connections, if it was created."""
    global _container
    if _container is not None:
        await _container.notification_emitter.close()
        _container = None
