"""Dependency injection factory functions."""

from typing import Optional

from leadflow.adapters.outbound.client import InMemoryClientRepository, PostgresClientRepository
from leadflow.adapters.outbound.conversion import (
    InMemoryConversionRepository,
    PostgresConversionRepository,
)
from leadflow.adapters.outbound.lead import (
    InMemoryLeadCommentRepository,
    InMemoryLeadRepository,
    PostgresLeadCommentRepository,
    PostgresLeadRepository,
)
from leadflow.adapters.outbound.memory.store import InMemoryStore
from leadflow.adapters.outbound.notification import (
    InMemoryNotificationEmitter,
    NoOpNotificationEmitter,
    PostgresNotificationEmitter,
    RedisNotificationEmitter,
)
from leadflow.application.ports.client_repository import ClientRepository
from leadflow.application.ports.conversion_repository import ConversionRepository
from leadflow.application.ports.lead_comment_repository import LeadCommentRepository
from leadflow.application.ports.lead_repository import LeadRepository
from leadflow.application.ports.notification_emitter import NotificationEmitter
from leadflow.domain.value_objects.processing import ProcessingSlots
from leadflow.infrastructure.config.settings import settings


def _use_postgres() -> bool:
    if settings.storage_backend == "postgres":
        if not settings.database_url:
            raise ValueError("DATABASE_URL is required when STORAGE_BACKEND=postgres")
        return True
    return False


def create_in_memory_store() -> Optional[InMemoryStore]:
    """
    Factory function to create the shared in-memory store.

    Returns:
        InMemoryStore instance, or None when records live in Postgres
    """
    if _use_postgres():
        return None
    return InMemoryStore()


def create_lead_repository(store: Optional[InMemoryStore] = None) -> LeadRepository:
    """
    Factory function to create lead repository.

    Args:
        store: Shared in-memory store (in_memory backend only)

    Returns:
        LeadRepository instance
    """
    if _use_postgres():
        return PostgresLeadRepository()
    return InMemoryLeadRepository(store)


def create_lead_comment_repository(store: Optional[InMemoryStore] = None) -> LeadCommentRepository:
    """
    Factory function to create lead comment repository.

    Args:
        store: Shared in-memory store (in_memory backend only)

    Returns:
        LeadCommentRepository instance
    """
    if _use_postgres():
        return PostgresLeadCommentRepository()
    return InMemoryLeadCommentRepository(store)


def create_client_repository(store: Optional[InMemoryStore] = None) -> ClientRepository:
    """
    Factory function to create client repository.

    Args:
        store: Shared in-memory store (in_memory backend only)

    Returns:
        ClientRepository instance
    """
    if _use_postgres():
        return PostgresClientRepository()
    return InMemoryClientRepository(store)


def create_conversion_repository(store: Optional[InMemoryStore] = None) -> ConversionRepository:
    """
    Factory function to create conversion repository.

    The in-memory variant must share its store with the lead and client
    repositories, otherwise converted records are invisible to them.

    Args:
        store: Shared in-memory store (in_memory backend only)

    Returns:
        ConversionRepository instance
    """
    if _use_postgres():
        return PostgresConversionRepository()
    return InMemoryConversionRepository(store or InMemoryStore())


def create_notification_emitter() -> NotificationEmitter:
    """
    Factory function to create notification emitter.

    Returns:
        NotificationEmitter instance
    """
    if settings.notification_emitter == "noop":
        return NoOpNotificationEmitter()
    if settings.notification_emitter == "postgres":
        if not settings.database_url:
            raise ValueError("DATABASE_URL is required when NOTIFICATION_EMITTER=postgres")
        return PostgresNotificationEmitter()
    if settings.notification_emitter == "redis":
        if not settings.redis_url:
            raise ValueError("REDIS_URL is required when NOTIFICATION_EMITTER=redis")
        return RedisNotificationEmitter(
            settings.redis_url,
            settings.notification_ttl_seconds,
            max_entries=settings.notification_inbox_max_entries,
        )
    return InMemoryNotificationEmitter()


def create_processing_slots() -> ProcessingSlots:
    """
    Factory function to read the processing operator slots.

    Returns:
        ProcessingSlots instance
    """
    return ProcessingSlots(
        stage1_operator_id=settings.stage1_operator_id,
        stage2_operator_id=settings.stage2_operator_id,
    )
