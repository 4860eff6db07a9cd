"""Unit tests for dependency wiring."""

from unittest.mock import AsyncMock

import pytest

from leadflow.adapters.outbound.client.client_repository import InMemoryClientRepository
from leadflow.adapters.outbound.client.postgres_client_repository import PostgresClientRepository
from leadflow.adapters.outbound.lead.comment_repository import InMemoryLeadCommentRepository
from leadflow.adapters.outbound.lead.lead_repository import InMemoryLeadRepository
from leadflow.adapters.outbound.lead.postgres_comment_repository import PostgresLeadCommentRepository
from leadflow.adapters.outbound.lead.postgres_lead_repository import PostgresLeadRepository
from leadflow.adapters.outbound.notification.notification_emitter import (
    InMemoryNotificationEmitter,
    NoOpNotificationEmitter,
)
from leadflow.adapters.outbound.notification.redis_notification_emitter import RedisNotificationEmitter
from leadflow.infrastructure.config.settings import settings
from leadflow.infrastructure.wiring import dependencies
from leadflow.infrastructure.wiring import container as container_module
from leadflow.infrastructure.wiring.container import close_container, create_container


def test_in_memory_backend_shares_one_store(monkeypatch):
    """Test that in-memory repositories share a single store."""
    monkeypatch.setattr(settings, "storage_backend", "in_memory")

    store = dependencies.create_in_memory_store()
    lead_repository = dependencies.create_lead_repository(store)
    client_repository = dependencies.create_client_repository(store)
    comment_repository = dependencies.create_lead_comment_repository(store)

    assert isinstance(lead_repository, InMemoryLeadRepository)
    assert isinstance(client_repository, InMemoryClientRepository)
    assert lead_repository._store is store
    assert client_repository._store is store
    assert isinstance(comment_repository, InMemoryLeadCommentRepository)
    assert comment_repository._store is store


def test_postgres_backend_requires_database_url(monkeypatch):
    """Test that the postgres backend refuses to start without DATABASE_URL."""
    monkeypatch.setattr(settings, "storage_backend", "postgres")
    monkeypatch.setattr(settings, "database_url", "")

    with pytest.raises(ValueError):
        dependencies.create_lead_repository()


def test_postgres_backend(monkeypatch):
    """Test that the postgres backend selects SQL repositories."""
    monkeypatch.setattr(settings, "storage_backend", "postgres")
    monkeypatch.setattr(settings, "database_url", "postgresql://localhost/leadflow")

    assert dependencies.create_in_memory_store() is None
    assert isinstance(dependencies.create_lead_repository(), PostgresLeadRepository)
    assert isinstance(dependencies.create_client_repository(), PostgresClientRepository)
    assert isinstance(dependencies.create_lead_comment_repository(), PostgresLeadCommentRepository)


@pytest.mark.parametrize(
    ("backend", "expected"),
    [
        ("in_memory", InMemoryNotificationEmitter),
        ("noop", NoOpNotificationEmitter),
        ("redis", RedisNotificationEmitter),
    ],
)
def test_notification_emitter_selection(monkeypatch, backend, expected):
    """Test notification emitter selection from settings."""
    monkeypatch.setattr(settings, "notification_emitter", backend)

    assert isinstance(dependencies.create_notification_emitter(), expected)


def test_processing_slots_from_settings(monkeypatch):
    """Test that the operator slots are read from settings."""
    monkeypatch.setattr(settings, "stage1_operator_id", 3)
    monkeypatch.setattr(settings, "stage2_operator_id", 4)

    slots = dependencies.create_processing_slots()

    assert slots.is_stage1_operator(3) is True
    assert slots.is_stage2_operator(4) is True
    assert slots.is_stage2_operator(3) is False


def test_create_container(monkeypatch):
    """Test that the container wires every use case."""
    monkeypatch.setattr(settings, "storage_backend", "in_memory")
    monkeypatch.setattr(settings, "notification_emitter", "in_memory")

    container = create_container()

    assert container.lead_record_store is not None
    assert container.conversion_service is not None
    assert container.client_record_store is not None
    assert container.handoff_coordinator is not None
    assert isinstance(container.notification_emitter, InMemoryNotificationEmitter)


def test_redis_emitter_gets_inbox_cap_from_settings(monkeypatch):
    """Test that the Redis emitter is built with the configured inbox cap."""
    monkeypatch.setattr(settings, "notification_emitter", "redis")
    monkeypatch.setattr(settings, "notification_inbox_max_entries", 50)

    emitter = dependencies.create_notification_emitter()

    assert emitter._max_entries == 50


@pytest.mark.asyncio
async def test_close_container_closes_emitter(monkeypatch):
    """Test that shutdown closes the emitter of the process-wide container."""
    monkeypatch.setattr(settings, "storage_backend", "in_memory")
    monkeypatch.setattr(settings, "notification_emitter", "in_memory")
    monkeypatch.setattr(container_module, "_container", None)

    container = container_module.get_container()
    container.notification_emitter.close = AsyncMock()
    emitter = container.notification_emitter

    await close_container()

    emitter.close.assert_awaited_once()
    assert container_module._container is None


@pytest.mark.asyncio
async def test_close_container_without_container_is_a_no_op(monkeypatch):
    """Test that shutdown before any request does not build a container."""
    monkeypatch.setattr(container_module, "_container", None)

    await close_container()

    assert container_module._container is None
