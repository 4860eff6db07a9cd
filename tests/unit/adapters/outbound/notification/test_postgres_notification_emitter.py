"""Unit tests for Postgres notification emitter using SQLite in-memory."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from leadflow.adapters.outbound.lead.models import Base
from leadflow.adapters.outbound.notification.models import NotificationModel
from leadflow.adapters.outbound.notification.notification_emitter import (
    InMemoryNotificationEmitter,
    NoOpNotificationEmitter,
)
from leadflow.adapters.outbound.notification.postgres_notification_emitter import (
    PostgresNotificationEmitter,
)
from leadflow.application.dtos.notification import Notification, NotificationType
from leadflow.domain.value_objects.role import Role


@pytest.fixture
def session_factory():
    """Create a session factory bound to a SQLite in-memory engine."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def emitter(session_factory, monkeypatch):
    """Create Postgres emitter with SQLite in-memory database for testing."""
    monkeypatch.setattr(
        "leadflow.infrastructure.db.get_db_session",
        session_factory,
    )
    return PostgresNotificationEmitter()


@pytest.mark.asyncio
async def test_emit_inserts_row(emitter, session_factory):
    """Test that a notification becomes an unread row."""
    await emitter.emit(
        Notification(
            type=NotificationType.CLIENT_REGISTERED,
            recipient_role=Role.PROCESSING,
            client_id=9,
            lead_id=1,
            created_by=7,
            message="New Registration: Ravi Kumar (Converted by Neha)",
        )
    )

    db = session_factory()
    rows = db.query(NotificationModel).all()
    assert len(rows) == 1
    assert rows[0].type == "client_registered"
    assert rows[0].recipient_role == "PROCESSING"
    assert rows[0].user_id is None
    assert rows[0].is_read is False
    db.close()


def test_notification_requires_recipient():
    """Test that a notification without user or role is refused."""
    with pytest.raises(ValueError):
        Notification(type=NotificationType.LEAD_ASSIGNED, message="nobody")


@pytest.mark.asyncio
async def test_in_memory_and_noop_emitters():
    """Test the in-memory outbox helpers and the no-op emitter."""
    in_memory = InMemoryNotificationEmitter()
    notification = Notification(type=NotificationType.LEAD_ASSIGNED, user_id=7, message="m")

    await in_memory.emit(notification)
    await NoOpNotificationEmitter().emit(notification)

    assert in_memory.for_user(7) == [notification]
    assert in_memory.for_role(Role.PROCESSING) == []
    assert in_memory.latest() == notification
