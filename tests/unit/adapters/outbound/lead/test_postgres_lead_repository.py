"""Unit tests for Postgres lead repository using SQLite in-memory."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from leadflow.adapters.outbound.lead.models import Base
from leadflow.adapters.outbound.lead.postgres_lead_repository import PostgresLeadRepository
from leadflow.application.dtos.filters import RecordFilter
from leadflow.domain.entities.lead import Lead
from leadflow.domain.errors import Forbidden, NotFound
from leadflow.domain.value_objects.lead_status import LeadPriority, LeadStatus


@pytest.fixture
def sqlite_engine():
    """Create SQLite in-memory engine for testing."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def repository(sqlite_engine, monkeypatch):
    """Create Postgres repository with SQLite in-memory database for testing."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=sqlite_engine)

    def get_test_db_session():
        return SessionLocal()

    monkeypatch.setattr(
        "leadflow.infrastructure.db.get_db_session",
        get_test_db_session,
    )

    return PostgresLeadRepository()


def _lead(**fields) -> Lead:
    values = {"name": "Asha Rao", "phone_number": "9000000001"}
    values.update(fields)
    return Lead(**values)


@pytest.mark.asyncio
async def test_add_and_get_round_trip(repository):
    """Test that an added lead gets an id and reads back with its enums."""
    stored = await repository.add(
        _lead(
            email="asha@example.com",
            assigned_staff_id=7,
            status=LeadStatus.PROSPECT,
            priority=LeadPriority.HOT,
            ielts_score=7.0,
        )
    )

    assert stored.id is not None
    lead = await repository.get(stored.id)
    assert lead.name == "Asha Rao"
    assert lead.status is LeadStatus.PROSPECT
    assert lead.priority is LeadPriority.HOT
    assert lead.ielts_score == 7.0
    assert lead.created_at.tzinfo is not None


@pytest.mark.asyncio
async def test_get_missing_returns_none(repository):
    """Test that an unknown id reads as None."""
    assert await repository.get(404) is None


@pytest.mark.asyncio
async def test_update_applies_mutation(repository):
    """Test that the mutation result is written back."""
    stored = await repository.add(_lead(assigned_staff_id=7, status=LeadStatus.ASSIGNED))

    def mutate(lead):
        lead.status = LeadStatus.FOLLOW_UP
        lead.comment = "Call on Monday"
        return lead

    updated = await repository.update(stored.id, mutate)

    assert updated.status is LeadStatus.FOLLOW_UP
    assert (await repository.get(stored.id)).comment == "Call on Monday"


@pytest.mark.asyncio
async def test_update_no_op_and_abort_leave_row_untouched(repository):
    """Test that a None result or a raised error writes nothing."""
    stored = await repository.add(_lead(assigned_staff_id=7, status=LeadStatus.ASSIGNED))

    def abort(lead):
        lead.comment = "never stored"
        raise Forbidden("nope")

    with pytest.raises(Forbidden):
        await repository.update(stored.id, abort)
    unchanged = await repository.update(stored.id, lambda lead: None)

    assert unchanged.comment is None
    assert (await repository.get(stored.id)).comment is None


@pytest.mark.asyncio
async def test_update_missing_raises_not_found(repository):
    """Test that updating an unknown id raises NotFound."""
    with pytest.raises(NotFound):
        await repository.update(404, lambda lead: lead)


@pytest.mark.asyncio
async def test_list_filters_and_search(repository):
    """Test status, assignee and search filters."""
    await repository.add(_lead(email="asha@example.com", assigned_staff_id=7, status=LeadStatus.ASSIGNED))
    await repository.add(_lead(name="Ravi", phone_number="9111111111", assigned_staff_id=8, status=LeadStatus.PROSPECT))

    assert len(await repository.list(RecordFilter())) == 2
    assert [lead.name for lead in await repository.list(RecordFilter(status="Prospect"))] == ["Ravi"]
    assert [lead.name for lead in await repository.list(RecordFilter(assigned_staff_id=7))] == ["Asha Rao"]
    assert [lead.name for lead in await repository.list(RecordFilter(search="EXAMPLE"))] == ["Asha Rao"]


@pytest.mark.asyncio
async def test_find_duplicate_by_phone_or_email(repository):
    """Test duplicate detection on phone number and email."""
    await repository.add(_lead(email="asha@example.com"))

    assert await repository.find_duplicate("9000000001", None) is not None
    assert await repository.find_duplicate("9999999999", "asha@example.com") is not None
    assert await repository.find_duplicate("9999999999", None) is None


@pytest.mark.asyncio
async def test_delete(repository):
    """Test that delete reports whether a row was removed."""
    stored = await repository.add(_lead())

    assert await repository.delete(stored.id) is True
    assert await repository.delete(stored.id) is False
    assert await repository.get(stored.id) is None


@pytest.mark.asyncio
async def test_normalize_assignments(repository):
    """Test that the normalization pass repairs inconsistent rows only."""
    broken = await repository.add(_lead(status=LeadStatus.PROSPECT))
    fine = await repository.add(_lead(phone_number="9000000002", assigned_staff_id=7, status=LeadStatus.ASSIGNED))
    converted = await repository.add(
        _lead(phone_number="9000000003", status=LeadStatus.REGISTRATION_COMPLETED)
    )

    assert await repository.normalize_assignments() == 1
    assert (await repository.get(broken.id)).status is LeadStatus.UNASSIGNED
    assert (await repository.get(fine.id)).status is LeadStatus.ASSIGNED
    assert (await repository.get(converted.id)).status is LeadStatus.REGISTRATION_COMPLETED
