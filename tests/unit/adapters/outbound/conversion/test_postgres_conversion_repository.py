"""Unit tests for Postgres conversion repository using SQLite in-memory."""

from unittest.mock import patch

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from leadflow.adapters.outbound.client.models import ClientModel
from leadflow.adapters.outbound.conversion.postgres_conversion_repository import (
    PostgresConversionRepository,
)
from leadflow.adapters.outbound.lead.models import Base, LeadModel
from leadflow.adapters.outbound.lead.postgres_lead_repository import apply_lead_to_model
from leadflow.domain.entities.client import Client
from leadflow.domain.entities.lead import Lead
from leadflow.domain.errors import AlreadyConverted, ConsistencyFault, Forbidden, NotFound
from leadflow.domain.value_objects.lead_status import LeadStatus


@pytest.fixture
def session_factory():
    """Create a session factory bound to a SQLite in-memory engine."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def repository(session_factory, monkeypatch):
    """Create conversion repository with SQLite in-memory database for testing."""
    monkeypatch.setattr(
        "leadflow.infrastructure.db.get_db_session",
        session_factory,
    )
    return PostgresConversionRepository()


@pytest.fixture
def lead_id(session_factory):
    """Insert a Prospect lead owned by staff 7 and return its id."""
    db = session_factory()
    model = apply_lead_to_model(
        Lead(name="Ravi Kumar", phone_number="9000000002", assigned_staff_id=7, status=LeadStatus.PROSPECT),
        LeadModel(),
    )
    db.add(model)
    db.commit()
    lead_id = model.id
    db.close()
    return lead_id


def _build(lead: Lead) -> Client:
    return Client.from_lead(
        lead, assessment_authority="ACS", occupation_mapped="Software Engineer", registration_fee_paid=True
    )


def _counts(session_factory) -> tuple[int, str]:
    db = session_factory()
    clients = db.query(ClientModel).count()
    status = db.query(LeadModel.status).first()[0]
    db.close()
    return clients, status


@pytest.mark.asyncio
async def test_convert_inserts_client_and_marks_lead(repository, lead_id, session_factory):
    """Test that one conversion writes both records."""
    lead, client = await repository.convert(lead_id, _build)

    assert lead.status is LeadStatus.REGISTRATION_COMPLETED
    assert client.id is not None
    assert client.lead_id == lead_id
    assert _counts(session_factory) == (1, "Registration Completed")


@pytest.mark.asyncio
async def test_convert_twice_raises_already_converted(repository, lead_id, session_factory):
    """Test that a second conversion of the same lead is refused."""
    await repository.convert(lead_id, _build)

    with pytest.raises(AlreadyConverted):
        await repository.convert(lead_id, _build)

    assert _counts(session_factory)[0] == 1


@pytest.mark.asyncio
async def test_convert_missing_lead_raises_not_found(repository):
    """Test that converting an unknown lead raises NotFound."""
    with pytest.raises(NotFound):
        await repository.convert(404, _build)


@pytest.mark.asyncio
async def test_build_error_aborts_without_writes(repository, lead_id, session_factory):
    """Test that an error raised while building the client writes nothing."""

    def refuse(lead):
        raise Forbidden("not yours")

    with pytest.raises(Forbidden):
        await repository.convert(lead_id, refuse)

    assert _counts(session_factory) == (0, "Prospect")


@pytest.mark.asyncio
async def test_failed_lead_write_rolls_back_client(repository, lead_id, session_factory):
    """Test that a failure after the client insert leaves neither record changed."""
    with patch.object(
        PostgresConversionRepository,
        "_mark_converted",
        side_effect=OperationalError("UPDATE leads", {}, Exception("connection lost")),
    ):
        with pytest.raises(ConsistencyFault):
            await repository.convert(lead_id, _build)

    assert _counts(session_factory) == (0, "Prospect")
