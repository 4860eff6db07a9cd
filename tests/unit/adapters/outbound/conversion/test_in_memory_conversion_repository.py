"""Unit tests for the in-memory conversion repository."""

from unittest.mock import patch

import pytest

from leadflow.adapters.outbound.conversion.conversion_repository import InMemoryConversionRepository
from leadflow.adapters.outbound.memory.store import InMemoryStore
from leadflow.domain.entities.client import Client
from leadflow.domain.entities.lead import Lead
from leadflow.domain.errors import AlreadyConverted, ConsistencyFault, NotFound
from leadflow.domain.value_objects.lead_status import LeadStatus


@pytest.fixture
def memory_store():
    """Create store holding lead 1 owned by staff 7."""
    store = InMemoryStore()
    store.leads[1] = Lead(
        id=1, name="Ravi Kumar", phone_number="9000000002", assigned_staff_id=7, status=LeadStatus.PROSPECT
    )
    return store


@pytest.fixture
def repository(memory_store):
    """Create conversion repository over the store."""
    return InMemoryConversionRepository(memory_store)


def _build(lead: Lead) -> Client:
    return Client.from_lead(
        lead, assessment_authority="ACS", occupation_mapped="Software Engineer", registration_fee_paid=False
    )


@pytest.mark.asyncio
async def test_convert_writes_both_records(repository, memory_store):
    """Test that conversion stores the client and converts the lead."""
    lead, client = await repository.convert(1, _build)

    assert lead.status is LeadStatus.REGISTRATION_COMPLETED
    assert memory_store.leads[1].status is LeadStatus.REGISTRATION_COMPLETED
    assert memory_store.clients[client.id].lead_id == 1


@pytest.mark.asyncio
async def test_existing_client_blocks_conversion(repository):
    """Test that a lead already referenced by a client cannot convert again."""
    await repository.convert(1, _build)

    with pytest.raises(AlreadyConverted):
        await repository.convert(1, _build)


@pytest.mark.asyncio
async def test_missing_lead(repository):
    """Test that converting an unknown lead raises NotFound."""
    with pytest.raises(NotFound):
        await repository.convert(2, _build)


@pytest.mark.asyncio
async def test_failed_lead_write_removes_client(repository, memory_store):
    """Test that the client insert is compensated when the lead write fails."""
    with patch.object(repository, "_mark_converted", side_effect=RuntimeError("disk full")):
        with pytest.raises(ConsistencyFault):
            await repository.convert(1, _build)

    assert memory_store.clients == {}
    assert memory_store.leads[1].status is LeadStatus.PROSPECT
