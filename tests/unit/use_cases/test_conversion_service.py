"""Unit tests for ConversionService."""

from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio

from leadflow.adapters.outbound.client.client_repository import InMemoryClientRepository
from leadflow.adapters.outbound.conversion.conversion_repository import InMemoryConversionRepository
from leadflow.adapters.outbound.lead.lead_repository import InMemoryLeadRepository
from leadflow.adapters.outbound.memory.store import InMemoryStore
from leadflow.adapters.outbound.notification.notification_emitter import InMemoryNotificationEmitter
from leadflow.application.dtos.client import RegistrationDetails
from leadflow.application.dtos.filters import RecordFilter
from leadflow.application.dtos.notification import NotificationType
from leadflow.application.dtos.requester import Requester
from leadflow.application.use_cases.conversion_service import ConversionService
from leadflow.domain.entities.lead import Lead
from leadflow.domain.errors import AlreadyConverted, ConsistencyFault, Forbidden, NotFound, ValidationError
from leadflow.domain.value_objects.lead_status import LeadStatus
from leadflow.domain.value_objects.processing import ProcessingSlots
from leadflow.domain.value_objects.role import Role

ADMIN = Requester(id=1, role=Role.ADMIN, name="Admin")
STAFF_7 = Requester(id=7, role=Role.SALES_TEAM, name="Neha")
STAFF_8 = Requester(id=8, role=Role.SALES_TEAM, name="Arjun")

DETAILS = RegistrationDetails(
    assessment_authority="ACS",
    occupation_mapped="Software Engineer",
    registration_fee_paid=True,
)


@pytest.fixture
def memory_store():
    """Create the shared in-memory store."""
    return InMemoryStore()


@pytest.fixture
def lead_repository(memory_store):
    """Create lead repository over the shared store."""
    return InMemoryLeadRepository(memory_store)


@pytest.fixture
def client_repository(memory_store):
    """Create client repository over the shared store."""
    return InMemoryClientRepository(memory_store)


@pytest.fixture
def conversion_repository(memory_store):
    """Create conversion repository over the shared store."""
    return InMemoryConversionRepository(memory_store)


@pytest.fixture
def emitter():
    """Create in-memory notification emitter."""
    return InMemoryNotificationEmitter()


@pytest.fixture
def service(conversion_repository, emitter):
    """Create conversion service with a Stage 1 operator slot."""
    return ConversionService(
        conversion_repository, emitter, ProcessingSlots(stage1_operator_id=3, stage2_operator_id=4)
    )


@pytest_asyncio.fixture
async def lead(lead_repository):
    """Store Lead 1, assigned to staff 7 in Prospect."""
    return await lead_repository.add(
        Lead(
            name="Ravi Kumar",
            phone_number="9000000002",
            email="ravi@example.com",
            occupation="Developer",
            assigned_staff_id=7,
            status=LeadStatus.PROSPECT,
        )
    )


@pytest.mark.asyncio
async def test_owner_completes_registration(service, lead, lead_repository, client_repository, emitter):
    """Test that staff 7 converts Lead 1 into a client and notifies processing."""
    client = await service.complete_registration(lead.id, DETAILS, STAFF_7)

    assert client.id is not None
    assert client.lead_id == lead.id
    assert client.assigned_staff_id == 7
    assert client.email == "ravi@example.com"
    assert client.assessment_authority == "ACS"
    assert client.registration_fee_paid is True
    assert client.completed_actions == []
    assert client.processing_staff_id is None

    stored_lead = await lead_repository.get(lead.id)
    assert stored_lead.status is LeadStatus.REGISTRATION_COMPLETED
    assert (await client_repository.get(client.id)).lead_id == lead.id

    role_notifications = emitter.for_role(Role.PROCESSING)
    assert len(role_notifications) == 1
    assert role_notifications[0].type is NotificationType.CLIENT_REGISTERED
    assert role_notifications[0].message == "New Registration: Ravi Kumar (Converted by Neha)"
    assert [n.client_id for n in emitter.for_user(3)] == [client.id]


@pytest.mark.asyncio
async def test_second_conversion_raises_already_converted(service, lead, client_repository):
    """Test that a lead can only produce one client."""
    await service.complete_registration(lead.id, DETAILS, STAFF_7)

    with pytest.raises(AlreadyConverted):
        await service.complete_registration(lead.id, DETAILS, STAFF_7)

    assert len(await client_repository.list(RecordFilter())) == 1


@pytest.mark.asyncio
async def test_missing_fields_are_rejected(service, lead, lead_repository):
    """Test that all three registration fields are required."""
    details = RegistrationDetails(assessment_authority="ACS", occupation_mapped=" ")

    with pytest.raises(ValidationError) as exc_info:
        await service.complete_registration(lead.id, details, STAFF_7)

    assert "occupation_mapped" in str(exc_info.value)
    assert "registration_fee_paid" in str(exc_info.value)
    assert (await lead_repository.get(lead.id)).status is LeadStatus.PROSPECT


def test_registration_fee_paid_accepts_yes_no():
    """Test that the Yes/No form answer is accepted."""
    assert RegistrationDetails(registration_fee_paid="Yes").registration_fee_paid is True
    assert RegistrationDetails(registration_fee_paid="no").registration_fee_paid is False
    assert RegistrationDetails(registration_fee_paid="").registration_fee_paid is None


@pytest.mark.asyncio
async def test_non_owner_cannot_convert(service, lead, client_repository):
    """Test that only the owner or an admin may convert a lead."""
    with pytest.raises(Forbidden):
        await service.complete_registration(lead.id, DETAILS, STAFF_8)

    assert await client_repository.list(RecordFilter()) == []


@pytest.mark.asyncio
async def test_admin_can_convert_any_lead(service, lead):
    """Test that an admin converts a lead they do not own."""
    client = await service.complete_registration(lead.id, DETAILS, ADMIN)

    assert client.assigned_staff_id == 7
    assert client.created_by == ADMIN.id


@pytest.mark.asyncio
async def test_missing_lead_raises_not_found(service):
    """Test that converting an unknown lead raises NotFound."""
    with pytest.raises(NotFound):
        await service.complete_registration(404, DETAILS, ADMIN)


@pytest.mark.asyncio
async def test_consistency_fault_is_retried(service, lead, conversion_repository):
    """Test that one failed transaction is retried and then succeeds."""
    original = conversion_repository._mark_converted
    calls = {"count": 0}

    def flaky(current):
        calls["count"] += 1
        if calls["count"] == 1:
            raise RuntimeError("lead write failed")
        return original(current)

    with patch.object(conversion_repository, "_mark_converted", side_effect=flaky):
        client = await service.complete_registration(lead.id, DETAILS, STAFF_7)

    assert calls["count"] == 2
    assert client.lead_id == lead.id


@pytest.mark.asyncio
async def test_consistency_fault_escalates_and_leaves_no_client(
    service, lead, conversion_repository, lead_repository, client_repository, emitter
):
    """Test that exhausting retries raises ConsistencyFault and rolls back the client."""
    with patch.object(
        conversion_repository, "_mark_converted", side_effect=RuntimeError("lead write failed")
    ), patch(
        "leadflow.application.use_cases.conversion_service.log_consistency_fault"
    ) as mock_log:
        with pytest.raises(ConsistencyFault):
            await service.complete_registration(lead.id, DETAILS, STAFF_7)

    assert await client_repository.list(RecordFilter()) == []
    assert (await lead_repository.get(lead.id)).status is LeadStatus.PROSPECT
    assert emitter.emitted == []
    assert mock_log.call_count == 2
    assert mock_log.call_args_list[-1].kwargs["final"] is True


@pytest.mark.asyncio
async def test_notification_failure_keeps_conversion(conversion_repository, lead, client_repository):
    """Test that a failing emitter does not undo a committed conversion."""
    emitter = AsyncMock()
    emitter.emit.side_effect = RuntimeError("inbox down")
    service = ConversionService(conversion_repository, emitter, ProcessingSlots())

    client = await service.complete_registration(lead.id, DETAILS, STAFF_7)

    assert await client_repository.get(client.id) is not None
