"""Unit tests for HandoffCoordinator."""

import asyncio
from datetime import datetime, timezone

import pytest

from leadflow.adapters.outbound.client.client_repository import InMemoryClientRepository
from leadflow.adapters.outbound.memory.store import InMemoryStore
from leadflow.application.dtos.requester import Requester
from leadflow.application.use_cases.handoff_coordinator import HandoffCoordinator
from leadflow.domain.entities.client import Client, CompletedAction
from leadflow.domain.errors import Forbidden, NotFound, ValidationError
from leadflow.domain.value_objects.processing import FeeStatus, MilestoneAction, ProcessingSlots
from leadflow.domain.value_objects.role import Role

ADMIN = Requester(id=1, role=Role.ADMIN, name="Admin")
STAGE2 = Requester(id=4, role=Role.PROCESSING, name="Priya")
OWNER_7 = Requester(id=7, role=Role.SALES_TEAM, name="Neha")

HANDED_OFF_AT = datetime(2026, 10, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def memory_store():
    """Create in-memory store holding client 9, already handed off to operator 4."""
    store = InMemoryStore()
    store.clients[9] = Client(
        id=9,
        lead_id=1,
        name="Ravi Kumar",
        phone_number="9000000002",
        assessment_authority="ACS",
        occupation_mapped="Software Engineer",
        registration_fee_paid=True,
        fee_status=FeeStatus.PAYMENT_PENDING,
        assigned_staff_id=7,
        processing_staff_id=4,
        completed_actions=[
            CompletedAction(
                action=MilestoneAction.ASSIGNED_TO_STAGE2,
                label=MilestoneAction.ASSIGNED_TO_STAGE2.label,
                completed_at=HANDED_OFF_AT,
                completed_by=7,
                completed_by_name="Neha",
            )
        ],
    )
    return store


@pytest.fixture
def client_repository(memory_store):
    """Create client repository over the store."""
    return InMemoryClientRepository(memory_store)


@pytest.fixture
def coordinator(client_repository):
    """Create handoff coordinator with operator 4 in the Stage 2 slot."""
    return HandoffCoordinator(client_repository, ProcessingSlots(stage1_operator_id=3, stage2_operator_id=4))


@pytest.mark.asyncio
async def test_pending_payment_done_updates_fee_status(coordinator):
    """Test that confirming the pending payment appends history and updates the fee status."""
    client = await coordinator.record_milestone(9, "pending_payment_done", STAGE2)

    assert client.fee_status is FeeStatus.FIRST_INSTALLMENT_COMPLETED
    assert [entry.action for entry in client.completed_actions] == [
        MilestoneAction.ASSIGNED_TO_STAGE2,
        MilestoneAction.PENDING_PAYMENT_DONE,
    ]
    entry = client.completed_actions[-1]
    assert entry.completed_by == 4
    assert entry.completed_by_name == "Priya"
    assert entry.label == "Confirm Pending Payment Done"
    assert client.processing_status is MilestoneAction.PENDING_PAYMENT_DONE


@pytest.mark.asyncio
async def test_repeated_milestone_is_a_no_op(coordinator):
    """Test that recording the same milestone twice changes nothing the second time."""
    first = await coordinator.record_milestone(9, "pending_payment_done", STAGE2)
    second = await coordinator.record_milestone(9, "pending_payment_done", ADMIN)

    assert len(second.completed_actions) == 2
    assert second.updated_at == first.updated_at
    assert second.completed_actions[-1].completed_by == 4


@pytest.mark.asyncio
async def test_history_is_append_only(coordinator):
    """Test that earlier history entries are never rewritten."""
    await coordinator.record_milestone(9, "service_agreement_submitted", STAGE2)
    client = await coordinator.record_milestone(9, "handed_over_downstream", STAGE2)

    assert client.completed_actions[0].completed_at == HANDED_OFF_AT
    assert client.completed_actions[0].completed_by == 7
    assert [entry.action for entry in client.completed_actions] == [
        MilestoneAction.ASSIGNED_TO_STAGE2,
        MilestoneAction.SERVICE_AGREEMENT_SUBMITTED,
        MilestoneAction.HANDED_OVER_DOWNSTREAM,
    ]


@pytest.mark.asyncio
async def test_milestones_do_not_touch_fee_status_except_payment(coordinator):
    """Test that only pending_payment_done changes the fee status."""
    client = await coordinator.record_milestone(9, "handed_over_downstream", STAGE2)

    assert client.fee_status is FeeStatus.PAYMENT_PENDING


@pytest.mark.asyncio
@pytest.mark.parametrize("action_key", ["assigned_to_stage2", "visa_lodged", ""])
async def test_unknown_or_internal_actions_are_rejected(coordinator, action_key):
    """Test that only Stage 2 milestone keys are accepted."""
    with pytest.raises(ValidationError):
        await coordinator.record_milestone(9, action_key, STAGE2)


@pytest.mark.asyncio
async def test_stage1_owner_cannot_record_milestones(coordinator, client_repository):
    """Test that the Stage 1 owner is not a Stage 2 operator."""
    with pytest.raises(Forbidden):
        await coordinator.record_milestone(9, "pending_payment_done", OWNER_7)

    assert len((await client_repository.get(9)).completed_actions) == 1


@pytest.mark.asyncio
async def test_admin_can_record_milestones(coordinator):
    """Test that an admin may record any milestone."""
    client = await coordinator.record_milestone(9, "handed_over_downstream", ADMIN)

    assert client.has_completed(MilestoneAction.HANDED_OVER_DOWNSTREAM) is True


@pytest.mark.asyncio
async def test_processing_staff_member_can_record_without_slot(client_repository):
    """Test that the client's processing staff member counts as Stage 2 operator."""
    coordinator = HandoffCoordinator(client_repository, ProcessingSlots())

    client = await coordinator.record_milestone(9, "handed_over_downstream", STAGE2)

    assert client.has_completed(MilestoneAction.HANDED_OVER_DOWNSTREAM) is True


@pytest.mark.asyncio
async def test_missing_client_raises_not_found(coordinator):
    """Test that recording on an unknown client raises NotFound."""
    with pytest.raises(NotFound):
        await coordinator.record_milestone(404, "handed_over_downstream", STAGE2)


@pytest.mark.asyncio
async def test_concurrent_milestones_keep_every_entry(coordinator, client_repository):
    """Test that milestones recorded at the same time are all kept in history."""
    results = await asyncio.gather(
        coordinator.record_milestone(9, "pending_payment_done", STAGE2),
        coordinator.record_milestone(9, "service_agreement_submitted", STAGE2),
        coordinator.record_milestone(9, "handed_over_downstream", ADMIN),
        coordinator.record_milestone(9, "pending_payment_done", STAGE2),
    )

    client = await client_repository.get(9)
    actions = [entry.action for entry in client.completed_actions]
    assert actions[0] is MilestoneAction.ASSIGNED_TO_STAGE2
    assert sorted(action.value for action in actions[1:]) == [
        "handed_over_downstream",
        "pending_payment_done",
        "service_agreement_submitted",
    ]
    assert client.fee_status is FeeStatus.FIRST_INSTALLMENT_COMPLETED
    assert len(client.completed_actions) == 4
    assert all(result.id == 9 for result in results)
