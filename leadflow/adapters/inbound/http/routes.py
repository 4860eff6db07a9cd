"""HTTP routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, status

from leadflow.adapters.inbound.http.schemas import (
    BulkAssignRequest,
    BulkAssignResponse,
    ClientResponse,
    LeadCommentRequest,
    LeadCommentResponse,
    LeadResponse,
    MilestoneRequest,
    NormalizeAssignmentsResponse,
)
from leadflow.application.dtos.client import ClientPatch, RegistrationDetails
from leadflow.application.dtos.filters import RecordFilter
from leadflow.application.dtos.lead import LeadCreate, LeadPatch
from leadflow.application.dtos.requester import Requester
from leadflow.domain.entities.client import Client
from leadflow.domain.value_objects.role import Role
from leadflow.infrastructure.wiring.container import Container, get_container

router = APIRouter()


def get_requester(
    x_user_id: int = Header(...),
    x_user_role: Role = Header(...),
    x_user_name: Optional[str] = Header(None),
    x_user_email: Optional[str] = Header(None),
) -> Requester:
    """
    Build the requester from headers set by the authenticating gateway.

    Returns:
        Requester DTO
    """
    return Requester(id=x_user_id, role=x_user_role, name=x_user_name, email=x_user_email)


def _client_response(container: Container, client: Client, requester: Requester) -> ClientResponse:
    show_payment = container.client_record_store.can_view_payment_data(client, requester)
    return ClientResponse.from_client(client, show_payment)


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> dict[str, str]:
    """
    Health check endpoint for liveness/readiness.

    Returns:
        Health status
    """
    return {"status": "ok"}


@router.post("/leads", status_code=status.HTTP_201_CREATED, response_model=LeadResponse)
async def create_lead(
    fields: LeadCreate,
    requester: Requester = Depends(get_requester),
    container: Container = Depends(get_container),
) -> LeadResponse:
    """Create a lead."""
    lead = await container.lead_record_store.create(fields, requester)
    return LeadResponse.model_validate(lead)


@router.get("/leads", response_model=list[LeadResponse])
async def list_leads(
    status_filter: Optional[str] = Query(None, alias="status"),
    assigned_staff_id: Optional[int] = None,
    search: Optional[str] = None,
    requester: Requester = Depends(get_requester),
    container: Container = Depends(get_container),
) -> list[LeadResponse]:
    """
    List leads visible to the requester.

    Args:
        status_filter: Lead status (query parameter `status`)
        assigned_staff_id: Assignee filter (admins only; ignored for others)
        search: Substring of name, phone or email
    """
    record_filter = RecordFilter(
        status=status_filter, assigned_staff_id=assigned_staff_id, search=search
    )
    leads = await container.lead_record_store.list(record_filter, requester)
    return [LeadResponse.model_validate(lead) for lead in leads]


@router.post("/leads/bulk-assign", response_model=BulkAssignResponse)
async def bulk_assign_leads(
    request: BulkAssignRequest,
    requester: Requester = Depends(get_requester),
    container: Container = Depends(get_container),
) -> BulkAssignResponse:
    """Assign several leads to one staff member."""
    result = await container.lead_record_store.bulk_assign(request.lead_ids, request.staff_id, requester)
    return BulkAssignResponse(updated_count=result.updated_count, **result.model_dump())


@router.post("/leads/normalize-assignments", response_model=NormalizeAssignmentsResponse)
async def normalize_lead_assignments(
    requester: Requester = Depends(get_requester),
    container: Container = Depends(get_container),
) -> NormalizeAssignmentsResponse:
    """Repair leads whose status disagrees with their assignment."""
    repaired = await container.lead_record_store.normalize_assignments(requester)
    return NormalizeAssignmentsResponse(repaired=repaired)


@router.get("/leads/{lead_id}", response_model=LeadResponse)
async def get_lead(
    lead_id: int,
    requester: Requester = Depends(get_requester),
    container: Container = Depends(get_container),
) -> LeadResponse:
    """Get a lead."""
    lead = await container.lead_record_store.get(lead_id, requester)
    return LeadResponse.model_validate(lead)


@router.patch("/leads/{lead_id}", response_model=LeadResponse)
async def update_lead(
    lead_id: int,
    patch: LeadPatch,
    requester: Requester = Depends(get_requester),
    container: Container = Depends(get_container),
) -> LeadResponse:
    """Apply a partial update to a lead."""
    lead = await container.lead_record_store.update(lead_id, patch, requester)
    return LeadResponse.model_validate(lead)


@router.delete("/leads/{lead_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_lead(
    lead_id: int,
    requester: Requester = Depends(get_requester),
    container: Container = Depends(get_container),
) -> None:
    """Delete a lead."""
    await container.lead_record_store.delete(lead_id, requester)


@router.get("/leads/{lead_id}/comments", response_model=list[LeadCommentResponse])
async def list_lead_comments(
    lead_id: int,
    requester: Requester = Depends(get_requester),
    container: Container = Depends(get_container),
) -> list[LeadCommentResponse]:
    """Get a lead's comment thread, oldest first."""
    comments = await container.lead_record_store.list_comments(lead_id, requester)
    return [LeadCommentResponse.model_validate(comment) for comment in comments]


@router.post(
    "/leads/{lead_id}/comments",
    status_code=status.HTTP_201_CREATED,
    response_model=LeadCommentResponse,
)
async def add_lead_comment(
    lead_id: int,
    request: LeadCommentRequest,
    requester: Requester = Depends(get_requester),
    container: Container = Depends(get_container),
) -> LeadCommentResponse:
    """Append a comment to a lead."""
    comment = await container.lead_record_store.add_comment(lead_id, request.text, requester)
    return LeadCommentResponse.model_validate(comment)


@router.post(
    "/leads/{lead_id}/complete-registration",
    status_code=status.HTTP_201_CREATED,
    response_model=ClientResponse,
)
async def complete_registration(
    lead_id: int,
    details: RegistrationDetails,
    requester: Requester = Depends(get_requester),
    container: Container = Depends(get_container),
) -> ClientResponse:
    """Convert a lead into a client."""
    client = await container.conversion_service.complete_registration(lead_id, details, requester)
    return _client_response(container, client, requester)


@router.get("/clients", response_model=list[ClientResponse])
async def list_clients(
    status_filter: Optional[str] = Query(None, alias="status"),
    assigned_staff_id: Optional[int] = None,
    processing_staff_id: Optional[int] = None,
    search: Optional[str] = None,
    requester: Requester = Depends(get_requester),
    container: Container = Depends(get_container),
) -> list[ClientResponse]:
    """
    List clients.

    Args:
        status_filter: Fee status (query parameter `status`)
        assigned_staff_id: Stage 1 operator filter
        processing_staff_id: Stage 2 operator filter
        search: Substring of name, phone or email
    """
    record_filter = RecordFilter(
        status=status_filter,
        assigned_staff_id=assigned_staff_id,
        processing_staff_id=processing_staff_id,
        search=search,
    )
    clients = await container.client_record_store.list(record_filter, requester)
    return [_client_response(container, client, requester) for client in clients]


@router.get("/clients/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: int,
    requester: Requester = Depends(get_requester),
    container: Container = Depends(get_container),
) -> ClientResponse:
    """Get a client."""
    client = await container.client_record_store.get(client_id, requester)
    return _client_response(container, client, requester)


@router.patch("/clients/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: int,
    patch: ClientPatch,
    requester: Requester = Depends(get_requester),
    container: Container = Depends(get_container),
) -> ClientResponse:
    """Apply a partial update to a client."""
    client = await container.client_record_store.update(client_id, patch, requester)
    return _client_response(container, client, requester)


@router.delete("/clients/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    client_id: int,
    requester: Requester = Depends(get_requester),
    container: Container = Depends(get_container),
) -> None:
    """Delete a client."""
    await container.client_record_store.delete(client_id, requester)


@router.post("/clients/{client_id}/handoff", response_model=ClientResponse)
async def handoff_client(
    client_id: int,
    requester: Requester = Depends(get_requester),
    container: Container = Depends(get_container),
) -> ClientResponse:
    """Hand a client over to the Stage 2 operator."""
    client = await container.client_record_store.handoff_to_stage2(client_id, requester)
    return _client_response(container, client, requester)


@router.post("/clients/{client_id}/milestones", response_model=ClientResponse)
async def record_milestone(
    client_id: int,
    request: MilestoneRequest,
    requester: Requester = Depends(get_requester),
    container: Container = Depends(get_container),
) -> ClientResponse:
    """Record a Stage 2 milestone."""
    client = await container.handoff_coordinator.record_milestone(client_id, request.action, requester)
    return _client_response(container, client, requester)
