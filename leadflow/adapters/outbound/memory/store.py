"""Shared in-memory storage for leads, lead comments and clients."""

import asyncio
import copy
from collections.abc import Iterable
from typing import Optional, TypeVar

from leadflow.application.dtos.filters import RecordFilter
from leadflow.domain.entities.client import Client
from leadflow.domain.entities.lead import Lead
from leadflow.domain.entities.lead_comment import LeadComment

T = TypeVar("T")


class InMemoryStore:
    """Leads, lead comments and clients held in process memory.

    One lock guards every collection so that a conversion, which touches a
    lead and a client, is a single critical section.
    """

    def __init__(self) -> None:
        """Initialize empty collections."""
        self.leads: dict[int, Lead] = {}
        self.lead_comments: dict[int, list[LeadComment]] = {}
        self.clients: dict[int, Client] = {}
        self.lock = asyncio.Lock()
        self._next_lead_id = 1
        self._next_client_id = 1
        self._next_comment_id = 1

    def next_lead_id(self) -> int:
        """Allocate a lead id."""
        lead_id = self._next_lead_id
        self._next_lead_id += 1
        return lead_id

    def next_client_id(self) -> int:
        """Allocate a client id."""
        client_id = self._next_client_id
        self._next_client_id += 1
        return client_id

    def next_comment_id(self) -> int:
        """Allocate a lead comment id."""
        comment_id = self._next_comment_id
        self._next_comment_id += 1
        return comment_id


def snapshot(entity: T) -> T:
    """Copy an entity so callers never share state with the store."""
    return copy.deepcopy(entity)


def newest_first(entities: Iterable[T]) -> list[T]:
    """Order entities by updated_at, then created_at, most recent first."""
    return sorted(entities, key=lambda e: (e.updated_at, e.created_at), reverse=True)


def matches_common_filter(entity, record_filter: RecordFilter, status: Optional[str]) -> bool:
    """
    Check the filter criteria shared by leads and clients.

    Args:
        entity: Lead or client
        record_filter: Filter criteria
        status: The entity's value to compare with record_filter.status

    Returns:
        True if the entity passes every criterion
    """
    if record_filter.status is not None and status != record_filter.status:
        return False
    if (
        record_filter.assigned_staff_id is not None
        and entity.assigned_staff_id != record_filter.assigned_staff_id
    ):
        return False
    if record_filter.search:
        needle = record_filter.search.lower()
        haystack = (entity.name, entity.phone_number, entity.email)
        if not any(value is not None and needle in value.lower() for value in haystack):
            return False
    return True
