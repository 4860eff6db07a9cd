"""In-memory lead repository adapter."""

from typing import Optional

from leadflow.adapters.outbound.memory.store import (
    InMemoryStore,
    matches_common_filter,
    newest_first,
    snapshot,
)
from leadflow.application.dtos.filters import RecordFilter
from leadflow.application.ports.lead_repository import LeadMutation, LeadRepository
from leadflow.domain.entities.lead import Lead
from leadflow.domain.errors import NotFound


class InMemoryLeadRepository(LeadRepository):
    """In-memory implementation of lead repository."""

    def __init__(self, store: Optional[InMemoryStore] = None) -> None:
        """
        Initialize in-memory repository.

        Args:
            store: Shared store (a private one is created if omitted)
        """
        self._store = store or InMemoryStore()

    async def add(self, lead: Lead) -> Lead:
        """
        Insert a new lead.

        Args:
            lead: Lead without id

        Returns:
            Stored lead with its assigned id
        """
        async with self._store.lock:
            stored = snapshot(lead)
            stored.id = self._store.next_lead_id()
            self._store.leads[stored.id] = stored
            return snapshot(stored)

    async def get(self, lead_id: int) -> Optional[Lead]:
        """
        Get a lead by id.

        Args:
            lead_id: Lead identifier

        Returns:
            Lead entity, or None if not found
        """
        lead = self._store.leads.get(lead_id)
        return snapshot(lead) if lead is not None else None

    async def list(self, record_filter: RecordFilter) -> list[Lead]:
        """
        List leads matching a filter.

        Args:
            record_filter: Filter criteria

        Returns:
            Matching leads, most recently updated first
        """
        matches = [
            lead
            for lead in self._store.leads.values()
            if matches_common_filter(lead, record_filter, lead.status.value)
        ]
        return [snapshot(lead) for lead in newest_first(matches)]

    async def update(self, lead_id: int, mutate: LeadMutation) -> Lead:
        """
        Read, mutate and write one lead under the store lock.

        Args:
            lead_id: Lead identifier
            mutate: Mutation applied to a copy of the current state

        Returns:
            Lead as stored after the operation
        """
        async with self._store.lock:
            current = self._store.leads.get(lead_id)
            if current is None:
                raise NotFound(f"Lead {lead_id} not found")
            updated = mutate(snapshot(current))
            if updated is None:
                return snapshot(current)
            updated.id = lead_id
            self._store.leads[lead_id] = snapshot(updated)
            return snapshot(updated)

    async def delete(self, lead_id: int) -> bool:
        """
        Delete a lead and its comment thread.

        Args:
            lead_id: Lead identifier

        Returns:
            True if a lead was deleted
        """
        async with self._store.lock:
            self._store.lead_comments.pop(lead_id, None)
            return self._store.leads.pop(lead_id, None) is not None

    async def find_duplicate(self, phone_number: str, email: Optional[str]) -> Optional[Lead]:
        """
        Find a lead sharing a phone number or email.

        Args:
            phone_number: Primary phone number
            email: Optional email

        Returns:
            First conflicting lead, or None
        """
        for lead in self._store.leads.values():
            if lead.phone_number == phone_number or (email and lead.email == email):
                return snapshot(lead)
        return None

    async def normalize_assignments(self) -> int:
        """
        Repair the assignment/status invariant on every non-converted lead.

        Returns:
            Number of leads changed
        """
        repaired = 0
        async with self._store.lock:
            for lead in self._store.leads.values():
                if lead.normalize_assignment():
                    lead.touch()
                    repaired += 1
        return repaired
