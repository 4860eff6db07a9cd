"""Lead repository port."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Optional

from leadflow.application.dtos.filters import RecordFilter
from leadflow.domain.entities.lead import Lead

# Receives a private copy of the stored lead. Returns the lead to persist, or
# None to leave the record untouched. Raising aborts without writing.
LeadMutation = Callable[[Lead], Optional[Lead]]


class LeadRepository(ABC):
    """Port interface for lead repository."""

    @abstractmethod
    async def add(self, lead: Lead) -> Lead:
        """
        Insert a new lead.

        Args:
            lead: Lead without id

        Returns:
            Stored lead with its assigned id
        """
        pass

    @abstractmethod
    async def get(self, lead_id: int) -> Optional[Lead]:
        """
        Get a lead by id.

        Args:
            lead_id: Lead identifier

        Returns:
            Lead entity, or None if not found
        """
        pass

    @abstractmethod
    async def list(self, record_filter: RecordFilter) -> list[Lead]:
        """
        List leads matching a filter, most recently updated first.

        Args:
            record_filter: status, assigned_staff_id and search criteria

        Returns:
            Matching leads
        """
        pass

    @abstractmethod
    async def update(self, lead_id: int, mutate: LeadMutation) -> Lead:
        """
        Read, mutate and write one lead as a single locked operation.

        Args:
            lead_id: Lead identifier
            mutate: Mutation applied to the current state

        Returns:
            Lead as stored after the operation

        Raises:
            NotFound: If the lead does not exist
        """
        pass

    @abstractmethod
    async def delete(self, lead_id: int) -> bool:
        """
        Delete a lead.

        Args:
            lead_id: Lead identifier

        Returns:
            True if a lead was deleted
        """
        pass

    @abstractmethod
    async def find_duplicate(self, phone_number: str, email: Optional[str]) -> Optional[Lead]:
        """
        Find a lead sharing a phone number or email.

        Args:
            phone_number: Primary phone number
            email: Optional email

        Returns:
            First conflicting lead, or None
        """
        pass

    @abstractmethod
    async def normalize_assignments(self) -> int:
        """
        Repair the assignment/status invariant on every non-converted lead.

        Returns:
            Number of leads changed
        """
        pass
