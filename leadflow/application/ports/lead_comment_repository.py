"""Lead comment repository port."""

from abc import ABC, abstractmethod

from leadflow.domain.entities.lead_comment import LeadComment


class LeadCommentRepository(ABC):
    """Port interface for the append-only lead comment thread."""

    @abstractmethod
    async def add(self, comment: LeadComment) -> LeadComment:
        """
        Append a comment to its lead's thread.

        Args:
            comment: Comment without id

        Returns:
            Stored comment with its assigned id

        Raises:
            NotFound: If the lead does not exist
        """
        pass

    @abstractmethod
    async def list_for_lead(self, lead_id: int) -> list[LeadComment]:
        """
        Get a lead's comments, oldest first.

        Args:
            lead_id: Lead identifier

        Returns:
            Comments in the order they were added
        """
        pass
