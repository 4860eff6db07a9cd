"""In-memory lead comment repository adapter."""

from typing import Optional

from leadflow.adapters.outbound.memory.store import InMemoryStore, snapshot
from leadflow.application.ports.lead_comment_repository import LeadCommentRepository
from leadflow.domain.entities.lead_comment import LeadComment
from leadflow.domain.errors import NotFound


class InMemoryLeadCommentRepository(LeadCommentRepository):
    """In-memory implementation of lead comment repository."""

    def __init__(self, store: Optional[InMemoryStore] = None) -> None:
        """
        Initialize in-memory repository.

        Args:
            store: Shared store (a private one is created if omitted)
        """
        self._store = store or InMemoryStore()

    async def add(self, comment: LeadComment) -> LeadComment:
        """
        Append a comment to its lead's thread.

        Args:
            comment: Comment without id

        Returns:
            Stored comment with its assigned id
        """
        async with self._store.lock:
            if comment.lead_id not in self._store.leads:
                raise NotFound(f"Lead {comment.lead_id} not found")
            stored = snapshot(comment)
            stored.id = self._store.next_comment_id()
            self._store.lead_comments.setdefault(comment.lead_id, []).append(stored)
            return snapshot(stored)

    async def list_for_lead(self, lead_id: int) -> list[LeadComment]:
        """
        Get a lead's comments, oldest first.

        Args:
            lead_id: Lead identifier

        Returns:
            Comments in the order they were added
        """
        return [snapshot(comment) for comment in self._store.lead_comments.get(lead_id, [])]
