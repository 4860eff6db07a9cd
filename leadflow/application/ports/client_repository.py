"""Client repository port."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Optional

from leadflow.application.dtos.filters import RecordFilter
from leadflow.domain.entities.client import Client

# Same contract as LeadMutation: return None for a no-op, raise to abort.
ClientMutation = Callable[[Client], Optional[Client]]


class ClientRepository(ABC):
    """Port interface for client repository."""

    @abstractmethod
    async def get(self, client_id: int) -> Optional[Client]:
        """
        Get a client by id.

        Args:
            client_id: Client identifier

        Returns:
            Client entity, or None if not found
        """
        pass

    @abstractmethod
    async def list(self, record_filter: RecordFilter) -> list[Client]:
        """
        List clients matching a filter, most recently updated first.

        Args:
            record_filter: fee status, staff ids and search criteria

        Returns:
            Matching clients
        """
        pass

    @abstractmethod
    async def update(self, client_id: int, mutate: ClientMutation) -> Client:
        """
        Read, mutate and write one client as a single locked operation.

        Appends to completed_actions go through here so that two concurrent
        milestones never overwrite each other's history.

        Args:
            client_id: Client identifier
            mutate: Mutation applied to the current state

        Returns:
            Client as stored after the operation

        Raises:
            NotFound: If the client does not exist
        """
        pass

    @abstractmethod
    async def delete(self, client_id: int) -> bool:
        """
        Delete a client.

        Args:
            client_id: Client identifier

        Returns:
            True if a client was deleted
        """
        pass
