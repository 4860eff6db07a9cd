"""In-memory client repository adapter."""

from typing import Optional

from leadflow.adapters.outbound.memory.store import (
    InMemoryStore,
    matches_common_filter,
    newest_first,
    snapshot,
)
from leadflow.application.dtos.filters import RecordFilter
from leadflow.application.ports.client_repository import ClientMutation, ClientRepository
from leadflow.domain.entities.client import Client
from leadflow.domain.errors import NotFound


class InMemoryClientRepository(ClientRepository):
    """In-memory implementation of client repository."""

    def __init__(self, store: Optional[InMemoryStore] = None) -> None:
        """
        Initialize in-memory repository.

        Args:
            store: Shared store (a private one is created if omitted)
        """
        self._store = store or InMemoryStore()

    async def get(self, client_id: int) -> Optional[Client]:
        """
        Get a client by id.

        Args:
            client_id: Client identifier

        Returns:
            Client entity, or None if not found
        """
        client = self._store.clients.get(client_id)
        return snapshot(client) if client is not None else None

    async def list(self, record_filter: RecordFilter) -> list[Client]:
        """
        List clients matching a filter.

        Args:
            record_filter: Filter criteria; status matches the fee status

        Returns:
            Matching clients, most recently updated first
        """
        matches = []
        for client in self._store.clients.values():
            fee_status = client.fee_status.value if client.fee_status else None
            if not matches_common_filter(client, record_filter, fee_status):
                continue
            if (
                record_filter.processing_staff_id is not None
                and client.processing_staff_id != record_filter.processing_staff_id
            ):
                continue
            matches.append(client)
        return [snapshot(client) for client in newest_first(matches)]

    async def update(self, client_id: int, mutate: ClientMutation) -> Client:
        """
        Read, mutate and write one client under the store lock.

        Args:
            client_id: Client identifier
            mutate: Mutation applied to a copy of the current state

        Returns:
            Client as stored after the operation
        """
        async with self._store.lock:
            current = self._store.clients.get(client_id)
            if current is None:
                raise NotFound(f"Client {client_id} not found")
            updated = mutate(snapshot(current))
            if updated is None:
                return snapshot(current)
            updated.id = client_id
            self._store.clients[client_id] = snapshot(updated)
            return snapshot(updated)

    async def delete(self, client_id: int) -> bool:
        """
        Delete a client.

        Args:
            client_id: Client identifier

        Returns:
            True if a client was deleted
        """
        async with self._store.lock:
            return self._store.clients.pop(client_id, None) is not None
