"""In-memory conversion repository adapter."""

from collections.abc import Callable

from leadflow.adapters.outbound.memory.store import InMemoryStore, snapshot
from leadflow.application.ports.conversion_repository import ConversionRepository
from leadflow.domain.entities.client import Client
from leadflow.domain.entities.lead import Lead
from leadflow.domain.errors import AlreadyConverted, ConsistencyFault, NotFound


class InMemoryConversionRepository(ConversionRepository):
    """In-memory conversion with a compensating delete on failure."""

    def __init__(self, store: InMemoryStore) -> None:
        """
        Initialize in-memory repository.

        Args:
            store: Store shared with the lead and client repositories
        """
        self._store = store

    async def convert(self, lead_id: int, build_client: Callable[[Lead], Client]) -> tuple[Lead, Client]:
        """
        Insert a client built from a lead and mark the lead converted.

        Args:
            lead_id: Lead identifier
            build_client: Builds the client from the current lead

        Returns:
            Converted lead and the stored client
        """
        async with self._store.lock:
            current = self._store.leads.get(lead_id)
            if current is None:
                raise NotFound(f"Lead {lead_id} not found")
            if any(client.lead_id == lead_id for client in self._store.clients.values()):
                raise AlreadyConverted(f"Lead {lead_id} already has a client")

            client = build_client(snapshot(current))
            client.id = self._store.next_client_id()
            self._store.clients[client.id] = snapshot(client)
            try:
                lead = self._mark_converted(snapshot(current))
            except Exception as err:
                # Compensate: the client must not outlive a failed lead update
                del self._store.clients[client.id]
                self._store.leads[lead_id] = current
                raise ConsistencyFault(
                    f"Lead {lead_id} could not be marked converted: {err}"
                ) from err
            return snapshot(lead), snapshot(client)

    def _mark_converted(self, lead: Lead) -> Lead:
        """Write the lead's terminal status."""
        lead.mark_registration_completed()
        self._store.leads[lead.id] = lead
        return lead
