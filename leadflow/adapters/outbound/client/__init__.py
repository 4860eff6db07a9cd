"""Client repository adapters."""

from leadflow.adapters.outbound.client.client_repository import InMemoryClientRepository
from leadflow.adapters.outbound.client.postgres_client_repository import PostgresClientRepository

__all__ = [
    "InMemoryClientRepository",
    "PostgresClientRepository",
]
