"""Conversion repository port."""

from abc import ABC, abstractmethod
from collections.abc import Callable

from leadflow.domain.entities.client import Client
from leadflow.domain.entities.lead import Lead


class ConversionRepository(ABC):
    """Port interface for the lead-to-client conversion transaction."""

    @abstractmethod
    async def convert(self, lead_id: int, build_client: Callable[[Lead], Client]) -> tuple[Lead, Client]:
        """
        Insert a client built from a lead and mark the lead converted, atomically.

        Args:
            lead_id: Lead identifier
            build_client: Builds the client from the locked lead; may raise to abort

        Returns:
            Converted lead and the stored client

        Raises:
            NotFound: If the lead does not exist
            AlreadyConverted: If the lead is converted or a client already references it
            ConsistencyFault: If the transaction failed midway and was rolled back
        """
        pass
