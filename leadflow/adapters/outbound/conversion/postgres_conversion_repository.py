"""Postgres-backed conversion repository adapter."""

from collections.abc import Callable

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from leadflow.adapters.outbound.client.models import ClientModel
from leadflow.adapters.outbound.client.postgres_client_repository import (
    apply_client_to_model,
    client_from_model,
)
from leadflow.adapters.outbound.lead.models import LeadModel
from leadflow.adapters.outbound.lead.postgres_lead_repository import (
    apply_lead_to_model,
    lead_from_model,
)
from leadflow.application.ports.conversion_repository import ConversionRepository
from leadflow.domain.entities.client import Client
from leadflow.domain.entities.lead import Lead
from leadflow.domain.errors import AlreadyConverted, ConsistencyFault, NotFound
from leadflow.infrastructure.db import session_scope
from leadflow.infrastructure.logging.logger import logger


class PostgresConversionRepository(ConversionRepository):
    """Postgres implementation of the conversion transaction."""

    def __init__(self) -> None:
        """Initialize Postgres repository."""
        pass

    async def convert(self, lead_id: int, build_client: Callable[[Lead], Client]) -> tuple[Lead, Client]:
        """
        Insert a client built from a lead and mark the lead converted in one transaction.

        Args:
            lead_id: Lead identifier
            build_client: Builds the client from the locked lead

        Returns:
            Converted lead and the stored client
        """
        with session_scope(f"converting lead {lead_id}") as db:
            lead_model = db.query(LeadModel).filter(LeadModel.id == lead_id).with_for_update().first()
            if lead_model is None:
                raise NotFound(f"Lead {lead_id} not found")
            if db.query(ClientModel.id).filter(ClientModel.lead_id == lead_id).first() is not None:
                raise AlreadyConverted(f"Lead {lead_id} already has a client")

            lead = lead_from_model(lead_model)
            client_model = apply_client_to_model(build_client(lead), ClientModel())
            db.add(client_model)
            try:
                db.flush()
            except IntegrityError as e:
                raise AlreadyConverted(f"Lead {lead_id} already has a client") from e

            try:
                self._mark_converted(lead, lead_model)
                db.commit()
            except SQLAlchemyError as e:
                logger.error(f"Database error while converting lead {lead_id}: {str(e)}")
                raise ConsistencyFault(f"Lead {lead_id} could not be marked converted: {e}") from e

            db.refresh(lead_model)
            db.refresh(client_model)
            return lead_from_model(lead_model), client_from_model(client_model)

    def _mark_converted(self, lead: Lead, model: LeadModel) -> None:
        """Write the lead's terminal status onto its row."""
        lead.mark_registration_completed()
        apply_lead_to_model(lead, model)
