"""Postgres-backed client repository adapter."""

from datetime import datetime
from typing import Optional

from leadflow.adapters.outbound.sql import apply_record_filter, as_utc
from leadflow.application.dtos.filters import RecordFilter
from leadflow.application.ports.client_repository import ClientMutation, ClientRepository
from leadflow.domain.entities.client import Client, CompletedAction
from leadflow.domain.entities.lead import CARRIED_OVER_FIELDS
from leadflow.domain.errors import NotFound
from leadflow.domain.value_objects.processing import FeeStatus, MilestoneAction
from leadflow.infrastructure.db import session_scope

from .models import ClientModel

_PLAIN_FIELDS = CARRIED_OVER_FIELDS + (
    "lead_id",
    "assessment_authority",
    "occupation_mapped",
    "registration_fee_paid",
    "amount_paid",
    "payment_due_date",
    "assigned_staff_id",
    "processing_staff_id",
    "created_by",
)


def _serialize_action(entry: CompletedAction) -> dict:
    return {
        "action": entry.action.value,
        "label": entry.label,
        "completed_at": entry.completed_at.isoformat(),
        "completed_by": entry.completed_by,
        "completed_by_name": entry.completed_by_name,
    }


def _deserialize_action(data: dict) -> CompletedAction:
    return CompletedAction(
        action=MilestoneAction(data["action"]),
        label=data["label"],
        completed_at=as_utc(datetime.fromisoformat(data["completed_at"])),
        completed_by=data["completed_by"],
        completed_by_name=data.get("completed_by_name"),
    )


def client_from_model(model: ClientModel) -> Client:
    """
    Convert ClientModel to Client entity.

    Args:
        model: SQLAlchemy model instance

    Returns:
        Client entity
    """
    return Client(
        id=model.id,
        **{name: getattr(model, name) for name in _PLAIN_FIELDS},
        fee_status=FeeStatus(model.fee_status) if model.fee_status else None,
        completed_actions=[_deserialize_action(data) for data in model.completed_actions or []],
        created_at=as_utc(model.created_at),
        updated_at=as_utc(model.updated_at),
    )


def apply_client_to_model(client: Client, model: ClientModel) -> ClientModel:
    """
    Copy a Client entity onto a model instance.

    Args:
        client: Client entity
        model: Existing or new model instance

    Returns:
        The same model instance
    """
    for name in _PLAIN_FIELDS:
        setattr(model, name, getattr(client, name))
    model.fee_status = client.fee_status.value if client.fee_status else None
    model.processing_status = client.processing_status.value if client.processing_status else None
    # A new list, so the JSON column is seen as changed
    model.completed_actions = [_serialize_action(entry) for entry in client.completed_actions]
    model.created_at = client.created_at
    model.updated_at = client.updated_at
    return model


class PostgresClientRepository(ClientRepository):
    """Postgres implementation of client repository."""

    def __init__(self) -> None:
        """Initialize Postgres repository."""
        pass

    async def get(self, client_id: int) -> Optional[Client]:
        """
        Get a client by id.

        Args:
            client_id: Client identifier

        Returns:
            Client entity, or None if not found
        """
        with session_scope(f"getting client {client_id}") as db:
            model = db.query(ClientModel).filter(ClientModel.id == client_id).first()
            if model is None:
                return None
            return client_from_model(model)

    async def list(self, record_filter: RecordFilter) -> list[Client]:
        """
        List clients matching a filter.

        Args:
            record_filter: Filter criteria; status matches the fee status

        Returns:
            Matching clients, most recently updated first
        """
        with session_scope("listing clients") as db:
            query = db.query(ClientModel)
            if record_filter.processing_staff_id is not None:
                query = query.filter(ClientModel.processing_staff_id == record_filter.processing_staff_id)
            query = apply_record_filter(query, ClientModel, record_filter, ClientModel.fee_status)
            return [client_from_model(model) for model in query.all()]

    async def update(self, client_id: int, mutate: ClientMutation) -> Client:
        """
        Read, mutate and write one client while holding its row lock.

        Args:
            client_id: Client identifier
            mutate: Mutation applied to the current state

        Returns:
            Client as stored after the operation
        """
        with session_scope(f"updating client {client_id}") as db:
            model = db.query(ClientModel).filter(ClientModel.id == client_id).with_for_update().first()
            if model is None:
                raise NotFound(f"Client {client_id} not found")
            updated = mutate(client_from_model(model))
            if updated is None:
                return client_from_model(model)
            apply_client_to_model(updated, model)
            db.commit()
            db.refresh(model)
            return client_from_model(model)

    async def delete(self, client_id: int) -> bool:
        """
        Delete a client.

        Args:
            client_id: Client identifier

        Returns:
            True if a client was deleted
        """
        with session_scope(f"deleting client {client_id}") as db:
            deleted = db.query(ClientModel).filter(ClientModel.id == client_id).delete()
            db.commit()
            return deleted > 0
