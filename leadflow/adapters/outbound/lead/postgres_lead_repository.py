"""Postgres-backed lead repository adapter."""

from typing import Optional

from sqlalchemy import or_

from leadflow.adapters.outbound.sql import apply_record_filter, as_utc
from leadflow.application.dtos.filters import RecordFilter
from leadflow.application.ports.lead_repository import LeadMutation, LeadRepository
from leadflow.domain.entities.lead import CARRIED_OVER_FIELDS, Lead
from leadflow.domain.errors import NotFound
from leadflow.domain.value_objects.lead_status import FollowUpStatus, LeadPriority, LeadStatus
from leadflow.infrastructure.db import session_scope

from .models import LeadCommentModel, LeadModel

_PLAIN_FIELDS = CARRIED_OVER_FIELDS + (
    "assigned_staff_id",
    "follow_up_date",
    "comment",
    "created_by",
)


def lead_from_model(model: LeadModel) -> Lead:
    """
    Convert LeadModel to Lead entity.

    Args:
        model: SQLAlchemy model instance

    Returns:
        Lead entity
    """
    return Lead(
        id=model.id,
        **{name: getattr(model, name) for name in _PLAIN_FIELDS},
        status=LeadStatus(model.status),
        priority=LeadPriority(model.priority) if model.priority else None,
        follow_up_status=FollowUpStatus(model.follow_up_status),
        created_at=as_utc(model.created_at),
        updated_at=as_utc(model.updated_at),
    )


def apply_lead_to_model(lead: Lead, model: LeadModel) -> LeadModel:
    """
    Copy a Lead entity onto a model instance.

    Args:
        lead: Lead entity
        model: Existing or new model instance

    Returns:
        The same model instance
    """
    for name in _PLAIN_FIELDS:
        setattr(model, name, getattr(lead, name))
    model.status = lead.status.value
    model.priority = lead.priority.value if lead.priority else None
    model.follow_up_status = lead.follow_up_status.value
    model.created_at = lead.created_at
    model.updated_at = lead.updated_at
    return model


class PostgresLeadRepository(LeadRepository):
    """Postgres implementation of lead repository."""

    def __init__(self) -> None:
        """Initialize Postgres repository."""
        pass

    async def add(self, lead: Lead) -> Lead:
        """
        Insert a new lead.

        Args:
            lead: Lead without id

        Returns:
            Stored lead with its assigned id
        """
        with session_scope("adding lead") as db:
            model = apply_lead_to_model(lead, LeadModel())
            db.add(model)
            db.commit()
            db.refresh(model)
            return lead_from_model(model)

    async def get(self, lead_id: int) -> Optional[Lead]:
        """
        Get a lead by id.

        Args:
            lead_id: Lead identifier

        Returns:
            Lead entity, or None if not found
        """
        with session_scope(f"getting lead {lead_id}") as db:
            model = db.query(LeadModel).filter(LeadModel.id == lead_id).first()
            if model is None:
                return None
            return lead_from_model(model)

    async def list(self, record_filter: RecordFilter) -> list[Lead]:
        """
        List leads matching a filter.

        Args:
            record_filter: Filter criteria

        Returns:
            Matching leads, most recently updated first
        """
        with session_scope("listing leads") as db:
            query = apply_record_filter(db.query(LeadModel), LeadModel, record_filter, LeadModel.status)
            return [lead_from_model(model) for model in query.all()]

    async def update(self, lead_id: int, mutate: LeadMutation) -> Lead:
        """
        Read, mutate and write one lead while holding its row lock.

        Args:
            lead_id: Lead identifier
            mutate: Mutation applied to the current state

        Returns:
            Lead as stored after the operation
        """
        with session_scope(f"updating lead {lead_id}") as db:
            model = db.query(LeadModel).filter(LeadModel.id == lead_id).with_for_update().first()
            if model is None:
                raise NotFound(f"Lead {lead_id} not found")
            updated = mutate(lead_from_model(model))
            if updated is None:
                return lead_from_model(model)
            apply_lead_to_model(updated, model)
            db.commit()
            db.refresh(model)
            return lead_from_model(model)

    async def delete(self, lead_id: int) -> bool:
        """
        Delete a lead and its comment thread.

        Args:
            lead_id: Lead identifier

        Returns:
            True if a lead was deleted
        """
        with session_scope(f"deleting lead {lead_id}") as db:
            db.query(LeadCommentModel).filter(LeadCommentModel.lead_id == lead_id).delete()
            deleted = db.query(LeadModel).filter(LeadModel.id == lead_id).delete()
            db.commit()
            return deleted > 0

    async def find_duplicate(self, phone_number: str, email: Optional[str]) -> Optional[Lead]:
        """
        Find a lead sharing a phone number or email.

        Args:
            phone_number: Primary phone number
            email: Optional email

        Returns:
            First conflicting lead, or None
        """
        with session_scope("checking duplicate leads") as db:
            conditions = [LeadModel.phone_number == phone_number]
            if email:
                conditions.append(LeadModel.email == email)
            model = db.query(LeadModel).filter(or_(*conditions)).first()
            return lead_from_model(model) if model is not None else None

    async def normalize_assignments(self) -> int:
        """
        Repair the assignment/status invariant on every non-converted lead.

        Returns:
            Number of leads changed
        """
        with session_scope("normalizing lead assignments") as db:
            repaired = 0
            models = (
                db.query(LeadModel)
                .filter(LeadModel.status != LeadStatus.REGISTRATION_COMPLETED.value)
                .with_for_update()
                .all()
            )
            for model in models:
                lead = lead_from_model(model)
                if lead.normalize_assignment():
                    lead.touch()
                    apply_lead_to_model(lead, model)
                    repaired += 1
            db.commit()
            return repaired
