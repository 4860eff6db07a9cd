"""Postgres-backed lead comment repository adapter."""

from leadflow.adapters.outbound.sql import as_utc
from leadflow.application.ports.lead_comment_repository import LeadCommentRepository
from leadflow.domain.entities.lead_comment import LeadComment
from leadflow.domain.errors import NotFound
from leadflow.infrastructure.db import session_scope

from .models import LeadCommentModel, LeadModel


def comment_from_model(model: LeadCommentModel) -> LeadComment:
    """Convert LeadCommentModel to LeadComment entity."""
    return LeadComment(
        id=model.id,
        lead_id=model.lead_id,
        author_id=model.author_id,
        text=model.text,
        created_at=as_utc(model.created_at),
    )


class PostgresLeadCommentRepository(LeadCommentRepository):
    """Postgres implementation of lead comment repository."""

    def __init__(self) -> None:
        """Initialize Postgres repository."""
        pass

    async def add(self, comment: LeadComment) -> LeadComment:
        """
        Append a comment to its lead's thread.

        Args:
            comment: Comment without id

        Returns:
            Stored comment with its assigned id
        """
        with session_scope(f"adding comment to lead {comment.lead_id}") as db:
            if db.query(LeadModel.id).filter(LeadModel.id == comment.lead_id).first() is None:
                raise NotFound(f"Lead {comment.lead_id} not found")
            model = LeadCommentModel(
                lead_id=comment.lead_id,
                author_id=comment.author_id,
                text=comment.text,
                created_at=comment.created_at,
            )
            db.add(model)
            db.commit()
            db.refresh(model)
            return comment_from_model(model)

    async def list_for_lead(self, lead_id: int) -> list[LeadComment]:
        """
        Get a lead's comments, oldest first.

        Args:
            lead_id: Lead identifier

        Returns:
            Comments in the order they were added
        """
        with session_scope(f"listing comments of lead {lead_id}") as db:
            models = (
                db.query(LeadCommentModel)
                .filter(LeadCommentModel.lead_id == lead_id)
                .order_by(LeadCommentModel.created_at.asc(), LeadCommentModel.id.asc())
                .all()
            )
            return [comment_from_model(model) for model in models]
