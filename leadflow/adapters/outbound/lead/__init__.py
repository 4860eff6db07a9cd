"""Lead repository adapters."""

from leadflow.adapters.outbound.lead.comment_repository import InMemoryLeadCommentRepository
from leadflow.adapters.outbound.lead.lead_repository import InMemoryLeadRepository
from leadflow.adapters.outbound.lead.postgres_comment_repository import PostgresLeadCommentRepository
from leadflow.adapters.outbound.lead.postgres_lead_repository import PostgresLeadRepository

__all__ = [
    "InMemoryLeadCommentRepository",
    "InMemoryLeadRepository",
    "PostgresLeadCommentRepository",
    "PostgresLeadRepository",
]
