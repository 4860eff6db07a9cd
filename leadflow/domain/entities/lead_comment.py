"""Lead comment entity."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


@dataclass
class LeadComment:
    """One entry of a lead's append-only comment thread."""

    lead_id: int
    author_id: int
    text: str
    id: Optional[int] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
