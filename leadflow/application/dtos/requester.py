"""Requester DTO."""

from typing import Optional

from leadflow.application.dtos.base import DTO
from leadflow.domain.value_objects.role import Role


class Requester(DTO):
    """Already-authenticated user performing an operation."""

    id: int
    role: Role
    name: Optional[str] = None
    email: Optional[str] = None

    @property
    def display_name(self) -> str:
        """Name recorded in histories and notifications."""
        return self.name or self.email or f"user {self.id}"
