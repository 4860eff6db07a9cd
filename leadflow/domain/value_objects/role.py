"""User role value object."""

from enum import Enum


class Role(str, Enum):
    """Role of an authenticated user."""

    ADMIN = "ADMIN"
    SALES_TEAM_HEAD = "SALES_TEAM_HEAD"
    SALES_TEAM = "SALES_TEAM"
    PROCESSING = "PROCESSING"
    STAFF = "STAFF"
    HR = "HR"

    @property
    def is_admin(self) -> bool:
        """Check if the role has unrestricted access."""
        return self is Role.ADMIN

