"""Base DTO classes."""

from pydantic import BaseModel, ConfigDict


class DTO(BaseModel):
    """Base class for application DTOs."""

    model_config = ConfigDict(frozen=True)


class PatchDTO(DTO):
    """Base class for partial updates; unknown fields are rejected."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    def changes(self) -> dict:
        """
        Get only the fields the caller actually supplied.

        Returns:
            Mapping of field name to new value (explicit None included)
        """
        return {name: getattr(self, name) for name in self.model_fields_set}
