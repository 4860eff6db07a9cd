"""Client DTOs."""

from datetime import date
from typing import Any, Optional

from pydantic import Field, field_validator

from leadflow.application.dtos.base import DTO, PatchDTO
from leadflow.domain.value_objects.processing import FeeStatus


class RegistrationDetails(DTO):
    """Mandatory registration fields supplied when a lead converts.

    Fields are optional here so that a missing value is reported by the
    conversion service as a validation error rather than by the parser.
    """

    assessment_authority: Optional[str] = None
    occupation_mapped: Optional[str] = None
    registration_fee_paid: Optional[bool] = None

    @field_validator("registration_fee_paid", mode="before")
    @classmethod
    def _parse_yes_no(cls, value: Any) -> Any:
        """Accept the Yes/No answers of the registration form."""
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized in ("yes", "true"):
                return True
            if normalized in ("no", "false"):
                return False
            if normalized == "":
                return None
        return value

    def missing_fields(self) -> list[str]:
        """
        List the registration fields that were not supplied.

        Returns:
            Field names, empty when all are present
        """
        missing = []
        if not (self.assessment_authority or "").strip():
            missing.append("assessment_authority")
        if not (self.occupation_mapped or "").strip():
            missing.append("occupation_mapped")
        if self.registration_fee_paid is None:
            missing.append("registration_fee_paid")
        return missing


class ClientPatch(PatchDTO):
    """Partial update of a client (Stage 1 fields and profile corrections)."""

    name: Optional[str] = Field(default=None, min_length=1)
    phone_number: Optional[str] = Field(default=None, min_length=1)
    phone_country_code: Optional[str] = None
    secondary_phone_number: Optional[str] = None
    secondary_phone_country_code: Optional[str] = None
    whatsapp_number: Optional[str] = None
    whatsapp_country_code: Optional[str] = None
    email: Optional[str] = None
    age: Optional[int] = Field(default=None, ge=0)
    occupation: Optional[str] = None
    qualification: Optional[str] = None
    year_of_experience: Optional[int] = Field(default=None, ge=0)
    target_country: Optional[str] = None
    residing_country: Optional[str] = None
    program: Optional[str] = None
    ielts_score: Optional[float] = Field(default=None, ge=0, le=9)
    source: Optional[str] = None
    assessment_authority: Optional[str] = Field(default=None, min_length=1)
    occupation_mapped: Optional[str] = Field(default=None, min_length=1)
    registration_fee_paid: Optional[bool] = None
    amount_paid: Optional[float] = Field(default=None, ge=0)
    fee_status: Optional[FeeStatus] = None
    payment_due_date: Optional[date] = None
