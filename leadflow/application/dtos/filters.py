"""Record filter DTO."""

from typing import Optional

from leadflow.application.dtos.base import DTO


class RecordFilter(DTO):
    """Filter for listing leads or clients.

    For clients, status matches the fee status.
    """

    status: Optional[str] = None
    assigned_staff_id: Optional[int] = None
    processing_staff_id: Optional[int] = None
    search: Optional[str] = None
