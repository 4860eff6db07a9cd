"""Helpers shared by the SQL-backed repositories."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Query

from leadflow.application.dtos.filters import RecordFilter


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Make a stored timestamp timezone-aware.

    SQLite returns naive datetimes even for timezone-aware columns.

    Args:
        value: Timestamp read from the database

    Returns:
        Timestamp in UTC, or None
    """
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def apply_record_filter(query: Query, model, record_filter: RecordFilter, status_column) -> Query:
    """
    Apply the filter criteria shared by leads and clients to a query.

    Args:
        query: Query over the model
        model: LeadModel or ClientModel
        record_filter: Filter criteria
        status_column: Column compared with record_filter.status

    Returns:
        Filtered query, most recently updated first
    """
    if record_filter.status is not None:
        query = query.filter(status_column == record_filter.status)
    if record_filter.assigned_staff_id is not None:
        query = query.filter(model.assigned_staff_id == record_filter.assigned_staff_id)
    if record_filter.search:
        pattern = f"%{record_filter.search}%"
        query = query.filter(
            or_(
                model.name.ilike(pattern),
                model.phone_number.ilike(pattern),
                model.email.ilike(pattern),
            )
        )
    return query.order_by(model.updated_at.desc(), model.created_at.desc())
