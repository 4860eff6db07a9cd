"""Structured logger for workflow events."""

import logging
from typing import Any, Optional

_logger = logging.getLogger("leadflow")
_logger.setLevel(logging.INFO)

# Create console handler if not exists
if not _logger.handlers:
    handler = logging.StreamHandler()
    handler.setLevel(logging.INFO)
    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    _logger.addHandler(handler)


def log_event(
    component: str,
    event: str,
    level: int = logging.INFO,
    **kwargs: Any,
) -> None:
    """
    Log a structured workflow event.

    Args:
        component: Component name (e.g., 'leads', 'conversion', 'handoff')
        event: Event name
        level: Log level (default: INFO)
        **kwargs: Additional structured fields to log
    """
    fields = {
        "component": component,
        "event": event,
    }
    fields.update(kwargs)

    # Format as key=value pairs for readability
    log_parts = [f"{k}={v!r}" for k, v in fields.items()]
    log_message = " | ".join(log_parts)

    _logger.log(level, log_message)


def log_lead_transition(
    lead_id: int,
    requester_id: int,
    status_before: Optional[str] = None,
    status_after: Optional[str] = None,
    **kwargs: Any,
) -> None:
    """
    Log a lead mutation.

    Args:
        lead_id: Lead identifier
        requester_id: User performing the change
        status_before: Previous status
        status_after: New status
        **kwargs: Additional fields
    """
    fields = {}
    if status_before is not None:
        fields["status_before"] = status_before
    if status_after is not None:
        fields["status_after"] = status_after
    fields.update(kwargs)

    log_event(
        component="leads",
        event="lead_updated",
        lead_id=lead_id,
        requester_id=requester_id,
        **fields,
    )


def log_conversion(
    lead_id: int,
    client_id: int,
    requester_id: int,
    **kwargs: Any,
) -> None:
    """
    Log a completed lead-to-client conversion.

    Args:
        lead_id: Converted lead
        client_id: Created client
        requester_id: User performing the conversion
        **kwargs: Additional fields
    """
    log_event(
        component="conversion",
        event="registration_completed",
        lead_id=lead_id,
        client_id=client_id,
        requester_id=requester_id,
        **kwargs,
    )


def log_milestone(
    client_id: int,
    action: str,
    recorded: bool,
    requester_id: int,
    **kwargs: Any,
) -> None:
    """
    Log a processing action request.

    Args:
        client_id: Client identifier
        action: Action key
        recorded: False when the action was already in the history
        requester_id: User recording the action
        **kwargs: Additional fields
    """
    log_event(
        component="handoff",
        event="milestone_recorded" if recorded else "milestone_already_recorded",
        client_id=client_id,
        action=action,
        requester_id=requester_id,
        **kwargs,
    )


def log_consistency_fault(
    lead_id: int,
    attempt: int,
    error: str,
    final: bool,
    **kwargs: Any,
) -> None:
    """
    Log a failed conversion transaction.

    The final failure is logged at CRITICAL: it needs an operator.

    Args:
        lead_id: Lead being converted
        attempt: Attempt number (1-based)
        error: Error description
        final: True when no retry is left
        **kwargs: Additional fields
    """
    log_event(
        component="conversion",
        event="consistency_fault",
        level=logging.CRITICAL if final else logging.ERROR,
        lead_id=lead_id,
        attempt=attempt,
        error=error,
        final=final,
        **kwargs,
    )


# Export logger instance for adapters
logger = _logger
