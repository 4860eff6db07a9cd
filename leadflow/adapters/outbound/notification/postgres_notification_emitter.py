"""Postgres-backed notification emitter adapter."""

from leadflow.application.dtos.notification import Notification
from leadflow.application.ports.notification_emitter import NotificationEmitter
from leadflow.infrastructure.db import session_scope

from .models import NotificationModel


class PostgresNotificationEmitter(NotificationEmitter):
    """Writes notifications to the notifications table for in-app delivery."""

    def __init__(self) -> None:
        """Initialize Postgres emitter."""
        pass

    async def emit(self, notification: Notification) -> None:
        """
        Insert a notification row.

        Args:
            notification: Notification to write
        """
        with session_scope(f"saving {notification.type.value} notification") as db:
            db.add(
                NotificationModel(
                    type=notification.type.value,
                    message=notification.message,
                    user_id=notification.user_id,
                    recipient_role=(
                        notification.recipient_role.value if notification.recipient_role else None
                    ),
                    lead_id=notification.lead_id,
                    client_id=notification.client_id,
                    created_by=notification.created_by,
                    created_at=notification.created_at,
                )
            )
            db.commit()
