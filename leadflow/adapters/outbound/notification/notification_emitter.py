"""In-memory and no-op notification emitter adapters."""

from typing import Optional

from leadflow.application.dtos.notification import Notification
from leadflow.application.ports.notification_emitter import NotificationEmitter
from leadflow.domain.value_objects.role import Role


class InMemoryNotificationEmitter(NotificationEmitter):
    """Keeps emitted notifications in process memory."""

    def __init__(self) -> None:
        """Initialize with an empty outbox."""
        self.emitted: list[Notification] = []

    async def emit(self, notification: Notification) -> None:
        """
        Append a notification to the outbox.

        Args:
            notification: Notification to write
        """
        self.emitted.append(notification)

    def for_user(self, user_id: int) -> list[Notification]:
        """Notifications addressed to one user."""
        return [n for n in self.emitted if n.user_id == user_id]

    def for_role(self, role: Role) -> list[Notification]:
        """Notifications addressed to every holder of a role."""
        return [n for n in self.emitted if n.recipient_role is role]

    def latest(self) -> Optional[Notification]:
        """Most recent notification, or None."""
        return self.emitted[-1] if self.emitted else None


class NoOpNotificationEmitter(NotificationEmitter):
    """No-op adapter for when notifications are disabled."""

    async def emit(self, notification: Notification) -> None:
        """
        No-op (does nothing).

        Args:
            notification: Notification (ignored)
        """
        pass
