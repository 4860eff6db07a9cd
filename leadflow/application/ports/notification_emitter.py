"""Notification emitter port."""

from abc import ABC, abstractmethod

from leadflow.application.dtos.notification import Notification


class NotificationEmitter(ABC):
    """Port interface for notification delivery."""

    @abstractmethod
    async def emit(self, notification: Notification) -> None:
        """
        Write a notification for later delivery.

        Args:
            notification: Notification to write
        """
        pass

    async def close(self) -> None:
        """Release connections held by the emitter; a no-op unless overridden."""
        pass
