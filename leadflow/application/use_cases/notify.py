"""Best-effort notification delivery shared by the use cases."""

import logging

from leadflow.application.dtos.notification import Notification
from leadflow.application.ports.notification_emitter import NotificationEmitter
from leadflow.infrastructure.logging.logger import log_event


async def notify_best_effort(emitter: NotificationEmitter, notification: Notification) -> None:
    """
    Emit a notification without letting a delivery failure escape.

    The triggering mutation is already committed when this runs, so a failure
    here is logged at ERROR and the caller carries on.

    Args:
        emitter: Notification emitter
        notification: Notification to emit
    """
    try:
        await emitter.emit(notification)
    except Exception as err:  # noqa: BLE001
        log_event(
            component="notifications",
            event="emit_failed",
            level=logging.ERROR,
            type=notification.type.value,
            user_id=notification.user_id,
            recipient_role=notification.recipient_role.value if notification.recipient_role else None,
            lead_id=notification.lead_id,
            client_id=notification.client_id,
            error=str(err),
        )
