"""Notification emitter adapters."""

from leadflow.adapters.outbound.notification.notification_emitter import (
    InMemoryNotificationEmitter,
    NoOpNotificationEmitter,
)
from leadflow.adapters.outbound.notification.postgres_notification_emitter import (
    PostgresNotificationEmitter,
)
from leadflow.adapters.outbound.notification.redis_notification_emitter import (
    RedisNotificationEmitter,
)

__all__ = [
    "InMemoryNotificationEmitter",
    "NoOpNotificationEmitter",
    "PostgresNotificationEmitter",
    "RedisNotificationEmitter",
]
