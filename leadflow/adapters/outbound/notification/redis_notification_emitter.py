"""Redis notification emitter adapter."""

import json
from typing import Optional

from redis import asyncio as aioredis

from leadflow.application.dtos.notification import Notification
from leadflow.application.ports.notification_emitter import NotificationEmitter


class RedisNotificationEmitter(NotificationEmitter):
    """Pushes notifications onto per-user and per-role Redis lists."""

    USER_KEY_PREFIX = "notifications:user:"
    ROLE_KEY_PREFIX = "notifications:role:"

    def __init__(self, redis_url: str, ttl_seconds: int, max_entries: int = 500) -> None:
        """
        Initialize Redis notification emitter.

        Args:
            redis_url: Redis connection URL
            ttl_seconds: Time-to-live in seconds for each inbox
            max_entries: Most recent notifications kept per inbox
        """
        self._redis_url = redis_url
        self._ttl_seconds = ttl_seconds
        self._max_entries = max_entries
        self._client: Optional[aioredis.Redis] = None

    def _get_client(self) -> aioredis.Redis:
        """
        Get or create Redis client.

        Returns:
            Redis client instance
        """
        if self._client is None:
            self._client = aioredis.from_url(
                self._redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
        return self._client

    def _make_keys(self, notification: Notification) -> list[str]:
        """
        Make the inbox keys a notification is delivered to.

        Args:
            notification: Notification to deliver

        Returns:
            Redis key strings
        """
        keys = []
        if notification.user_id is not None:
            keys.append(f"{self.USER_KEY_PREFIX}{notification.user_id}")
        if notification.recipient_role is not None:
            keys.append(f"{self.ROLE_KEY_PREFIX}{notification.recipient_role.value}")
        return keys

    async def emit(self, notification: Notification) -> None:
        """
        Push a notification onto its inboxes, cap their length and refresh their TTL.

        Args:
            notification: Notification to write
        """
        client = self._get_client()
        payload = json.dumps(notification.model_dump(mode="json"))
        for key in self._make_keys(notification):
            await client.lpush(key, payload)
            await client.ltrim(key, 0, self._max_entries - 1)
            await client.expire(key, self._ttl_seconds)

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None
