import logging

import redis.asyncio as redis


class PresenceRegistry:
    """
    Tracks which users have a live real-time session.

    Connections are kept in a Redis set per user so every worker process sees the
    same presence. The set expires unless refreshed, so a worker that dies without
    unregistering cannot leave a user marked online forever.
    """

    def __init__(
        self,
        redis_client: redis.Redis,
        logger: logging.Logger,
        ttl_seconds: int = 90,
        key_prefix: str = "presence:user:",
    ) -> None:
        self._redis = redis_client
        self.logger = logger
        self._ttl = ttl_seconds
        self._prefix = key_prefix

    def _key(self, user_id: str) -> str:
        return f"{self._prefix}{user_id}"

    async def register(self, user_id: str, connection_id: str) -> None:
        key = self._key(user_id)
        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.sadd(key, connection_id)
            pipe.expire(key, self._ttl)
            await pipe.execute()
        self.logger.debug("Registered real-time session", extra={"user_id": user_id, "connection_id": connection_id})

    async def unregister(self, user_id: str, connection_id: str) -> None:
        await self._redis.srem(self._key(user_id), connection_id)
        self.logger.debug("Unregistered real-time session", extra={"user_id": user_id, "connection_id": connection_id})

    async def refresh(self, user_id: str) -> None:
        await self._redis.expire(self._key(user_id), self._ttl)

    async def is_online(self, user_id: str) -> bool:
        count: int = await self._redis.scard(self._key(user_id))
        return count > 0
