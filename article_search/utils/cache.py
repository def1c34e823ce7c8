from typing import Any, Dict, Optional
import hashlib
import json
import logging
from fastapi import BackgroundTasks

logger = logging.getLogger(__name__)

# Default cache lifetime in seconds
MINUTE = 60


def hash_params(params: Dict[str, Any]) -> str:
    """Stable digest of request parameters for use in cache keys"""
    serialized = json.dumps(params, sort_keys=True, ensure_ascii=False, default=str)
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()


class CacheManager:
    def __init__(self, redis_client, prefix: str = "cache"):
        self.redis = redis_client
        self.prefix = prefix

    def _get_key(self, key: str) -> str:
        """Generate prefixed cache key"""
        return f"{self.prefix}:{key}"

    async def get(self, key: str) -> Optional[Any]:
        """Get data from cache"""
        try:
            data = await self.redis.get(self._get_key(key))
            return json.loads(data) if data else None
        except Exception as e:
            logger.error(f"Cache get error: {e}")
            return None

    async def set(
        self,
        key: str,
        data: Any,
        expire: int = MINUTE,
    ) -> bool:
        """Set data in cache with expiration"""
        try:
            serialized_data = json.dumps(data, ensure_ascii=False)
            await self.redis.set(
                self._get_key(key),
                serialized_data,
                ex=expire
            )
            return True
        except Exception as e:
            logger.error(f"Cache set error: {e}")
            return False

    async def delete(self, key: str) -> bool:
        """Delete a specific key from cache

        Args:
            key: The key to delete

        Returns:
            bool: True if key was deleted, False otherwise
        """
        try:
            result = await self.redis.delete(self._get_key(key))
            return result > 0
        except Exception as e:
            logger.error(f"Cache delete error: {e}")
            return False

    async def set_background(
        self,
        background_tasks: BackgroundTasks,
        key: str,
        data: Any,
        expire: int = MINUTE,
    ):
        """Set cache in background task"""
        background_tasks.add_task(self.set, key, data, expire)

    async def clear_pattern(self, pattern: str) -> int:
        """Clear all cache entries matching a pattern

        Args:
            pattern: Pattern to match (e.g., "search:*")

        Returns:
            int: Number of keys deleted
        """
        try:
            keys = await self.redis.keys(self._get_key(pattern))
            if keys:
                return await self.redis.delete(*keys)
            return 0
        except Exception as e:
            logger.error(f"Cache clear_pattern error: {e}")
            return 0

    async def health_check(self) -> bool:
        """Ping the backing Redis instance"""
        try:
            return bool(await self.redis.ping())
        except Exception as e:
            logger.error(f"Cache health check error: {e}")
            return False
