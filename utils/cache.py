import logging
from typing import Optional

import redis

logger = logging.getLogger(__name__)


def connect_redis(url: str) -> Optional[redis.Redis]:
    """
    Build the process-wide Redis client. Returns None (caching disabled)
    when the server can't be reached at startup.
    """
    try:
        client = redis.Redis.from_url(url, socket_connect_timeout=5)
        # Test connection
        client.ping()
        logger.info(f"✓ Redis connected successfully at {url}")
        return client
    except redis.RedisError as e:
        logger.warning(f"⚠ Redis connection failed: {str(e)}. Caching will be disabled.")
        return None


class CacheManager:
    """Manager for Redis caching operations on raw bytes"""

    def __init__(self, client):
        self.client = client

    def is_available(self) -> bool:
        """Check if Redis is available"""
        return self.client is not None

    def get(self, key: str) -> Optional[bytes]:
        """
        Get value from cache

        Args:
            key: Cache key

        Returns:
            Cached bytes or None if not found/error
        """
        if not self.is_available():
            return None

        try:
            return self.client.get(key)
        except redis.RedisError as e:
            logger.error(f"Cache get error for key '{key}': {str(e)}")
            return None

    def set(self, key: str, value: bytes) -> bool:
        """
        Set value in cache. Entries have no TTL; they live until deleted.

        Returns:
            True if successful, False otherwise
        """
        if not self.is_available():
            return False

        try:
            self.client.set(key, value)
            logger.debug(f"Cached key '{key}' ({len(value)} bytes)")
            return True
        except redis.RedisError as e:
            logger.error(f"Cache set error for key '{key}': {str(e)}")
            return False

    def delete(self, key: str) -> bool:
        """
        Delete a key from cache

        Returns:
            True if successful, False otherwise
        """
        if not self.is_available():
            return False

        try:
            self.client.delete(key)
            logger.debug(f"Deleted cache key '{key}'")
            return True
        except redis.RedisError as e:
            logger.error(f"Cache delete error for key '{key}': {str(e)}")
            return False


def build_profile_pic_cache_key(username: str) -> str:
    """Profile pictures are cached under the bare username"""
    return username
