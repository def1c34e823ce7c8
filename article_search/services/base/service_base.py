"""
Base service class for search services.
Provides common functionality for caching and error reporting.
"""

import logging
from typing import Any, Optional
from abc import ABC, abstractmethod
from fastapi import BackgroundTasks

from ...utils.cache import CacheManager

logger = logging.getLogger(__name__)


class BaseService(ABC):
    """
    Base class for services that sit in front of the search engine.
    Provides optional result caching and uniform error logging.
    """

    def __init__(self, cache_manager: Optional[CacheManager] = None):
        """
        Initialize the base service.

        Args:
            cache_manager: Optional cache manager; caching is skipped when None
        """
        self.cache = cache_manager
        self.logger = logger

    @abstractmethod
    def get_service_name(self) -> str:
        """
        Get the service name for logging and caching.

        Returns:
            str: The service name
        """
        pass

    async def _cache_get(self, cache_key: str) -> Optional[Any]:
        """
        Get data from cache with error handling.

        Args:
            cache_key: The cache key to retrieve

        Returns:
            Optional[Any]: Cached data or None if not found
        """
        if self.cache is None:
            return None
        try:
            cached_data = await self.cache.get(cache_key)
            if cached_data is not None:
                self.logger.info(f"[{self.get_service_name()}] Cache hit for key: {cache_key}")
            return cached_data
        except Exception as e:
            self.logger.error(f"[{self.get_service_name()}] Cache get error for key {cache_key}: {str(e)}")
            return None

    async def _cache_set(self, cache_key: str, data: Any, expire: int,
                         background_tasks: Optional[BackgroundTasks] = None):
        """
        Set data in cache with error handling.

        Args:
            cache_key: The cache key
            data: The data to cache
            expire: Expiration time in seconds
            background_tasks: Optional background tasks for deferred caching
        """
        if self.cache is None:
            return
        try:
            if background_tasks:
                await self.cache.set_background(background_tasks, cache_key, data, expire)
            else:
                await self.cache.set(cache_key, data, expire)
            self.logger.info(f"[{self.get_service_name()}] Data cached with key: {cache_key}")
        except Exception as e:
            self.logger.error(f"[{self.get_service_name()}] Cache set error for key {cache_key}: {str(e)}")

    def _generate_cache_key(self, *args) -> str:
        """
        Generate a cache key from arguments.

        Returns:
            str: Colon-joined key starting with the service name
        """
        key_parts = [self.get_service_name()] + [str(arg) for arg in args]
        return ":".join(key_parts)

    def _handle_service_error(self, error: Exception, context: str = ""):
        """
        Log a service error and re-raise it unchanged.

        Args:
            error: The exception that occurred
            context: Context information about the error
        """
        error_msg = f"[{self.get_service_name()}] {context}: {str(error)}"
        self.logger.error(error_msg)

        raise error
