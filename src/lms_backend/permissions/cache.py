"""
Caching layer for permission resolution.
"""

import json
import logging
from typing import Optional, Set
from aiocache import BaseCache
from sqlalchemy.orm import Session

from lms_backend.permissions.core import DatabasePermissionResolver, PermissionResolver
from lms_backend.redis_cache import get_redis_client
from lms_backend.settings import settings

logger = logging.getLogger(__name__)


class CachedPermissionResolver(PermissionResolver):
    """
    Serves permission sets from an aiocache cache and falls back to the
    wrapped resolver on a miss. Cache failures never fail the request.
    """

    def __init__(self, resolver: PermissionResolver, cache: BaseCache, ttl_seconds: int = 10):
        self.resolver = resolver
        self.cache = cache
        self.ttl_seconds = ttl_seconds

    def _cache_key(self, user_id: int, organization_id: int) -> str:
        return f"permissions:{user_id}:{organization_id}"

    async def resolve(self, user_id: int, organization_id: int, db: Session) -> Set[str]:
        key = self._cache_key(user_id, organization_id)

        try:
            cached = await self.cache.get(key)
            if cached is not None:
                logger.debug(f"Permission cache hit for {key}")
                return set(json.loads(cached))
        except Exception as e:
            logger.warning(f"Permission cache retrieval error: {e}")

        permissions = await self.resolver.resolve(user_id, organization_id, db)

        try:
            await self.cache.set(key, json.dumps(sorted(permissions)), ttl=self.ttl_seconds)
        except Exception as e:
            logger.warning(f"Permission cache storage error: {e}")

        return permissions

    async def invalidate(self, user_id: int, organization_id: int):
        try:
            await self.cache.delete(self._cache_key(user_id, organization_id))
        except Exception as e:
            logger.warning(f"Failed to invalidate permission cache: {e}")


_resolver: Optional[PermissionResolver] = None


async def get_permission_resolver() -> PermissionResolver:
    """FastAPI dependency returning the configured resolver"""
    global _resolver

    if _resolver is None:
        if settings.PERMISSION_CACHE_TTL > 0:
            _resolver = CachedPermissionResolver(
                DatabasePermissionResolver(),
                await get_redis_client(),
                ttl_seconds=settings.PERMISSION_CACHE_TTL
            )
        else:
            _resolver = DatabasePermissionResolver()

    return _resolver
