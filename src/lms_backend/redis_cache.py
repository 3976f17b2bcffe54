from aiocache import Cache
from lms_backend.settings import settings

def _create_cache() -> Cache:

    if settings.REDIS_HOST:
        return Cache(
            Cache.REDIS,
            endpoint=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            password=settings.REDIS_PASSWORD if settings.REDIS_PASSWORD else None,
            pool_max_size=10,
            db=0
        )

    return Cache(Cache.MEMORY)

_cache = _create_cache()

async def get_redis_client() -> Cache:
    return _cache
