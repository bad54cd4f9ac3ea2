from wms.infrastructure.cache.redis_cache import (CacheService,
                                                  get_cache_service,
                                                  set_cache_service)

__all__ = ["CacheService", "get_cache_service", "set_cache_service"]
