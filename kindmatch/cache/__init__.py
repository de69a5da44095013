"""Cache Module - Redis caching for ranked match pages."""
from kindmatch.cache.match_cache import (
    MatchCacheService, CachedRanker, request_fingerprint, CACHE_TTL_SECONDS
)

__all__ = ['MatchCacheService', 'CachedRanker', 'request_fingerprint', 'CACHE_TTL_SECONDS']
