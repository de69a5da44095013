"""Match Cache Service - Redis caching for ranked match pages."""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Collection, Dict, Iterable, List, Optional
from urllib.parse import urlparse

from redis import Redis
from redis.exceptions import RedisError

from kindmatch.models import JobPosting, MatchResult, WorkerProfile
from kindmatch.ranking import RankingPipeline
from kindmatch.utils import fingerprint

logger = logging.getLogger(__name__)

# 5 minutes in seconds
CACHE_TTL_SECONDS = 5 * 60

KEY_PREFIX = "match"


def _sanitize_url(url: str) -> str:
    """Remove credentials from URL for safe logging."""
    parsed = urlparse(url)
    if parsed.password:
        sanitized = parsed._replace(
            netloc=f"{parsed.username or ''}:*@{parsed.hostname}:{parsed.port or 6379}"
        )
        return sanitized.geturl()
    return url


def request_fingerprint(
    worker: WorkerProfile,
    candidates: Iterable[JobPosting],
    exclusion: Optional[Collection[str]] = None,
) -> str:
    """
    Hash of everything a ranking depends on besides paging and profile.

    Any change to the worker, to a candidate posting or to the exclusion set
    produces a different fingerprint, so stale pages are never served.
    """
    parts: List[str] = [f"worker:{worker.model_dump_json()}"]
    parts.extend(f"job:{job.model_dump_json()}" for job in candidates)
    parts.extend(f"excluded:{job_id}" for job_id in (exclusion or ()))
    return fingerprint(parts)


class MatchCacheService:
    """
    Service for caching ranked match pages.

    Uses Redis with a 5-minute TTL. Pages are keyed by worker, profile,
    limit, offset and the request fingerprint. Redis failures are logged and
    behave like cache misses.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        password: Optional[str] = None,
        ttl_seconds: int = CACHE_TTL_SECONDS,
        client: Optional[Redis] = None,
    ):
        self.redis_url = redis_url
        self.ttl_seconds = ttl_seconds
        self._redis: Optional[Redis] = client
        self._available = client is not None

        if client is None:
            try:
                self._redis = Redis.from_url(
                    redis_url,
                    password=password,
                    decode_responses=True,
                    socket_connect_timeout=5,
                    socket_timeout=5
                )
                self._redis.ping()
                self._available = True
                logger.info(f"Match cache connected to Redis at {_sanitize_url(redis_url)}")
            except RedisError as e:
                logger.warning(f"Match cache Redis unavailable: {e}")
                self._redis = None
                self._available = False

    @classmethod
    def from_config(cls, config) -> "MatchCacheService":
        """Build from a CacheConfig."""
        return cls(
            redis_url=config.redis_url,
            password=config.password,
            ttl_seconds=config.ttl_seconds,
        )

    @property
    def is_available(self) -> bool:
        return self._available and self._redis is not None

    def make_key(
        self,
        worker_id: str,
        profile_name: str,
        limit: int,
        offset: int,
        request_hash: str,
    ) -> str:
        return f"{KEY_PREFIX}:{worker_id}:{profile_name}:{limit}:{offset}:{request_hash}"

    def get_matches(self, key: str) -> Optional[List[MatchResult]]:
        """Get a cached page of matches, or None on miss."""
        if not self.is_available:
            return None

        try:
            data = self._redis.get(key)
        except RedisError as e:
            logger.warning(f"Error reading from match cache: {e}")
            return None

        if not data:
            logger.debug(f"Cache miss for {key[:64]}...")
            return None

        try:
            cache_entry = json.loads(data)
            results = [MatchResult.from_dict(item) for item in cache_entry["results"]]
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Discarding malformed match cache entry {key[:64]}...: {e}")
            return None

        logger.debug(f"Cache hit for {key[:64]}...")
        return results

    def set_matches(
        self,
        key: str,
        results: List[MatchResult],
        ttl_seconds: Optional[int] = None
    ) -> bool:
        """Cache a page of matches with TTL."""
        if not self.is_available:
            return False

        ttl = ttl_seconds or self.ttl_seconds
        cache_entry = {
            "results": [r.to_dict() for r in results],
            "cached_at": datetime.now(timezone.utc).isoformat(),
            "ttl_seconds": ttl
        }

        try:
            self._redis.setex(key, ttl, json.dumps(cache_entry))
        except RedisError as e:
            logger.warning(f"Error writing to match cache: {e}")
            return False

        logger.debug(f"Cached {len(results)} matches under {key[:64]}... (TTL: {ttl}s)")
        return True

    def invalidate_worker(self, worker_id: str) -> int:
        """Drop every cached page for a worker (e.g. after a swipe or a preference change)."""
        if not self.is_available:
            return 0

        pattern = f"{KEY_PREFIX}:{worker_id}:*"
        cursor = 0
        deleted = 0
        try:
            while True:
                cursor, keys = self._redis.scan(cursor=cursor, match=pattern, count=100)
                if keys:
                    self._redis.delete(*keys)
                    deleted += len(keys)
                if cursor == 0:
                    break
        except RedisError as e:
            logger.warning(f"Error invalidating match cache for worker {worker_id}: {e}")
            return deleted

        logger.info(f"Invalidated {deleted} cached match pages for worker {worker_id}")
        return deleted

    def get_cache_stats(self) -> Dict[str, Any]:
        if not self.is_available:
            return {"available": False}

        key_count = 0
        cursor = 0
        try:
            while True:
                cursor, keys = self._redis.scan(cursor=cursor, match=f"{KEY_PREFIX}:*", count=1000)
                key_count += len(keys)
                if cursor == 0:
                    break
        except RedisError as e:
            logger.warning(f"Error getting cache stats: {e}")
            return {"available": False, "error": str(e)}

        return {
            "available": True,
            "match_cache_keys": key_count,
            "ttl_seconds": self.ttl_seconds,
        }


class CachedRanker:
    """
    RankingPipeline front that serves repeated requests from the match cache.

    Requests with an explicit `now` always bypass the cache, since their
    time-dependent scores must be reproducible.
    """

    def __init__(self, pipeline: RankingPipeline, cache: MatchCacheService):
        self.pipeline = pipeline
        self.cache = cache

    def rank(
        self,
        worker: Optional[WorkerProfile],
        candidates: Iterable[JobPosting],
        exclusion: Optional[Collection[str]] = None,
        profile_name: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
        now: Optional[datetime] = None,
    ) -> List[MatchResult]:
        profile = self.pipeline.validate_request(
            worker, profile_name or self.pipeline.default_profile, limit, offset
        )
        candidates = list(candidates or [])

        if now is not None or limit == 0:
            return self.pipeline.rank(worker, candidates, exclusion, profile.name, limit, offset, now)

        key = self.cache.make_key(
            worker.id, profile.name, limit, offset,
            request_fingerprint(worker, candidates, exclusion),
        )
        cached = self.cache.get_matches(key)
        if cached is not None:
            return cached

        results = self.pipeline.rank(worker, candidates, exclusion, profile.name, limit, offset)
        self.cache.set_matches(key, results)
        return results

    def invalidate(self, worker_id: str) -> int:
        return self.cache.invalidate_worker(worker_id)
