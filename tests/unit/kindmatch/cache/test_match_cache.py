#!/usr/bin/env python3
"""
Unit tests for MatchCacheService and CachedRanker with a mocked Redis.
"""

import json
import unittest
from datetime import timedelta
from unittest.mock import MagicMock, patch

from redis.exceptions import ConnectionError as RedisConnectionError

from kindmatch.cache import CACHE_TTL_SECONDS, CachedRanker, MatchCacheService, request_fingerprint
from kindmatch.exceptions import InvalidInputError
from kindmatch.models import MatchResult
from tests import FIXED_NOW, make_job, make_worker


def sample_result(job_id="job-a", score=90):
    return MatchResult(
        job_id=job_id,
        score=score,
        breakdown={"location": 100, "salary": 80},
        reasons=["Location matches your preferences"],
        contributions={"location": 20.0, "salary": 12.0},
        boosted=False,
        profile="profile",
    )


class TestMatchCacheService(unittest.TestCase):
    """Test MatchCacheService against a mocked Redis client."""

    @patch('kindmatch.cache.match_cache.Redis')
    def test_01_init_connects(self, mock_redis_class):
        print("\n🗄️ UNIT Test 1: Cache connects to Redis")
        mock_redis = MagicMock()
        mock_redis_class.from_url.return_value = mock_redis

        cache = MatchCacheService(redis_url="redis://:secret@cache:6379/0", password="secret")

        self.assertTrue(cache.is_available)
        mock_redis.ping.assert_called_once()
        _, kwargs = mock_redis_class.from_url.call_args
        self.assertTrue(kwargs["decode_responses"])
        print("  ✓ Connected")

    @patch('kindmatch.cache.match_cache.Redis')
    def test_02_init_failure_degrades(self, mock_redis_class):
        print("\n🗄️ UNIT Test 2: Unreachable Redis")
        mock_redis = MagicMock()
        mock_redis.ping.side_effect = RedisConnectionError("connection refused")
        mock_redis_class.from_url.return_value = mock_redis

        cache = MatchCacheService()

        self.assertFalse(cache.is_available)
        self.assertIsNone(cache.get_matches("match:any"))
        self.assertFalse(cache.set_matches("match:any", [sample_result()]))
        self.assertEqual(cache.invalidate_worker("worker-1"), 0)
        self.assertEqual(cache.get_cache_stats(), {"available": False})

    def test_03_make_key(self):
        cache = MatchCacheService(client=MagicMock())
        self.assertEqual(
            cache.make_key("worker-1", "profile", 20, 40, "abc123"),
            "match:worker-1:profile:20:40:abc123",
        )

    def test_04_get_hit(self):
        client = MagicMock()
        client.get.return_value = json.dumps({
            "results": [sample_result().to_dict()],
            "cached_at": FIXED_NOW.isoformat(),
            "ttl_seconds": CACHE_TTL_SECONDS,
        })
        cache = MatchCacheService(client=client)

        self.assertEqual(cache.get_matches("match:key"), [sample_result()])
        client.get.assert_called_once_with("match:key")

    def test_05_get_miss_and_errors(self):
        client = MagicMock()
        cache = MatchCacheService(client=client)

        client.get.return_value = None
        self.assertIsNone(cache.get_matches("match:key"))

        client.get.return_value = "{not json"
        with self.assertLogs("kindmatch.cache.match_cache", level="WARNING"):
            self.assertIsNone(cache.get_matches("match:key"))

        client.get.return_value = json.dumps({"cached_at": "x"})
        with self.assertLogs("kindmatch.cache.match_cache", level="WARNING"):
            self.assertIsNone(cache.get_matches("match:key"))

        client.get.side_effect = RedisConnectionError("gone")
        with self.assertLogs("kindmatch.cache.match_cache", level="WARNING"):
            self.assertIsNone(cache.get_matches("match:key"))

    def test_06_set_uses_ttl(self):
        print("\n🗄️ UNIT Test 6: Pages are written with a TTL")
        client = MagicMock()
        cache = MatchCacheService(client=client)

        self.assertTrue(cache.set_matches("match:key", [sample_result()]))

        key, ttl, payload = client.setex.call_args[0]
        self.assertEqual(key, "match:key")
        self.assertEqual(ttl, 300)
        entry = json.loads(payload)
        self.assertEqual(entry["ttl_seconds"], 300)
        self.assertEqual(entry["results"][0]["job_id"], "job-a")

        cache.set_matches("match:key", [], ttl_seconds=30)
        self.assertEqual(client.setex.call_args[0][1], 30)

    def test_07_set_failure_returns_false(self):
        client = MagicMock()
        client.setex.side_effect = RedisConnectionError("gone")
        cache = MatchCacheService(client=client)
        with self.assertLogs("kindmatch.cache.match_cache", level="WARNING"):
            self.assertFalse(cache.set_matches("match:key", [sample_result()]))

    def test_08_invalidate_worker(self):
        client = MagicMock()
        client.scan.side_effect = [
            (17, ["match:worker-1:profile:20:0:a", "match:worker-1:profile:20:20:a"]),
            (0, ["match:worker-1:preferences:20:0:b"]),
        ]
        cache = MatchCacheService(client=client)

        self.assertEqual(cache.invalidate_worker("worker-1"), 3)
        self.assertEqual(client.delete.call_count, 2)
        self.assertEqual(client.scan.call_args_list[0][1]["match"], "match:worker-1:*")

    def test_09_stats(self):
        client = MagicMock()
        client.scan.return_value = (0, ["match:a", "match:b"])
        cache = MatchCacheService(client=client, ttl_seconds=60)
        self.assertEqual(
            cache.get_cache_stats(),
            {"available": True, "match_cache_keys": 2, "ttl_seconds": 60},
        )


class TestRequestFingerprint(unittest.TestCase):

    def test_changes_with_inputs(self):
        worker = make_worker()
        jobs = [make_job("job-a"), make_job("job-b")]
        base = request_fingerprint(worker, jobs, {"job-x"})

        self.assertEqual(base, request_fingerprint(worker, list(reversed(jobs)), {"job-x"}))
        self.assertNotEqual(base, request_fingerprint(worker, jobs, set()))
        self.assertNotEqual(base, request_fingerprint(worker, jobs[:1], {"job-x"}))
        self.assertNotEqual(base, request_fingerprint(make_worker(rating=4), jobs, {"job-x"}))
        self.assertNotEqual(
            base, request_fingerprint(worker, [make_job("job-a", salary="900"), jobs[1]], {"job-x"})
        )


class TestCachedRanker(unittest.TestCase):

    def setUp(self):
        self.pipeline = MagicMock()
        self.pipeline.default_profile = "preferences"
        self.pipeline.validate_request.return_value = MagicMock()
        self.pipeline.validate_request.return_value.name = "preferences"
        self.pipeline.rank.return_value = [sample_result()]

        self.cache = MagicMock()
        self.cache.make_key.return_value = "match:worker-1:preferences:20:0:hash"
        self.ranker = CachedRanker(self.pipeline, self.cache)
        self.worker = make_worker()
        self.jobs = [make_job()]

    def test_01_miss_ranks_and_stores(self):
        self.cache.get_matches.return_value = None

        results = self.ranker.rank(self.worker, self.jobs)

        self.assertEqual(results, [sample_result()])
        self.pipeline.rank.assert_called_once()
        self.cache.set_matches.assert_called_once_with(
            "match:worker-1:preferences:20:0:hash", [sample_result()]
        )

    def test_02_hit_skips_pipeline(self):
        self.cache.get_matches.return_value = [sample_result(score=77)]

        results = self.ranker.rank(self.worker, self.jobs)

        self.assertEqual(results[0].score, 77)
        self.pipeline.rank.assert_not_called()
        self.cache.set_matches.assert_not_called()

    def test_03_explicit_now_bypasses_cache(self):
        self.ranker.rank(self.worker, self.jobs, now=FIXED_NOW + timedelta(hours=1))

        self.pipeline.rank.assert_called_once()
        self.cache.get_matches.assert_not_called()
        self.cache.set_matches.assert_not_called()

    def test_04_invalid_request_raises_before_cache(self):
        self.pipeline.validate_request.side_effect = InvalidInputError("limit must be >= 0")

        with self.assertRaises(InvalidInputError):
            self.ranker.rank(self.worker, self.jobs, limit=-1)
        self.cache.get_matches.assert_not_called()

    def test_05_invalidate(self):
        self.cache.invalidate_worker.return_value = 4
        self.assertEqual(self.ranker.invalidate("worker-1"), 4)


if __name__ == '__main__':
    unittest.main()
