#!/usr/bin/env python3
"""
Unit tests for posting priority, worker rating and recency.
"""

from datetime import timedelta

import pytest

from kindmatch.scorer.engagement import score_rating, score_recency
from kindmatch.scorer.priority import score_priority
from tests import FIXED_NOW, make_job, make_worker


class TestPriority:

    def test_base_with_small_freshness_bonus(self):
        # 8 days old (+5), average pay 400 (no bonus), no expiry
        assert score_priority(make_job(), FIXED_NOW) == 55

    def test_composite_bonuses(self):
        job = make_job(
            created_at=FIXED_NOW - timedelta(days=2),   # +15
            salary="1500",                             # +10
            expires_at=FIXED_NOW + timedelta(days=5),  # +10
        )
        assert score_priority(job, FIXED_NOW) == 85

    def test_capped_at_100(self):
        job = make_job(
            is_boosted=True,
            boost_expires_at=FIXED_NOW + timedelta(days=3),
            created_at=FIXED_NOW - timedelta(hours=12),
            salary="800-1200",
            expires_at=FIXED_NOW + timedelta(days=2),
        )
        assert score_priority(job, FIXED_NOW) == 100

    def test_expired_boost_earns_nothing(self):
        active = make_job(is_boosted=True, boost_expires_at=FIXED_NOW + timedelta(hours=1))
        expired = make_job(is_boosted=True, boost_expires_at=FIXED_NOW)

        assert score_priority(active, FIXED_NOW) == 85
        assert score_priority(expired, FIXED_NOW) == 55

    @pytest.mark.parametrize("age_days,expected", [(0.5, 70), (1, 65), (5, 60), (13, 55), (14, 50), (60, 50)])
    def test_freshness_tiers(self, age_days, expected):
        job = make_job(created_at=FIXED_NOW - timedelta(days=age_days), salary=None)
        assert score_priority(job, FIXED_NOW) == expected


class TestRating:

    @pytest.mark.parametrize("rating,expected", [(None, 0), (0, 0), (2.3, 46), (4.5, 90), (5, 100)])
    def test_rating(self, rating, expected):
        assert score_rating(make_worker(rating=rating)) == expected

    def test_rating_cap(self):
        assert score_rating(make_worker(rating=5), cap=3) == 3


class TestRecency:

    @pytest.mark.parametrize("hours_ago,expected", [(12, 100), (24, 100), (72, 50), (24 * 7, 50), (24 * 8, 0)])
    def test_recency_tiers(self, hours_ago, expected):
        worker = make_worker(last_active_at=FIXED_NOW - timedelta(hours=hours_ago))
        assert score_recency(worker, FIXED_NOW) == expected

    def test_never_active(self):
        assert score_recency(make_worker(last_active_at=None), FIXED_NOW) == 0
