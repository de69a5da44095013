#!/usr/bin/env python3
"""
Worker Engagement Scoring - Rating and recent activity.

Both carry small weights in the profile-centric scheme, so a perfect rating
adds about 3 points and activity within a day about 2.
"""

from datetime import datetime
from typing import Optional

from kindmatch.models import WorkerProfile
from kindmatch.utils import clamp_score, days_between

MAX_RATING = 5.0

# (max days since last activity, score)
RECENCY_TIERS = [
    (1, 100),
    (7, 50),
]


def score_rating(worker: WorkerProfile, cap: int = 100) -> int:
    if worker.rating is None:
        return 0
    return clamp_score((worker.rating / MAX_RATING) * cap)


def score_recency(worker: WorkerProfile, now: datetime) -> int:
    last_active: Optional[datetime] = worker.last_active_at
    if last_active is None:
        return 0

    days = days_between(last_active, now)
    for max_days, score in RECENCY_TIERS:
        if days <= max_days:
            return score
    return 0
